"""
Scenario Runner

Runs a YAML scenario against a session. This is the integration point that
ties together:
- Scenario parsing
- Session creation
- Command execution and replay
- Assertion evaluation

Usage:
    python -m algotrace.runner scenario.yaml [--config config.yaml]
"""

import argparse
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .assertions import AssertionReport, AssertionResult, ScenarioState, check_assertions
from .config import AlgotraceConfig, load_config
from .errors import AlgotraceError
from .logger import init_logger, set_logging_level
from .replay import VirtualScheduler
from .sessions import Session, create_session
from .traces import Scenario, ScenarioCommand, Trace, load_scenario


logger = init_logger(__name__)

REPLAY_COMMANDS = ("step_forward", "step_backward", "run", "pause", "reset", "set_speed", "seek")


@dataclass
class ScenarioRunResult:
    """Result of running a scenario."""
    scenario_name: str
    completed: bool
    report: AssertionReport
    commands_run: int
    traces: List[Trace] = field(default_factory=list)
    events: List[str] = field(default_factory=list)
    virtual_time: float = 0.0
    error: Optional[str] = None

    @property
    def assertion_results(self) -> List[AssertionResult]:
        return self.report.results

    @property
    def all_passed(self) -> bool:
        return self.completed and self.report.passed

    def __str__(self) -> str:
        status = "PASSED" if self.all_passed else "FAILED"
        lines = [
            f"Scenario '{self.scenario_name}': {status}",
            f"  Commands: {self.commands_run}, Traces: {len(self.traces)}, "
            f"Steps: {sum(len(t) for t in self.traces)}",
            f"  Virtual time: {self.virtual_time:.2f}s",
            f"  Assertions: {sum(1 for a in self.assertion_results if a.passed)}"
            f"/{len(self.assertion_results)} passed",
        ]
        if self.error:
            lines.append(f"  Error: {self.error}")
        return "\n".join(lines)


class ScenarioRunner:
    """
    Runs a scenario's commands through a fresh session.

    Autoplay uses a VirtualScheduler, so `play: true` commands step through
    their trace at the configured speed without real waiting.
    """

    def __init__(self, scenario: Scenario, config: Optional[AlgotraceConfig] = None):
        self.scenario = scenario
        self.config = self._apply_options(config or AlgotraceConfig(), scenario.options)
        self.scheduler = VirtualScheduler()
        self.session: Session = create_session(scenario.mode, self.config, self.scheduler)
        self.traces: List[Trace] = []
        self.commands_run = 0

    @staticmethod
    def _apply_options(config: AlgotraceConfig, options: Dict[str, Any]) -> AlgotraceConfig:
        if "heap_kind" in options:
            config = replace(config, heap_kind=options["heap_kind"])
        return config

    def run(self) -> ScenarioRunResult:
        try:
            if self.scenario.options.get("directed") and hasattr(self.session, "set_directed"):
                self.session.set_directed(True)

            for command in self.scenario.commands:
                self._execute_command(command)
                self.commands_run += 1

            report = check_assertions(self.scenario.assertions, ScenarioState(self.session, self.traces))

            return ScenarioRunResult(
                scenario_name=self.scenario.name,
                completed=True,
                report=report,
                commands_run=self.commands_run,
                traces=self.traces,
                events=list(self.session.events),
                virtual_time=self.scheduler.now,
            )

        except Exception as e:
            logger.exception(f"Scenario '{self.scenario.name}' failed")
            return ScenarioRunResult(
                scenario_name=self.scenario.name,
                completed=False,
                report=AssertionReport(),
                commands_run=self.commands_run,
                traces=self.traces,
                events=list(self.session.events),
                virtual_time=self.scheduler.now,
                error=str(e),
            )

    def _execute_command(self, command: ScenarioCommand):
        """Dispatch a command to the session, or to its controller for replay commands."""
        name = command.command
        if name in REPLAY_COMMANDS:
            target = self.session.controller
        elif not name.startswith("_") and hasattr(self.session, name):
            target = self.session
        else:
            raise AlgotraceError(f"Unknown command for {self.scenario.mode}: {name}")

        method = getattr(target, name)
        if not callable(method):
            raise AlgotraceError(f"Not a command: {name}")
        result = method(*command.args, **command.params)
        logger.debug(f"Command {name} -> {type(result).__name__}")

        if isinstance(result, Trace):
            self.traces.append(result)
        if command.play:
            self._play()

    def _play(self):
        """Autoplay the loaded trace to its end on virtual time."""
        controller = self.session.controller
        controller.run()
        self.scheduler.run_until_idle()


def run_scenario(scenario: Scenario, config: Optional[AlgotraceConfig] = None) -> ScenarioRunResult:
    """
    Convenience function to run a scenario.

    Args:
        scenario: The scenario to run
        config: Optional configuration, defaults otherwise

    Returns:
        ScenarioRunResult
    """
    return ScenarioRunner(scenario, config).run()


def main(argv: Optional[List[str]] = None) -> int:
    """Run scenario files and print their results."""
    parser = argparse.ArgumentParser(description="Run algotrace scenarios")
    parser.add_argument("scenarios", nargs="+", help="Scenario YAML files")
    parser.add_argument("--config", help="Configuration YAML file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    if args.verbose:
        set_logging_level("DEBUG")

    try:
        config = load_config(args.config) if args.config else None
        scenarios = [load_scenario(path) for path in args.scenarios]
    except (OSError, AlgotraceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    all_passed = True
    for scenario in scenarios:
        result = run_scenario(scenario, config)
        print(result)
        if result.report.results:
            print(result.report)
        print()
        all_passed = all_passed and result.all_passed
    return 0 if all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
