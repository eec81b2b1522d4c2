"""
Tests for scenario parsing, the scenario runner and the command line.
"""

import logging
from pathlib import Path

import pytest

from algotrace.assertions import ScenarioState, check_assertions
from algotrace.errors import ValidationError
from algotrace.runner import main, run_scenario
from algotrace.sessions import create_session
from algotrace.traces import ScenarioAssertion, load_scenario, parse_scenario


SCENARIO_DIR = Path(__file__).resolve().parents[2] / "scenarios"


# =============================================================================
# Parser Tests
# =============================================================================

class TestScenarioParser:
    def test_short_and_long_forms(self):
        scenario = parse_scenario("""
name: forms
mode: BST
commands:
  - insert: 5
  - command: delete
    params: {value: 5}
    play: true
  - reset
assertions:
  - type: inorder
    expected: []
""")
        assert scenario.mode == "bst"
        short, long, bare = scenario.commands
        assert (short.command, short.args, short.play) == ("insert", [5], False)
        assert (long.command, long.params, long.play) == ("delete", {"value": 5}, True)
        assert (bare.command, bare.args) == ("reset", [])
        assert scenario.assertions[0].params == {"expected": []}
        assert scenario.assertions[0].description == "inorder"

    @pytest.mark.parametrize("content", [
        "name: x\ncommands: []",
        "name: x\nmode: trie\ncommands: []",
        "name: x\nmode: bst\ncommands: [{insert: 1, delete: 2}]",
        "name: x\nmode: bst\ncommands: []\nassertions: [{expected: 1}]",
        "[1, 2]",
    ])
    def test_invalid(self, content):
        with pytest.raises(ValidationError):
            parse_scenario(content)


# =============================================================================
# Runner Tests
# =============================================================================

@pytest.mark.parametrize("path", sorted(SCENARIO_DIR.glob("*.yaml")), ids=lambda p: p.stem)
def test_bundled_scenarios_pass(path):
    result = run_scenario(load_scenario(str(path)))
    assert result.completed, result.error
    assert result.all_passed, "\n".join(str(r) for r in result.assertion_results)


class TestScenarioRunner:
    def test_play_reaches_end_on_virtual_time(self):
        scenario = parse_scenario("""
name: play
mode: heap
commands:
  - insert: 4
  - insert: 1
    play: true
""")
        runner_result = run_scenario(scenario)
        assert runner_result.completed
        assert len(runner_result.traces) == 2
        # insert, sift-up, swap, complete at 0.2s per step
        assert runner_result.virtual_time == pytest.approx(0.8)

    def test_replay_commands_reach_controller(self):
        scenario = parse_scenario("""
name: replay
mode: bst
commands:
  - insert: 50
  - insert: 30
  - step_forward
  - step_forward
  - step_backward
  - command: seek
    params: {cursor: 3}
assertions:
  - type: event_logged
    text: "Inserted 30"
""")
        result = run_scenario(scenario)
        assert result.all_passed

    def test_unknown_command(self):
        scenario = parse_scenario("name: bad\nmode: bst\ncommands: [fly]")
        result = run_scenario(scenario)
        assert not result.completed
        assert "Unknown command" in result.error
        assert "Error: Unknown command" in str(result)

    def test_unknown_assertion_fails(self):
        scenario = parse_scenario("""
name: unknown
mode: bst
commands: [{insert: 1}]
assertions: [{type: sparkles}]
""")
        result = run_scenario(scenario)
        assert result.completed
        assert not result.all_passed
        assert "Unknown assertion type" in result.assertion_results[0].message

    def test_failing_assertion_message(self):
        scenario = parse_scenario("""
name: wrong
mode: avl
commands: [{insert_batch: "1, 2, 3"}]
assertions: [{type: root_keys, expected: 1}]
""")
        result = run_scenario(scenario)
        assert str(result.assertion_results[0]) == (
            "[FAIL] root_keys: Expected root keys [1], got [2]"
        )

    def test_assertion_without_trace(self):
        scenario = parse_scenario("""
name: no-trace
mode: graph
commands: [add_node]
assertions: [{type: final_step_kind}]
""")
        result = run_scenario(scenario)
        assert not result.all_passed
        assert "No trace was produced" in result.assertion_results[0].message


# =============================================================================
# Command Line Tests
# =============================================================================

class TestMain:
    def test_passing_scenario(self, capsys):
        assert main([str(SCENARIO_DIR / "avl_rotations.yaml")]) == 0
        assert "PASSED" in capsys.readouterr().out

    def test_failing_scenario(self, tmp_path):
        path = tmp_path / "fail.yaml"
        path.write_text("name: f\nmode: heap\ncommands: [{insert: 1}]\n"
                        "assertions: [{type: heap_array, expected: [2]}]\n")
        assert main([str(path)]) == 1

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.yaml")]) == 2
        assert "Error" in capsys.readouterr().err

    def test_config_file(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("heap_kind: max\n")
        scenario = tmp_path / "max.yaml"
        scenario.write_text("name: m\nmode: heap\ncommands: [{insert: 1}, {insert: 2}]\n"
                            "assertions: [{type: heap_array, expected: [2, 1]}]\n")
        assert main([str(scenario), "--config", str(config)]) == 0

    def test_verbose_logs_at_debug(self):
        package_logger = logging.getLogger("algotrace")
        previous = package_logger.level
        try:
            assert main([str(SCENARIO_DIR / "max_heap.yaml"), "--verbose"]) == 0
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)


# =============================================================================
# Assertion Check Tests
# =============================================================================

class TestAssertionChecks:
    def make_state(self):
        session = create_session("bst")
        traces = [session.insert(value) for value in (50, 30, 70)]
        return ScenarioState(session, traces)

    def test_state_reads_committed_structure(self):
        state = self.make_state()
        assert state.committed.inorder() == [30, 50, 70]
        assert state.trace is state.traces[-1]
        assert state.events[-1] == "Inserted 70 as right child of 50"
        assert state.violations() == []

    def test_state_falls_back_to_last_recorded_trace(self):
        state = self.make_state()
        state.session.controller.clear()
        assert state.trace is state.traces[-1]
        assert ScenarioState(create_session("graph")).trace is None

    def test_report(self):
        state = self.make_state()
        report = check_assertions([
            ScenarioAssertion("inorder", "sorted", {"expected": [30, 50, 70]}),
            ScenarioAssertion("code_length", "no codes here", {}),
        ], state)
        assert not report.passed
        assert [r.assertion_type for r in report.failures] == ["code_length"]
        assert report.failures[0].message.startswith("Error evaluating assertion")
        assert str(report).splitlines()[-1] == "1 passed, 1 failed"

    def test_empty_report_passes(self):
        assert check_assertions([], self.make_state()).passed
