"""
YAML scenario parser.
"""

from typing import Any, Dict, List

import yaml

from .schema import (
    Scenario, ScenarioCommand, ScenarioAssertion,
    ValidationError,
)
from ..config import MODES


def parse_scenario(yaml_content: str) -> Scenario:
    """Parse a scenario from YAML content."""
    data = yaml.safe_load(yaml_content)
    if not isinstance(data, dict):
        raise ValidationError("Scenario must be a mapping")
    return _parse_scenario_dict(data)


def load_scenario(file_path: str) -> Scenario:
    """Load a scenario from a YAML file."""
    with open(file_path, 'r') as f:
        return parse_scenario(f.read())


def _parse_scenario_dict(data: Dict[str, Any]) -> Scenario:
    """Parse a scenario from a dictionary."""
    required = ["name", "mode", "commands"]
    for field in required:
        if field not in data:
            raise ValidationError(f"Missing required field: {field}")

    mode = str(data["mode"]).lower()
    if mode not in MODES:
        raise ValidationError(f"Invalid mode: {data['mode']}. Valid modes: {list(MODES)}")

    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise ValidationError("options must be a mapping")

    return Scenario(
        name=data["name"],
        description=data.get("description", ""),
        mode=mode,
        commands=_parse_commands(data["commands"] or []),
        assertions=_parse_assertions(data.get("assertions") or []),
        options=options,
    )


def _parse_commands(data: List[Any]) -> List[ScenarioCommand]:
    """
    Parse the command list.

    Accepts the long form `{command: insert, params: {value: 5}, play: true}`
    and the short form `{insert: 5}`, whose value becomes the single
    positional argument.
    """
    commands = []
    for command_data in data:
        if isinstance(command_data, str):
            commands.append(ScenarioCommand(command=command_data))
            continue
        if not isinstance(command_data, dict):
            raise ValidationError(f"Invalid command entry: {command_data!r}")

        if "command" in command_data:
            params = command_data.get("params") or {}
            if not isinstance(params, dict):
                raise ValidationError(f"params must be a mapping: {command_data!r}")
            commands.append(ScenarioCommand(
                command=command_data["command"],
                params=params,
                play=bool(command_data.get("play", False)),
            ))
            continue

        play = bool(command_data.get("play", False))
        names = [k for k in command_data if k != "play"]
        if len(names) != 1:
            raise ValidationError(f"Ambiguous command entry: {command_data!r}")
        name = names[0]
        commands.append(ScenarioCommand(
            command=name,
            args=[] if command_data[name] is None else [command_data[name]],
            play=play,
        ))

    return commands


def _parse_assertions(data: List[Dict[str, Any]]) -> List[ScenarioAssertion]:
    """Parse assertion list."""
    assertions = []
    for assert_data in data:
        if "type" not in assert_data:
            raise ValidationError(f"Assertion missing type: {assert_data!r}")
        assertion = ScenarioAssertion(
            type=assert_data["type"],
            description=assert_data.get("description", assert_data["type"]),
            params={k: v for k, v in assert_data.items() if k not in ["type", "description"]},
        )
        assertions.append(assertion)

    return assertions
