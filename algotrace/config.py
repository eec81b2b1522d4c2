"""
Configuration records and YAML loading.

Each visualizer mode has an explicit set of overlay toggles; replay speed
limits and the heap ordering are configured alongside them.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict

import yaml

from .errors import ValidationError


MODES = ("bst", "avl", "2-3", "2-3-4", "heap", "huffman", "graph")


@dataclass(frozen=True)
class OverlayConfig:
    """Display overlays a renderer may draw next to tree nodes."""
    show_height: bool = False
    show_depth: bool = False
    show_balance_factor: bool = False
    highlight_unbalanced: bool = False


@dataclass(frozen=True)
class ReplayConfig:
    """Replay speed limits. Delay per tick is base_delay / speed seconds."""
    default_speed: int = 5
    min_speed: int = 1
    max_speed: int = 10
    base_delay: float = 1.0


DEFAULT_OVERLAYS: Dict[str, OverlayConfig] = {
    "bst": OverlayConfig(
        show_height=True,
        show_depth=True,
        show_balance_factor=True,
        highlight_unbalanced=True,
    ),
    "avl": OverlayConfig(show_height=True, show_balance_factor=True),
    "2-3": OverlayConfig(),
    "2-3-4": OverlayConfig(),
    "heap": OverlayConfig(),
    "huffman": OverlayConfig(),
    "graph": OverlayConfig(),
}


@dataclass(frozen=True)
class AlgotraceConfig:
    """Top-level configuration."""
    overlays: Dict[str, OverlayConfig] = field(default_factory=lambda: dict(DEFAULT_OVERLAYS))
    replay: ReplayConfig = field(default_factory=ReplayConfig)
    heap_kind: str = "min"

    def overlay_for(self, mode: str) -> OverlayConfig:
        return self.overlays.get(mode, OverlayConfig())


def parse_config(yaml_content: str) -> AlgotraceConfig:
    """Parse a configuration from YAML content."""
    data = yaml.safe_load(yaml_content) or {}
    if not isinstance(data, dict):
        raise ValidationError("Configuration must be a mapping")
    return _parse_config_dict(data)


def load_config(file_path: str) -> AlgotraceConfig:
    """Load a configuration from a YAML file."""
    with open(file_path, 'r') as f:
        return parse_config(f.read())


def _parse_config_dict(data: Dict[str, Any]) -> AlgotraceConfig:
    overlays = dict(DEFAULT_OVERLAYS)
    for mode, toggles in (data.get("overlays") or {}).items():
        if mode not in MODES:
            raise ValidationError(f"Invalid mode: {mode}. Valid modes: {list(MODES)}")
        overlays[mode] = _parse_overlay(mode, toggles or {})

    replay = _parse_replay(data.get("replay") or {})

    heap_kind = data.get("heap_kind", "min")
    if heap_kind not in ("min", "max"):
        raise ValidationError(f"Invalid heap kind: {heap_kind}. Valid kinds: ['min', 'max']")

    return AlgotraceConfig(overlays=overlays, replay=replay, heap_kind=heap_kind)


def _parse_overlay(mode: str, data: Dict[str, Any]) -> OverlayConfig:
    known = {f.name for f in fields(OverlayConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValidationError(f"Unknown overlay toggles for {mode}: {sorted(unknown)}")
    return replace(DEFAULT_OVERLAYS[mode], **{k: bool(v) for k, v in data.items()})


def _parse_replay(data: Dict[str, Any]) -> ReplayConfig:
    known = {f.name for f in fields(ReplayConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValidationError(f"Unknown replay settings: {sorted(unknown)}")

    replay = ReplayConfig(
        default_speed=int(data.get("default_speed", 5)),
        min_speed=int(data.get("min_speed", 1)),
        max_speed=int(data.get("max_speed", 10)),
        base_delay=float(data.get("base_delay", 1.0)),
    )
    if replay.min_speed < 1 or replay.min_speed > replay.max_speed:
        raise ValidationError(f"Invalid speed range: {replay.min_speed}..{replay.max_speed}")
    if not replay.min_speed <= replay.default_speed <= replay.max_speed:
        raise ValidationError(
            f"Default speed {replay.default_speed} outside {replay.min_speed}..{replay.max_speed}"
        )
    if replay.base_delay <= 0:
        raise ValidationError(f"Base delay must be positive, got {replay.base_delay}")
    return replay
