"""
Per-mode sessions: typed command entry points, event log and inspector.
"""

from typing import Dict, Optional, Type

from ..config import AlgotraceConfig
from .base import EventLog, InspectorRow, Session
from .graph import GraphSession
from .heap import HeapSession
from .huffman import HuffmanSession
from .trees import AVLSession, BSTSession, BTreeSession, TwoThreeFourSession, TwoThreeSession


SESSION_TYPES: Dict[str, Type[Session]] = {
    "bst": BSTSession,
    "avl": AVLSession,
    "2-3": TwoThreeSession,
    "2-3-4": TwoThreeFourSession,
    "heap": HeapSession,
    "huffman": HuffmanSession,
    "graph": GraphSession,
}


def create_session(mode: str, config: Optional[AlgotraceConfig] = None,
                   scheduler=None) -> Session:
    """Create the session for a mode name."""
    if mode not in SESSION_TYPES:
        raise ValueError(f"Unknown mode: {mode}. Valid modes: {list(SESSION_TYPES)}")
    return SESSION_TYPES[mode](config, scheduler)


__all__ = [
    # Base
    "EventLog",
    "InspectorRow",
    "Session",
    # Modes
    "BSTSession",
    "AVLSession",
    "BTreeSession",
    "TwoThreeSession",
    "TwoThreeFourSession",
    "HeapSession",
    "HuffmanSession",
    "GraphSession",
    # Factory
    "SESSION_TYPES",
    "create_session",
]
