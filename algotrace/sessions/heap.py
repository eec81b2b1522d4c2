"""
Session for the binary heap mode.
"""

from typing import Any, List, Optional

from ..algorithms import heap as heap_ops
from ..config import AlgotraceConfig
from ..models import HEAP_KINDS, Heap, left_index, parent_index, right_index
from ..traces import Trace
from .base import InspectorRow, Session
from .inputs import parse_int


class HeapSession(Session):
    """Min- or max-heap. The configured kind applies until set_heap_kind."""

    mode = "heap"
    validation_kind = "heap"
    clear_message = "Cleared heap"

    def __init__(self, config: Optional[AlgotraceConfig] = None, scheduler=None):
        self.heap_kind = (config or AlgotraceConfig()).heap_kind
        super().__init__(config, scheduler)

    def empty_structure(self) -> Heap:
        return Heap(self.heap_kind)

    def set_heap_kind(self, kind: str):
        """Switch between min and max ordering. The heap is cleared."""
        kind = str(kind).lower()
        if kind not in HEAP_KINDS:
            self._error(f"Invalid heap kind: {kind}")
            return
        self.heap_kind = kind
        self.clear()

    def insert(self, value) -> Optional[Trace]:
        value = parse_int(value)
        if value is None:
            return None
        trace = self._attempt(heap_ops.insert, self.committed, value)
        if trace is not None:
            self._commit(trace, f"Insert {value}")
        return trace

    def extract_root(self) -> Optional[Trace]:
        """Empty heaps are left alone without an event."""
        trace = self._attempt(heap_ops.extract_root, self.committed, silent=True)
        if trace is not None:
            self._commit(trace, f"Extract {trace.last_step.details['extracted']}")
        return trace

    def change_key(self, index, value) -> Optional[Trace]:
        index = parse_int(index)
        value = parse_int(value)
        if index is None or value is None:
            return None
        trace = self._attempt(heap_ops.change_key, self.committed, index, value, silent=True)
        if trace is not None:
            old_value = trace[0].details["old_value"]
            self._commit(trace, f"Change key at index {index}: {old_value} -> {value}")
        return trace

    def delete(self, index) -> Optional[Trace]:
        """Simplified delete by index; the heap property may not hold afterwards."""
        index = parse_int(index)
        if index is None:
            return None
        trace = self._attempt(heap_ops.delete_at, self.committed, index, silent=True)
        if trace is not None:
            self._commit(trace, trace.last_step.description)
        return trace

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        heap = self.structure
        index = parse_int(node_id)
        if index is None or not 0 <= index < len(heap):
            return []
        left = left_index(index)
        right = right_index(index)
        return [
            InspectorRow("Index", index),
            InspectorRow("Value", heap[index]),
            InspectorRow("Parent Index", parent_index(index) if index > 0 else "none"),
            InspectorRow("Parent Value", heap[parent_index(index)] if index > 0 else "none"),
            InspectorRow("Left Child Index", left if left < len(heap) else "none"),
            InspectorRow("Right Child Index", right if right < len(heap) else "none"),
        ]
