"""
Sessions for the binary search tree, AVL and B-tree modes.
"""

from typing import Any, List, Optional

from ..algorithms import avl, bst, btree
from ..models import BTree, BinaryTree, LEFT, RIGHT
from ..traces import StepKind, Trace
from .base import InspectorRow, Session
from .inputs import parse_int, parse_values


def _event_from(trace: Trace, kind: StepKind) -> Optional[str]:
    steps = trace.steps_of(kind)
    return steps[-1].description if steps else None


class BinaryTreeInspectorMixin:
    """Inspector rows for BinaryTree nodes, filtered by the mode's overlays."""

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        tree = self.structure
        if node_id not in tree:
            return []
        node = tree.nodes[node_id]
        overlay = self.overlay

        def value_of(child_id):
            return tree.nodes[child_id].value if child_id is not None else "null"

        rows = [
            InspectorRow("Value", node.value),
            InspectorRow("Parent", value_of(node.parent)),
            InspectorRow("Left", value_of(node.left)),
            InspectorRow("Right", value_of(node.right)),
        ]
        if overlay.show_depth:
            rows.append(InspectorRow("Depth/Level", tree.depth(node_id)))
        if overlay.show_height:
            rows.append(InspectorRow("Height", tree.height(node_id)))
        if overlay.show_balance_factor:
            bf = tree.balance_factor(node_id)
            rows.append(InspectorRow(
                "Balance Factor", bf,
                highlight=overlay.highlight_unbalanced and abs(bf) > 1,
            ))
        return rows


class BSTSession(BinaryTreeInspectorMixin, Session):
    """Binary search tree with ordered insert/delete and manual edits."""

    mode = "bst"
    validation_kind = "bst"
    clear_message = "Cleared tree"

    def empty_structure(self) -> BinaryTree:
        return BinaryTree()

    def insert(self, value) -> Optional[Trace]:
        value = parse_int(value)
        if value is None:
            return None
        trace = self._attempt(bst.insert, self.committed, value)
        if trace is not None:
            self._commit(trace, _event_from(trace, StepKind.INSERT))
        return trace

    def delete(self, value) -> Optional[Trace]:
        value = parse_int(value)
        if value is None:
            return None
        trace = self._attempt(bst.delete, self.committed, value)
        if trace is not None:
            event = trace.last_step.description if not trace.succeeded else _event_from(trace, StepKind.DELETE)
            self._commit(trace, event)
        return trace

    def attach(self, parent_id: Optional[int], side: str, value) -> Optional[Trace]:
        """Manual attach. Occupied sides and unknown parents are ignored."""
        value = parse_int(value)
        if value is None or side not in (LEFT, RIGHT):
            return None
        trace = self._attempt(bst.attach, self.committed, parent_id, side, value, silent=True)
        if trace is not None:
            self._commit(trace, _event_from(trace, StepKind.ATTACH))
        return trace

    def edit_value(self, node_id: int, value) -> Optional[Trace]:
        value = parse_int(value)
        if value is None:
            return None
        trace = self._attempt(bst.edit_value, self.committed, node_id, value, silent=True)
        if trace is not None:
            self._commit(trace, f"Edited node value to {value}")
        return trace


class AVLSession(BinaryTreeInspectorMixin, Session):
    """Self-balancing tree. Tracks the rotation total across commands."""

    mode = "avl"
    validation_kind = "avl"
    clear_message = "Cleared tree"

    def __init__(self, config=None, scheduler=None):
        super().__init__(config, scheduler)
        self.rotation_count = 0

    def empty_structure(self) -> BinaryTree:
        return BinaryTree()

    def reset_auxiliary(self):
        self.rotation_count = 0

    def insert(self, value) -> Optional[Trace]:
        value = parse_int(value)
        if value is None:
            return None
        was_empty = self.committed.is_empty()
        trace = self._attempt(avl.insert, self.committed, value)
        if trace is None:
            return None
        rotations = avl.rotation_total(trace)
        self.rotation_count += rotations
        if was_empty:
            event = f"Insert {value} (as root)"
        else:
            event = f"Insert {value} ({rotations} rotation{'' if rotations == 1 else 's'})"
        self._commit(trace, event)
        return trace

    def insert_batch(self, values) -> Optional[Trace]:
        values = parse_values(values)
        if not values:
            return None
        trace = self._attempt(avl.insert_batch, self.committed, values)
        if trace is None:
            return None
        rotations = avl.rotation_total(trace)
        self.rotation_count += rotations
        self._commit(
            trace,
            f"Batch insertion complete: {', '.join(str(v) for v in values)} "
            f"({rotations} total rotations)",
        )
        return trace

    def delete(self, value) -> None:
        """Deletion is not traced in this mode; only the request is logged."""
        value = parse_int(value)
        if value is None:
            return None
        self.events.add(f"Delete {value} (not yet implemented in step-by-step mode)")
        return None

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        rows = super().inspect(node_id)
        if rows:
            rows.append(InspectorRow("Total Rotations", self.rotation_count))
        return rows


class BTreeSession(Session):
    """2-3 (order 3) or 2-3-4 (order 4) tree."""

    validation_kind = "btree"
    clear_message = "Cleared tree"
    order = 4

    def __init__(self, config=None, scheduler=None):
        self.mode = btree.family_for(self.order)
        super().__init__(config, scheduler)

    def empty_structure(self) -> BTree:
        return BTree(self.order)

    def insert(self, value) -> Optional[Trace]:
        value = parse_int(value)
        if value is None:
            return None
        was_empty = self.committed.is_empty()
        trace = self._attempt(btree.insert, self.committed, value, self.order)
        if trace is not None:
            self._commit(trace, f"Insert {value} (as root)" if was_empty else f"Insert {value}")
        return trace

    def delete(self, value) -> None:
        """Deletion is not traced for B-trees; only the request is logged."""
        value = parse_int(value)
        if value is None:
            return None
        self.events.add(f"Delete {value} (simplified - splits only for now)")
        return None

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        tree = self.structure
        if node_id not in tree.nodes:
            return []
        node = tree.nodes[node_id]
        return [
            InspectorRow("Keys", f"[{', '.join(str(k) for k in node.keys)}]"),
            InspectorRow("Key Count", len(node.keys)),
            InspectorRow("Children Count", len(node.children)),
            InspectorRow("Depth", tree.depth(node_id)),
            InspectorRow("Is Leaf", "Yes" if node.is_leaf else "No"),
        ]


class TwoThreeSession(BTreeSession):
    order = 3


class TwoThreeFourSession(BTreeSession):
    order = 4
