"""
B-tree insertion with split propagation, for 2-3 and 2-3-4 trees.
"""

from typing import Optional

from ..errors import PreconditionError
from ..logger import init_logger
from ..models import BTree
from ..traces import StepKind, Trace, TraceRecorder


logger = init_logger(__name__)

FAMILIES = {3: "2-3", 4: "2-3-4"}


def family_for(order: int) -> str:
    return FAMILIES[order]


def _keys(keys) -> str:
    return ", ".join(str(k) for k in keys)


def insert(tree: BTree, value: int, order: Optional[int] = None) -> Trace:
    """
    Insert value at a leaf, splitting overflowing nodes bottom-up.

    A node overflows when it holds more than order-1 keys. It splits around
    the key at index 1: the key before it stays in the left half, the keys
    after it move to the right half, the first two children go left and the
    rest go right. The middle key is promoted into the parent, or becomes a
    new root.
    """
    order = tree.order if order is None else order
    if order != tree.order:
        raise PreconditionError(f"Tree has order {tree.order}, not {order}")
    if tree.contains(value):
        raise PreconditionError(f"Key {value} already present")

    work = tree.clone()
    recorder = TraceRecorder(family_for(order), f"insert {value}", tree)

    if work.is_empty():
        root = work.new_node([value])
        work.root = root.id
        recorder.record(StepKind.INSERT, f"Insert {value} as root", work, active=[root.id])
        recorder.record(StepKind.COMPLETE, "Insertion complete", work)
        return recorder.finish()

    current = work.root
    while not work.nodes[current].is_leaf:
        current = work.child_for(current, value)

    node = work.nodes[current]
    before = list(node.keys)
    node.keys = sorted(node.keys + [value])
    recorder.record(
        StepKind.INSERT,
        f"Insert {value} into leaf node [{_keys(before)}]",
        work,
        active=[node.id],
    )

    while len(node.keys) > work.max_keys:
        middle = node.keys[1]
        recorder.record(
            StepKind.SPLIT,
            f"Node overflow: [{_keys(node.keys)}] - splitting at middle key {middle}",
            work,
            active=[node.id],
            promoted=middle,
        )

        parent_id = node.parent
        left = work.new_node(node.keys[:1], node.children[:2])
        right = work.new_node(node.keys[2:], node.children[2:])
        del work.nodes[node.id]

        if parent_id is None:
            root = work.new_node([middle], [left.id, right.id])
            work.root = root.id
            recorder.record(
                StepKind.PROPAGATE,
                f"Create new root with key {middle}",
                work,
                active=[root.id, left.id, right.id],
                promoted=middle,
            )
            break

        parent = work.nodes[parent_id]
        index = parent.children.index(node.id)
        parent.children[index:index + 1] = [left.id, right.id]
        left.parent = parent_id
        right.parent = parent_id
        parent.keys = sorted(parent.keys + [middle])
        recorder.record(
            StepKind.PROPAGATE,
            f"Propagate {middle} to parent [{_keys(parent.keys)}]",
            work,
            active=[parent_id, left.id, right.id],
            promoted=middle,
        )
        node = parent

    recorder.record(StepKind.COMPLETE, "Insertion complete", work)
    trace = recorder.finish()
    logger.debug(f"{trace.family} insert {value}: {len(trace)} steps")
    return trace
