"""
Binary search tree insert, delete and manual edits.

Every function works on a private clone of its input and returns the Trace
of the operation; the input tree is never modified.
"""

from typing import List, Optional, Tuple

from ..errors import PreconditionError
from ..logger import init_logger
from ..models import BinaryTree, LEFT, RIGHT
from ..traces import StepKind, Trace, TraceRecorder


logger = init_logger(__name__)

FAMILY = "bst"


def leaf_position(tree: BinaryTree, value: int) -> Tuple[Optional[int], str, List[int]]:
    """
    Where value would be attached by ordered descent.

    Returns (parent_id, side, path) where path lists the ids visited from the
    root. parent_id is None for an empty tree. Equal values go right.
    """
    parent_id = None
    side = LEFT
    path: List[int] = []
    current = tree.root
    while current is not None:
        path.append(current)
        node = tree.nodes[current]
        parent_id = current
        side = LEFT if value < node.value else RIGHT
        current = node.child(side)
    return parent_id, side, path


def insert(tree: BinaryTree, value: int) -> Trace:
    """Ordered insert at a leaf, one compare step per visited node."""
    work = tree.clone()
    recorder = TraceRecorder(FAMILY, f"insert {value}", tree)

    parent_id, side, path = leaf_position(work, value)
    for node_id in path:
        node = work.nodes[node_id]
        direction = LEFT if value < node.value else RIGHT
        recorder.record(
            StepKind.COMPARE,
            f"Compare {value} with {node.value}: go {direction}",
            work,
            active=[node_id],
        )

    node = work.new_node(value)
    work.set_child(parent_id, side, node.id)
    if parent_id is None:
        description = f"Inserted {value} as root"
    else:
        description = f"Inserted {value} as {side} child of {work.nodes[parent_id].value}"
    recorder.record(StepKind.INSERT, description, work, active=[node.id], node_id=node.id)
    recorder.record(StepKind.COMPLETE, "Insertion complete", work)

    trace = recorder.finish()
    logger.debug(f"bst insert {value}: {len(trace)} steps")
    return trace


def delete(tree: BinaryTree, value: int) -> Trace:
    """
    Delete value from the tree.

    A leaf is detached, a node with one child is replaced by that child, and
    a node with two children takes the value of its in-order successor, which
    is then spliced out. A missing value ends the trace with an error step.
    """
    work = tree.clone()
    recorder = TraceRecorder(FAMILY, f"delete {value}", tree)

    current = work.root
    found = None
    while current is not None:
        node = work.nodes[current]
        if value == node.value:
            found = node
            break
        direction = LEFT if value < node.value else RIGHT
        recorder.record(
            StepKind.COMPARE,
            f"Compare {value} with {node.value}: go {direction}",
            work,
            active=[current],
        )
        current = node.child(direction)

    if found is None:
        recorder.record(StepKind.ERROR, f"Value {value} not found", work)
        return recorder.finish()

    if found.left is None and found.right is None:
        work.replace_child(found.parent, found.id, None)
        work.remove(found.id)
        recorder.record(StepKind.DELETE, f"Deleted leaf node {value}", work)
    elif found.left is None or found.right is None:
        child = found.left if found.left is not None else found.right
        work.replace_child(found.parent, found.id, child)
        work.remove(found.id)
        recorder.record(StepKind.DELETE, f"Deleted node {value} (one child)", work, active=[child])
    else:
        successor = work.nodes[found.right]
        while successor.left is not None:
            successor = work.nodes[successor.left]
        recorder.record(
            StepKind.FIND_SUCCESSOR,
            f"In-order successor of {value} is {successor.value}",
            work,
            active=[found.id, successor.id],
        )
        found.value = successor.value
        work.replace_child(successor.parent, successor.id, successor.right)
        work.remove(successor.id)
        recorder.record(
            StepKind.DELETE,
            f"Deleted node {value} (replaced with successor {found.value})",
            work,
            active=[found.id],
        )

    recorder.record(StepKind.COMPLETE, "Deletion complete", work)
    trace = recorder.finish()
    logger.debug(f"bst delete {value}: {len(trace)} steps")
    return trace


def attach(tree: BinaryTree, parent_id: Optional[int], side: str, value: int) -> Trace:
    """
    Attach a new node without enforcing ordering.

    parent_id None creates the root of an empty tree.
    """
    if side not in (LEFT, RIGHT):
        raise PreconditionError(f"Invalid side: {side}")
    if parent_id is None:
        if not tree.is_empty():
            raise PreconditionError("Tree already has a root")
    else:
        if parent_id not in tree:
            raise PreconditionError(f"Unknown node: {parent_id}")
        if tree.nodes[parent_id].child(side) is not None:
            raise PreconditionError(f"Node {tree.nodes[parent_id].value} already has a {side} child")

    work = tree.clone()
    recorder = TraceRecorder(FAMILY, f"attach {value}", tree)
    node = work.new_node(value)
    work.set_child(parent_id, side, node.id)
    if parent_id is None:
        description = f"Created root node {value}"
    else:
        description = f"Attached {value} as {side} child of {work.nodes[parent_id].value}"
    recorder.record(StepKind.ATTACH, description, work, active=[node.id], node_id=node.id)
    recorder.record(StepKind.COMPLETE, "Attach complete", work)
    return recorder.finish()


def edit_value(tree: BinaryTree, node_id: int, value: int) -> Trace:
    """Overwrite a node's value without enforcing ordering."""
    if node_id not in tree:
        raise PreconditionError(f"Unknown node: {node_id}")

    work = tree.clone()
    recorder = TraceRecorder(FAMILY, f"edit {node_id}", tree)
    old_value = work.nodes[node_id].value
    work.nodes[node_id].value = value
    recorder.record(
        StepKind.EDIT,
        f"Edited node value from {old_value} to {value}",
        work,
        active=[node_id],
        old_value=old_value,
    )
    recorder.record(StepKind.COMPLETE, "Edit complete", work)
    return recorder.finish()
