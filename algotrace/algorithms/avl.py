"""
AVL insertion with step-by-step rebalancing.

After the leaf insert, the path from the new node's parent up to the root is
checked; the first ancestor with |BF| > 1 is rebalanced with a single or
double rotation and the walk stops there.
"""

from typing import Iterable, List, Optional

from ..logger import init_logger
from ..models import BinaryTree, LEFT, RIGHT
from ..traces import StepKind, Trace, TraceRecorder
from .bst import leaf_position


logger = init_logger(__name__)

FAMILY = "avl"

LL = "LL"
LR = "LR"
RR = "RR"
RL = "RL"


def rotate_right(tree: BinaryTree, node_id: int) -> int:
    """Right rotation around node_id. Returns the id of the new subtree root."""
    node = tree.node(node_id)
    pivot_id = node.left
    if pivot_id is None:
        raise ValueError(f"Cannot rotate right at {node.value}: no left child")
    parent_id = node.parent
    inner = tree.nodes[pivot_id].right

    tree.set_child(pivot_id, RIGHT, node_id)
    tree.set_child(node_id, LEFT, inner)
    tree.replace_child(parent_id, node_id, pivot_id)
    return pivot_id


def rotate_left(tree: BinaryTree, node_id: int) -> int:
    """Left rotation around node_id. Returns the id of the new subtree root."""
    node = tree.node(node_id)
    pivot_id = node.right
    if pivot_id is None:
        raise ValueError(f"Cannot rotate left at {node.value}: no right child")
    parent_id = node.parent
    inner = tree.nodes[pivot_id].left

    tree.set_child(pivot_id, LEFT, node_id)
    tree.set_child(node_id, RIGHT, inner)
    tree.replace_child(parent_id, node_id, pivot_id)
    return pivot_id


def classify(tree: BinaryTree, node_id: int) -> Optional[str]:
    """Imbalance case at node_id, or None when the node is balanced."""
    bf = tree.balance_factor(node_id)
    node = tree.nodes[node_id]
    if bf > 1:
        return LL if tree.balance_factor(node.left) >= 0 else LR
    if bf < -1:
        return RR if tree.balance_factor(node.right) <= 0 else RL
    return None


def insert(tree: BinaryTree, value: int) -> Trace:
    """Insert a single value. Rotation counts start from zero."""
    work = tree.clone()
    recorder = TraceRecorder(FAMILY, f"insert {value}", tree)
    rotations = _insert_value(work, value, recorder, total=0, batch=False)
    trace = recorder.finish()
    logger.debug(f"avl insert {value}: {len(trace)} steps, {rotations} rotations")
    return trace


def insert_batch(tree: BinaryTree, values: Iterable[int]) -> Trace:
    """
    Insert several values in order as one trace.

    Each value's complete step reports the rotations that value needed; the
    rotation_count detail carries the running total across the batch.
    """
    values = list(values)
    work = tree.clone()
    recorder = TraceRecorder(FAMILY, f"insert batch {', '.join(str(v) for v in values)}", tree)
    total = 0
    for value in values:
        total += _insert_value(work, value, recorder, total=total, batch=True)
    trace = recorder.finish()
    logger.debug(f"avl batch insert {values}: {len(trace)} steps, {total} rotations")
    return trace


def rotation_total(trace: Trace) -> int:
    """Total rotations recorded in a trace."""
    return len(trace.steps_of(StepKind.ROTATE))


def _insert_value(work: BinaryTree, value: int, recorder: TraceRecorder,
                  total: int, batch: bool) -> int:
    """Insert one value into work, recording steps. Returns rotations performed."""
    if work.is_empty():
        node = work.new_node(value)
        work.set_child(None, LEFT, node.id)
        recorder.record(StepKind.INSERT, f"Insert {value} as root", work,
                        active=[node.id], rotation_count=total)
        if batch:
            description = f"Insertion of {value} complete (tree was empty)"
        else:
            description = "Insertion complete (tree was empty)"
        recorder.record(StepKind.COMPLETE, description, work, rotation_count=total, rotations=0)
        return 0

    parent_id, side, path = leaf_position(work, value)
    node = work.new_node(value)
    work.set_child(parent_id, side, node.id)
    recorder.record(
        StepKind.INSERT,
        f"Insert {value} as {side} child of {work.nodes[parent_id].value}",
        work,
        active=[node.id],
        rotation_count=total,
    )

    rotations = 0
    for ancestor_id in reversed(path):
        ancestor = work.nodes[ancestor_id]
        left_height = work.edge_height(ancestor.left)
        right_height = work.edge_height(ancestor.right)
        bf = left_height - right_height
        recorder.record(
            StepKind.DETECT_IMBALANCE,
            f"Check balance at node {ancestor.value}: BF = {bf} "
            f"(left height: {left_height}, right height: {right_height})",
            work,
            active=[ancestor_id],
            balance_factor=bf,
        )
        case = classify(work, ancestor_id)
        if case is None:
            continue

        recorder.record(StepKind.IDENTIFY_CASE, f"Imbalance detected! Case: {case}", work,
                        active=[ancestor_id], case=case)
        for description, rotate, pivot_id in _rotation_plan(work, ancestor_id, case):
            new_root = rotate(work, pivot_id)
            rotations += 1
            recorder.record(
                StepKind.ROTATE,
                description,
                work,
                active=[pivot_id, new_root],
                rotation_type=case,
                rotation_count=total + rotations,
            )
        break

    if batch:
        description = f"Insertion of {value} complete. Rotations for this insertion: {rotations}"
    else:
        description = f"Insertion complete. Total rotations: {rotations}"
    recorder.record(StepKind.COMPLETE, description, work,
                    rotation_count=total + rotations, rotations=rotations)
    return rotations


def _rotation_plan(tree: BinaryTree, node_id: int, case: str) -> List[tuple]:
    """(description, rotation, pivot id) for each rotation of the given case."""
    node = tree.nodes[node_id]
    if case == LL:
        return [(f"Perform right rotation at {node.value}", rotate_right, node_id)]
    if case == RR:
        return [(f"Perform left rotation at {node.value}", rotate_left, node_id)]
    if case == LR:
        child = tree.nodes[node.left]
        return [
            (f"Perform left rotation at {child.value} (LR case, part 1)", rotate_left, child.id),
            (f"Perform right rotation at {node.value} (LR case, part 2)", rotate_right, node_id),
        ]
    child = tree.nodes[node.right]
    return [
        (f"Perform right rotation at {child.value} (RL case, part 1)", rotate_right, child.id),
        (f"Perform left rotation at {node.value} (RL case, part 2)", rotate_left, node_id),
    ]
