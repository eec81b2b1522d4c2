"""
Binary heap operations with sift steps.
"""

from ..errors import PreconditionError
from ..logger import init_logger
from ..models import Heap, parent_index
from ..traces import StepKind, Trace, TraceRecorder


logger = init_logger(__name__)

FAMILY = "heap"


def insert(heap: Heap, value: int) -> Trace:
    """Append value and sift it up, one compare step per level."""
    work = heap.clone()
    recorder = TraceRecorder(FAMILY, f"insert {value}", heap)

    work.values.append(value)
    index = len(work) - 1
    recorder.record(StepKind.INSERT, f"Insert {value} at end of heap (index {index})",
                    work, active=[index])

    while index > 0:
        parent = parent_index(index)
        recorder.record(
            StepKind.SIFT_UP,
            f"Compare {work[index]} at index {index} with parent {work[parent]} at index {parent}",
            work,
            active=[index, parent],
        )
        if not work.beats(work[index], work[parent]):
            break
        work.swap(index, parent)
        recorder.record(StepKind.SWAP, f"Swap {work[index]} and {work[parent]}", work,
                        active=[index, parent], swap_indices=(index, parent))
        index = parent

    recorder.record(StepKind.COMPLETE, "Insertion complete - heap property restored", work)
    trace = recorder.finish()
    logger.debug(f"heap insert {value}: {len(trace)} steps")
    return trace


def extract_root(heap: Heap) -> Trace:
    """Remove the root, move the last element up and sift it down."""
    if not len(heap):
        raise PreconditionError("Heap is empty")

    work = heap.clone()
    recorder = TraceRecorder(FAMILY, "extract root", heap)
    root = work[0]

    if len(work) == 1:
        work.values.pop()
        recorder.record(StepKind.EXTRACT, f"Extract root {root} (only element)", work,
                        extracted=root)
        recorder.record(StepKind.COMPLETE, f"Extraction complete - extracted {root}", work,
                        extracted=root)
        return recorder.finish()

    work.values[0] = work.values.pop()
    recorder.record(StepKind.EXTRACT, f"Extract root {root}, move last element {work[0]} to root",
                    work, active=[0], extracted=root)

    index = 0
    while True:
        children = work.children(index)
        if not children:
            break
        recorder.record(StepKind.SIFT_DOWN, f"Check children of {work[index]} at index {index}",
                        work, active=[index] + children)
        target = _extreme_child(work, index)
        if not work.beats(work[target], work[index]):
            break
        work.swap(index, target)
        recorder.record(StepKind.SWAP, f"Swap {work[index]} and {work[target]}", work,
                        active=[index, target], swap_indices=(index, target))
        index = target

    recorder.record(StepKind.COMPLETE, f"Extraction complete - extracted {root}", work,
                    extracted=root)
    trace = recorder.finish()
    logger.debug(f"heap extract {root}: {len(trace)} steps")
    return trace


def change_key(heap: Heap, index: int, value: int) -> Trace:
    """
    Replace the value at index and restore order.

    Sifts up when the new value is more extreme than the old one in the
    heap's sense, otherwise sifts down.
    """
    _check_index(heap, index)
    work = heap.clone()
    recorder = TraceRecorder(FAMILY, f"change key {index}", heap)

    old_value = work[index]
    work.values[index] = value
    recorder.record(StepKind.CHANGE_KEY, f"Change key at index {index} from {old_value} to {value}",
                    work, active=[index], old_value=old_value)

    if work.beats(value, old_value):
        while index > 0:
            parent = parent_index(index)
            if not work.beats(work[index], work[parent]):
                break
            work.swap(index, parent)
            recorder.record(StepKind.SWAP, f"Sift up: Swap {work[index]} and {work[parent]}",
                            work, active=[index, parent], swap_indices=(index, parent))
            index = parent
    else:
        while work.children(index):
            target = _extreme_child(work, index)
            if not work.beats(work[target], work[index]):
                break
            work.swap(index, target)
            recorder.record(StepKind.SWAP, f"Sift down: Swap {work[index]} and {work[target]}",
                            work, active=[index, target], swap_indices=(index, target))
            index = target

    recorder.record(StepKind.COMPLETE, "Key change complete", work)
    return recorder.finish()


def delete_at(heap: Heap, index: int) -> Trace:
    """
    Simplified delete: the last element takes the slot and order is not restored.

    The single delete step carries simplified=True so callers can tell the
    heap property may no longer hold.
    """
    _check_index(heap, index)
    work = heap.clone()
    recorder = TraceRecorder(FAMILY, f"delete index {index}", heap)

    value = work[index]
    last = work.values.pop()
    if index < len(work):
        work.values[index] = last
    recorder.record(StepKind.DELETE, f"Delete {value} at index {index} (simplified)", work,
                    active=[index] if index < len(work) else [], deleted=value, simplified=True)
    return recorder.finish()


def _extreme_child(heap: Heap, index: int) -> int:
    """Child index holding the value that belongs highest; left wins ties."""
    children = heap.children(index)
    target = children[0]
    for child in children[1:]:
        if heap.beats(heap[child], heap[target]):
            target = child
    return target


def _check_index(heap: Heap, index: int):
    if not 0 <= index < len(heap):
        raise PreconditionError(f"Index {index} out of range")
