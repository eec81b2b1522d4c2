"""
Tests for binary heap operations.
"""

import random

import pytest

from algotrace.algorithms import heap as heap_ops
from algotrace.errors import PreconditionError
from algotrace.models import Heap
from algotrace.traces import StepKind
from algotrace.validation import validate


def build_heap(kind, values):
    heap = Heap(kind)
    for value in values:
        heap = heap_ops.insert(heap, value).final
    return heap


class TestHeapInsert:
    def test_min_heap_order(self):
        heap = build_heap("min", [5, 3, 8, 1])
        assert heap.to_list() == [1, 3, 8, 5]

    def test_max_heap_order(self):
        heap = build_heap("max", [5, 3, 8, 1])
        assert heap.to_list() == [8, 3, 5, 1]

    def test_sift_up_steps(self):
        """Each level gets a compare step, and a swap when the child wins."""
        trace = heap_ops.insert(Heap("min", [3, 5, 8]), 1)
        assert trace.kinds() == [
            StepKind.INSERT,
            StepKind.SIFT_UP, StepKind.SWAP,
            StepKind.SIFT_UP, StepKind.SWAP,
            StepKind.COMPLETE,
        ]
        assert trace[0].description == "Insert 1 at end of heap (index 3)"
        assert trace[2].details["swap_indices"] == (3, 1)

    def test_stops_when_parent_wins(self):
        trace = heap_ops.insert(Heap("min", [1]), 5)
        assert trace.kinds() == [StepKind.INSERT, StepKind.SIFT_UP, StepKind.COMPLETE]


class TestHeapExtract:
    def test_extract_sifts_down(self):
        trace = heap_ops.extract_root(Heap("min", [1, 3, 8, 5]))
        assert trace.kinds() == [
            StepKind.EXTRACT, StepKind.SIFT_DOWN, StepKind.SWAP, StepKind.COMPLETE,
        ]
        assert trace[0].description == "Extract root 1, move last element 5 to root"
        assert trace[1].active == frozenset({0, 1, 2})
        assert trace.last_step.description == "Extraction complete - extracted 1"
        assert trace.final.to_list() == [3, 5, 8]

    def test_extract_only_element(self):
        trace = heap_ops.extract_root(Heap("min", [4]))
        assert trace[0].description == "Extract root 4 (only element)"
        assert trace.final.to_list() == []

    def test_extract_empty(self):
        with pytest.raises(PreconditionError):
            heap_ops.extract_root(Heap("min"))

    def test_repeated_extract_is_sorted(self):
        """Extracting everything yields values in heap order."""
        values = random.Random(3).sample(range(100), 25)
        heap = build_heap("max", values)
        extracted = []
        while len(heap):
            trace = heap_ops.extract_root(heap)
            extracted.append(trace.last_step.details["extracted"])
            heap = trace.final
            assert validate(heap) == []
        assert extracted == sorted(values, reverse=True)


class TestHeapChangeKey:
    def test_decrease_sifts_up(self):
        trace = heap_ops.change_key(Heap("min", [1, 3, 8, 5]), 3, 0)
        assert trace.kinds() == [
            StepKind.CHANGE_KEY, StepKind.SWAP, StepKind.SWAP, StepKind.COMPLETE,
        ]
        assert trace[0].description == "Change key at index 3 from 5 to 0"
        assert trace.final.to_list() == [0, 1, 8, 3]

    def test_increase_sifts_down(self):
        trace = heap_ops.change_key(Heap("min", [1, 3, 8, 5]), 0, 10)
        assert trace.final.to_list() == [3, 5, 8, 10]
        assert all(step.description.startswith("Sift down") for step in trace.steps_of(StepKind.SWAP))

    def test_out_of_range(self):
        with pytest.raises(PreconditionError):
            heap_ops.change_key(Heap("min", [1]), 4, 0)


class TestHeapDelete:
    def test_delete_is_simplified(self):
        """Delete by index swaps in the last element without restoring order."""
        trace = heap_ops.delete_at(Heap("min", [1, 3, 8, 5]), 0)
        assert len(trace) == 1
        step = trace[0]
        assert step.kind == StepKind.DELETE
        assert step.details["simplified"] is True
        assert trace.final.to_list() == [5, 3, 8]
        assert [v.rule for v in validate(trace.final)] == ["heap-order"]

    def test_delete_last_index(self):
        trace = heap_ops.delete_at(Heap("min", [1, 3]), 1)
        assert trace.final.to_list() == [1]

    def test_heap_property_after_every_operation(self):
        """Insert and extract keep the heap valid at every complete step."""
        rng = random.Random(11)
        heap = Heap("min")
        for _ in range(60):
            if len(heap) and rng.random() < 0.3:
                trace = heap_ops.extract_root(heap)
            else:
                trace = heap_ops.insert(heap, rng.randint(-50, 50))
            for step in trace.steps_of(StepKind.COMPLETE):
                assert validate(step.snapshot) == []
            heap = trace.final
