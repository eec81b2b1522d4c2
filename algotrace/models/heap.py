"""
Array-backed binary heap model.
"""

from typing import Iterable, List, Optional


HEAP_KINDS = ("min", "max")


def parent_index(i: int) -> int:
    return (i - 1) // 2


def left_index(i: int) -> int:
    return 2 * i + 1


def right_index(i: int) -> int:
    return 2 * i + 2


class Heap:
    """Dense array heap. `kind` selects min- or max-ordering."""

    def __init__(self, kind: str = "min", values: Optional[Iterable[int]] = None):
        if kind not in HEAP_KINDS:
            raise ValueError(f"Invalid heap kind: {kind}. Valid kinds: {list(HEAP_KINDS)}")
        self.kind = kind
        self.values: List[int] = list(values or [])

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> int:
        return self.values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Heap):
            return NotImplemented
        return self.kind == other.kind and self.values == other.values

    def __repr__(self) -> str:
        return f"Heap({self.kind}, {self.values})"

    def beats(self, a: int, b: int) -> bool:
        """True when a belongs above b under this heap's ordering."""
        return a < b if self.kind == "min" else a > b

    def children(self, i: int) -> List[int]:
        return [c for c in (left_index(i), right_index(i)) if c < len(self.values)]

    def swap(self, i: int, j: int):
        self.values[i], self.values[j] = self.values[j], self.values[i]

    def peek(self) -> Optional[int]:
        return self.values[0] if self.values else None

    def clone(self) -> "Heap":
        return Heap(self.kind, self.values)

    def to_list(self) -> List[int]:
        return list(self.values)
