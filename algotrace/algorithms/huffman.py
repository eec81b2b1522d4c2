"""
Huffman coding: tree construction, standard and canonical codes,
encoding, decoding and compression statistics.
"""

import itertools
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Mapping, Optional

from ..errors import PreconditionError
from ..logger import init_logger
from ..models import HuffmanBuildState, HuffmanNode
from ..traces import StepKind, Trace, TraceRecorder


logger = init_logger(__name__)

FAMILY = "huffman"

UNMAPPED = "?"
BITS_PER_CHAR = 8


@dataclass
class EncodeResult:
    """Encoded bit string. Unmapped characters appear as '?' in bits."""
    bits: str
    unmapped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.unmapped

    def __len__(self) -> int:
        return len(self.bits)


@dataclass
class CompressionStats:
    original_bits: int
    encoded_bits: int

    @property
    def ratio(self) -> float:
        """Fraction of bits saved relative to 8 bits per character."""
        if self.original_bits == 0:
            return 0.0
        return 1 - self.encoded_bits / self.original_bits

    def __str__(self) -> str:
        return (f"{self.original_bits} bits -> {self.encoded_bits} bits "
                f"({self.ratio * 100:.1f}% saved)")


def frequencies_from_text(text: str) -> Dict[str, int]:
    """Character counts in order of first appearance."""
    table: Dict[str, int] = {}
    for char in text:
        table[char] = table.get(char, 0) + 1
    return table


def build(table: Mapping[str, float]) -> Trace:
    """
    Build a Huffman tree from a symbol -> frequency table.

    Leaves enter the queue in table order and the queue is stably sorted by
    frequency, so equal frequencies keep insertion order and the result is
    deterministic. The final step's snapshot carries the tree.
    """
    if not table:
        raise PreconditionError("No frequencies to build tree")
    for symbol, frequency in table.items():
        if frequency <= 0:
            raise PreconditionError(f"Frequency of {symbol!r} must be positive, got {frequency}")

    ids = itertools.count()
    queue = [HuffmanNode(id=next(ids), frequency=frequency, symbol=symbol)
             for symbol, frequency in table.items()]
    queue.sort(key=lambda node: node.frequency)

    recorder = TraceRecorder(FAMILY, f"build {len(queue)} symbols", HuffmanBuildState())
    recorder.record(StepKind.INIT, f"Initialize priority queue with {len(queue)} symbols",
                    HuffmanBuildState(queue=tuple(queue)))

    while len(queue) > 1:
        left = queue.pop(0)
        right = queue.pop(0)
        recorder.record(
            StepKind.POP,
            f"Pop two minimum: '{left.label}' (freq: {left.frequency}) "
            f"and '{right.label}' (freq: {right.frequency})",
            HuffmanBuildState(queue=tuple(queue)),
            active=[left.id, right.id],
        )

        merged = HuffmanNode(id=next(ids), frequency=left.frequency + right.frequency,
                             left=left, right=right)
        recorder.record(StepKind.MERGE, f"Merge into new node with frequency {merged.frequency}",
                        HuffmanBuildState(queue=tuple(queue), tree=merged), active=[merged.id])

        queue.append(merged)
        queue.sort(key=lambda node: node.frequency)
        recorder.record(StepKind.PUSH, "Push merged node back to PQ",
                        HuffmanBuildState(queue=tuple(queue), tree=merged), active=[merged.id])

    root = queue[0]
    recorder.record(StepKind.COMPLETE, "Huffman tree complete!",
                    HuffmanBuildState(queue=tuple(queue), tree=root), root_id=root.id)
    trace = recorder.finish()
    logger.debug(f"huffman build {len(table)} symbols: {len(trace)} steps")
    return trace


def tree_of(trace: Trace) -> Optional[HuffmanNode]:
    """The finished tree of a build trace."""
    final = trace.final
    return final.tree if final is not None else None


def generate_codes(tree: Optional[HuffmanNode]) -> Dict[str, str]:
    """'0' for left, '1' for right. A single-leaf tree gets the code '0'."""
    if tree is None:
        return {}
    if tree.is_leaf:
        return {tree.symbol: "0"}

    codes: Dict[str, str] = {}
    stack = [(tree, "")]
    while stack:
        node, prefix = stack.pop()
        if node.is_leaf:
            codes[node.symbol] = prefix
            continue
        stack.append((node.right, prefix + "1"))
        stack.append((node.left, prefix + "0"))
    return codes


def generate_canonical_codes(codes: Mapping[str, str]) -> Dict[str, str]:
    """
    Canonical codes with the same lengths as the given table.

    Symbols sorted by (length, symbol) receive consecutive binary values; the
    running value shifts left whenever the length grows.
    """
    ordered = sorted(codes.items(), key=lambda item: (len(item[1]), item[0]))
    canonical: Dict[str, str] = {}
    value = 0
    previous_length = 0
    for index, (symbol, code) in enumerate(ordered):
        length = len(code)
        if index > 0:
            value = (value + 1) << (length - previous_length)
        else:
            value <<= length
        canonical[symbol] = format(value, "b").zfill(length)
        previous_length = length
    return canonical


def tree_from_codes(codes: Mapping[str, str]) -> Optional[HuffmanNode]:
    """
    Decoding tree for a prefix-free code table.

    Internal nodes carry frequency 0. A one-symbol table yields a single leaf.
    """
    if not codes:
        return None
    if len(codes) == 1:
        symbol = next(iter(codes))
        return HuffmanNode(id=0, frequency=0, symbol=symbol)

    ids = itertools.count()

    def grow(prefix: str) -> HuffmanNode:
        for symbol, code in codes.items():
            if code == prefix:
                return HuffmanNode(id=next(ids), frequency=0, symbol=symbol)
        node_id = next(ids)
        left = grow(prefix + "0") if any(c.startswith(prefix + "0") for c in codes.values()) else None
        right = grow(prefix + "1") if any(c.startswith(prefix + "1") for c in codes.values()) else None
        return HuffmanNode(id=node_id, frequency=0, left=left, right=right)

    return grow("")


def encode(text: str, codes: Mapping[str, str]) -> EncodeResult:
    """Concatenate codes of each character, '?' for characters with no code."""
    bits: List[str] = []
    unmapped: List[str] = []
    for char in text:
        code = codes.get(char)
        if code is None:
            bits.append(UNMAPPED)
            if char not in unmapped:
                unmapped.append(char)
        else:
            bits.append(code)
    return EncodeResult(bits="".join(bits), unmapped=unmapped)


def decode(bits: str, tree: Optional[HuffmanNode]) -> str:
    """
    Walk the tree bit by bit, emitting a symbol at each leaf.

    Characters other than '0' and '1' are ignored and trailing bits that do
    not reach a leaf are dropped. A single-leaf tree emits its symbol for
    each '0'.
    """
    if tree is None:
        return ""
    if tree.is_leaf:
        return "".join(tree.symbol for bit in bits if bit == "0")

    result: List[str] = []
    node = tree
    for bit in bits:
        if bit == "0":
            node = node.left
        elif bit == "1":
            node = node.right
        else:
            continue
        if node is None:
            node = tree
            continue
        if node.is_leaf:
            result.append(node.symbol)
            node = tree
    return "".join(result)


def compression_stats(text: str, bits: str) -> CompressionStats:
    return CompressionStats(original_bits=len(text) * BITS_PER_CHAR, encoded_bits=len(bits))


def is_prefix_free(codes: Mapping[str, str]) -> bool:
    values = sorted(codes.values())
    return all(not b.startswith(a) for a, b in zip(values, values[1:]))


def kraft_sum(codes: Mapping[str, str]) -> Fraction:
    """Sum of 2^-len over all codes; exactly 1 for a complete prefix code."""
    return sum((Fraction(1, 2 ** len(code)) for code in codes.values()), Fraction(0))
