"""
Session for the Huffman coding mode.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..algorithms import huffman
from ..models import HuffmanBuildState, HuffmanNode
from ..traces import Trace
from .base import InspectorRow, Session
from .inputs import parse_frequency_table


class HuffmanSession(Session):
    """
    Builds a Huffman tree and keeps its code table.

    The canonical toggle switches both the code table used for encoding and
    the tree used for decoding, so round trips hold under either table.
    """

    mode = "huffman"
    validation_kind = "huffman"
    clear_message = "Cleared all"

    def __init__(self, config=None, scheduler=None):
        super().__init__(config, scheduler)
        self.canonical = False
        self.codes: Dict[str, str] = {}
        self.last_bits: Optional[str] = None
        self.last_decoded: Optional[str] = None
        self.stats: Optional[huffman.CompressionStats] = None

    def empty_structure(self) -> Optional[HuffmanNode]:
        return None

    @property
    def tree(self) -> Optional[HuffmanNode]:
        return self.committed

    def reset_auxiliary(self):
        self.codes = {}
        self.last_bits = None
        self.last_decoded = None
        self.stats = None

    def build_huffman(self, source) -> Optional[Trace]:
        """
        Build from a frequency table, a "a:5, b:9" string, or plain text.
        """
        if isinstance(source, Mapping):
            table = parse_frequency_table(dict(source))
        elif isinstance(source, str):
            table = parse_frequency_table(source)
            if table is None:
                table = huffman.frequencies_from_text(source)
        else:
            return None

        trace = self._attempt(huffman.build, table)
        if trace is None:
            return None
        self.committed = huffman.tree_of(trace)
        self.controller.load(trace)
        self.codes = self._generate_codes()
        self.events.add(f"Built Huffman tree with {len(table)} symbols")
        return trace

    def set_canonical(self, flag: bool):
        self.canonical = bool(flag)
        if self.tree is None:
            return
        self.codes = self._generate_codes()
        self.events.add(f"Generated {'canonical' if self.canonical else 'standard'} Huffman codes")

    def encode(self, text: str) -> Optional[huffman.EncodeResult]:
        if not self._require_tree():
            return None
        result = huffman.encode(text, self.codes)
        self.last_bits = result.bits
        self.stats = huffman.compression_stats(text, result.bits)
        if result.unmapped:
            self.events.add(
                f"Encoded \"{text}\" to {len(result)} bits "
                f"(no code for: {', '.join(repr(c) for c in result.unmapped)})"
            )
        else:
            self.events.add(f"Encoded \"{text}\" to {len(result)} bits")
        return result

    def decode(self, bits: str) -> Optional[str]:
        if not self._require_tree():
            return None
        tree = huffman.tree_from_codes(self.codes) if self.canonical else self.tree
        result = huffman.decode(bits, tree)
        self.last_decoded = result
        self.events.add(f"Decoded {len(bits)} bits to \"{result}\"")
        return result

    def _generate_codes(self) -> Dict[str, str]:
        codes = huffman.generate_codes(self.tree)
        if self.canonical:
            codes = huffman.generate_canonical_codes(codes)
        return codes

    def _require_tree(self) -> bool:
        if self.tree is not None:
            return True
        self._error("Build a Huffman tree first")
        return False

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        structure = self.structure
        tree = structure.tree if isinstance(structure, HuffmanBuildState) else structure
        node = tree.find(node_id) if tree is not None else None
        if node is None and isinstance(structure, HuffmanBuildState):
            node = next((n for n in structure.queue if n.id == node_id), None)
        if node is None:
            return []
        rows = [
            InspectorRow("Symbol", node.symbol if node.symbol is not None else "Internal"),
            InspectorRow("Frequency", node.frequency),
            InspectorRow("Is Leaf", "Yes" if node.is_leaf else "No"),
        ]
        if node.is_leaf and node.symbol in self.codes:
            rows.append(InspectorRow("Code", self.codes[node.symbol]))
        return rows
