"""
Huffman tree model.

Nodes are immutable; merging two subtrees creates a new parent that shares
them, so every recorded queue state stays valid after later merges.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class HuffmanNode:
    """A Huffman tree node. Leaves carry a symbol, internal nodes two children."""
    id: int
    frequency: float
    symbol: Optional[str] = None
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def label(self) -> str:
        return self.symbol if self.symbol is not None else "internal"

    def iter_nodes(self) -> Iterator["HuffmanNode"]:
        """Preorder traversal."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def leaves(self) -> Iterator["HuffmanNode"]:
        return (node for node in self.iter_nodes() if node.is_leaf)

    def find(self, node_id: int) -> Optional["HuffmanNode"]:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def clone(self) -> "HuffmanNode":
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "frequency": self.frequency,
            "left": self.left.to_dict() if self.left else None,
            "right": self.right.to_dict() if self.right else None,
        }


@dataclass(frozen=True)
class HuffmanBuildState:
    """Priority queue contents plus the tree most recently formed."""
    queue: Tuple[HuffmanNode, ...] = ()
    tree: Optional[HuffmanNode] = None

    def clone(self) -> "HuffmanBuildState":
        return self

    def queue_frequencies(self) -> Tuple[Tuple[str, float], ...]:
        return tuple((node.label, node.frequency) for node in self.queue)
