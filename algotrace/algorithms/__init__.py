"""
Mutation algorithms. Each runs eagerly on a private copy of its input and
returns the complete Trace of the operation.
"""

from . import avl, bst, btree, graphs, heap, huffman
from .huffman import (
    EncodeResult,
    CompressionStats,
    frequencies_from_text,
    generate_codes,
    generate_canonical_codes,
    tree_from_codes,
    encode,
    decode,
    compression_stats,
    is_prefix_free,
    kraft_sum,
)
from .graphs import prim, dijkstra, topological_sort, shortest_path

__all__ = [
    # Families
    "avl",
    "bst",
    "btree",
    "graphs",
    "heap",
    "huffman",
    # Huffman helpers
    "EncodeResult",
    "CompressionStats",
    "frequencies_from_text",
    "generate_codes",
    "generate_canonical_codes",
    "tree_from_codes",
    "encode",
    "decode",
    "compression_stats",
    "is_prefix_free",
    "kraft_sum",
    # Graph algorithms
    "prim",
    "dijkstra",
    "topological_sort",
    "shortest_path",
]
