"""
Structure models: plain data with structural queries only.
"""

from .tree import BinaryNode, BinaryTree, LEFT, RIGHT
from .btree import BTreeNode, BTree, SUPPORTED_ORDERS
from .heap import Heap, HEAP_KINDS, parent_index, left_index, right_index
from .huffman import HuffmanNode, HuffmanBuildState
from .graph import Graph, GraphNode, GraphEdge, GraphState

__all__ = [
    # Binary trees
    "BinaryNode",
    "BinaryTree",
    "LEFT",
    "RIGHT",
    # B-trees
    "BTreeNode",
    "BTree",
    "SUPPORTED_ORDERS",
    # Heap
    "Heap",
    "HEAP_KINDS",
    "parent_index",
    "left_index",
    "right_index",
    # Huffman
    "HuffmanNode",
    "HuffmanBuildState",
    # Graph
    "Graph",
    "GraphNode",
    "GraphEdge",
    "GraphState",
]
