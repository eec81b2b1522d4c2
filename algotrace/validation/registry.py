"""
Structure Validator Registry

Maps structure kinds to the invariant checks run against them.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..logger import init_logger
from ..models import BTree, BinaryTree, Graph, Heap, HuffmanBuildState, HuffmanNode


logger = init_logger(__name__)


@dataclass(frozen=True)
class Violation:
    """An invariant that does not hold. Advisory only."""
    rule: str
    message: str
    node_id: Any = None

    def __str__(self) -> str:
        return f"[{self.rule}] {self.message}"


# Validator(structure) -> iterable of Violation
Validator = Callable[[Any], Iterable[Violation]]


# Global registry of validators per structure kind
VALIDATORS: Dict[str, List[Validator]] = {}


def register_validator(*kinds: str):
    """
    Decorator to register a validator for one or more structure kinds.

    Usage:
        @register_validator("heap")
        def check_heap_order(heap):
            yield Violation("heap-order", "...")
    """
    def decorator(func: Validator) -> Validator:
        for kind in kinds:
            VALIDATORS.setdefault(kind, []).append(func)
        return func
    return decorator


def kind_of(structure: Any) -> Optional[str]:
    """Default validator kind for a structure type."""
    if isinstance(structure, BinaryTree):
        return "bst"
    if isinstance(structure, BTree):
        return "btree"
    if isinstance(structure, Heap):
        return "heap"
    if isinstance(structure, (HuffmanNode, HuffmanBuildState)):
        return "huffman"
    if isinstance(structure, Graph):
        return "graph"
    return None


def validate(structure: Any, kind: Optional[str] = None) -> List[Violation]:
    """
    Run every validator registered for the structure's kind.

    Never raises: a validator that fails reports the failure as a violation.
    """
    if structure is None:
        return []
    kind = kind or kind_of(structure)
    violations: List[Violation] = []
    for validator in VALIDATORS.get(kind, []):
        try:
            violations.extend(validator(structure))
        except Exception as e:
            logger.exception(f"Validator {validator.__name__} failed")
            violations.append(Violation("validator-error", f"{validator.__name__} failed: {e}"))
    return violations


# =============================================================================
# Binary trees
# =============================================================================

def _ordering_violations(tree: BinaryTree, equal_left: bool) -> Iterable[Violation]:
    if tree.root is None:
        return
    stack = [(tree.root, None, None)]
    while stack:
        node_id, low, high = stack.pop()
        node = tree.nodes[node_id]
        above_high = high is not None and (node.value > high if equal_left else node.value >= high)
        if (low is not None and node.value < low) or above_high:
            yield Violation("bst-order", f"Node {node.value} violates BST ordering", node_id)
        if node.left is not None:
            stack.append((node.left, low, node.value))
        if node.right is not None:
            stack.append((node.right, node.value, high))


@register_validator("bst")
def check_bst_ordering(tree: BinaryTree) -> Iterable[Violation]:
    """Left subtree values are smaller, right subtree values are not smaller."""
    return _ordering_violations(tree, equal_left=False)


@register_validator("avl")
def check_avl_ordering(tree: BinaryTree) -> Iterable[Violation]:
    """Like the BST rule, but equal values may sit on either side."""
    return _ordering_violations(tree, equal_left=True)


@register_validator("avl")
def check_avl_balance(tree: BinaryTree) -> Iterable[Violation]:
    for node in tree.iter_nodes():
        bf = tree.balance_factor(node.id)
        if abs(bf) > 1:
            yield Violation("avl-balance", f"Node {node.value} is unbalanced (BF = {bf})", node.id)


# =============================================================================
# B-trees
# =============================================================================

@register_validator("btree")
def check_btree_shape(tree: BTree) -> Iterable[Violation]:
    """Key counts, child counts, sorted keys and equal leaf depth."""
    for node in tree.iter_nodes():
        if not 1 <= len(node.keys) <= tree.max_keys:
            yield Violation(
                "btree-keys",
                f"Node [{', '.join(str(k) for k in node.keys)}] has {len(node.keys)} keys "
                f"(allowed 1..{tree.max_keys})",
                node.id,
            )
        if any(a >= b for a, b in zip(node.keys, node.keys[1:])):
            yield Violation("btree-order", f"Keys of node {node.id} are not strictly increasing", node.id)
        if node.children and len(node.children) != len(node.keys) + 1:
            yield Violation(
                "btree-children",
                f"Node {node.id} has {len(node.children)} children for {len(node.keys)} keys",
                node.id,
            )

    depths = set(tree.leaf_depths().values())
    if len(depths) > 1:
        yield Violation("btree-depth", f"Leaves at different depths: {sorted(depths)}")

    keys = tree.keys_inorder()
    if any(a >= b for a, b in zip(keys, keys[1:])):
        yield Violation("btree-order", "In-order keys are not strictly increasing")


# =============================================================================
# Heap
# =============================================================================

@register_validator("heap")
def check_heap_order(heap: Heap) -> Iterable[Violation]:
    for index in range(1, len(heap)):
        parent = (index - 1) // 2
        if heap.beats(heap[index], heap[parent]):
            yield Violation(
                "heap-order",
                f"{heap[index]} at index {index} belongs above parent {heap[parent]} "
                f"({heap.kind}-heap)",
                index,
            )


# =============================================================================
# Huffman
# =============================================================================

@register_validator("huffman")
def check_huffman_shape(structure) -> Iterable[Violation]:
    """Internal nodes have two children, leaves carry unique symbols."""
    tree = structure.tree if isinstance(structure, HuffmanBuildState) else structure
    if tree is None:
        return
    seen = set()
    for node in tree.iter_nodes():
        if node.is_leaf:
            if node.symbol is None:
                yield Violation("huffman-leaf", f"Leaf {node.id} has no symbol", node.id)
            elif node.symbol in seen:
                yield Violation("huffman-leaf", f"Symbol {node.symbol!r} appears twice", node.id)
            seen.add(node.symbol)
        elif node.left is None or node.right is None:
            yield Violation("huffman-shape", f"Internal node {node.id} has one child", node.id)
        elif node.left.frequency + node.right.frequency != node.frequency:
            yield Violation(
                "huffman-frequency",
                f"Node {node.id} frequency {node.frequency} is not the sum of its children",
                node.id,
            )


# =============================================================================
# Graph
# =============================================================================

@register_validator("graph")
def check_graph_edges(graph: Graph) -> Iterable[Violation]:
    node_ids = set(graph.node_ids())
    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_ids:
                yield Violation("graph-edge", f"Edge {edge.id} references missing node {endpoint}", edge.id)
