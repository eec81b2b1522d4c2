"""
B-tree model for the 2-3 (order 3) and 2-3-4 (order 4) modes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


SUPPORTED_ORDERS = (3, 4)


@dataclass
class BTreeNode:
    """
    A node in a B-tree.

    children count is:
        - 0 if leaf
        - len(keys)+1 if internal
    """
    id: int
    keys: List[int] = field(default_factory=list)
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


class BTree:
    """Arena-backed B-tree of a fixed order (maximum children per node)."""

    def __init__(self, order: int = 4):
        if order not in SUPPORTED_ORDERS:
            raise ValueError(f"Unsupported order: {order}. Supported orders: {list(SUPPORTED_ORDERS)}")
        self.order = order
        self.nodes: Dict[int, BTreeNode] = {}
        self.root: Optional[int] = None
        self.next_id = 0

    @property
    def max_keys(self) -> int:
        return self.order - 1

    def __len__(self) -> int:
        return len(self.nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BTree):
            return NotImplemented
        return self.order == other.order and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"BTree(order={self.order}, root={self.to_dict()})"

    def is_empty(self) -> bool:
        return self.root is None

    def new_node(self, keys: List[int], children: Optional[List[int]] = None,
                 parent: Optional[int] = None) -> BTreeNode:
        node = BTreeNode(id=self.next_id, keys=sorted(keys), children=list(children or []), parent=parent)
        self.next_id += 1
        self.nodes[node.id] = node
        for child in node.children:
            self.nodes[child].parent = node.id
        return node

    def node(self, node_id: int) -> BTreeNode:
        if node_id not in self.nodes:
            raise ValueError(f"Unknown node: {node_id}")
        return self.nodes[node_id]

    def depth(self, node_id: int) -> int:
        depth = 0
        current = self.node(node_id)
        while current.parent is not None:
            depth += 1
            current = self.nodes[current.parent]
        return depth

    def height(self) -> int:
        """Number of levels below the root (0 for a single node, -1 when empty)."""
        if self.root is None:
            return -1
        levels = 0
        current = self.nodes[self.root]
        while not current.is_leaf:
            current = self.nodes[current.children[0]]
            levels += 1
        return levels

    def child_for(self, node_id: int, value: int) -> int:
        """Child whose key range contains value: first key greater than value, else last."""
        node = self.nodes[node_id]
        for index, key in enumerate(node.keys):
            if value < key:
                return node.children[index]
        return node.children[-1]

    def contains(self, value: int) -> bool:
        current = self.root
        while current is not None:
            node = self.nodes[current]
            if value in node.keys:
                return True
            if node.is_leaf:
                return False
            current = self.child_for(current, value)
        return False

    def iter_nodes(self) -> Iterator[BTreeNode]:
        """Breadth-first traversal from the root."""
        queue = [self.root] if self.root is not None else []
        while queue:
            node = self.nodes[queue.pop(0)]
            yield node
            queue.extend(node.children)

    def leaf_depths(self) -> Dict[int, int]:
        return {node.id: self.depth(node.id) for node in self.iter_nodes() if node.is_leaf}

    def keys_inorder(self) -> List[int]:
        def walk(node_id: int) -> List[int]:
            node = self.nodes[node_id]
            if node.is_leaf:
                return list(node.keys)
            result: List[int] = []
            for index, key in enumerate(node.keys):
                result.extend(walk(node.children[index]))
                result.append(key)
            result.extend(walk(node.children[-1]))
            return result
        return walk(self.root) if self.root is not None else []

    def clone(self) -> "BTree":
        """Copy nodes reachable from the root, keeping ids and the id counter."""
        copy = BTree(self.order)
        copy.next_id = self.next_id
        copy.root = self.root
        if self.root is None:
            return copy

        stack = [(self.root, None)]
        while stack:
            node_id, parent_id = stack.pop()
            source = self.nodes[node_id]
            copy.nodes[node_id] = BTreeNode(
                id=source.id,
                keys=list(source.keys),
                children=list(source.children),
                parent=parent_id,
            )
            for child in source.children:
                stack.append((child, node_id))
        return copy

    def to_dict(self) -> Optional[Dict[str, Any]]:
        def encode(node_id: int) -> Dict[str, Any]:
            node = self.nodes[node_id]
            return {
                "id": node.id,
                "keys": list(node.keys),
                "children": [encode(child) for child in node.children],
            }
        return encode(self.root) if self.root is not None else None
