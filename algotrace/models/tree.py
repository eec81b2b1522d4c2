"""
Binary tree model shared by the BST and AVL modes.

Nodes live in an arena keyed by id. Child links are owning references,
the parent link is a lookup key used for upward walks and depth only.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


LEFT = "left"
RIGHT = "right"


@dataclass
class BinaryNode:
    """A node in a binary tree."""
    id: int
    value: int
    left: Optional[int] = None
    right: Optional[int] = None
    parent: Optional[int] = None

    def child(self, side: str) -> Optional[int]:
        return self.left if side == LEFT else self.right


class BinaryTree:
    """Arena-backed binary tree with computed height, depth and balance factor."""

    def __init__(self):
        self.nodes: Dict[int, BinaryNode] = {}
        self.root: Optional[int] = None
        self.next_id = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.nodes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BinaryTree):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"BinaryTree(inorder={self.inorder()})"

    def is_empty(self) -> bool:
        return self.root is None

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def new_node(self, value: int, parent: Optional[int] = None) -> BinaryNode:
        """Allocate a node with the next id from this tree's counter."""
        node = BinaryNode(id=self.next_id, value=value, parent=parent)
        self.next_id += 1
        self.nodes[node.id] = node
        return node

    def set_child(self, parent_id: Optional[int], side: str, child_id: Optional[int]):
        """Link child_id under parent_id on the given side (root when parent is None)."""
        if parent_id is None:
            self.root = child_id
        elif side == LEFT:
            self.nodes[parent_id].left = child_id
        else:
            self.nodes[parent_id].right = child_id
        if child_id is not None:
            self.nodes[child_id].parent = parent_id

    def replace_child(self, parent_id: Optional[int], old_id: int, new_id: Optional[int]):
        """Put new_id where old_id hangs under parent_id."""
        if parent_id is None:
            self.set_child(None, LEFT, new_id)
            return
        parent = self.nodes[parent_id]
        side = LEFT if parent.left == old_id else RIGHT
        self.set_child(parent_id, side, new_id)

    def remove(self, node_id: int):
        """Drop a detached node record."""
        del self.nodes[node_id]

    # -------------------------------------------------------------------------
    # Structural queries
    # -------------------------------------------------------------------------

    def node(self, node_id: int) -> BinaryNode:
        if node_id not in self.nodes:
            raise ValueError(f"Unknown node: {node_id}")
        return self.nodes[node_id]

    def is_leaf(self, node_id: int) -> bool:
        node = self.node(node_id)
        return node.left is None and node.right is None

    def height(self, node_id: Optional[int]) -> int:
        """Node height: 0 for a leaf and for an absent child."""
        if node_id is None:
            return 0
        node = self.node(node_id)
        if node.left is None and node.right is None:
            return 0
        return 1 + max(self.height(node.left), self.height(node.right))

    def edge_height(self, node_id: Optional[int]) -> int:
        """Height counted in edges from the parent: absent child 0, leaf 1."""
        if node_id is None:
            return 0
        return self.height(node_id) + 1

    def balance_factor(self, node_id: int) -> int:
        node = self.node(node_id)
        return self.edge_height(node.left) - self.edge_height(node.right)

    def depth(self, node_id: int) -> int:
        depth = 0
        current = self.node(node_id)
        while current.parent is not None:
            depth += 1
            current = self.nodes[current.parent]
        return depth

    def find(self, value: int) -> Optional[BinaryNode]:
        """Locate a value by ordered descent."""
        current = self.root
        while current is not None:
            node = self.nodes[current]
            if value == node.value:
                return node
            current = node.left if value < node.value else node.right
        return None

    def iter_nodes(self) -> Iterator[BinaryNode]:
        """Preorder traversal from the root."""
        stack = [self.root] if self.root is not None else []
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            if node.right is not None:
                stack.append(node.right)
            if node.left is not None:
                stack.append(node.left)

    def inorder(self) -> List[int]:
        values: List[int] = []
        stack: List[int] = []
        current = self.root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = self.nodes[current].left
            node = self.nodes[stack.pop()]
            values.append(node.value)
            current = node.right
        return values

    # -------------------------------------------------------------------------
    # Copying
    # -------------------------------------------------------------------------

    def clone(self) -> "BinaryTree":
        """Copy nodes reachable from the root, keeping ids and the id counter."""
        copy = BinaryTree()
        copy.next_id = self.next_id
        copy.root = self.root
        if self.root is None:
            return copy

        stack = [(self.root, None)]
        while stack:
            node_id, parent_id = stack.pop()
            source = self.nodes[node_id]
            copy.nodes[node_id] = BinaryNode(
                id=source.id,
                value=source.value,
                left=source.left,
                right=source.right,
                parent=parent_id,
            )
            for child in (source.left, source.right):
                if child is not None:
                    stack.append((child, node_id))
        return copy

    def to_dict(self) -> Optional[Dict[str, Any]]:
        """Nested value representation, None for an empty tree."""
        def encode(node_id: Optional[int]) -> Optional[Dict[str, Any]]:
            if node_id is None:
                return None
            node = self.nodes[node_id]
            return {
                "id": node.id,
                "value": node.value,
                "left": encode(node.left),
                "right": encode(node.right),
            }
        return encode(self.root)

    @classmethod
    def from_values(cls, values: List[int]) -> "BinaryTree":
        """Plain BST insertion of values in order, without recording steps."""
        tree = cls()
        for value in values:
            parent_id = None
            side = LEFT
            current = tree.root
            while current is not None:
                parent_id = current
                node = tree.nodes[current]
                side = LEFT if value < node.value else RIGHT
                current = node.child(side)
            node = tree.new_node(value)
            tree.set_child(parent_id, side, node.id)
        return tree
