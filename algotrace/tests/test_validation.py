"""
Tests for the structure validators.
"""

from algotrace.algorithms import avl
from algotrace.models import BTree, BinaryTree, Graph, Heap, HuffmanNode
from algotrace.models.graph import GraphEdge
from algotrace.validation import VALIDATORS, Violation, kind_of, validate


class TestValidators:
    def test_none_is_valid(self):
        assert validate(None) == []

    def test_kind_of(self):
        assert kind_of(BinaryTree()) == "bst"
        assert kind_of(BTree(3)) == "btree"
        assert kind_of(Heap("min")) == "heap"
        assert kind_of(Graph()) == "graph"
        assert kind_of(42) is None

    def test_avl_balance(self):
        """A right chain is a valid BST but not a valid AVL tree."""
        tree = BinaryTree.from_values([1, 2, 3])
        assert validate(tree, "bst") == []
        violations = validate(tree, "avl")
        assert [v.rule for v in violations] == ["avl-balance"]
        assert violations[0].node_id == tree.root
        assert str(violations[0]) == "[avl-balance] Node 1 is unbalanced (BF = -2)"

    def test_avl_duplicates_on_either_side(self):
        """Rebalancing [5, 5, 5] leaves a 5 to the left of the root."""
        tree = avl.insert_batch(BinaryTree(), [5, 5, 5, 5, 5]).final
        assert validate(tree, "avl") == []
        assert "bst-order" in [v.rule for v in validate(tree, "bst")]

    def test_avl_order_still_checked(self):
        tree = BinaryTree.from_values([5, 3])
        tree.nodes[tree.nodes[tree.root].left].value = 7
        assert [v.rule for v in validate(tree, "avl")] == ["bst-order"]

    def test_btree_overfull_node(self):
        tree = BTree(3)
        tree.root = tree.new_node([1, 2, 3]).id
        assert [v.rule for v in validate(tree)] == ["btree-keys"]

    def test_btree_uneven_leaves(self):
        tree = BTree(3)
        deep = tree.new_node([1])
        middle = tree.new_node([2], [deep.id, tree.new_node([3]).id])
        shallow = tree.new_node([9])
        tree.root = tree.new_node([5], [middle.id, shallow.id]).id
        assert "btree-depth" in [v.rule for v in validate(tree)]

    def test_btree_unsorted_keys(self):
        tree = BTree(4)
        root = tree.new_node([1, 3])
        root.keys.reverse()
        tree.root = root.id
        assert "btree-order" in [v.rule for v in validate(tree)]

    def test_huffman_bad_frequency(self):
        tree = HuffmanNode(2, 10, left=HuffmanNode(0, 1, "a"), right=HuffmanNode(1, 2, "b"))
        assert [v.rule for v in validate(tree)] == ["huffman-frequency"]

    def test_huffman_duplicate_symbol(self):
        tree = HuffmanNode(2, 2, left=HuffmanNode(0, 1, "a"), right=HuffmanNode(1, 1, "a"))
        assert [v.rule for v in validate(tree)] == ["huffman-leaf"]

    def test_graph_dangling_edge(self):
        graph = Graph()
        graph.add_node()
        graph.edges.append(GraphEdge("E9", "N0", "N7", 1))
        violations = validate(graph)
        assert [v.rule for v in violations] == ["graph-edge"]
        assert violations[0].node_id == "E9"

    def test_failing_validator_reported(self, monkeypatch):
        """A validator that raises becomes a violation instead of an exception."""
        def explode(heap):
            raise RuntimeError("boom")

        monkeypatch.setitem(VALIDATORS, "heap", [explode])
        violations = validate(Heap("min", [1]))
        assert violations == [Violation("validator-error", "explode failed: boom")]
