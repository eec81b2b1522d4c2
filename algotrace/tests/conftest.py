"""
Shared fixtures for algotrace tests.
"""

import pytest

from algotrace.algorithms import bst
from algotrace.models import BinaryTree, Graph
from algotrace.replay import ReplayController, VirtualScheduler


@pytest.fixture
def scheduler():
    """Virtual scheduler; time only moves when a test advances it."""
    return VirtualScheduler()


@pytest.fixture
def controller(scheduler):
    return ReplayController(scheduler)


@pytest.fixture
def bst_trace():
    """Insert 20 into [50, 30, 70]: two compares, insert, complete."""
    return bst.insert(BinaryTree.from_values([50, 30, 70]), 20)


@pytest.fixture
def square_graph():
    """
    Undirected 4-cycle with one chord:

        N0 -1- N1
        |  \\    |
        4   5   2
        |     \\ |
        N3 -3- N2
    """
    graph = Graph()
    for _ in range(4):
        graph.add_node()
    graph.add_edge("N0", "N1", 1)
    graph.add_edge("N1", "N2", 2)
    graph.add_edge("N2", "N3", 3)
    graph.add_edge("N3", "N0", 4)
    graph.add_edge("N0", "N2", 5)
    return graph


@pytest.fixture
def dag():
    """Diamond DAG: N0 -> N1, N0 -> N2, N1 -> N3, N2 -> N3."""
    graph = Graph(directed=True)
    for _ in range(4):
        graph.add_node()
    graph.add_edge("N0", "N1", 1)
    graph.add_edge("N0", "N2", 1)
    graph.add_edge("N1", "N3", 1)
    graph.add_edge("N2", "N3", 1)
    return graph


@pytest.fixture
def clrs_frequencies():
    """Frequency table where f gets a 1-bit code and a gets one of the longest."""
    return {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45}
