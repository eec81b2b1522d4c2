"""
Session for the graph mode: editing plus Prim, Dijkstra and Kahn.
"""

import math
import random
from typing import Any, List, Optional, Tuple

from ..algorithms import graphs
from ..models import Graph, GraphEdge, GraphNode, GraphState
from ..traces import Trace
from .base import InspectorRow, Session
from .inputs import parse_number


def grid_position(index: int, columns: int = 3) -> Tuple[float, float]:
    return (150.0 + (index % columns) * 200, 100.0 + (index // columns) * 200)


class GraphSession(Session):
    """
    The graph is edited in place; algorithm traces snapshot GraphState and
    leave the graph untouched. Any edit unloads the current trace.
    """

    mode = "graph"
    validation_kind = "graph"
    clear_message = "Cleared graph"

    def __init__(self, config=None, scheduler=None):
        self.directed = False
        super().__init__(config, scheduler)

    def empty_structure(self) -> Graph:
        return Graph(directed=self.directed)

    @property
    def graph(self) -> Graph:
        return self.committed

    @property
    def structure(self) -> Graph:
        return self.committed.clone()

    @property
    def state(self) -> Optional[GraphState]:
        """Algorithm state at the controller's cursor."""
        return self.controller.materialized

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def add_node(self, label: Optional[str] = None,
                 position: Optional[Tuple[float, float]] = None) -> GraphNode:
        if position is None:
            position = grid_position(len(self.graph.nodes))
        node = self.graph.add_node(label, position)
        self._edited(f"Added node {node.label}")
        return node

    def add_edge(self, source: str, target: str, weight) -> Optional[GraphEdge]:
        weight = parse_number(weight)
        if weight is None:
            return None
        for node_id in (source, target):
            if not self.graph.has_node(node_id):
                self._error(f"Unknown node: {node_id}")
                return None
        edge = self.graph.add_edge(source, target, weight)
        arrow = "->" if self.directed else "--"
        self._edited(f"Added edge {self.graph.label(source)} {arrow} "
                     f"{self.graph.label(target)} (weight: {weight})")
        return edge

    def delete_node(self, node_id: str) -> List[GraphEdge]:
        if not self.graph.has_node(node_id):
            return []
        label = self.graph.label(node_id)
        dropped = self.graph.remove_node(node_id)
        self._edited(f"Deleted node {label}")
        return dropped

    def delete_edge(self, edge_id: str) -> Optional[GraphEdge]:
        if not any(edge.id == edge_id for edge in self.graph.edges):
            return None
        edge = self.graph.remove_edge(edge_id)
        self._edited("Deleted edge")
        return edge

    def set_directed(self, flag: bool):
        self.directed = bool(flag)
        self.graph.directed = self.directed
        self._edited(f"Graph is now {'directed' if self.directed else 'undirected'}")

    def generate_random(self, seed: Optional[int] = None, node_count: int = 6,
                        density: float = 0.4) -> Graph:
        """Replace the graph with a seeded random one on a grid layout."""
        rng = random.Random(seed)
        graph = Graph(directed=self.directed)
        for index in range(node_count):
            graph.add_node(position=grid_position(index))
        for i in range(node_count):
            for j in range(i + 1, node_count):
                if rng.random() < density:
                    graph.add_edge(f"N{i}", f"N{j}", rng.randint(1, 10))
        self.committed = graph
        self._edited(f"Generated random graph with {node_count} nodes")
        return graph

    def _edited(self, event: str):
        self.controller.clear()
        self.events.add(event)

    # -------------------------------------------------------------------------
    # Algorithms
    # -------------------------------------------------------------------------

    def run_prim(self) -> Optional[Trace]:
        return self._run(graphs.prim, "Running Prim's algorithm")

    def run_dijkstra(self, start: Optional[str]) -> Optional[Trace]:
        return self._run(graphs.dijkstra, "Running Dijkstra's algorithm", start)

    def run_topological_sort(self) -> Optional[Trace]:
        return self._run(graphs.topological_sort, "Running Topological Sort (Kahn's algorithm)")

    def shortest_path(self, target: str) -> List[str]:
        """Path to target under the state at the cursor of a Dijkstra trace."""
        state = self.state
        if state is None:
            return []
        return graphs.shortest_path(state, target)

    def _run(self, algorithm, event: str, *args: Any) -> Optional[Trace]:
        trace = self._attempt(algorithm, self.graph, *args)
        if trace is not None:
            self.controller.load(trace)
            self.events.add(event)
        return trace

    def inspect(self, node_id: Any) -> List[InspectorRow]:
        state = self.state
        if self.graph.has_node(node_id):
            rows = [
                InspectorRow("Node ID", node_id),
                InspectorRow("Label", self.graph.label(node_id)),
            ]
            if state is not None and state.distances:
                distance = state.distances.get(node_id, math.inf)
                rows.append(InspectorRow("Distance", "inf" if distance == math.inf else distance))
            if state is not None and state.in_degrees:
                rows.append(InspectorRow("In-Degree", state.in_degrees.get(node_id, 0)))
            return rows
        for edge in self.graph.edges:
            if edge.id == node_id:
                return [
                    InspectorRow("From", edge.source),
                    InspectorRow("To", edge.target),
                    InspectorRow("Weight", edge.weight),
                ]
        return []
