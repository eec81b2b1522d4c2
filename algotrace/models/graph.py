"""
Weighted graph model and the auxiliary state snapshots of graph algorithms.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class GraphNode:
    """A graph node. Position is layout data and is never read by algorithms."""
    id: str
    label: str
    position: Tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class GraphEdge:
    """An edge from source to target. Direction only matters in a directed graph."""
    id: str
    source: str
    target: str
    weight: float

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def other(self, node_id: str) -> str:
        return self.target if self.source == node_id else self.source


class Graph:
    """Ordered node and edge lists with a graph-wide directed flag."""

    def __init__(self, directed: bool = False):
        self.directed = directed
        self.nodes: List[GraphNode] = []
        self.edges: List[GraphEdge] = []
        self._node_counter = 0
        self._edge_counter = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        kind = "directed" if self.directed else "undirected"
        return f"Graph({kind}, nodes={len(self.nodes)}, edges={len(self.edges)})"

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def add_node(self, label: Optional[str] = None,
                 position: Tuple[float, float] = (0.0, 0.0)) -> GraphNode:
        index = self._node_counter
        self._node_counter += 1
        node = GraphNode(
            id=f"N{index}",
            label=label if label is not None else str(index),
            position=tuple(position),
        )
        self.nodes.append(node)
        return node

    def add_edge(self, source: str, target: str, weight: float) -> GraphEdge:
        for node_id in (source, target):
            if not self.has_node(node_id):
                raise ValueError(f"Unknown node: {node_id}")
        edge = GraphEdge(id=f"E{self._edge_counter}", source=source, target=target, weight=weight)
        self._edge_counter += 1
        self.edges.append(edge)
        return edge

    def remove_node(self, node_id: str) -> List[GraphEdge]:
        """Remove a node and return the incident edges dropped with it."""
        self.node(node_id)
        self.nodes = [n for n in self.nodes if n.id != node_id]
        dropped = [e for e in self.edges if e.touches(node_id)]
        self.edges = [e for e in self.edges if not e.touches(node_id)]
        return dropped

    def remove_edge(self, edge_id: str) -> GraphEdge:
        edge = self.edge(edge_id)
        self.edges = [e for e in self.edges if e.id != edge_id]
        return edge

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has_node(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)

    def node(self, node_id: str) -> GraphNode:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise ValueError(f"Unknown node: {node_id}")

    def edge(self, edge_id: str) -> GraphEdge:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise ValueError(f"Unknown edge: {edge_id}")

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def label(self, node_id: str) -> str:
        return self.node(node_id).label

    def incident_edges(self, node_id: str) -> List[GraphEdge]:
        """Edges touching node_id in either direction."""
        return [e for e in self.edges if e.touches(node_id)]

    def outgoing_edges(self, node_id: str) -> List[GraphEdge]:
        """Edges leaving node_id, respecting the directed flag."""
        if self.directed:
            return [e for e in self.edges if e.source == node_id]
        return self.incident_edges(node_id)

    def clone(self) -> "Graph":
        copy = Graph(self.directed)
        copy.nodes = list(self.nodes)
        copy.edges = list(self.edges)
        copy._node_counter = self._node_counter
        copy._edge_counter = self._edge_counter
        return copy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directed": self.directed,
            "nodes": [{"id": n.id, "label": n.label} for n in self.nodes],
            "edges": [
                {"id": e.id, "from": e.source, "to": e.target, "weight": e.weight}
                for e in self.edges
            ],
        }


def _readonly(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class GraphState:
    """
    Auxiliary collections of a graph algorithm at one step.

    Prim fills visited, mst_edges, queue (node, weight) and total_weight;
    Dijkstra fills visited, distances, previous and queue (node, distance);
    Kahn fills in_degrees, queue (node ids) and order.
    """
    visited: FrozenSet[str] = frozenset()
    mst_edges: Tuple[str, ...] = ()
    queue: Tuple[Any, ...] = ()
    distances: Mapping[str, float] = field(default_factory=dict)
    previous: Mapping[str, Optional[str]] = field(default_factory=dict)
    in_degrees: Mapping[str, int] = field(default_factory=dict)
    order: Tuple[str, ...] = ()
    total_weight: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "visited", frozenset(self.visited))
        object.__setattr__(self, "mst_edges", tuple(self.mst_edges))
        object.__setattr__(self, "queue", tuple(self.queue))
        object.__setattr__(self, "order", tuple(self.order))
        object.__setattr__(self, "distances", _readonly(self.distances))
        object.__setattr__(self, "previous", _readonly(self.previous))
        object.__setattr__(self, "in_degrees", _readonly(self.in_degrees))

    def clone(self) -> "GraphState":
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visited": sorted(self.visited),
            "mst_edges": list(self.mst_edges),
            "queue": list(self.queue),
            "distances": dict(self.distances),
            "previous": dict(self.previous),
            "in_degrees": dict(self.in_degrees),
            "order": list(self.order),
            "total_weight": self.total_weight,
        }
