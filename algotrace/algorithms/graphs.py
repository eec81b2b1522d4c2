"""
Graph algorithms: Prim's minimum spanning tree, Dijkstra's shortest paths
and Kahn's topological sort.

The graph itself is never modified; each step snapshots a GraphState with
the algorithm's auxiliary collections and the trace's subject is the graph.
"""

import math
from collections import deque
from typing import Dict, List, NamedTuple, Optional

from ..errors import PreconditionError
from ..logger import init_logger
from ..models import Graph, GraphState
from ..traces import StepKind, Trace, TraceRecorder


logger = init_logger(__name__)

FAMILY = "graph"


class Candidate(NamedTuple):
    """A frontier edge in Prim's priority list."""
    source: str
    target: str
    weight: float
    edge_id: str


def _labels(graph: Graph, node_ids) -> str:
    return ", ".join(graph.label(node_id) for node_id in node_ids)


# =============================================================================
# Prim
# =============================================================================

def prim(graph: Graph) -> Trace:
    """
    Minimum spanning tree grown from the first node.

    Requires an undirected, non-empty graph. A disconnected graph ends with
    an error step naming the unreached nodes.
    """
    if graph.directed:
        raise PreconditionError("Prim requires undirected graph")
    if not graph.nodes:
        raise PreconditionError("Graph has no nodes")

    recorder = TraceRecorder(FAMILY, "prim", GraphState(), subject=graph)
    start = graph.nodes[0].id
    visited = {start}
    mst_edges: List[str] = []
    total = 0

    pq = [Candidate(start, edge.other(start), edge.weight, edge.id)
          for edge in graph.incident_edges(start)]

    def state() -> GraphState:
        return GraphState(
            visited=visited,
            mst_edges=mst_edges,
            queue=[(c.target, c.weight) for c in pq],
            total_weight=total,
        )

    recorder.record(StepKind.START, f"Start Prim from node {graph.label(start)}", state(),
                    active=[start])

    while pq and len(visited) < len(graph.nodes):
        pq.sort(key=lambda c: c.weight)
        recorder.record(StepKind.CANDIDATES, f"Priority queue has {len(pq)} candidates", state(),
                        active=[c.edge_id for c in pq])
        best = pq.pop(0)

        if best.target in visited:
            recorder.record(StepKind.SKIP,
                            f"Skip edge to {graph.label(best.target)} (already visited)",
                            state(), active=[best.edge_id])
            continue

        visited.add(best.target)
        mst_edges.append(best.edge_id)
        total += best.weight
        for edge in graph.incident_edges(best.target):
            neighbor = edge.other(best.target)
            if neighbor not in visited:
                pq.append(Candidate(best.target, neighbor, edge.weight, edge.id))

        recorder.record(
            StepKind.ADD_MST,
            f"Add edge {graph.label(best.source)} -> {graph.label(best.target)} "
            f"(weight: {best.weight}) to MST",
            state(),
            active=[best.edge_id, best.source, best.target],
        )

    pq.clear()
    if len(visited) < len(graph.nodes):
        unreached = [node_id for node_id in graph.node_ids() if node_id not in visited]
        recorder.record(StepKind.ERROR,
                        f"Graph is disconnected! Unreachable nodes: {_labels(graph, unreached)}",
                        state(), active=unreached, unreached=unreached)
    else:
        recorder.record(StepKind.COMPLETE, f"MST complete! Total weight: {total}", state(),
                        active=mst_edges, total_weight=total)

    trace = recorder.finish()
    logger.debug(f"prim: {len(trace)} steps, {len(mst_edges)} edges")
    return trace


# =============================================================================
# Dijkstra
# =============================================================================

def dijkstra(graph: Graph, start: Optional[str]) -> Trace:
    """
    Single-source shortest paths from start.

    Outgoing edges are followed in a directed graph, edges in both
    directions otherwise. Queue entries for nodes already visited are
    dropped without a step.
    """
    if start is None:
        raise PreconditionError("Select a start node")
    if not graph.has_node(start):
        raise PreconditionError(f"Unknown start node: {start}")
    if any(edge.weight < 0 for edge in graph.edges):
        raise PreconditionError("Dijkstra does not support negative weights")

    recorder = TraceRecorder(FAMILY, f"dijkstra {start}", GraphState(), subject=graph)
    distances: Dict[str, float] = {node_id: math.inf for node_id in graph.node_ids()}
    distances[start] = 0
    previous: Dict[str, Optional[str]] = {node_id: None for node_id in graph.node_ids()}
    visited = set()
    pq = [(start, 0)]

    def state() -> GraphState:
        return GraphState(visited=visited, queue=pq, distances=distances, previous=previous)

    recorder.record(StepKind.START, f"Start Dijkstra from node {graph.label(start)}", state(),
                    active=[start])

    while pq:
        pq.sort(key=lambda entry: entry[1])
        current, distance = pq.pop(0)
        if current in visited:
            continue
        visited.add(current)
        recorder.record(StepKind.VISIT,
                        f"Visit node {graph.label(current)} with distance {distance}",
                        state(), active=[current])

        for edge in graph.outgoing_edges(current):
            neighbor = edge.other(current)
            candidate = distances[current] + edge.weight
            if candidate < distances[neighbor]:
                distances[neighbor] = candidate
                previous[neighbor] = current
                pq.append((neighbor, candidate))
                recorder.record(
                    StepKind.RELAX,
                    f"Relax edge to {graph.label(neighbor)}: distance updated to {candidate}",
                    state(),
                    active=[current, neighbor, edge.id],
                )

    summary = ", ".join(f"{graph.label(n)}={_format_distance(d)}" for n, d in distances.items())
    recorder.record(StepKind.COMPLETE, f"Dijkstra complete! Distances: {summary}", state())
    trace = recorder.finish()
    logger.debug(f"dijkstra from {start}: {len(trace)} steps")
    return trace


def _format_distance(distance: float) -> str:
    return "inf" if distance == math.inf else str(distance)


def shortest_path(state: GraphState, target: str) -> List[str]:
    """Node ids from the start to target, empty when target is unreachable."""
    if state.distances.get(target, math.inf) == math.inf:
        return []
    path = [target]
    while state.previous.get(path[-1]) is not None:
        path.append(state.previous[path[-1]])
    return list(reversed(path))


# =============================================================================
# Kahn
# =============================================================================

def topological_sort(graph: Graph) -> Trace:
    """
    Kahn's algorithm.

    The initial queue holds zero in-degree nodes in node order. A cycle
    leaves nodes unprocessed and ends the trace with an error step.
    """
    if not graph.directed:
        raise PreconditionError("Topological sort requires directed graph")

    recorder = TraceRecorder(FAMILY, "topological sort", GraphState(), subject=graph)
    in_degrees: Dict[str, int] = {node_id: 0 for node_id in graph.node_ids()}
    for edge in graph.edges:
        in_degrees[edge.target] += 1
    queue = deque(node_id for node_id in graph.node_ids() if in_degrees[node_id] == 0)
    order: List[str] = []

    def state() -> GraphState:
        return GraphState(in_degrees=in_degrees, queue=queue, order=order, visited=order)

    recorder.record(StepKind.INIT, "Calculate in-degrees for all nodes", state())
    recorder.record(StepKind.QUEUE, f"Initial queue: {_labels(graph, queue) or 'empty'}", state(),
                    active=list(queue))

    while queue:
        current = queue.popleft()
        order.append(current)
        recorder.record(StepKind.PROCESS, f"Process node {graph.label(current)}, add to result",
                        state(), active=[current])
        for edge in graph.edges:
            if edge.source != current:
                continue
            in_degrees[edge.target] -= 1
            if in_degrees[edge.target] == 0:
                queue.append(edge.target)
                recorder.record(
                    StepKind.ENQUEUE,
                    f"Node {graph.label(edge.target)} in-degree became 0, add to queue",
                    state(),
                    active=[edge.target, edge.id],
                )

    if len(order) != len(graph.nodes):
        remaining = [node_id for node_id in graph.node_ids() if in_degrees[node_id] > 0]
        recorder.record(StepKind.ERROR,
                        f"Cycle detected! Remaining nodes with non-zero in-degree: "
                        f"{_labels(graph, remaining)}",
                        state(), active=remaining, remaining=remaining)
    else:
        recorder.record(StepKind.COMPLETE,
                        f"Topological sort complete: {' -> '.join(graph.label(n) for n in order)}",
                        state(), order=list(order))

    trace = recorder.finish()
    logger.debug(f"topological sort: {len(trace)} steps")
    return trace
