"""
Assertion Handler Registry

Maps scenario assertion types to their evaluation functions.
"""

import math
from typing import TYPE_CHECKING, Any, Callable, Dict

from ..algorithms import huffman
from ..models import BTree, BinaryTree, Heap

if TYPE_CHECKING:
    from .evaluator import ScenarioState


# Type for assertion handlers
# Handler(assertion_params, scenario_state) -> (passed, message)
AssertionHandler = Callable[[Dict[str, Any], "ScenarioState"], tuple]


# Global registry of assertion handlers
ASSERTION_HANDLERS: Dict[str, AssertionHandler] = {}


def register_assertion_handler(assertion_type: str):
    """
    Decorator to register an assertion handler.

    Usage:
        @register_assertion_handler("heap_array")
        def check_heap_array(params, state):
            ...
            return (True, "Heap matches")
    """
    def decorator(func: AssertionHandler) -> AssertionHandler:
        ASSERTION_HANDLERS[assertion_type] = func
        return func
    return decorator


def _parse_distance(value: Any) -> float:
    if isinstance(value, str) and value.lower() in ("inf", "infinity"):
        return math.inf
    return float(value)


# =============================================================================
# Structure Assertions
# =============================================================================

@register_assertion_handler("no_violations")
def check_no_violations(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """Validator reports nothing for the committed structure."""
    violations = state.violations()
    if violations:
        return (False, "; ".join(str(v) for v in violations))
    return (True, "No invariant violations")


@register_assertion_handler("inorder")
def check_inorder(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: List of values in sorted traversal order
    """
    structure = state.committed
    if isinstance(structure, BinaryTree):
        actual = structure.inorder()
    elif isinstance(structure, BTree):
        actual = structure.keys_inorder()
    else:
        return (False, f"No in-order traversal for {type(structure).__name__}")
    expected = list(params.get("expected", []))
    if actual == expected:
        return (True, f"In-order {actual}")
    return (False, f"Expected in-order {expected}, got {actual}")


@register_assertion_handler("root_keys")
def check_root_keys(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: Keys of the root node (a single value for binary trees)
    """
    structure = state.committed
    if structure is None or structure.root is None:
        actual = []
    elif isinstance(structure, BTree):
        actual = list(structure.nodes[structure.root].keys)
    else:
        actual = [structure.nodes[structure.root].value]
    expected = params.get("expected", [])
    if not isinstance(expected, list):
        expected = [expected]
    if actual == expected:
        return (True, f"Root keys {actual}")
    return (False, f"Expected root keys {expected}, got {actual}")


@register_assertion_handler("heap_array")
def check_heap_array(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: Array contents in index order
    """
    structure = state.committed
    if not isinstance(structure, Heap):
        return (False, f"Not a heap: {type(structure).__name__}")
    expected = list(params.get("expected", []))
    if structure.to_list() == expected:
        return (True, f"Heap array {expected}")
    return (False, f"Expected heap array {expected}, got {structure.to_list()}")


@register_assertion_handler("rotation_count")
def check_rotation_count(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: Total rotations across the session
    """
    actual = getattr(state.session, "rotation_count", None)
    if actual is None:
        return (False, "Session does not count rotations")
    expected = int(params.get("expected", 0))
    if actual == expected:
        return (True, f"{actual} rotations")
    return (False, f"Expected {expected} rotations, got {actual}")


# =============================================================================
# Huffman Assertions
# =============================================================================

@register_assertion_handler("codes_prefix_free")
def check_codes_prefix_free(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        kraft: Also require the Kraft sum to equal exactly 1
    """
    codes = state.session.codes
    if not codes:
        return (False, "No code table")
    if not huffman.is_prefix_free(codes):
        return (False, f"Codes are not prefix-free: {codes}")
    if params.get("kraft"):
        total = huffman.kraft_sum(codes)
        if total != 1:
            return (False, f"Kraft sum is {total}, expected 1")
    return (True, f"{len(codes)} prefix-free codes")


@register_assertion_handler("code_length")
def check_code_length(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        symbol: Symbol to check
        length: Exact expected code length (optional)
        shortest: Require the symbol to have a shortest code (optional)
        longest: Require the symbol to have a longest code (optional)
    """
    codes = state.session.codes
    symbol = str(params["symbol"])
    if symbol not in codes:
        return (False, f"No code for {symbol!r}")
    length = len(codes[symbol])
    lengths = [len(code) for code in codes.values()]

    if "length" in params and length != int(params["length"]):
        return (False, f"Code for {symbol!r} has length {length}, expected {params['length']}")
    if params.get("shortest") and length != min(lengths):
        return (False, f"Code for {symbol!r} ({length} bits) is not the shortest")
    if params.get("longest") and length != max(lengths):
        return (False, f"Code for {symbol!r} ({length} bits) is not the longest")
    return (True, f"Code for {symbol!r} is {codes[symbol]}")


# =============================================================================
# Graph Assertions
# =============================================================================

@register_assertion_handler("distances")
def check_distances(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: Mapping of node id to final distance ("inf" when unreachable)
    """
    final = state.require_trace().final
    expected = {node: _parse_distance(d) for node, d in (params.get("expected") or {}).items()}
    mismatched = {
        node: (distance, final.distances.get(node))
        for node, distance in expected.items()
        if final.distances.get(node) != distance
    }
    if mismatched:
        return (False, f"Distance mismatches (expected, actual): {mismatched}")
    return (True, f"{len(expected)} distances match")


@register_assertion_handler("mst_total_weight")
def check_mst_total_weight(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: Total weight of the spanning tree
        edges: Number of tree edges (optional)
    """
    final = state.require_trace().final
    if final.total_weight is None:
        return (False, "Last trace is not a spanning tree run")
    if "edges" in params and len(final.mst_edges) != int(params["edges"]):
        return (False, f"Expected {params['edges']} tree edges, got {len(final.mst_edges)}")
    expected = float(params.get("expected", 0))
    if final.total_weight == expected:
        return (True, f"Spanning tree weight {final.total_weight}")
    return (False, f"Expected spanning tree weight {expected}, got {final.total_weight}")


@register_assertion_handler("topological_order_valid")
def check_topological_order(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expect_cycle: The sort is expected to report a cycle instead
    """
    trace = state.require_trace()
    graph = trace.subject
    if params.get("expect_cycle"):
        if trace.succeeded:
            return (False, "Expected a cycle to be detected")
        return (True, trace.last_step.description)

    if not trace.succeeded:
        return (False, trace.last_step.description)
    order = list(trace.final.order)
    if sorted(order) != sorted(graph.node_ids()):
        return (False, f"Order {order} does not cover every node")
    position = {node_id: index for index, node_id in enumerate(order)}
    for edge in graph.edges:
        if position[edge.source] >= position[edge.target]:
            return (False, f"Edge {edge.source} -> {edge.target} violated by order {order}")
    return (True, f"Valid order {order}")


# =============================================================================
# Trace and Event Assertions
# =============================================================================

@register_assertion_handler("final_step_kind")
def check_final_step_kind(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        expected: Step kind value of the last step, e.g. "complete" or "error"
    """
    step = state.require_trace().last_step
    expected = params.get("expected", "complete")
    actual = step.kind.value if step is not None else None
    if actual == expected:
        return (True, f"Last step is {actual}: {step.description}")
    return (False, f"Expected last step {expected}, got {actual}")


@register_assertion_handler("event_logged")
def check_event_logged(params: Dict[str, Any], state: "ScenarioState") -> tuple:
    """
    Params:
        text: Substring that some event log line must contain
    """
    text = str(params.get("text", ""))
    for entry in state.events:
        if text in entry:
            return (True, f"Logged: {entry}")
    return (False, f"No event containing {text!r}")
