"""Graph algorithms for locale fallback analysis.

Provides cycle detection using depth-first search for reporting loops in
fallback configuration (a -> b -> a, or a locale listing itself).

Python 3.13+.
"""

from collections.abc import Mapping, Sequence
from enum import Enum, auto

__all__ = ["detect_cycles"]


class _NodeState(Enum):
    """DFS node visitation state for iterative cycle detection."""

    ENTER = auto()  # First visit to node
    EXIT = auto()  # Returning from node (all neighbors processed)


def detect_cycles(edges: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Detect all cycles in a directed graph using iterative DFS.

    Uses an explicit stack so that long fallback chains cannot raise
    RecursionError. Neighbors are visited in listed order, so the result is
    deterministic for a given mapping.

    Args:
        edges: Mapping from node to its ordered successors.
               Example: {"pt-BR": ["pt", "en"], "pt": ["pt-BR"]}

    Returns:
        List of cycles, where each cycle is a list of nodes forming the
        cycle path and repeating the first node at the end. Empty list if
        no cycles are present.

    Example:
        >>> detect_cycles({"a": ["b"], "b": ["a"]})
        [['a', 'b', 'a']]
        >>> detect_cycles({"a": ["a"]})
        [['a', 'a']]

    Complexity:
        Time: O(V + E) where V = nodes, E = edges
        Space: O(V) for visited/recursion tracking
    """
    visited: set[str] = set()
    cycles: list[list[str]] = []
    seen_cycle_keys: set[str] = set()

    for start_node in edges:
        if start_node in visited:
            continue

        path: list[str] = []
        rec_stack: set[str] = set()

        # Stack holds (node, state, successors); successors are pushed in
        # reverse so the first listed successor is explored first.
        stack: list[tuple[str, _NodeState, Sequence[str]]] = [
            (start_node, _NodeState.ENTER, edges.get(start_node, ()))
        ]

        while stack:
            node, state, successors = stack.pop()

            if state == _NodeState.EXIT:
                if path and path[-1] == node:  # pragma: no branch
                    path.pop()
                rec_stack.discard(node)
                continue

            if node in visited:
                continue

            visited.add(node)
            rec_stack.add(node)
            path.append(node)
            stack.append((node, _NodeState.EXIT, ()))

            for successor in reversed(successors):
                if successor not in visited:
                    stack.append(
                        (successor, _NodeState.ENTER, edges.get(successor, ()))
                    )
                elif successor in rec_stack:
                    cycle_start = path.index(successor)
                    cycle = [*path[cycle_start:], successor]

                    # Same node set reported once, whichever node closed it
                    cycle_key = " -> ".join(sorted(set(cycle)))
                    if cycle_key not in seen_cycle_keys:
                        seen_cycle_keys.add(cycle_key)
                        cycles.append(cycle)

    return cycles
