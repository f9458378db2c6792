"""Lazy graph traversals starting from a single node."""

from collections import deque
from typing import Iterator, Set

from .graph import Node


def dfs(start: Node) -> Iterator[Node]:
    """Yield every node reachable from ``start`` once, depth first.

    Each node descends into its first neighbour before that neighbour's
    siblings. Visited nodes are skipped, so cycles are safe.
    """
    visited: Set[Node] = set()
    stack = [start]

    while stack:
        node = stack.pop()
        if node in visited:
            continue
        yield node
        visited.add(node)
        # Reversed so the first adjacent node is popped first
        stack.extend(reversed(list(node.adjacent)))


def bfs(start: Node) -> Iterator[Node]:
    """Yield every node reachable from ``start`` once, breadth first."""
    visited: Set[Node] = set()
    queue = deque([start])

    while queue:
        node = queue.popleft()
        if node in visited:
            continue
        yield node
        visited.add(node)
        queue.extend(node.adjacent)
