"""Directed graph of packages used to plan conversion order."""

import logging
from typing import Any, Dict, Iterator, KeysView, List, Optional, Tuple

from .errors import CycleDetectedError

logger = logging.getLogger(__name__)

# top_sort marks
_VISITING = 1
_DONE = 2


def node_label(node: 'Node') -> str:
    """Human readable name for a node, falling back to its content repr."""
    name = getattr(node.content, 'name', None)
    return name if name else repr(node.content)


class Node:
    """A graph vertex wrapping arbitrary content.

    Nodes have reference identity: two nodes wrapping equal content are still
    distinct vertices. ``parent`` only remembers the source of the most recent
    edge pointing at this node, not every parent.
    """

    def __init__(self, content: Any):
        self._content = content
        # dict used as an insertion-ordered set
        self._adjacent: Dict['Node', None] = {}
        self._parent: Optional['Node'] = None

    @property
    def content(self) -> Any:
        return self._content

    @property
    def adjacent(self) -> KeysView['Node']:
        return self._adjacent.keys()

    @property
    def parent(self) -> Optional['Node']:
        return self._parent

    def set_parent(self, node: 'Node') -> None:
        self._parent = node

    def add_adjacent(self, node: 'Node') -> None:
        """Add an outgoing edge to ``node`` and make this node its parent."""
        node.set_parent(self)
        self._adjacent[node] = None

    def __eq__(self, other) -> bool:
        """Equality based on object identity for graph node sharing."""
        return self is other

    def __hash__(self) -> int:
        """Hash based on object identity for graph node sharing."""
        return id(self)

    def __repr__(self) -> str:
        return f"Node({node_label(self)!r})"


class Graph:
    """Owning collection of nodes for one analysis pass."""

    def __init__(self):
        self._nodes: Dict[Node, None] = {}

    @property
    def nodes(self) -> KeysView[Node]:
        """All nodes, in the order they were added."""
        return self._nodes.keys()

    @property
    def edges(self) -> Iterator[Tuple[Node, Node]]:
        for node in self._nodes:
            for adjacent in node.adjacent:
                yield node, adjacent

    def add_node(self, content: Any) -> Node:
        """Wrap ``content`` in a new node. Never deduplicates."""
        node = Node(content)
        self._nodes[node] = None
        return node

    def add_edge(self, source: Node, destination: Node) -> 'Graph':
        """Add ``source -> destination``. Both nodes must come from ``add_node``."""
        source.add_adjacent(destination)
        return self

    def top_sort(self, strict: bool = True) -> List[Node]:
        """Return every node with dependencies before their dependents.

        Post-order depth-first search over ``nodes`` in insertion order, so
        unrelated nodes come out in discovery order. The walk uses an explicit
        stack instead of recursion.

        Args:
            strict: Raise CycleDetectedError on a back edge. When False the
                back edge is ignored and every node is still returned once.
        """
        result: List[Node] = []
        marks: Dict[Node, int] = {}

        for start in self._nodes:
            if start in marks:
                continue

            marks[start] = _VISITING
            stack = [(start, iter(start.adjacent))]
            while stack:
                node, neighbours = stack[-1]
                for neighbour in neighbours:
                    mark = marks.get(neighbour)
                    if mark is None:
                        marks[neighbour] = _VISITING
                        stack.append((neighbour, iter(neighbour.adjacent)))
                        break
                    if mark == _VISITING:
                        if strict:
                            raise CycleDetectedError(
                                node_label(neighbour), self._cycle_path(stack, neighbour)
                            )
                        logger.debug(f"Ignoring back edge {node_label(node)} -> {node_label(neighbour)}")
                else:
                    stack.pop()
                    marks[node] = _DONE
                    result.append(node)

        return result

    @staticmethod
    def _cycle_path(stack: List[Tuple[Node, Iterator[Node]]], target: Node) -> List[str]:
        path = [frame[0] for frame in stack]
        start = next(i for i, node in enumerate(path) if node is target)
        return [node_label(node) for node in path[start:]] + [node_label(target)]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node) -> bool:
        return node in self._nodes
