"""Builds the conversion graph by expanding explicit dependencies."""

import logging
from typing import Callable, Iterator, List, Optional, Protocol, Tuple

from .graph import Graph, Node
from .models import NodeContent, Package

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100


class DependencyResolver(Protocol):
    def explicit_dependencies(self, pkg: Package) -> List[Package]:
        ...


class TreeBuilder:
    """Expands a root node's explicit dependencies into graph edges.

    Every dependency encountered gets a new node, even when the same package
    was already reached through another parent. Duplicates are collapsed by
    the report, not here. Expansion stops ``max_depth`` edges away from the
    root.
    """

    def __init__(
        self,
        resolver: DependencyResolver,
        classifier: Callable[[Package], bool],
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        self.resolver = resolver
        self.classifier = classifier
        self.max_depth = max_depth
        self.truncated: List[Node] = []

    def add_root(self, pkg: Package, graph: Graph) -> Node:
        """Classify ``pkg`` and add it to ``graph`` as an entry node."""
        return graph.add_node(NodeContent(package=pkg, converted=self.classifier(pkg)))

    def build(self, entry: Node, graph: Graph, depth: int = 1) -> Graph:
        """Expand ``entry`` into ``graph`` depth first.

        The walk keeps its own stack of frames so deep chains do not hit the
        recursion limit. Nodes are created in the same order a recursive
        expansion would create them.
        """
        stack: List[Tuple[Node, int, Iterator[Package]]] = [
            (entry, depth, self._dependencies_of(entry))
        ]
        truncated_before = len(self.truncated)

        while stack:
            current, current_depth, pending = stack[-1]
            pkg: Optional[Package] = next(pending, None)
            if pkg is None:
                stack.pop()
                continue

            dep_node = graph.add_node(NodeContent(package=pkg, converted=self.classifier(pkg)))
            graph.add_edge(current, dep_node)

            if current_depth < self.max_depth:
                stack.append((dep_node, current_depth + 1, self._dependencies_of(dep_node)))
            elif self.resolver.explicit_dependencies(pkg):
                self.truncated.append(dep_node)
                logger.debug(f"Max depth {self.max_depth} reached at {pkg.name}")

        truncated = len(self.truncated) - truncated_before
        if truncated:
            logger.warning(
                f"Stopped expanding {truncated} branches at max depth {self.max_depth}; "
                f"leaf packages may be missing. Increase --max-depth to see them."
            )
        return graph

    def _dependencies_of(self, node: Node) -> Iterator[Package]:
        return iter(self.resolver.explicit_dependencies(node.content.package))
