"""Exceptions raised by conversion-graph."""

from typing import Iterable, List, Optional


class ConversionGraphError(Exception):
    """Base class for errors reported to the user."""


class CycleDetectedError(ConversionGraphError):
    """Raised by a strict topological sort when the graph is not acyclic."""

    def __init__(self, node_name: str, cycle: Optional[List[str]] = None):
        self.node_name = node_name
        self.cycle = cycle or []
        message = f"Dependency cycle detected at {node_name}"
        if self.cycle:
            message += f": {' -> '.join(self.cycle)}"
        super().__init__(message)


class NoPackagesSelectedError(ConversionGraphError):
    """Raised when no root packages were selected."""

    def __init__(self, message: str = "No packages selected"):
        super().__init__(message)


class PackageNotFoundError(ConversionGraphError):
    """Raised when requested root packages are not part of the workspace."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(f"Unknown package(s): {', '.join(self.names)}")
