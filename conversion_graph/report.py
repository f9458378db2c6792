"""Turns a conversion graph into an ordered, duplicate-aware task list."""

import logging
import os
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Set

from .graph import Graph, Node

logger = logging.getLogger(__name__)


@dataclass
class ReportEntry:
    """One line of the conversion plan."""

    task_number: int
    name: str
    path: str  # Relative to the working directory, ./ prefixed
    parent_name: Optional[str]  # Last recorded parent only; None for entry nodes
    converted: bool
    duplicate: bool = False
    kind: str = "package"
    purl: Optional[str] = None


@dataclass
class ConversionReport:
    """The conversion order for one entry package."""

    entry_name: str
    entries: List[ReportEntry] = field(default_factory=list)
    truncated: bool = False  # True if expansion stopped at max depth

    @property
    def total(self) -> int:
        return sum(1 for entry in self.entries if not entry.duplicate)

    @property
    def converted(self) -> int:
        return sum(1 for entry in self.entries if entry.converted and not entry.duplicate)

    @property
    def unconverted(self) -> int:
        return self.total - self.converted

    @property
    def duplicates(self) -> int:
        return sum(1 for entry in self.entries if entry.duplicate)

    @property
    def by_kind(self) -> Dict[str, int]:
        return dict(Counter(entry.kind for entry in self.entries if not entry.duplicate))

    def summary(self) -> Dict[str, object]:
        return {
            'total': self.total,
            'converted': self.converted,
            'unconverted': self.unconverted,
            'duplicates': self.duplicates,
            'by_kind': self.by_kind,
            'truncated': self.truncated,
        }

    def to_dict(self) -> Dict[str, object]:
        return {
            'entry': self.entry_name,
            'tasks': [asdict(entry) for entry in self.entries],
            'summary': self.summary(),
        }


class ReportGenerator:
    """Walks the topological order and numbers each package once.

    A package reached through several parents shows up as several nodes.
    Only the first is reported unless ``include_dupes`` is set, in which case
    later ones are listed too (and numbered) with the duplicate flag.
    """

    def __init__(self, include_dupes: bool = False, cwd: Optional[str] = None):
        self.include_dupes = include_dupes
        self.cwd = cwd or os.getcwd()

    def generate(self, entry: Node, graph: Graph, strict: bool = True) -> ConversionReport:
        sorted_nodes = graph.top_sort(strict=strict)
        report = ConversionReport(entry_name=entry.content.package.name if entry else '')
        reported: Set[str] = set()
        task_number = 1

        for node in sorted_nodes:
            pkg = node.content.package
            duplicate = pkg.name in reported

            if duplicate and not self.include_dupes:
                logger.debug(f"Suppressing duplicate {pkg.name}")
                continue

            report.entries.append(ReportEntry(
                task_number=task_number,
                name=pkg.name,
                path=self._relative_path(pkg.path),
                parent_name=self._parent_name(node),
                converted=node.content.converted,
                duplicate=duplicate,
                kind=pkg.kind.value,
                purl=pkg.purl,
            ))
            task_number += 1
            reported.add(pkg.name)

        logger.info(
            f"Conversion plan for {report.entry_name}: {report.total} packages, "
            f"{report.converted} converted, {report.duplicates} duplicates shown"
        )
        return report

    def _relative_path(self, path: str) -> str:
        relative = os.path.relpath(path, self.cwd).replace(os.sep, '/')
        if relative == '.':
            return './'
        if relative.startswith('..'):
            return relative
        return f"./{relative}"

    @staticmethod
    def _parent_name(node: Node) -> Optional[str]:
        if node.parent is None:
            return None
        return node.parent.content.package.name
