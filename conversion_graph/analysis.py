"""Runs the build graph -> sort -> report pipeline for a set of roots."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .builder import DEFAULT_MAX_DEPTH, TreeBuilder
from .classifier import ConversionClassifier, ConversionLevel
from .errors import NoPackagesSelectedError
from .graph import Graph
from .models import Package
from .report import ConversionReport, ReportGenerator
from .workspace import PackageRegistry

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOptions:
    """Settings for one analysis run."""

    conversion_level: ConversionLevel = ConversionLevel.SOURCE_ONLY
    conversion_exclusions: List[str] = field(default_factory=list)
    max_depth: int = DEFAULT_MAX_DEPTH
    include_dupes: bool = False
    strict: bool = True  # Fail on dependency cycles
    output_format: str = 'text'
    summary: bool = False


def analyze(
    roots: List[Package],
    registry: PackageRegistry,
    options: Optional[AnalysisOptions] = None,
    cwd: Optional[str] = None
) -> Tuple[Graph, List[ConversionReport]]:
    """Expand each root into one shared graph and report its conversion order.

    Roots are processed in order. Each report is taken right after its root
    is expanded, so it covers the whole graph built so far.
    """
    options = options or AnalysisOptions()
    if not roots:
        raise NoPackagesSelectedError()

    classifier = ConversionClassifier(options.conversion_level, options.conversion_exclusions)
    builder = TreeBuilder(registry, classifier, max_depth=options.max_depth)
    generator = ReportGenerator(include_dupes=options.include_dupes, cwd=cwd)

    graph = Graph()
    reports: List[ConversionReport] = []
    for pkg in roots:
        logger.info(f"Analyzing {pkg.name} ({pkg.path})")
        truncated_before = len(builder.truncated)
        entry = builder.add_root(pkg, graph)
        builder.build(entry, graph)

        report = generator.generate(entry, graph, strict=options.strict)
        report.truncated = len(builder.truncated) > truncated_before
        reports.append(report)

    logger.info(f"Graph has {len(graph)} nodes for {len(roots)} root packages")
    return graph, reports
