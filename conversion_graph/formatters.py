"""Output formatters for conversion reports."""

import csv
import io
import json
import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Set
from uuid import uuid4

from cyclonedx.model import Property
from cyclonedx.model.bom import Bom
from cyclonedx.model.component import Component, ComponentType
from cyclonedx.output.json import JsonV1Dot6
from packageurl import PackageURL
from rich.console import Console
from rich.text import Text

from .graph import Graph
from .report import ConversionReport, ReportEntry

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ('text', 'json', 'csv', 'sbom')

CSV_FIELDS = ['entry', 'task_number', 'name', 'path', 'parent_name', 'converted', 'duplicate', 'kind', 'purl']


class OutputFormatter:
    """Formatter for the supported output formats."""

    @staticmethod
    def format(fmt: str, reports: List[ConversionReport], graph: Graph,
               summary: bool = False, color: bool = False) -> str:
        if fmt == 'json':
            return OutputFormatter.format_as_json(reports)
        if fmt == 'csv':
            return OutputFormatter.format_as_csv(reports)
        if fmt == 'sbom':
            return OutputFormatter.format_as_sbom(reports, graph)
        if fmt == 'text':
            return OutputFormatter.format_as_text(reports, summary=summary, color=color)
        raise ValueError(f"Unknown output format: {fmt}")

    @staticmethod
    def format_as_text(reports: List[ConversionReport], summary: bool = False, color: bool = False) -> str:
        """Format reports as a numbered task list, green for converted, red otherwise."""
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            force_terminal=color,
            color_system="standard" if color else None,
            no_color=not color,
            highlight=False,
            soft_wrap=True,
        )

        for report in reports:
            heading = Text("Order of conversion for ")
            heading.append(report.entry_name, style="bold")
            heading.append(". ")
            heading.append("RED", style="red")
            heading.append(": need conversion. ")
            heading.append("GREEN", style="green")
            heading.append(": has been converted (according to conversion level)")
            console.print(heading)

            for entry in report.entries:
                console.print(OutputFormatter._entry_line(entry))

            if summary:
                console.print(OutputFormatter._summary_text(report))

        return buffer.getvalue()

    @staticmethod
    def _entry_line(entry: ReportEntry) -> Text:
        status_style = "green" if entry.converted else "red"
        parent = entry.parent_name if entry.parent_name is not None else "(none)"

        line = Text(f"{entry.task_number}. {entry.name} ({entry.path})", style=status_style)
        line.append(f" parent: {parent}", style="white")
        if entry.duplicate:
            line.append(" ")
            line.append("DUPLICATE", style="bold blue")
        return line

    @staticmethod
    def _summary_text(report: ConversionReport) -> Text:
        lines = [
            "",
            "Summary:",
            f"  Total Packages: {report.total}",
            f"  Converted: {report.converted}",
            f"  Need Conversion: {report.unconverted}",
        ]
        if report.duplicates:
            lines.append(f"  Duplicates Shown: {report.duplicates}")
        for kind, count in sorted(report.by_kind.items()):
            lines.append(f"  {kind.capitalize()}s: {count}")
        if report.truncated:
            lines.append("  Max depth reached; increase --max-depth to find every leaf package.")
        else:
            lines.append("  All leaf packages found.")
        return Text('\n'.join(lines))

    @staticmethod
    def format_as_json(reports: List[ConversionReport]) -> str:
        return json.dumps([report.to_dict() for report in reports], indent=2) + '\n'

    @staticmethod
    def format_as_csv(reports: List[ConversionReport]) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, lineterminator='\n')
        writer.writeheader()
        for report in reports:
            for entry in report.entries:
                writer.writerow({
                    'entry': report.entry_name,
                    'task_number': entry.task_number,
                    'name': entry.name,
                    'path': entry.path,
                    'parent_name': entry.parent_name or '',
                    'converted': str(entry.converted).lower(),
                    'duplicate': str(entry.duplicate).lower(),
                    'kind': entry.kind,
                    'purl': entry.purl or '',
                })
        return buffer.getvalue()

    @staticmethod
    def format_as_sbom(reports: List[ConversionReport], graph: Graph) -> str:
        """Generate a CycloneDX SBOM in JSON format listing every reported package."""
        from . import __version__

        bom = Bom()
        bom.serial_number = uuid4()

        tool_purl = PackageURL(type='pypi', name='conversion-graph', version=__version__)
        tool_component = Component(
            name="conversion-graph",
            version=__version__,
            type=ComponentType.APPLICATION,
            purl=tool_purl,
            bom_ref=tool_purl.to_string(),
        )
        bom.metadata.tools.components.add(tool_component)
        bom.metadata.timestamp = datetime.now(timezone.utc).replace(microsecond=0)

        # First occurrence of each package wins, across all reports
        seen: Set[str] = set()
        for report in reports:
            for entry in report.entries:
                if entry.duplicate or not entry.purl or entry.purl in seen:
                    continue
                seen.add(entry.purl)
                bom.components.add(OutputFormatter._entry_to_component(entry, report.entry_name))

        sbom = json.loads(JsonV1Dot6(bom).output_as_string())

        dependency_map = OutputFormatter._build_dependency_map(graph)
        dependencies = []
        for purl in sorted(seen):
            depends_on = sorted(dep for dep in dependency_map.get(purl, set()) if dep in seen)
            dependencies.append({'ref': purl, 'dependsOn': depends_on})
        sbom['dependencies'] = dependencies

        # Sort components by purl for consistent ordering
        sbom['components'] = sorted(sbom.get('components', []), key=lambda c: c.get('purl', ''))

        # Normalize timestamp to UTC with Z suffix
        metadata = sbom.get('metadata', {})
        if 'timestamp' in metadata:
            match = re.match(r'(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})', metadata['timestamp'])
            if match:
                metadata['timestamp'] = match.group(1) + 'Z'

        return json.dumps(sbom, indent=2) + '\n'

    @staticmethod
    def _entry_to_component(entry: ReportEntry, entry_name: str) -> Component:
        """Convert a report entry to a CycloneDX Component."""
        purl = PackageURL.from_string(entry.purl)
        properties = [
            Property(name='conversion:status', value='converted' if entry.converted else 'pending'),
            Property(name='conversion:task', value=f"{entry_name}#{entry.task_number}"),
            Property(name='conversion:kind', value=entry.kind),
            Property(name='conversion:path', value=entry.path),
        ]
        return Component(
            name=purl.name,
            version=purl.version,
            group=purl.namespace,
            type=ComponentType.LIBRARY,
            purl=purl,
            bom_ref=entry.purl,
            properties=properties,
        )

    @staticmethod
    def _build_dependency_map(graph: Graph) -> Dict[str, Set[str]]:
        """Map purl -> purls of its direct dependencies, merged across duplicate nodes."""
        dependency_map: Dict[str, Set[str]] = {}
        for source, destination in graph.edges:
            source_purl = source.content.package.purl
            dependency_map.setdefault(source_purl, set()).add(destination.content.package.purl)
        return dependency_map
