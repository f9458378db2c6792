"""Main CLI entry point for conversion-graph."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .analysis import AnalysisOptions, analyze
from .builder import DEFAULT_MAX_DEPTH
from .classifier import ConversionLevel
from .errors import ConversionGraphError
from .formatters import OUTPUT_FORMATS, OutputFormatter
from .selection import prompt_for_packages, select_by_names, split_csv
from .workspace import PackageRegistry

logger = logging.getLogger(__name__)

LOG_LEVEL_ALIASES = {
    'TRACE': 'DEBUG',
    'WARN': 'WARNING',
}


def setup_logging(verbose: bool = False, log_level: Optional[str] = None):
    """Configure logging based on verbosity flags."""
    if log_level:
        name = log_level.upper()
        level = getattr(logging, LOG_LEVEL_ALIASES.get(name, name), logging.WARNING)
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='conversion-graph',
        description='Show the order in which in-repo packages should be converted to TypeScript, leaves first'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--addons',
                        help='Comma separated names of the packages to analyze (ie. --addons global-utils,...)')
    parser.add_argument('-i', '--interactive', action='store_true',
                        help='Pick the packages to analyze from a list')
    parser.add_argument('--root', default=os.getcwd(),
                        help='Root of the repository to search for packages. Default: current directory')
    parser.add_argument('--conversion-level', default=ConversionLevel.SOURCE_ONLY.value,
                        choices=[level.value for level in ConversionLevel],
                        help='How strictly to judge conversion. Default: source-only')
    parser.add_argument('--conversion-exclusions',
                        help='Comma separated globs of files that should NOT be considered for conversion')
    parser.add_argument('--include-dupes', action='store_true',
                        help='Include duplicate entries in the output')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        help=f'Maximum depth to traverse the dependency graph. Default: {DEFAULT_MAX_DEPTH}')
    parser.add_argument('--format', dest='output_format', default='text', choices=OUTPUT_FORMATS,
                        help='Output format (text, json, csv, sbom). Default: text')
    parser.add_argument('-o', '--output', default='-',
                        help='Output file (default: stdout, use - for stdout)')
    parser.add_argument('--summary', action='store_true',
                        help='Append package counts to text output')
    parser.add_argument('--allow-cycles', dest='strict', action='store_false',
                        help='Sort cyclic graphs anyway instead of failing')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--loglevel',
                        choices=['TRACE', 'DEBUG', 'INFO', 'WARN', 'ERROR'],
                        help='Set log level')
    return parser


def handle_analyze(args) -> int:
    """Select the roots, build the graph and write the conversion plan."""
    cwd = os.getcwd()
    registry = PackageRegistry.discover(args.root)

    if args.interactive:
        roots = prompt_for_packages(registry, cwd=cwd)
    else:
        roots = select_by_names(registry, split_csv(args.addons))

    options = AnalysisOptions(
        conversion_level=ConversionLevel(args.conversion_level),
        conversion_exclusions=split_csv(args.conversion_exclusions),
        max_depth=args.max_depth,
        include_dupes=args.include_dupes,
        strict=args.strict,
        output_format=args.output_format,
        summary=args.summary,
    )
    graph, reports = analyze(roots, registry, options, cwd=cwd)

    color = args.output == '-' and sys.stdout.isatty()
    output = OutputFormatter.format(options.output_format, reports, graph,
                                    summary=options.summary, color=color)

    if args.output == '-':
        sys.stdout.write(output)
    else:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
        logger.info(f"Output written to: {args.output}")
        print(f"Output written to: {args.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.interactive and not args.addons:
        parser.error('You must specify one of the following arguments: --interactive (recommended) or --addons')
    if args.max_depth < 1:
        parser.error('--max-depth must be at least 1')

    setup_logging(args.verbose, args.loglevel)

    try:
        return handle_analyze(args)
    except ConversionGraphError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
