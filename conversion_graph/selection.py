"""Selection of the root packages to analyze."""

import logging
import os
from typing import Callable, Iterable, List, Optional

from rich.console import Console
from rich.table import Table

from .errors import NoPackagesSelectedError, PackageNotFoundError
from .models import Package
from .workspace import PackageRegistry

logger = logging.getLogger(__name__)


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma separated option value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def select_by_names(registry: PackageRegistry, names: Iterable[str]) -> List[Package]:
    """Look up root packages by name, in the order given."""
    names = list(names)
    missing = [name for name in names if name not in registry]
    if missing:
        raise PackageNotFoundError(missing)

    selected = [registry.resolve(name) for name in names]
    if not selected:
        raise NoPackagesSelectedError()
    return selected


def prompt_for_packages(
    registry: PackageRegistry,
    cwd: Optional[str] = None,
    input_fn: Callable[[str], str] = input,
    console: Optional[Console] = None
) -> List[Package]:
    """Ask the user to pick root packages from the discovered ones.

    Accepts comma separated list numbers or package names. An empty answer,
    EOF or Ctrl-C selects nothing.
    """
    cwd = cwd or os.getcwd()
    console = console or Console(stderr=True)
    choices = sorted(registry, key=lambda pkg: pkg.name)
    if not choices:
        raise NoPackagesSelectedError("No packages found in the workspace")

    table = Table(title="Packages", show_lines=False)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Path", style="dim")
    for idx, pkg in enumerate(choices, start=1):
        table.add_row(str(idx), pkg.name, pkg.kind.value, os.path.relpath(pkg.path, cwd))
    console.print(table)

    try:
        answer = input_fn("Packages to analyze (numbers or names, comma separated): ")
    except (EOFError, KeyboardInterrupt):
        console.print()
        answer = ''

    selected: List[Package] = []
    unknown: List[str] = []
    for token in split_csv(answer):
        pkg = None
        if token.isdigit() and 1 <= int(token) <= len(choices):
            pkg = choices[int(token) - 1]
        else:
            pkg = registry.resolve(token)

        if pkg is None:
            unknown.append(token)
        elif pkg not in selected:
            selected.append(pkg)

    if unknown:
        raise PackageNotFoundError(unknown)
    if not selected:
        raise NoPackagesSelectedError("You haven't selected any packages")

    logger.info(f"Selected {', '.join(pkg.name for pkg in selected)}")
    return selected
