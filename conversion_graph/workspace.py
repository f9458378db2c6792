"""Discovery of in-repo packages and resolution of their explicit dependencies."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .models import Package

logger = logging.getLogger(__name__)

# Packages never reported as dependencies
EXCLUDED_PACKAGES = ('test-harness',)

# Directories that never contain in-repo packages
IGNORED_DIRECTORIES = frozenset({
    'build',
    'dist',
    'blueprints',
    'fixtures',
    'node_modules',
    'tmp',
})


def read_package_json(package_dir: Union[str, Path]) -> Dict:
    """Read and parse <package_dir>/package.json."""
    with open(os.path.join(package_dir, 'package.json'), 'r', encoding='utf-8') as f:
        return json.load(f)


class PackageRegistry:
    """Maps in-repo packages by name and by location.

    This is the dependency resolver used by the tree builder: it answers which
    in-repo packages a package explicitly depends on.
    """

    def __init__(self, packages: Iterable[Package] = ()):
        self.by_name: Dict[str, Package] = {}
        self.by_location: Dict[str, Package] = {}
        for pkg in packages:
            self.add(pkg)

    @classmethod
    def discover(cls, root: Union[str, Path]) -> 'PackageRegistry':
        """Find every package.json below ``root`` and register its package."""
        root = os.path.abspath(root)
        registry = cls()

        for dirpath, dirnames, filenames in os.walk(root):
            # Prune in place so os.walk never descends into ignored or dot trees
            dirnames[:] = sorted(
                d for d in dirnames if d not in IGNORED_DIRECTORIES and not d.startswith('.')
            )
            if 'package.json' not in filenames:
                continue

            try:
                data = read_package_json(dirpath)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to read package.json in {dirpath}: {e}")
                continue

            if not isinstance(data, dict) or not data.get('name'):
                logger.debug(f"Skipping unnamed package at {dirpath}")
                continue

            registry.add(Package.from_package_json(dirpath, data))

        logger.info(f"Discovered {len(registry)} packages under {root}")
        return registry

    def add(self, pkg: Package) -> None:
        location = os.path.abspath(pkg.path)
        if pkg.name in self.by_name:
            logger.debug(f"Package name {pkg.name} registered twice, keeping {location}")
        self.by_name[pkg.name] = pkg
        self.by_location[location] = pkg

    def resolve(self, name: str) -> Optional[Package]:
        """Return the in-repo package named ``name``, or None."""
        return self.by_name.get(name)

    def resolve_path(self, base: Package, relative_path: str) -> Optional[Package]:
        """Return the package at ``relative_path`` from ``base``, or None."""
        location = os.path.abspath(os.path.join(base.path, relative_path))
        return self.by_location.get(location)

    def explicit_dependencies(self, pkg: Package) -> List[Package]:
        """Return the in-repo packages ``pkg`` declares as dependencies.

        Runtime dependencies come first, then dev dependencies, then
        ember-addon paths. References outside the repo and excluded
        packages are dropped.
        """
        candidates: List[Optional[Package]] = []
        candidates.extend(self.resolve(name) for name in pkg.dependencies)
        candidates.extend(self.resolve(name) for name in pkg.dev_dependencies)
        candidates.extend(self.resolve_path(pkg, addon_path) for addon_path in pkg.addon_paths)

        explicit = [dep for dep in candidates if dep is not None and dep.name not in EXCLUDED_PACKAGES]
        logger.debug(f"{pkg.name}: {len(explicit)} in-repo dependencies out of {len(candidates)} declared")
        return explicit

    def __len__(self) -> int:
        return len(self.by_name)

    def __contains__(self, name: str) -> bool:
        return name in self.by_name

    def __iter__(self):
        return iter(self.by_name.values())
