"""Shared fixtures for conversion-graph tests."""

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from conversion_graph.models import NodeContent, Package


def create_node_content(name: str = 'some-name', converted: bool = False) -> NodeContent:
    """NodeContent for a package with no dependencies."""
    return NodeContent(package=Package(name=name, path='./'), converted=converted)


def write_package(
    root: Path,
    relative_dir: str,
    name: str,
    dependencies: Optional[Dict[str, str]] = None,
    dev_dependencies: Optional[Dict[str, str]] = None,
    addon_paths: Optional[List[str]] = None,
    keywords: Optional[List[str]] = None,
    files: Optional[Dict[str, str]] = None,
) -> Path:
    """Write a package.json (and optional extra files) under root/relative_dir."""
    package_dir = root / relative_dir
    package_dir.mkdir(parents=True, exist_ok=True)

    data = {'name': name, 'version': '1.0.0'}
    if dependencies:
        data['dependencies'] = dependencies
    if dev_dependencies:
        data['devDependencies'] = dev_dependencies
    if keywords:
        data['keywords'] = keywords
    if addon_paths is not None:
        data['ember-addon'] = {'paths': addon_paths}
    (package_dir / 'package.json').write_text(json.dumps(data))

    for relative_file, content in (files or {}).items():
        path = package_dir / relative_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    return package_dir


@pytest.fixture
def workspace(tmp_path):
    """A small repo: app -> (lib-a, lib-b), lib-a -> lib-c, lib-b -> lib-c.

    lib-c and lib-b are converted; app and lib-a are not.
    """
    write_package(tmp_path, '.', 'monorepo')
    write_package(
        tmp_path, 'app', 'app',
        dependencies={'lib-a': '*', 'left-pad': '^1.0.0'},
        addon_paths=['../lib/lib-b'],
        files={'app/app.js': ''},
    )
    write_package(
        tmp_path, 'lib/lib-a', 'lib-a',
        dev_dependencies={'lib-c': '*', 'test-harness': '*'},
        keywords=['ember-addon'],
        files={'tsconfig.json': '{}', 'addon/index.js': ''},
    )
    write_package(
        tmp_path, 'lib/lib-b', 'lib-b',
        dependencies={'lib-c': '*'},
        keywords=['ember-addon', 'ember-engine'],
        files={'tsconfig.json': '{}', 'addon/index.ts': ''},
    )
    write_package(
        tmp_path, 'lib/lib-c', 'lib-c',
        keywords=['ember-addon'],
        files={'tsconfig.json': '{}', 'addon/index.ts': '', 'index.js': ''},
    )
    write_package(tmp_path, 'lib/test-harness', 'test-harness')
    write_package(tmp_path, 'node_modules/left-pad', 'left-pad')
    return tmp_path
