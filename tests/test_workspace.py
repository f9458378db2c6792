"""Tests for in-repo package discovery and dependency resolution."""

import os

from conftest import write_package
from conversion_graph.models import Package
from conversion_graph.workspace import PackageRegistry


class TestPackageRegistry:
    """Tests for PackageRegistry."""

    def test_discover(self, workspace):
        registry = PackageRegistry.discover(workspace)

        assert sorted(pkg.name for pkg in registry) == [
            'app', 'lib-a', 'lib-b', 'lib-c', 'monorepo', 'test-harness'
        ]
        assert registry.resolve('lib-a').path == os.path.join(str(workspace), 'lib', 'lib-a')

    def test_discover_skips_ignored_directories(self, tmp_path):
        write_package(tmp_path, 'lib/real', 'real')
        for ignored in [
            'dist', 'build', 'tmp', 'blueprints', 'tests/fixtures', 'node_modules',
            '.yarn/unplugged', '.git', '.cache',
        ]:
            write_package(tmp_path, f'{ignored}/pkg', f'ignored-{ignored.replace("/", "-")}')

        registry = PackageRegistry.discover(tmp_path)

        assert [pkg.name for pkg in registry] == ['real']

    def test_discover_skips_malformed_package_json(self, tmp_path, caplog):
        write_package(tmp_path, 'good', 'good')
        broken = tmp_path / 'broken'
        broken.mkdir()
        (broken / 'package.json').write_text('{not json')

        registry = PackageRegistry.discover(tmp_path)

        assert [pkg.name for pkg in registry] == ['good']
        assert 'Failed to read package.json' in caplog.text

    def test_explicit_dependencies(self, workspace):
        registry = PackageRegistry.discover(workspace)

        deps = registry.explicit_dependencies(registry.resolve('app'))

        # left-pad lives in node_modules, lib-b comes from ember-addon.paths
        assert [dep.name for dep in deps] == ['lib-a', 'lib-b']

    def test_excluded_packages_dropped(self, workspace):
        registry = PackageRegistry.discover(workspace)

        deps = registry.explicit_dependencies(registry.resolve('lib-a'))

        assert [dep.name for dep in deps] == ['lib-c']

    def test_dependency_order_and_duplicates(self):
        a = Package(name='a', path='/repo/a', dependencies={'b': '*'},
                    dev_dependencies={'c': '*', 'b': '*'}, addon_paths=['../c', '../missing'])
        b = Package(name='b', path='/repo/b')
        c = Package(name='c', path='/repo/c')
        registry = PackageRegistry([a, b, c])

        deps = registry.explicit_dependencies(a)

        assert [dep.name for dep in deps] == ['b', 'c', 'b', 'c']

    def test_resolve_missing(self):
        registry = PackageRegistry()

        assert registry.resolve('nope') is None
        assert registry.resolve_path(Package(name='a', path='/a'), '../b') is None
        assert 'nope' not in registry
