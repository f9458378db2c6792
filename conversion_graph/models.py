"""Core data models for conversion-graph."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from packageurl import PackageURL


class PackageKind(str, Enum):
    """What kind of package a package.json describes."""

    ADDON = "addon"
    ENGINE = "engine"
    APP = "app"
    PACKAGE = "package"


@dataclass
class Package:
    """Represents an in-repo package as declared by its package.json."""

    name: str
    path: str  # Absolute path to the package directory
    version: str = "0.0.0"
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    addon_paths: List[str] = field(default_factory=list)  # ember-addon.paths, relative to path
    keywords: List[str] = field(default_factory=list)
    has_addon_config: bool = False  # True if package.json carries an "ember-addon" key

    def __post_init__(self):
        """Normalize optional collections read from package.json."""
        if not self.version:
            self.version = "0.0.0"
        self.dependencies = dict(self.dependencies or {})
        self.dev_dependencies = dict(self.dev_dependencies or {})
        self.addon_paths = list(self.addon_paths or [])
        self.keywords = list(self.keywords or [])

    @classmethod
    def from_package_json(cls, path: str, data: Dict[str, Any]) -> 'Package':
        """Build a Package from a parsed package.json document."""
        addon_config = data.get('ember-addon')
        addon_paths = []
        if isinstance(addon_config, dict):
            addon_paths = addon_config.get('paths') or []

        return cls(
            name=data.get('name', ''),
            path=path,
            version=data.get('version', ''),
            dependencies=data.get('dependencies'),
            dev_dependencies=data.get('devDependencies'),
            addon_paths=addon_paths,
            keywords=data.get('keywords'),
            has_addon_config=addon_config is not None,
        )

    @property
    def kind(self) -> PackageKind:
        """Classify the package from its keywords and ember-addon config."""
        if 'ember-addon' in self.keywords:
            if 'ember-engine' in self.keywords:
                return PackageKind.ENGINE
            return PackageKind.ADDON
        if self.has_addon_config:
            return PackageKind.APP
        return PackageKind.PACKAGE

    @property
    def is_addon(self) -> bool:
        return self.kind in (PackageKind.ADDON, PackageKind.ENGINE)

    @property
    def full_name(self) -> str:
        """Return the full package name in name@version format."""
        return f"{self.name}@{self.version}"

    @property
    def purl(self) -> str:
        """Return the Package URL for this package."""
        namespace = None
        name = self.name
        # Scoped npm packages carry the scope as the purl namespace
        if name.startswith('@') and '/' in name:
            namespace, name = name.split('/', 1)
        return PackageURL(type='npm', namespace=namespace, name=name, version=self.version).to_string()

    def __str__(self) -> str:
        return self.full_name

    def __hash__(self) -> int:
        return hash(self.full_name)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Package):
            return False
        return self.full_name == other.full_name


@dataclass
class NodeContent:
    """Payload attached to a graph node: a package and its conversion status."""

    package: Package
    converted: bool = False

    @property
    def name(self) -> str:
        return self.package.name
