"""Decides whether a package has been converted to TypeScript."""

import fnmatch
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from .models import Package

logger = logging.getLogger(__name__)

# Build and config entry points that stay .js unless a full conversion is asked for
CONFIG_FILES = [
    'ember-cli-build.js',
    'ember-config.js',
    'index.js',
    'testem.js',
]


class ConversionLevel(str, Enum):
    """How strictly "converted" is judged."""

    FULL = "full"
    SOURCE_ONLY = "source-only"
    SOURCE_AND_TESTS = "source-and-tests"


def matches_glob(relative_path: str, pattern: str) -> bool:
    """Match a posix relative path against a glob.

    ``*`` and ``?`` stay within one path segment. Only a ``**`` segment crosses
    directories, and it may also match no segment at all, so ``**/tests/**``
    matches ``tests/unit/foo.js``.
    """
    return _match_segments(relative_path.split('/'), pattern.split('/'))


def _match_segments(parts: List[str], patterns: List[str]) -> bool:
    if not patterns:
        return not parts
    head, rest = patterns[0], patterns[1:]
    if head == '**':
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatch.fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


class ConversionClassifier:
    """Classifies a package as converted when it has a tsconfig.json and no .js files.

    Files matching the ignore list (derived from the conversion level plus
    any user exclusions) are not considered.
    """

    def __init__(
        self,
        level: ConversionLevel = ConversionLevel.SOURCE_ONLY,
        exclusions: Optional[Iterable[str]] = None
    ):
        self.level = ConversionLevel(level)
        self.ignore = self._build_ignore_list(self.level, exclusions or [])

    @staticmethod
    def _build_ignore_list(level: ConversionLevel, exclusions: Iterable[str]) -> List[str]:
        ignore = ['**/node_modules/**']
        if level == ConversionLevel.SOURCE_ONLY:
            ignore.append('**/tests/**')
        if level != ConversionLevel.FULL:
            ignore.extend(CONFIG_FILES)
        ignore.extend(pattern.strip() for pattern in exclusions if pattern.strip())
        return ignore

    def _is_ignored(self, relative_path: str) -> bool:
        return any(matches_glob(relative_path, pattern) for pattern in self.ignore)

    def _iter_files(self, root: str):
        """Yield posix paths, relative to root, of every file not ignored.

        Dotfiles and dot-directories are skipped, so ``.eslintrc.js`` and the
        like never count as JavaScript.
        """
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [d for d in dirnames if d != 'node_modules' and not d.startswith('.')]
            for filename in filenames:
                if filename.startswith('.'):
                    continue
                relative = Path(dirpath, filename).relative_to(root).as_posix()
                if not self._is_ignored(relative):
                    yield relative

    def is_converted(self, pkg: Package) -> bool:
        """Return True if ``pkg`` meets the configured conversion level."""
        has_tsconfig = False
        js_files = []

        for relative in self._iter_files(pkg.path):
            if relative == 'tsconfig.json':
                has_tsconfig = True
            elif relative.endswith('.js'):
                js_files.append(relative)

        converted = has_tsconfig and not js_files
        logger.debug(
            f"{pkg.name}: tsconfig={has_tsconfig}, js files={len(js_files)} -> "
            f"{'converted' if converted else 'not converted'}"
        )
        return converted

    __call__ = is_converted
