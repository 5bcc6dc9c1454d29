"""File filter module for sourcesecure.

Decides which directory entries the walker descends into or scans:
ignore rules, the extension allow-list and a binary-content sniff.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 8192


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile an ignore glob: every ``*`` becomes ``.*``, the rest is literal."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


@dataclass
class IgnoreRules:
    """Ignore rules applied to every walked entry.

    Three kinds of rule are supported:

    - ``names``: an entry whose basename equals one of these is ignored.
    - ``patterns`` containing ``*``: compiled by ``glob_to_regex`` and
      searched (unanchored) in the basename.
    - other ``patterns``: ignored when the string occurs anywhere in the
      path relative to the walk root.

    Example:
        >>> rules = IgnoreRules(names=["node_modules"], patterns=["*.lock", ".env.example"])
        >>> rules.is_ignored("yarn.lock")
        True
        >>> rules.is_ignored("config/.env.example")
        True
        >>> rules.is_ignored("src/app.js")
        False
    """

    names: Iterable[str] = ()
    patterns: Iterable[str] = ()
    _names: frozenset[str] = field(init=False, repr=False)
    _globs: list[tuple[str, re.Pattern[str]]] = field(init=False, repr=False)
    _substrings: list[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.names = tuple(self.names)
        self.patterns = tuple(self.patterns)
        self._names = frozenset(self.names)
        self._globs = [(p, glob_to_regex(p)) for p in self.patterns if "*" in p]
        self._substrings = [p for p in self.patterns if "*" not in p and p]

    def match(self, relative_path: str | PurePath) -> str | None:
        """Return the rule that ignores ``relative_path``, or None."""
        rel = PurePath(relative_path)
        if rel.name in self._names:
            return rel.name
        for original, regex in self._globs:
            if regex.search(rel.name):
                return original
        rel_str = rel.as_posix()
        for substring in self._substrings:
            if substring in rel_str:
                return substring
        return None

    def is_ignored(self, relative_path: str | PurePath) -> bool:
        return self.match(relative_path) is not None


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lower-case extensions and make sure each starts with a dot."""
    return frozenset(e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions if e)


def has_scannable_extension(path: PurePath, extensions: frozenset[str]) -> bool:
    """Check a file name against the extension allow-list.

    Files without an extension are always accepted. An empty allow-list
    accepts everything.
    """
    if not extensions:
        return True
    # dotfiles such as ".env" have no suffix and are accepted
    suffix = path.suffix.lower()
    return not suffix or suffix in extensions


def is_binary_file(path: Path) -> bool:
    """Sniff the start of a file for NUL bytes."""
    try:
        with path.open("rb") as f:
            return b"\x00" in f.read(BINARY_SNIFF_BYTES)
    except OSError as e:
        logger.debug(f"Could not sniff {path}: {e}")
        return False
