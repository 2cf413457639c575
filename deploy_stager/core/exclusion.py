# deploy_stager/core/exclusion.py
"""Glob based exclusion rules for the staging tree"""

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

from ..api.exceptions import FilesystemError

# Entries that must never be staged or deleted
_SPECIAL_NAMES = (".", "..")


class ExclusionRules:
    """
    Evaluate exclusion patterns against candidate paths

    Matching uses shell-glob semantics where
    wildcards also match names that start with a dot and ``*`` is allowed
    to cross ``/``. A candidate is excluded if any pattern matches it or if
    its basename is ``.`` or ``..``.

    The rules are used in two contexts that do NOT agree for nested
    patterns:

    * ``excludes()`` is consulted by the copy-cache walk with the entry's
      path relative to the cache root (``src/app.rb``). ``*.log`` therefore
      excludes ``logs/a.log`` as well as ``a.log``.
    * ``sweep()`` globs each pattern under the staging root one directory
      level per pattern segment. ``*.log`` only finds top-level ``*.log``
      files, and ``.git/*`` finds the children of a top-level ``.git``.
      ``**`` is an ordinary wildcard there and matches exactly one level,
      and braces are literal characters, so ``{a,b}.log`` only matches a
      file named ``{a,b}.log``.

    Do not expect a pattern to behave identically in both places.
    """

    def __init__(self, patterns: Union[str, Iterable[str], None] = None):
        if patterns is None:
            patterns = ()
        elif isinstance(patterns, str):
            patterns = (patterns,)
        self.patterns: Tuple[str, ...] = tuple(str(p) for p in patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __repr__(self) -> str:
        return f"ExclusionRules({list(self.patterns)!r})"

    def matches(self, candidate: str) -> bool:
        """Check whether any pattern matches the candidate string"""
        return any(fnmatchcase(candidate, pattern) for pattern in self.patterns)

    def excludes(self, candidate: Union[str, Path]) -> bool:
        """
        Check if a path must be left out of the staging tree

        Args:
            candidate: Relative path (or bare name) of the entry

        Returns:
            True if excluded
        """
        candidate = str(candidate).replace(os.sep, "/")
        if os.path.basename(candidate) in _SPECIAL_NAMES:
            return True
        return self.matches(candidate)

    def filter(self, candidates: Iterable[str]) -> List[str]:
        """Return the candidates that are not excluded, preserving order"""
        return [c for c in candidates if not self.excludes(c)]

    def sweep(self, root: Union[str, Path]) -> Iterator[Path]:
        """
        Find paths under root matching each pattern, one level per segment

        Args:
            root: Staging directory to search

        Yields:
            Matching paths, pattern by pattern
        """
        root = Path(root)
        seen = set()

        for pattern in self.patterns:
            segments = [s for s in pattern.replace(os.sep, "/").split("/") if s]
            for match in _glob_segments(root, segments):
                if match not in seen:
                    seen.add(match)
                    yield match


def _glob_segments(base: Path, segments: List[str]) -> Iterator[Path]:
    """Match pattern segments against successive directory levels"""
    if not segments:
        return

    head, rest = segments[0], segments[1:]

    # "." and ".." segments would walk out of the tree
    if head in _SPECIAL_NAMES:
        return

    try:
        with os.scandir(base) as entries:
            names = sorted(entry.name for entry in entries)
    except (FileNotFoundError, NotADirectoryError):
        return
    except OSError as e:
        raise FilesystemError(f"Cannot scan {base}: {e}", path=str(base)) from e

    for name in names:
        if not fnmatchcase(name, head):
            continue

        path = base / name
        if not rest:
            yield path
        elif path.is_dir() and not path.is_symlink():
            yield from _glob_segments(path, rest)
