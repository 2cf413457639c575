# deploy_stager/core/staging.py
"""Copy-cache: reproduce a checked out tree through hardlinks"""

import errno
import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .exclusion import ExclusionRules
from ..api.exceptions import CrossDeviceError, FilesystemError

logger = logging.getLogger(__name__)


class EntryKind(Enum):
    """Kinds of tree entries the copy cache knows how to reproduce"""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


def classify(path: Union[str, Path]) -> EntryKind:
    """
    Classify a path without following symlinks

    Sockets, fifos and device nodes are treated as files.
    """
    mode = os.lstat(path).st_mode
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.FILE


@dataclass
class CopyStats:
    """Counters collected while staging"""
    files: int = 0
    directories: int = 0
    links: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.files + self.directories + self.links

    def to_dict(self) -> Dict[str, int]:
        return {
            "files": self.files,
            "directories": self.directories,
            "links": self.links,
            "skipped": self.skipped,
        }


class CopyCache:
    """
    Stage a cached tree into a fresh destination

    Regular files become hardlinks of the cached files, directories are
    recreated and symlinks are recreated with their literal target text.
    Cache and destination must be on the same filesystem; data is never
    copied as a fallback.
    """

    def __init__(self, rules: Optional[ExclusionRules] = None):
        self.rules = rules or ExclusionRules()
        self._handlers: Dict[EntryKind, Callable[[str], None]] = {
            EntryKind.FILE: self._copy_file,
            EntryKind.DIRECTORY: self._copy_directory,
            EntryKind.SYMLINK: self._copy_symlink,
        }
        self._cache_root: Optional[Path] = None
        self._destination: Optional[Path] = None
        self.stats = CopyStats()

    def copy(self, cache_root: Union[str, Path], destination: Union[str, Path]) -> CopyStats:
        """
        Reproduce cache_root under destination

        Args:
            cache_root: Existing checked out tree
            destination: Staging directory to create

        Returns:
            Copy statistics

        Raises:
            FilesystemError: On any filesystem failure
            CrossDeviceError: If cache and destination are on different devices
        """
        self._cache_root = Path(cache_root)
        self._destination = Path(destination)
        self.stats = CopyStats()

        logger.debug(f"copying cache to deployment staging area {self._destination}")

        if not self._cache_root.is_dir():
            raise FilesystemError(
                f"Copy cache does not exist: {self._cache_root}",
                path=str(self._cache_root)
            )

        self._create_destination()
        self._ensure_same_device()
        self._copy_entries(self._queue(None))

        logger.debug(
            f"staged {self.stats.files} files, {self.stats.directories} directories, "
            f"{self.stats.links} links ({self.stats.skipped} excluded)"
        )
        return self.stats

    def _create_destination(self) -> None:
        destination = self._destination
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.mkdir(exist_ok=True)
            if any(destination.iterdir()):
                raise FilesystemError(
                    f"Staging directory is not empty: {destination}",
                    path=str(destination)
                )
        except OSError as e:
            raise FilesystemError(
                f"Cannot create staging directory {destination}: {e}",
                path=str(destination)
            ) from e

    def _ensure_same_device(self) -> None:
        cache_dev = os.stat(self._cache_root).st_dev
        dest_dev = os.stat(self._destination).st_dev
        if cache_dev != dest_dev:
            raise CrossDeviceError(str(self._cache_root), str(self._destination))

    def _queue(self, directory: Optional[str]) -> List[str]:
        """List entries of a cache directory as cache-relative names"""
        listing_dir = self._cache_root / directory if directory else self._cache_root
        try:
            names = sorted(os.listdir(listing_dir))
        except OSError as e:
            raise FilesystemError(
                f"Cannot list {listing_dir}: {e}",
                path=str(listing_dir)
            ) from e

        queued = []
        for name in names:
            relative = f"{directory}/{name}" if directory else name
            if self.rules.excludes(relative):
                self.stats.skipped += 1
                continue
            queued.append(relative)
        return queued

    def _copy_entries(self, names: List[str]) -> None:
        for name in names:
            self._process(name)

    def _process(self, name: str) -> None:
        source = self._cache_root / name
        try:
            kind = classify(source)
        except OSError as e:
            raise FilesystemError(f"Cannot stat {source}: {e}", path=str(source)) from e
        self._handlers[kind](name)

    def _copy_file(self, name: str) -> None:
        source = self._cache_root / name
        target = self._destination / name
        try:
            os.link(source, target, follow_symlinks=False)
        except OSError as e:
            if e.errno == errno.EXDEV:
                raise CrossDeviceError(str(source), str(target)) from e
            raise FilesystemError(f"Cannot link {source}: {e}", path=str(source)) from e
        self.stats.files += 1

    def _copy_directory(self, name: str) -> None:
        target = self._destination / name
        try:
            os.mkdir(target)
        except OSError as e:
            raise FilesystemError(f"Cannot create {target}: {e}", path=str(target)) from e
        self.stats.directories += 1
        self._copy_entries(self._queue(name))

    def _copy_symlink(self, name: str) -> None:
        source = self._cache_root / name
        target = self._destination / name
        try:
            os.symlink(os.readlink(source), target)
        except OSError as e:
            raise FilesystemError(f"Cannot recreate link {source}: {e}", path=str(source)) from e
        self.stats.links += 1
