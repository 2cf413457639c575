# deploy_stager/core/compression.py
"""Compression profiles and the local packaging step"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..api.exceptions import ConfigError
from ..constants import DEFAULT_COMPRESSION, DEFAULT_TAR_COMMAND
from ..utils.process import CommandOutcome, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompressionProfile:
    """
    Specifics of a compression type

    Commands are argv tuples whose first element is the utility that
    performs the compression or decompression.
    """
    name: str
    extension: str
    compress_command: Tuple[str, ...]
    decompress_command: Tuple[str, ...]

    def compress(self, directory: Optional[str], archive: Optional[str]) -> List[str]:
        """Command that compresses directory into archive"""
        return list(self.compress_command) + [a for a in (archive, directory) if a is not None]

    def decompress(self, archive: Optional[str]) -> List[str]:
        """
        Command that decompresses archive relative to the working
        directory, preserving the directory structure
        """
        return list(self.decompress_command) + ([archive] if archive is not None else [])

    def archive_name(self, basename: str) -> str:
        return f"{basename}.{self.extension}"


def _gzip(local_tar: str, remote_tar: str) -> CompressionProfile:
    return CompressionProfile("gzip", "tar.gz", (local_tar, "czf"), (remote_tar, "xzf"))


def _bzip2(local_tar: str, remote_tar: str) -> CompressionProfile:
    return CompressionProfile("bzip2", "tar.bz2", (local_tar, "cjf"), (remote_tar, "xjf"))


def _zip(local_tar: str, remote_tar: str) -> CompressionProfile:
    return CompressionProfile("zip", "zip", ("zip", "-qyr"), ("unzip", "-q"))


# Registry of compression profile builders
COMPRESSION_PROFILES: Dict[str, Callable[[str, str], CompressionProfile]] = {
    "gzip": _gzip,
    "gz": _gzip,
    "bzip2": _bzip2,
    "bz2": _bzip2,
    "zip": _zip,
}


def resolve_profile(compression_type: Optional[str] = None,
                    local_tar: Optional[str] = None,
                    remote_tar: Optional[str] = None) -> CompressionProfile:
    """
    Resolve a compression profile by name

    Args:
        compression_type: gzip, gz, bzip2, bz2 or zip (default gzip)
        local_tar: tar binary used locally
        remote_tar: tar binary used on the remote host

    Returns:
        Compression profile

    Raises:
        ConfigError: If the type is unknown
    """
    name = str(compression_type or DEFAULT_COMPRESSION).strip().lstrip(":").lower()
    builder = COMPRESSION_PROFILES.get(name)
    if builder is None:
        raise ConfigError(f"invalid compression type {compression_type!r}")

    return builder(local_tar or DEFAULT_TAR_COMMAND, remote_tar or DEFAULT_TAR_COMMAND)


def get_supported_compressions() -> List[str]:
    """Names accepted by resolve_profile"""
    return list(COMPRESSION_PROFILES)


class Packager:
    """Produce a single archive from the staging tree"""

    def __init__(self, profile: CompressionProfile, timeout: Optional[float] = None):
        self.profile = profile
        self.timeout = timeout

    async def package(self,
                      directory: Union[str, Path],
                      archive: Union[str, Path]) -> CommandOutcome:
        """
        Compress directory into archive

        The command runs from the archive's directory with relative names,
        so the archive contains a single top-level directory named after
        the staging directory.

        Raises:
            CommandFailedError: If the compressor exits non-zero
        """
        directory = Path(directory)
        archive = Path(archive)
        workdir = archive.parent

        try:
            relative_dir = str(directory.relative_to(workdir))
        except ValueError:
            relative_dir = str(directory)

        command = self.profile.compress(relative_dir, archive.name)
        logger.debug(f"compressing {directory} to {archive}")

        outcome = await run_command(command, cwd=workdir, timeout=self.timeout)
        return outcome.check()
