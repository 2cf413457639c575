# deploy_stager/transport/transport.py
"""Archive upload, remote unpack and mirror distribution"""

import logging
import posixpath
import shlex
from pathlib import Path
from typing import Optional, Union

from .base import RemoteExecutor
from ..core.compression import CompressionProfile
from ..utils.process import CommandOutcome, DataHandler, join_command

logger = logging.getLogger(__name__)


class Transport:
    """Move the packaged release onto the remote host"""

    def __init__(self,
                 executor: RemoteExecutor,
                 profile: CompressionProfile,
                 releases_path: str,
                 remote_dir: str,
                 data_handler: Optional[DataHandler] = None):
        self.executor = executor
        self.profile = profile
        self.releases_path = releases_path
        self.remote_dir = remote_dir
        self.data_handler = data_handler

    def remote_path_for(self, archive: Union[str, Path]) -> str:
        """Remote location of the uploaded archive"""
        return posixpath.join(self.remote_dir, Path(archive).name)

    def unpack_command(self, remote_archive: str) -> str:
        """
        Single remote command line: extract into releases_path, then
        delete the uploaded archive
        """
        return (
            f"cd {shlex.quote(self.releases_path)} && "
            f"{join_command(self.profile.decompress(remote_archive))} && "
            f"rm {shlex.quote(remote_archive)}"
        )

    def distribute_command(self, release_path: str, server: str) -> str:
        return join_command(["rsync", "-qa", f"{release_path.rstrip('/')}/", server])

    async def upload_archive(self, archive: Union[str, Path]) -> str:
        """
        Upload the archive to the remote staging directory

        Returns:
            Remote archive path

        Raises:
            CommandFailedError: If the transfer fails
        """
        remote_archive = self.remote_path_for(archive)
        logger.debug(f"uploading {archive} to {self.executor.target}:{remote_archive}")
        outcome = await self.executor.upload(archive, remote_archive)
        outcome.check()
        return remote_archive

    async def unpack(self, remote_archive: str) -> CommandOutcome:
        """
        Unpack the uploaded archive into releases_path in one round trip

        Raises:
            CommandFailedError: If the remote command exits non-zero
        """
        command = self.unpack_command(remote_archive)
        logger.debug(f"decompressing {remote_archive} on {self.executor.target}")
        outcome = await self.executor.run(command, data_handler=self.data_handler)
        return outcome.check()

    async def distribute(self, release_path: str, server: str) -> CommandOutcome:
        """
        Push the unpacked release to a mirror server

        Raises:
            CommandFailedError: If rsync exits non-zero
        """
        command = self.distribute_command(release_path, server)
        logger.debug(f"distributing {release_path} to {server}")
        outcome = await self.executor.run(command, data_handler=self.data_handler)
        return outcome.check()

    async def check(self) -> Optional[str]:
        """Return the missing remote decompress command, if any"""
        command = self.profile.decompress(None)[0]
        if await self.executor.has_command(command):
            return None
        return command
