# deploy_stager/transport/local.py
"""Executor for releases unpacked on the local machine"""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles

from .base import RemoteExecutor
from ..utils.process import CommandOutcome, DataHandler, run_command

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB


class LocalExecutor(RemoteExecutor):
    """Treat the local machine as the remote host"""

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.timeout = self.config.get('timeout')

    @property
    def target(self) -> str:
        return "localhost"

    async def upload(self, local_path: Union[str, Path], remote_path: str) -> CommandOutcome:
        """Copy the file to remote_path on this machine"""
        local_path = Path(local_path)
        full_path = Path(remote_path)
        command = f"copy {local_path} {full_path}"

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(local_path, 'rb') as src:
                async with aiofiles.open(full_path, 'wb') as dst:
                    while True:
                        chunk = await src.read(DEFAULT_CHUNK_SIZE)
                        if not chunk:
                            break
                        await dst.write(chunk)

        except OSError as e:
            logger.error(f"Upload failed: {e}")
            return CommandOutcome(command, 1, stderr=str(e))

        return CommandOutcome(command, 0)

    async def run(self,
                  command: str,
                  data_handler: Optional[DataHandler] = None) -> CommandOutcome:
        logger.debug(f"running locally: {command}")
        return await run_command(command, data_handler=data_handler, timeout=self.timeout)

    async def has_command(self, name: str) -> bool:
        return shutil.which(name) is not None
