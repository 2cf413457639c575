# deploy_stager/transport/base.py
"""Remote executor abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..utils.process import CommandOutcome, DataHandler


class RemoteExecutor(ABC):
    """Runs commands on, and uploads files to, one remote host"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize executor

        Args:
            config: Executor-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    @property
    @abstractmethod
    def target(self) -> str:
        """Human readable host description"""
        pass

    async def initialize(self) -> None:
        """Prepare connections before the first command"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    async def _do_initialize(self) -> None:
        pass

    @abstractmethod
    async def upload(self, local_path: Union[str, Path], remote_path: str) -> CommandOutcome:
        """
        Copy a local file to the remote host

        Args:
            local_path: Local file
            remote_path: Destination path on the remote host

        Returns:
            Outcome of the transfer
        """
        pass

    @abstractmethod
    async def run(self,
                  command: str,
                  data_handler: Optional[DataHandler] = None) -> CommandOutcome:
        """
        Run a shell command line on the remote host

        Args:
            command: Shell line
            data_handler: Receives output chunks, may return a stdin reply

        Returns:
            Outcome with the remote exit status
        """
        pass

    @abstractmethod
    async def has_command(self, name: str) -> bool:
        """Check whether a command is available on the remote host"""
        pass

    async def close(self) -> None:
        """Release connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        pass

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
