# deploy_stager/transport/ssh.py
"""OpenSSH based remote executor"""

import logging
import shlex
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .base import RemoteExecutor
from ..constants import DEFAULT_SSH_PORT
from ..utils.process import CommandOutcome, DataHandler, run_command

logger = logging.getLogger(__name__)


def parse_host(spec: str, default_port: int = DEFAULT_SSH_PORT):
    """
    Split a host specifier into (user, host, port)

    Accepted forms: host, user@host, user@host:2222, user@[fe80::1]:2222
    """
    user = None
    host_part = spec
    if '@' in spec:
        user, host_part = spec.split('@', 1)

    port = default_port
    if host_part.startswith('['):
        bracket_end = host_part.find(']')
        if bracket_end == -1:
            raise ValueError(f"Malformed IPv6 address: {spec}")
        host = host_part[1:bracket_end]
        remainder = host_part[bracket_end + 1:]
        if remainder.startswith(':'):
            port = int(remainder[1:])
    elif host_part.count(':') == 1:
        host, port_str = host_part.rsplit(':', 1)
        port = int(port_str)
    else:
        host = host_part

    if not host:
        raise ValueError(f"Missing host name: {spec}")

    return user, host, port


class SSHExecutor(RemoteExecutor):
    """
    Run commands through the system ssh/scp clients

    Connections are multiplexed with an ssh control socket for the
    lifetime of the executor, so the upload and the unpack command share
    one authenticated session.
    """

    def __init__(self,
                 host: str,
                 user: Optional[str] = None,
                 port: int = DEFAULT_SSH_PORT,
                 config: Dict[str, Any] = None):
        super().__init__(config)
        self.host = host
        self.user = user
        self.port = port
        self.timeout = self.config.get('timeout')
        self.multiplex = self.config.get('multiplex', True)
        self._control_dir: Optional[str] = None

    @classmethod
    def from_spec(cls, spec: str, default_port: int = DEFAULT_SSH_PORT, config: Dict[str, Any] = None):
        user, host, port = parse_host(spec, default_port)
        return cls(host, user=user, port=port, config=config)

    @property
    def target(self) -> str:
        host = f"[{self.host}]" if ':' in self.host else self.host
        return f"{self.user}@{host}" if self.user else host

    @property
    def _destination(self) -> str:
        return f"{self.user}@{self.host}" if self.user else self.host

    def _options(self) -> List[str]:
        if not self._control_dir:
            return []
        return [
            "-o", "ControlMaster=auto",
            "-o", f"ControlPath={self._control_dir}/%C",
            "-o", "ControlPersist=60",
        ]

    def _ssh_cmd(self, command: str) -> List[str]:
        """Build ssh argv with custom port"""
        return ["ssh", "-p", str(self.port), *self._options(), self._destination, command]

    def _scp_cmd(self, local_path: Union[str, Path], remote_path: str) -> List[str]:
        host = f"[{self.host}]" if ':' in self.host else self.host
        remote = f"{self.user}@{host}" if self.user else host
        return ["scp", "-q", "-P", str(self.port), *self._options(), str(local_path), f"{remote}:{remote_path}"]

    async def _do_initialize(self) -> None:
        if self.multiplex:
            self._control_dir = tempfile.mkdtemp(prefix="deploy-stager-ssh-")

    async def upload(self, local_path: Union[str, Path], remote_path: str) -> CommandOutcome:
        await self.initialize()
        logger.debug(f"uploading {local_path} to {self.target}:{remote_path}")
        return await run_command(self._scp_cmd(local_path, remote_path), timeout=self.timeout)

    async def run(self,
                  command: str,
                  data_handler: Optional[DataHandler] = None) -> CommandOutcome:
        await self.initialize()
        logger.debug(f"running on {self.target}: {command}")
        return await run_command(self._ssh_cmd(command), data_handler=data_handler, timeout=self.timeout)

    async def has_command(self, name: str) -> bool:
        outcome = await self.run(f"command -v {shlex.quote(name)}")
        return outcome.succeeded

    async def _do_close(self) -> None:
        if not self._control_dir:
            return
        outcome = await run_command(
            ["ssh", "-O", "exit", "-p", str(self.port), *self._options(), self._destination]
        )
        if not outcome.succeeded:
            logger.debug(f"no control master to stop for {self.target}")
        shutil.rmtree(self._control_dir, ignore_errors=True)
        self._control_dir = None
