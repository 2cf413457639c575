"""Remote executor factory"""

from typing import Any, Dict, Optional

from .base import RemoteExecutor
from .local import LocalExecutor
from .ssh import SSHExecutor
from ..api.exceptions import ConfigError, MissingParameterError
from ..constants import DEFAULT_SSH_PORT, LOCAL_HOSTS


class ExecutorFactory:
    """Factory for creating executors from a host specifier"""

    @staticmethod
    def from_host(host: Optional[str],
                  port: int = DEFAULT_SSH_PORT,
                  config: Dict[str, Any] = None) -> RemoteExecutor:
        """
        Create an executor for host

        Args:
            host: "local"/"localhost" or an ssh specifier (user@host[:port])
            port: Default ssh port
            config: Executor options (timeout, multiplex)

        Returns:
            Executor instance

        Raises:
            MissingParameterError: If no host is given
            ConfigError: If the specifier cannot be parsed
        """
        if not host:
            raise MissingParameterError("host")

        if host in LOCAL_HOSTS:
            return LocalExecutor(config)

        try:
            return SSHExecutor.from_spec(host, default_port=port, config=config)
        except ValueError as e:
            raise ConfigError(f"Invalid host {host!r}: {e}")
