"""Stager API for staging and shipping releases"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..core.validation_engine import ValidationResult
from ..models.config import StrategyConfig
from ..models.result import StageResult
from ..services.config_service import ConfigService
from ..services.stage_service import RsyncStrategy
from ..sources import SourceControl, create_source
from ..transport import ExecutorFactory, RemoteExecutor, ServerSelector
from ..utils.async_utils import run_async


class Stager:
    """Synchronous entry point around RsyncStrategy"""

    def __init__(self,
                 configuration: Union[StrategyConfig, Mapping[str, Any]],
                 source: Optional[SourceControl] = None,
                 executor: Optional[RemoteExecutor] = None,
                 selector: Optional[ServerSelector] = None):
        """
        Initialize stager

        Args:
            configuration: Configuration mapping or snapshot
            source: Source collaborator (built from scm/repository if omitted)
            executor: Remote executor (built from host/ssh_port if omitted)
            selector: Mirror selector (built from rsync_server if omitted)

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(configuration, StrategyConfig):
            configuration = StrategyConfig.from_dict(configuration)
        self.config = configuration

        if source is None:
            source = create_source(configuration.scm, configuration.repository, configuration.branch)
        if executor is None:
            executor = ExecutorFactory.from_host(
                configuration.host,
                port=configuration.ssh_port,
                config={'timeout': configuration.command_timeout}
            )

        self.strategy = RsyncStrategy(configuration, source, executor, selector)

    @classmethod
    def from_file(cls,
                  config_path: Union[str, Path],
                  overrides: Optional[Dict[str, Any]] = None,
                  **kwargs) -> 'Stager':
        """
        Create a stager from a YAML configuration file

        Args:
            config_path: Configuration file
            overrides: Values replacing keys from the file
            **kwargs: Passed to the constructor
        """
        service = ConfigService(config_path)
        service.load_config(overrides)
        return cls(service.snapshot(), **kwargs)

    def deploy(self, revision: str) -> StageResult:
        """
        Stage, package and ship revision

        Args:
            revision: Revision identifier

        Returns:
            StageResult

        Raises:
            CommandFailedError: If a command fails
            FilesystemError: If staging fails
        """
        return run_async(self.strategy.deploy(revision))

    def check(self) -> ValidationResult:
        """Check local and remote command dependencies"""
        return run_async(self.strategy.check())


def deploy(configuration: Union[StrategyConfig, Mapping[str, Any]],
           revision: str,
           **kwargs) -> StageResult:
    """
    Convenience function for a single staging run

    Args:
        configuration: Configuration mapping or snapshot
        revision: Revision identifier
        **kwargs: Passed to Stager

    Returns:
        StageResult
    """
    return Stager(configuration, **kwargs).deploy(revision)
