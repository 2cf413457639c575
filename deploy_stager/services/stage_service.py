"""Staging strategy: checkout, build, package, transfer, clean up"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..api.exceptions import ConfigError, FilesystemError, StagerError
from ..constants import CheckoutStrategy
from ..core.builder import BuildRunner
from ..core.compression import Packager, resolve_profile
from ..core.exclusion import ExclusionRules
from ..core.revision import write_revision_file
from ..core.rollback import RollbackManager
from ..core.staging import CopyCache
from ..core.validation_engine import ValidationResult
from ..models.config import StrategyConfig
from ..models.result import OperationStatus, StageResult
from ..sources.base import SourceControl
from ..transport.base import RemoteExecutor
from ..transport.selection import ServerSelector, create_selector
from ..transport.transport import Transport
from ..utils.process import run_command

logger = logging.getLogger(__name__)


def _ensure_parent(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create directory {path.parent}: {e}", path=str(path.parent)) from e


class RsyncStrategy:
    """
    Stage a revision locally, ship it as one archive and unpack it remotely

    The local archive and staging directory are removed after every
    deploy() call, whether it succeeded or not.
    """

    def __init__(self,
                 configuration: Union[StrategyConfig, Mapping[str, Any]],
                 source: SourceControl,
                 executor: RemoteExecutor,
                 selector: Optional[ServerSelector] = None):
        """
        Initialize strategy

        Args:
            configuration: Snapshot or raw configuration mapping
            source: Source control collaborator
            executor: Executor for the remote host
            selector: Mirror selector (built from rsync_server if omitted)

        Raises:
            ConfigError: On invalid configuration, before anything runs
        """
        if not isinstance(configuration, StrategyConfig):
            configuration = StrategyConfig.from_dict(configuration)
        self.config = configuration

        if self.config.copy_cache:
            cache = Path(self.config.copy_cache)
            staging = self.config.destination
            if cache == staging or staging in cache.parents or cache in staging.parents:
                raise ConfigError(f"copy_cache {cache} overlaps the staging directory {staging}")

        self.profile = resolve_profile(
            self.config.copy_compression,
            local_tar=self.config.copy_local_tar,
            remote_tar=self.config.copy_remote_tar
        )
        self.rules = ExclusionRules(self.config.rsync_exclude)
        self.source = source
        self.executor = executor
        self.selector = selector or create_selector(
            self.config.rsync_server_selection,
            self.config.rsync_servers
        )

        timeout = self.config.command_timeout
        self.builder = BuildRunner(timeout=timeout)
        self.packager = Packager(self.profile, timeout=timeout)
        self.rollback_manager = RollbackManager()
        self.transport = Transport(
            executor,
            self.profile,
            releases_path=self.config.releases_path,
            remote_dir=self.config.copy_remote_dir,
            data_handler=source.handle_data
        )

    @property
    def destination(self) -> Path:
        return self.config.destination

    @property
    def archive_path(self) -> Path:
        return self.config.archive_path(self.profile.extension)

    async def deploy(self, revision: str) -> StageResult:
        """
        Run the full pipeline for revision

        Args:
            revision: Revision identifier

        Returns:
            StageResult of a successful run

        Raises:
            CommandFailedError: If any command exits non-zero
            FilesystemError: If staging fails
        """
        result = StageResult(
            revision=revision,
            archive_path=str(self.archive_path),
            releases_path=self.config.releases_path
        )

        try:
            await self._run_checkout_strategy(revision)
            result.step_done("checkout")

            write_revision_file(self.destination, revision)
            result.step_done("revision")

            await self.packager.package(self.destination, self.archive_path)
            result.step_done("package")

            async with self.executor:
                result.remote_archive_path = await self.transport.upload_archive(self.archive_path)
                result.step_done("upload")

                await self.transport.unpack(result.remote_archive_path)
                result.step_done("unpack")

                result.server = await self._distribute()
                if result.server:
                    result.metadata["release_path"] = self.config.release_path
                    result.step_done("distribute")

            result.complete(OperationStatus.SUCCESS)
            return result

        except StagerError as e:
            result.add_error(e.error_code, str(e))
            result.complete(OperationStatus.FAILED)
            raise

        finally:
            result.rollback = self.rollback_manager.rollback(self.archive_path, self.destination)

    async def check(self) -> ValidationResult:
        """Check that every command the pipeline needs is available"""
        result = ValidationResult()

        local_commands = [self.profile.compress(None, None)[0]]
        if self.source.local_command:
            local_commands.insert(0, self.source.local_command)

        for command in local_commands:
            if shutil.which(command):
                result.add_success(f"local command: {command}")
            else:
                result.add_error(f"local command not found: {command}")

        async with self.executor:
            missing = await self.transport.check()

        remote_command = self.profile.decompress(None)[0]
        if missing:
            result.add_error(f"remote command not found on {self.executor.target}: {missing}")
        else:
            result.add_success(f"remote command: {remote_command}")

        return result

    async def _run_checkout_strategy(self, revision: str) -> None:
        if self.config.copy_cache:
            await self._update_copy_cache(revision)
            await self._copy_cache_to_staging_area()
        else:
            await self._copy_repository_to_server(revision)

        await self.builder.build(self.destination, self.config.build_script)

        if self.rules:
            self._remove_excluded_files()

    async def _copy_repository_to_server(self, revision: str) -> None:
        strategy = self.config.checkout_strategy
        logger.debug(f"getting (via {strategy.value}) revision {revision} to {self.destination}")

        if strategy == CheckoutStrategy.EXPORT:
            command = self.source.export(revision, str(self.destination))
        else:
            command = self.source.checkout(revision, str(self.destination))

        _ensure_parent(self.destination)
        outcome = await run_command(command, timeout=self.config.command_timeout)
        outcome.check()

    async def _update_copy_cache(self, revision: str) -> None:
        cache = Path(self.config.copy_cache)

        if cache.exists():
            logger.debug(f"refreshing local cache to revision {revision} at {cache}")
            command = self.source.sync(revision, str(cache))
        else:
            logger.debug(f"preparing local cache at {cache}")
            _ensure_parent(cache)
            command = self.source.checkout(revision, str(cache))

        outcome = await run_command(command, timeout=self.config.command_timeout)
        outcome.check()

    async def _copy_cache_to_staging_area(self) -> None:
        rules = self.rules
        # the cache keeps its repository metadata, an export must not ship it
        if self.config.checkout_strategy == CheckoutStrategy.EXPORT:
            rules = ExclusionRules(self.rules.patterns + (".git",))

        loop = asyncio.get_running_loop()
        copier = CopyCache(rules)
        await loop.run_in_executor(None, copier.copy, self.config.copy_cache, self.destination)

    def _remove_excluded_files(self) -> None:
        logger.debug("processing exclusions...")

        for path in list(self.rules.sweep(self.destination)):
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except FileNotFoundError:
                # already removed with a matching parent directory
                continue
            except OSError as e:
                raise FilesystemError(f"Cannot remove excluded path {path}: {e}", path=str(path)) from e

    async def _distribute(self) -> Optional[str]:
        if self.selector is None:
            return None

        server = self.selector.select()
        await self.transport.distribute(self.config.release_path, server)
        return server
