"""Configuration snapshot for a staging run"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from ..api.exceptions import ConfigError, MissingParameterError
from ..constants import (
    CheckoutStrategy,
    SelectionPolicy,
    DEFAULT_REMOTE_DIR,
    DEFAULT_COMPRESSION,
    DEFAULT_SERVER_SELECTION,
    DEFAULT_SSH_PORT,
)


def _symbol(value: Any) -> Optional[str]:
    """Normalize ':gzip' / 'gzip' / None style values"""
    if value is None:
        return None
    return str(value).strip().lstrip(":").lower()


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def _servers(value: Any) -> Tuple[Tuple[str, float], ...]:
    """rsync_server may be a string, a list or a {server: weight} mapping"""
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return tuple((str(k), float(v)) for k, v in value.items())
    return tuple((server, 1.0) for server in _as_tuple(value))


@dataclass(frozen=True)
class StrategyConfig:
    """
    Immutable view of every configuration value the strategy reads

    Built once per invocation with from_dict(); derived paths are
    properties so nothing is cached lazily.
    """

    release_path: str
    releases_path: str
    build_script: Optional[str] = None
    rsync_exclude: Tuple[str, ...] = ()
    checkout_strategy: CheckoutStrategy = CheckoutStrategy.CHECKOUT
    copy_dir: str = field(default_factory=tempfile.gettempdir)
    copy_cache: Optional[str] = None
    copy_remote_dir: str = DEFAULT_REMOTE_DIR
    copy_compression: str = DEFAULT_COMPRESSION
    copy_local_tar: Optional[str] = None
    copy_remote_tar: Optional[str] = None
    rsync_servers: Tuple[Tuple[str, float], ...] = ()
    rsync_server_selection: SelectionPolicy = SelectionPolicy.ROUND_ROBIN
    application: Optional[str] = None
    scm: Optional[str] = None
    repository: Optional[str] = None
    branch: Optional[str] = None
    host: Optional[str] = None
    ssh_port: int = DEFAULT_SSH_PORT
    command_timeout: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], cwd: Optional[str] = None) -> 'StrategyConfig':
        """
        Resolve configuration values into a snapshot

        Args:
            data: Configuration mapping
            cwd: Base for relative copy_dir (defaults to os.getcwd())

        Raises:
            MissingParameterError: If release_path or releases_path is missing
            ConfigError: If a value is invalid
        """
        for key in ("release_path", "releases_path"):
            if not data.get(key):
                raise MissingParameterError(key)

        base = cwd or os.getcwd()
        copy_dir = os.path.abspath(
            os.path.join(base, os.path.expanduser(str(data.get("copy_dir") or tempfile.gettempdir())))
        )

        strategy_name = _symbol(data.get("checkout_strategy")) or CheckoutStrategy.CHECKOUT.value
        try:
            checkout_strategy = CheckoutStrategy(strategy_name)
        except ValueError:
            raise ConfigError(f"invalid checkout strategy {data.get('checkout_strategy')!r}")

        selection_name = _symbol(data.get("rsync_server_selection")) or DEFAULT_SERVER_SELECTION
        try:
            selection = SelectionPolicy(selection_name.replace("-", "_"))
        except ValueError:
            raise ConfigError(f"invalid server selection policy {data.get('rsync_server_selection')!r}")

        application = data.get("application")
        copy_cache = data.get("copy_cache")
        if copy_cache is True:
            # must not collide with the staging directory named after release_path
            release_name = os.path.basename(str(data["release_path"]).rstrip("/"))
            cache_name = application or f"{release_name}-cache"
            copy_cache = os.path.join(copy_dir, str(cache_name))
        elif copy_cache:
            copy_cache = os.path.abspath(os.path.join(base, os.path.expanduser(str(copy_cache))))
        else:
            copy_cache = None

        return cls(
            release_path=str(data["release_path"]),
            releases_path=str(data["releases_path"]),
            build_script=data.get("build_script") or None,
            rsync_exclude=_as_tuple(data.get("rsync_exclude")),
            checkout_strategy=checkout_strategy,
            copy_dir=copy_dir,
            copy_cache=copy_cache,
            copy_remote_dir=str(data.get("copy_remote_dir") or DEFAULT_REMOTE_DIR),
            copy_compression=_symbol(data.get("copy_compression")) or DEFAULT_COMPRESSION,
            copy_local_tar=data.get("copy_local_tar"),
            copy_remote_tar=data.get("copy_remote_tar"),
            rsync_servers=_servers(data.get("rsync_server")),
            rsync_server_selection=selection,
            application=application,
            scm=_symbol(data.get("scm")),
            repository=data.get("repository"),
            branch=data.get("branch"),
            host=data.get("host"),
            ssh_port=int(data.get("ssh_port") or DEFAULT_SSH_PORT),
            command_timeout=data.get("command_timeout"),
        )

    @property
    def destination(self) -> Path:
        """Local staging directory"""
        return Path(self.copy_dir) / os.path.basename(self.release_path.rstrip("/"))

    def archive_path(self, extension: str) -> Path:
        """Local archive the staging tree is compressed to"""
        return Path(self.copy_dir) / f"{self.destination.name}.{extension}"

    def remote_archive_path(self, extension: str) -> str:
        """Where the archive is stored on the remote host"""
        return f"{self.copy_remote_dir.rstrip('/')}/{self.archive_path(extension).name}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "release_path": self.release_path,
            "releases_path": self.releases_path,
            "build_script": self.build_script,
            "rsync_exclude": list(self.rsync_exclude),
            "checkout_strategy": self.checkout_strategy.value,
            "copy_dir": self.copy_dir,
            "copy_cache": self.copy_cache,
            "copy_remote_dir": self.copy_remote_dir,
            "copy_compression": self.copy_compression,
            "copy_local_tar": self.copy_local_tar,
            "copy_remote_tar": self.copy_remote_tar,
            "rsync_server": {name: weight for name, weight in self.rsync_servers},
            "rsync_server_selection": self.rsync_server_selection.value,
            "application": self.application,
            "scm": self.scm,
            "repository": self.repository,
            "branch": self.branch,
            "host": self.host,
            "ssh_port": self.ssh_port,
            "command_timeout": self.command_timeout,
        }
