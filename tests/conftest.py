"""Shared fixtures for deploy-stager tests"""

import os
from pathlib import Path
from typing import List

import pytest

from deploy_stager.transport.local import LocalExecutor
from deploy_stager.utils.process import CommandOutcome


class RecordingExecutor(LocalExecutor):
    """Local executor that records commands and fakes rsync"""

    def __init__(self, config=None):
        super().__init__(config)
        self.commands: List[str] = []
        self.uploads: List[tuple] = []
        self.opened = 0
        self.closed = 0

    async def _do_initialize(self) -> None:
        self.opened += 1

    async def _do_close(self) -> None:
        self.closed += 1

    async def upload(self, local_path, remote_path):
        self.uploads.append((str(local_path), remote_path))
        return await super().upload(local_path, remote_path)

    async def run(self, command, data_handler=None):
        self.commands.append(command)
        if command.startswith("rsync "):
            return CommandOutcome(command, 0)
        return await super().run(command, data_handler=data_handler)


@pytest.fixture
def source_tree(tmp_path) -> Path:
    """A small checked out repository

    repo/
    ├── .git/config
    ├── src/app.rb
    ├── releases/1/
    └── current -> releases/1
    """
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / ".git" / "config").write_text("[core]\n")
    (repo / "src").mkdir()
    (repo / "src" / "app.rb").write_text("puts 'hello'\n")
    (repo / "releases" / "1").mkdir(parents=True)
    os.symlink("releases/1", repo / "current")
    return repo


@pytest.fixture
def remote_layout(tmp_path):
    """Directories standing in for the remote host"""
    releases = tmp_path / "remote" / "releases"
    remote_tmp = tmp_path / "remote" / "tmp"
    releases.mkdir(parents=True)
    remote_tmp.mkdir(parents=True)
    return releases, remote_tmp


@pytest.fixture
def stage_config(tmp_path, source_tree, remote_layout):
    """Factory for a configuration staging source_tree onto the local host"""
    releases, remote_tmp = remote_layout

    def make(**overrides):
        config = {
            "application": "app",
            "release_path": str(releases / "20240101"),
            "releases_path": str(releases),
            "copy_dir": str(tmp_path / "copy"),
            "copy_cache": True,
            "copy_remote_dir": str(remote_tmp),
            "copy_compression": "gzip",
            "rsync_exclude": [".git/*"],
            "scm": "none",
            "repository": str(source_tree),
            "host": "localhost",
        }
        config.update(overrides)
        return {k: v for k, v in config.items() if v is not None}

    return make


@pytest.fixture
def recording_executor() -> RecordingExecutor:
    return RecordingExecutor()


def _tree_listing(root: Path) -> List[str]:
    """Relative paths under root, sorted"""
    paths = []
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            relative = os.path.relpath(os.path.join(dirpath, name), root)
            paths.append(relative.replace(os.sep, "/"))
    return sorted(paths)


@pytest.fixture
def tree_listing():
    return _tree_listing
