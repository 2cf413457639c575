"""End-to-end tests for the staging strategy against the local host"""

import asyncio
import os
from unittest.mock import MagicMock, patch

import pytest

from deploy_stager.api.exceptions import CommandFailedError, ConfigError, FilesystemError
from deploy_stager.models import OperationStatus, StrategyConfig
from deploy_stager.services.stage_service import RsyncStrategy
from deploy_stager.sources import DirectorySource


def make_strategy(config_data, executor):
    config = StrategyConfig.from_dict(config_data)
    return RsyncStrategy(config, DirectorySource(config.repository), executor)


class TestDeploy:

    def test_copy_cache_deploy(self, stage_config, recording_executor, remote_layout, tree_listing, tmp_path):
        releases, remote_tmp = remote_layout
        strategy = make_strategy(stage_config(), recording_executor)

        result = asyncio.run(strategy.deploy("abc123"))

        release = releases / "20240101"
        assert result.status == OperationStatus.SUCCESS
        assert result.steps == ["checkout", "revision", "package", "upload", "unpack"]
        assert (release / "REVISION").read_text() == "abc123\n"
        assert (release / "src" / "app.rb").read_text() == "puts 'hello'\n"
        assert not (release / ".git" / "config").exists()
        assert os.readlink(release / "current") == "releases/1"

        # local temporaries removed, cache kept for the next run
        copy_dir = tmp_path / "copy"
        assert sorted(os.listdir(copy_dir)) == ["app"]
        assert tree_listing(copy_dir / "app") == [
            ".git",
            ".git/config",
            "current",
            "releases",
            "releases/1",
            "src",
            "src/app.rb",
        ]

        # archive removed remotely by the unpack command
        assert os.listdir(remote_tmp) == []
        assert result.remote_archive_path == str(remote_tmp / "20240101.tar.gz")
        assert recording_executor.commands == [
            f"cd {releases} && tar xzf {remote_tmp}/20240101.tar.gz && rm {remote_tmp}/20240101.tar.gz"
        ]
        assert (recording_executor.opened, recording_executor.closed) == (1, 1)

    def test_second_deploy_refreshes_cache(self, stage_config, recording_executor, remote_layout, source_tree):
        releases, _ = remote_layout
        asyncio.run(make_strategy(stage_config(), recording_executor).deploy("abc123"))

        (source_tree / "src" / "app.rb").write_text("puts 'v2'\n")
        config = stage_config(release_path=str(releases / "20240102"))
        asyncio.run(make_strategy(config, recording_executor).deploy("def456"))

        assert (releases / "20240102" / "src" / "app.rb").read_text() == "puts 'v2'\n"
        assert (releases / "20240102" / "REVISION").read_text() == "def456\n"
        assert (releases / "20240101" / "REVISION").read_text() == "abc123\n"

    def test_export_with_cache_drops_metadata(self, stage_config, recording_executor, remote_layout):
        releases, _ = remote_layout
        config = stage_config(checkout_strategy="export", rsync_exclude=None)

        asyncio.run(make_strategy(config, recording_executor).deploy("abc123"))

        assert not (releases / "20240101" / ".git").exists()
        assert (releases / "20240101" / "src" / "app.rb").exists()

    def test_checkout_without_cache_sweeps_exclusions(self, stage_config, recording_executor, remote_layout, source_tree):
        releases, _ = remote_layout
        (source_tree / "debug.log").write_text("noise\n")
        (source_tree / "src" / "keep.log").write_text("kept\n")
        config = stage_config(copy_cache=None, rsync_exclude=[".git", "*.log"])

        asyncio.run(make_strategy(config, recording_executor).deploy("abc123"))

        release = releases / "20240101"
        assert not (release / ".git").exists()
        assert not (release / "debug.log").exists()
        assert (release / "src" / "keep.log").exists()

    def test_build_script_runs_in_staging_tree(self, stage_config, recording_executor, remote_layout):
        releases, _ = remote_layout
        config = stage_config(build_script="echo compiled > build.txt")

        asyncio.run(make_strategy(config, recording_executor).deploy("abc123"))

        assert (releases / "20240101" / "build.txt").read_text() == "compiled\n"

    def test_build_failure_cleans_up(self, stage_config, recording_executor, tmp_path):
        strategy = make_strategy(stage_config(build_script="exit 3"), recording_executor)

        with pytest.raises(CommandFailedError) as exc_info:
            asyncio.run(strategy.deploy("abc123"))

        assert exc_info.value.returncode == 3
        assert not strategy.destination.exists()
        assert not strategy.archive_path.exists()
        assert recording_executor.commands == []

    def test_unpack_failure_cleans_up(self, stage_config, recording_executor, tmp_path):
        config = stage_config(releases_path=str(tmp_path / "missing"))
        strategy = make_strategy(config, recording_executor)

        with pytest.raises(CommandFailedError):
            asyncio.run(strategy.deploy("abc123"))

        assert not strategy.destination.exists()
        assert not strategy.archive_path.exists()
        assert recording_executor.closed == 1

    def test_distributes_to_selected_mirror(self, stage_config, recording_executor, remote_layout):
        releases, _ = remote_layout
        config = stage_config(rsync_server=["mirror1:/srv/app", "mirror2:/srv/app"])
        strategy = make_strategy(config, recording_executor)

        first = asyncio.run(strategy.deploy("abc123"))
        second = asyncio.run(strategy.deploy("abc123"))

        assert first.server == "mirror1:/srv/app"
        assert second.server == "mirror2:/srv/app"
        assert first.steps[-1] == "distribute"
        assert recording_executor.commands[1] == f"rsync -qa {releases}/20240101/ mirror1:/srv/app"

    def test_invalid_compression_fails_before_running_anything(self, stage_config):
        source = MagicMock()
        executor = MagicMock()

        with patch("deploy_stager.services.stage_service.run_command") as mock_run:
            with pytest.raises(ConfigError):
                RsyncStrategy(stage_config(copy_compression=":foo"), source, executor)

        mock_run.assert_not_called()
        executor.run.assert_not_called()

    def test_cache_without_application(self, stage_config, recording_executor, remote_layout, tmp_path):
        releases, _ = remote_layout
        strategy = make_strategy(stage_config(application=None), recording_executor)

        result = asyncio.run(strategy.deploy("abc123"))

        assert result.status == OperationStatus.SUCCESS
        assert (releases / "20240101" / "src" / "app.rb").read_text() == "puts 'hello'\n"
        assert os.listdir(tmp_path / "copy") == ["20240101-cache"]
        assert (tmp_path / "copy" / "20240101-cache" / "src" / "app.rb").exists()

    @pytest.mark.parametrize("cache", ["copy/20240101", "copy", "copy/20240101/cache"])
    def test_cache_overlapping_staging_directory(self, stage_config, recording_executor, tmp_path, cache):
        config = stage_config(copy_cache=str(tmp_path / cache))

        with pytest.raises(ConfigError, match="overlaps the staging directory"):
            make_strategy(config, recording_executor)

    def test_unwritable_copy_dir(self, stage_config, recording_executor, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        strategy = make_strategy(stage_config(copy_dir=str(blocker), copy_cache=None), recording_executor)

        with pytest.raises(FilesystemError) as exc_info:
            asyncio.run(strategy.deploy("abc123"))

        assert exc_info.value.error_code == "DS003"
        assert exc_info.value.path == str(blocker)
        assert recording_executor.commands == []

    def test_revision_write_failure_cleans_up(self, stage_config, recording_executor, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("not a repository\n")
        strategy = make_strategy(stage_config(repository=str(notes), copy_cache=None), recording_executor)

        with pytest.raises(FilesystemError, match="REVISION"):
            asyncio.run(strategy.deploy("abc123"))

        assert not strategy.destination.exists()
        assert not strategy.archive_path.exists()
        assert recording_executor.opened == 0


class TestCheck:

    def test_local_dependencies(self, stage_config, recording_executor):
        result = asyncio.run(make_strategy(stage_config(), recording_executor).check())
        assert result.is_valid, str(result)

    def test_missing_remote_decompressor(self, stage_config):
        executor = MagicMock()
        executor.target = "web1"

        async def missing(name):
            return False

        executor.has_command = missing

        result = asyncio.run(make_strategy(stage_config(), executor).check())

        assert not result.is_valid
        assert "remote command not found on web1: tar" in result.errors
