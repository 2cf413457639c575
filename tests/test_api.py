"""Tests for the public API and the command line interface"""

import json
import logging

import pytest
import yaml
from click.testing import CliRunner

import deploy_stager
from deploy_stager import Stager, StagerError, __version__, deploy
from deploy_stager.api.exceptions import MissingParameterError
from deploy_stager.cli.main import cli
from deploy_stager.constants import ErrorCode
from deploy_stager.transport import LocalExecutor, SSHExecutor


@pytest.fixture
def config_file(tmp_path, stage_config):
    path = tmp_path / "deploy.yml"
    path.write_text(yaml.safe_dump(stage_config()))
    return path


class TestStager:

    def test_builds_collaborators_from_configuration(self, stage_config):
        stager = Stager(stage_config())
        assert isinstance(stager.strategy.executor, LocalExecutor)

    def test_ssh_host(self, stage_config):
        stager = Stager(stage_config(host="deploy@web1:2222"))
        executor = stager.strategy.executor
        assert isinstance(executor, SSHExecutor)
        assert executor.port == 2222

    def test_missing_host(self, stage_config):
        with pytest.raises(MissingParameterError):
            Stager(stage_config(host=None))

    def test_deploy(self, stage_config, remote_layout):
        releases, _ = remote_layout
        result = deploy(stage_config(), "abc123")

        assert result.is_success
        assert (releases / "20240101" / "REVISION").read_text() == "abc123\n"

    def test_from_file_with_overrides(self, config_file):
        stager = Stager.from_file(config_file, overrides={"host": "deploy@web1"})
        assert stager.strategy.executor.target == "deploy@web1"


class TestCli:

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        yield
        logging.disable(logging.NOTSET)

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_package_metadata(self):
        assert deploy_stager.__author__ == "deploy-stager contributors"
        assert deploy_stager.__license__ == "MIT"
        assert "__email__" not in deploy_stager.__all__

    def test_stage(self, config_file, remote_layout):
        releases, _ = remote_layout
        result = CliRunner().invoke(cli, ["stage", str(config_file), "--revision", "abc123"])

        assert result.exit_code == 0, result.output
        assert "abc123" in result.output
        assert (releases / "20240101" / "REVISION").read_text() == "abc123\n"

    def test_stage_json(self, config_file):
        result = CliRunner().invoke(cli, ["-q", "stage", str(config_file), "-r", "abc123", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "success"
        assert data["revision"] == "abc123"

    def test_stage_requires_revision(self, config_file):
        result = CliRunner().invoke(cli, ["stage", str(config_file)])
        assert result.exit_code == 2

    def test_stage_failure_exits_nonzero(self, tmp_path):
        result = CliRunner().invoke(cli, ["stage", str(tmp_path / "missing.yml"), "-r", "abc123"])
        assert result.exit_code == 1
        assert "Stage failed" in result.output

    def test_stage_filesystem_failure_exits_nonzero(self, tmp_path, stage_config):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        path = tmp_path / "blocked.yml"
        path.write_text(yaml.safe_dump(stage_config(copy_dir=str(blocker), copy_cache=None)))

        result = CliRunner().invoke(cli, ["stage", str(path), "-r", "abc123"])

        assert result.exit_code == 1
        assert "Stage failed" in result.output

    def test_check(self, config_file):
        result = CliRunner().invoke(cli, ["check", str(config_file)])
        assert result.exit_code == 0, result.output
        assert "All checks passed" in result.output

    def test_config_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("DEPLOY_STAGER_CONFIG", str(config_file))
        result = CliRunner().invoke(cli, ["check"])
        assert result.exit_code == 0, result.output


def test_errors_share_base_class():
    assert issubclass(MissingParameterError, StagerError)


def test_error_codes_are_unique():
    codes = [value for name, value in vars(ErrorCode).items() if name.isupper()]
    assert sorted(codes) == ["DS001", "DS002", "DS003", "DS004", "DS005"]
