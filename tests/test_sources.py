"""Tests for source control collaborators"""

import pytest

from deploy_stager.api.exceptions import ConfigError, MissingParameterError
from deploy_stager.sources import DirectorySource, GitSource, create_source


class TestGitSource:

    def test_checkout(self):
        source = GitSource("git@example.com:shop.git")
        assert source.checkout("abc123", "/tmp/shop") == (
            "git clone -q git@example.com:shop.git /tmp/shop && "
            "cd /tmp/shop && "
            "git checkout -q -B deploy abc123"
        )

    def test_checkout_with_branch(self):
        source = GitSource("git@example.com:shop.git", branch="main")
        assert source.checkout("abc123", "/tmp/shop").startswith("git clone -q -b main ")

    def test_export_drops_metadata(self):
        command = GitSource("repo").export("abc123", "/tmp/shop")
        assert command.endswith("&& rm -Rf /tmp/shop/.git")

    def test_sync(self):
        command = GitSource("repo").sync("abc123", "/tmp/cache")
        assert command.startswith("cd /tmp/cache && git fetch -q repo")
        assert "git reset -q --hard abc123" in command

    def test_accepts_host_key(self):
        reply = GitSource("repo").handle_data(
            {}, "stderr", "Are you sure you want to continue connecting (yes/no/[fingerprint])?"
        )
        assert reply == "yes\n"

    def test_password_sent_once(self):
        source = GitSource("repo", password="hunter2")
        state = {}
        assert source.handle_data(state, "stderr", "Password:") == "hunter2\n"
        assert source.handle_data(state, "stderr", "Password:") is None

    def test_ignores_regular_output(self):
        assert GitSource("repo").handle_data({}, "stdout", "Cloning into 'shop'...") is None


class TestDirectorySource:

    def test_commands(self):
        source = DirectorySource("/src/shop")
        assert source.checkout("abc123", "/tmp/shop") == "cp -R /src/shop /tmp/shop"
        assert source.export("abc123", "/tmp/shop") == "cp -R /src/shop /tmp/shop && rm -Rf /tmp/shop/.git"
        assert source.sync("abc123", "/tmp/shop") == "rm -rf /tmp/shop && cp -R /src/shop /tmp/shop"
        assert source.local_command == "cp"


class TestCreateSource:

    def test_default_is_git(self):
        assert isinstance(create_source(None, "repo"), GitSource)

    @pytest.mark.parametrize("scm", ["none", ":none", "directory"])
    def test_directory(self, scm):
        assert isinstance(create_source(scm, "/src"), DirectorySource)

    def test_missing_repository(self):
        with pytest.raises(MissingParameterError):
            create_source("git", None)

    def test_unknown(self):
        with pytest.raises(ConfigError):
            create_source("svn", "repo")
