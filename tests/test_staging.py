"""Tests for the hardlinked copy cache"""

import errno
import os
from unittest.mock import patch

import pytest

from deploy_stager.api.exceptions import CrossDeviceError, FilesystemError
from deploy_stager.core.exclusion import ExclusionRules
from deploy_stager.core.staging import CopyCache, EntryKind, classify


class TestClassify:

    def test_kinds(self, source_tree):
        assert classify(source_tree / "src") == EntryKind.DIRECTORY
        assert classify(source_tree / "src" / "app.rb") == EntryKind.FILE
        assert classify(source_tree / "current") == EntryKind.SYMLINK


class TestCopyCache:

    def test_files_are_hardlinks(self, source_tree, tmp_path):
        destination = tmp_path / "stage"
        CopyCache().copy(source_tree, destination)

        cached = os.stat(source_tree / "src" / "app.rb")
        staged = os.stat(destination / "src" / "app.rb")
        assert (staged.st_dev, staged.st_ino) == (cached.st_dev, cached.st_ino)
        assert staged.st_nlink == 2

    def test_symlink_target_preserved(self, source_tree, tmp_path):
        destination = tmp_path / "stage"
        CopyCache().copy(source_tree, destination)

        link = destination / "current"
        assert link.is_symlink()
        assert os.readlink(link) == "releases/1"

    def test_directories_recreated(self, source_tree, tmp_path):
        destination = tmp_path / "stage"
        stats = CopyCache().copy(source_tree, destination)

        assert (destination / "releases" / "1").is_dir()
        assert not (destination / "releases").is_symlink()
        assert stats.to_dict() == {"files": 2, "directories": 4, "links": 1, "skipped": 0}

    def test_exclusion_uses_cache_relative_paths(self, source_tree, tmp_path, tree_listing):
        destination = tmp_path / "stage"
        stats = CopyCache(ExclusionRules([".git/*"])).copy(source_tree, destination)

        assert tree_listing(destination) == [
            ".git",
            "current",
            "releases",
            "releases/1",
            "src",
            "src/app.rb",
        ]
        assert stats.skipped == 1

    def test_missing_cache(self, tmp_path):
        with pytest.raises(FilesystemError):
            CopyCache().copy(tmp_path / "missing", tmp_path / "stage")

    def test_non_empty_destination(self, source_tree, tmp_path):
        destination = tmp_path / "stage"
        destination.mkdir()
        (destination / "leftover").write_text("")

        with pytest.raises(FilesystemError, match="not empty"):
            CopyCache().copy(source_tree, destination)

    def test_link_across_devices(self, source_tree, tmp_path):
        failure = OSError(errno.EXDEV, "Invalid cross-device link")
        with patch("deploy_stager.core.staging.os.link", side_effect=failure):
            with pytest.raises(CrossDeviceError) as exc_info:
                CopyCache().copy(source_tree, tmp_path / "stage")

        assert exc_info.value.error_code == "DS004"

    def test_other_link_failure(self, source_tree, tmp_path):
        failure = OSError(errno.EACCES, "Permission denied")
        with patch("deploy_stager.core.staging.os.link", side_effect=failure):
            with pytest.raises(FilesystemError) as exc_info:
                CopyCache().copy(source_tree, tmp_path / "stage")

        assert not isinstance(exc_info.value, CrossDeviceError)

    def test_different_device_detected_before_linking(self, source_tree, tmp_path):
        destination = tmp_path / "stage"
        real_stat = os.stat

        def fake_stat(path, *args, **kwargs):
            result = real_stat(path, *args, **kwargs)
            if str(path) == str(destination):
                values = list(result)[:10]
                values[2] += 1
                return os.stat_result(values)
            return result

        with patch("deploy_stager.core.staging.os.stat", side_effect=fake_stat):
            with patch("deploy_stager.core.staging.os.link") as mock_link:
                with pytest.raises(CrossDeviceError):
                    CopyCache().copy(source_tree, destination)

        mock_link.assert_not_called()
