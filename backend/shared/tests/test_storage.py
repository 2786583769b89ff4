"""Tests for keyed blob storage."""

import os
import stat
from unittest.mock import patch

import pytest

from shared.storage import LocalBlobStorage, MemoryBlobStorage


class TestMemoryBlobStorage:
    def test_read_missing_key_returns_none(self):
        assert MemoryBlobStorage().read("solitaire_game") is None

    def test_write_then_read(self):
        storage = MemoryBlobStorage()
        storage.write("solitaire_stats", '{"gamesWon":1}')

        assert storage.read("solitaire_stats") == '{"gamesWon":1}'

    def test_initial_blobs_are_copied(self):
        initial = {"a": "1"}
        storage = MemoryBlobStorage(initial)
        storage.write("b", "2")

        assert initial == {"a": "1"}
        assert storage.keys() == ["a", "b"]

    def test_delete_missing_key_is_noop(self):
        storage = MemoryBlobStorage({"a": "1"})
        storage.delete("missing")
        storage.delete("a")

        assert storage.keys() == []


class TestLocalBlobStorage:
    def test_creates_directory_on_first_write(self, tmp_path):
        data_dir = tmp_path / "data"
        storage = LocalBlobStorage(data_dir)

        storage.write("solitaire_game", "{}")

        assert data_dir.is_dir()
        assert (data_dir / "solitaire_game.json").exists()

    def test_read_returns_written_content(self, tmp_path):
        storage = LocalBlobStorage(str(tmp_path))
        content = '{"score":15,"moves":3}'

        storage.write("solitaire_game", content)

        assert storage.read("solitaire_game") == content

    def test_read_missing_key_returns_none(self, tmp_path):
        storage = LocalBlobStorage(tmp_path / "never_created")

        assert storage.read("solitaire_game") is None

    def test_overwrites_existing_blob(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)

        storage.write("solitaire_stats", "original")
        storage.write("solitaire_stats", "updated")

        assert (tmp_path / "solitaire_stats.json").read_text(encoding="utf-8") == "updated"

    def test_writes_utf8_content(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)
        content = '{"label":"Q♥"}'

        storage.write("cards", content)

        assert storage.read("cards") == content

    def test_delete_removes_blob(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)
        storage.write("solitaire_game", "{}")

        storage.delete("solitaire_game")

        assert storage.read("solitaire_game") is None
        assert not (tmp_path / "solitaire_game.json").exists()

    def test_delete_missing_blob_is_noop(self, tmp_path):
        LocalBlobStorage(tmp_path).delete("solitaire_game")

    @pytest.mark.parametrize("key", ["../escape", "../../etc/passwd", "nested/key", ""])
    def test_rejects_keys_outside_root(self, tmp_path, key):
        storage = LocalBlobStorage(tmp_path / "data")

        with pytest.raises(ValueError, match="Path traversal rejected"):
            storage.write(key, "malicious")
        with pytest.raises(ValueError, match="Path traversal rejected"):
            storage.read(key)

    def test_does_not_create_directory_on_traversal_rejection(self, tmp_path):
        data_dir = tmp_path / "data"
        storage = LocalBlobStorage(data_dir)

        with pytest.raises(ValueError, match="Path traversal rejected"):
            storage.write("../escape", "malicious")

        assert not data_dir.exists()


class TestLocalBlobStorageErrorHandling:
    def test_cleans_up_temp_on_fdopen_failure(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)

        with (
            patch("os.fdopen", side_effect=OSError("fdopen failure")),
            pytest.raises(OSError, match="fdopen failure"),
        ):
            storage.write("solitaire_game", "content")

        assert not (tmp_path / "solitaire_game.json").exists()
        assert list(tmp_path.glob(".blob_*.tmp")) == []

    def test_failed_write_keeps_previous_blob(self, tmp_path):
        """A crash mid-write never leaves a half-written save behind."""
        storage = LocalBlobStorage(tmp_path)
        storage.write("solitaire_game", "previous")

        with (
            patch("os.fsync", side_effect=OSError("fsync failure")),
            pytest.raises(OSError, match="fsync failure"),
        ):
            storage.write("solitaire_game", "next")

        assert storage.read("solitaire_game") == "previous"
        assert list(tmp_path.glob(".blob_*.tmp")) == []

    def test_closes_fd_on_fdopen_failure(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)

        with (
            patch("os.fdopen", side_effect=OSError("fdopen failure")) as mock_fdopen,
            patch("os.close", wraps=os.close) as mock_close,
            pytest.raises(OSError, match="fdopen failure"),
        ):
            storage.write("solitaire_game", "content")

        mock_close.assert_called_once_with(mock_fdopen.call_args[0][0])

    def test_no_double_close_when_fsync_fails(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)

        with (
            patch("os.fsync", side_effect=OSError("fsync failure")),
            patch("os.close") as mock_close,
            pytest.raises(OSError, match="fsync failure"),
        ):
            storage.write("solitaire_game", "content")

        mock_close.assert_not_called()


class TestLocalBlobStoragePermissions:
    def test_directory_is_owner_only(self, tmp_path):
        data_dir = tmp_path / "data"
        LocalBlobStorage(data_dir).write("solitaire_game", "{}")

        assert stat.S_IMODE(data_dir.stat().st_mode) == 0o700

    def test_blob_file_is_owner_only(self, tmp_path):
        storage = LocalBlobStorage(tmp_path)

        storage.write("solitaire_game", "first")
        storage.write("solitaire_game", "second")

        file_mode = (tmp_path / "solitaire_game.json").stat().st_mode
        assert stat.S_IMODE(file_mode) == 0o600
        assert not file_mode & (stat.S_IRGRP | stat.S_IWGRP | stat.S_IROTH | stat.S_IWOTH)
