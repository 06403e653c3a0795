"""Tests for atomic data file writes."""

import os
import stat
from unittest.mock import patch

import pytest

from shared.storage import write_text_atomic


class TestWriteTextAtomic:
    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "data" / "nested" / "ledger.json"

        written = write_text_atomic(target, "{}")

        assert written == target.resolve()
        assert target.read_text(encoding="utf-8") == "{}"

    def test_overwrites_existing_file(self, tmp_path):
        target = tmp_path / "ledger.json"

        write_text_atomic(target, "original")
        write_text_atomic(target, "updated")

        assert target.read_text(encoding="utf-8") == "updated"

    def test_writes_utf8_content(self, tmp_path):
        target = tmp_path / "ledger.json"
        content = '{"players":["百合子","守正"],"type":"パねぇ！"}'

        write_text_atomic(target, content)

        assert target.read_text(encoding="utf-8") == content

    def test_accepts_string_path(self, tmp_path):
        target = str(tmp_path / "ledger.json")

        write_text_atomic(target, "x")

        assert (tmp_path / "ledger.json").exists()

    def test_no_temp_files_left(self, tmp_path):
        write_text_atomic(tmp_path / "ledger.json", "x", prefix=".ledger_")

        assert list(tmp_path.glob(".ledger_*.tmp")) == []


class TestWriteTextAtomicErrorHandling:
    def test_cleans_up_temp_on_fdopen_failure(self, tmp_path):
        """If os.fdopen fails, the temp file is removed and no target is created."""
        target = tmp_path / "ledger.json"

        with (
            patch("os.fdopen", side_effect=OSError("fdopen failure")),
            pytest.raises(OSError, match="fdopen failure"),
        ):
            write_text_atomic(target, "content")

        assert not target.exists()
        assert list(tmp_path.glob(".data_*.tmp")) == []

    def test_fsync_failure_keeps_previous_version(self, tmp_path):
        target = tmp_path / "ledger.json"
        write_text_atomic(target, "previous")

        with (
            patch("os.fsync", side_effect=OSError("fsync failure")),
            pytest.raises(OSError, match="fsync failure"),
        ):
            write_text_atomic(target, "next")

        assert target.read_text(encoding="utf-8") == "previous"
        assert list(tmp_path.glob(".data_*.tmp")) == []

    def test_closes_fd_on_fdopen_failure(self, tmp_path):
        with (
            patch("os.fdopen", side_effect=OSError("fdopen failure")) as mock_fdopen,
            patch("os.close", wraps=os.close) as mock_close,
            pytest.raises(OSError, match="fdopen failure"),
        ):
            write_text_atomic(tmp_path / "ledger.json", "content")

        fd_arg = mock_fdopen.call_args[0][0]
        mock_close.assert_called_once_with(fd_arg)

    def test_no_double_close_when_fsync_fails(self, tmp_path):
        """After fdopen takes ownership, os.close(fd) must not be called in cleanup."""
        with (
            patch("os.fsync", side_effect=OSError("fsync failure")),
            patch("os.close") as mock_close,
            pytest.raises(OSError, match="fsync failure"),
        ):
            write_text_atomic(tmp_path / "ledger.json", "content")

        mock_close.assert_not_called()


class TestWriteTextAtomicPermissions:
    def test_file_created_with_owner_only_permissions(self, tmp_path):
        target = tmp_path / "ledger.json"

        write_text_atomic(target, "content")

        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_overwritten_file_retains_owner_only_permissions(self, tmp_path):
        target = tmp_path / "ledger.json"
        target.write_text("old")
        target.chmod(0o644)

        write_text_atomic(target, "new")

        mode = target.stat().st_mode
        assert not mode & stat.S_IRGRP
        assert not mode & stat.S_IROTH
