# ABOUTME: Tests for backup utilities.
# ABOUTME: Covers backup_filename, the manifest helpers and create_backup.
import hashlib
import json
import os
import stat
from pathlib import Path

import pytest

from secretguard.utils.backup import (
    MANIFEST_NAME,
    backup_filename,
    create_backup,
    get_backup_path,
    read_manifest,
    write_manifest,
)


class TestBackupFilename:
    """Tests for backup_filename function."""

    def test_hash_prefix(self):
        """Test the name is the first 12 hex chars of the path hash."""
        path = Path("/home/alice/.cursor/mcp.json")
        expected = hashlib.sha256(str(path).encode("utf-8")).hexdigest()[:12]
        assert backup_filename(path) == f"{expected}.json"

    def test_stable(self):
        path = Path("/home/alice/.cursor/mcp.json")
        assert backup_filename(path) == backup_filename(path)

    def test_distinct_paths_differ(self):
        assert backup_filename(Path("/a/mcp.json")) != backup_filename(Path("/b/mcp.json"))


class TestManifest:
    """Tests for read_manifest and write_manifest."""

    def test_missing_manifest(self, tmp_path):
        assert read_manifest(tmp_path) == {}

    def test_write_then_read(self, tmp_path):
        write_manifest(tmp_path, {"/x/mcp.json": "/b/abc.json"})
        assert read_manifest(tmp_path) == {"/x/mcp.json": "/b/abc.json"}

    def test_corrupt_manifest(self, tmp_path):
        """Test a malformed manifest reads as empty."""
        (tmp_path / MANIFEST_NAME).write_text("{not json")
        assert read_manifest(tmp_path) == {}

    def test_non_string_entries_dropped(self, tmp_path):
        (tmp_path / MANIFEST_NAME).write_text(json.dumps({"/a": "/b", "/c": 3}))
        assert read_manifest(tmp_path) == {"/a": "/b"}

    def test_get_backup_path_no_entry(self, tmp_path):
        assert get_backup_path(Path("/nowhere.json"), tmp_path) is None


class TestCreateBackup:
    """Tests for create_backup function."""

    def test_creates_backup_file(self, tmp_path):
        """Test the backup holds the given bytes exactly."""
        config = tmp_path / "mcp.json"
        content = b'{\n  "mcpServers": {}\n}\n'
        backup_dir = tmp_path / "backups"

        backup_path = create_backup(config, content, backup_dir)

        assert backup_path == backup_dir / backup_filename(config)
        assert backup_path.read_bytes() == content

    def test_records_manifest_entry(self, tmp_path):
        config = tmp_path / "mcp.json"
        backup_dir = tmp_path / "backups"

        backup_path = create_backup(config, b"{}", backup_dir)

        assert get_backup_path(config, backup_dir) == backup_path

    def test_creates_backup_dir_if_missing(self, tmp_path):
        """Test that nested backup directories are created."""
        backup_dir = tmp_path / "new_backups" / "nested"
        assert not backup_dir.exists()

        create_backup(tmp_path / "mcp.json", b"{}", backup_dir)

        assert backup_dir.is_dir()

    def test_replaces_existing(self, tmp_path):
        """Test a later backup of the same config overwrites the earlier one."""
        config = tmp_path / "mcp.json"
        backup_dir = tmp_path / "backups"

        create_backup(config, b'{"v": 1}', backup_dir)
        backup_path = create_backup(config, b'{"v": 2}', backup_dir)

        assert backup_path.read_bytes() == b'{"v": 2}'

    def test_multiple_configs_share_manifest(self, tmp_path):
        backup_dir = tmp_path / "backups"
        first = create_backup(tmp_path / "a.json", b"{}", backup_dir)
        second = create_backup(tmp_path / "b.json", b"[]", backup_dir)

        manifest = read_manifest(backup_dir)
        assert manifest[str(tmp_path / "a.json")] == str(first)
        assert manifest[str(tmp_path / "b.json")] == str(second)

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_permissions(self, tmp_path):
        """Test backups are owner-only."""
        backup_dir = tmp_path / "backups"
        backup_path = create_backup(tmp_path / "mcp.json", b"{}", backup_dir)

        assert stat.S_IMODE(backup_dir.stat().st_mode) == 0o700
        assert stat.S_IMODE(backup_path.stat().st_mode) == 0o600
        assert stat.S_IMODE((backup_dir / MANIFEST_NAME).stat().st_mode) == 0o600
