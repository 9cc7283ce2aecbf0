"""
Unit Tests for config.yaml access.

Uses tmp_path for real files.
"""

from unittest.mock import patch

import pytest
import yaml

from ddev_manager.backend.core.exceptions import ConfigReadError, FilesystemPermissionError
from ddev_manager.backend.ddev.config_file import (
    config_path_for,
    dump_config,
    read_config,
    write_config,
)


class TestConfigPath:
    def test_points_into_dot_ddev(self, tmp_path):
        """Should resolve to <approot>/.ddev/config.yaml."""
        assert config_path_for(tmp_path) == tmp_path / ".ddev" / "config.yaml"


class TestReadConfig:
    """Tests for read_config."""

    def test_reads_mapping(self, project_dir):
        """Should return the document as a dict."""
        root = project_dir("mysite", {"php_version": "8.2", "router_http_port": "8080"})

        config = read_config(config_path_for(root))

        assert config == {"name": "mysite", "php_version": "8.2", "router_http_port": "8080"}

    def test_missing_file(self, tmp_path):
        """Should raise ConfigReadError when the file does not exist."""
        with pytest.raises(ConfigReadError, match="not found"):
            read_config(tmp_path / ".ddev" / "config.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Should raise ConfigReadError for unparsable YAML."""
        path = tmp_path / "config.yaml"
        path.write_text("name: [unclosed\n")

        with pytest.raises(ConfigReadError, match="Invalid YAML"):
            read_config(path)

    def test_invalid_utf8(self, tmp_path):
        """Should raise ConfigReadError for bytes that are not UTF-8."""
        path = tmp_path / "config.yaml"
        path.write_bytes(b"name: caf\xe9\n")

        with pytest.raises(ConfigReadError, match="UTF-8"):
            read_config(path)

    def test_non_mapping(self, tmp_path):
        """Should reject a document that is not a mapping."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigReadError, match="mapping"):
            read_config(path)

    def test_empty_document(self, tmp_path):
        """Should treat an empty file as an empty mapping."""
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert read_config(path) == {}

    def test_permission_denied(self, tmp_path):
        """Should raise FilesystemPermissionError when the file is unreadable."""
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(FilesystemPermissionError):
                read_config(tmp_path / "config.yaml")


class TestDumpConfig:
    """Tests for dump_config."""

    def test_block_style_in_key_order(self):
        """Should write block style and keep insertion order."""
        text = dump_config({"name": "mysite", "type": "php", "additional_hostnames": ["a", "b"]})

        assert text.splitlines() == [
            "name: mysite",
            "type: php",
            "additional_hostnames:",
            "- a",
            "- b",
        ]

    def test_does_not_wrap_long_lines(self):
        """Should keep long values on one line."""
        long_value = "x " * 200

        text = dump_config({"web_environment": [long_value.strip()]})

        assert len(text.splitlines()) == 2


class TestWriteConfig:
    """Tests for write_config."""

    def test_replaces_document(self, project_dir):
        """Should rewrite the whole file with the new document."""
        root = project_dir("mysite", {"php_version": "8.1"})
        path = config_path_for(root)

        write_config(path, {"name": "mysite", "php_version": "8.3", "xdebug_enabled": True})

        assert yaml.safe_load(path.read_text()) == {
            "name": "mysite",
            "php_version": "8.3",
            "xdebug_enabled": True,
        }

    def test_leaves_no_temp_files(self, project_dir):
        """Should not leave temporary files next to config.yaml."""
        root = project_dir("mysite")
        path = config_path_for(root)

        write_config(path, {"name": "mysite"})

        assert sorted(p.name for p in path.parent.iterdir()) == ["config.yaml"]

    def test_keeps_file_mode(self, project_dir):
        """Should preserve the permission bits of the replaced file."""
        root = project_dir("mysite")
        path = config_path_for(root)
        path.chmod(0o640)

        write_config(path, {"name": "mysite"})

        assert path.stat().st_mode & 0o777 == 0o640

    def test_failed_write_keeps_original(self, project_dir):
        """Should leave the original untouched and clean up on failure."""
        root = project_dir("mysite", {"php_version": "8.1"})
        path = config_path_for(root)
        before = path.read_text()

        with patch("ddev_manager.backend.ddev.config_file.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                write_config(path, {"name": "mysite"})

        assert path.read_text() == before
        assert sorted(p.name for p in path.parent.iterdir()) == ["config.yaml"]

    def test_permission_denied(self, project_dir):
        """Should raise FilesystemPermissionError when the directory is read-only."""
        root = project_dir("mysite")
        path = config_path_for(root)

        with patch(
            "ddev_manager.backend.ddev.config_file.tempfile.mkstemp",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(FilesystemPermissionError):
                write_config(path, {"name": "mysite"})
