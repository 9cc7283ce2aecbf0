"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real project files (YAML configs).
Failure scenarios use tmp_path to create controlled filesystems.
"""

import pytest

from ddev_manager.backend.core.config import (
    AppConfig,
    find_project_root,
    get_app_config,
    get_server_base_url,
    load_yaml_config,
    resolve_project_path,
    validate_project_root,
)
from ddev_manager.backend.core.config_schema import DdevSchema


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_app_config.cache_clear()
    yield
    get_app_config.cache_clear()


def _write_settings(root, files: dict[str, str]) -> None:
    settings = root / "config" / "settings"
    settings.mkdir(parents=True)
    (root / ".project_root").touch()
    for name, content in files.items():
        (settings / name).write_text(content)


# =============================================================================
# find_project_root
# =============================================================================


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_marker_in_current_directory(self):
        """Should find the real project root from the test working directory."""
        root = find_project_root()

        assert (root / ".project_root").exists()

    def test_finds_marker_in_parent(self, tmp_path, monkeypatch):
        """Should walk up from a nested directory."""
        (tmp_path / ".project_root").touch()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert find_project_root() == tmp_path

    def test_raises_without_marker(self, tmp_path, monkeypatch):
        """Should raise RuntimeError when no marker exists up the tree."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_without_marker(self, tmp_path, monkeypatch):
        """Should convert the failure into SystemExit for entry scripts."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit):
            validate_project_root()


# =============================================================================
# YAML loading
# =============================================================================


class TestLoadYamlConfig:
    """Tests for raw YAML loading."""

    def test_loads_ddev_settings(self):
        """Should return the parsed ddev.yaml mapping."""
        data = load_yaml_config("ddev.yaml")

        assert data["binary"] == "ddev"

    def test_missing_file_raises(self):
        """Should raise FileNotFoundError for an unknown file."""
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does-not-exist.yaml")


class TestAppConfig:
    """Tests for validated configuration."""

    def test_loads_all_sections(self):
        """Should expose typed sections from the real files."""
        config = get_app_config()

        assert config.application.name == "DDEV Manager"
        assert isinstance(config.ddev, DdevSchema)
        assert config.ddev.command_timeout_seconds == 60
        assert config.ddev.config_cache_ttl_seconds == 5
        assert config.ddev.max_upload_bytes == 500 * 1024 * 1024
        assert config.concurrency.semaphores.ddev >= 1
        assert config.security.rate_limiting.api.max_requests == 100

    def test_is_cached(self):
        """Should return the same instance on repeated calls."""
        assert get_app_config() is get_app_config()

    def test_unknown_key_is_rejected(self, tmp_path, monkeypatch):
        """Should refuse a YAML file with fields the schema does not know."""
        real_root = find_project_root()
        files = {
            path.name: path.read_text()
            for path in (real_root / "config" / "settings").glob("*.yaml")
        }
        files["ddev.yaml"] += "\nsurprise: true\n"
        _write_settings(tmp_path, files)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="ddev.yaml"):
            AppConfig()

    def test_non_positive_timeout_is_rejected(self, tmp_path, monkeypatch):
        """Should refuse a zero command timeout."""
        real_root = find_project_root()
        files = {
            path.name: path.read_text()
            for path in (real_root / "config" / "settings").glob("*.yaml")
        }
        files["ddev.yaml"] = files["ddev.yaml"].replace(
            "command_timeout_seconds: 60", "command_timeout_seconds: 0"
        )
        _write_settings(tmp_path, files)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError):
            AppConfig()


class TestServerBaseUrl:
    """Tests for get_server_base_url."""

    def test_builds_url_from_application_yaml(self):
        """Should combine host and port and return the client timeout."""
        base_url, timeout = get_server_base_url()

        server = get_app_config().application.server
        assert base_url == f"http://{server.host}:{server.port}"
        assert isinstance(timeout, float)


class TestResolveProjectPath:
    """Tests for resolve_project_path."""

    def test_absolute_path_unchanged(self, tmp_path):
        assert resolve_project_path(str(tmp_path)) == tmp_path

    def test_relative_path_under_root(self):
        """Should anchor relative paths at the project root."""
        assert resolve_project_path("logs/system.jsonl") == find_project_root() / "logs" / "system.jsonl"
