"""
Project config.yaml access.

Reads and rewrites a project's ``.ddev/config.yaml``. Files are always
rewritten whole: the merged document is dumped to a sibling temp file and
moved over the original with os.replace.

These functions are blocking; call them through run_blocking().
"""

import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from ddev_manager.backend.core.exceptions import ConfigReadError, FilesystemPermissionError

CONFIG_DIR = ".ddev"
CONFIG_FILENAME = "config.yaml"


def config_path_for(approot: str | Path) -> Path:
    """Location of the config document inside a project root."""
    return Path(approot) / CONFIG_DIR / CONFIG_FILENAME


def read_config(path: Path) -> dict[str, Any]:
    """
    Load a config.yaml document.

    Raises:
        FilesystemPermissionError: If the file cannot be read due to permissions
        ConfigReadError: If the file is missing, not UTF-8 or not a YAML mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except PermissionError as e:
        raise FilesystemPermissionError(f"Permission denied reading {path}") from e
    except FileNotFoundError as e:
        raise ConfigReadError(f"Config file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise ConfigReadError(f"Config file {path} is not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigReadError(f"Invalid YAML in {path}: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigReadError(f"Config file {path} does not contain a mapping")
    return document


def dump_config(document: dict[str, Any]) -> str:
    """Serialize a config document the way ddev writes it (block style, key order kept)."""
    return yaml.safe_dump(
        document,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
        width=float("inf"),
    )


def write_config(path: Path, document: dict[str, Any]) -> None:
    """
    Replace a config.yaml document atomically.

    Raises:
        FilesystemPermissionError: If the directory or file is not writable
    """
    content = dump_config(document)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".config.", suffix=".yaml.tmp", dir=path.parent)
    except PermissionError as e:
        raise FilesystemPermissionError(f"Permission denied writing {path}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o777)
        os.replace(tmp_name, path)
    except PermissionError as e:
        _discard(tmp_name)
        raise FilesystemPermissionError(f"Permission denied writing {path}") from e
    except BaseException:
        _discard(tmp_name)
        raise


def _discard(tmp_name: str) -> None:
    try:
        os.unlink(tmp_name)
    except FileNotFoundError:
        pass
