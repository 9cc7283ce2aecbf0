"""
Core Utilities.

Shared utility functions used across the backend.
"""

import re
from datetime import datetime, timezone

PROJECT_NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"
_PROJECT_NAME_RE = re.compile(PROJECT_NAME_PATTERN)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_valid_project_name(name: str) -> bool:
    """Check a project name against the allowlist (letters, digits, '-', '_')."""
    return 0 < len(name) <= 50 and bool(_PROJECT_NAME_RE.match(name))
