"""Utility functions for PyMetaSync."""

import difflib
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

DIFF_UNAVAILABLE: str = "Unable to generate diff."

DEFAULT_LOCAL_DIR: str = "./src/main/dw"
DEFAULT_FILE_EXTENSION: str = ".dwl"
DEFAULT_QUERY: str = "SELECT DeveloperName, Script__c FROM DataWeave_Script__mdt"
DEFAULT_FILENAME_FIELD: str = "DeveloperName"
DEFAULT_FIELD_NAME: str = "Script__c"


# =============================================================================
# Content utilities
# =============================================================================


def normalize_line_endings(content: Optional[str]) -> str:
    """Remove carriage returns so CRLF and LF content compare equal.

    Args:
        content: Text to normalize (None is treated as empty)

    Returns:
        Content without any ``\\r`` characters
    """
    if not content:
        return ""
    return content.replace("\r", "")


def generate_diff(local_content: str, remote_content: str, name: str = "") -> str:
    """Generate a unified diff from local to remote content.

    Never raises: if the diff cannot be produced the placeholder
    ``DIFF_UNAVAILABLE`` is returned instead.

    Args:
        local_content: Normalized local content
        remote_content: Normalized remote content
        name: File name used in the diff headers

    Returns:
        Unified diff string
    """
    try:
        diff_lines = difflib.unified_diff(
            local_content.splitlines(True),
            remote_content.splitlines(True),
            fromfile=f"local/{name}" if name else "local",
            tofile=f"remote/{name}" if name else "remote",
        )
        return "".join(
            line if line.endswith("\n") else line + "\n" for line in diff_lines
        )
    except Exception as e:
        logger.debug(f"Diff generation failed for {name or '<unnamed>'}: {e}")
        return DIFF_UNAVAILABLE


# =============================================================================
# Path and option helpers
# =============================================================================


def resolve_directory_path(directory: str) -> Path:
    """Expand ``~`` and make a directory path absolute.

    Args:
        directory: Absolute, relative or home-relative path

    Returns:
        Resolved Path
    """
    return Path(os.path.expanduser(directory.strip())).resolve()


def normalize_files_to_sync(value: Optional[str]) -> Optional[str]:
    """Normalize a comma-separated list of file names.

    Examples:
        >>> normalize_files_to_sync(" a, ,b ,c")
        'a, b, c'
    """
    if not value:
        return None
    names = [part.strip() for part in value.split(",") if part.strip()]
    return ", ".join(names) or None


def parse_files_to_sync(value: Optional[str]) -> Optional[set[str]]:
    """Turn a comma-separated name list into a set (None when empty)."""
    normalized = normalize_files_to_sync(value)
    if normalized is None:
        return None
    return {name.strip() for name in normalized.split(",")}
