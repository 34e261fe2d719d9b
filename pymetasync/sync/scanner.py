"""File representations and directory scanning for sync operations."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..exceptions import FileAccessError
from ..utils import normalize_line_endings

logger = logging.getLogger(__name__)


class SyncFile(Protocol):
    """Contract shared by local and remote files."""

    name: str
    extension: str

    @property
    def full_name(self) -> str: ...

    def read(self) -> str: ...

    def write(self, content: str) -> None: ...


@dataclass
class LocalFile:
    """Represents a file in the local directory.

    Content is never cached: every read and write goes to disk.
    """

    directory: Path
    """Directory holding the file"""

    name: str
    """Logical name (without extension)"""

    extension: str
    """File extension including the leading dot"""

    @property
    def full_name(self) -> str:
        """Name plus extension, the comparison key."""
        return f"{self.name}{self.extension}"

    @property
    def path(self) -> Path:
        """Absolute path of the backing file."""
        return self.directory / self.full_name

    def exists(self) -> bool:
        """Check whether the file currently exists on disk."""
        return self.path.is_file()

    def read(self) -> str:
        """Read normalized content, or an empty string if the file is missing.

        Bytes that are not valid UTF-8 are replaced with U+FFFD.

        Raises:
            FileAccessError: If the file exists but cannot be read
        """
        if not self.exists():
            return ""
        try:
            content = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FileAccessError(f"Cannot read {self.path}: {e}") from e
        return normalize_line_endings(content)

    def write(self, content: str) -> None:
        """Normalize content and overwrite the file with it.

        The directory must already exist.

        Raises:
            FileAccessError: If the file cannot be written
        """
        normalized = normalize_line_endings(content)
        try:
            # newline="" keeps "\n" as-is on every platform
            with self.path.open("w", encoding="utf-8", newline="") as f:
                f.write(normalized)
        except OSError as e:
            raise FileAccessError(f"Cannot write {self.path}: {e}") from e
        logger.debug(f"Wrote {len(normalized)} characters to {self.path}")


@dataclass
class RemoteFile:
    """Represents a remote record held in memory.

    Writing only replaces the in-memory content; nothing is sent back to
    the remote source.
    """

    name: str
    """Logical name (value of the filename field)"""

    extension: str
    """Extension shared with the local workspace"""

    content: str = field(default="", repr=False)
    """Record content (normalized on construction)"""

    def __post_init__(self) -> None:
        self.content = normalize_line_endings(self.content)

    @property
    def full_name(self) -> str:
        """Name plus extension, the comparison key."""
        return f"{self.name}{self.extension}"

    def read(self) -> str:
        """Return the normalized in-memory content."""
        return self.content

    def write(self, content: str) -> None:
        """Replace the in-memory content."""
        self.content = normalize_line_endings(content)


class DirectoryScanner:
    """Lists the files of a directory that carry a given extension.

    Only top-level regular files are considered, since a logical name maps
    to ``<directory>/<name><extension>``.

    Examples:
        >>> scanner = DirectoryScanner(".dwl")
        >>> names = scanner.scan_names(Path("./src/main/dw"))
    """

    def __init__(self, extension: str):
        """Initialize directory scanner.

        Args:
            extension: Suffix a file name must end with (e.g. ".dwl")
        """
        self.extension = extension

    def matches(self, path: Path) -> bool:
        """Check if a path is a regular file with the scanner's extension."""
        if not path.name.endswith(self.extension):
            return False
        if len(path.name) == len(self.extension):
            return False
        return path.is_file()

    def scan_names(self, directory: Path) -> list[str]:
        """Scan a directory and return the logical names found.

        Args:
            directory: Directory to scan

        Returns:
            List of file names with the extension stripped
        """
        names: list[str] = []

        try:
            for item in directory.iterdir():
                if not self.matches(item):
                    continue
                names.append(item.name[: len(item.name) - len(self.extension)])
        except FileNotFoundError:
            logger.debug(f"Directory not found while scanning: {directory}")
        except PermissionError:
            logger.warning(f"Permission denied while scanning: {directory}")

        return names
