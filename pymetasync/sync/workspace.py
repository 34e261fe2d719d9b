"""Local and remote workspaces and the per-run workspace registry."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from ..exceptions import WorkspaceStateError
from .scanner import DirectoryScanner, LocalFile, RemoteFile

logger = logging.getLogger(__name__)


class LocalWorkspace:
    """Files with one extension in a local directory.

    The directory is re-scanned on every listing, so changes made between
    calls are visible.
    """

    def __init__(
        self,
        local_dir: Union[str, Path],
        file_extension: str,
        include: Optional[Iterable[str]] = None,
    ):
        """Initialize local workspace.

        Args:
            local_dir: Directory holding the files
            file_extension: Extension of the files to consider
            include: Optional logical names to restrict listings to
        """
        self.local_dir = Path(local_dir)
        self.file_extension = file_extension
        self.include = set(include) if include is not None else None
        self._scanner = DirectoryScanner(file_extension)

    def exists(self) -> bool:
        """Check whether the workspace directory exists."""
        return self.local_dir.is_dir()

    def file_for_name(self, name: str) -> LocalFile:
        """Build the LocalFile for a logical name (it may not exist yet)."""
        return LocalFile(
            directory=self.local_dir, name=name, extension=self.file_extension
        )

    def file_exists(self, name: str) -> bool:
        """Check whether a file with this logical name exists on disk."""
        return self.file_for_name(name).exists()

    def list_files(self) -> list[LocalFile]:
        """List the files currently present in the directory."""
        names = self._scanner.scan_names(self.local_dir)
        if self.include is not None:
            names = [name for name in names if name in self.include]
        logger.debug(f"Found {len(names)} local file(s) in {self.local_dir}")
        return [self.file_for_name(name) for name in names]

    def __repr__(self) -> str:
        return f"LocalWorkspace({str(self.local_dir)!r}, {self.file_extension!r})"


class RemoteWorkspace:
    """Records fetched from the remote source, held in memory."""

    def __init__(
        self,
        file_extension: str,
        records: Optional[Iterable[tuple[str, str]]] = None,
        include: Optional[Iterable[str]] = None,
    ):
        """Initialize remote workspace.

        Args:
            file_extension: Extension shared with the local workspace
            records: (name, content) pairs, already fetched
            include: Optional logical names to restrict listings to
        """
        self.file_extension = file_extension
        allowed = set(include) if include is not None else None
        self._files = [
            RemoteFile(name=name, extension=file_extension, content=content or "")
            for name, content in (records or [])
            if allowed is None or name in allowed
        ]

    def file_exists(self, name: str) -> bool:
        """Check whether a record with this logical name was fetched."""
        return any(f.name == name for f in self._files)

    def file_for_name(self, name: str) -> RemoteFile:
        """Return the remote file for a logical name.

        Raises:
            KeyError: If no record with this name was fetched
        """
        for remote_file in self._files:
            if remote_file.name == name:
                return remote_file
        raise KeyError(name)

    def list_files(self) -> list[RemoteFile]:
        """List the fetched files (a new list on every call)."""
        return list(self._files)

    def __repr__(self) -> str:
        return f"RemoteWorkspace({self.file_extension!r}, {len(self._files)} file(s))"


Workspace = Union[LocalWorkspace, RemoteWorkspace]


class WorkspaceRegistry:
    """Holds the one local and one remote workspace of a sync run.

    Each slot can be set exactly once. A new registry is created for every
    run.

    Examples:
        >>> registry = WorkspaceRegistry()
        >>> registry.set_workspace(LocalWorkspace("./dw", ".dwl"))
        >>> registry.set_workspace(RemoteWorkspace(".dwl", [("a", "x")]))
        >>> local, remote = registry.get_workspaces()
    """

    def __init__(
        self,
        local: Optional[LocalWorkspace] = None,
        remote: Optional[RemoteWorkspace] = None,
    ):
        self._local: Optional[LocalWorkspace] = None
        self._remote: Optional[RemoteWorkspace] = None
        if local is not None:
            self.set_workspace(local)
        if remote is not None:
            self.set_workspace(remote)

    def set_workspace(self, workspace: Workspace) -> None:
        """Fill the slot matching the workspace variant.

        Raises:
            WorkspaceStateError: If that slot is already occupied
        """
        if isinstance(workspace, LocalWorkspace):
            if self._local is not None:
                raise WorkspaceStateError("Local workspace is already initialized")
            self._local = workspace
        elif isinstance(workspace, RemoteWorkspace):
            if self._remote is not None:
                raise WorkspaceStateError("Remote workspace is already initialized")
            self._remote = workspace
        else:
            raise TypeError(f"Unsupported workspace type: {type(workspace).__name__}")
        logger.debug(f"Registered {workspace!r}")

    @property
    def local(self) -> LocalWorkspace:
        """The local workspace.

        Raises:
            WorkspaceStateError: If it has not been set
        """
        if self._local is None:
            raise WorkspaceStateError("Local workspace has not been initialized")
        return self._local

    @property
    def remote(self) -> RemoteWorkspace:
        """The remote workspace.

        Raises:
            WorkspaceStateError: If it has not been set
        """
        if self._remote is None:
            raise WorkspaceStateError("Remote workspace has not been initialized")
        return self._remote

    def get_workspaces(self) -> tuple[LocalWorkspace, RemoteWorkspace]:
        """Return both workspaces, failing if either slot is unset."""
        return self.local, self.remote
