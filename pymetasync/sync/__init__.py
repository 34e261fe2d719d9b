"""Sync engine for PyMetaSync - reconcile Salesforce records with local files."""

from .comparator import ChangedFiles, FileDifferences, WorkspaceComparator
from .engine import SyncEngine, SyncResult, SyncRunState
from .options import SyncOptions
from .scanner import DirectoryScanner, LocalFile, RemoteFile, SyncFile
from .workspace import LocalWorkspace, RemoteWorkspace, WorkspaceRegistry

__all__ = [
    "SyncEngine",
    "SyncResult",
    "SyncRunState",
    "SyncOptions",
    "WorkspaceComparator",
    "FileDifferences",
    "ChangedFiles",
    "DirectoryScanner",
    "LocalFile",
    "RemoteFile",
    "SyncFile",
    "LocalWorkspace",
    "RemoteWorkspace",
    "WorkspaceRegistry",
]
