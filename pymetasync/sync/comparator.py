"""Reconciliation of a local workspace against a remote workspace."""

import logging
from dataclasses import dataclass, field

from ..utils import generate_diff
from .scanner import LocalFile, RemoteFile
from .workspace import LocalWorkspace, RemoteWorkspace

logger = logging.getLogger(__name__)


@dataclass
class ChangedFiles:
    """Local files whose content differs from their remote counterpart."""

    files: list[LocalFile] = field(default_factory=list)
    """Changed local files, in detection order"""

    diffs: dict[str, str] = field(default_factory=dict)
    """Diff per full name (empty when diff generation is disabled)"""

    @property
    def full_names(self) -> list[str]:
        return [f.full_name for f in self.files]


@dataclass
class FileDifferences:
    """Three-way classification produced by reconciliation."""

    remote_only_files: list[RemoteFile] = field(default_factory=list)
    """Remote files with no local counterpart"""

    local_only_files: list[LocalFile] = field(default_factory=list)
    """Local files with no remote counterpart"""

    changed_files: ChangedFiles = field(default_factory=ChangedFiles)
    """Files present on both sides with different content"""

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to synchronize."""
        return not (
            self.remote_only_files
            or self.local_only_files
            or self.changed_files.files
        )

    def to_dict(self) -> dict:
        """Convert to a dictionary of full names (for JSON output)."""
        return {
            "remote_only": [f.full_name for f in self.remote_only_files],
            "local_only": [f.full_name for f in self.local_only_files],
            "changed": self.changed_files.full_names,
        }


class WorkspaceComparator:
    """Compares a local and a remote workspace to classify their files."""

    def __init__(self, generate_diffs: bool = True):
        """Initialize workspace comparator.

        Args:
            generate_diffs: Whether to compute a diff for every changed file
        """
        self.generate_diffs = generate_diffs

    def compare(
        self, local: LocalWorkspace, remote: RemoteWorkspace
    ) -> FileDifferences:
        """Classify files as remote-only, local-only or changed.

        Both workspaces are listed once. Ordering follows each workspace's
        listing order.

        Args:
            local: Local workspace
            remote: Remote workspace (same extension as local)

        Returns:
            FileDifferences
        """
        local_files = local.list_files()
        remote_files = remote.list_files()

        local_names = {f.full_name for f in local_files}
        remote_names = {f.full_name for f in remote_files}

        remote_only = [f for f in remote_files if f.full_name not in local_names]
        local_only = [f for f in local_files if f.full_name not in remote_names]

        shared = [f for f in remote_files if f.full_name in local_names]
        changed = self._assess_changed_files(local, shared)

        logger.debug(
            f"Reconciled {len(local_files)} local and {len(remote_files)} remote "
            f"file(s): {len(remote_only)} remote-only, {len(local_only)} "
            f"local-only, {len(changed.files)} changed"
        )

        return FileDifferences(
            remote_only_files=remote_only,
            local_only_files=local_only,
            changed_files=changed,
        )

    def _assess_changed_files(
        self, local: LocalWorkspace, remote_files: list[RemoteFile]
    ) -> ChangedFiles:
        """Compare contents of files present on both sides."""
        changed = ChangedFiles()

        for remote_file in remote_files:
            local_file = local.file_for_name(remote_file.name)
            if not local_file.exists():
                # Removed from disk since listing
                logger.debug(f"Skipping vanished local file: {local_file.full_name}")
                continue

            local_content = local_file.read()
            remote_content = remote_file.read()
            if local_content == remote_content:
                continue

            changed.files.append(local_file)
            if self.generate_diffs:
                changed.diffs[local_file.full_name] = generate_diff(
                    local_content, remote_content, local_file.full_name
                )

        return changed
