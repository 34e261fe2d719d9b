"""Core sync engine: reconcile workspaces and apply operator selections."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from ..exceptions import SyncPreconditionError
from ..output import OutputFormatter
from ..prompts import FilePrompter
from ..salesforce import SalesforceClient, records_to_pairs
from .comparator import FileDifferences, WorkspaceComparator
from .options import SyncOptions
from .scanner import LocalFile, RemoteFile
from .workspace import LocalWorkspace, RemoteWorkspace, WorkspaceRegistry

logger = logging.getLogger(__name__)

REMOTE_ONLY_PROMPT = "Choose the missing files you want to retrieve from Salesforce:"
VIEW_DIFF_PROMPT = "Select the files for which you want to view the differences:"
CHANGED_PROMPT = "Choose which changed files should be updated with remote content:"


class Prompter(Protocol):
    """Anything that can ask the operator to choose a subset of labels."""

    def select(self, message: str, choices: Sequence[str]) -> list[str]: ...


class SyncRunState(str, Enum):
    """States of a single sync run."""

    IDLE = "idle"
    WORKSPACES_INITIALIZING = "workspaces_initializing"
    RECONCILED = "reconciled"
    AWAITING_REMOTE_ONLY_SELECTION = "awaiting_remote_only_selection"
    AWAITING_CHANGED_SELECTION = "awaiting_changed_selection"
    APPLIED = "applied"
    DONE = "done"


@dataclass
class SyncResult:
    """Outcome of a sync run."""

    differences: FileDifferences
    """Classification computed before applying anything"""

    created_files: list[str] = field(default_factory=list)
    """Remote-only files written locally"""

    updated_files: list[str] = field(default_factory=list)
    """Changed files overwritten with remote content"""

    skipped_files: list[str] = field(default_factory=list)
    """Local-only files, reported but never touched"""

    state: SyncRunState = SyncRunState.IDLE
    """Last state reached"""

    def to_dict(self) -> dict:
        return {
            "differences": self.differences.to_dict(),
            "created": self.created_files,
            "updated": self.updated_files,
            "skipped": self.skipped_files,
            "state": self.state.value,
        }


class SyncEngine:
    """Orchestrates one Salesforce-to-local sync run.

    The run fetches remote records, reconciles them with the local
    directory, lets the operator choose what to retrieve or overwrite and
    writes the chosen files. Only the local directory is ever modified.
    """

    def __init__(
        self,
        client: SalesforceClient,
        output: Optional[OutputFormatter] = None,
        prompter: Optional[Prompter] = None,
    ):
        """Initialize sync engine.

        Args:
            client: Salesforce client used to fetch records
            output: Output formatter for status and summaries
            prompter: Interactive selection prompter
        """
        self.client = client
        self.output = output or OutputFormatter()
        self.prompter = prompter or FilePrompter()
        self.state = SyncRunState.IDLE

    def _transition(self, state: SyncRunState) -> None:
        logger.debug(f"Sync state: {self.state.value} -> {state.value}")
        self.state = state

    def run(self, options: SyncOptions) -> SyncResult:
        """Run a full sync.

        Args:
            options: Complete sync options

        Returns:
            SyncResult

        Raises:
            SyncPreconditionError: If the local directory is missing or the
                query lacks the filename field (all problems reported)
            SalesforceQueryError: If fetching the records fails
            click.Abort: If the operator aborts a prompt
        """
        self.state = SyncRunState.IDLE
        self._transition(SyncRunState.WORKSPACES_INITIALIZING)

        registry = WorkspaceRegistry()
        local = LocalWorkspace(
            options.local_dir, options.file_extension, include=options.include_names
        )
        registry.set_workspace(local)
        self.check_preconditions(local, options)

        with self.output.status("Querying Salesforce metadata. Please wait..."):
            records = self.client.query(options.target_org, options.query)
        self.output.success("Salesforce metadata retrieved successfully.")

        registry.set_workspace(
            RemoteWorkspace(
                options.file_extension,
                records_to_pairs(records, options.filename_field, options.field_name),
                include=options.include_names,
            )
        )

        return self.synchronize(registry, generate_diffs=not options.no_diff)

    def check_preconditions(self, local: LocalWorkspace, options: SyncOptions) -> None:
        """Validate run preconditions, collecting every failure.

        Raises:
            SyncPreconditionError: With one message per failed check
        """
        checks = [
            (
                local.exists(),
                f'The local directory "{local.local_dir}" does not exist.',
            ),
            (
                options.filename_field in options.query,
                f'The field "{options.filename_field}" is not present in the '
                f"SOQL query.",
            ),
        ]
        errors = [message for passed, message in checks if not passed]
        if errors:
            raise SyncPreconditionError(errors)

    def synchronize(
        self, registry: WorkspaceRegistry, generate_diffs: bool = True
    ) -> SyncResult:
        """Reconcile the registry's workspaces and apply the selections.

        Args:
            registry: Registry holding both workspaces
            generate_diffs: Whether to compute and offer diffs

        Returns:
            SyncResult
        """
        local, remote = registry.get_workspaces()
        differences = WorkspaceComparator(generate_diffs).compare(local, remote)
        self._transition(SyncRunState.RECONCILED)

        result = SyncResult(
            differences=differences,
            skipped_files=[f.full_name for f in differences.local_only_files],
        )

        anything_to_sync = self.output.print_categories(
            "File Differences",
            {
                "Missing Files (present in Salesforce but not locally)": [
                    f.full_name for f in differences.remote_only_files
                ],
                "Local-Only Files (not found in Salesforce)": [
                    f.full_name for f in differences.local_only_files
                ],
                "Changed Files (content differences)": (
                    differences.changed_files.full_names
                ),
            },
        )
        if not anything_to_sync:
            self.output.success("Everything is up to date. Nothing to synchronize.")
            self._transition(SyncRunState.DONE)
            result.state = self.state
            return result

        result.created_files = self.retrieve_remote_only_files(
            registry, differences.remote_only_files
        )
        result.updated_files = self.update_changed_files(
            registry,
            differences.changed_files.files,
            differences.changed_files.diffs,
            show_diffs=generate_diffs,
        )
        self._transition(SyncRunState.APPLIED)

        self.output.print_categories(
            "Sync Summary",
            {
                "Created Files (from Salesforce metadata)": result.created_files,
                "Updated Files (with Salesforce metadata)": result.updated_files,
                "Skipped Files (local-only, not found in Salesforce)": (
                    result.skipped_files
                ),
            },
        )
        self.output.success("Synchronization completed successfully.")
        self._transition(SyncRunState.DONE)
        result.state = self.state
        return result

    def retrieve_remote_only_files(
        self, registry: WorkspaceRegistry, files: list[RemoteFile]
    ) -> list[str]:
        """Ask which remote-only files to create locally and write them.

        Returns:
            Full names of the files created
        """
        if not files:
            return []

        self._transition(SyncRunState.AWAITING_REMOTE_ONLY_SELECTION)
        selection = set(
            self.prompter.select(REMOTE_ONLY_PROMPT, [f.full_name for f in files])
        )
        if not selection:
            self.output.info("No files were selected to retrieve.")
            return []

        local, remote = registry.get_workspaces()
        created: list[str] = []
        for remote_file in files:
            if remote_file.full_name not in selection:
                continue
            if not remote.file_exists(remote_file.name):
                continue
            local.file_for_name(remote_file.name).write(remote_file.read())
            logger.debug(f"Created {remote_file.full_name}")
            created.append(remote_file.full_name)
        return created

    def update_changed_files(
        self,
        registry: WorkspaceRegistry,
        files: list[LocalFile],
        diffs: dict[str, str],
        show_diffs: bool = True,
    ) -> list[str]:
        """Offer diffs, ask which changed files to overwrite and write them.

        Returns:
            Full names of the files updated
        """
        if not files:
            return []

        self._transition(SyncRunState.AWAITING_CHANGED_SELECTION)
        changed_names = [f.full_name for f in files]

        if show_diffs:
            if len(changed_names) < 2:
                to_view = changed_names
            else:
                chosen = set(self.prompter.select(VIEW_DIFF_PROMPT, changed_names))
                to_view = [name for name in changed_names if name in chosen]
            for name in to_view:
                self.output.show_diff(name, diffs.get(name, ""))

        selection = set(self.prompter.select(CHANGED_PROMPT, changed_names))
        if not selection:
            self.output.info("No files were selected for update.")
            return []

        local, remote = registry.get_workspaces()
        updated: list[str] = []
        for local_file in files:
            if local_file.full_name not in selection:
                continue
            if not remote.file_exists(local_file.name):
                continue
            remote_content = remote.file_for_name(local_file.name).read()
            local.file_for_name(local_file.name).write(remote_content)
            logger.debug(f"Updated {local_file.full_name}")
            updated.append(local_file.full_name)
        return updated
