"""Sync options and their merging with stored configuration."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from ..exceptions import SyncConfigError
from ..utils import normalize_files_to_sync, parse_files_to_sync, resolve_directory_path

# Option attribute -> key used in the configuration file
_CONFIG_KEYS = {
    "alias": "alias",
    "local_dir": "localDir",
    "file_extension": "fileExtension",
    "query": "query",
    "filename_field": "filenameField",
    "field_name": "fieldName",
    "no_diff": "noDiff",
    "files_to_sync": "filesToSync",
}

# Option attribute -> CLI flag shown in error messages
REQUIRED_OPTIONS = {
    "target_org": "--target-org",
    "local_dir": "--local-dir",
    "file_extension": "--file-extension",
    "query": "--query",
    "filename_field": "--filename-field",
    "field_name": "--field-name",
}


@dataclass
class SyncOptions:
    """Complete set of options for one sync run.

    Examples:
        >>> options = SyncOptions.merge(
        ...     {"target_org": "dev", "local_dir": "./dw"},
        ...     stored={"fileExtension": ".dwl", "query": "SELECT Name, Body__c",
        ...             "filenameField": "Name", "fieldName": "Body__c"},
        ... )
    """

    target_org: str
    local_dir: Path
    file_extension: str
    query: str
    filename_field: str
    field_name: str
    no_diff: bool = False
    files_to_sync: Optional[str] = None
    alias: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.local_dir, str):
            self.local_dir = resolve_directory_path(self.local_dir)
        self.files_to_sync = normalize_files_to_sync(self.files_to_sync)

    @property
    def include_names(self) -> Optional[set[str]]:
        """Logical names to restrict the sync to (None for all)."""
        return parse_files_to_sync(self.files_to_sync)

    @classmethod
    def merge(
        cls,
        cli_values: dict[str, Any],
        stored: Optional[dict[str, Any]] = None,
        default_target_org: Optional[str] = None,
    ) -> "SyncOptions":
        """Merge CLI values over a stored alias and the default target org.

        Values given on the command line win over the stored alias, which
        wins over the default target org.

        Args:
            cli_values: Option values from the command line (None = unset)
            stored: Stored alias entry (configuration file keys)
            default_target_org: Default org from the configuration file

        Returns:
            SyncOptions

        Raises:
            SyncConfigError: If required options are still missing, listing
                every one of them
        """
        merged: dict[str, Any] = {"target_org": default_target_org}
        for attr, key in _CONFIG_KEYS.items():
            if stored and stored.get(key) not in (None, ""):
                merged[attr] = stored[key]
        for attr, value in cli_values.items():
            if value is None:
                continue
            # --no-diff is a flag; False only means "not given"
            if attr == "no_diff" and not value:
                continue
            merged[attr] = value

        missing = [
            flag for attr, flag in REQUIRED_OPTIONS.items() if not merged.get(attr)
        ]
        if missing:
            raise SyncConfigError(
                f"Missing required options: {', '.join(missing)}", missing=missing
            )

        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in merged.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        """Convert to a configuration file entry (without the target org)."""
        data: dict[str, Any] = {}
        for attr, key in _CONFIG_KEYS.items():
            value = getattr(self, attr)
            data[key] = str(value) if isinstance(value, Path) else value
        return data
