"""Exceptions raised by PyMetaSync."""

from typing import Optional


class MetaSyncError(Exception):
    """Base exception for all PyMetaSync errors."""


class SyncConfigError(MetaSyncError):
    """Required sync options are missing or an alias is unknown."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class SyncPreconditionError(MetaSyncError):
    """One or more run preconditions failed.

    All failed checks are collected in ``errors`` so they can be reported
    together.
    """

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class SalesforceQueryError(MetaSyncError):
    """Querying Salesforce through the sf CLI failed."""


class WorkspaceStateError(MetaSyncError):
    """A workspace slot was initialized twice or read before initialization."""


class ConfigFileError(MetaSyncError):
    """The configuration file could not be read or written."""


class FileAccessError(MetaSyncError):
    """A local file could not be read or written."""
