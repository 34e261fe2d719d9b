"""PyMetaSync - CLI tool for syncing Salesforce metadata records with local files."""

from .exceptions import (
    ConfigFileError,
    FileAccessError,
    MetaSyncError,
    SalesforceQueryError,
    SyncConfigError,
    SyncPreconditionError,
    WorkspaceStateError,
)
from .salesforce import SalesforceClient
from .utils import generate_diff, normalize_line_endings

__all__ = [
    "SalesforceClient",
    "MetaSyncError",
    "SyncConfigError",
    "SyncPreconditionError",
    "SalesforceQueryError",
    "WorkspaceStateError",
    "ConfigFileError",
    "FileAccessError",
    "generate_diff",
    "normalize_line_endings",
]
