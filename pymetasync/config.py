"""Persisted configuration: named sync aliases and the default target org."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .exceptions import ConfigFileError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "PYMETASYNC_CONFIG_DIR"
CONFIG_FILE_NAME = "config.json"
CONFIGS_KEY = "configs"
TARGET_ORG_KEY = "targetOrg"


class Config:
    """Reads and writes ``~/.config/pymetasync/config.json``.

    The file holds a list of alias entries (sync options stored under a
    name) and the default target org.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration store.

        Args:
            config_dir: Directory of the config file. Defaults to
                ``$PYMETASYNC_CONFIG_DIR`` or ``~/.config/pymetasync``
        """
        if config_dir is None:
            env_dir = os.environ.get(CONFIG_DIR_ENV)
            config_dir = (
                Path(env_dir) if env_dir else Path.home() / ".config" / "pymetasync"
            )
        self.config_dir = Path(config_dir)

    def get_config_path(self) -> Path:
        """Return the path of the configuration file."""
        return self.config_dir / CONFIG_FILE_NAME

    def _load(self) -> dict[str, Any]:
        path = self.get_config_path()
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigFileError(f"Cannot read configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigFileError(f"Configuration file {path} must hold a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        path = self.get_config_path()
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise ConfigFileError(f"Cannot write configuration file {path}: {e}") from e
        logger.debug(f"Saved configuration to {path}")

    def get_configs(self) -> list[dict[str, Any]]:
        """Return all stored alias entries."""
        configs = self._load().get(CONFIGS_KEY) or []
        return [c for c in configs if isinstance(c, dict) and c.get("alias")]

    def get_config(self, alias: str) -> Optional[dict[str, Any]]:
        """Return the entry for an alias, or None."""
        for entry in self.get_configs():
            if entry["alias"] == alias:
                return entry
        return None

    def save_config(
        self, entry: dict[str, Any], previous_alias: Optional[str] = None
    ) -> None:
        """Insert or replace an alias entry.

        Args:
            entry: Entry to store (must contain ``alias``)
            previous_alias: Alias the entry had before an edit, if renamed
        """
        if not entry.get("alias"):
            raise ValueError("Configuration entry must have an alias")
        data = self._load()
        replaced_alias = previous_alias or entry["alias"]
        configs = [
            c for c in data.get(CONFIGS_KEY) or [] if c.get("alias") != replaced_alias
        ]
        index = next(
            (
                i
                for i, c in enumerate(data.get(CONFIGS_KEY) or [])
                if c.get("alias") == replaced_alias
            ),
            len(configs),
        )
        configs.insert(index, entry)
        data[CONFIGS_KEY] = configs
        self._save(data)

    def delete_config(self, alias: str) -> bool:
        """Delete an alias entry.

        Returns:
            True if an entry was removed
        """
        data = self._load()
        configs = data.get(CONFIGS_KEY) or []
        remaining = [c for c in configs if c.get("alias") != alias]
        if len(remaining) == len(configs):
            return False
        data[CONFIGS_KEY] = remaining
        self._save(data)
        return True

    def get_default_target_org(self) -> Optional[str]:
        """Return the default target org, if set."""
        return self._load().get(TARGET_ORG_KEY)

    def save_default_target_org(self, org: Optional[str]) -> None:
        """Set (or clear with None) the default target org."""
        data = self._load()
        data[TARGET_ORG_KEY] = org
        self._save(data)


# Global config instance
config = Config()
