"""Salesforce access through the ``sf`` command-line tool."""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from typing import Any

from .exceptions import SalesforceQueryError

logger = logging.getLogger(__name__)

SalesforceRecord = dict[str, Any]


@dataclass
class OrgGroups:
    """Authenticated orgs grouped by kind."""

    scratch_orgs: list[str] = field(default_factory=list)
    dev_hubs: list[str] = field(default_factory=list)
    sandboxes: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    def all(self) -> list[str]:
        return self.scratch_orgs + self.dev_hubs + self.sandboxes + self.other


class SalesforceClient:
    """Runs ``sf`` commands and parses their JSON output."""

    def __init__(self, executable: str = "sf", timeout: float = 120.0):
        """Initialize Salesforce client.

        Args:
            executable: Name or path of the sf CLI
            timeout: Seconds to wait for a single command
        """
        self.executable = executable
        self.timeout = timeout

    def _run_json(self, args: list[str]) -> dict[str, Any]:
        """Run an sf command with ``--json`` and return the parsed output.

        Raises:
            SalesforceQueryError: If the command cannot run, fails or prints
                something that is not a JSON object
        """
        command = [self.executable, *args, "--json"]
        logger.debug(f"Running: {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise SalesforceQueryError(
                f"Salesforce CLI '{self.executable}' not found. Is it installed?"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise SalesforceQueryError(
                f"Salesforce CLI timed out after {self.timeout:.0f}s"
            ) from e

        try:
            payload = json.loads(completed.stdout)
        except ValueError as e:
            detail = completed.stderr.strip() or completed.stdout.strip()
            raise SalesforceQueryError(
                f"Invalid response from Salesforce CLI: {detail or 'empty output'}"
            ) from e

        if not isinstance(payload, dict):
            raise SalesforceQueryError("Invalid response from Salesforce CLI")

        if completed.returncode != 0 or payload.get("status", 0) != 0:
            message = payload.get("message") or completed.stderr.strip()
            raise SalesforceQueryError(
                f"Salesforce CLI exited with status {completed.returncode}: {message}"
            )

        return payload

    def query(self, target_org: str, query: str) -> list[SalesforceRecord]:
        """Run a SOQL query and return its records.

        Args:
            target_org: Org alias or username
            query: SOQL query

        Returns:
            List of records (field name -> value)

        Raises:
            SalesforceQueryError: On any failure, including an empty result
        """
        try:
            payload = self._run_json(
                ["data", "query", "--target-org", target_org, "--query", query]
            )
        except SalesforceQueryError as e:
            raise SalesforceQueryError(f"{e} (query: {query})") from e

        result = payload.get("result")
        records = result.get("records") if isinstance(result, dict) else None
        if not isinstance(records, list):
            raise SalesforceQueryError(
                f"No records found or invalid response from Salesforce. "
                f"Query: {query}"
            )
        if not records:
            raise SalesforceQueryError(f"Query returned no records. Query: {query}")

        logger.debug(f"Query returned {len(records)} record(s)")
        return records

    def list_orgs(self) -> OrgGroups:
        """List authenticated orgs grouped by kind."""
        payload = self._run_json(["org", "list"])
        result = payload.get("result") or {}

        groups = OrgGroups()
        buckets = [
            ("scratchOrgs", groups.scratch_orgs),
            ("devHubs", groups.dev_hubs),
            ("sandboxes", groups.sandboxes),
            ("nonScratchOrgs", groups.other),
            ("other", groups.other),
        ]
        seen: set[str] = set()
        for key, target in buckets:
            for org in result.get(key) or []:
                name = org.get("alias") or org.get("username")
                if name and name not in seen:
                    seen.add(name)
                    target.append(name)
        return groups


def records_to_pairs(
    records: list[SalesforceRecord], filename_field: str, field_name: str
) -> list[tuple[str, str]]:
    """Extract (name, content) pairs from query records.

    Records without a name are dropped; missing content becomes "".
    """
    pairs: list[tuple[str, str]] = []
    for record in records:
        name = record.get(filename_field)
        if not name:
            logger.debug(f"Skipping record without '{filename_field}': {record}")
            continue
        pairs.append((str(name), record.get(field_name) or ""))
    return pairs
