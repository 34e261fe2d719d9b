"""Unit tests for the PyMetaSync CLI commands."""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import click
import pytest
from click.testing import CliRunner

from pymetasync.cli import main
from pymetasync.exceptions import SalesforceQueryError
from pymetasync.salesforce import OrgGroups

QUERY = "SELECT DeveloperName, Script__c FROM DataWeave_Script__mdt"


@pytest.fixture
def runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_config():
    """Mock the config module."""
    with patch("pymetasync.cli.config") as mock:
        mock.get_default_target_org.return_value = None
        mock.get_config.return_value = None
        mock.get_configs.return_value = []
        yield mock


@pytest.fixture
def mock_client():
    """Mock the Salesforce client class."""
    with patch("pymetasync.cli.SalesforceClient") as mock_class:
        client = Mock()
        mock_class.return_value = client
        yield client


def _sync_args(local_dir: Path) -> list[str]:
    return [
        "sync",
        "--target-org",
        "dev",
        "--local-dir",
        str(local_dir),
        "--file-extension",
        ".dwl",
        "--query",
        QUERY,
        "--filename-field",
        "DeveloperName",
        "--field-name",
        "Script__c",
    ]


class TestMainGroup:
    """Tests for the main CLI group."""

    def test_main_help(self, runner):
        """Test main help shows all commands."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "PyMetaSync" in result.output
        assert "sync" in result.output
        assert "config" in result.output

    def test_sync_help(self, runner):
        result = runner.invoke(main, ["sync", "--help"])
        assert result.exit_code == 0
        assert "--config-alias" in result.output
        assert "--no-diff" in result.output


class TestSyncCommand:
    """Tests for the sync command."""

    def test_missing_options_reported(self, runner, mock_config, mock_client):
        """All missing options are listed and nothing is fetched."""
        result = runner.invoke(main, ["sync", "--query", QUERY])

        assert result.exit_code == 1
        assert "--target-org" in result.output
        assert "--field-name" in result.output
        mock_client.query.assert_not_called()

    def test_unknown_alias(self, runner, mock_config, mock_client):
        result = runner.invoke(main, ["sync", "-c", "nope"])

        assert result.exit_code == 1
        assert 'alias "nope" not found' in result.output

    def test_retrieve_remote_only_file(
        self, runner, mock_config, mock_client, temp_dir
    ):
        """The operator selects the missing file and it is created."""
        (temp_dir / "a.dwl").write_text("x")
        (temp_dir / "b.dwl").write_text("y")
        mock_client.query.return_value = [
            {"DeveloperName": "a", "Script__c": "x"},
            {"DeveloperName": "c", "Script__c": "z"},
        ]

        result = runner.invoke(main, _sync_args(temp_dir), input="1\n")

        assert result.exit_code == 0, result.output
        assert (temp_dir / "c.dwl").read_text() == "z"
        assert (temp_dir / "b.dwl").read_text() == "y"
        assert "Synchronization completed successfully." in result.output

    def test_nothing_to_synchronize(self, runner, mock_config, mock_client, temp_dir):
        (temp_dir / "a.dwl").write_text("x")
        mock_client.query.return_value = [{"DeveloperName": "a", "Script__c": "x"}]

        result = runner.invoke(main, _sync_args(temp_dir))

        assert result.exit_code == 0
        assert "Nothing to synchronize" in result.output

    def test_overwrite_changed_file(self, runner, mock_config, mock_client, temp_dir):
        """A single changed file shows its diff, then can be overwritten."""
        (temp_dir / "a.dwl").write_text("old\n")
        mock_client.query.return_value = [
            {"DeveloperName": "a", "Script__c": "new\n"}
        ]

        result = runner.invoke(main, _sync_args(temp_dir), input="all\n")

        assert result.exit_code == 0, result.output
        assert "Diff for a.dwl" in result.output
        assert (temp_dir / "a.dwl").read_text() == "new\n"

    def test_uses_stored_alias_and_default_org(
        self, runner, mock_config, mock_client, temp_dir
    ):
        """Options come from the alias; the org comes from the default."""
        mock_config.get_default_target_org.return_value = "stored-org"
        mock_config.get_config.return_value = {
            "alias": "dw",
            "localDir": str(temp_dir),
            "fileExtension": ".dwl",
            "query": QUERY,
            "filenameField": "DeveloperName",
            "fieldName": "Script__c",
        }
        mock_client.query.return_value = [{"DeveloperName": "c", "Script__c": "z"}]

        result = runner.invoke(main, ["sync", "-c", "dw"], input="\n")

        assert result.exit_code == 0, result.output
        mock_client.query.assert_called_once_with("stored-org", QUERY)
        assert not (temp_dir / "c.dwl").exists()

    def test_preconditions_reported_together(
        self, runner, mock_config, mock_client, temp_dir
    ):
        args = _sync_args(temp_dir / "missing")
        args[args.index(QUERY)] = "SELECT Name FROM X"

        result = runner.invoke(main, args)

        assert result.exit_code == 1
        assert "does not exist" in result.output
        assert 'The field "DeveloperName" is not present' in result.output
        mock_client.query.assert_not_called()

    def test_fetch_error(self, runner, mock_config, mock_client, temp_dir):
        mock_client.query.side_effect = SalesforceQueryError("boom")

        result = runner.invoke(main, _sync_args(temp_dir))

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_json_output_is_parseable_after_prompts(
        self, runner, mock_config, mock_client, temp_dir
    ):
        """Prompts go to stderr so stdout holds only the JSON result."""
        mock_client.query.return_value = [{"DeveloperName": "c", "Script__c": "z"}]

        result = runner.invoke(main, ["--json"] + _sync_args(temp_dir), input="1\n")

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["created"] == ["c.dwl"]
        assert data["differences"]["remote_only"] == ["c.dwl"]
        assert "Choose the missing files" in result.stderr

    def test_non_utf8_local_file_does_not_crash(
        self, runner, mock_config, mock_client, temp_dir
    ):
        """A latin-1 local file is reported as changed."""
        (temp_dir / "a.dwl").write_bytes(b"caf\xe9\n")
        mock_client.query.return_value = [{"DeveloperName": "a", "Script__c": "x\n"}]

        result = runner.invoke(main, _sync_args(temp_dir), input="\n")

        assert result.exit_code == 0, result.output
        assert "Changed Files" in result.output
        assert (temp_dir / "a.dwl").read_bytes() == b"caf\xe9\n"

    def test_write_error_exits_with_message(
        self, runner, mock_config, mock_client, temp_dir
    ):
        """A file that cannot be written ends the run with exit code 1."""
        (temp_dir / "c.dwl").mkdir()
        mock_client.query.return_value = [{"DeveloperName": "c", "Script__c": "z"}]

        result = runner.invoke(main, _sync_args(temp_dir), input="all\n")

        assert result.exit_code == 1
        assert "Error: Cannot write" in result.output
        assert not isinstance(result.exception, OSError)

    def test_cancel_prompt(self, runner, mock_config, mock_client, temp_dir):
        """Aborting a prompt cancels quietly."""
        mock_client.query.return_value = [{"DeveloperName": "c", "Script__c": "z"}]

        with patch("pymetasync.prompts.click.prompt", side_effect=click.Abort()):
            result = runner.invoke(main, _sync_args(temp_dir))

        assert result.exit_code == 130
        assert "Sync cancelled by user" in result.output
        assert not (temp_dir / "c.dwl").exists()


class TestConfigCommands:
    """Tests for the config command group."""

    def test_list_empty(self, runner, mock_config):
        result = runner.invoke(main, ["config", "list"])

        assert result.exit_code == 0
        assert "No configurations found" in result.output

    def test_list_entries(self, runner, mock_config):
        mock_config.get_configs.return_value = [
            {"alias": "dw", "localDir": "/tmp/dw", "fileExtension": ".dwl"}
        ]
        mock_config.get_default_target_org.return_value = "dev"

        result = runner.invoke(main, ["config", "list"])

        assert result.exit_code == 0
        assert "dw" in result.output
        assert "dev" in result.output

    def test_add(self, runner, mock_config, temp_dir):
        """All options are prompted and saved."""
        user_input = "\n".join(
            [str(temp_dir), ".dwl", QUERY, "DeveloperName", "Script__c", "n", "a, b"]
        )

        result = runner.invoke(main, ["config", "add", "dw"], input=user_input + "\n")

        assert result.exit_code == 0, result.output
        saved = mock_config.save_config.call_args[0][0]
        assert saved == {
            "alias": "dw",
            "localDir": str(temp_dir.resolve()),
            "fileExtension": ".dwl",
            "query": QUERY,
            "filenameField": "DeveloperName",
            "fieldName": "Script__c",
            "noDiff": False,
            "filesToSync": "a, b",
        }

    def test_add_reprompts_missing_directory(self, runner, mock_config, temp_dir):
        user_input = "\n".join(
            [str(temp_dir / "missing"), str(temp_dir), "", "", "", "", "", ""]
        )

        result = runner.invoke(main, ["config", "add", "dw"], input=user_input + "\n")

        assert result.exit_code == 0, result.output
        assert "does not exist" in result.output
        saved = mock_config.save_config.call_args[0][0]
        assert saved["localDir"] == str(temp_dir.resolve())
        assert saved["fileExtension"] == ".dwl"
        assert saved["filesToSync"] is None

    def test_add_existing_alias_fails(self, runner, mock_config):
        mock_config.get_config.return_value = {"alias": "dw"}

        result = runner.invoke(main, ["config", "add", "dw"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        mock_config.save_config.assert_not_called()

    def test_edit_unknown_alias(self, runner, mock_config):
        result = runner.invoke(main, ["config", "edit", "nope"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_edit_keeps_defaults(self, runner, mock_config, temp_dir):
        existing = {
            "alias": "dw",
            "localDir": str(temp_dir),
            "fileExtension": ".txt",
            "query": QUERY,
            "filenameField": "DeveloperName",
            "fieldName": "Script__c",
            "noDiff": True,
            "filesToSync": "a",
        }
        mock_config.get_config.side_effect = lambda alias: (
            existing if alias == "dw" else None
        )

        result = runner.invoke(
            main, ["config", "edit", "dw", "--rename", "dw2"], input="\n" * 7
        )

        assert result.exit_code == 0, result.output
        saved, = mock_config.save_config.call_args[0]
        assert mock_config.save_config.call_args[1] == {"previous_alias": "dw"}
        assert saved["alias"] == "dw2"
        assert saved["fileExtension"] == ".txt"
        assert saved["noDiff"] is True
        assert saved["filesToSync"] == "a"

    def test_remove_confirmed(self, runner, mock_config):
        mock_config.get_config.return_value = {"alias": "dw"}

        result = runner.invoke(main, ["config", "remove", "dw"], input="y\n")

        assert result.exit_code == 0
        mock_config.delete_config.assert_called_once_with("dw")

    def test_remove_declined(self, runner, mock_config):
        mock_config.get_config.return_value = {"alias": "dw"}

        result = runner.invoke(main, ["config", "remove", "dw"], input="n\n")

        assert result.exit_code == 0
        assert "Delete canceled." in result.output
        mock_config.delete_config.assert_not_called()

    def test_target_org_argument(self, runner, mock_config):
        result = runner.invoke(main, ["config", "target-org", "dev"])

        assert result.exit_code == 0
        mock_config.save_default_target_org.assert_called_once_with("dev")

    def test_target_org_interactive(self, runner, mock_config, mock_client):
        mock_client.list_orgs.return_value = OrgGroups(
            scratch_orgs=["scratch"], other=["prod"]
        )

        result = runner.invoke(main, ["config", "target-org"], input="2\n")

        assert result.exit_code == 0, result.output
        assert "--- Scratch Orgs ---" in result.output
        mock_config.save_default_target_org.assert_called_once_with("prod")

    def test_target_org_no_orgs(self, runner, mock_config, mock_client):
        mock_client.list_orgs.return_value = OrgGroups()

        result = runner.invoke(main, ["config", "target-org"])

        assert result.exit_code == 0
        assert "No target organizations available" in result.output
        mock_config.save_default_target_org.assert_not_called()

    def test_path(self, runner, mock_config):
        mock_config.get_config_path.return_value = Path("/mock/config.json")

        result = runner.invoke(main, ["config", "path"])

        assert result.exit_code == 0
        assert "/mock/config.json" in result.output
