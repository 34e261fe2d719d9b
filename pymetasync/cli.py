"""CLI interface for PyMetaSync."""

import logging
from typing import Any, Optional

import click

from .config import config
from .exceptions import MetaSyncError, SyncConfigError, SyncPreconditionError
from .output import OutputFormatter
from .salesforce import SalesforceClient
from .sync import SyncEngine, SyncOptions
from .utils import (
    DEFAULT_FIELD_NAME,
    DEFAULT_FILE_EXTENSION,
    DEFAULT_FILENAME_FIELD,
    DEFAULT_QUERY,
    normalize_files_to_sync,
    resolve_directory_path,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pymetasync")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """PyMetaSync - Sync Salesforce metadata records with local files."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pymetasync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.option("--target-org", help="Salesforce org alias or username")
@click.option("--local-dir", help="Local directory for files")
@click.option("--file-extension", help="File extension for local files")
@click.option("--query", help="SOQL query for metadata")
@click.option("--filename-field", help="Field for filename in Salesforce")
@click.option("--field-name", help="Field containing file content in Salesforce")
@click.option(
    "--no-diff",
    is_flag=True,
    help="Disable detailed diff display for changed files",
)
@click.option("--config-alias", "-c", help="Alias of a stored configuration")
@click.pass_context
def sync(
    ctx: Any,
    target_org: Optional[str],
    local_dir: Optional[str],
    file_extension: Optional[str],
    query: Optional[str],
    filename_field: Optional[str],
    field_name: Optional[str],
    no_diff: bool,
    config_alias: Optional[str],
) -> None:
    """Sync Salesforce metadata records with local files.

    Records missing locally can be retrieved, and local files whose content
    differs from Salesforce can be overwritten. Local-only files are only
    reported. Options not given on the command line are taken from the
    stored configuration selected with --config-alias.

    Examples:
        metasync sync -c dataweave
        metasync sync --target-org dev --local-dir ./src/main/dw \\
            --file-extension .dwl --filename-field DeveloperName \\
            --field-name Script__c \\
            --query "SELECT DeveloperName, Script__c FROM DataWeave_Script__mdt"
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        stored = None
        if config_alias:
            stored = config.get_config(config_alias)
            if stored is None:
                raise SyncConfigError(
                    f'Configuration alias "{config_alias}" not found. '
                    "Use 'metasync config list' to see stored aliases."
                )

        options = SyncOptions.merge(
            {
                "target_org": target_org,
                "local_dir": local_dir,
                "file_extension": file_extension,
                "query": query,
                "filename_field": filename_field,
                "field_name": field_name,
                "no_diff": no_diff,
            },
            stored=stored,
            default_target_org=config.get_default_target_org(),
        )

        engine = SyncEngine(SalesforceClient(), out)
        result = engine.run(options)

        if out.json_output:
            out.output_json(result.to_dict())

    except (KeyboardInterrupt, click.Abort):
        out.warning("\nSync cancelled by user")
        ctx.exit(130)
    except SyncPreconditionError as e:
        for message in e.errors:
            out.error(message)
        ctx.exit(1)
    except MetaSyncError as e:
        out.error(f"Error: {e}")
        ctx.exit(1)


@main.group("config")
def config_group() -> None:
    """Manage stored sync configurations."""


@config_group.command("list")
@click.pass_context
def config_list(ctx: Any) -> None:
    """List stored configurations."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        configs = config.get_configs()
        target_org = config.get_default_target_org()
    except MetaSyncError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json({"targetOrg": target_org, "configs": configs})
        return

    out.info(f"Default target org: {target_org or 'Not set'}")
    if not configs:
        out.warning("No configurations found. Create one with 'metasync config add'.")
        return

    out.output_table(
        configs,
        ["alias", "localDir", "fileExtension", "filenameField", "fieldName"],
        title="Configurations",
    )


def _prompt_directory(default: str) -> str:
    """Prompt until an existing directory is entered."""
    while True:
        answer = click.prompt(
            "Path to the local project directory (absolute, relative or ~/...)",
            default=default,
        )
        directory = resolve_directory_path(answer)
        if directory.is_dir():
            return str(directory)
        click.echo(
            f'Directory "{directory}" does not exist or is not a folder. '
            "Please try again.",
            err=True,
        )


def _prompt_entry(alias: str, existing: dict[str, Any]) -> dict[str, Any]:
    """Prompt for every option of an alias entry."""
    entry: dict[str, Any] = {"alias": alias}
    entry["localDir"] = _prompt_directory(existing.get("localDir") or ".")
    entry["fileExtension"] = click.prompt(
        "File extension for local files",
        default=existing.get("fileExtension") or DEFAULT_FILE_EXTENSION,
    )
    entry["query"] = click.prompt(
        "SOQL query for metadata", default=existing.get("query") or DEFAULT_QUERY
    )
    entry["filenameField"] = click.prompt(
        "Field for filename in Salesforce",
        default=existing.get("filenameField") or DEFAULT_FILENAME_FIELD,
    )
    entry["fieldName"] = click.prompt(
        "Field containing file content in Salesforce",
        default=existing.get("fieldName") or DEFAULT_FIELD_NAME,
    )
    entry["noDiff"] = click.confirm(
        "Disable detailed diff display for changed files?",
        default=bool(existing.get("noDiff", False)),
    )
    entry["filesToSync"] = normalize_files_to_sync(
        click.prompt(
            "Comma-separated list of filenames to sync (leave blank for all)",
            default=existing.get("filesToSync") or "",
            show_default=False,
        )
    )
    return entry


@config_group.command("add")
@click.argument("alias")
@click.pass_context
def config_add(ctx: Any, alias: str) -> None:
    """Create a new configuration named ALIAS."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        alias = alias.strip()
        if not alias:
            out.error("Alias cannot be empty.")
            ctx.exit(1)
        if config.get_config(alias) is not None:
            out.error(f'Alias "{alias}" already exists. Use \'metasync config edit\'.')
            ctx.exit(1)

        config.save_config(_prompt_entry(alias, {}))
        out.success(f'Configuration for alias "{alias}" created successfully!')
    except click.Abort:
        out.warning("\nConfiguration cancelled.")
        ctx.exit(130)
    except MetaSyncError as e:
        out.error(str(e))
        ctx.exit(1)


@config_group.command("edit")
@click.argument("alias")
@click.option("--rename", help="New alias for the configuration")
@click.pass_context
def config_edit(ctx: Any, alias: str, rename: Optional[str]) -> None:
    """Edit the configuration named ALIAS."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        existing = config.get_config(alias)
        if existing is None:
            out.error(f'Configuration alias "{alias}" not found.')
            ctx.exit(1)
            return

        new_alias = (rename or alias).strip()
        if new_alias != alias and config.get_config(new_alias) is not None:
            out.error(f'Alias "{new_alias}" already exists.')
            ctx.exit(1)

        config.save_config(_prompt_entry(new_alias, existing), previous_alias=alias)
        out.success(f'Configuration for alias "{new_alias}" updated successfully!')
    except click.Abort:
        out.warning("\nConfiguration cancelled.")
        ctx.exit(130)
    except MetaSyncError as e:
        out.error(str(e))
        ctx.exit(1)


@config_group.command("remove")
@click.argument("alias")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def config_remove(ctx: Any, alias: str, yes: bool) -> None:
    """Delete the configuration named ALIAS."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        if config.get_config(alias) is None:
            out.error(f'Configuration alias "{alias}" not found.')
            ctx.exit(1)

        if not yes and not click.confirm(
            f'Are you sure you want to delete the configuration "{alias}"?',
            default=False,
        ):
            out.warning("Delete canceled.")
            return

        config.delete_config(alias)
        out.success(f'Deleted configuration "{alias}".')
    except MetaSyncError as e:
        out.error(str(e))
        ctx.exit(1)


@config_group.command("target-org")
@click.argument("org", required=False)
@click.pass_context
def config_target_org(ctx: Any, org: Optional[str]) -> None:
    """Set the default target org.

    Without ORG, authenticated orgs are listed with 'sf org list' and one
    can be chosen interactively.
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        if org is None:
            with out.status("Querying Salesforce orgs. Please wait..."):
                groups = SalesforceClient().list_orgs()
            choices = groups.all()
            if not choices:
                out.warning("No target organizations available to set.")
                return

            sections = [
                ("Scratch Orgs", groups.scratch_orgs),
                ("Dev Hubs", groups.dev_hubs),
                ("Sandboxes", groups.sandboxes),
                ("Other Orgs", groups.other),
            ]
            for title, orgs in sections:
                if orgs:
                    click.echo(f"--- {title} ---")
                    for name in orgs:
                        click.echo(f"  [{choices.index(name) + 1}] {name}")

            current = config.get_default_target_org()
            default = choices.index(current) + 1 if current in choices else None
            number = click.prompt(
                "Select the default target organization",
                type=click.IntRange(1, len(choices)),
                default=default,
            )
            org = choices[number - 1]

        config.save_default_target_org(org)
        out.success(f'Default target organization set to "{org}".')
    except click.Abort:
        out.warning("\nCancelled.")
        ctx.exit(130)
    except MetaSyncError as e:
        out.error(f"An error occurred while setting the default target org: {e}")
        ctx.exit(1)


@config_group.command("path")
def config_path() -> None:
    """Show the configuration file path."""
    click.echo(str(config.get_config_path()))


if __name__ == "__main__":
    main()
