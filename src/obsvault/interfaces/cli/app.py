"""CLI application for obsvault using Rich and Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.prompt import Confirm

from obsvault.archive import BackupOrchestrator
from obsvault.core.config import get_config_path, setup_logging
from obsvault.core.errors import ObsVaultError
from obsvault.core.git import SubprocessGit
from obsvault.core.settings import (
    Settings,
    SettingsStore,
    default_settings,
    require_extract_path,
    require_usb_path,
    validate_settings,
)
from obsvault.core.types import BackupParams, ExtractParams
from obsvault.interfaces.cli.output import ConsoleReporter, console, print_header
from obsvault.vault import (
    copy_into_vault,
    ensure_snippet,
    move_into_vault,
    open_in_editor,
    pull_vault,
    push_vault,
    resolve_destination,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="obsvault",
    help="CLI to manage your Obsidian vaults: file documents, sync with Git, back up to USB.",
    no_args_is_help=True,
)
archive_app = typer.Typer(help="Manage Obsidian vaults backups", no_args_is_help=True)
app.add_typer(archive_app, name="archive")

reporter = ConsoleReporter(console)


@dataclass(frozen=True)
class CliState:
    """Options shared by every command, set by the root callback."""

    config_path: Path


def _state(ctx: typer.Context) -> CliState:
    state = ctx.find_root().obj
    if isinstance(state, CliState):
        return state
    return CliState(config_path=get_config_path())


def _load_settings(ctx: typer.Context) -> Settings:
    settings = SettingsStore(_state(ctx).config_path).load()
    validate_settings(settings)
    return settings


def _fail(error: Exception) -> None:
    logger.debug("Command failed", exc_info=error)
    reporter.error(str(error))
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: $OBSVAULT_CONFIG or ~/.config/obsvault/config.yaml)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
):
    """CLI to manage your Obsidian vaults."""
    setup_logging(debug)
    ctx.obj = CliState(config_path=(config or get_config_path()).expanduser())


@app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Force overwrite of existing configuration"
    ),
):
    """Initialize or update the configuration file."""
    print_header("Initialize configuration")
    store = SettingsStore(_state(ctx).config_path)

    if store.exists and not force:
        reporter.info(f"Configuration file already exists at: {store.path}")
        reporter.info("To modify the configuration, you can:")
        reporter.info(f"1. Edit the file manually: {store.path}")
        reporter.info("2. Use --force to overwrite the existing configuration")
        return

    try:
        settings = default_settings()
        store.save(settings)
    except ObsVaultError as e:
        _fail(e)

    reporter.success(f"Configuration file created at: {store.path}")
    reporter.info("Current configuration:")
    reporter.info(f"Root: {settings.root or '(not found)'}")
    reporter.info(f"Default vault: {settings.default_vault}")
    reporter.info(
        "To modify the configuration, edit the file manually or use --force to overwrite it."
    )


def _transfer(
    ctx: typer.Context,
    source: Path,
    destination: Optional[str],
    vault: Optional[str],
    command: str,
) -> None:
    try:
        settings = _load_settings(ctx)
        entry = settings.vault(vault)
        defaults = entry.commands.cp if command == "cp" else entry.commands.mv
        folder = resolve_destination(destination, defaults.default_target_path)
        if not destination:
            reporter.info(f"Using default destination: {folder}")
        transfer = copy_into_vault if command == "cp" else move_into_vault
        transfer(source, settings.vault_dir(vault), folder, reporter)
    except ObsVaultError as e:
        _fail(e)


_SOURCE_ARG = typer.Argument(..., help="File to bring into the vault")
_DESTINATION_OPT = typer.Option(
    None,
    "--destination",
    "-d",
    help="Destination directory in the vault (optional)",
)
_VAULT_OPT = typer.Option(
    None, "--vault", help="Vault name from the configuration (default vault if omitted)"
)


@app.command("cp")
def copy_command(
    ctx: typer.Context,
    source: Path = _SOURCE_ARG,
    destination: Optional[str] = _DESTINATION_OPT,
    vault: Optional[str] = _VAULT_OPT,
):
    """Copy a file to the Obsidian vault.

    Example: obsvault cp ~/Downloads/image.png -d Assets/new
    """
    print_header("Copy file to Obsidian vault")
    _transfer(ctx, source, destination, vault, "cp")


@app.command("mv")
def move_command(
    ctx: typer.Context,
    source: Path = _SOURCE_ARG,
    destination: Optional[str] = _DESTINATION_OPT,
    vault: Optional[str] = _VAULT_OPT,
):
    """Move a file to the Obsidian vault.

    Example: obsvault mv ~/Downloads/image.png -d Assets/new
    """
    print_header("Move file to Obsidian vault")
    _transfer(ctx, source, destination, vault, "mv")


def _git_for(settings: Settings) -> SubprocessGit:
    return SubprocessGit(
        settings.root_path, remote=settings.git.remote, branch=settings.git.branch
    )


@app.command()
def push(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Force push even without changes"
    ),
):
    """Commit the vaults and push them to GitHub."""
    print_header("Push Obsidian to GitHub")
    try:
        settings = _load_settings(ctx)
        push_vault(_git_for(settings), reporter, force=force)
    except ObsVaultError as e:
        _fail(e)


@app.command()
def pull(ctx: typer.Context):
    """Fetch and apply the latest changes from GitHub."""
    print_header("Pull Obsidian from GitHub")
    try:
        settings = _load_settings(ctx)
        pull_vault(_git_for(settings), reporter, branch=settings.git.branch)
    except ObsVaultError as e:
        _fail(e)


@app.command()
def callouts(
    ctx: typer.Context,
    vault: Optional[str] = _VAULT_OPT,
):
    """Edit the vault's callouts snippet in your editor."""
    try:
        settings = _load_settings(ctx)
        path, created = ensure_snippet(settings.obsidian_dir(vault))
        if created:
            reporter.info(f"Created new callouts file at: {path}")
        open_in_editor(settings.default_editor, path)
    except ObsVaultError as e:
        _fail(e)
    reporter.success("Callouts file opened successfully!")


@archive_app.command("create")
def archive_create(ctx: typer.Context):
    """Create a backup of all Obsidian vaults on the USB key."""
    try:
        settings = _load_settings(ctx)
        usb_path = require_usb_path(settings)
        print_header("Backup Obsidian Vaults")
        params = BackupParams(
            source=settings.root_path,
            destination=usb_path,
            verify_checksums=settings.archive.verify_checksums,
        )
        BackupOrchestrator(reporter).create(params)
    except ObsVaultError as e:
        _fail(e)


def _ask_overwrite(target: Path) -> bool:
    return Confirm.ask(
        "Do you want to delete the existing directory and extract the backup?",
        default=False,
        console=console,
    )


@archive_app.command("extract")
def archive_extract(
    ctx: typer.Context,
    yes: bool = typer.Option(
        False, "--yes", "-y", help="Replace an existing extract directory without asking"
    ),
):
    """Extract the backup from the USB key."""
    try:
        settings = _load_settings(ctx)
        usb_path = require_usb_path(settings)
        extract_path = require_extract_path(settings)
        print_header("Extract Obsidian Vaults Backup")
        params = ExtractParams(destination=usb_path, target=extract_path)
        confirm = (lambda _target: True) if yes else _ask_overwrite
        BackupOrchestrator(reporter).extract(params, confirm)
    except ObsVaultError as e:
        _fail(e)


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
