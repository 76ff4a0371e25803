"""Copy and move files from anywhere on the system into a vault."""

import logging
import shutil
from pathlib import Path

from obsvault.core.errors import VaultFileError
from obsvault.core.types import NullReporter, ProgressReporter

logger = logging.getLogger(__name__)


def resolve_destination(requested: str | None, default: str) -> str:
    """Pick the destination folder inside the vault.

    An explicit request wins over the configured default.

    Raises:
        VaultFileError: If neither is set.
    """
    if requested:
        return requested
    if default:
        return default
    raise VaultFileError("No destination specified and no default path configured")


def _prepare(
    source: Path, vault_dir: Path, destination: str, reporter: ProgressReporter
) -> Path:
    if not source.exists():
        reporter.error(f"Source file not found: {source}")
        raise VaultFileError(f"Source file not found: {source}")

    dest_dir = vault_dir / destination
    if not dest_dir.exists():
        reporter.info(f"Creating destination directory: {dest_dir}")
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VaultFileError(f"Failed to create destination directory: {e}") from e

    target = dest_dir / source.name
    if target.exists():
        reporter.error(f"File already exists in destination: {target}")
        raise VaultFileError(f"File already exists in destination: {target}")
    return target


def copy_into_vault(
    source: Path,
    vault_dir: Path,
    destination: str,
    reporter: ProgressReporter | None = None,
) -> Path:
    """
    Copy a file into a folder of the vault.

    Args:
        source: File to copy
        vault_dir: Vault root directory
        destination: Folder relative to the vault root, created if missing
        reporter: Progress output

    Returns:
        Path of the new file

    Raises:
        VaultFileError: If the source is missing, the target exists or the
            copy fails.
    """
    reporter = reporter or NullReporter()
    source = Path(source).expanduser()
    target = _prepare(source, Path(vault_dir), destination, reporter)

    reporter.info(f"Copying file from {source} to {target}...")
    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise VaultFileError(f"Failed to copy file: {e}") from e

    logger.debug(f"Copied {source} -> {target}")
    reporter.success("File copied successfully!")
    return target


def move_into_vault(
    source: Path,
    vault_dir: Path,
    destination: str,
    reporter: ProgressReporter | None = None,
) -> Path:
    """
    Move a file into a folder of the vault.

    Works across filesystems. Arguments and errors as for copy_into_vault.
    """
    reporter = reporter or NullReporter()
    source = Path(source).expanduser()
    target = _prepare(source, Path(vault_dir), destination, reporter)

    reporter.info(f"Moving file from {source} to {target}...")
    try:
        shutil.move(source, target)
    except OSError as e:
        raise VaultFileError(f"Failed to move file: {e}") from e

    logger.debug(f"Moved {source} -> {target}")
    reporter.success("File moved successfully!")
    return target
