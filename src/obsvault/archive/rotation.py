"""Backup artifact naming and single-slot rotation.

Only one backup is kept per medium: the previous artifact is deleted before
a new one is written.
"""

import logging
from datetime import datetime
from pathlib import Path

from obsvault.core.errors import PreviousBackupRemovalFailed

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "backup-obsidian_"
ARTIFACT_SUFFIX = ".tar.gz"
ARTIFACT_GLOB = f"{ARTIFACT_PREFIX}*{ARTIFACT_SUFFIX}"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def artifact_name(now: datetime | None = None) -> str:
    """File name for a backup taken at `now`, to the second."""
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{ARTIFACT_PREFIX}{stamp}{ARTIFACT_SUFFIX}"


def new_artifact_path(destination: Path, now: datetime | None = None) -> Path:
    return Path(destination) / artifact_name(now)


def find_previous(destination: Path | str) -> Path | None:
    """Return the first existing artifact in sorted order, or None.

    With several artifacts present the lexically first one wins, which is
    not necessarily the most recent.
    """
    matches = sorted(Path(destination).glob(ARTIFACT_GLOB))
    if len(matches) > 1:
        logger.warning(
            f"{len(matches)} backups found in {destination}, using {matches[0].name}"
        )
    return matches[0] if matches else None


def remove_previous(path: Path) -> None:
    """Delete a previous artifact.

    Raises:
        PreviousBackupRemovalFailed: If the file cannot be deleted.
    """
    try:
        Path(path).unlink()
    except OSError as e:
        raise PreviousBackupRemovalFailed(
            f"failed to remove previous backup {path}: {e}"
        ) from e
    logger.debug(f"Removed previous backup {path}")
