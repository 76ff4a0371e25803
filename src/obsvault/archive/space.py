"""Space accounting for backups."""

import logging
import shutil
from pathlib import Path

from obsvault.archive.walk import walk_tree
from obsvault.core.errors import SpaceCalculationFailed

logger = logging.getLogger(__name__)

# Extra room on top of the raw file total, in tenths
MARGIN_DIVISOR = 10

_UNITS = "KMGTPE"


def with_margin(size: int) -> int:
    """Add the 10% margin, truncating: 10 -> 11, 9 -> 9."""
    return size + size // MARGIN_DIVISOR


def required_space(source: Path | str) -> int:
    """Bytes needed to back up source: all non-directory sizes plus 10%.

    Raises:
        SpaceCalculationFailed: If any part of the tree cannot be read.
    """
    total = 0
    try:
        for entry in walk_tree(source):
            if not entry.is_dir:
                total += entry.size
    except OSError as e:
        raise SpaceCalculationFailed(
            f"failed to calculate required space for {source}: {e}"
        ) from e
    logger.debug(f"Raw size of {source}: {total} bytes")
    return with_margin(total)


def available_space(destination: Path | str) -> int:
    """Free bytes available to this user at the destination mount.

    Raises:
        SpaceCalculationFailed: If the destination cannot be queried.
    """
    try:
        return shutil.disk_usage(destination).free
    except OSError as e:
        raise SpaceCalculationFailed(
            f"failed to get available space at {destination}: {e}"
        ) from e


def format_bytes(size: int) -> str:
    """Render a byte count with binary units, e.g. 1536 -> '1.5 KB'."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {_UNITS[exp]}B"
