"""Restore a backup archive into a directory."""

import gzip
import logging
import os
import shutil
import tarfile
import zlib
from pathlib import Path
from typing import IO

from obsvault.core.errors import DecodeFailed

logger = logging.getLogger(__name__)


def _member_path(base: Path, name: str) -> Path:
    destination = Path(os.path.normpath(base / name))
    if os.path.commonpath([base, destination]) != str(base):
        raise DecodeFailed(f"entry {name} points outside {base}")
    return destination


def _write_file(destination: Path, payload: IO[bytes], mode: int) -> None:
    fd = os.open(destination, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as handle:
        shutil.copyfileobj(payload, handle)
    # O_CREAT applies the umask and leaves existing files alone
    os.chmod(destination, mode)


def decode(artifact: Path | str, target: Path | str) -> int:
    """Apply every archive entry to target, in archive order.

    Directories are created with their parents. Regular files get their
    parent directory created, are created or truncated, receive the payload
    and the stored permission bits. Existing files are overwritten. Other
    entry types are skipped.

    Returns:
        Number of entries applied

    Raises:
        DecodeFailed: On any read or write error, or an entry escaping target.
    """
    base = Path(target).resolve()
    count = 0
    try:
        with gzip.open(artifact, "rb") as stream:
            with tarfile.open(fileobj=stream, mode="r|") as archive:
                for member in archive:
                    destination = _member_path(base, member.name)
                    if member.isdir():
                        destination.mkdir(parents=True, exist_ok=True)
                    elif member.isfile():
                        destination.parent.mkdir(parents=True, exist_ok=True)
                        payload = archive.extractfile(member)
                        if payload is None:
                            raise DecodeFailed(f"cannot read payload of {member.name}")
                        _write_file(destination, payload, member.mode & 0o7777)
                    else:
                        logger.debug(f"Skipping {member.name}: unsupported entry type")
                        continue
                    count += 1
    except DecodeFailed:
        raise
    except (OSError, EOFError, tarfile.TarError, zlib.error) as e:
        raise DecodeFailed(f"failed to extract {artifact}: {e}") from e

    logger.debug(f"Decoded {count} entries from {artifact} into {base}")
    return count
