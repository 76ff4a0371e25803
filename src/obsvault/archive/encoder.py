"""Stream a source tree into a gzip-compressed tar archive."""

import gzip
import hashlib
import logging
import posixpath
import tarfile
from pathlib import Path
from typing import BinaryIO

from obsvault.archive.walk import walk_tree
from obsvault.core.errors import EncodeFailed
from obsvault.core.types import EncodeResult, EntryKind, FileEntry

logger = logging.getLogger(__name__)

# Characters that break on common filesystems (FAT/exFAT media, Windows)
RESERVED_CHARS = "?*<>\"'"
_SANITIZE_TABLE = str.maketrans({char: "-" for char in RESERVED_CHARS})


def sanitize_name(name: str) -> str:
    """Replace each reserved character with '-'. Idempotent."""
    return name.translate(_SANITIZE_TABLE)


def archive_name(relative: str) -> str:
    """Archive-internal name for a relative POSIX path.

    Only the base name is sanitized; directory components are kept as is.
    """
    directory, base = posixpath.split(relative.replace("\\", "/"))
    return posixpath.join(directory, sanitize_name(base))


class _HashingReader:
    """File wrapper that hashes everything read through it."""

    def __init__(self, handle: BinaryIO):
        self._handle = handle
        self._digest = hashlib.sha256()

    def read(self, size: int) -> bytes:
        chunk = self._handle.read(size)
        self._digest.update(chunk)
        return chunk

    def hexdigest(self) -> str:
        return self._digest.hexdigest()


def _header(entry: FileEntry, name: str) -> tarfile.TarInfo:
    """Tar header built from the walked metadata.

    Every regular file gets a full header and payload, even when it shares an
    inode with a file already stored.
    """
    info = tarfile.TarInfo(name)
    info.type = tarfile.DIRTYPE if entry.is_dir else tarfile.REGTYPE
    info.size = entry.size if entry.is_file else 0
    info.mode = entry.mode
    info.mtime = int(entry.mtime)
    return info


def encode(source: Path | str, artifact: Path | str) -> EncodeResult:
    """Write every directory and regular file under source into artifact.

    The root itself is stored as ".". Entries follow walk order. A failure
    leaves whatever was written so far in place; removing it is up to the
    caller.

    Args:
        source: Directory to archive
        artifact: Path of the .tar.gz to create

    Returns:
        EncodeResult with the entry count and per-file SHA-256 digests

    Raises:
        EncodeFailed: On any read or write error.
    """
    digests: dict[str, str] = {}
    count = 0
    current = Path(source)
    try:
        with open(artifact, "wb") as raw, gzip.GzipFile(
            fileobj=raw, mode="wb"
        ) as compressed, tarfile.open(fileobj=compressed, mode="w|") as archive:
            for entry in walk_tree(source):
                current = entry.path
                if entry.kind is EntryKind.OTHER:
                    logger.warning(f"Skipping {entry.relative}: not a regular file")
                    continue

                name = archive_name(entry.relative)
                info = _header(entry, name)
                if entry.is_file:
                    with open(entry.path, "rb") as handle:
                        reader = _HashingReader(handle)
                        archive.addfile(info, reader)
                    digests[name] = reader.hexdigest()
                else:
                    archive.addfile(info)
                count += 1
    except (OSError, tarfile.TarError) as e:
        raise EncodeFailed(f"failed to archive {current}: {e}") from e

    logger.debug(f"Encoded {count} entries from {source} into {artifact}")
    return EncodeResult(entry_count=count, digests=digests)
