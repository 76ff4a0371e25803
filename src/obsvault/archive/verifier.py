"""Read a produced archive back to confirm it decodes cleanly."""

import gzip
import hashlib
import logging
import tarfile
import zlib
from pathlib import Path
from typing import IO

from obsvault.core.errors import VerifyFailed

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def _sha256(handle: IO[bytes]) -> str:
    digest = hashlib.sha256()
    for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
        digest.update(chunk)
    return digest.hexdigest()


def _compare(expected: dict[str, str], seen: dict[str, str]) -> None:
    missing = sorted(set(expected) - set(seen))
    if missing:
        raise VerifyFailed(f"archive is missing {len(missing)} file(s): {missing[0]}")
    unexpected = sorted(set(seen) - set(expected))
    if unexpected:
        raise VerifyFailed(f"archive holds unexpected file: {unexpected[0]}")
    for name, digest in expected.items():
        if seen[name] != digest:
            raise VerifyFailed(f"checksum mismatch for {name}")


def verify(artifact: Path | str, expected_digests: dict[str, str] | None = None) -> int:
    """Decompress artifact and read every entry header to the end marker.

    The gzip stream is then drained to its trailer, so truncation and CRC
    damage fail even when the tar framing happens to end cleanly. Nothing is
    written to disk.

    With expected_digests, each regular file payload is hashed and compared
    against the digests recorded at encode time.

    Returns:
        Number of entries in the archive

    Raises:
        VerifyFailed: If the archive does not read back cleanly.
    """
    seen: dict[str, str] = {}
    count = 0
    try:
        with gzip.open(artifact, "rb") as stream:
            with tarfile.open(fileobj=stream, mode="r|") as archive:
                for member in archive:
                    count += 1
                    if expected_digests is not None and member.isfile():
                        handle = archive.extractfile(member)
                        if handle is None:
                            raise VerifyFailed(f"cannot read payload of {member.name}")
                        seen[member.name] = _sha256(handle)
            while stream.read(CHUNK_SIZE):
                pass
    except VerifyFailed:
        raise
    except (OSError, EOFError, tarfile.TarError, zlib.error) as e:
        raise VerifyFailed(f"archive {artifact} is corrupt: {e}") from e

    if count == 0:
        raise VerifyFailed(f"archive {artifact} holds no entries")
    if expected_digests is not None:
        _compare(expected_digests, seen)

    logger.debug(f"Verified {count} entries in {artifact}")
    return count
