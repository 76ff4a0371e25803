"""Backup and restore of the vault root as a single .tar.gz on removable media.

The pipeline is leaf-first: walk -> space / rotation -> encoder -> verifier
-> decoder, sequenced by BackupOrchestrator.
"""

from obsvault.archive.decoder import decode
from obsvault.archive.encoder import archive_name, encode, sanitize_name
from obsvault.archive.orchestrator import BackupOrchestrator
from obsvault.archive.rotation import find_previous, remove_previous
from obsvault.archive.space import available_space, format_bytes, required_space
from obsvault.archive.verifier import verify
from obsvault.archive.walk import walk_tree

__all__ = [
    "BackupOrchestrator",
    "archive_name",
    "available_space",
    "decode",
    "encode",
    "find_previous",
    "format_bytes",
    "remove_previous",
    "required_space",
    "sanitize_name",
    "verify",
    "walk_tree",
]
