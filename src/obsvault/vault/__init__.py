"""Vault operations: filing documents, git sync and the callout snippet.

A vault is a directory of Markdown notes with a .obsidian configuration
folder. Several vaults can live under one root, which is also the git working
tree and the backup source.
"""

from obsvault.vault.files import copy_into_vault, move_into_vault, resolve_destination
from obsvault.vault.snippets import ensure_snippet, open_in_editor
from obsvault.vault.sync import pull_vault, push_vault

__all__ = [
    "copy_into_vault",
    "ensure_snippet",
    "move_into_vault",
    "open_in_editor",
    "pull_vault",
    "push_vault",
    "resolve_destination",
]
