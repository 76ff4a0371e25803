"""obsvault core - settings, errors, shared types and the git capability."""

from obsvault.core.errors import (
    ArchiveError,
    GitError,
    ObsVaultError,
    SettingsError,
    SyncError,
    VaultFileError,
)
from obsvault.core.types import (
    BackupParams,
    BackupResult,
    ExtractParams,
    ExtractResult,
    ProgressReporter,
    SpaceBudget,
)

__all__ = [
    # Errors
    "ArchiveError",
    "GitError",
    "ObsVaultError",
    "SettingsError",
    "SyncError",
    "VaultFileError",
    # Types
    "BackupParams",
    "BackupResult",
    "ExtractParams",
    "ExtractResult",
    "ProgressReporter",
    "SpaceBudget",
]
