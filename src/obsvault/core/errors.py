"""Error hierarchy for obsvault.

Every failure that should end a command with a non-zero exit derives from
ObsVaultError. The CLI catches the base class, prints the message and exits.
"""

from pathlib import Path


class ObsVaultError(Exception):
    """Base exception for obsvault failures."""

    pass


class SettingsError(ObsVaultError):
    """Raised when the configuration file is missing or invalid."""

    pass


class VaultFileError(ObsVaultError):
    """Raised when a file cannot be copied or moved into a vault."""

    pass


class EditorError(ObsVaultError):
    """Raised when the configured editor cannot be launched."""

    pass


class GitError(ObsVaultError):
    """Raised when a git command fails or git is not installed."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        output: str = "",
    ):
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.output = output

    @property
    def is_conflict(self) -> bool:
        """True when git reported a merge conflict."""
        return "conflict" in self.output.lower()


class SyncError(ObsVaultError):
    """Raised when a push or pull cannot complete."""

    def __init__(self, message: str, conflicts: list[str] | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


# --- Archive pipeline ---


class ArchiveError(ObsVaultError):
    """Base exception for backup and restore failures."""

    pass


class DestinationUnavailable(ArchiveError):
    """The backup medium is not mounted or not statable."""

    def __init__(self, destination: Path):
        super().__init__(f"Backup medium not present at: {destination}")
        self.destination = destination


class PreviousBackupRemovalFailed(ArchiveError):
    """The previous artifact exists but could not be deleted."""

    pass


class SpaceCalculationFailed(ArchiveError):
    """Walking the source tree or querying free space failed."""

    pass


class InsufficientSpace(ArchiveError):
    """The destination has less free space than the backup requires."""

    def __init__(self, required: int, available: int):
        super().__init__(
            f"Insufficient space: required {required} bytes, available {available} bytes"
        )
        self.required = required
        self.available = available


class EncodeFailed(ArchiveError):
    """Writing the archive failed."""

    pass


class VerifyFailed(ArchiveError):
    """The produced archive did not read back cleanly."""

    pass


class DecodeFailed(ArchiveError):
    """Restoring an archive into the target directory failed."""

    pass


class NoBackupFound(ArchiveError):
    """No backup artifact exists at the destination."""

    def __init__(self, destination: Path):
        super().__init__(f"No backup found at: {destination}")
        self.destination = destination
