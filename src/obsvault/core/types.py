"""Shared types and data structures for obsvault."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Protocol


class EntryKind(StrEnum):
    """Kind of a filesystem entry produced by the tree walker."""

    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


@dataclass(frozen=True)
class FileEntry:
    """One entry of a source tree, as seen by lstat."""

    path: Path
    """Absolute path on disk."""

    relative: str
    """POSIX path relative to the walked root ("." for the root itself)."""

    kind: EntryKind
    size: int
    mode: int
    mtime: float = 0.0

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True)
class SpaceBudget:
    """Bytes needed for a backup compared to bytes free on the medium."""

    required: int
    available: int

    @property
    def sufficient(self) -> bool:
        return self.available >= self.required


@dataclass(frozen=True)
class BackupParams:
    """Inputs for one backup run."""

    source: Path
    destination: Path
    verify_checksums: bool = True


@dataclass(frozen=True)
class ExtractParams:
    """Inputs for one restore run."""

    destination: Path
    target: Path


@dataclass(frozen=True)
class EncodeResult:
    """What the encoder wrote."""

    entry_count: int
    digests: dict[str, str] = field(default_factory=dict)
    """SHA-256 hex digest of every regular file payload, by archive name."""


@dataclass(frozen=True)
class BackupResult:
    """Outcome of a successful backup run."""

    artifact: Path
    budget: SpaceBudget
    entry_count: int
    size_bytes: int
    replaced: Path | None = None


@dataclass(frozen=True)
class ExtractResult:
    """Outcome of a restore run."""

    artifact: Path
    target: Path
    entry_count: int = 0
    cancelled: bool = False


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a push or pull."""

    action: str
    changed: bool = True
    message: str = ""


class ProgressReporter(Protocol):
    """Receives human-readable progress lines. Purely observational."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class NullReporter:
    """Reporter that discards everything."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class ConfirmOverwrite(Protocol):
    """Asks whether an existing directory may be replaced."""

    def __call__(self, target: Path) -> bool:
        pass
