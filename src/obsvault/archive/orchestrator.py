"""Backup and restore orchestration.

create() runs the backup sequence, strictly in order:

    CheckDestination -> Rotate -> CheckSpace -> Encode -> Verify -> Done

Each step depends on the previous one (rotation frees the slot before space
is measured, verification needs a finished archive). Any failure ends the run;
nothing is retried. An artifact that fails to encode or verify is deleted so
the medium never holds an unconfirmed backup.

extract() restores the backup found on the medium into the configured
directory, asking before it replaces an existing one.
"""

import logging
import shutil
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from obsvault.archive import space
from obsvault.archive.decoder import decode
from obsvault.archive.encoder import encode
from obsvault.archive.rotation import find_previous, new_artifact_path, remove_previous
from obsvault.archive.verifier import verify
from obsvault.core.errors import (
    DecodeFailed,
    DestinationUnavailable,
    EncodeFailed,
    InsufficientSpace,
    NoBackupFound,
    VerifyFailed,
)
from obsvault.core.types import (
    BackupParams,
    BackupResult,
    ConfirmOverwrite,
    ExtractParams,
    ExtractResult,
    NullReporter,
    ProgressReporter,
    SpaceBudget,
)

logger = logging.getLogger(__name__)


class BackupOrchestrator:
    """Sequences the archive pipeline and reports progress.

    Space queries and the clock are injectable so runs can be driven
    deterministically.
    """

    def __init__(
        self,
        reporter: ProgressReporter | None = None,
        required_space: Callable[[Path], int] = space.required_space,
        available_space: Callable[[Path], int] = space.available_space,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.reporter = reporter or NullReporter()
        self._required_space = required_space
        self._available_space = available_space
        self._clock = clock

    # ------------------------------------------------------------------
    def _check_destination(self, destination: Path) -> None:
        try:
            present = destination.is_dir()
        except OSError:
            present = False
        if not present:
            self.reporter.error(f"USB key is not connected at path: {destination}")
            raise DestinationUnavailable(destination)
        self.reporter.info(f"USB key is connected at: {destination}")

    def _rotate(self, destination: Path) -> Path | None:
        previous = find_previous(destination)
        if previous is None:
            self.reporter.info("No previous backup found")
            return None
        self.reporter.info(f"Removing previous backup: {previous.name}")
        remove_previous(previous)
        self.reporter.success("Previous backup removed")
        return previous

    def _check_space(self, params: BackupParams) -> SpaceBudget:
        budget = SpaceBudget(
            required=self._required_space(params.source),
            available=self._available_space(params.destination),
        )
        required = space.format_bytes(budget.required)
        available = space.format_bytes(budget.available)
        if not budget.sufficient:
            self.reporter.error("Insufficient space on USB key")
            self.reporter.info(f"Required space: {required}")
            self.reporter.info(f"Available space: {available}")
            raise InsufficientSpace(budget.required, budget.available)

        self.reporter.info("Sufficient space on USB key")
        self.reporter.info(f"Required space: {required}")
        self.reporter.info(f"Available space: {available}")
        return budget

    def _discard(self, artifact: Path) -> None:
        try:
            artifact.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not delete unusable artifact {artifact}: {e}")
            self.reporter.warning(f"Could not delete unusable backup: {artifact}")
        else:
            logger.debug(f"Deleted unusable artifact {artifact}")

    # ------------------------------------------------------------------
    def create(self, params: BackupParams) -> BackupResult:
        """Back up params.source onto params.destination.

        Raises:
            DestinationUnavailable: The medium is not mounted.
            PreviousBackupRemovalFailed: The old artifact could not be deleted.
            SpaceCalculationFailed: Sizes could not be determined.
            InsufficientSpace: The medium is too small; nothing was written.
            EncodeFailed: Writing the archive failed; the partial file is removed.
            VerifyFailed: The archive did not read back; it is removed.
        """
        destination = Path(params.destination)
        self._check_destination(destination)
        replaced = self._rotate(destination)
        budget = self._check_space(params)

        artifact = new_artifact_path(destination, self._clock())
        self.reporter.info("Creating backup of all vaults...")
        try:
            encoded = encode(params.source, artifact)
        except EncodeFailed:
            self._discard(artifact)
            raise

        self.reporter.info("Verifying archive integrity...")
        expected = encoded.digests if params.verify_checksums else None
        try:
            verify(artifact, expected)
        except VerifyFailed:
            self.reporter.error("Backup verification failed, removing archive")
            self._discard(artifact)
            raise

        size = artifact.stat().st_size
        self.reporter.success("Backup of all vaults completed and verified!")
        logger.info(
            f"Backup written: {artifact} ({encoded.entry_count} entries, {size} bytes)"
        )
        return BackupResult(
            artifact=artifact,
            budget=budget,
            entry_count=encoded.entry_count,
            size_bytes=size,
            replaced=replaced,
        )

    def extract(
        self, params: ExtractParams, confirm_overwrite: ConfirmOverwrite
    ) -> ExtractResult:
        """Restore the backup on params.destination into params.target.

        Raises:
            DestinationUnavailable: The medium is not mounted.
            NoBackupFound: The medium holds no artifact.
            DecodeFailed: The target could not be prepared or the archive
                could not be applied.
        """
        destination = Path(params.destination)
        target = Path(params.target)
        self._check_destination(destination)

        artifact = find_previous(destination)
        if artifact is None:
            self.reporter.error("No backup found on USB key")
            raise NoBackupFound(destination)
        self.reporter.info(f"Found backup: {artifact.name}")

        if target.exists():
            self.reporter.info(f"Backup directory already exists: {target}")
            if not confirm_overwrite(target):
                self.reporter.info("Operation cancelled")
                return ExtractResult(artifact=artifact, target=target, cancelled=True)
            self.reporter.info("Deleting existing directory...")
            try:
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            except OSError as e:
                raise DecodeFailed(
                    f"failed to delete existing directory {target}: {e}"
                ) from e

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DecodeFailed(f"failed to create directory {target}: {e}") from e

        self.reporter.info(f"Extracting backup to: {target}")
        count = decode(artifact, target)
        self.reporter.success("Backup extracted successfully!")
        return ExtractResult(artifact=artifact, target=target, entry_count=count)
