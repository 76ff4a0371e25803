"""Settings - YAML configuration for obsvault.

The settings file describes where the vaults live, which vault commands act on
by default, how to reach the git remote and where backups go. It is loaded
into a typed, frozen Settings model.

Example:
    store = SettingsStore(get_config_path())
    settings = store.load()
    validate_settings(settings)
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from obsvault.core.config import OBSIDIAN_VAULTS_PATH
from obsvault.core.errors import SettingsError

logger = logging.getLogger(__name__)

OBSIDIAN_DIRNAME = ".obsidian"
DEFAULT_EDITOR = "code"
DEFAULT_CP_PATH = "Assets"
DEFAULT_MV_PATH = "Archives"


def _expand(path_str: str) -> Path:
    return Path(path_str).expanduser()


# --- Typed Configuration Models ---


class CommandDefaults(BaseModel):
    """Per-command defaults for a vault."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_target_path: str = ""


class VaultCommands(BaseModel):
    """Defaults for the cp and mv commands."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    cp: CommandDefaults = Field(
        default_factory=lambda: CommandDefaults(default_target_path=DEFAULT_CP_PATH)
    )
    mv: CommandDefaults = Field(
        default_factory=lambda: CommandDefaults(default_target_path=DEFAULT_MV_PATH)
    )


class VaultEntry(BaseModel):
    """One vault, located relative to the settings root."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vault_path: str = "."
    commands: VaultCommands = Field(default_factory=VaultCommands)


class GitSettings(BaseModel):
    """Remote and branch used by push and pull."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    remote: str = "origin"
    branch: str = "main"


class ArchiveSettings(BaseModel):
    """Backup medium and restore location."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    usb_path: str = ""
    extract_path: str = ""
    verify_checksums: bool = True


class Settings(BaseModel):
    """Typed configuration loaded from config.yaml.

    Frozen to prevent accidental mutation.
    Extra fields are forbidden to catch typos in config.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root: str
    default_vault: str
    default_editor: str = DEFAULT_EDITOR
    git: GitSettings = Field(default_factory=GitSettings)
    vaults: dict[str, VaultEntry] = Field(default_factory=dict)
    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)

    @property
    def root_path(self) -> Path:
        return _expand(self.root)

    def vault(self, name: str | None = None) -> VaultEntry:
        """Return the named vault, or the default vault.

        Raises:
            SettingsError: If the vault is not declared.
        """
        key = name or self.default_vault
        entry = self.vaults.get(key)
        if entry is None:
            raise SettingsError(f"Vault '{key}' is not declared in the configuration")
        return entry

    def vault_dir(self, name: str | None = None) -> Path:
        """Absolute directory of a vault."""
        return (self.root_path / self.vault(name).vault_path).resolve()

    def obsidian_dir(self, name: str | None = None) -> Path:
        """The vault's .obsidian configuration directory."""
        return self.vault_dir(name) / OBSIDIAN_DIRNAME

    @property
    def usb_path(self) -> Path | None:
        return _expand(self.archive.usb_path) if self.archive.usb_path else None

    @property
    def extract_path(self) -> Path | None:
        return (
            _expand(self.archive.extract_path) if self.archive.extract_path else None
        )


class SettingsStore:
    """Reads and writes the settings file.

    The parsed Settings is cached after the first load; call reload() to
    read the file again.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self._settings: Settings | None = None

    @property
    def exists(self) -> bool:
        """Check if the settings file exists."""
        return self.path.exists()

    def load(self) -> Settings:
        """Load and validate the settings file.

        Raises:
            SettingsError: If the file is missing, is not valid YAML, is not a
                mapping or does not match the schema.
        """
        if self._settings is not None:
            logger.debug("Returning cached settings")
            return self._settings

        if not self.path.exists():
            raise SettingsError(
                f"Configuration file not found: {self.path}. Run 'obsvault init' first."
            )

        logger.debug(f"Loading settings from {self.path}")
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {self.path}: {e}")
            raise SettingsError(f"Invalid YAML in {self.path}: {e}") from e
        except OSError as e:
            raise SettingsError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise SettingsError(
                f"{self.path.name} must be a mapping, got {type(raw).__name__}"
            )

        try:
            self._settings = Settings.model_validate(raw)
        except ValidationError as e:
            raise SettingsError(f"Invalid configuration in {self.path}: {e}") from e

        logger.info(
            f"Settings loaded: root={self._settings.root}, "
            f"vaults={len(self._settings.vaults)}"
        )
        return self._settings

    def reload(self) -> Settings:
        """Force reload settings from disk."""
        self._settings = None
        return self.load()

    def save(self, settings: Settings) -> None:
        """Write settings to the file, creating its directory if needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(settings.model_dump(), f, sort_keys=False)
        except OSError as e:
            raise SettingsError(f"Failed to write {self.path}: {e}") from e
        self._settings = settings
        logger.debug(f"Settings written to {self.path}")

    def __repr__(self) -> str:
        return f"SettingsStore({self.path})"


def validate_settings(settings: Settings) -> None:
    """Check that the configured locations exist.

    Raises:
        SettingsError: If the root is missing or the default vault is unknown.
    """
    if not settings.root:
        raise SettingsError(
            "No Obsidian root configured. Set OBSIDIAN_VAULTS_PATH or run 'obsvault init'."
        )
    if not settings.root_path.is_dir():
        raise SettingsError(f"Obsidian root directory not found: {settings.root_path}")
    settings.vault()


def require_usb_path(settings: Settings) -> Path:
    """Backup medium path, which archive commands cannot run without."""
    if settings.usb_path is None:
        raise SettingsError(
            "USB path for archive is required. Please set 'archive.usb_path' in your configuration"
        )
    return settings.usb_path


def require_extract_path(settings: Settings) -> Path:
    """Restore target path, which archive extract cannot run without."""
    if settings.extract_path is None:
        raise SettingsError(
            "Extract path is required. Please set 'archive.extract_path' in your configuration"
        )
    return settings.extract_path


def find_obsidian_vault(search_root: Path) -> Path | None:
    """Find the first directory under search_root holding a .obsidian folder.

    Hidden directories are not descended into. Directories are visited in
    name order so the result is stable.

    Returns:
        The vault directory, or None if no vault was found.
    """
    for dirpath, dirnames, _ in os.walk(search_root):
        if OBSIDIAN_DIRNAME in dirnames:
            return Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
    return None


def default_settings(search_root: Path | None = None) -> Settings:
    """Build the settings written by 'obsvault init'.

    The first vault found under the home directory names the default vault;
    its parent becomes the root. Without a discovered vault the root falls
    back to $OBSIDIAN_VAULTS_PATH.
    """
    vault_dir = find_obsidian_vault(search_root or Path.home())
    if vault_dir is not None:
        logger.debug(f"Discovered Obsidian vault at {vault_dir}")
        name = vault_dir.name
        return Settings(
            root=str(vault_dir.parent),
            default_vault=name,
            vaults={name: VaultEntry(vault_path=name)},
        )

    logger.debug("No Obsidian vault discovered, using OBSIDIAN_VAULTS_PATH")
    return Settings(
        root=OBSIDIAN_VAULTS_PATH or "",
        default_vault="default",
        vaults={"default": VaultEntry(vault_path=".")},
    )
