"""Environment configuration and logging setup for obsvault.

Values here come from the process environment (optionally seeded from a
.env file). The vault layout itself lives in the YAML settings file, see
obsvault.core.settings.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# Settings file location (XDG-style, defaults to ~/.config/obsvault/config.yaml)
DEFAULT_CONFIG_PATH = Path("~/.config/obsvault/config.yaml").expanduser()


def get_config_path() -> Path:
    """Resolve the settings file path from $OBSVAULT_CONFIG or the default."""
    override = get_env("OBSVAULT_CONFIG")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


# Fallback root when no .obsidian directory can be discovered
OBSIDIAN_VAULTS_PATH = get_env("OBSIDIAN_VAULTS_PATH", "")

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "WARNING")


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure and return logger."""
    level = (
        logging.DEBUG
        if debug or get_env_bool("OBSVAULT_DEBUG")
        else getattr(logging, (LOG_LEVEL or "WARNING").upper(), logging.WARNING)
    )
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )
    return logging.getLogger("obsvault")
