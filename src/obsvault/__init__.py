"""obsvault - manage Obsidian vaults from the command line."""

__version__ = "0.3.0"
