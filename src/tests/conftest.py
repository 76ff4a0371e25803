"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml


class RecordingReporter:
    """ProgressReporter that keeps every line it receives."""

    def __init__(self):
        self.lines: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.lines.append(("info", message))

    def success(self, message: str) -> None:
        self.lines.append(("success", message))

    def warning(self, message: str) -> None:
        self.lines.append(("warning", message))

    def error(self, message: str) -> None:
        self.lines.append(("error", message))

    def messages(self, level: str | None = None) -> list[str]:
        return [text for lvl, text in self.lines if level is None or lvl == level]


@pytest.fixture
def reporter():
    """Provide a reporter that records progress lines."""
    return RecordingReporter()


@pytest.fixture
def source_tree(tmp_path):
    """Small vault root: a.txt (3 bytes) and sub/b.txt (7 bytes)."""
    root = tmp_path / "source"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"abc")
    (root / "sub" / "b.txt").write_bytes(b"1234567")
    return root


@pytest.fixture
def usb_dir(tmp_path):
    """Directory standing in for a mounted USB key."""
    path = tmp_path / "usb"
    path.mkdir()
    return path


@pytest.fixture
def vault_root(tmp_path):
    """Root holding one vault named 'notes' with its .obsidian folder."""
    root = tmp_path / "Obsidian"
    (root / "notes" / ".obsidian").mkdir(parents=True)
    (root / "notes" / "index.md").write_text("# Index\n")
    return root


@pytest.fixture
def sample_settings(vault_root, usb_dir, tmp_path):
    """Settings mapping pointing at the temporary vault root."""
    return {
        "root": str(vault_root),
        "default_vault": "notes",
        "default_editor": "vim",
        "git": {"remote": "origin", "branch": "main"},
        "vaults": {
            "notes": {
                "vault_path": "notes",
                "commands": {
                    "cp": {"default_target_path": "Assets"},
                    "mv": {"default_target_path": "Archives"},
                },
            }
        },
        "archive": {
            "usb_path": str(usb_dir),
            "extract_path": str(tmp_path / "restore"),
            "verify_checksums": True,
        },
    }


@pytest.fixture
def config_file(tmp_path, sample_settings):
    """Write sample_settings to a config.yaml and return its path."""
    path = tmp_path / "config" / "config.yaml"
    path.parent.mkdir(parents=True)
    path.write_text(yaml.safe_dump(sample_settings))
    return path


@pytest.fixture
def make_tree():
    """Factory building a directory tree from a {relative_path: bytes} mapping."""

    def _make_tree(root: Path, files: dict[str, bytes]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        return root

    return _make_tree
