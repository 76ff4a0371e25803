"""Tests for the callout snippet helpers."""

import subprocess
from unittest.mock import MagicMock

import pytest

from obsvault.core.errors import EditorError
from obsvault.vault import snippets


class TestEnsureSnippet:
    """Tests for ensure_snippet()."""

    def test_creates_placeholder(self, vault_root):
        """A missing snippet is created with a placeholder comment."""
        obsidian = vault_root / "notes" / ".obsidian"

        path, created = snippets.ensure_snippet(obsidian)

        assert created
        assert path == obsidian / "snippets" / "snippet.css"
        assert path.read_text() == "/* Add your callout styles here */\n"

    def test_keeps_existing(self, vault_root):
        """An existing snippet is not rewritten."""
        obsidian = vault_root / "notes" / ".obsidian"
        (obsidian / "snippets").mkdir()
        (obsidian / "snippets" / "snippet.css").write_text(".callout {}")

        path, created = snippets.ensure_snippet(obsidian)

        assert not created
        assert path.read_text() == ".callout {}"


class TestOpenInEditor:
    """Tests for open_in_editor()."""

    def test_runs_editor(self, monkeypatch, tmp_path):
        """The editor is launched with the file path."""
        mock_run = MagicMock()
        monkeypatch.setattr(snippets.subprocess, "run", mock_run)

        snippets.open_in_editor("vim", tmp_path / "snippet.css")

        mock_run.assert_called_once_with(["vim", str(tmp_path / "snippet.css")], check=True)

    def test_missing_editor(self, monkeypatch, tmp_path):
        """An unknown editor raises EditorError."""
        monkeypatch.setattr(
            snippets.subprocess, "run", MagicMock(side_effect=FileNotFoundError("nope"))
        )

        with pytest.raises(EditorError, match="Editor not found: nope-editor"):
            snippets.open_in_editor("nope-editor", tmp_path / "snippet.css")

    def test_editor_failure(self, monkeypatch, tmp_path):
        """A non-zero exit raises EditorError."""
        monkeypatch.setattr(
            snippets.subprocess,
            "run",
            MagicMock(side_effect=subprocess.CalledProcessError(2, ["code"])),
        )

        with pytest.raises(EditorError, match="status 2"):
            snippets.open_in_editor("code", tmp_path / "snippet.css")
