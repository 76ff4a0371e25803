"""Tests for restoring archives."""

import io
import os
import stat
import tarfile

import pytest

from obsvault.archive.decoder import decode
from obsvault.archive.encoder import encode
from obsvault.archive.walk import walk_tree
from obsvault.core.errors import DecodeFailed


def _snapshot(root):
    """Relative path -> (kind, content, mode) for every entry below root."""
    result = {}
    for entry in walk_tree(root):
        if entry.relative == ".":
            continue
        content = entry.path.read_bytes() if entry.is_file else None
        result[entry.relative] = (entry.kind, content, entry.mode if entry.is_file else None)
    return result


def _write_archive(path, members):
    """members: list of (TarInfo, bytes | None)."""
    with tarfile.open(path, "w:gz") as archive:
        for info, content in members:
            archive.addfile(info, io.BytesIO(content) if content is not None else None)


def _file_info(name, content, mode=0o644):
    info = tarfile.TarInfo(name)
    info.size = len(content)
    info.mode = mode
    return info


class TestRoundTrip:
    """decode(encode(T)) reproduces T."""

    def test_restores_paths_contents_and_modes(self, make_tree, tmp_path):
        """Paths, bytes and permission bits survive the round trip."""
        source = make_tree(
            tmp_path / "vault",
            {
                "index.md": b"# Home\n",
                "daily/2024/01/2024-01-28.md": b"notes" * 100,
                "Assets/image.png": bytes(range(256)),
                "empty.md": b"",
            },
        )
        os.chmod(source / "Assets" / "image.png", 0o600)
        os.chmod(source / "index.md", 0o755)
        artifact = tmp_path / "backup.tar.gz"

        encode(source, artifact)
        count = decode(artifact, tmp_path / "restore")

        assert _snapshot(tmp_path / "restore") == _snapshot(source)
        assert count == len(list(walk_tree(source)))

    def test_reserved_characters_are_sanitized(self, make_tree, tmp_path):
        """File names come back with reserved characters replaced."""
        source = make_tree(tmp_path / "vault", {"sub/weird?name*.png": b"png"})
        artifact = tmp_path / "backup.tar.gz"

        encode(source, artifact)
        decode(artifact, tmp_path / "restore")

        assert (tmp_path / "restore" / "sub" / "weird-name-.png").read_bytes() == b"png"


class TestDecode:
    """Entry application rules."""

    def test_creates_missing_parent_directories(self, tmp_path):
        """A file entry without directory entries still lands in place."""
        artifact = tmp_path / "a.tar.gz"
        _write_archive(artifact, [(_file_info("x/y/z.md", b"deep"), b"deep")])

        decode(artifact, tmp_path / "out")

        assert (tmp_path / "out" / "x" / "y" / "z.md").read_bytes() == b"deep"

    def test_overwrites_and_truncates_existing_files(self, tmp_path):
        """An existing longer file is replaced, not partially overwritten."""
        target = tmp_path / "out"
        target.mkdir()
        (target / "note.md").write_bytes(b"a much longer previous content")
        artifact = tmp_path / "a.tar.gz"
        _write_archive(artifact, [(_file_info("note.md", b"short"), b"short")])

        decode(artifact, target)

        assert (target / "note.md").read_bytes() == b"short"

    def test_applies_stored_mode_to_existing_file(self, tmp_path):
        """Permission bits are set even when the file already existed."""
        target = tmp_path / "out"
        target.mkdir()
        (target / "script.sh").write_bytes(b"old")
        os.chmod(target / "script.sh", 0o600)
        artifact = tmp_path / "a.tar.gz"
        _write_archive(
            artifact, [(_file_info("script.sh", b"new", mode=0o750), b"new")]
        )

        decode(artifact, target)

        assert stat.S_IMODE((target / "script.sh").stat().st_mode) == 0o750

    def test_later_entries_win(self, tmp_path):
        """Entries are applied in archive order."""
        artifact = tmp_path / "a.tar.gz"
        _write_archive(
            artifact,
            [
                (_file_info("dup.md", b"first"), b"first"),
                (_file_info("dup.md", b"second"), b"second"),
            ],
        )

        count = decode(artifact, tmp_path / "out")

        assert (tmp_path / "out" / "dup.md").read_bytes() == b"second"
        assert count == 2

    def test_skips_symlink_entries(self, tmp_path):
        """Only directories and regular files are applied."""
        link = tarfile.TarInfo("link.md")
        link.type = tarfile.SYMTYPE
        link.linkname = "/etc/passwd"
        artifact = tmp_path / "a.tar.gz"
        _write_archive(
            artifact, [(link, None), (_file_info("ok.md", b"ok"), b"ok")]
        )

        count = decode(artifact, tmp_path / "out")

        assert not (tmp_path / "out" / "link.md").exists()
        assert (tmp_path / "out" / "ok.md").exists()
        assert count == 1

    def test_rejects_entries_escaping_target(self, tmp_path):
        """A '..' entry is refused."""
        artifact = tmp_path / "a.tar.gz"
        _write_archive(artifact, [(_file_info("../evil.md", b"x"), b"x")])

        with pytest.raises(DecodeFailed, match="outside"):
            decode(artifact, tmp_path / "out")
        assert not (tmp_path / "evil.md").exists()

    def test_corrupt_archive_raises(self, tmp_path):
        """An unreadable archive raises DecodeFailed."""
        artifact = tmp_path / "bad.tar.gz"
        artifact.write_bytes(b"garbage")

        with pytest.raises(DecodeFailed):
            decode(artifact, tmp_path / "out")
