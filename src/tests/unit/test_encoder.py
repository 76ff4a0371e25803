"""Tests for the archive encoder."""

import gzip
import hashlib
import os
import tarfile

import pytest

from obsvault.archive.encoder import archive_name, encode, sanitize_name
from obsvault.archive.verifier import verify
from obsvault.core.errors import EncodeFailed


class TestSanitizeName:
    """Tests for sanitize_name()."""

    def test_replaces_every_reserved_character(self):
        """Each of ? * < > \" ' becomes a dash."""
        assert sanitize_name("a?b*c<d>e\"f'g") == "a-b-c-d-e-f-g"

    def test_example_from_vault(self):
        """weird?name*.png becomes weird-name-.png."""
        assert sanitize_name("weird?name*.png") == "weird-name-.png"

    @pytest.mark.parametrize(
        "name",
        ["plain.md", "what?.md", "<<>>", "it's \"quoted\".txt", "", "already-clean-.png"],
    )
    def test_is_idempotent(self, name):
        """Sanitizing twice equals sanitizing once."""
        once = sanitize_name(name)

        assert sanitize_name(once) == once

    def test_leaves_other_characters(self):
        """Spaces, accents and colons are kept."""
        assert sanitize_name("Réunion 12:30 #1.md") == "Réunion 12:30 #1.md"


class TestArchiveName:
    """Tests for archive_name()."""

    def test_only_base_name_is_sanitized(self):
        """Directory components keep their reserved characters."""
        assert archive_name("what?/dir*/weird?name*.png") == "what?/dir*/weird-name-.png"

    def test_root_is_dot(self):
        """The root entry keeps the name '.'."""
        assert archive_name(".") == "."

    def test_normalizes_backslashes(self):
        """Separators are forward slashes inside the archive."""
        assert archive_name("sub\\inner\\a?.md") == "sub/inner/a-.md"


class TestEncode:
    """Tests for encode()."""

    def test_writes_gzip_tar_with_all_entries(self, source_tree, tmp_path):
        """Every directory and file is stored, root first."""
        artifact = tmp_path / "out.tar.gz"

        result = encode(source_tree, artifact)

        with tarfile.open(artifact, "r:gz") as archive:
            names = archive.getnames()
        assert names == [".", "a.txt", "sub", "sub/b.txt"]
        assert result.entry_count == 4

    def test_output_is_gzip(self, source_tree, tmp_path):
        """The outer layer is a gzip stream."""
        artifact = tmp_path / "out.tar.gz"
        encode(source_tree, artifact)

        with gzip.open(artifact, "rb") as stream:
            assert len(stream.read()) > 0

    def test_headers_carry_type_size_and_mode(self, source_tree, tmp_path):
        """Headers record type, size and permission bits."""
        os.chmod(source_tree / "a.txt", 0o600)
        artifact = tmp_path / "out.tar.gz"

        encode(source_tree, artifact)

        with tarfile.open(artifact, "r:gz") as archive:
            a = archive.getmember("a.txt")
            sub = archive.getmember("sub")
            assert a.isfile() and a.size == 3 and a.mode == 0o600
            assert sub.isdir()
            assert archive.extractfile("sub/b.txt").read() == b"1234567"

    def test_records_payload_digests(self, source_tree, tmp_path):
        """Each regular file payload gets a SHA-256 digest."""
        result = encode(source_tree, tmp_path / "out.tar.gz")

        assert result.digests == {
            "a.txt": hashlib.sha256(b"abc").hexdigest(),
            "sub/b.txt": hashlib.sha256(b"1234567").hexdigest(),
        }

    def test_sanitizes_base_names_only(self, make_tree, tmp_path):
        """Reserved characters are replaced in the last component only.

        The directory's own entry is sanitized (it is its base name) while
        paths below it keep the original directory component.
        """
        root = make_tree(tmp_path / "src", {"odd?dir/weird?name*.png": b"png"})
        artifact = tmp_path / "out.tar.gz"

        encode(root, artifact)

        with tarfile.open(artifact, "r:gz") as archive:
            names = archive.getnames()
        assert "odd?dir/weird-name-.png" in names
        assert "odd-dir" in names
        assert "odd?dir" not in names

    def test_skips_symlinks(self, source_tree, tmp_path, caplog):
        """Entries that are neither directories nor files are left out."""
        os.symlink(source_tree / "a.txt", source_tree / "link.txt")
        artifact = tmp_path / "out.tar.gz"

        encode(source_tree, artifact)

        with tarfile.open(artifact, "r:gz") as archive:
            assert "link.txt" not in archive.getnames()
        assert "Skipping link.txt" in caplog.text

    def test_missing_source_raises(self, tmp_path):
        """An unreadable source aborts with EncodeFailed."""
        with pytest.raises(EncodeFailed):
            encode(tmp_path / "missing", tmp_path / "out.tar.gz")

    def test_unwritable_destination_raises(self, source_tree, tmp_path):
        """A destination that cannot be opened aborts with EncodeFailed."""
        with pytest.raises(EncodeFailed):
            encode(source_tree, tmp_path / "no-such-dir" / "out.tar.gz")

    def test_hard_links_are_stored_as_regular_files(self, make_tree, tmp_path):
        """A second name for the same inode gets its own header and payload."""
        root = make_tree(tmp_path / "src", {"a.md": b"# Shared\n"})
        os.link(root / "a.md", root / "b.md")
        artifact = tmp_path / "out.tar.gz"

        result = encode(root, artifact)

        digest = hashlib.sha256(b"# Shared\n").hexdigest()
        assert result.digests == {"a.md": digest, "b.md": digest}
        assert verify(artifact, result.digests) == 3
        with tarfile.open(artifact, "r:gz") as archive:
            linked = archive.getmember("b.md")
            assert linked.isfile() and not linked.islnk()
            assert archive.extractfile(linked).read() == b"# Shared\n"

    def test_headers_use_walked_mtime(self, source_tree, tmp_path):
        """Modification times come from the tree walk."""
        os.utime(source_tree / "a.txt", (1_700_000_000, 1_700_000_000))
        artifact = tmp_path / "out.tar.gz"

        encode(source_tree, artifact)

        with tarfile.open(artifact, "r:gz") as archive:
            assert archive.getmember("a.txt").mtime == 1_700_000_000
