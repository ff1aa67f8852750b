"""Tests for tar archival."""

import errno
import shutil
import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

from gzmethod.codec import TarballCompressionMethod
from gzmethod.codec.errors import TarballCompressError, TarballUncompressError


@pytest.fixture
def tarball() -> TarballCompressionMethod:
    return TarballCompressionMethod()


class TestTarballDirectories:
    """Test directory archival."""

    def test_round_trip(self, tarball, sample_tree, sample_text):
        """Test archiving and restoring a nested tree."""
        root, test_file = sample_tree
        (root / "top.txt").write_text("top level")

        archive = tarball.compress_directory(root)

        assert archive == Path(f"{root}.tar")

        shutil.rmtree(root)
        restored = tarball.uncompress_directory(archive)

        assert restored == root
        assert test_file.read_text() == sample_text
        assert (root / "top.txt").read_text() == "top level"

    def test_members_are_relative_to_directory(self, tarball, sample_tree):
        """Test that the directory name itself is not stored."""
        root, _ = sample_tree

        archive = tarball.compress_directory(root)

        with tarfile.open(archive) as opened:
            names = opened.getnames()

        assert "def/ghi/jkl/file.txt" in names
        assert not any(name.startswith("abc") for name in names)

    def test_compress_missing_directory(self, tarball, tmp_path):
        """Test that a missing directory is rejected."""
        with pytest.raises(TarballCompressError):
            tarball.compress_directory(tmp_path / "missing")

    def test_uncompress_wrong_suffix(self, tarball, tmp_path):
        """Test that only .tar files are accepted."""
        other = tmp_path / "archive.zip"
        other.write_bytes(b"PK")

        with pytest.raises(TarballUncompressError, match="does not have the extension: tar"):
            tarball.uncompress_directory(other)

    def test_uncompress_corrupt_archive(self, tarball, tmp_path):
        """Test that unreadable archives fail without leaving a directory."""
        corrupt = tmp_path / "broken.tar"
        corrupt.write_bytes(b"\x00garbage" * 10)

        with pytest.raises(TarballUncompressError):
            tarball.uncompress_directory(corrupt)

        assert not (tmp_path / "broken").exists()

    def test_failed_extraction_removes_directory(self, tarball, sample_tree):
        """Test cleanup of a half-extracted directory."""
        root, _ = sample_tree
        archive = tarball.compress_directory(root)
        shutil.rmtree(root)

        with patch.object(tarfile.TarFile, "extractall", side_effect=tarfile.TarError("boom")):
            with pytest.raises(TarballUncompressError, match="boom"):
                tarball.uncompress_directory(archive)

        assert not root.exists()

    def test_failed_archival_removes_archive(self, tarball, sample_tree):
        """Test cleanup of a half-written archive."""
        root, _ = sample_tree

        with patch.object(tarfile.TarFile, "add", side_effect=OSError("unreadable")):
            with pytest.raises(TarballCompressError, match="unreadable"):
                tarball.compress_directory(root)

        assert not Path(f"{root}.tar").exists()

    def test_explicit_destinations(self, tarball, sample_tree, tmp_path, sample_text):
        """Test that given destinations bypass the free-name search."""
        root, _ = sample_tree
        Path(f"{root}.tar").write_bytes(b"not ours")
        staged = tmp_path / "staged"
        staged.mkdir()

        archive = tarball.compress_directory(root, destination=staged / "abc.tar")
        restored = tarball.uncompress_directory(archive, destination=staged / "abc")

        assert archive == staged / "abc.tar"
        assert restored == staged / "abc"
        assert (restored / "def" / "ghi" / "jkl" / "file.txt").read_text() == sample_text
        assert Path(f"{root}.tar").read_bytes() == b"not ours"

    def test_explicit_destination_is_not_overwritten(self, tarball, sample_tree):
        """Test that an existing explicit destination fails the archival."""
        root, _ = sample_tree
        taken = Path(f"{root}.tar")
        taken.write_bytes(b"keep me")

        with pytest.raises(TarballCompressError):
            tarball.compress_directory(root, destination=taken)

        assert taken.read_bytes() == b"keep me"

    def test_name_lookup_errors_are_wrapped(self, tarball, sample_tree):
        """Test that OS errors while choosing names become tar errors."""
        root, _ = sample_tree
        archive = tarball.compress_directory(root)
        too_long = OSError(errno.ENAMETOOLONG, "File name too long")

        with patch("gzmethod.codec.tarball_method.available_path", side_effect=too_long):
            with pytest.raises(TarballCompressError, match="too long"):
                tarball.compress_directory(root)
            with pytest.raises(TarballUncompressError, match="too long"):
                tarball.uncompress_directory(archive)


class TestTarballFiles:
    """Test single-file archival."""

    def test_round_trip(self, tarball, tmp_path, sample_text):
        """Test wrapping and unwrapping one file."""
        source = tmp_path / "notes.txt"
        source.write_text(sample_text)

        archive = tarball.compress_file(source)
        source.unlink()
        restored = tarball.uncompress_file(archive)

        assert archive == tmp_path / "notes.txt.tar"
        assert restored == source
        assert restored.read_text() == sample_text

    def test_rejects_multi_member_archive(self, tarball, sample_tree):
        """Test that a directory archive is not a file archive."""
        root, _ = sample_tree
        archive = tarball.compress_directory(root)

        with pytest.raises(TarballUncompressError, match="exactly one regular file"):
            tarball.uncompress_file(archive)

    def test_path_dispatch_uses_directory_flow(self, tarball, sample_tree):
        """Test that .tar paths always restore as directories."""
        root, test_file = sample_tree
        archive = tarball.compress_path(root)
        shutil.rmtree(root)

        restored = tarball.uncompress_path(archive)

        assert restored == root
        assert test_file.exists()
