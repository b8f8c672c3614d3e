"""
Unit tests for filesystem utilities.
"""

import io
import os
import tarfile

import pytest

from mmock_setup.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)
from mmock_setup.core.filesystem import (
    FilesystemError,
    archive_format,
    directory_size,
    extract_archive,
    recursive_copy,
    remove_path,
    safe_rmtree,
)


class TestArchiveFormat:
    """Suffix-based format detection."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("mmock_Linux_x86_64.tar.gz", "tar.gz"),
            ("https://github.com/x/y/releases/download/v3.0.0/mmock_3.0.0_windows_64-bit.tar.gz", "tar.gz"),
            ("mmock_Windows_x86_64.zip", "zip"),
            ("MMOCK.ZIP", "zip"),
        ],
    )
    def test_supported(self, name, expected):
        assert archive_format(name) == expected

    @pytest.mark.parametrize("name", ["mmock.tar.xz", "mmock.7z", "mmock"])
    def test_unsupported(self, name):
        with pytest.raises(UnsupportedArchiveFormat, match="Unsupported distributive format"):
            archive_format(name)


class TestExtractArchive:
    """Archive extraction."""

    def test_extract_tar_gz(self, make_archive, tmp_path):
        archive = make_archive("mmock.tar.gz", {"mmock": "bin", "docs/README.md": "hi"})
        destination = tmp_path / "out"

        extract_archive(archive, destination)

        assert (destination / "mmock").read_text() == "bin"
        assert (destination / "docs" / "README.md").read_text() == "hi"

    def test_extract_zip(self, make_archive, tmp_path):
        archive = make_archive("mmock.zip", {"mmock.exe": "bin"})
        destination = tmp_path / "out"

        extract_archive(archive, destination)

        assert (destination / "mmock.exe").read_text() == "bin"

    @pytest.mark.unix_only
    def test_zip_keeps_executable_bit(self, make_archive, tmp_path):
        archive = make_archive("mmock.zip", {"mmock": "bin"})

        extract_archive(archive, tmp_path / "out")

        assert os.access(tmp_path / "out" / "mmock", os.X_OK)

    @pytest.mark.unix_only
    def test_tar_keeps_executable_bit(self, make_archive, tmp_path):
        archive = make_archive("mmock.tar.gz", {"mmock": "bin"})

        extract_archive(archive, tmp_path / "out")

        assert os.access(tmp_path / "out" / "mmock", os.X_OK)

    def test_format_hint_overrides_file_name(self, make_archive, tmp_path):
        archive = make_archive("mmock.zip", {"mmock.exe": "bin"})
        opaque = archive.rename(tmp_path / "download-1")

        extract_archive(opaque, tmp_path / "out", format_hint="https://host/mmock_Windows_x86_64.zip")

        assert (tmp_path / "out" / "mmock.exe").exists()

    def test_unknown_format(self, tmp_path):
        archive = tmp_path / "mmock.rar"
        archive.write_bytes(b"rar")

        with pytest.raises(UnsupportedArchiveFormat):
            extract_archive(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="Archive not found"):
            extract_archive(tmp_path / "missing.tar.gz", tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.tar.gz"
        archive.write_bytes(b"not a tarball")

        with pytest.raises(ArchiveExtractionError, match="Failed to extract"):
            extract_archive(archive, tmp_path / "out")

    def test_path_traversal_blocked(self, tmp_path):
        archive = tmp_path / "evil.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            data = b"owned"
            info = tarfile.TarInfo("../escaped.txt")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

        assert not (tmp_path / "escaped.txt").exists()


class TestFileOperations:
    """remove_path, safe_rmtree, recursive_copy, directory_size."""

    def test_remove_file(self, tmp_path):
        target = tmp_path / "archive.tar.gz"
        target.write_bytes(b"x")

        remove_path(target)

        assert not target.exists()

    def test_remove_directory(self, tmp_path):
        target = tmp_path / "dir"
        (target / "sub").mkdir(parents=True)

        remove_path(target)

        assert not target.exists()

    def test_remove_missing_is_noop(self, tmp_path):
        remove_path(tmp_path / "missing")

    def test_safe_rmtree_requires_prefix(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(outside, require_prefix=tmp_path / "cache")

        assert outside.exists()

    def test_safe_rmtree_rejects_files(self, tmp_path):
        target = tmp_path / "file"
        target.write_text("x")

        with pytest.raises(FilesystemError):
            safe_rmtree(target)

    def test_recursive_copy_merges(self, tmp_path):
        source = tmp_path / "src"
        (source / "bin").mkdir(parents=True)
        (source / "bin" / "mmock").write_text("new")
        destination = tmp_path / "dst"
        destination.mkdir()
        (destination / "keep.txt").write_text("keep")

        recursive_copy(source, destination)

        assert (destination / "bin" / "mmock").read_text() == "new"
        assert (destination / "keep.txt").read_text() == "keep"

    def test_recursive_copy_missing_source(self, tmp_path):
        with pytest.raises(FilesystemError):
            recursive_copy(tmp_path / "missing", tmp_path / "dst")

    def test_directory_size(self, tmp_path):
        (tmp_path / "a").write_bytes(b"123")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b").write_bytes(b"4567")

        assert directory_size(tmp_path) == 7
