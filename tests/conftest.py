"""
Pytest configuration and shared fixtures for mmock-setup tests.
"""

import io
import logging
import os
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest

from mmock_setup.core.platform import clear_platform_cache
from mmock_setup.core.workflow import WorkflowContext

BANNER_SCRIPT = """#!/bin/sh
echo "MMock v3.1.6" >&2
echo "Usage of mmock:"
exit 2
"""

NO_BANNER_SCRIPT = """#!/bin/sh
echo "command not understood"
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "unix_only: test relies on POSIX executables and permissions",
    )


def pytest_collection_modifyitems(config, items):
    """Skip POSIX-only tests on Windows."""
    if sys.platform != "win32":
        return
    skip_unix = pytest.mark.skip(reason="requires a POSIX shell")
    for item in items:
        if "unix_only" in item.keywords:
            item.add_marker(skip_unix)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Platform detection is cached per process; reset it around each test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """CLI runs reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def banner_script() -> str:
    """Shell script that behaves like `mmock -h`."""
    return BANNER_SCRIPT


@pytest.fixture
def no_banner_script() -> str:
    """Shell script whose help output lacks the mmock banner."""
    return NO_BANNER_SCRIPT


@pytest.fixture
def workflow_env(tmp_path: Path) -> Dict[str, str]:
    """Private runner environment with output and path files."""
    output_file = tmp_path / "github_output"
    path_file = tmp_path / "github_path"
    output_file.touch()
    path_file.touch()
    return {
        "PATH": os.defpath,
        "GITHUB_OUTPUT": str(output_file),
        "GITHUB_PATH": str(path_file),
    }


@pytest.fixture
def workflow_context(workflow_env: Dict[str, str]) -> WorkflowContext:
    """WorkflowContext bound to workflow_env and an in-memory stream."""
    return WorkflowContext(env=workflow_env, stream=io.StringIO())


def _write_tar_gz(archive: Path, files: Dict[str, str]) -> Path:
    with tarfile.open(archive, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return archive


def _write_zip(archive: Path, files: Dict[str, str]) -> Path:
    with zipfile.ZipFile(archive, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100755 & 0xFFFF) << 16
            zf.writestr(info, content)
    return archive


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory building a tar.gz or zip archive.

    Usage:
        archive = make_archive("mmock_Linux_x86_64.tar.gz", {"mmock": BANNER_SCRIPT})
    """
    archives_dir = tmp_path / "archives"
    archives_dir.mkdir()

    def _make(name: str, files: Dict[str, str]) -> Path:
        archive = archives_dir / name
        if name.endswith(".zip"):
            return _write_zip(archive, files)
        return _write_tar_gz(archive, files)

    return _make


@pytest.fixture
def mmock_archive_bytes(make_archive) -> bytes:
    """tar.gz release asset holding a working fake mmock binary."""
    archive = make_archive(
        "mmock_Linux_x86_64.tar.gz",
        {"mmock": BANNER_SCRIPT, "README.md": "mmock\n"},
    )
    return archive.read_bytes()


@pytest.fixture
def fake_downloader(mmock_archive_bytes: bytes):
    """
    Downloader stand-in that writes the fake asset and records the URLs.

    Has the same signature as mmock_setup.core.download.download_tool.
    """

    class FakeDownloader:
        def __init__(self):
            self.calls = []
            self.payload = mmock_archive_bytes

        def __call__(self, url, temp_dir, progress_callback=None, session=None):
            self.calls.append(url)
            target = Path(temp_dir) / f"download-{len(self.calls)}"
            target.write_bytes(self.payload)
            return target

    return FakeDownloader()
