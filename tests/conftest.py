"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from gpu_bringup.adapters.mock import MockCommandRunner
from gpu_bringup.core.config.paths import SystemPaths
from gpu_bringup.core.models.action import Receipt
from gpu_bringup.core.use_cases.install import HostContext

UBUNTU_2204 = textwrap.dedent("""\
    PRETTY_NAME="Ubuntu 22.04.4 LTS"
    NAME="Ubuntu"
    VERSION_ID="22.04"
    VERSION="22.04.4 LTS (Jammy Jellyfish)"
    ID=ubuntu
    ID_LIKE=debian
""")

TWO_GPU_ROWS = (
    "NVIDIA A100-SXM4-80GB, 580.65.06, 81920, 81013, 34\n"
    "NVIDIA A100-SXM4-80GB , 580.65.06 ,81920,  80990 , 36 \n"
)


class FakeDownloader:
    """Downloader double: writes a stub file and records every URL."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.urls: list[str] = []

    def fetch(self, url: str, dest: Path) -> Receipt:
        self.urls.append(url)
        command = ["download", url, str(dest)]
        if self.fail:
            return Receipt.failure(command=command, error=f"Download failed: {url}")
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(f"fetched from {url}\n")
        return Receipt.success(command=command)


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    """A fake host filesystem with a supported os-release."""
    root = tmp_path / "host"
    (root / "etc").mkdir(parents=True)
    (root / "etc" / "os-release").write_text(UBUNTU_2204)
    return root


@pytest.fixture
def system_paths(host_root: Path) -> SystemPaths:
    return SystemPaths(root=host_root)


@pytest.fixture
def mock_runner() -> MockCommandRunner:
    """Runner on a host where the package and module tools are installed."""
    return MockCommandRunner(executables={
        "apt-get": "/usr/bin/apt-get",
        "modprobe": "/usr/sbin/modprobe",
    })


@pytest.fixture
def fake_downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def host(mock_runner, fake_downloader, system_paths) -> HostContext:
    """A root-privileged, fully simulated host."""
    return HostContext(
        runner=mock_runner,
        downloader=fake_downloader,
        paths=system_paths,
        geteuid=lambda: 0,
        kernel_release="6.8.0-45-generic",
        arch="x86_64",
    )


@pytest.fixture
def two_gpu_rows() -> str:
    """Well-formed two-device hardware query output (irregular spacing)."""
    return TWO_GPU_ROWS


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo setup_logging() so one test's handlers never leak into the next."""
    root = logging.getLogger()
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    logging.raiseExceptions = True
