"""
Vendor repository provisioning — pin file, then keyring package.

Two ordered, individually guarded steps:

1. The APT pin file gives vendor packages priority 600 so the
   distribution's own builds never shadow them.
2. The ``cuda-keyring`` package installs the signing key and the source
   entry. Its presence is checked through dpkg rather than by file name,
   since it writes either a ``.list`` or a deb822 ``.sources`` file
   depending on the release.

The package index is only refreshed when one of the steps acted, so a
re-run against a provisioned host performs no network action at all.
"""

from __future__ import annotations

import logging
import platform
import tempfile
from pathlib import Path

from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.adapters.shell.download import Downloader
from gpu_bringup.core.errors import DownloadError, RepositoryError
from gpu_bringup.core.models.install import OSIdentity
from gpu_bringup.core.services.guard import ensure, file_exists, package_installed

logger = logging.getLogger(__name__)

REPO_BASE_URL = "https://developer.download.nvidia.com/compute/cuda/repos"
KEYRING_PACKAGE = "cuda-keyring"
KEYRING_DEB = "cuda-keyring_1.1-1_all.deb"

_ARCH_MAP = {"x86_64": "x86_64", "amd64": "x86_64", "aarch64": "sbsa", "arm64": "sbsa"}


def repository_arch(machine: str | None = None) -> str:
    """Architecture directory of the vendor repository for this host."""
    m = (machine or platform.machine()).lower()
    return _ARCH_MAP.get(m, m)


def repository_url(identity: OSIdentity, arch: str) -> str:
    return f"{REPO_BASE_URL}/{identity.repository_key}/{arch}"


def pin_file_url(identity: OSIdentity, arch: str) -> str:
    return f"{repository_url(identity, arch)}/cuda-{identity.repository_key}.pin"


def keyring_url(identity: OSIdentity, arch: str) -> str:
    return f"{repository_url(identity, arch)}/{KEYRING_DEB}"


def configure_repository(
    identity: OSIdentity,
    apt: AptAdapter,
    downloader: Downloader,
    pin_file: Path,
    arch: str | None = None,
) -> bool:
    """Ensure the vendor repository is registered.

    Returns:
        True if anything changed on the host.

    Raises:
        DownloadError: A pin file or keyring download failed.
        RepositoryError: The keyring package or the index refresh failed.
    """
    arch = arch or repository_arch()
    logger.info("Configuring vendor repository %s ...", repository_url(identity, arch))

    def _install_pin() -> None:
        url = pin_file_url(identity, arch)
        logger.info("Installing APT pin file from %s", url)
        receipt = downloader.fetch(url, pin_file)
        if receipt.failed:
            raise DownloadError(receipt.detail)

    def _install_keyring() -> None:
        url = keyring_url(identity, arch)
        logger.info("Installing %s from %s", KEYRING_PACKAGE, url)
        with tempfile.TemporaryDirectory(prefix="cuda-keyring-") as tmp:
            deb = Path(tmp) / KEYRING_DEB
            receipt = downloader.fetch(url, deb)
            if receipt.failed:
                raise DownloadError(receipt.detail)
            receipt = apt.install_local(deb)
            if receipt.failed:
                raise RepositoryError(f"{receipt.display_command} failed: {receipt.detail}")

    pinned = ensure(file_exists(pin_file), _install_pin)
    keyed = ensure(package_installed(apt, KEYRING_PACKAGE), _install_keyring)

    if pinned or keyed:
        receipt = apt.update()
        if receipt.failed:
            raise RepositoryError(f"apt-get update failed: {receipt.detail}")
        return True

    logger.info("Vendor repository already configured")
    return False
