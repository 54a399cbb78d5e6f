"""
System package maintenance around the driver install.

Index refresh and upgrade before anything else, the build prerequisites
DKMS needs to compile the driver module against the running kernel, and
the final clean-up pass. Every failure here is fatal.
"""

from __future__ import annotations

import logging
import platform

from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.core.errors import PackageManagerError
from gpu_bringup.core.models.action import Receipt

logger = logging.getLogger(__name__)


def prerequisite_packages(kernel_release: str | None = None) -> list[str]:
    """Compiler toolchain, kernel headers, DKMS and download tooling."""
    release = kernel_release or platform.release()
    return [
        "build-essential",
        "gcc",
        f"linux-headers-{release}",
        "ca-certificates",
        "software-properties-common",
        "dkms",
        "curl",
        "wget",
    ]


def system_update(apt: AptAdapter) -> None:
    logger.info("Refreshing package index and upgrading installed packages ...")
    _require(apt.update())
    _require(apt.upgrade())


def install_prerequisites(apt: AptAdapter, kernel_release: str | None = None) -> None:
    packages = prerequisite_packages(kernel_release)
    logger.info("Installing build prerequisites: %s", " ".join(packages))
    _require(apt.install(*packages))


def cleanup(apt: AptAdapter) -> None:
    logger.info("Final package refresh and clean-up ...")
    _require(apt.update())
    _require(apt.upgrade())
    _require(apt.autoclean())
    _require(apt.autoremove())


def _require(receipt: Receipt) -> None:
    if receipt.failed:
        raise PackageManagerError(f"{receipt.display_command} failed: {receipt.detail}")
