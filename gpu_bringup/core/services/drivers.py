"""
Driver and toolkit installation.

The driver comes from the branch-pinned ``cuda-drivers-<branch>``
meta-package. The toolkit comes from ``cuda-toolkit-<X-Y>``, which never
installs or modifies a driver, so the two stay independently versioned
as data-center deployments require.

The two installers fail differently on purpose: the driver installer
reports a flag and leaves the abort decision to the orchestrator, while
a toolkit failure raises immediately.
"""

from __future__ import annotations

import logging

from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.core.errors import ToolkitInstallError
from gpu_bringup.core.models.install import InstallConfig

logger = logging.getLogger(__name__)


def install_driver(apt: AptAdapter, config: InstallConfig) -> bool:
    """Install the data-center driver. Returns True on success."""
    logger.info("Installing NVIDIA data center driver (R%d) ...", config.driver_branch)
    receipt = apt.install(config.driver_package)
    if receipt.failed:
        logger.error("%s failed: %s", receipt.display_command, receipt.detail)
        return False
    return True


def install_toolkit(apt: AptAdapter, config: InstallConfig) -> None:
    """Install the compute toolkit.

    Raises:
        ToolkitInstallError: The package failed to install.
    """
    package = config.toolkit_package
    if package is None:
        raise ToolkitInstallError("No toolkit version configured")

    logger.info("Installing CUDA Toolkit %s ...", config.cuda_display_version)
    receipt = apt.install(package)
    if receipt.failed:
        raise ToolkitInstallError(f"CUDA toolkit installation failed: {receipt.detail}")
