"""
Driver branch / toolkit compatibility advisory.

Advisory only: an unknown branch or a toolkit newer than the branch
supports produces a warning, never an abort, because the vendor matrix
moves faster than this table.
"""

from __future__ import annotations

import logging

from gpu_bringup.core.data.driver_matrix import _BRANCH_MAX_CUDA_MAJOR
from gpu_bringup.core.models.install import InstallConfig

logger = logging.getLogger(__name__)


def check_branch_toolkit_compat(config: InstallConfig) -> dict:
    """Check the requested toolkit against the driver branch.

    Returns:
        ``{"compatible": True}``, ``{"compatible": True, "unknown_branch": N}``
        or ``{"compatible": False, "max_cuda_major": M, "message": "..."}``
    """
    if config.cuda_version is None:
        return {"compatible": True}

    entry = _BRANCH_MAX_CUDA_MAJOR.get(config.driver_branch)
    if entry is None:
        return {"compatible": True, "unknown_branch": config.driver_branch}

    max_major, track = entry
    if config.cuda_version[0] <= max_major:
        return {"compatible": True}

    return {
        "compatible": False,
        "max_cuda_major": max_major,
        "message": (
            f"CUDA {config.cuda_display_version} may not be supported by driver "
            f"R{config.driver_branch} ({track}, max CUDA {max_major}.x)"
        ),
    }


def log_compat_advisory(config: InstallConfig) -> None:
    result = check_branch_toolkit_compat(config)
    if not result["compatible"]:
        logger.warning("%s", result["message"])
    elif "unknown_branch" in result:
        logger.info(
            "Driver branch R%d is not in the compatibility table; "
            "check the vendor support matrix",
            config.driver_branch,
        )
