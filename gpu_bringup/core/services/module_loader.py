"""
Live activation of the installed driver.

On a first install the freshly built module often cannot bind until the
host reboots. That is the expected path, not an error: the loader reports
``False`` and the run carries on to lockdown without live verification.
"""

from __future__ import annotations

import logging

from gpu_bringup.adapters.gpu.nvcc import NvccAdapter
from gpu_bringup.adapters.gpu.nvidia_smi import NvidiaSmiAdapter
from gpu_bringup.adapters.kernel.modules import KernelModuleAdapter
from gpu_bringup.core.models.action import Receipt

logger = logging.getLogger(__name__)

NVIDIA = "nvidia"


def load_nvidia_module(kmod: KernelModuleAdapter, smi: NvidiaSmiAdapter) -> bool:
    """Bind the driver without a reboot and confirm the bind.

    Returns:
        True if the module is live and answers driver queries.
    """
    logger.info("Loading NVIDIA kernel module ...")
    receipt = kmod.load(NVIDIA)
    if receipt.failed:
        logger.warning("modprobe %s failed: %s", NVIDIA, receipt.detail)
        return False

    confirm = smi.summary()
    if confirm.failed:
        logger.warning("Module loaded but nvidia-smi cannot reach the driver: %s", confirm.detail)
        _hint_missing_smi(smi)
        return False
    _log_block(confirm)

    info = kmod.info(NVIDIA)
    if info.failed:
        logger.warning("modinfo %s failed: %s", NVIDIA, info.detail)
        return False
    _log_block(info, level=logging.DEBUG)

    return True


def verify_installation(smi: NvidiaSmiAdapter, nvcc: NvccAdapter | None) -> None:
    """Log the installed binaries' self-reports.

    Only confirms the packages landed; the verification harness checks
    that the hardware and the compile pipeline actually work.
    """
    logger.info("Verifying installed binaries ...")
    receipt = smi.summary()
    if receipt.ok:
        _log_block(receipt)
    else:
        logger.warning("nvidia-smi failed: %s", receipt.detail)
        _hint_missing_smi(smi)

    if nvcc is None:
        return

    nvcc_bin = nvcc.resolve()
    if nvcc_bin is None:
        logger.warning("nvcc not found. CUDA toolkit may not be installed correctly.")
        return
    receipt = nvcc.version(nvcc_bin)
    if receipt.ok:
        _log_block(receipt)
    else:
        logger.warning("%s --version failed: %s", nvcc_bin, receipt.detail)


def _hint_missing_smi(smi: NvidiaSmiAdapter) -> None:
    if not smi.is_available():
        logger.warning("nvidia-smi is not on PATH; the driver utilities package may be missing")


def _log_block(receipt: Receipt, level: int = logging.INFO) -> None:
    for line in receipt.stdout.rstrip().splitlines():
        logger.log(level, "  %s", line)
