"""
Post-install verification harness.

The hardware probe always runs; the compute probe only when a toolkit
was installed. Each probe is judged on its own and a failure is a
warning, never an abort: a node that fails here may well be fine after
its first reboot.
"""

from __future__ import annotations

import logging

from gpu_bringup.adapters.gpu.nvcc import NvccAdapter
from gpu_bringup.adapters.gpu.nvidia_smi import NvidiaSmiAdapter
from gpu_bringup.core.models.verification import VerificationReport
from gpu_bringup.core.services.verification.compute_probe import run_compute_probe
from gpu_bringup.core.services.verification.hardware_probe import run_hardware_probe

logger = logging.getLogger(__name__)


def run_verification(
    smi: NvidiaSmiAdapter,
    nvcc: NvccAdapter | None,
) -> VerificationReport:
    """Run the probes. ``nvcc`` is None when no toolkit was requested."""
    logger.info("--- Driver test ---")
    hardware = run_hardware_probe(smi)

    compute = None
    if nvcc is not None:
        logger.info("--- CUDA toolkit test ---")
        compute = run_compute_probe(nvcc)

    report = VerificationReport(hardware=hardware, compute=compute)
    if report.passed:
        logger.info("All post-install tests passed.")
    else:
        logger.warning("One or more post-install tests failed.")
        logger.warning("The installation may still be functional after a reboot.")
    return report
