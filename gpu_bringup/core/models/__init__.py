"""
Domain models — Pydantic types for the bring-up pipeline.

All models are re-exported here for convenient access:

    from gpu_bringup.core.models import InstallConfig, Receipt, VerificationReport
"""

from gpu_bringup.core.models.action import Receipt
from gpu_bringup.core.models.install import (
    DEFAULT_LOG_PATH,
    InstallationState,
    InstallConfig,
    OSIdentity,
)
from gpu_bringup.core.models.verification import (
    ComputeProbeResult,
    GPUDeviceReport,
    HardwareProbeResult,
    KernelTestResult,
    VerificationReport,
)

__all__ = [
    "ComputeProbeResult",
    "DEFAULT_LOG_PATH",
    "GPUDeviceReport",
    "HardwareProbeResult",
    "InstallConfig",
    "InstallationState",
    "KernelTestResult",
    "OSIdentity",
    "Receipt",
    "VerificationReport",
]
