"""Post-install verification — hardware probe and compute probe."""

from gpu_bringup.core.services.verification.compute_probe import run_compute_probe
from gpu_bringup.core.services.verification.hardware_probe import run_hardware_probe
from gpu_bringup.core.services.verification.harness import run_verification

__all__ = ["run_compute_probe", "run_hardware_probe", "run_verification"]
