"""
Install use case — the bring-up pipeline from validated config to summary.

A linear staged pipeline: each stage gates the next. Two skips are driven
by configuration (no toolkit requested → no toolkit stage and no compute
probe; tests skipped → no harness) and one by outcome (module not live →
no harness, reboot required).

Flow:
    config → preflight → update → prerequisites → repository → nouveau
           → driver → toolkit → post-install → module load → verification
           → cleanup + lockdown → summary

Fatal stage failures raise BringupError; everything else is logged and
the run completes. Each stage is individually idempotent, so re-running
the whole pipeline is the recovery path after an interruption.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field

from gpu_bringup.adapters.gpu.nvcc import NvccAdapter
from gpu_bringup.adapters.gpu.nvidia_smi import NvidiaSmiAdapter
from gpu_bringup.adapters.kernel.modules import KernelModuleAdapter
from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.adapters.shell.command import CommandRunner
from gpu_bringup.adapters.shell.download import Downloader
from gpu_bringup.core.config.paths import SystemPaths
from gpu_bringup.core.context import stage
from gpu_bringup.core.errors import DriverInstallError
from gpu_bringup.core.models.install import InstallationState, InstallConfig, OSIdentity
from gpu_bringup.core.models.verification import VerificationReport
from gpu_bringup.core.services import system_packages
from gpu_bringup.core.services.compat import log_compat_advisory
from gpu_bringup.core.services.drivers import install_driver, install_toolkit
from gpu_bringup.core.services.lockdown import lock_packages
from gpu_bringup.core.services.module_loader import load_nvidia_module, verify_installation
from gpu_bringup.core.services.nouveau import deconflict_nouveau
from gpu_bringup.core.services.preflight import require_tools, run_preflight
from gpu_bringup.core.services.repository import configure_repository
from gpu_bringup.core.services.verification.harness import run_verification
from gpu_bringup.core.services.xserver import deny_xserver_gpu

logger = logging.getLogger(__name__)

_RULE = "=" * 41


@dataclass
class HostContext:
    """Everything the pipeline needs to reach the host."""

    runner: CommandRunner = field(default_factory=CommandRunner)
    downloader: Downloader = field(default_factory=Downloader)
    paths: SystemPaths = field(default_factory=SystemPaths)
    geteuid: Callable[[], int] = os.geteuid
    kernel_release: str | None = None
    arch: str | None = None


@dataclass
class InstallResult:
    """Outcome of a completed (non-aborted) run."""

    config: InstallConfig
    os_identity: OSIdentity | None = None
    state: InstallationState = field(default_factory=InstallationState)
    verification: VerificationReport | None = None
    verification_skipped: str | None = None
    stages_run: list[str] = field(default_factory=list)

    @property
    def reboot_required(self) -> bool:
        return self.state.reboot_required

    def to_dict(self) -> dict:
        return {
            "driver_branch": self.config.driver_branch,
            "cuda_version": self.config.cuda_display_version,
            "os": str(self.os_identity) if self.os_identity else None,
            "driver_installed": self.state.driver_installed,
            "module_loaded": self.state.module_loaded,
            "reboot_required": self.reboot_required,
            "verification_passed": (
                self.verification.passed if self.verification else None
            ),
            "verification_skipped": self.verification_skipped,
            "stages_run": list(self.stages_run),
        }


def _banner(title: str) -> None:
    logger.info(_RULE)
    logger.info("  %s", title)
    logger.info(_RULE)


def run_install(config: InstallConfig, host: HostContext | None = None) -> InstallResult:
    """Run the whole bring-up pipeline.

    Raises:
        BringupError: On any fatal stage failure (exit code 1).
    """
    host = host or HostContext()
    paths = host.paths
    apt = AptAdapter(host.runner)
    kmod = KernelModuleAdapter(host.runner, proc_modules=paths.proc_modules)
    smi = NvidiaSmiAdapter(host.runner)
    nvcc = NvccAdapter(host.runner, cuda_home=paths.cuda_home) if config.toolkit_requested else None

    result = InstallResult(config=config)
    state = InstallationState()

    # 1. Configuration
    with stage("config"):
        _banner("Step 1: Validate configuration")
        logger.info("Logging to: %s", config.log_path)
        logger.info("Configuration:")
        logger.info("  Driver branch:  R%d", config.driver_branch)
        logger.info("  CUDA Toolkit:   %s", config.cuda_display_version or "not requested")
        logger.info("  Skip tests:     %s", str(config.skip_tests).lower())
        logger.info("  Log file:       %s", config.log_path)
        log_compat_advisory(config)
        result.stages_run.append("config")

    # 2. Pre-flight
    with stage("preflight"):
        _banner("Step 2: Pre-flight checks")
        result.os_identity = run_preflight(paths.os_release, geteuid=host.geteuid)
        require_tools(apt, kmod)
        result.stages_run.append("preflight")

    # 3. System update
    with stage("update"):
        _banner("Step 3: System update")
        system_packages.system_update(apt)
        result.stages_run.append("update")

    # 4. Prerequisites
    with stage("prerequisites"):
        _banner("Step 4: Install prerequisites")
        system_packages.install_prerequisites(apt, kernel_release=host.kernel_release)
        result.stages_run.append("prerequisites")

    # 5. Vendor repository
    with stage("repository"):
        _banner("Step 5: Configure CUDA repository")
        configure_repository(
            result.os_identity, apt, host.downloader, paths.apt_pin_file, arch=host.arch,
        )
        result.stages_run.append("repository")

    # 6. Nouveau
    with stage("nouveau"):
        _banner("Step 6: Blacklist nouveau")
        deconflict_nouveau(kmod, paths.nouveau_blacklist)
        result.stages_run.append("nouveau")

    # 7. Driver
    with stage("driver"):
        _banner(f"Step 7: Install NVIDIA driver (R{config.driver_branch})")
        state = state.with_driver_installed(install_driver(apt, config))
        result.state = state
        if not state.driver_installed:
            raise DriverInstallError("NVIDIA driver installation failed.")
        logger.info("NVIDIA driver (R%d) installed successfully.", config.driver_branch)
        result.stages_run.append("driver")

    # 8. Toolkit
    with stage("toolkit"):
        if config.toolkit_requested:
            _banner(f"Step 8: Install CUDA Toolkit {config.cuda_display_version}")
            install_toolkit(apt, config)
            result.stages_run.append("toolkit")
        else:
            _banner("Step 8: CUDA Toolkit — skipped (no --cuda-version specified)")

    # 9. Post-install configuration
    with stage("post-install"):
        _banner("Step 9: Post-install configuration")
        deny_xserver_gpu(paths.xorg_nvidia_conf)
        result.stages_run.append("post-install")

    # 10. Live module load
    with stage("module"):
        _banner("Step 10: Load NVIDIA module")
        state = state.with_module_loaded(load_nvidia_module(kmod, smi))
        result.state = state
        result.stages_run.append("module")
        if state.module_loaded:
            logger.info("NVIDIA module loaded successfully.")
            verify_installation(smi, nvcc)
        else:
            logger.warning("NVIDIA module did not load. A reboot is likely required.")
            logger.warning("After reboot, verify with: nvidia-smi")
            if config.toolkit_requested:
                logger.warning("  Also verify CUDA with: nvcc --version")

    # 11. Verification harness
    with stage("verify"):
        # Not live → the hardware probe is skipped too, not only the compute probe.
        if state.module_loaded and not config.skip_tests:
            _banner("Step 11: Post-install tests")
            result.verification = run_verification(smi, nvcc)
            result.stages_run.append("verify")
        elif config.skip_tests:
            result.verification_skipped = "--skip-tests"
            _banner("Step 11: Post-install tests — skipped (--skip-tests)")
        else:
            result.verification_skipped = "module not loaded"
            _banner("Step 11: Post-install tests — skipped (module not loaded)")

    # 12. Cleanup and lockdown
    with stage("lockdown"):
        _banner("Step 12: Cleanup and lockdown")
        system_packages.cleanup(apt)
        lock_packages(paths.unattended_upgrades_conf)
        result.stages_run.append("lockdown")

    with stage("summary"):
        _log_summary(result)

    return result


def _log_summary(result: InstallResult) -> None:
    config = result.config
    _banner("Installation complete.")
    logger.info("Summary:")
    logger.info("  Driver branch:  R%d", config.driver_branch)
    logger.info("  CUDA Toolkit:   %s", config.cuda_display_version or "not installed")
    logger.info("  Module loaded:  %s", "yes" if result.state.module_loaded else "no")
    if result.verification is not None:
        logger.info(
            "  Verification:   %s",
            "passed" if result.verification.passed else "FAILED (see warnings above)",
        )
    else:
        logger.info("  Verification:   skipped (%s)", result.verification_skipped)

    if result.reboot_required:
        logger.warning("The NVIDIA module did not load live. Reboot now:")
        logger.warning("  sudo reboot")
    logger.info("After reboot, verify with:")
    logger.info("  nvidia-smi")
    if config.toolkit_requested:
        logger.info("  nvcc --version")
