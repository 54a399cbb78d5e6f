"""
Install models — configuration, host identity, and run state.

InstallConfig is built once from CLI arguments and never mutated.
InstallationState is threaded through the pipeline as a value: each
stage that learns an outcome returns a new state with that outcome
recorded, and each outcome can be recorded only once per run.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from gpu_bringup.core.errors import StateError

DEFAULT_LOG_PATH = Path("/var/log/install_nvidia.log")


class InstallConfig(BaseModel):
    """Validated run options."""

    model_config = ConfigDict(frozen=True)

    driver_branch: int = Field(gt=0)
    cuda_version: tuple[int, int] | None = None
    skip_tests: bool = False
    log_path: Path = DEFAULT_LOG_PATH

    @property
    def toolkit_requested(self) -> bool:
        return self.cuda_version is not None

    @property
    def cuda_apt_version(self) -> str | None:
        """Toolkit version in APT package form, e.g. ``12-4``."""
        if self.cuda_version is None:
            return None
        return f"{self.cuda_version[0]}-{self.cuda_version[1]}"

    @property
    def cuda_display_version(self) -> str | None:
        """Toolkit version for humans, e.g. ``12.4``."""
        if self.cuda_version is None:
            return None
        return f"{self.cuda_version[0]}.{self.cuda_version[1]}"

    @property
    def driver_package(self) -> str:
        return f"cuda-drivers-{self.driver_branch}"

    @property
    def toolkit_package(self) -> str | None:
        if self.cuda_apt_version is None:
            return None
        return f"cuda-toolkit-{self.cuda_apt_version}"


class OSIdentity(BaseModel):
    """Distribution identity from /etc/os-release."""

    model_config = ConfigDict(frozen=True)

    distribution_id: str
    version_id: str

    @property
    def repository_key(self) -> str:
        """Path component of the vendor repository URL, e.g. ``ubuntu2204``."""
        return f"{self.distribution_id}{self.version_id.replace('.', '')}"

    def __str__(self) -> str:
        return f"{self.distribution_id} {self.version_id}"


class InstallationState(BaseModel):
    """Outcomes that drive downstream branching.

    ``None`` means "not yet determined". Recording an outcome that is
    already set raises StateError.
    """

    model_config = ConfigDict(frozen=True)

    driver_installed: bool | None = None
    module_loaded: bool | None = None

    def with_driver_installed(self, installed: bool) -> InstallationState:
        if self.driver_installed is not None:
            raise StateError("driver install outcome already recorded")
        return self.model_copy(update={"driver_installed": installed})

    def with_module_loaded(self, loaded: bool) -> InstallationState:
        if self.module_loaded is not None:
            raise StateError("module load outcome already recorded")
        return self.model_copy(update={"module_loaded": loaded})

    @property
    def reboot_required(self) -> bool:
        """The driver only activates on next boot when the live load failed."""
        return bool(self.driver_installed) and not self.module_loaded
