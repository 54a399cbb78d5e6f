"""
Config resolver — turns raw option values into an InstallConfig.

Pure: no filesystem, network or logging side effects. The CLI calls
``resolve_config`` before logging is configured, so a rejected argument
never creates the log directory or touches the host.
"""

from __future__ import annotations

import re
from pathlib import Path

from gpu_bringup.core.models.install import DEFAULT_LOG_PATH, InstallConfig

_BRANCH_RE = re.compile(r"^[0-9]+$")
_CUDA_RE = re.compile(r"^([0-9]+)-([0-9]+)$")


class ConfigError(Exception):
    """Raised when a run option is missing or malformed."""


def parse_driver_branch(raw: str | None) -> int:
    """Validate a driver branch number, e.g. ``"580"`` → ``580``."""
    if not raw:
        raise ConfigError("--driver-branch is required.")
    if not _BRANCH_RE.match(raw):
        raise ConfigError(
            "--driver-branch must be a numeric value (e.g. 535, 570, 580). "
            f"Got: '{raw}'"
        )
    branch = int(raw)
    if branch == 0:
        raise ConfigError(f"--driver-branch must be a positive number. Got: '{raw}'")
    return branch


def parse_cuda_version(raw: str | None) -> tuple[int, int] | None:
    """Validate an APT-style toolkit version, e.g. ``"12-4"`` → ``(12, 4)``.

    ``None`` means the option was absent and no toolkit was requested;
    an explicitly empty value is rejected.
    """
    if raw is None:
        return None
    if not raw:
        raise ConfigError("--cuda-version requires a value.")
    m = _CUDA_RE.match(raw)
    if not m:
        raise ConfigError(
            "--cuda-version must be in APT format X-Y (e.g. 12-4, 13-1). "
            f"Got: '{raw}'"
        )
    return int(m.group(1)), int(m.group(2))


def resolve_config(
    driver_branch: str | None,
    cuda_version: str | None = None,
    skip_tests: bool = False,
    log_file: str | Path | None = None,
) -> InstallConfig:
    """Build the immutable run configuration.

    Raises:
        ConfigError: On a missing driver branch, an empty option value, or a
            value failing its pattern.
    """
    branch = parse_driver_branch(driver_branch)
    cuda = parse_cuda_version(cuda_version)
    if log_file is not None and not str(log_file):
        raise ConfigError("--log-file requires a value.")

    return InstallConfig(
        driver_branch=branch,
        cuda_version=cuda,
        skip_tests=skip_tests,
        log_path=Path(log_file) if log_file is not None else DEFAULT_LOG_PATH,
    )
