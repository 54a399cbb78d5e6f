"""
Pre-flight checks — privilege and OS identity, before anything mutates.

The vendor's network repository only publishes packages for a fixed set
of distribution releases, so anything outside the allow-list is refused.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from gpu_bringup.adapters.base import Adapter
from gpu_bringup.core.errors import PreflightError
from gpu_bringup.core.models.install import OSIdentity

logger = logging.getLogger(__name__)

SUPPORTED_OS: frozenset[tuple[str, str]] = frozenset({
    ("ubuntu", "22.04"),
    ("ubuntu", "24.04"),
})


def require_root(geteuid: Callable[[], int] = os.geteuid) -> None:
    """Fail unless running with an effective uid of 0."""
    if geteuid() != 0:
        raise PreflightError("Please run as root.")


def require_tools(*adapters: Adapter) -> None:
    """Fail unless every adapter's host tool is installed."""
    missing = [a.name for a in adapters if not a.is_available()]
    if missing:
        raise PreflightError(f"Required host tools not found: {', '.join(missing)}")


def read_os_release(path: Path) -> dict[str, str]:
    """Parse an os-release file into a ``KEY → value`` dict."""
    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def resolve_os_identity(path: Path) -> OSIdentity:
    """Resolve the host's OSIdentity and check it against the allow-list."""
    if not path.is_file():
        raise PreflightError(f"{path} not found. Cannot determine OS version.")

    release = read_os_release(path)
    identity = OSIdentity(
        distribution_id=release.get("ID", ""),
        version_id=release.get("VERSION_ID", ""),
    )

    supported_distros = {distro for distro, _ in SUPPORTED_OS}
    if identity.distribution_id not in supported_distros:
        raise PreflightError(
            f"Unsupported distribution: {identity.distribution_id or 'unknown'}. "
            f"Supported: {', '.join(sorted(supported_distros))}"
        )

    if (identity.distribution_id, identity.version_id) not in SUPPORTED_OS:
        versions = sorted(v for d, v in SUPPORTED_OS if d == identity.distribution_id)
        raise PreflightError(
            f"{identity} is not supported. Supported versions: {' '.join(versions)}"
        )

    logger.info("OS validated: %s", identity)
    return identity


def run_preflight(
    os_release: Path,
    geteuid: Callable[[], int] = os.geteuid,
) -> OSIdentity:
    require_root(geteuid)
    return resolve_os_identity(os_release)
