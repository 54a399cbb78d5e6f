"""
APT adapter — the OS package manager.

Wraps ``apt-get`` and ``dpkg``. Every mutating call runs with
``DEBIAN_FRONTEND=noninteractive`` so that no debconf prompt can stall
an unattended bring-up.
"""

from __future__ import annotations

from pathlib import Path

from gpu_bringup.adapters.base import Adapter
from gpu_bringup.core.models.action import Receipt

_NONINTERACTIVE = {"DEBIAN_FRONTEND": "noninteractive"}


class AptAdapter(Adapter):
    """Package operations through apt-get / dpkg."""

    @property
    def name(self) -> str:
        return "apt"

    def is_available(self) -> bool:
        return self.runner.which("apt-get") is not None

    def update(self) -> Receipt:
        return self._apt_get("update")

    def upgrade(self) -> Receipt:
        return self._apt_get("upgrade", "-y")

    def install(self, *packages: str) -> Receipt:
        return self._apt_get("install", "-y", *packages)

    def autoclean(self) -> Receipt:
        return self._apt_get("autoclean")

    def autoremove(self) -> Receipt:
        return self._apt_get("autoremove", "-y")

    def is_installed(self, package: str) -> bool:
        """Whether dpkg reports ``package`` as installed."""
        return self.runner.run(["dpkg", "-s", package]).ok

    def install_local(self, deb: Path) -> Receipt:
        """Install a downloaded ``.deb`` archive."""
        return self.runner.run(
            ["dpkg", "-i", str(deb)], env_overrides=_NONINTERACTIVE,
        )

    def _apt_get(self, *args: str) -> Receipt:
        return self.runner.run(["apt-get", *args], env_overrides=_NONINTERACTIVE)
