"""
Host paths touched by the bring-up, resolved against a root prefix.

Production runs use ``SystemPaths()`` (root ``/``). Tests point ``root``
at a scratch directory so every stage can run against a fake host tree.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class SystemPaths(BaseModel):
    """Every file and directory the pipeline reads or writes."""

    root: Path = Path("/")

    def _under_root(self, absolute: str) -> Path:
        return self.root / absolute.lstrip("/")

    @property
    def os_release(self) -> Path:
        return self._under_root("/etc/os-release")

    @property
    def apt_pin_file(self) -> Path:
        return self._under_root("/etc/apt/preferences.d/cuda-repository-pin-600")

    @property
    def nouveau_blacklist(self) -> Path:
        return self._under_root("/etc/modprobe.d/blacklist-nouveau.conf")

    @property
    def unattended_upgrades_conf(self) -> Path:
        return self._under_root("/etc/apt/apt.conf.d/50unattended-upgrades")

    @property
    def xorg_nvidia_conf(self) -> Path:
        return self._under_root("/usr/share/X11/xorg.conf.d/10-nvidia.conf")

    @property
    def proc_modules(self) -> Path:
        return self._under_root("/proc/modules")

    @property
    def cuda_home(self) -> Path:
        return self._under_root("/usr/local/cuda")
