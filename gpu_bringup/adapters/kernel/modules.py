"""
Kernel module adapter — load, unload, query, and boot-image regeneration.

Residency is read from ``/proc/modules`` rather than by parsing ``lsmod``
output; everything else goes through the module tools.
"""

from __future__ import annotations

from pathlib import Path

from gpu_bringup.adapters.base import Adapter
from gpu_bringup.adapters.shell.command import CommandRunner
from gpu_bringup.core.models.action import Receipt


class KernelModuleAdapter(Adapter):
    """modprobe / rmmod / modinfo / update-initramfs."""

    def __init__(self, runner: CommandRunner, proc_modules: Path = Path("/proc/modules")):
        super().__init__(runner)
        self.proc_modules = proc_modules

    @property
    def name(self) -> str:
        return "kmod"

    def is_available(self) -> bool:
        return self.runner.which("modprobe") is not None

    def loaded_modules(self) -> set[str]:
        """Names of all currently resident modules."""
        try:
            with open(self.proc_modules, encoding="utf-8") as f:
                return {line.split()[0] for line in f if line.strip()}
        except FileNotFoundError:
            return set()

    def is_loaded(self, module: str) -> bool:
        return module in self.loaded_modules()

    def load(self, module: str) -> Receipt:
        return self.runner.run(["modprobe", "-vi", module])

    def unload(self, module: str) -> Receipt:
        return self.runner.run(["rmmod", "-v", module])

    def info(self, module: str) -> Receipt:
        return self.runner.run(["modinfo", module])

    def update_initramfs(self) -> Receipt:
        return self.runner.run(["update-initramfs", "-u"])
