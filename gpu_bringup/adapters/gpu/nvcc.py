"""
nvcc adapter — the compute toolkit's compiler.

APT-installed toolkits place nvcc under ``/usr/local/cuda/bin``, which is
not on PATH on a fresh install, so resolution falls back to that
directory after a PATH lookup.
"""

from __future__ import annotations

import os
from pathlib import Path

from gpu_bringup.adapters.base import Adapter
from gpu_bringup.adapters.shell.command import CommandRunner
from gpu_bringup.core.models.action import Receipt


class NvccAdapter(Adapter):
    """Resolve, report on, and invoke nvcc."""

    def __init__(self, runner: CommandRunner, cuda_home: Path = Path("/usr/local/cuda")):
        super().__init__(runner)
        self.cuda_home = cuda_home

    @property
    def name(self) -> str:
        return "nvcc"

    def is_available(self) -> bool:
        return self.resolve() is not None

    def resolve(self) -> str | None:
        """PATH first, then the toolkit's fixed install directory."""
        found = self.runner.which("nvcc")
        if found:
            return found
        fallback = self.cuda_home / "bin" / "nvcc"
        if fallback.is_file() and os.access(fallback, os.X_OK):
            return str(fallback)
        return None

    def version(self, nvcc: str) -> Receipt:
        return self.runner.run([nvcc, "--version"])

    def compile(self, nvcc: str, source: Path, output: Path) -> Receipt:
        return self.runner.run([nvcc, "-o", str(output), str(source)])
