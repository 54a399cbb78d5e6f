"""Adapters — bindings for the host tools the bring-up drives.

Public re-exports for convenient access.
"""

from gpu_bringup.adapters.base import Adapter
from gpu_bringup.adapters.gpu.nvcc import NvccAdapter
from gpu_bringup.adapters.gpu.nvidia_smi import NvidiaSmiAdapter
from gpu_bringup.adapters.kernel.modules import KernelModuleAdapter
from gpu_bringup.adapters.mock import MockCommandRunner
from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.adapters.shell.command import CommandRunner
from gpu_bringup.adapters.shell.download import Downloader

__all__ = [
    "Adapter",
    "AptAdapter",
    "CommandRunner",
    "Downloader",
    "KernelModuleAdapter",
    "MockCommandRunner",
    "NvccAdapter",
    "NvidiaSmiAdapter",
]
