"""
Adapter base — the contract between pipeline stages and host tools.

Stages never call host tools directly: they talk to an adapter, which
builds the command line and hands it to a CommandRunner. Adapters return
Receipts and never raise for a failed command.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from gpu_bringup.adapters.shell.command import CommandRunner


class Adapter(ABC):
    """Abstract base class for all host-tool adapters.

    To create a new adapter:
        1. Subclass Adapter
        2. Implement name and is_available
        3. Build commands and pass them to ``self.runner.run``
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'apt', 'kmod', 'nvidia-smi')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
