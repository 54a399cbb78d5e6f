"""
Mock command runner — universal test double for every external command.

Used to simulate the package manager, kernel module interface, hardware
query tool and compiler without touching the host. Returns success with
empty output by default; responses are configured per command prefix.
"""

from __future__ import annotations

from gpu_bringup.adapters.shell.command import CommandRunner
from gpu_bringup.core.models.action import Receipt


class MockCommandRunner(CommandRunner):
    """Command runner that records calls and replays canned receipts.

    Responses are keyed by command prefix; the longest matching prefix
    wins, so ``("apt-get", "install", "-y", "cuda-drivers-535")`` can be
    made to fail while other ``apt-get`` calls still succeed.
    """

    def __init__(self, executables: dict[str, str] | None = None):
        self._responses: dict[tuple[str, ...], Receipt] = {}
        self._call_log: list[list[str]] = []
        self._executables: dict[str, str] = dict(executables or {})

    @property
    def call_log(self) -> list[list[str]]:
        """Every command this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_response(
        self,
        prefix: tuple[str, ...],
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Make commands starting with ``prefix`` succeed with this output."""
        self._responses[prefix] = Receipt.success(
            command=list(prefix), stdout=stdout, stderr=stderr,
        )

    def set_failure(
        self,
        prefix: tuple[str, ...],
        error: str = "Mock failure",
        stdout: str = "",
        stderr: str = "",
        return_code: int = 1,
    ) -> None:
        """Make commands starting with ``prefix`` fail."""
        self._responses[prefix] = Receipt.failure(
            command=list(prefix),
            error=error,
            stdout=stdout,
            stderr=stderr,
            return_code=return_code,
        )

    def set_executable(self, name: str, path: str | None) -> None:
        """Control what ``which(name)`` resolves to."""
        if path is None:
            self._executables.pop(name, None)
        else:
            self._executables[name] = path

    def run(
        self,
        cmd: list[str],
        *,
        env_overrides: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> Receipt:
        self._call_log.append(list(cmd))

        match: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(cmd[: len(prefix)]) == prefix:
                if match is None or len(prefix) > len(match):
                    match = prefix

        if match is not None:
            return self._responses[match].model_copy(update={"command": list(cmd)})

        return Receipt.success(command=list(cmd))

    def which(self, name: str) -> str | None:
        return self._executables.get(name)

    def calls_matching(self, *prefix: str) -> list[list[str]]:
        """All recorded commands that start with ``prefix``."""
        return [c for c in self._call_log if tuple(c[: len(prefix)]) == prefix]

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
