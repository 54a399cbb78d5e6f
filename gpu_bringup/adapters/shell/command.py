"""
Command runner — the SINGLE PLACE where ``subprocess.run`` is called.

Every stage reaches the operating system through a CommandRunner, so
logging, environment handling and error capture live here and nowhere
else. Commands are run without a timeout: package-manager operations,
module loads and the compute probe block until the OS completes them.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from gpu_bringup.core.models.action import Receipt

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run external commands and capture their output in a Receipt."""

    def run(
        self,
        cmd: list[str],
        *,
        env_overrides: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> Receipt:
        """Run ``cmd`` and return a Receipt. Never raises.

        Args:
            cmd: Command list for ``subprocess.run()``.
            env_overrides: Extra env vars (e.g. ``DEBIAN_FRONTEND``).
            cwd: Working directory for the command.
            timeout: Optional timeout in seconds (default: none).
        """
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)

        logger.debug("$ %s", " ".join(cmd))
        start = time.monotonic()
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
                cwd=cwd,
            )
        except FileNotFoundError:
            return Receipt.failure(
                command=cmd,
                error=f"Command not found: {cmd[0]}",
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                command=cmd,
                error=f"Command timed out ({timeout}s)",
            )
        except OSError as e:
            logger.debug("Subprocess error: %s", cmd, exc_info=True)
            return Receipt.failure(command=cmd, error=str(e))

        elapsed_ms = int((time.monotonic() - start) * 1000)
        _log_output(result.stdout, result.stderr)

        if result.returncode == 0:
            return Receipt.success(
                command=cmd,
                stdout=result.stdout,
                stderr=result.stderr,
                duration_ms=elapsed_ms,
            )

        return Receipt.failure(
            command=cmd,
            error=f"Command failed (exit {result.returncode})",
            return_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=elapsed_ms,
        )

    def which(self, name: str) -> str | None:
        """Resolve an executable on PATH."""
        return shutil.which(name)


def _log_output(stdout: str, stderr: str) -> None:
    for line in stdout.splitlines():
        logger.debug("  | %s", line)
    for line in stderr.splitlines():
        logger.debug("  ! %s", line)
