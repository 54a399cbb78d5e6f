"""
Receipt model — the execution contract for external commands.

Every call into the package manager, the kernel module interface, the
hardware query tool or the compiler returns a Receipt. Adapters never
raise on a failed command; the failure is captured here and the calling
stage decides whether it is fatal, tolerated, or a warning.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of one external command."""

    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    @property
    def display_command(self) -> str:
        return " ".join(self.command)

    @property
    def detail(self) -> str:
        """Best human-readable explanation of a failure."""
        parts = [p for p in (self.error, self.stderr.strip()) if p]
        return " — ".join(parts) if parts else ""

    @classmethod
    def success(
        cls,
        command: list[str],
        stdout: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            command=command,
            status="ok",
            return_code=kwargs.pop("return_code", 0),
            stdout=stdout,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        command: list[str],
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            command=command,
            status="failed",
            error=error,
            **kwargs,
        )
