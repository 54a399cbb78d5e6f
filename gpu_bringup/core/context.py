"""
Run context — which pipeline stage is currently executing.

The orchestrator sets the stage label as it enters each stage; the
logging filter reads it to stamp every record, so log lines from
adapters and services are attributed to the stage that caused them.

Design notes:
    - Module-level singleton (not a class). Execution is single-threaded.
    - get_stage() returns "-" when unset (e.g. during argument parsing).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

_UNSET = "-"

_stage: str = _UNSET


def set_stage(name: str) -> None:
    """Register the stage label for the current process."""
    global _stage
    _stage = name


def get_stage() -> str:
    """Return the current stage label."""
    return _stage


@contextmanager
def stage(name: str) -> Iterator[None]:
    """Label log records with ``name`` for the duration of the block."""
    previous = get_stage()
    set_stage(name)
    try:
        yield
    finally:
        set_stage(previous)
