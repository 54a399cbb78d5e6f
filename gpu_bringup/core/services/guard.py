"""
Guarded actions — "ensure marker X exists, else perform action Y".

Every idempotent step of the bring-up (pin file, keyring package,
nouveau blacklist, upgrade exclusion) goes through ``ensure``, so the
check always precedes the network or install action and a re-run of the
whole workflow is a no-op for steps that already took effect.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gpu_bringup.adapters.packages.apt import AptAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Guard:
    """A named, side-effect-free check for a marker on the host."""

    description: str
    is_satisfied: Callable[[], bool]


def ensure(guard: Guard, action: Callable[[], None]) -> bool:
    """Run ``action`` unless ``guard`` is already satisfied.

    Returns:
        True if the action ran, False if it was skipped.
    """
    if guard.is_satisfied():
        logger.info("%s — already present, skipping", guard.description)
        return False

    action()

    if not guard.is_satisfied():
        logger.warning("%s — still absent after the action ran", guard.description)
    return True


# ── Guard factories ─────────────────────────────────────────────


def file_exists(path: Path) -> Guard:
    return Guard(description=f"file {path}", is_satisfied=path.is_file)


def file_contains(path: Path, needle: str) -> Guard:
    def _check() -> bool:
        try:
            return needle in path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return False

    return Guard(description=f"'{needle}' in {path}", is_satisfied=_check)


def package_installed(apt: AptAdapter, package: str) -> Guard:
    return Guard(
        description=f"package {package}",
        is_satisfied=lambda: apt.is_installed(package),
    )
