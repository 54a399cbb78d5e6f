"""
Lockdown — keep unattended-upgrades away from the driver and toolkit.

An automatic upgrade of a driver or toolkit package can silently break
driver/toolkit compatibility, so their package families are added to
the ``Unattended-Upgrade::Package-Blacklist`` block. The file uses APT
config syntax (``//`` comments); existing entries are left untouched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from gpu_bringup.core.errors import LockdownError
from gpu_bringup.core.services.guard import ensure, file_contains

logger = logging.getLogger(__name__)

LOCKDOWN_MARKER = "nvidia"
EXCLUDED_PREFIXES = ("nvidia-", "libnvidia-", "cuda-")

_BLOCK_START = re.compile(r"Unattended-Upgrade::Package-Blacklist\s*\{")
_INDENT = "    "


def exclusion_lines() -> list[str]:
    lines = [f"{_INDENT}// exclude nvidia and cuda packages from automatic updates\n"]
    lines += [f'{_INDENT}"{prefix}";\n' for prefix in EXCLUDED_PREFIXES]
    return lines


def insert_exclusions(text: str) -> str:
    """Insert the exclusion rules before the blacklist block's closing brace.

    Returns ``text`` unchanged when the block is missing or never closes.
    """
    lines = text.splitlines(keepends=True)
    in_block = False
    for i, line in enumerate(lines):
        if not in_block:
            if _BLOCK_START.search(line):
                in_block = True
            continue
        if "}" in line:
            return "".join(lines[:i] + exclusion_lines() + lines[i:])
    return text


def lock_packages(conf: Path) -> bool:
    """Exclude driver/toolkit packages from automatic upgrades, once.

    Returns:
        True if the configuration was changed by this call.

    Raises:
        LockdownError: The file could not be read, decoded or rewritten.
    """
    if not conf.is_file():
        logger.info("%s not found — unattended-upgrades not configured, nothing to lock", conf)
        return False

    def _insert() -> None:
        logger.info("Adding NVIDIA packages to unattended-upgrades blacklist ...")
        original = conf.read_text(encoding="utf-8")
        updated = insert_exclusions(original)
        if updated == original:
            logger.warning("No Package-Blacklist block found in %s", conf)
            return
        conf.write_text(updated, encoding="utf-8")

    try:
        return ensure(file_contains(conf, LOCKDOWN_MARKER), _insert)
    except (OSError, UnicodeDecodeError) as e:
        raise LockdownError(f"Cannot update {conf}: {e}") from e
