"""
Nouveau deconfliction — unload now, blacklist for every future boot.

The unload is best effort: if nouveau refuses to leave (e.g. it is
driving a console), the persistent blacklist makes it moot after the
next reboot. The blacklist is written once and baked into the initramfs
so it also holds during early boot.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gpu_bringup.adapters.kernel.modules import KernelModuleAdapter
from gpu_bringup.core.errors import NouveauError
from gpu_bringup.core.services.guard import ensure, file_exists

logger = logging.getLogger(__name__)

NOUVEAU = "nouveau"
BLACKLIST_CONTENT = "blacklist nouveau\noptions nouveau modeset=0\n"


def unload_nouveau(kmod: KernelModuleAdapter) -> bool:
    """Unload nouveau if resident. Returns True if it is no longer loaded."""
    if not kmod.is_loaded(NOUVEAU):
        logger.debug("nouveau is not loaded")
        return True

    receipt = kmod.unload(NOUVEAU)
    if receipt.failed:
        logger.warning(
            "Could not unload nouveau (%s); the blacklist takes effect after reboot",
            receipt.detail,
        )
        return False

    logger.info("nouveau unloaded")
    return True


def blacklist_nouveau(kmod: KernelModuleAdapter, blacklist_file: Path) -> bool:
    """Write the blacklist file and regenerate the initramfs, once.

    Returns:
        True if the blacklist was written by this call.

    Raises:
        NouveauError: The blacklist file could not be written, or the
            initramfs could not be regenerated. In the latter case the
            blacklist file is removed again so the next run retries.
    """

    def _write_blacklist() -> None:
        try:
            blacklist_file.parent.mkdir(parents=True, exist_ok=True)
            blacklist_file.write_text(BLACKLIST_CONTENT, encoding="utf-8")
        except OSError as e:
            raise NouveauError(f"Cannot write {blacklist_file}: {e}") from e
        logger.info("Wrote %s", blacklist_file)

        receipt = kmod.update_initramfs()
        if receipt.failed:
            blacklist_file.unlink(missing_ok=True)
            raise NouveauError(f"update-initramfs failed: {receipt.detail}")

    return ensure(file_exists(blacklist_file), _write_blacklist)


def deconflict_nouveau(kmod: KernelModuleAdapter, blacklist_file: Path) -> None:
    logger.info("Blacklisting nouveau kernel module ...")
    unload_nouveau(kmod)
    blacklist_nouveau(kmod, blacklist_file)
