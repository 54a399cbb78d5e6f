"""
Keep a display server from claiming GPUs on headless compute nodes.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from gpu_bringup.core.errors import PostInstallError

logger = logging.getLogger(__name__)

_UNCOMMENTED = re.compile(r"^([^#\n])", re.MULTILINE)


def deny_xserver_gpu(xorg_conf: Path) -> bool:
    """Comment out every active line of the X11 NVIDIA config, if present.

    Returns:
        True if the file was changed.

    Raises:
        PostInstallError: The file could not be read or rewritten.
    """
    if not xorg_conf.is_file():
        return False

    try:
        original = xorg_conf.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PostInstallError(f"Cannot read {xorg_conf}: {e}") from e
    updated = _UNCOMMENTED.sub(r"#\1", original)
    if updated == original:
        return False

    logger.info("Commenting out X server NVIDIA config %s", xorg_conf)
    try:
        xorg_conf.write_text(updated, encoding="utf-8")
    except OSError as e:
        raise PostInstallError(f"Cannot write {xorg_conf}: {e}") from e
    return True
