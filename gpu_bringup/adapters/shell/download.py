"""
Download adapter — fetch vendor repository artefacts over HTTPS.

Files are streamed to ``<dest>.part`` and moved into place only once the
transfer completes, so an interrupted download never leaves a truncated
file where an idempotency check would mistake it for a finished one.
"""

from __future__ import annotations

import logging
import os
import time
import urllib.error
import urllib.request
from pathlib import Path

from gpu_bringup.core.models.action import Receipt

logger = logging.getLogger(__name__)

_USER_AGENT = "gpu-bringup"


class Downloader:
    """Fetch a URL to a local path. Returns a Receipt, never raises."""

    def __init__(self, timeout: int = 60):
        self.timeout = timeout

    def fetch(self, url: str, dest: Path) -> Receipt:
        command = ["download", url, str(dest)]
        partial = dest.with_name(dest.name + ".part")
        logger.debug("Downloading %s → %s", url, dest)
        start = time.monotonic()
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                with open(partial, "wb") as f:
                    while True:
                        chunk = resp.read(8192)
                        if not chunk:
                            break
                        f.write(chunk)
            os.replace(partial, dest)
        except (urllib.error.URLError, OSError) as e:
            partial.unlink(missing_ok=True)
            return Receipt.failure(command=command, error=f"Download failed: {url} ({e})")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return Receipt.success(
            command=command,
            duration_ms=elapsed_ms,
            metadata={"bytes": dest.stat().st_size},
        )
