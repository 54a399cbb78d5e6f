"""
nvidia-smi adapter — the structured hardware query interface.
"""

from __future__ import annotations

from gpu_bringup.adapters.base import Adapter
from gpu_bringup.core.models.action import Receipt

# Order matters: the hardware probe unpacks rows positionally.
QUERY_FIELDS = (
    "name",
    "driver_version",
    "memory.total",
    "memory.free",
    "temperature.gpu",
)


class NvidiaSmiAdapter(Adapter):
    """Driver-to-hardware queries through nvidia-smi."""

    @property
    def name(self) -> str:
        return "nvidia-smi"

    def is_available(self) -> bool:
        return self.runner.which("nvidia-smi") is not None

    def summary(self) -> Receipt:
        """The human-readable device table."""
        return self.runner.run(["nvidia-smi"])

    def query_gpus(self, fields: tuple[str, ...] = QUERY_FIELDS) -> Receipt:
        """One CSV row per visible device, no header, no units."""
        return self.runner.run([
            "nvidia-smi",
            f"--query-gpu={','.join(fields)}",
            "--format=csv,noheader,nounits",
        ])
