"""
L0 Data — Data-center driver branch / CUDA toolkit compatibility.

Source: https://docs.nvidia.com/datacenter/tesla/drivers/
Maps each known driver branch to the newest CUDA major version it
supports, with its support track.
"""

from __future__ import annotations

_BRANCH_MAX_CUDA_MAJOR: dict[int, tuple[int, str]] = {
    # branch: (max_cuda_major, track)
    535: (12, "LTSB"),
    570: (12, "Production"),
    580: (13, "LTSB"),
}
