"""
Verification models — per-probe results of the post-install harness.

All of these are produced fresh by each probe invocation and never
retained across runs.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class GPUDeviceReport(BaseModel):
    """One row of the structured hardware query."""

    index: int
    name: str
    driver_version: str
    memory_total: str
    memory_free: str
    temperature: str


class KernelTestResult(BaseModel):
    """Outcome of the vector-add workload on one device."""

    index: int
    passed: bool
    diagnostic: str = ""


class HardwareProbeResult(BaseModel):
    ok: bool
    devices: list[GPUDeviceReport] = Field(default_factory=list)
    diagnostic: str = ""


class ComputeProbeResult(BaseModel):
    ok: bool
    results: list[KernelTestResult] = Field(default_factory=list)
    diagnostic: str = ""

    @property
    def failed_indices(self) -> list[int]:
        return [r.index for r in self.results if not r.passed]


class VerificationReport(BaseModel):
    """Combined harness outcome. Each probe is judged independently."""

    hardware: HardwareProbeResult
    compute: ComputeProbeResult | None = None

    @property
    def passed(self) -> bool:
        if not self.hardware.ok:
            return False
        return self.compute is None or self.compute.ok
