"""
Hardware probe — can the driver read attributes from every device?

One structured query covers all visible devices; rows are parsed
positionally in the order of ``QUERY_FIELDS``. An error from the query
and an empty answer are distinct failures: the first means the driver
is unreachable, the second that it answers but sees no GPUs.
"""

from __future__ import annotations

import logging

from gpu_bringup.adapters.gpu.nvidia_smi import QUERY_FIELDS, NvidiaSmiAdapter
from gpu_bringup.core.models.verification import GPUDeviceReport, HardwareProbeResult

logger = logging.getLogger(__name__)


class MalformedQueryOutput(ValueError):
    """A query row did not have one value per requested field."""


def parse_gpu_rows(output: str) -> list[GPUDeviceReport]:
    """Parse ``--format=csv,noheader,nounits`` rows into device reports.

    Blank lines are ignored; every field is whitespace-trimmed.

    Raises:
        MalformedQueryOutput: A row has the wrong number of fields.
    """
    reports: list[GPUDeviceReport] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = [f.strip() for f in line.split(",")]
        if len(fields) != len(QUERY_FIELDS):
            raise MalformedQueryOutput(
                f"expected {len(QUERY_FIELDS)} fields, got {len(fields)}: {line.strip()!r}"
            )
        name, driver_version, memory_total, memory_free, temperature = fields
        reports.append(GPUDeviceReport(
            index=len(reports),
            name=name,
            driver_version=driver_version,
            memory_total=memory_total,
            memory_free=memory_free,
            temperature=temperature,
        ))
    return reports


def run_hardware_probe(smi: NvidiaSmiAdapter) -> HardwareProbeResult:
    logger.info("Driver test: querying GPU properties ...")
    receipt = smi.query_gpus()
    if receipt.failed:
        diagnostic = f"nvidia-smi structured query failed: {receipt.detail}"
        logger.warning("FAIL: %s", diagnostic)
        return HardwareProbeResult(ok=False, diagnostic=diagnostic)

    try:
        devices = parse_gpu_rows(receipt.stdout)
    except MalformedQueryOutput as e:
        diagnostic = f"malformed query output: {e}"
        logger.warning("FAIL: %s", diagnostic)
        return HardwareProbeResult(ok=False, diagnostic=diagnostic)

    if not devices:
        diagnostic = "No GPUs detected by nvidia-smi."
        logger.warning("FAIL: %s", diagnostic)
        return HardwareProbeResult(ok=False, diagnostic=diagnostic)

    for d in devices:
        logger.info("  GPU %d:", d.index)
        logger.info("    Name:         %s", d.name)
        logger.info("    Driver:       %s", d.driver_version)
        logger.info("    Memory:       %s / %s MiB free", d.memory_free, d.memory_total)
        logger.info("    Temperature:  %s°C", d.temperature)

    logger.info("PASS: Driver test — %d GPU(s) detected and responding.", len(devices))
    return HardwareProbeResult(ok=True, devices=devices)
