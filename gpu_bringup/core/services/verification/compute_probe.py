"""
Compute probe — compile and run a real kernel on every device.

Exercises the whole compute path: the compiler, the runtime library,
device memory management, host↔device transfers, kernel dispatch and
device synchronisation. Devices are tested one at a time by the
compiled program so a failure is attributed to exactly one device
without stopping evaluation of the others.

Build artefacts live in a throw-away temporary directory that is
removed whether the probe passes or fails.
"""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path

from gpu_bringup.adapters.gpu.nvcc import NvccAdapter
from gpu_bringup.core.data.vector_add import RESULT_PREFIX, VECTOR_ADD_SOURCE
from gpu_bringup.core.models.action import Receipt
from gpu_bringup.core.models.verification import ComputeProbeResult, KernelTestResult

logger = logging.getLogger(__name__)

_RESULT_RE = re.compile(
    rf"^{RESULT_PREFIX} gpu=(?P<index>\d+) status=(?P<status>PASS|FAIL)"
    r"(?: detail=(?P<detail>.*))?$"
)


def parse_kernel_results(output: str) -> list[KernelTestResult]:
    """Extract the per-device result lines printed by the probe program."""
    results: list[KernelTestResult] = []
    for line in output.splitlines():
        m = _RESULT_RE.match(line.strip())
        if not m:
            continue
        passed = m.group("status") == "PASS"
        results.append(KernelTestResult(
            index=int(m.group("index")),
            passed=passed,
            diagnostic="" if passed else (m.group("detail") or "unknown failure").strip(),
        ))
    return results


def evaluate_run(receipt: Receipt) -> ComputeProbeResult:
    """Turn the probe program's receipt into an overall verdict."""
    results = parse_kernel_results(receipt.stdout)

    if not results:
        detail = receipt.stderr.strip() or receipt.error or "no per-device results reported"
        return ComputeProbeResult(ok=False, diagnostic=f"CUDA test program failed: {detail}")

    failed = [r for r in results if not r.passed]
    if failed:
        names = ", ".join(f"GPU {r.index}: {r.diagnostic}" for r in failed)
        return ComputeProbeResult(
            ok=False,
            results=results,
            diagnostic=f"{len(failed)} of {len(results)} GPU(s) failed the CUDA test — {names}",
        )

    if receipt.failed:
        return ComputeProbeResult(
            ok=False,
            results=results,
            diagnostic=f"CUDA test program returned an error: {receipt.detail}",
        )

    return ComputeProbeResult(ok=True, results=results)


def run_compute_probe(nvcc: NvccAdapter) -> ComputeProbeResult:
    nvcc_bin = nvcc.resolve()
    if nvcc_bin is None:
        diagnostic = "nvcc not found. Cannot run CUDA test."
        logger.warning("FAIL: %s", diagnostic)
        return ComputeProbeResult(ok=False, diagnostic=diagnostic)

    with tempfile.TemporaryDirectory(prefix="cuda-test-") as tmp:
        source = Path(tmp) / "vector_add.cu"
        binary = Path(tmp) / "vector_add"
        source.write_text(VECTOR_ADD_SOURCE, encoding="utf-8")

        logger.info("CUDA test: compiling %s ...", source.name)
        compiled = nvcc.compile(nvcc_bin, source, binary)
        if compiled.failed:
            diagnostic = f"nvcc compilation failed: {compiled.detail}"
            logger.warning("FAIL: %s", diagnostic)
            return ComputeProbeResult(ok=False, diagnostic=diagnostic)

        logger.info("CUDA test: running %s ...", binary.name)
        receipt = nvcc.runner.run([str(binary)])

    for line in receipt.stdout.rstrip().splitlines():
        if not line.startswith(RESULT_PREFIX):
            logger.info("%s", line)

    result = evaluate_run(receipt)
    for r in result.results:
        if r.passed:
            logger.info("  GPU %d: PASS (vector_add)", r.index)
        else:
            logger.warning("  GPU %d: FAIL (%s)", r.index, r.diagnostic)

    if result.ok:
        logger.info(
            "PASS: CUDA test — compilation and kernel execution successful on all %d GPU(s).",
            len(result.results),
        )
    else:
        logger.warning("FAIL: %s", result.diagnostic)
    return result
