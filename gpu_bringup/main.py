"""
GPU node bring-up — CLI entrypoint.

Usage:
    gpu-bringup --help
    gpu-bringup --driver-branch 580
    gpu-bringup --driver-branch 580 --cuda-version 13-1
    gpu-bringup --driver-branch 535 --cuda-version 12-4 --skip-tests
    python -m gpu_bringup.main --driver-branch 580 --log-file /tmp/nvidia-install.log

Exit codes:
    0  help, version, or a completed run (even if verification probes warn)
    1  bad arguments, missing privilege, unsupported OS, or a fatal
       install failure
"""

from __future__ import annotations

import logging
import os
import sys

import click

from gpu_bringup import __version__
from gpu_bringup.core.models.install import DEFAULT_LOG_PATH

logger = logging.getLogger(__name__)

_EPILOG = """\b
Driver / CUDA compatibility matrix:
  R535 (LTSB)       → CUDA 12.x
  R570 (Production) → CUDA 12.x
  R580 (LTSB)       → CUDA 13.x

\b
Examples:
  gpu-bringup --driver-branch 580
  gpu-bringup --driver-branch 580 --cuda-version 13-1
  gpu-bringup --driver-branch 535 --cuda-version 12-4
  gpu-bringup --driver-branch 580 --cuda-version 13-1 --skip-tests
  gpu-bringup --driver-branch 580 --log-file /tmp/nvidia-install.log
"""


def _usage_error(message: str, ctx: click.Context | None = None) -> click.UsageError:
    """A usage error that exits 1 instead of click's default 2."""
    err = click.UsageError(message, ctx=ctx)
    err.exit_code = 1
    return err


class _InstallCommand(click.Command):
    """Command whose argument-parsing failures exit with code 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(
    cls=_InstallCommand,
    epilog=_EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="gpu-bringup")
@click.option(
    "--driver-branch",
    required=True,
    metavar="<NUMBER>",
    help="NVIDIA driver branch number. Common values: 535, 570, 580.",
)
@click.option(
    "--cuda-version",
    default=None,
    metavar="<X-Y>",
    help="CUDA toolkit version in APT format (e.g. 12-4, 13-1). "
         "When omitted, only the driver is installed.",
)
@click.option("--skip-tests", is_flag=True, help="Skip post-install GPU and CUDA verification tests.")
@click.option(
    "--log-file",
    default=str(DEFAULT_LOG_PATH),
    show_default=True,
    metavar="<PATH>",
    help="Append all output to this file.",
)
@click.option("--debug", is_flag=True, help="Enable debug logging on the console.")
@click.pass_context
def cli(
    ctx: click.Context,
    driver_branch: str,
    cuda_version: str | None,
    skip_tests: bool,
    log_file: str,
    debug: bool,
) -> None:
    """Install an NVIDIA data center GPU driver and (optionally) the CUDA
    toolkit on Ubuntu, then verify the GPUs work."""
    from gpu_bringup.core.config.resolver import ConfigError, resolve_config
    from gpu_bringup.core.errors import BringupError
    from gpu_bringup.core.observability.logging_config import setup_logging
    from gpu_bringup.core.use_cases.install import run_install

    # Validate before anything touches the host (including the log dir).
    try:
        config = resolve_config(
            driver_branch=driver_branch,
            cuda_version=cuda_version,
            skip_tests=skip_tests,
            log_file=log_file,
        )
    except ConfigError as e:
        raise _usage_error(str(e), ctx) from e

    # ── Logging setup (once, after validation) ──────────────────
    level = "DEBUG" if debug else os.environ.get("GPU_BRINGUP_LOG_LEVEL", "INFO")
    try:
        setup_logging(level=level, log_file=config.log_path)
    except OSError as e:
        click.secho(f"❌ Cannot open log file {config.log_path}: {e}", fg="red", err=True)
        sys.exit(1)

    try:
        result = run_install(config, host=ctx.obj.get("host") if ctx.obj else None)
    except BringupError as e:
        logger.error("ERROR [%s]: %s", e.stage, e)
        sys.exit(1)

    logger.debug("Run result: %s", result.to_dict())


def main() -> None:
    """Console-script entry point."""
    cli(prog_name="gpu-bringup")


if __name__ == "__main__":
    main()
