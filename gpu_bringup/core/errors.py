"""
Error taxonomy for the bring-up pipeline.

Only fatal conditions are exceptions. Degraded outcomes (module not
loaded live, a failed verification probe) and best-effort steps (nouveau
unload) are reported through return values and warnings instead.
"""

from __future__ import annotations


class BringupError(Exception):
    """A fatal stage failure. The run aborts with exit code 1."""

    stage = "bring-up"

    def __init__(self, message: str, *, stage: str | None = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class PreflightError(BringupError):
    """Missing privilege or unsupported operating system."""

    stage = "preflight"


class PackageManagerError(BringupError):
    """apt-get failed during update, upgrade, prerequisites or cleanup."""

    stage = "packages"


class DownloadError(BringupError):
    """A vendor repository artefact could not be fetched."""

    stage = "repository"


class RepositoryError(BringupError):
    """The vendor repository could not be registered."""

    stage = "repository"


class NouveauError(BringupError):
    """The nouveau blacklist could not be made effective."""

    stage = "nouveau"


class DriverInstallError(BringupError):
    """The driver package failed to install."""

    stage = "driver"


class ToolkitInstallError(BringupError):
    """The toolkit package failed to install."""

    stage = "toolkit"


class PostInstallError(BringupError):
    """A post-install host configuration file could not be updated."""

    stage = "post-install"


class LockdownError(BringupError):
    """The unattended-upgrades configuration could not be updated."""

    stage = "lockdown"


class StateError(RuntimeError):
    """An installation outcome was recorded twice in the same run."""
