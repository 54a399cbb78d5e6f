"""
Tests for driver and toolkit installation, plus the compatibility advisory.
"""

import logging

import pytest

from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.core.errors import ToolkitInstallError
from gpu_bringup.core.models.install import InstallConfig
from gpu_bringup.core.services.compat import check_branch_toolkit_compat, log_compat_advisory
from gpu_bringup.core.services.drivers import install_driver, install_toolkit


class TestInstallDriver:
    def test_installs_branch_package(self, mock_runner):
        ok = install_driver(AptAdapter(mock_runner), InstallConfig(driver_branch=580))
        assert ok
        assert mock_runner.call_log == [["apt-get", "install", "-y", "cuda-drivers-580"]]

    def test_failure_reported_as_flag(self, mock_runner):
        mock_runner.set_failure(("apt-get", "install", "-y", "cuda-drivers-580"))
        assert install_driver(AptAdapter(mock_runner), InstallConfig(driver_branch=580)) is False


class TestInstallToolkit:
    def test_installs_versioned_package(self, mock_runner):
        config = InstallConfig(driver_branch=535, cuda_version=(12, 4))
        install_toolkit(AptAdapter(mock_runner), config)
        assert mock_runner.call_log == [["apt-get", "install", "-y", "cuda-toolkit-12-4"]]

    def test_failure_raises(self, mock_runner):
        mock_runner.set_failure(("apt-get", "install", "-y", "cuda-toolkit-12-4"))
        config = InstallConfig(driver_branch=535, cuda_version=(12, 4))
        with pytest.raises(ToolkitInstallError):
            install_toolkit(AptAdapter(mock_runner), config)

    def test_requires_version(self, mock_runner):
        with pytest.raises(ToolkitInstallError):
            install_toolkit(AptAdapter(mock_runner), InstallConfig(driver_branch=535))
        assert mock_runner.call_log == []


class TestCompat:
    def test_no_toolkit(self):
        assert check_branch_toolkit_compat(InstallConfig(driver_branch=535)) == {"compatible": True}

    def test_within_range(self):
        config = InstallConfig(driver_branch=580, cuda_version=(13, 0))
        assert check_branch_toolkit_compat(config)["compatible"]

    def test_too_new(self):
        config = InstallConfig(driver_branch=535, cuda_version=(13, 0))
        result = check_branch_toolkit_compat(config)
        assert not result["compatible"]
        assert result["max_cuda_major"] == 12
        assert "R535" in result["message"]

    def test_unknown_branch(self):
        config = InstallConfig(driver_branch=999, cuda_version=(13, 0))
        assert check_branch_toolkit_compat(config) == {"compatible": True, "unknown_branch": 999}

    def test_advisory_is_warning_only(self, caplog):
        config = InstallConfig(driver_branch=535, cuda_version=(13, 0))
        with caplog.at_level(logging.WARNING, logger="gpu_bringup"):
            log_compat_advisory(config)
        assert "may not be supported" in caplog.text
