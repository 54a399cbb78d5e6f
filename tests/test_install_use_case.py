"""
Tests for the bring-up pipeline against a simulated host.
"""

import pytest

from gpu_bringup.core.errors import (
    DriverInstallError,
    PackageManagerError,
    PreflightError,
    ToolkitInstallError,
)
from gpu_bringup.core.models.install import InstallConfig
from gpu_bringup.core.services.nouveau import BLACKLIST_CONTENT
from gpu_bringup.core.use_cases.install import HostContext, run_install

QUERY = ("nvidia-smi", "--query-gpu=name,driver_version,memory.total,memory.free,temperature.gpu")

UNATTENDED_CONF = """\
Unattended-Upgrade::Package-Blacklist {
    "libc6$";
};
"""


@pytest.fixture
def fresh_host(host, mock_runner, system_paths):
    """A host with no vendor keyring, a resident nouveau and unattended-upgrades."""
    mock_runner.set_failure(("dpkg", "-s", "cuda-keyring"))
    system_paths.proc_modules.parent.mkdir(parents=True)
    system_paths.proc_modules.write_text("nouveau 2342912 0 - Live 0x0000000000000000\n")
    conf = system_paths.unattended_upgrades_conf
    conf.parent.mkdir(parents=True)
    conf.write_text(UNATTENDED_CONF)
    return host


class TestDriverOnly:
    """Driver branch only, module binds live."""

    def test_live_install(self, fresh_host, mock_runner, fake_downloader, system_paths, two_gpu_rows):
        mock_runner.set_response(QUERY, stdout=two_gpu_rows)

        result = run_install(InstallConfig(driver_branch=580), host=fresh_host)

        assert result.state.driver_installed is True
        assert result.state.module_loaded is True
        assert not result.reboot_required
        assert result.verification is not None
        assert result.verification.passed
        assert result.verification.compute is None
        assert len(result.verification.hardware.devices) == 2

        assert "toolkit" not in result.stages_run
        assert not [c for c in mock_runner.call_log if any("cuda-toolkit" in a for a in c)]
        assert not [c for c in mock_runner.call_log if c[0].endswith("nvcc")]
        assert mock_runner.calls_matching(*QUERY)

        assert ["apt-get", "install", "-y", "cuda-drivers-580"] in mock_runner.call_log
        assert ["rmmod", "-v", "nouveau"] in mock_runner.call_log
        assert system_paths.nouveau_blacklist.read_text() == BLACKLIST_CONTENT
        assert system_paths.apt_pin_file.is_file()
        assert len(fake_downloader.urls) == 2
        assert '"cuda-";' in system_paths.unattended_upgrades_conf.read_text()

    def test_stage_order(self, fresh_host, mock_runner, two_gpu_rows):
        mock_runner.set_response(QUERY, stdout=two_gpu_rows)
        result = run_install(InstallConfig(driver_branch=580), host=fresh_host)
        assert result.stages_run == [
            "config", "preflight", "update", "prerequisites", "repository",
            "nouveau", "driver", "post-install", "module", "verify", "lockdown",
        ]

    def test_prerequisites_before_driver(self, fresh_host, mock_runner):
        run_install(InstallConfig(driver_branch=580), host=fresh_host)
        installs = mock_runner.calls_matching("apt-get", "install", "-y")
        assert "linux-headers-6.8.0-45-generic" in installs[0]
        assert installs[1] == ["apt-get", "install", "-y", "cuda-drivers-580"]


class TestToolkitNotLive:
    """Driver plus toolkit, module needs a reboot."""

    def test_reboot_required_and_harness_skipped(self, fresh_host, mock_runner):
        mock_runner.set_failure(("modprobe",), stderr="modprobe: ERROR: could not insert 'nvidia'")

        result = run_install(InstallConfig(driver_branch=535, cuda_version=(12, 4)), host=fresh_host)

        assert ["apt-get", "install", "-y", "cuda-toolkit-12-4"] in mock_runner.call_log
        assert "toolkit" in result.stages_run
        assert result.state.module_loaded is False
        assert result.reboot_required
        assert result.verification is None
        assert result.verification_skipped == "module not loaded"
        assert mock_runner.calls_matching(*QUERY) == []
        assert "lockdown" in result.stages_run
        assert mock_runner.calls_matching("apt-get", "autoremove", "-y")

    def test_to_dict(self, fresh_host, mock_runner):
        mock_runner.set_failure(("modprobe",))
        result = run_install(InstallConfig(driver_branch=535, cuda_version=(12, 4)), host=fresh_host)
        summary = result.to_dict()
        assert summary["cuda_version"] == "12.4"
        assert summary["os"] == "ubuntu 22.04"
        assert summary["reboot_required"] is True
        assert summary["verification_passed"] is None


class TestSkipTests:
    def test_harness_never_runs(self, fresh_host, mock_runner):
        config = InstallConfig(driver_branch=580, cuda_version=(13, 0), skip_tests=True)
        result = run_install(config, host=fresh_host)
        assert result.state.module_loaded is True
        assert result.verification is None
        assert result.verification_skipped == "--skip-tests"
        assert mock_runner.calls_matching(*QUERY) == []


class TestFatalFailures:
    """Failures that abort the run."""

    def test_non_root(self, host, mock_runner):
        root_less = HostContext(
            runner=host.runner, downloader=host.downloader, paths=host.paths,
            geteuid=lambda: 1000, kernel_release=host.kernel_release, arch=host.arch,
        )
        with pytest.raises(PreflightError):
            run_install(InstallConfig(driver_branch=580), host=root_less)
        assert mock_runner.call_log == []

    def test_unsupported_os(self, host, mock_runner, system_paths):
        system_paths.os_release.write_text('ID=ubuntu\nVERSION_ID="20.04"\n')
        with pytest.raises(PreflightError, match="20.04"):
            run_install(InstallConfig(driver_branch=580), host=host)
        assert mock_runner.call_log == []

    def test_missing_package_manager(self, fresh_host, mock_runner):
        mock_runner.set_executable("apt-get", None)
        with pytest.raises(PreflightError, match="apt"):
            run_install(InstallConfig(driver_branch=580), host=fresh_host)
        assert mock_runner.call_log == []

    def test_update_failure(self, fresh_host, mock_runner):
        mock_runner.set_failure(("apt-get", "update"))
        with pytest.raises(PackageManagerError):
            run_install(InstallConfig(driver_branch=580), host=fresh_host)

    def test_driver_failure_aborts(self, fresh_host, mock_runner):
        mock_runner.set_failure(("apt-get", "install", "-y", "cuda-drivers-580"))
        with pytest.raises(DriverInstallError) as exc:
            run_install(InstallConfig(driver_branch=580, cuda_version=(13, 0)), host=fresh_host)
        assert exc.value.stage == "driver"
        assert not [c for c in mock_runner.call_log if any("cuda-toolkit" in a for a in c)]
        assert mock_runner.calls_matching("modprobe") == []

    def test_toolkit_failure_aborts(self, fresh_host, mock_runner):
        mock_runner.set_failure(("apt-get", "install", "-y", "cuda-toolkit-12-4"))
        with pytest.raises(ToolkitInstallError):
            run_install(InstallConfig(driver_branch=535, cuda_version=(12, 4)), host=fresh_host)
        assert mock_runner.calls_matching("modprobe") == []


class TestRerun:
    def test_second_run_repeats_no_host_changes(
        self, fresh_host, mock_runner, fake_downloader, system_paths,
    ):
        config = InstallConfig(driver_branch=580)
        run_install(config, host=fresh_host)
        blacklist = system_paths.nouveau_blacklist.read_text()
        unattended = system_paths.unattended_upgrades_conf.read_text()

        # Keyring now reported as installed; nouveau gone after reboot.
        mock_runner.reset()
        fake_downloader.urls.clear()
        system_paths.proc_modules.write_text("")

        run_install(config, host=fresh_host)

        assert fake_downloader.urls == []
        assert mock_runner.calls_matching("dpkg", "-i") == []
        assert mock_runner.calls_matching("update-initramfs") == []
        assert mock_runner.calls_matching("rmmod") == []
        assert system_paths.nouveau_blacklist.read_text() == blacklist
        assert system_paths.unattended_upgrades_conf.read_text() == unattended
