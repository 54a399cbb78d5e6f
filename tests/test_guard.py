"""
Tests for guarded actions — the shared check-before-act helper.
"""

from pathlib import Path

from gpu_bringup.adapters.packages.apt import AptAdapter
from gpu_bringup.core.services.guard import (
    Guard,
    ensure,
    file_contains,
    file_exists,
    package_installed,
)


class TestEnsure:
    def test_runs_action_when_unsatisfied(self):
        calls = []
        ran = ensure(Guard("x", lambda: False), lambda: calls.append(1))
        assert ran is True
        assert calls == [1]

    def test_skips_action_when_satisfied(self):
        calls = []
        ran = ensure(Guard("x", lambda: True), lambda: calls.append(1))
        assert ran is False
        assert calls == []

    def test_second_call_is_noop(self, tmp_path: Path):
        target = tmp_path / "marker"
        calls = []

        def _write():
            calls.append(1)
            target.write_text("once\n")

        assert ensure(file_exists(target), _write) is True
        assert ensure(file_exists(target), _write) is False
        assert calls == [1]
        assert target.read_text() == "once\n"

    def test_action_exception_propagates(self):
        def _boom():
            raise RuntimeError("download failed")

        try:
            ensure(Guard("x", lambda: False), _boom)
        except RuntimeError as e:
            assert "download failed" in str(e)
        else:
            raise AssertionError("expected RuntimeError")


class TestGuardFactories:
    def test_file_exists(self, tmp_path: Path):
        path = tmp_path / "f"
        guard = file_exists(path)
        assert not guard.is_satisfied()
        path.write_text("")
        assert guard.is_satisfied()

    def test_file_contains_missing_file(self, tmp_path: Path):
        assert not file_contains(tmp_path / "nope", "nvidia").is_satisfied()

    def test_file_contains(self, tmp_path: Path):
        path = tmp_path / "conf"
        path.write_text('"nvidia-";\n')
        assert file_contains(path, "nvidia").is_satisfied()
        assert not file_contains(path, "cuda").is_satisfied()

    def test_package_installed(self, mock_runner):
        apt = AptAdapter(mock_runner)
        assert package_installed(apt, "cuda-keyring").is_satisfied()
        mock_runner.set_failure(("dpkg", "-s", "cuda-keyring"))
        assert not package_installed(apt, "cuda-keyring").is_satisfied()
