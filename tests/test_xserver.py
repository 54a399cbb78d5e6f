"""
Tests for the X server deconfliction step.
"""

from pathlib import Path

import pytest

from gpu_bringup.core.errors import PostInstallError
from gpu_bringup.core.services.xserver import deny_xserver_gpu

XORG_CONF = """\
Section "OutputClass"
    Identifier "nvidia"
    Driver "nvidia"
EndSection
"""


class TestDenyXserver:
    def test_missing_file(self, tmp_path: Path):
        assert deny_xserver_gpu(tmp_path / "10-nvidia.conf") is False

    def test_comments_active_lines(self, tmp_path: Path):
        conf = tmp_path / "10-nvidia.conf"
        conf.write_text(XORG_CONF)
        assert deny_xserver_gpu(conf) is True
        lines = conf.read_text().splitlines()
        assert all(line.startswith("#") for line in lines)
        assert lines[0] == '#Section "OutputClass"'

    def test_second_run_noop(self, tmp_path: Path):
        conf = tmp_path / "10-nvidia.conf"
        conf.write_text(XORG_CONF)
        deny_xserver_gpu(conf)
        first = conf.read_text()
        assert deny_xserver_gpu(conf) is False
        assert conf.read_text() == first

    def test_blank_lines_untouched(self, tmp_path: Path):
        conf = tmp_path / "10-nvidia.conf"
        conf.write_text('Section "Files"\n\nEndSection\n')
        deny_xserver_gpu(conf)
        assert conf.read_text() == '#Section "Files"\n\n#EndSection\n'

    def test_undecodable_file_is_stage_error(self, tmp_path: Path):
        conf = tmp_path / "10-nvidia.conf"
        conf.write_bytes(b'Section "Files"\n\xff\xfe\n')
        with pytest.raises(PostInstallError, match="Cannot read") as exc:
            deny_xserver_gpu(conf)
        assert exc.value.stage == "post-install"
