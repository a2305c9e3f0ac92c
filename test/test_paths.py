"""Tests for the platform default directories and filesystem probes."""

import sys

import pytest

from openmw_config.errors import ConfigNotFoundError
from openmw_config.paths import (
    can_write_to_dir,
    default_config_path,
    default_data_local_path,
    default_userdata_path,
    input_config_path,
)


@pytest.mark.skipif(
    sys.platform.startswith("win") or sys.platform == "darwin",
    reason="XDG locations only apply to other platforms",
)
class TestDefaultPaths:
    """Test suite for the XDG default directories."""

    def test_xdg_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "conf"))
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

        assert default_config_path() == tmp_path / "conf" / "openmw"
        assert default_userdata_path() == tmp_path / "share" / "openmw"
        assert default_data_local_path() == tmp_path / "share" / "openmw" / "data"

    def test_home_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert default_config_path() == tmp_path / ".config" / "openmw"
        assert default_userdata_path() == tmp_path / ".local" / "share" / "openmw"


class TestProbes:
    """Test suite for the input classification and the write probe."""

    def test_input_file(self, write_cfg):
        cfg_path = write_cfg(None, "")
        assert input_config_path(cfg_path) == cfg_path

    def test_input_directory(self, tmp_path, write_cfg):
        cfg_path = write_cfg("sub", "")
        assert input_config_path(tmp_path / "sub") == cfg_path

    def test_input_missing(self, tmp_path):
        with pytest.raises(ConfigNotFoundError) as excinfo:
            input_config_path(tmp_path / "missing.cfg")
        assert "missing.cfg" in str(excinfo.value)

    def test_write_probe(self, tmp_path):
        assert can_write_to_dir(tmp_path)
        assert list(tmp_path.iterdir()) == []
        assert not can_write_to_dir(tmp_path / "missing")
