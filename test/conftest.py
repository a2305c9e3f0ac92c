"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

import pytest


@pytest.fixture(name="write_cfg")
def fixture_write_cfg(tmp_path):
    """Returns a function which writes an openmw.cfg under `tmp_path`.

    Parameters
    ----------
    tmp_path : Path
       Generic pytest fixture used to handle temporary test files
    """

    def _write(subdir, text):
        directory = tmp_path / subdir if subdir else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        cfg_path = directory / "openmw.cfg"
        cfg_path.write_text(text, encoding="utf-8")
        return cfg_path

    return _write


@pytest.fixture(name="user_dirs")
def fixture_user_dirs(tmp_path):
    """Isolated user data and user config directories.

    Parameters
    ----------
    tmp_path : Path
       Generic pytest fixture used to handle temporary test files
    """
    userdata = tmp_path / "userdata"
    userconfig = tmp_path / "userconfig"
    userdata.mkdir()
    userconfig.mkdir()

    return {"userdata_dir": userdata, "userconfig_dir": userconfig}
