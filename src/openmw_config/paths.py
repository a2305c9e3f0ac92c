"""Platform default directories and filesystem probes.

These are the collaborators of the loader: they answer where the engine keeps
its configuration and user data by default, whether a path names an openmw.cfg
and whether a directory may be written to. None of them parse anything.
"""

import os
import sys
import warnings
from pathlib import Path

from .api import APP_DIRNAME, CONFIG_FILENAME, WRITE_PROBE
from .errors import ConfigIOError, ConfigNotFoundError, ConfigPathError

__all__ = [
    "default_config_path",
    "default_userdata_path",
    "default_data_local_path",
    "input_config_path",
    "can_write_to_dir",
    "is_file_writable",
]


def default_config_path() -> Path:
    """Directory which holds the user openmw.cfg by default.

    Returns
    -------
    Path
        `Documents/My Games/openmw` on Windows, `~/Library/Preferences/openmw`
        on macOS and `$XDG_CONFIG_HOME/openmw` (or `~/.config/openmw`)
        elsewhere
    """
    if sys.platform.startswith("win"):
        return Path.home() / "Documents" / "My Games" / APP_DIRNAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Preferences" / APP_DIRNAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_DIRNAME


def default_userdata_path() -> Path:
    """Directory for saves, screenshots, navmesh.db and data-local.

    Returns
    -------
    Path
        Same as the config directory on Windows,
        `~/Library/Application Support/openmw` on macOS and
        `$XDG_DATA_HOME/openmw` (or `~/.local/share/openmw`) elsewhere
    """
    if sys.platform.startswith("win"):
        return default_config_path()
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIRNAME

    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    return base / APP_DIRNAME


def default_data_local_path() -> Path:
    """Default data-local directory, which overrides all other data dirs."""
    return default_userdata_path() / "data"


def input_config_path(config_path: Path) -> Path:
    """Transposes an input file or directory path to an openmw.cfg path.

    Parameters
    ----------
    config_path : Path
        Path to an openmw.cfg file or to the directory containing one

    Returns
    -------
    Path
        Path to the openmw.cfg file

    Raises
    ------
    ConfigNotFoundError
        If the path does not exist, or is a directory without an openmw.cfg
    ConfigPathError
        If the path is neither a regular file nor a directory
    ConfigIOError
        If the path cannot be stat'ed
    """
    config_path = Path(config_path)
    try:
        exists = config_path.exists()
    except OSError as exc:
        raise ConfigIOError(config_path, exc) from exc

    if not exists:
        raise ConfigNotFoundError(config_path)

    if config_path.is_file():
        return config_path

    if config_path.is_dir():
        candidate = config_path / CONFIG_FILENAME
        if not candidate.is_file():
            raise ConfigNotFoundError(candidate)
        return candidate

    raise ConfigPathError(config_path)


def can_write_to_dir(directory: Path) -> bool:
    """Check whether a throwaway file can be created in a directory.

    Parameters
    ----------
    directory : Path
        Directory to probe

    Returns
    -------
    bool
        `True` if the probe file could be created (it is deleted right away)
    """
    probe = Path(directory) / WRITE_PROBE
    try:
        probe.touch()
    except OSError:
        return False

    try:
        probe.unlink()
    except OSError as exc:
        warnings.warn(f"Could not remove write probe {probe}: {exc}", stacklevel=2)

    return True


def is_file_writable(path: Path) -> bool:
    """Whether an existing file is not marked read-only."""
    try:
        return os.access(path, os.W_OK) and Path(path).is_file()
    except OSError:
        return False
