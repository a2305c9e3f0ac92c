"""openmw.cfg chain loading and lossless rewriting.

This package provides a configuration loading system for OpenMW with:
- Recursive `config=` chains, loaded depth-first in declaration order
- Typed settings (directories, plugins, archives, fallbacks, encoding)
- Priority semantics encoded by the order of one flat list of settings
- Comment-preserving re-serialization of any single file of the chain

Main Entry Point
----------------
load_config : Load an openmw.cfg chain into a :class:`Configuration`
"""

from .configuration import Configuration
from .errors import (
    BadEncodingError,
    ConfigCycleError,
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigPathError,
    ConfigWriteError,
    DuplicateEntryError,
    InvalidGameSettingError,
    InvalidLineError,
)
from .gamesetting import GameSetting, GameSettingType
from .loader import load_config
from .meta import SettingMeta
from .paths import default_config_path, default_data_local_path, default_userdata_path
from .settings import (
    DirectorySetting,
    EncodingSetting,
    EncodingType,
    FileSetting,
    GenericSetting,
    Setting,
    SettingKind,
)
from .version import __version__

__all__ = [
    "load_config",
    "Configuration",
    "Setting",
    "SettingKind",
    "SettingMeta",
    "DirectorySetting",
    "FileSetting",
    "GameSetting",
    "GameSettingType",
    "EncodingSetting",
    "EncodingType",
    "GenericSetting",
    "default_config_path",
    "default_userdata_path",
    "default_data_local_path",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigPathError",
    "ConfigCycleError",
    "ConfigIOError",
    "ConfigWriteError",
    "DuplicateEntryError",
    "InvalidLineError",
    "InvalidGameSettingError",
    "BadEncodingError",
]
