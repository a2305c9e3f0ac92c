"""openmw.cfg chain loader.

This module resolves a chain of openmw.cfg files into one ordered
:class:`~openmw_config.configuration.Configuration`.

Configuration Language
----------------------

Each non-comment line is a `key=value` pair, split on the first `=`. Blank
lines and lines starting with `#` are comments; they are attached to the next
directive (or kept as the closing comment of the file).

Directives:
    data=<dir>                 # Data directory (accumulated)
    resources=<dir>            # Engine resources (last one wins)
    user-data=<dir>            # Saves and screenshots (last one wins)
    data-local=<dir>           # Highest priority data dir (last one wins)
    content=<file>             # Plugin, unique across the chain
    fallback-archive=<file>    # BSA archive, unique across the chain
    groundcover=<file>         # Groundcover plugin, unique across the chain
    fallback=<key>,<value>     # Typed game setting (last one per key wins)
    encoding=<win125x>         # Text encoding (last one wins)
    config=<dir>               # Load <dir>/openmw.cfg after this file
    replace=<category>         # Forget everything loaded so far in a category

Any other key is kept verbatim.

Directory values may be quoted (`"..."`, with `&` as the escape character) and
may start with the `?userdata?` or `?userconfig?` tokens. Relative values are
anchored on the directory of the file which declares them.

Application Order:
    1. The file is read top to bottom, settings are appended in order
    2. Its `config=` entries are then loaded one by one, each one fully
       (including its own `config=` entries) before the next (depth-first)
    3. Once the whole chain is loaded, the `vfs` and `vfs-mw` subdirectories
       of the effective resources directory are prepended to the data
       directories and the effective data-local directory is created

Public Functions
----------------
load_config : Load an openmw.cfg chain (main entry point)
"""

import os
import warnings
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .api import (
    COMMENT_CHAR,
    CONFIG_FILENAME,
    KEY_CONFIG,
    KEY_REPLACE,
    REPLACE_ARCHIVES,
    REPLACE_CONFIG,
    REPLACE_CONTENT,
    REPLACE_DATA,
    REPLACE_DATA_LOCAL,
    REPLACE_FALLBACK,
    REPLACE_GROUNDCOVER,
    REPLACE_RESOURCES,
    REPLACE_USERDATA,
    TRAILER,
    VFS_DIRS,
)
from .configuration import Configuration
from .errors import (
    ConfigCycleError,
    ConfigIOError,
    DuplicateEntryError,
    InvalidLineError,
)
from .gamesetting import GameSetting
from .meta import CommentBuffer, SettingMeta
from .paths import default_config_path, input_config_path
from .resolve import quote, resolve_directory
from .settings import (
    DIRECTORY_KINDS,
    FILE_KINDS,
    DirectorySetting,
    EncodingSetting,
    FileSetting,
    GenericSetting,
    Setting,
    SettingKind,
)
from .utils.logger import logger

__all__ = ["load_config", "read_lines", "REPLACE_TARGETS"]

PathLike = Union[str, Path]

# Categories cleared by each replace= target
REPLACE_TARGETS = {
    REPLACE_CONTENT: (SettingKind.CONTENT,),
    REPLACE_DATA: (SettingKind.DATA,),
    REPLACE_FALLBACK: (SettingKind.GAME,),
    REPLACE_ARCHIVES: (SettingKind.ARCHIVE,),
    REPLACE_GROUNDCOVER: (SettingKind.GROUNDCOVER,),
    REPLACE_DATA_LOCAL: (SettingKind.DATA_LOCAL,),
    REPLACE_RESOURCES: (SettingKind.RESOURCES,),
    REPLACE_USERDATA: (SettingKind.USERDATA,),
    REPLACE_CONFIG: tuple(k for k in SettingKind if k is not SettingKind.SUBCONFIG),
}


def read_lines(cfg_path: Path) -> List[str]:
    """Read the lines of a configuration file.

    Parameters
    ----------
    cfg_path : Path
        Path to the file

    Returns
    -------
    List[str]
        Lines, without their line terminators

    Raises
    ------
    ConfigIOError
        If the file cannot be read or is not valid UTF-8
    """
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigIOError(cfg_path, exc) from exc

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    return lines


def _apply_replace(config: Configuration, value: str, cfg_path: Path):
    """Forget the settings of a category loaded so far.

    Parameters
    ----------
    config : Configuration
        Configuration accumulated so far
    value : str
        Replace target (e.g. `content`, `data`, `config`)
    cfg_path : Path
        File which declared the directive
    """
    kinds = REPLACE_TARGETS.get(value.lower())
    if kinds is None:
        warnings.warn(
            f"Unrecognized replace= option '{value}' in {cfg_path}, ignoring it",
            stacklevel=3,
        )
        return

    removed = config.clear_kinds(*kinds)
    logger.debug("replace=%s in %s dropped %d settings", value, cfg_path, removed)


def _parse_file(
    config: Configuration,
    cfg_path: Path,
    userdata_dir: Optional[Path],
    userconfig_dir: Optional[Path],
) -> List[Tuple[str, str]]:
    """Append the settings of one file to the configuration.

    Parameters
    ----------
    config : Configuration
        Configuration accumulated so far
    cfg_path : Path
        Absolute path to the openmw.cfg file
    userdata_dir : Path, optional
        Substitute for the `?userdata?` token
    userconfig_dir : Path, optional
        Substitute for the `?userconfig?` token

    Returns
    -------
    List[Tuple[str, str]]
        Deferred `config=` entries as (raw value, comment) pairs

    Raises
    ------
    InvalidLineError
        If a line is not a `key=value` pair
    DuplicateEntryError
        If a content, archive or groundcover entry is already defined
    InvalidGameSettingError
        If a `fallback=` value is not a `key,value` pair
    BadEncodingError
        If an `encoding=` value is not supported
    """
    config_dir = cfg_path.parent
    comments = CommentBuffer()
    sub_configs = []

    for line in read_lines(cfg_path):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(COMMENT_CHAR):
            comments.push(line)
            continue

        if "=" not in trimmed:
            raise InvalidLineError(trimmed, cfg_path)

        key, value = trimmed.split("=", 1)
        key, value = key.strip(), value.strip()

        if key == KEY_REPLACE:
            _apply_replace(config, value, cfg_path)
            generic = GenericSetting.from_value(key, value, cfg_path, comments)
            config.push(Setting(SettingKind.GENERIC, generic))
            continue

        kind = SettingKind.from_key(key)
        if kind in FILE_KINDS:
            existing = config.find_file(kind, value)
            if existing is not None:
                raise DuplicateEntryError(
                    kind.value, value, cfg_path, existing.meta.source_config
                )
            setting = FileSetting.from_value(value, cfg_path, comments)
            config.push(Setting(kind, setting))

        elif kind is SettingKind.GAME:
            setting = GameSetting.parse(value, cfg_path, comments)
            config.push(Setting(kind, setting))

        elif kind is SettingKind.ENCODING:
            setting = EncodingSetting.from_value(value, cfg_path, comments)
            config.set_singleton(kind, setting, same_file_only=True)

        elif kind is SettingKind.SUBCONFIG:
            sub_configs.append((value, comments.take()))

        elif kind in DIRECTORY_KINDS:
            setting = DirectorySetting.from_value(
                value,
                cfg_path,
                comments,
                config_dir=config_dir,
                userdata_dir=userdata_dir,
                userconfig_dir=userconfig_dir,
            )
            config.push(Setting(kind, setting))

        else:
            setting = GenericSetting.from_value(key, value, cfg_path, comments)
            config.push(Setting(kind, setting))

    # Whatever follows the last directive closes the file
    comments.discard(TRAILER)
    if comments:
        config.set_trailing_comment(cfg_path, comments.take())

    return sub_configs


def _load_config_recursive(
    config: Configuration,
    cfg_path: Path,
    include_stack: Optional[List[Path]] = None,
    userdata_dir: Optional[Path] = None,
    userconfig_dir: Optional[Path] = None,
):
    """Recursively load one file and its sub-configurations.

    Parameters
    ----------
    config : Configuration
        Configuration accumulated so far
    cfg_path : Path
        Path to the openmw.cfg file to load
    include_stack : List[Path], optional
        Files currently being loaded (for cycle detection)
    userdata_dir : Path, optional
        Substitute for the `?userdata?` token
    userconfig_dir : Path, optional
        Substitute for the `?userconfig?` token

    Raises
    ------
    ConfigCycleError
        If a file is referenced by one of its own sub-configurations
    """
    cfg_path = Path(os.path.abspath(cfg_path))

    # Cycle detection
    if include_stack is None:
        include_stack = []

    if cfg_path in include_stack:
        raise ConfigCycleError(include_stack + [cfg_path])

    include_stack = include_stack + [cfg_path]

    logger.debug("Loading configuration file %s", cfg_path)
    sub_configs = _parse_file(config, cfg_path, userdata_dir, userconfig_dir)

    # Process sub-configurations in declaration order, depth-first
    config_dir = cfg_path.parent
    for value, comment in sub_configs:
        sub_dir = resolve_directory(value, config_dir, userdata_dir, userconfig_dir)
        meta = SettingMeta(source_config=cfg_path, comment=comment)

        sub_path = sub_dir / CONFIG_FILENAME
        if not sub_path.is_file():
            # A config= entry may point at a directory without an openmw.cfg
            logger.debug("No %s in %s, skipping it", CONFIG_FILENAME, sub_dir)
            generic = GenericSetting(key=KEY_CONFIG, value=value, meta=meta)
            config.push(Setting(SettingKind.GENERIC, generic))
            continue

        setting = DirectorySetting(original=value, parsed=sub_dir, meta=meta)
        config.push(Setting(SettingKind.SUBCONFIG, setting))

        _load_config_recursive(
            config, sub_path, include_stack, userdata_dir, userconfig_dir
        )


def _finalize(config: Configuration):
    """Derive the data directories implied by resources= and data-local=."""
    resources = config.resources()
    if resources is not None:
        for index, name in enumerate(VFS_DIRS):
            path = resources.parsed / name
            setting = DirectorySetting(original=quote(path), parsed=path)
            config.insert(index, Setting(SettingKind.DATA, setting))

    data_local = config.data_local()
    if data_local is not None and not data_local.parsed.exists():
        try:
            data_local.parsed.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            warnings.warn(
                f"Attempted to create a data-local directory at "
                f"{data_local.parsed}, but failed: {exc}",
                stacklevel=3,
            )


def load_config(
    cfg_path: Optional[PathLike] = None,
    userdata_dir: Optional[PathLike] = None,
    userconfig_dir: Optional[PathLike] = None,
) -> Configuration:
    """Load an openmw.cfg chain.

    This is the main entry point for loading configuration files.

    See module docstring for the configuration language.

    Parameters
    ----------
    cfg_path : PathLike, optional
        Path to an openmw.cfg file, or to the directory which contains it.
        Defaults to the platform configuration directory.
    userdata_dir : PathLike, optional
        Substitute for the `?userdata?` token (defaults to the platform user
        data directory)
    userconfig_dir : PathLike, optional
        Substitute for the `?userconfig?` token (defaults to the platform
        configuration directory)

    Returns
    -------
    Configuration
        Resolved configuration

    Raises
    ------
    ConfigNotFoundError
        If no openmw.cfg exists at the requested location
    ConfigPathError
        If the path is neither a file nor a directory
    ConfigCycleError
        If a circular config= reference is detected
    DuplicateEntryError
        If a content, archive or groundcover entry is declared twice
    InvalidLineError
        If a line is not a `key=value` pair
    InvalidGameSettingError
        If a `fallback=` value is not a `key,value` pair
    BadEncodingError
        If an `encoding=` value is not supported
    ConfigIOError
        If a file cannot be read

    Examples
    --------
    >>> config = load_config("~/.config/openmw")
    >>> [c.value for c in config.content_files()]
    ['Morrowind.esm', 'Tribunal.esm', 'Bloodmoon.esm']
    """
    if cfg_path is None:
        cfg_path = default_config_path()
    if userdata_dir is not None:
        userdata_dir = Path(userdata_dir)
    if userconfig_dir is not None:
        userconfig_dir = Path(userconfig_dir)

    cfg_path = os.path.abspath(os.path.expanduser(cfg_path))
    root_config = input_config_path(Path(cfg_path))

    config = Configuration(root_config)
    _load_config_recursive(
        config, root_config, userdata_dir=userdata_dir, userconfig_dir=userconfig_dir
    )
    _finalize(config)

    logger.debug(
        "Loaded %d settings from %d configuration files",
        len(config),
        len(config.config_chain()),
    )

    return config
