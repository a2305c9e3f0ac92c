"""Ordered model of a fully resolved openmw.cfg chain.

The :class:`Configuration` keeps every directive of the chain in a single list,
in the order in which it was encountered. That order is the priority: a later
entry overrides an earlier one for singleton categories and game settings, and
it is the load order for data directories and content files.

Two views are derived from that one list:

- the effective view (`data_directories()`, `game_settings()`, `resources()`,
  ...), which is what the engine consumes
- the per-file view (`settings_for(path)`), which is what is written back when
  one file of the chain is saved
"""

import os
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from .api import CONFIG_FILENAME
from .errors import ConfigPathError, DuplicateEntryError
from .gamesetting import GameSetting
from .paths import is_file_writable
from .serializer import serialize, serialize_composite, write_config
from .settings import (
    FILE_KINDS,
    SINGLETON_KINDS,
    DirectorySetting,
    EncodingSetting,
    EncodingType,
    FileSetting,
    GenericSetting,
    Setting,
    SettingKind,
)

__all__ = ["Configuration"]

PathLike = Union[str, Path]


def _absolute(path: PathLike) -> Path:
    """Absolute, lexically normalized version of a path."""
    return Path(os.path.abspath(path))


class Configuration:
    """Composed configuration of an openmw.cfg chain.

    Instances are built by :func:`openmw_config.load_config`. After loading,
    the configuration only changes through the mutation methods below.

    Attributes
    ----------
    root_config : Path
        Path to the openmw.cfg which was opened first
    """

    def __init__(
        self,
        root_config: PathLike,
        settings: Optional[Iterable[Setting]] = None,
        trailing_comments: Optional[Dict[Path, str]] = None,
    ):
        """Initialize the configuration.

        Parameters
        ----------
        root_config : PathLike
            Path to the first openmw.cfg of the chain
        settings : Iterable[Setting], optional
            Settings of the chain, in traversal order
        trailing_comments : Dict[Path, str], optional
            Comment block found after the last directive of each file
        """
        self.root_config = _absolute(root_config)
        self._settings: List[Setting] = list(settings or [])
        self._trailing_comments: Dict[Path, str] = dict(trailing_comments or {})

    def __repr__(self):
        return (
            f"{type(self).__name__}(root_config={str(self.root_config)!r}, "
            f"settings={len(self._settings)})"
        )

    def __str__(self):
        return serialize_composite(self)

    def __len__(self):
        return len(self._settings)

    # ------------------------------------------------------------------
    # Raw access used by the loader

    @property
    def settings(self) -> List[Setting]:
        """Copy of the ordered list of settings."""
        return list(self._settings)

    def push(self, setting: Setting):
        """Append a setting at the end of the chain order."""
        self._settings.append(setting)

    def insert(self, index: int, setting: Setting):
        """Insert a setting at a specific position of the chain order."""
        self._settings.insert(index, setting)

    def set_trailing_comment(self, config_path: PathLike, comment: str):
        """Store the comment block closing one file of the chain."""
        self._trailing_comments[_absolute(config_path)] = comment

    def trailing_comment(self, config_path: PathLike) -> str:
        """Comment block closing one file of the chain (may be empty)."""
        return self._trailing_comments.get(_absolute(config_path), "")

    def iter_kind(self, *kinds: SettingKind):
        """Yields the payloads of all settings of the given kinds, in order."""
        for setting in self._settings:
            if setting.kind in kinds:
                yield setting.value

    def last_of(self, kind: SettingKind):
        """Payload of the last setting of a kind, or `None`."""
        for setting in reversed(self._settings):
            if setting.kind is kind:
                return setting.value

        return None

    def clear_matching(self, predicate: Callable[[Setting], bool]) -> int:
        """Remove every setting for which `predicate` returns `True`.

        Parameters
        ----------
        predicate : Callable[[Setting], bool]
            Selection function

        Returns
        -------
        int
            Number of settings removed
        """
        kept = [setting for setting in self._settings if not predicate(setting)]
        removed = len(self._settings) - len(kept)
        self._settings = kept

        return removed

    def clear_kinds(self, *kinds: SettingKind) -> int:
        """Remove every setting of the given kinds."""
        return self.clear_matching(lambda setting: setting.kind in kinds)

    def set_singleton(self, kind: SettingKind, value, same_file_only: bool = False):
        """Set the effective value of a singleton category.

        The last entry of the category is overwritten in place if there is
        one, otherwise the new entry is appended. A `None` value removes every
        entry of the category, so that none is effective any more.

        Parameters
        ----------
        kind : SettingKind
            Singleton category
        value : Union[DirectorySetting, EncodingSetting], optional
            New payload
        same_file_only : bool, default False
            If `True`, only overwrite an entry declared by the same file as
            the new value, append otherwise
        """
        assert kind in SINGLETON_KINDS, f"Not a singleton category: {kind}"

        index = None
        for i in range(len(self._settings) - 1, -1, -1):
            if self._settings[i].kind is kind:
                index = i
                break

        if (
            index is not None
            and same_file_only
            and value is not None
            and self._settings[index].source_config != value.meta.source_config
        ):
            index = None

        if value is None:
            self.clear_kinds(kind)
        elif index is not None:
            self._settings[index] = Setting(kind, value)
        else:
            self._settings.append(Setting(kind, value))

    # ------------------------------------------------------------------
    # Chain

    def sub_configs(self) -> List[DirectorySetting]:
        """Sub-configuration directories loaded after the root, in order."""
        return list(self.iter_kind(SettingKind.SUBCONFIG))

    def config_chain(self) -> List[Path]:
        """Every openmw.cfg file of the chain, in load order."""
        chain = [self.root_config]
        for sub_config in self.sub_configs():
            chain.append(sub_config.parsed / CONFIG_FILENAME)

        return chain

    def user_config_file(self) -> Path:
        """Path to the user openmw.cfg, the last file of the chain."""
        return self.config_chain()[-1]

    def user_config_path(self) -> Path:
        """Directory of the user openmw.cfg."""
        return self.user_config_file().parent

    def is_user_config_writable(self) -> bool:
        """Whether the user openmw.cfg can be written to."""
        return is_file_writable(self.user_config_file())

    def settings_for(self, config_path: PathLike) -> List[Setting]:
        """Settings declared by one file of the chain, in order.

        Parameters
        ----------
        config_path : PathLike
            Path to the openmw.cfg file

        Returns
        -------
        List[Setting]
            Settings whose source is that file
        """
        config_path = _absolute(config_path)
        return [s for s in self._settings if s.source_config == config_path]

    # ------------------------------------------------------------------
    # Data directories

    def data_directories(self) -> List[DirectorySetting]:
        """Data directories, lowest priority first."""
        return list(self.iter_kind(SettingKind.DATA))

    def has_data_dir(self, path: PathLike) -> bool:
        """Whether a directory is part of the data directories."""
        path = _absolute(path)
        return any(d.parsed == path for d in self.data_directories())

    def add_data_directory(self, path: PathLike):
        """Append a data directory to the user configuration."""
        setting = DirectorySetting.from_path(_absolute(path), self.user_config_file())
        self.push(Setting(SettingKind.DATA, setting))

    def remove_data_directory(self, path: PathLike) -> bool:
        """Remove a data directory wherever it was declared.

        Returns
        -------
        bool
            `True` if at least one entry was removed
        """
        path = _absolute(path)
        removed = self.clear_matching(
            lambda s: s.kind is SettingKind.DATA and s.value.parsed == path
        )

        return removed > 0

    def set_data_directories(self, directories: Iterable[PathLike]):
        """Replace all data directories by the provided list."""
        self.clear_kinds(SettingKind.DATA)
        for directory in directories:
            if isinstance(directory, DirectorySetting):
                self.push(Setting(SettingKind.DATA, directory))
            else:
                self.add_data_directory(directory)

    # ------------------------------------------------------------------
    # Content files, archives and groundcover

    def find_file(self, kind: SettingKind, name: str) -> Optional[FileSetting]:
        """File setting of a kind with a given name, or `None`."""
        assert kind in FILE_KINDS, f"Not a file category: {kind}"
        for file in self.iter_kind(kind):
            if file.value == name:
                return file

        return None

    def _add_file(self, kind: SettingKind, name: str):
        existing = self.find_file(kind, name)
        if existing is not None:
            raise DuplicateEntryError(
                kind.value,
                name,
                self.user_config_file(),
                first_config=existing.meta.source_config,
                from_api=True,
            )

        setting = FileSetting.from_value(name, self.user_config_file())
        self.push(Setting(kind, setting))

    def _remove_file(self, kind: SettingKind, name: str) -> bool:
        removed = self.clear_matching(
            lambda s: s.kind is kind and s.value.value == name
        )

        return removed > 0

    def _set_files(self, kind: SettingKind, names: Iterable[str]):
        user_config = self.user_config_file()
        files = []
        for name in names:
            name = str(name)
            if name in files:
                raise DuplicateEntryError(
                    kind.value,
                    name,
                    user_config,
                    first_config=user_config,
                    from_api=True,
                )
            files.append(FileSetting.from_value(name, user_config))

        # Nothing is cleared until the whole list is known to be valid
        self.clear_kinds(kind)
        for setting in files:
            self.push(Setting(kind, setting))

    def content_files(self) -> List[FileSetting]:
        """Content files (plugins), in load order."""
        return list(self.iter_kind(SettingKind.CONTENT))

    def has_content_file(self, name: str) -> bool:
        return self.find_file(SettingKind.CONTENT, name) is not None

    def add_content_file(self, name: str):
        """Append a content file to the user configuration.

        Raises
        ------
        DuplicateEntryError
            If the content file is already part of the chain
        """
        self._add_file(SettingKind.CONTENT, name)

    def remove_content_file(self, name: str) -> bool:
        return self._remove_file(SettingKind.CONTENT, name)

    def set_content_files(self, names: Iterable[str]):
        """Replace all content files by the provided list."""
        self._set_files(SettingKind.CONTENT, names)

    def fallback_archives(self) -> List[FileSetting]:
        """Bethesda archives, in load order."""
        return list(self.iter_kind(SettingKind.ARCHIVE))

    def has_archive_file(self, name: str) -> bool:
        return self.find_file(SettingKind.ARCHIVE, name) is not None

    def add_archive_file(self, name: str):
        self._add_file(SettingKind.ARCHIVE, name)

    def remove_archive_file(self, name: str) -> bool:
        return self._remove_file(SettingKind.ARCHIVE, name)

    def set_fallback_archives(self, names: Iterable[str]):
        self._set_files(SettingKind.ARCHIVE, names)

    def groundcover(self) -> List[FileSetting]:
        """Groundcover plugins, in load order."""
        return list(self.iter_kind(SettingKind.GROUNDCOVER))

    def has_groundcover_file(self, name: str) -> bool:
        return self.find_file(SettingKind.GROUNDCOVER, name) is not None

    def add_groundcover_file(self, name: str):
        self._add_file(SettingKind.GROUNDCOVER, name)

    def remove_groundcover_file(self, name: str) -> bool:
        return self._remove_file(SettingKind.GROUNDCOVER, name)

    def set_groundcover(self, names: Iterable[str]):
        self._set_files(SettingKind.GROUNDCOVER, names)

    # ------------------------------------------------------------------
    # Game settings

    def game_settings(self) -> List[GameSetting]:
        """Effective game settings, one per key.

        When a key is declared several times, the last declaration wins. The
        result is ordered by the position of the winning declarations.
        """
        seen = set()
        effective = []
        for setting in reversed(self._settings):
            if setting.kind is not SettingKind.GAME:
                continue
            if setting.value.key in seen:
                continue
            seen.add(setting.value.key)
            effective.append(setting.value)

        return effective[::-1]

    def get_game_setting(self, key: str) -> Optional[GameSetting]:
        """Effective game setting of a key, or `None`."""
        for setting in reversed(self._settings):
            if setting.kind is SettingKind.GAME and setting.value.key == key:
                return setting.value

        return None

    def set_game_setting(self, setting: Union[GameSetting, str], value=None):
        """Set the effective value of a game setting.

        An entry of the same key declared by the user configuration is
        overwritten in place, otherwise the new entry is appended, which makes
        it override the earlier declarations.

        Parameters
        ----------
        setting : Union[GameSetting, str]
            Game setting, or its key
        value : str, optional
            Value text, if `setting` is a key
        """
        user_config = self.user_config_file()
        if not isinstance(setting, GameSetting):
            assert value is not None, "Must provide a value along with the key."
            setting = GameSetting.parse(f"{setting},{value}", user_config)
        if setting.meta.source_config is None:
            setting.meta.source_config = user_config

        for i in range(len(self._settings) - 1, -1, -1):
            current = self._settings[i]
            if (
                current.kind is SettingKind.GAME
                and current.value.key == setting.key
                and current.source_config == user_config
            ):
                setting.meta.comment = current.meta.comment
                self._settings[i] = Setting(SettingKind.GAME, setting)
                return

        self.push(Setting(SettingKind.GAME, setting))

    def remove_game_setting(self, key: str) -> int:
        """Remove every declaration of a game setting key."""
        return self.clear_matching(
            lambda s: s.kind is SettingKind.GAME and s.value.key == key
        )

    def set_game_settings(self, settings: Iterable[GameSetting]):
        """Replace all game settings by the provided list."""
        self.clear_kinds(SettingKind.GAME)
        user_config = self.user_config_file()
        for setting in settings:
            if setting.meta.source_config is None:
                setting.meta.source_config = user_config
            self.push(Setting(SettingKind.GAME, setting))

    # ------------------------------------------------------------------
    # Generic settings

    def generic_settings(self) -> List[GenericSetting]:
        """Settings with unrecognized keys, in order."""
        return list(self.iter_kind(SettingKind.GENERIC))

    def get_generic(self, key: str) -> Optional[GenericSetting]:
        """Last generic setting declared with a key, or `None`."""
        for setting in reversed(self._settings):
            if setting.kind is SettingKind.GENERIC and setting.value.key == key:
                return setting.value

        return None

    # ------------------------------------------------------------------
    # Singletons

    def _directory_singleton(self, kind, path: Optional[PathLike]):
        if path is None or isinstance(path, DirectorySetting):
            value = path
        else:
            value = DirectorySetting.from_path(_absolute(path), self.user_config_file())
        self.set_singleton(kind, value)

    def userdata(self) -> Optional[DirectorySetting]:
        """Effective user data directory (saves, screenshots, navmesh.db)."""
        return self.last_of(SettingKind.USERDATA)

    def set_userdata(self, path: Optional[PathLike]):
        self._directory_singleton(SettingKind.USERDATA, path)

    def data_local(self) -> Optional[DirectorySetting]:
        """Effective data-local directory, the highest priority data dir."""
        return self.last_of(SettingKind.DATA_LOCAL)

    def set_data_local(self, path: Optional[PathLike]):
        self._directory_singleton(SettingKind.DATA_LOCAL, path)

    def resources(self) -> Optional[DirectorySetting]:
        """Effective resources directory, the lowest priority data dir."""
        return self.last_of(SettingKind.RESOURCES)

    def set_resources(self, path: Optional[PathLike]):
        self._directory_singleton(SettingKind.RESOURCES, path)

    def encoding(self) -> Optional[EncodingSetting]:
        """Effective text encoding."""
        return self.last_of(SettingKind.ENCODING)

    def set_encoding(self, encoding: Union[EncodingType, str, None]):
        """Set the effective encoding.

        Raises
        ------
        BadEncodingError
            If a string is provided which is not a supported code page
        """
        if encoding is None:
            self.set_singleton(SettingKind.ENCODING, None)
            return

        value = encoding.value if isinstance(encoding, EncodingType) else encoding
        setting = EncodingSetting.from_value(value, self.user_config_file())
        self.set_singleton(SettingKind.ENCODING, setting)

    # ------------------------------------------------------------------
    # Writing

    def serialize(self, config_path: Optional[PathLike] = None) -> str:
        """Text of one file of the chain (the user config by default)."""
        if config_path is None:
            config_path = self.user_config_file()

        return serialize(self, _absolute(config_path))

    def save_user(self) -> Path:
        """Write the user openmw.cfg.

        Returns
        -------
        Path
            Path of the written file

        Raises
        ------
        ConfigWriteError
            If the target directory does not exist or is not writable
        ConfigIOError
            If writing fails
        """
        target = self.user_config_file()
        write_config(self, target)

        return target

    def save_subconfig(self, path: PathLike) -> Path:
        """Write one sub-configuration of the chain.

        Parameters
        ----------
        path : PathLike
            Sub-configuration directory, or its openmw.cfg

        Returns
        -------
        Path
            Path of the written file

        Raises
        ------
        ConfigPathError
            If the path is not a loaded sub-configuration
        ConfigWriteError
            If the target directory does not exist or is not writable
        ConfigIOError
            If writing fails
        """
        path = _absolute(path)
        directory = path.parent if path.name == CONFIG_FILENAME else path

        if not any(sub.parsed == directory for sub in self.sub_configs()):
            raise ConfigPathError(
                path,
                f"{path} is not a sub-configuration of the chain rooted at "
                f"{self.root_config}, refusing to write it.",
            )

        target = directory / CONFIG_FILENAME
        write_config(self, target)

        return target

