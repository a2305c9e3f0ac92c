"""Typed records for the directives of an openmw.cfg file.

Every directive found while loading a chain becomes one :class:`Setting`, a
tagged union of a :class:`SettingKind` and a kind-specific payload:

- :class:`DirectorySetting` for `data`, `user-data`, `data-local`,
  `resources` and `config` (sub-configurations)
- :class:`FileSetting` for `content`, `fallback-archive` and `groundcover`
- :class:`~openmw_config.gamesetting.GameSetting` for `fallback`
- :class:`EncodingSetting` for `encoding`
- :class:`GenericSetting` for any other key

Each payload carries a :class:`SettingMeta` recording the file which declared
it and the comment block which preceded it.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .api import (
    KEY_ARCHIVE,
    KEY_CONFIG,
    KEY_CONTENT,
    KEY_DATA,
    KEY_DATA_LOCAL,
    KEY_ENCODING,
    KEY_FALLBACK,
    KEY_GROUNDCOVER,
    KEY_RESOURCES,
    KEY_USERDATA,
)
from .errors import BadEncodingError
from .gamesetting import GameSetting
from .meta import CommentBuffer, SettingMeta, take_comment
from .resolve import quote, resolve_directory

__all__ = [
    "SettingMeta",
    "SettingKind",
    "CommentBuffer",
    "DirectorySetting",
    "FileSetting",
    "EncodingType",
    "EncodingSetting",
    "GenericSetting",
    "Setting",
]


class SettingKind(Enum):
    """Enumerates the recognized directive kinds.

    The value of each member is the directive key it is written with, except
    for `GENERIC` whose key is carried by the setting itself.
    """

    DATA = KEY_DATA
    USERDATA = KEY_USERDATA
    DATA_LOCAL = KEY_DATA_LOCAL
    RESOURCES = KEY_RESOURCES
    SUBCONFIG = KEY_CONFIG
    CONTENT = KEY_CONTENT
    ARCHIVE = KEY_ARCHIVE
    GROUNDCOVER = KEY_GROUNDCOVER
    GAME = KEY_FALLBACK
    ENCODING = KEY_ENCODING
    GENERIC = None

    @classmethod
    def from_key(cls, key: str) -> "SettingKind":
        """Kind of a directive key, `GENERIC` if it is not recognized."""
        for kind in cls:
            if kind.value == key:
                return kind

        return cls.GENERIC


# Kinds whose payload is a DirectorySetting
DIRECTORY_KINDS = (
    SettingKind.DATA,
    SettingKind.USERDATA,
    SettingKind.DATA_LOCAL,
    SettingKind.RESOURCES,
    SettingKind.SUBCONFIG,
)

# Kinds whose payload is a FileSetting
FILE_KINDS = (SettingKind.CONTENT, SettingKind.ARCHIVE, SettingKind.GROUNDCOVER)

# Kinds of which only the last entry is effective
SINGLETON_KINDS = (
    SettingKind.USERDATA,
    SettingKind.DATA_LOCAL,
    SettingKind.RESOURCES,
    SettingKind.ENCODING,
)


@dataclass(eq=False)
class DirectorySetting:
    """Directory-valued setting.

    Attributes
    ----------
    original : str
        Raw value text, as written in the file
    parsed : Path
        Absolute, normalized path derived from `original` at construction
    meta : SettingMeta
        Origin of the setting
    """

    original: str
    parsed: Path
    meta: SettingMeta = field(default_factory=SettingMeta)

    @classmethod
    def from_value(
        cls,
        value: str,
        source_config: Optional[Path],
        comment: Union[str, CommentBuffer, None] = None,
        config_dir: Optional[Path] = None,
        userdata_dir: Optional[Path] = None,
        userconfig_dir: Optional[Path] = None,
    ) -> "DirectorySetting":
        """Builds a directory setting from its raw value text.

        Parameters
        ----------
        value : str
            Raw value text
        source_config : Path, optional
            Configuration file which declared the value
        comment : Union[str, CommentBuffer], optional
            Preceding comment block. A buffer is consumed.
        config_dir : Path, optional
            Directory relative values are anchored on. Defaults to the
            parent of `source_config`.
        userdata_dir : Path, optional
            Substitute for the `?userdata?` token
        userconfig_dir : Path, optional
            Substitute for the `?userconfig?` token

        Returns
        -------
        DirectorySetting
            Directory setting
        """
        if config_dir is None:
            assert source_config is not None, (
                "Must provide either the declaring file or its directory."
            )
            config_dir = Path(source_config).parent

        parsed = resolve_directory(value, config_dir, userdata_dir, userconfig_dir)
        meta = SettingMeta(source_config=source_config, comment=take_comment(comment))

        return cls(original=value, parsed=parsed, meta=meta)

    @classmethod
    def from_path(
        cls,
        path: Path,
        source_config: Optional[Path],
        comment: Union[str, CommentBuffer, None] = None,
    ) -> "DirectorySetting":
        """Builds a directory setting from an already resolved path."""
        parsed = Path(path)
        config_dir = Path(source_config).parent if source_config else parsed
        return cls.from_value(quote(parsed), source_config, comment, config_dir)

    @property
    def text(self):
        """Value text written back to the file."""
        return self.original

    def __eq__(self, other):
        if isinstance(other, DirectorySetting):
            return self.parsed == other.parsed
        if isinstance(other, (str, Path)):
            return self.parsed == Path(other)
        return NotImplemented

    def __hash__(self):
        return hash(self.parsed)


@dataclass(eq=False)
class FileSetting:
    """File-name-valued setting (content, archive, groundcover).

    Two file settings are equal if their names are equal, wherever they were
    declared.
    """

    value: str
    meta: SettingMeta = field(default_factory=SettingMeta)

    @classmethod
    def from_value(
        cls,
        value: str,
        source_config: Optional[Path],
        comment: Union[str, CommentBuffer, None] = None,
    ) -> "FileSetting":
        """Builds a file setting, consuming the comment buffer."""
        meta = SettingMeta(source_config=source_config, comment=take_comment(comment))
        return cls(value=value, meta=meta)

    @property
    def text(self):
        return self.value

    def __eq__(self, other):
        if isinstance(other, FileSetting):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return self.value


class EncodingType(Enum):
    """Enumerates the supported code pages."""

    WIN1250 = "win1250"
    WIN1251 = "win1251"
    WIN1252 = "win1252"

    def __str__(self):
        return self.value


@dataclass(eq=False)
class EncodingSetting:
    """Text encoding of the game data files."""

    encoding: EncodingType
    meta: SettingMeta = field(default_factory=SettingMeta)

    @classmethod
    def from_value(
        cls,
        value: str,
        source_config: Optional[Path],
        comment: Union[str, CommentBuffer, None] = None,
    ) -> "EncodingSetting":
        """Parses an encoding name.

        Raises
        ------
        BadEncodingError
            If the value is not one of the supported code pages
        """
        try:
            encoding = EncodingType(value)
        except ValueError as exc:
            raise BadEncodingError(value, source_config) from exc

        meta = SettingMeta(source_config=source_config, comment=take_comment(comment))
        return cls(encoding=encoding, meta=meta)

    @property
    def text(self):
        return self.encoding.value

    def __eq__(self, other):
        if isinstance(other, EncodingSetting):
            return self.encoding == other.encoding
        if isinstance(other, EncodingType):
            return self.encoding == other
        return NotImplemented

    def __hash__(self):
        return hash(self.encoding)


@dataclass(eq=False)
class GenericSetting:
    """Passthrough for a directive key which is not otherwise recognized."""

    key: str
    value: str
    meta: SettingMeta = field(default_factory=SettingMeta)

    @classmethod
    def from_value(
        cls,
        key: str,
        value: str,
        source_config: Optional[Path],
        comment: Union[str, CommentBuffer, None] = None,
    ) -> "GenericSetting":
        meta = SettingMeta(source_config=source_config, comment=take_comment(comment))
        return cls(key=key, value=value, meta=meta)

    @property
    def text(self):
        return self.value


Payload = Union[
    DirectorySetting, FileSetting, GameSetting, EncodingSetting, GenericSetting
]


@dataclass
class Setting:
    """One directive of the resolved configuration chain.

    Attributes
    ----------
    kind : SettingKind
        Directive kind
    value : Payload
        Kind-specific payload
    """

    kind: SettingKind
    value: Payload

    @property
    def meta(self) -> SettingMeta:
        """Origin of the setting."""
        return self.value.meta

    @property
    def source_config(self) -> Optional[Path]:
        """Configuration file which declared the setting."""
        return self.value.meta.source_config

    @property
    def directive(self) -> str:
        """Key the setting is written with."""
        if self.kind is SettingKind.GENERIC:
            return self.value.key

        return self.kind.value

    def line(self) -> str:
        """Directive line as written in the file, without its comment."""
        return f"{self.directive}={self.value.text}"

    def __str__(self):
        return f"{self.meta.comment}{self.line()}"
