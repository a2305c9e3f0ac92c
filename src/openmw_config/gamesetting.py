"""Typed `fallback=` game settings.

A fallback directive carries a `key,value` pair. The type of the value is
inferred from its text, in this order:

1. Three comma-separated integers in [0, 255] form a color
2. A number containing a `.` is a float
3. A 64-bit signed integer is an int
4. Anything else is kept verbatim as a string (commas included)
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import InvalidGameSettingError
from .meta import SettingMeta, take_comment

__all__ = ["GameSettingType", "GameSetting", "parse_color_value"]

_U8_RE = re.compile(r"^\+?\d+$")
_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Color = Tuple[int, int, int]
GameValue = Union[Color, float, int, str]


class GameSettingType(Enum):
    """Enumerates the value types a fallback setting can hold."""

    COLOR = "color"
    FLOAT = "float"
    INT = "int"
    STRING = "string"


def parse_color_value(value: str) -> Optional[Color]:
    """Parses an `r,g,b` triplet of unsigned 8-bit integers.

    Parameters
    ----------
    value : str
        Value text

    Returns
    -------
    Tuple[int, int, int], optional
        Color components, or `None` if the text is not a color
    """
    tokens = [token.strip() for token in value.split(",")]
    if len(tokens) != 3:
        return None

    color = []
    for token in tokens:
        if not _U8_RE.match(token) or int(token) > 255:
            return None
        color.append(int(token))

    return tuple(color)


def _parse_float(value: str) -> Optional[float]:
    if "." not in value or not _FLOAT_RE.match(value):
        return None

    return float(value)


def _parse_int(value: str) -> Optional[int]:
    if not _INT_RE.match(value):
        return None

    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        return None

    return number


@dataclass(eq=False)
class GameSetting:
    """Typed fallback setting.

    Attributes
    ----------
    key : str
        Name of the game setting (e.g. `Weather_Clear_Sky_Sunrise_Color`)
    kind : GameSettingType
        Inferred value type
    value : Union[Tuple[int, int, int], float, int, str]
        Typed value
    meta : SettingMeta
        Origin of the setting
    original : str, optional
        Value text as written in the file. Settings built through the API have
        none and are rendered canonically.
    """

    key: str
    kind: GameSettingType
    value: GameValue
    meta: SettingMeta = field(default_factory=SettingMeta)
    original: Optional[str] = None

    @classmethod
    def parse(
        cls,
        text: str,
        source_config: Optional[Path] = None,
        comment=None,
    ) -> "GameSetting":
        """Parses the text following `fallback=`.

        Parameters
        ----------
        text : str
            `key,value` text
        source_config : Path, optional
            Configuration file which declared the setting
        comment : Union[str, CommentBuffer], optional
            Preceding comment block. A buffer is consumed.

        Returns
        -------
        GameSetting
            Typed game setting

        Raises
        ------
        InvalidGameSettingError
            If the text does not contain a comma
        """
        tokens = text.split(",", 1)
        if len(tokens) < 2:
            raise InvalidGameSettingError(text, source_config)

        key, value = tokens
        kind, typed = cls.infer(value)
        meta = SettingMeta(source_config=source_config, comment=take_comment(comment))

        return cls(key=key, kind=kind, value=typed, meta=meta, original=value)

    @staticmethod
    def infer(value: str) -> Tuple[GameSettingType, GameValue]:
        """Infers the type of a value text.

        Parameters
        ----------
        value : str
            Value text (the part after the key and its comma)

        Returns
        -------
        Tuple[GameSettingType, Union[Tuple[int, int, int], float, int, str]]
            Value type and typed value
        """
        color = parse_color_value(value)
        if color is not None:
            return GameSettingType.COLOR, color

        number = _parse_float(value)
        if number is not None:
            return GameSettingType.FLOAT, number

        integer = _parse_int(value)
        if integer is not None:
            return GameSettingType.INT, integer

        return GameSettingType.STRING, value

    def value_text(self) -> str:
        """Value rendered as openmw.cfg text."""
        if self.original is not None:
            return self.original

        if self.kind is GameSettingType.COLOR:
            return ",".join(str(c) for c in self.value)

        return str(self.value)

    @property
    def text(self):
        """`key,value` text written after `fallback=`."""
        return f"{self.key},{self.value_text()}"

    def __eq__(self, other):
        if isinstance(other, GameSetting):
            return self.kind is other.kind and self.key == other.key
        if isinstance(other, str):
            return self.key == other
        return NotImplemented

    def __hash__(self):
        return hash(self.key)
