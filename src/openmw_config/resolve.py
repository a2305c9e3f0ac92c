"""Resolution of directory values found in openmw.cfg files.

A raw value such as `"?userdata?/data files"` or `../common` is turned into an
absolute, lexically normalized path:

1. Quoted values are unquoted, `&` escaping the character that follows it.
2. `?userdata?` and `?userconfig?` prefixes are replaced by the user data and
   user config directories.
3. Both `/` and `\\` become the host separator.
4. Relative paths are anchored on the directory of the declaring file.
5. `.` and `..` components are collapsed without touching the filesystem.
"""

import os
from pathlib import Path, PurePath
from typing import Optional

from .api import ESCAPE_CHAR, QUOTE_CHAR, TOKEN_USERCONFIG, TOKEN_USERDATA
from .paths import default_config_path, default_userdata_path

__all__ = ["unquote", "quote", "normalize_path", "resolve_directory"]


def unquote(value: str) -> str:
    """Strip the quotes of a quoted value, honouring `&` escapes.

    Values which do not start with a quote are returned unchanged. A missing
    closing quote simply ends the value at the end of the string.

    Parameters
    ----------
    value : str
        Raw value text

    Returns
    -------
    str
        Unquoted value
    """
    if not value.startswith(QUOTE_CHAR):
        return value

    result = []
    i = 1
    while i < len(value):
        char = value[i]
        if char == ESCAPE_CHAR:
            i += 1
            if i < len(value):
                result.append(value[i])
        elif char == QUOTE_CHAR:
            break
        else:
            result.append(char)
        i += 1

    return "".join(result)


def normalize_path(path: PurePath) -> Path:
    """Lexically collapse `.` and `..` components of a path.

    This is not canonicalization: symlinks are not resolved and the path does
    not need to exist. A `..` never pops the root or drive of the path.

    Parameters
    ----------
    path : PurePath
        Path to normalize

    Returns
    -------
    Path
        Normalized path
    """
    path = PurePath(path)
    anchor = path.anchor
    parts = path.parts[1:] if anchor else path.parts

    result = []
    for part in parts:
        if part == ".":
            continue
        if part == "..":
            if result:
                result.pop()
            continue
        result.append(part)

    return Path(anchor, *result)


def _replace_token(value: str, token: str, base: Path) -> Optional[str]:
    """Substitute a leading path token, or return `None` if absent."""
    if not value.startswith(token):
        return None

    suffix = value[len(token) :].lstrip("/\\")
    if not suffix:
        return str(base)

    return str(Path(base) / suffix)


def resolve_directory(
    value: str,
    config_dir: Path,
    userdata_dir: Optional[Path] = None,
    userconfig_dir: Optional[Path] = None,
) -> Path:
    """Parse a directory value according to the openmw.cfg rules.

    Parameters
    ----------
    value : str
        Raw value, as written after `=` in the configuration file
    config_dir : Path
        Directory of the configuration file which declared the value
    userdata_dir : Path, optional
        Substitute for `?userdata?` (defaults to the platform location)
    userconfig_dir : Path, optional
        Substitute for `?userconfig?` (defaults to the platform location)

    Returns
    -------
    Path
        Absolute, normalized path
    """
    data_dir = unquote(value)

    if data_dir.startswith(TOKEN_USERDATA):
        base = userdata_dir if userdata_dir is not None else default_userdata_path()
        data_dir = _replace_token(data_dir, TOKEN_USERDATA, base)
    elif data_dir.startswith(TOKEN_USERCONFIG):
        base = userconfig_dir if userconfig_dir is not None else default_config_path()
        data_dir = _replace_token(data_dir, TOKEN_USERCONFIG, base)

    data_dir = data_dir.replace("/", os.sep).replace("\\", os.sep)

    path = Path(data_dir)
    if not path.is_absolute():
        path = Path(config_dir) / path

    return normalize_path(path)


def quote(path: PurePath) -> str:
    """Render a path as a quoted openmw.cfg value.

    This is the inverse of :func:`unquote`: `&` and `"` are escaped with `&`.

    Parameters
    ----------
    path : PurePath
        Path to render

    Returns
    -------
    str
        Quoted value text
    """
    text = str(path)
    text = text.replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)
    text = text.replace(QUOTE_CHAR, ESCAPE_CHAR + QUOTE_CHAR)
    return f"{QUOTE_CHAR}{text}{QUOTE_CHAR}"
