"""Re-serialization of openmw.cfg files.

Two renderings of a :class:`~openmw_config.configuration.Configuration` are
provided:

- :func:`serialize` reconstructs the text of exactly one file of the chain,
  from the settings whose source is that file. Comment blocks and the original
  value text are written back verbatim, so a file whose settings were not
  modified is reproduced byte for byte, followed by a trailer line.
- :func:`serialize_composite` renders the flattened, effective configuration.
  It is meant for inspection: origins, tokens and comments are lost.
"""

from pathlib import Path

from .api import (
    KEY_ARCHIVE,
    KEY_CONTENT,
    KEY_DATA,
    KEY_DATA_LOCAL,
    KEY_ENCODING,
    KEY_FALLBACK,
    KEY_GROUNDCOVER,
    KEY_RESOURCES,
    KEY_USERDATA,
    TRAILER,
)
from .errors import ConfigIOError, ConfigWriteError
from .paths import can_write_to_dir
from .resolve import quote
from .utils.logger import logger

__all__ = ["serialize", "serialize_composite", "write_config"]


def serialize(config, config_path: Path) -> str:
    """Text content of one file of the chain.

    Parameters
    ----------
    config : Configuration
        Resolved configuration
    config_path : Path
        Absolute path to the openmw.cfg to render

    Returns
    -------
    str
        File content, trailer included
    """
    chunks = []
    for setting in config.settings_for(config_path):
        chunks.append(f"{setting.meta.comment}{setting.line()}\n")

    chunks.append(config.trailing_comment(config_path))
    chunks.append(TRAILER + "\n")

    return "".join(chunks)


def serialize_composite(config) -> str:
    """Flattened, effective view of the whole chain.

    Parameters
    ----------
    config : Configuration
        Resolved configuration

    Returns
    -------
    str
        One directive per line, singletons first, then archives, data
        directories, content files, groundcover and game settings
    """
    lines = []
    for key, setting in (
        (KEY_RESOURCES, config.resources()),
        (KEY_USERDATA, config.userdata()),
        (KEY_DATA_LOCAL, config.data_local()),
    ):
        if setting is not None:
            lines.append(f"{key}={quote(setting.parsed)}")

    encoding = config.encoding()
    if encoding is not None:
        lines.append(f"{KEY_ENCODING}={encoding.encoding.value}")

    for archive in config.fallback_archives():
        lines.append(f"{KEY_ARCHIVE}={archive.value}")

    for directory in config.data_directories():
        lines.append(f"{KEY_DATA}={quote(directory.parsed)}")

    for content in config.content_files():
        lines.append(f"{KEY_CONTENT}={content.value}")

    for groundcover in config.groundcover():
        lines.append(f"{KEY_GROUNDCOVER}={groundcover.value}")

    for game_setting in config.game_settings():
        lines.append(f"{KEY_FALLBACK}={game_setting.text}")

    for generic in config.generic_settings():
        lines.append(f"{generic.key}={generic.value}")

    return "".join(line + "\n" for line in lines)


def write_config(config, config_path: Path):
    """Write one file of the chain to disk.

    Parameters
    ----------
    config : Configuration
        Resolved configuration
    config_path : Path
        Absolute path to the openmw.cfg to write

    Raises
    ------
    ConfigWriteError
        If the target directory does not exist or cannot be written to
    ConfigIOError
        If the operating system fails the write
    """
    target_dir = config_path.parent
    if not target_dir.is_dir():
        raise ConfigWriteError(config_path, f"{target_dir} is not a directory")

    if not can_write_to_dir(target_dir):
        raise ConfigWriteError(config_path, f"{target_dir} is not writable")

    text = serialize(config, config_path)
    try:
        with open(config_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as exc:
        raise ConfigIOError(config_path, exc) from exc

    logger.debug("Wrote %d bytes to %s", len(text.encode("utf-8")), config_path)
