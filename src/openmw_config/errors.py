"""Typed exceptions for openmw.cfg loading and writing.

Every exception carries the offending value and the configuration file which
produced it, so that callers can report precise diagnostics.
"""

from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]


class ConfigError(Exception):
    """Base exception for all configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when no openmw.cfg exists at the requested location."""

    def __init__(self, config_path: PathLike):
        """Initialize with the missing path.

        Parameters
        ----------
        config_path : PathLike
            File or directory in which an openmw.cfg was expected
        """
        self.config_path = Path(config_path)
        super().__init__(f"Cannot find an openmw.cfg at: {self.config_path}")


class ConfigPathError(ConfigError):
    """Raised when a path is neither a regular file nor a directory."""

    def __init__(self, config_path: PathLike, message: Optional[str] = None):
        self.config_path = Path(config_path)
        if message is None:
            message = (
                f"Unable to determine whether {self.config_path} was a file "
                "or directory, refusing to read."
            )
        super().__init__(message)


class DuplicateEntryError(ConfigError):
    """Raised when a content, archive or groundcover name appears twice.

    Attributes
    ----------
    category : str
        Directive key of the duplicated entry (e.g. `content`)
    value : str
        Duplicated file name
    config_path : Path
        Configuration file of the second occurrence (or the file the entry
        was going to be added to, for API calls)
    first_config : Path, optional
        Configuration file of the first occurrence
    from_api : bool
        `True` if the duplicate came from an `add_*` call rather than a file
    """

    def __init__(
        self,
        category: str,
        value: str,
        config_path: Optional[PathLike],
        first_config: Optional[PathLike] = None,
        from_api: bool = False,
    ):
        self.category = category
        self.value = value
        self.config_path = Path(config_path) if config_path is not None else None
        self.first_config = Path(first_config) if first_config is not None else None
        self.from_api = from_api

        if from_api:
            message = (
                f"{value} cannot be added to the configuration as a {category} "
                f"entry because it was already defined by: {self.first_config}"
            )
        else:
            message = (
                f"{value} has appeared in the {category} list twice. Its first "
                f"occurrence was in: {self.first_config}, its second occurrence "
                f"was in: {self.config_path}"
            )
        super().__init__(message)


class InvalidLineError(ConfigError):
    """Raised when a non-comment line is not a `key=value` pair."""

    def __init__(self, value: str, config_path: PathLike):
        self.value = value
        self.config_path = Path(config_path)
        super().__init__(
            f"Invalid pair in openmw.cfg '{value}' was defined by {self.config_path}"
        )


class InvalidGameSettingError(ConfigError):
    """Raised when a `fallback=` value is not a `key,value` pair."""

    def __init__(self, value: str, config_path: Optional[PathLike]):
        self.value = value
        self.config_path = Path(config_path) if config_path is not None else None
        super().__init__(
            f"Invalid fallback setting '{value}' in config file '{self.config_path}'"
        )


class BadEncodingError(ConfigError):
    """Raised when an `encoding=` value is not a supported code page."""

    def __init__(self, value: str, config_path: Optional[PathLike]):
        self.value = value
        self.config_path = Path(config_path) if config_path is not None else None
        super().__init__(
            f"Invalid encoding type: '{value}' in config file {self.config_path}"
        )


class ConfigIOError(ConfigError):
    """Raised when the operating system fails a read, write or stat call.

    Undecodable (non UTF-8) file contents are reported the same way. The
    original exception is chained as `__cause__`.
    """

    def __init__(self, config_path: PathLike, error: Exception):
        self.config_path = Path(config_path)
        self.error = error
        super().__init__(f"IO error on {self.config_path}: {error}")


class ConfigCycleError(ConfigError):
    """Raised when a circular `config=` dependency is detected."""

    def __init__(self, cycle_path: List[PathLike]):
        """Initialize with the cycle path.

        Parameters
        ----------
        cycle_path : List[PathLike]
            List of file paths showing the include cycle
        """
        self.cycle_path = [Path(p) for p in cycle_path]
        self.config_path = self.cycle_path[-1]
        cycle_str = " -> ".join(str(p) for p in self.cycle_path)
        super().__init__(f"Circular config= reference detected: {cycle_str}")


class ConfigWriteError(ConfigError):
    """Raised when a configuration cannot be written to its target."""

    def __init__(self, config_path: PathLike, reason: str):
        self.config_path = Path(config_path)
        self.reason = reason
        super().__init__(f"Cannot write {self.config_path}: {reason}")
