"""Origin metadata shared by every setting record.

This module defines where a setting came from (its declaring file) and the
comment block that preceded it, along with the accumulator the loader uses to
collect those comment blocks.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

__all__ = ["SettingMeta", "CommentBuffer", "take_comment"]


@dataclass
class SettingMeta:
    """Origin of a setting.

    Attributes
    ----------
    source_config : Path, optional
        Configuration file which declared the setting. `None` for settings
        synthesized by the loader, which are never written back.
    comment : str
        Verbatim block of comment and blank lines preceding the directive,
        each line terminated by a newline
    """

    source_config: Optional[Path] = None
    comment: str = ""


class CommentBuffer:
    """Accumulates the comment lines which precede the next directive.

    The accumulated block is handed over exactly once through :meth:`take`,
    which empties the buffer.
    """

    def __init__(self):
        self._lines: List[str] = []

    def __bool__(self):
        return bool(self._lines)

    def push(self, line: str):
        """Append one comment or blank line (without its newline)."""
        self._lines.append(line + "\n")

    def discard(self, line: str):
        """Drop every accumulated line equal to `line`."""
        self._lines = [l for l in self._lines if l != line + "\n"]

    def take(self) -> str:
        """Move the accumulated block out of the buffer.

        Returns
        -------
        str
            Comment block, empty if nothing was accumulated
        """
        comment = "".join(self._lines)
        self._lines = []
        return comment


def take_comment(comment: Union[str, CommentBuffer, None]) -> str:
    """Comment text from either a buffer (consumed) or a plain string."""
    if isinstance(comment, CommentBuffer):
        return comment.take()

    return comment or ""
