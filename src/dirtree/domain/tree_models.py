from __future__ import annotations

"""
Directory Tree Operation Models.

Provides the recorded effects produced by the outline interpreter. A list of
these operations is always in depth-first pre-order: a directory's mkdir
precedes every operation on its children.
"""

from dataclasses import dataclass
from typing import Union

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MakeDirOp:
    """
    Creation of a directory (clearing it first when requested).

    Attributes:
        path: Path relative to the current working directory.
    """
    path: str

    @property
    def kind(self) -> str:
        return "mkdir"


@dataclass(frozen=True)
class WriteFileOp:
    """
    Write of a file, parent directories included.

    Attributes:
        path: Path relative to the current working directory.
        contents: Newline-joined file body ("" for an empty file).
    """
    path: str
    contents: str = ""

    @property
    def kind(self) -> str:
        return "write"


FileOp = Union[MakeDirOp, WriteFileOp]
