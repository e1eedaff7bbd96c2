from __future__ import annotations

"""
Outline Token Models.

An outline is lexed into a flat stream of LINE tokens separated by INDENT
and UNDENT markers, one marker per level of depth change.
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    INDENT = "indent"
    UNDENT = "undent"
    LINE = "line"


@dataclass(frozen=True)
class Token:
    """
    One unit of the lexed outline.

    Attributes:
        kind: Marker or content discriminator.
        text: Stripped line text; empty for INDENT and UNDENT.
    """
    kind: TokenKind
    text: str = ""

    @classmethod
    def indent(cls) -> "Token":
        return cls(TokenKind.INDENT)

    @classmethod
    def undent(cls) -> "Token":
        return cls(TokenKind.UNDENT)

    @classmethod
    def line(cls, text: str) -> "Token":
        return cls(TokenKind.LINE, text)

    def __str__(self) -> str:
        if self.kind is TokenKind.LINE:
            return f"line {self.text!r}"
        return self.kind.value
