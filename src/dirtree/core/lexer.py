from __future__ import annotations

"""
Outline Lexer.

Turns an indented block of text into a flat token stream: one LINE token per
non-empty line, with one INDENT or UNDENT token per level of depth change
between lines. The stream is closed with UNDENTs back to level 0, so INDENT
and UNDENT counts always balance.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from dirtree.core.indent import IndentStyle
from dirtree.domain.tokens import Token, TokenKind
from dirtree.infra.fs import slurp

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def tokenize(text: str, style: Optional[IndentStyle] = None) -> Tuple[List[Token], IndentStyle]:
    """
    Lex a block of text, inferring its indent style on the way.

    Empty and whitespace-only lines produce no tokens.

    Args:
        text: Outline source.
        style: Style to start from; a fresh, uninferred style when omitted.

    Returns:
        Tuple[List[Token], IndentStyle]: Tokens and the style in effect at
        the end of the document.

    Raises:
        IndentationConsistencyError: A line does not fit the document's style.
    """
    style = style or IndentStyle()
    tokens: List[Token] = []
    current = 0

    for line in text.replace("\r", "").split("\n"):
        if not line.strip():
            continue

        level, style = style.measure(line)
        if level > current:
            tokens.extend(Token.indent() for _ in range(level - current))
        elif level < current:
            tokens.extend(Token.undent() for _ in range(current - level))
        current = level
        tokens.append(Token.line(line.strip()))

    tokens.extend(Token.undent() for _ in range(current))
    return tokens, style


def tokens_of(text: str, style: Optional[IndentStyle] = None) -> List[Token]:
    """Return only the token list of tokenize()."""
    return tokenize(text, style)[0]


def all_tokens_in_file(path: str) -> Iterator[Token]:
    """Yield the tokens of an outline stored in a file."""
    yield from tokens_of(slurp(path))


def token_table(tokens: Sequence[Token]) -> str:
    """
    Render tokens as a two-column table for debug output.

    Args:
        tokens: Tokens to render.

    Returns:
        str: Multi-line table text.
    """
    rows = [("kind", "text")]
    for tok in tokens:
        rows.append((tok.kind.value, tok.text if tok.kind is TokenKind.LINE else ""))

    width = max(len(kind) for kind, _ in rows)
    sep = "-" * (width + 2 + max(len(text) for _, text in rows))
    lines = [sep, "TOKENS", sep]
    for kind, text in rows:
        lines.append(f"{kind.ljust(width)}  {text}".rstrip())
    lines.append(sep)
    return "\n".join(lines)
