from __future__ import annotations

"""
Directory Tree Interpreter.

Builds a directory tree from an indented outline such as:

    README.md
        # My project
    /src
        main.py
            print("hello")
        /utils
    /tests

A name beginning with '/' is a directory, any other name is a file, and the
lines indented under a file are its contents. The walk is a recursive
descent over the token stream; in scaffold mode the resulting operations are
recorded instead of applied.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from dirtree.core.indent import IndentStyle, indented
from dirtree.core.lexer import token_table, tokenize
from dirtree.domain.config import get_default_scaffold_options, validate_options
from dirtree.domain.errors import PreconditionError, StructuralTokenError
from dirtree.domain.tokens import Token, TokenKind
from dirtree.domain.tree_models import FileOp, MakeDirOp, WriteFileOp
from dirtree.infra.fs import (
    PATH_DIR,
    PATH_MISSING,
    barf,
    get_path_type,
    mk_dir,
    rel_path,
    slurp,
)

logger = logging.getLogger(__name__)

DIR_MARKER = "/"

# -----------------------------------------------------------------------------
# TOKEN CURSOR
# -----------------------------------------------------------------------------

class TokenCursor:
    """Read position over a token list; tokens are consumed front to back, once."""

    def __init__(self, tokens: Sequence[Token]):
        self._tokens = list(tokens)
        self._pos = 0

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def remaining(self) -> List[Token]:
        return self._tokens[self._pos:]

    def peek(self) -> Optional[Token]:
        return None if self.exhausted else self._tokens[self._pos]

    def next_is(self, kind: TokenKind) -> bool:
        tok = self.peek()
        return tok is not None and tok.kind is kind

    def take(self) -> Token:
        if self.exhausted:
            raise StructuralTokenError("Unexpected end of token stream")
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def expect(self, kind: TokenKind, context: str) -> Token:
        tok = self.peek()
        if tok is None or tok.kind is not kind:
            found = "end of stream" if tok is None else str(tok)
            raise StructuralTokenError(f"{kind.value.upper()} expected {context}, got {found}")
        return self.take()


# -----------------------------------------------------------------------------
# TREE BUILDER
# -----------------------------------------------------------------------------

class DirTreeBuilder:
    """
    Walks a token stream and creates (or records) the directories and files it describes.

    Attributes:
        scaffold: Record operations instead of touching the filesystem.
        clear: Empty each created directory that already exists (live mode).
        debug: Trace the walk at DEBUG level.
        style: Indent style used to re-indent nested file content.
    """

    def __init__(
            self,
            *,
            scaffold: bool = False,
            clear: bool = False,
            debug: bool = False,
            style: Optional[IndentStyle] = None,
    ):
        self.scaffold = scaffold
        self.clear = clear
        self.debug = debug
        self.style = style or IndentStyle()
        self.file_ops: List[FileOp] = []
        self._depth = 0

    def build(self, root_dir: str, tokens: Sequence[Token]) -> List[FileOp]:
        """
        Create root_dir, then everything the tokens describe beneath it.

        Returns:
            List[FileOp]: Recorded operations in scaffold mode, else [].

        Raises:
            PreconditionError: root_dir exists and is not a directory.
            StructuralTokenError: The token stream is malformed.
        """
        check_root_dir(root_dir)

        self.file_ops = []
        self._make_dir(root_dir)

        cursor = TokenCursor(tokens)
        self._block_handler(root_dir, cursor)
        if not cursor.exhausted:
            leftover = ", ".join(str(tok) for tok in cursor.remaining())
            raise StructuralTokenError(f"Tokens remaining after parse: {leftover}")

        if self.debug and self.scaffold:
            self._trace("\n" + file_ops_table(self.file_ops))
        return self.file_ops if self.scaffold else []

    # .........................................................................
    # Handlers
    # .........................................................................

    def _file_handler(self, file_path: str, cursor: TokenCursor) -> None:
        self._enter("file_handler", file_path)
        lines: List[str] = []
        if cursor.next_is(TokenKind.INDENT):
            cursor.take()
            level = 0
            while level > 0 or not cursor.next_is(TokenKind.UNDENT):
                if cursor.exhausted:
                    raise StructuralTokenError(f"No UNDENT after contents of {file_path!r}")
                tok = cursor.take()
                if tok.kind is TokenKind.INDENT:
                    level += 1
                elif tok.kind is TokenKind.UNDENT:
                    level -= 1
                    if level < 0:
                        raise StructuralTokenError(f"Negative level in contents of {file_path!r}")
                else:
                    line = indented(tok.text, level, self.style)
                    self._trace(f"-- {line!r}")
                    lines.append(line)
            cursor.take()

        self._write_file(file_path, "\n".join(lines))
        self._exit("file_handler", file_path)

    def _dir_handler(self, dir_path: str, cursor: TokenCursor) -> None:
        self._enter("dir_handler", dir_path)
        self._make_dir(dir_path)
        if cursor.next_is(TokenKind.INDENT):
            cursor.take()
            self._block_handler(dir_path, cursor)
            cursor.expect(TokenKind.UNDENT, f"after contents of {dir_path!r}")
        self._exit("dir_handler", dir_path)

    def _block_handler(self, dir_path: str, cursor: TokenCursor) -> None:
        self._enter("block_handler", dir_path)
        while not cursor.exhausted and not cursor.next_is(TokenKind.UNDENT):
            tok = cursor.take()
            if tok.kind is TokenKind.INDENT:
                raise StructuralTokenError(f"Unexpected INDENT in {dir_path!r}")
            if tok.text.startswith(DIR_MARKER):
                self._dir_handler(f"{dir_path}{tok.text}", cursor)
            else:
                self._file_handler(f"{dir_path}/{tok.text}", cursor)
        self._exit("block_handler", dir_path)

    # .........................................................................
    # Effects
    # .........................................................................

    def _make_dir(self, dir_path: str) -> None:
        path = rel_path(dir_path)
        if self.scaffold:
            self.file_ops.append(MakeDirOp(path))
        else:
            mk_dir(path, self.clear)

    def _write_file(self, file_path: str, contents: str) -> None:
        path = rel_path(file_path)
        if self.scaffold:
            self.file_ops.append(WriteFileOp(path, contents))
        else:
            barf(path, contents)

    # .........................................................................
    # Tracing
    # .........................................................................

    def _trace(self, msg: str) -> None:
        if self.debug:
            logger.debug(f"{'   ' * self._depth}{msg}")

    def _enter(self, name: str, path: str) -> None:
        self._trace(f"-> {name}({path!r})")
        self._depth += 1

    def _exit(self, name: str, path: str) -> None:
        self._depth -= 1
        self._trace(f"<- {name}({path!r})")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def check_root_dir(root_dir: str) -> None:
    """Fail unless root_dir is an existing directory or does not exist yet."""
    ptype = get_path_type(root_dir)
    if ptype not in (PATH_DIR, PATH_MISSING):
        raise PreconditionError(f"root directory is a {ptype}", path=root_dir)


def set_dir_tree(
        root_dir: str,
        contents: str,
        options: Optional[Mapping[str, Any]] = None,
) -> List[FileOp]:
    """
    Populate root_dir with the directories and files described by an outline.

    Options:
        debug: Trace the walk at DEBUG level.
        clear: Empty root_dir (and any existing subdirectory) first.
        scaffold: Return the operations instead of performing them.

    Args:
        root_dir: Target directory; must be a directory or not exist.
        contents: Outline text.
        options: Option overrides, validated strictly.

    Returns:
        List[FileOp]: The ordered operations in scaffold mode, else [].

    Raises:
        PreconditionError: root_dir exists and is not a directory.
        StructuralTokenError: The outline's structure is malformed.
        IndentationConsistencyError: The outline mixes indentation styles.
        OSError: A live filesystem operation failed; earlier ones are kept.
    """
    opts, _ = validate_options(options, get_default_scaffold_options(), strict=True)
    check_root_dir(root_dir)

    tokens, style = tokenize(contents)
    if opts["debug"]:
        logger.debug("\n" + token_table(tokens))

    builder = DirTreeBuilder(
        scaffold=opts["scaffold"],
        clear=opts["clear"],
        debug=opts["debug"],
        style=style,
    )
    ops = builder.build(root_dir, tokens)
    logger.info(
        f"Directory tree {'recorded' if opts['scaffold'] else 'written'} at "
        f"{rel_path(root_dir)} ({len(tokens)} tokens)"
    )
    return ops


def set_dir_tree_from_file(
        root_dir: str,
        outline_path: str,
        options: Optional[Mapping[str, Any]] = None,
) -> List[FileOp]:
    """Same as set_dir_tree(), reading the outline from a file."""
    return set_dir_tree(root_dir, slurp(outline_path), options)


def file_ops_table(file_ops: Sequence[FileOp]) -> str:
    """
    Render recorded operations as a table, file contents listed under each write.

    Args:
        file_ops: Operations returned by set_dir_tree() in scaffold mode.

    Returns:
        str: Multi-line table text.
    """
    rows = []
    for op in file_ops:
        rows.append((op.kind, op.path))
        if isinstance(op, WriteFileOp) and op.contents:
            for line in op.contents.split("\n"):
                rows.append(("", line.replace("\t", "   ")))

    width = max([len("mkdir")] + [len(kind) for kind, _ in rows])
    body = [f"{kind.ljust(width)}  {text}".rstrip() for kind, text in rows]
    sep = "-" * max([len("FILE OPS")] + [len(line) for line in body])
    return "\n".join([sep, "FILE OPS", sep] + body + [sep])
