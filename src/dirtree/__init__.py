from __future__ import annotations

"""
dirtree: create directory trees from indented outlines.

Facade over the interpreter, the indentation utilities and the file watcher.
"""

from dirtree.core.indent import (
    IndentStyle,
    get_one_indent,
    indent_level,
    indented,
    reset_one_indent,
    split_line,
    undented,
)
from dirtree.core.interpreter import (
    DirTreeBuilder,
    file_ops_table,
    set_dir_tree,
    set_dir_tree_from_file,
)
from dirtree.core.lexer import all_tokens_in_file, tokenize, tokens_of
from dirtree.core.watcher import (
    FileEventHandler,
    FsChange,
    FsChangeKind,
    watch_file,
    watch_files,
)
from dirtree.domain.errors import (
    DirTreeError,
    IndentationConsistencyError,
    IndentUnitMismatchError,
    MixedIndentationError,
    OptionsError,
    PreconditionError,
    StructuralTokenError,
)
from dirtree.domain.tokens import Token, TokenKind
from dirtree.domain.tree_models import FileOp, MakeDirOp, WriteFileOp
from dirtree.infra.logging import LoggingConfig, configure_logging

__version__ = "0.1.0"

__all__ = [
    "set_dir_tree",
    "set_dir_tree_from_file",
    "file_ops_table",
    "DirTreeBuilder",
    "FileOp",
    "MakeDirOp",
    "WriteFileOp",
    "Token",
    "TokenKind",
    "tokenize",
    "tokens_of",
    "all_tokens_in_file",
    "IndentStyle",
    "indent_level",
    "split_line",
    "indented",
    "undented",
    "reset_one_indent",
    "get_one_indent",
    "watch_file",
    "watch_files",
    "FileEventHandler",
    "FsChange",
    "FsChangeKind",
    "DirTreeError",
    "StructuralTokenError",
    "IndentationConsistencyError",
    "MixedIndentationError",
    "IndentUnitMismatchError",
    "PreconditionError",
    "OptionsError",
    "LoggingConfig",
    "configure_logging",
]
