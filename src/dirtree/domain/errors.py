from __future__ import annotations

"""
Error Taxonomy.

All failures raised by the outline interpreter derive from DirTreeError.
Filesystem failures are not wrapped: OSError propagates unchanged.
"""

from typing import Optional


class DirTreeError(Exception):
    """Base exception for this project."""


class StructuralTokenError(DirTreeError):
    """Raised when the indent/undent token stream does not describe a valid tree."""


class IndentationConsistencyError(DirTreeError):
    """Raised when a line's indentation conflicts with the document's style."""

    def __init__(self, message: str, *, line: Optional[str] = None):
        super().__init__(f"{message} in {line!r}" if line is not None else message)
        self.line = line


class MixedIndentationError(IndentationConsistencyError):
    """Raised when TABs and spaces appear in the same indentation prefix."""


class IndentUnitMismatchError(IndentationConsistencyError):
    """Raised when a prefix does not fit the inferred indent unit."""


class PreconditionError(DirTreeError):
    """Raised when the target root exists but is not a directory."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class OptionsError(DirTreeError, TypeError):
    """Raised by strict option validation on a value of the wrong type."""
