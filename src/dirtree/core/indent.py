from __future__ import annotations

"""
Indentation Style Inference and Level Conversion.

A document's indent unit (one TAB, or some fixed number of spaces) is not
declared: it is inferred from the first indented line and enforced for the
rest of the document. IndentStyle carries that unit as an immutable value so
that each parse infers and threads its own style.

The module-level helpers (indent_level, split_line, indented) also work
without an explicit style, in which case they share one process-wide unit
that is inferred on first use and cleared with reset_one_indent().
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from dirtree.domain.errors import (
    IndentationConsistencyError,
    IndentUnitMismatchError,
    MixedIndentationError,
)

logger = logging.getLogger(__name__)

TAB = "\t"

_PREFIX_RX = re.compile(r"^([ \t]*)(.*)$", re.DOTALL)

TextInput = Union[str, Sequence[str]]

# -----------------------------------------------------------------------------
# INDENT STYLE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class IndentStyle:
    """
    The text of one indentation level for a document.

    Attributes:
        unit: A single TAB, a run of spaces, or None while not yet inferred.
    """
    unit: Optional[str] = None

    def __post_init__(self) -> None:
        if self.unit is not None and not _is_valid_unit(self.unit):
            raise ValueError(f"Invalid indent unit: {self.unit!r}")

    @classmethod
    def tabs(cls) -> "IndentStyle":
        return cls(TAB)

    @classmethod
    def spaces(cls, width: int) -> "IndentStyle":
        return cls(" " * width)

    @property
    def inferred(self) -> bool:
        return self.unit is not None

    @property
    def one_indent(self) -> str:
        """The unit used when adding indentation; TAB while not inferred."""
        return self.unit if self.inferred else TAB

    def measure(self, line: str) -> Tuple[int, "IndentStyle"]:
        """
        Compute the indent level of a line.

        The line may consist of indentation only. When this style is not yet
        inferred, the line's prefix decides the unit: TABs give a TAB unit and
        a level equal to the TAB count; spaces give a unit of that many spaces
        and a level of 1.

        Args:
            line: Raw line, or just its leading whitespace.

        Returns:
            Tuple[int, IndentStyle]: The level, and the style to use for the
            following lines (self, or the newly inferred style).

        Raises:
            MixedIndentationError: TABs and spaces in the same prefix.
            IndentUnitMismatchError: Prefix does not fit the inferred unit.
        """
        prefix = _split_prefix(line)[0]
        if not prefix:
            return 0, self

        num_tabs = prefix.count(TAB)
        num_spaces = prefix.count(" ")
        if num_tabs and num_spaces:
            raise MixedIndentationError("Invalid mix of TABs and spaces", line=line)

        if self.unit is None:
            if num_tabs:
                return num_tabs, IndentStyle(TAB)
            return 1, IndentStyle(" " * num_spaces)

        if self.unit == TAB:
            if num_spaces:
                raise IndentUnitMismatchError("Expecting TABs, found spaces", line=line)
            return num_tabs, self

        if num_tabs:
            raise IndentUnitMismatchError("Expecting spaces, found TABs", line=line)
        width = len(self.unit)
        if num_spaces % width != 0:
            raise IndentUnitMismatchError(
                f"Invalid number of spaces: {num_spaces}, one indent is {width} spaces",
                line=line,
            )
        return num_spaces // width, self

    def level(self, line: str) -> int:
        return self.measure(line)[0]


# -----------------------------------------------------------------------------
# PROCESS-WIDE DEFAULT UNIT
# -----------------------------------------------------------------------------

_one_indent: Optional[str] = None
_one_indent_lock = threading.Lock()


def reset_one_indent(value: Optional[str] = None) -> None:
    """
    Clear or override the process-wide indent unit.

    Args:
        value: New unit (one TAB or a run of spaces), or None to clear it so
            the next indentation seen is used for inference.
    """
    global _one_indent
    if value is not None and not _is_valid_unit(value):
        raise ValueError(f"Invalid indent unit: {value!r}")

    logger.debug(f"Resetting one indent to {value!r}")
    with _one_indent_lock:
        _one_indent = value


def get_one_indent() -> Optional[str]:
    """Return the process-wide indent unit, or None if not yet inferred."""
    with _one_indent_lock:
        return _one_indent


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def indent_level(line: str, style: Optional[IndentStyle] = None) -> int:
    """
    Determine the indent level of a line (it may be indentation only).

    Args:
        line: Raw line.
        style: Style to measure with. When omitted, the process-wide unit is
            used and inferred from this line if still unset.

    Returns:
        int: Number of indent units in the line's prefix.
    """
    global _one_indent
    if style is not None:
        return style.level(line)

    with _one_indent_lock:
        level, inferred = IndentStyle(_one_indent).measure(line)
        _one_indent = inferred.unit
    return level


def split_line(line: str, style: Optional[IndentStyle] = None) -> Tuple[int, str]:
    """
    Separate a line into its indent level and its stripped text.

    Returns:
        Tuple[int, str]: (level, text)
    """
    prefix, rest = _split_prefix(line)
    return indent_level(prefix, style), rest.strip()


def indented(
        input: TextInput,
        level: int = 1,
        style: Optional[IndentStyle] = None,
) -> Union[str, List[str]]:
    """
    Add indentation to each line of a block or list of lines.

    Lines are right-trimmed; empty lines stay empty. A string input yields a
    newline-joined string and a sequence yields a list.

    Args:
        input: Block of text or sequence of lines.
        level: Number of indent units to add.
        style: Style providing the unit. When omitted, the process-wide unit
            is used, and set to one TAB if still unset.

    Returns:
        Union[str, List[str]]: Same shape as the input.
    """
    if isinstance(level, bool) or not isinstance(level, int) or level < 0:
        raise ValueError(f"Invalid level: {level!r}")
    if level == 0:
        return input

    if style is not None:
        to_add = style.one_indent * level
    else:
        to_add = _process_one_indent() * level

    new_lines = []
    for line in _to_lines(input):
        line = line.rstrip()
        new_lines.append(f"{to_add}{line}" if line else "")

    return "\n".join(new_lines) if isinstance(input, str) else new_lines


def undented(input: TextInput) -> Union[str, List[str]]:
    """
    Remove the first indented line's indentation from every line.

    The prefix to remove is taken from the first non-empty line that has
    one; each later non-empty line must start with exactly that prefix.

    Args:
        input: Block of text or sequence of lines.

    Returns:
        Union[str, List[str]]: Same shape as the input.

    Raises:
        IndentationConsistencyError: A later line lacks the prefix.
    """
    to_remove: Optional[str] = None
    new_lines = []
    for line in _to_lines(input):
        line = line.rstrip()
        if not line:
            new_lines.append("")
        elif to_remove is None:
            prefix, rest = _split_prefix(line)
            if prefix:
                to_remove = prefix
                new_lines.append(rest)
            else:
                new_lines.append(line)
        elif line.startswith(to_remove):
            new_lines.append(line[len(to_remove):])
        else:
            raise IndentationConsistencyError(f"Cannot remove {to_remove!r}", line=line)

    return "\n".join(new_lines) if isinstance(input, str) else new_lines


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _is_valid_unit(unit: str) -> bool:
    return unit == TAB or (len(unit) > 0 and set(unit) == {" "})


def _split_prefix(line: str) -> Tuple[str, str]:
    match = _PREFIX_RX.match(line)
    # The pattern matches any string
    assert match is not None
    return match.group(1), match.group(2)


def _to_lines(input: TextInput) -> List[str]:
    if isinstance(input, str):
        return input.split("\n")
    return list(input)


def _process_one_indent() -> str:
    global _one_indent
    with _one_indent_lock:
        if _one_indent is None:
            _one_indent = TAB
        return _one_indent
