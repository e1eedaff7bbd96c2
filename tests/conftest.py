from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the process-wide indent unit between tests.
3. Shared outline fixtures.
"""

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from dirtree.core.indent import reset_one_indent  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def clean_one_indent() -> Iterator[None]:
    """Start and end every test with no process-wide indent unit."""
    reset_one_indent()
    yield
    reset_one_indent()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Run the test from inside a temporary directory.

    Operation paths are relative to the current directory, so tests that
    create trees chdir here to get short, predictable paths.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def project_outline() -> str:
    """
    Return a tab-indented outline with files, content and nested directories.

    Structure:
    README.md       (2 lines)
    /src
      main.py       (nested body)
      /utils
    /docs
    """
    return "\n".join([
        "README.md",
        "\t# Project",
        "\tSome text",
        "/src",
        "\tmain.py",
        "\t\tdef main():",
        "\t\t\treturn 0",
        "\t/utils",
        "/docs",
    ])
