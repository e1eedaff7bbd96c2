from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin wrappers over 'os' and 'shutil' used by the outline interpreter to
inspect and mutate the filesystem. All functions are synchronous and let
OSError propagate to the caller.
"""

import os
import shutil

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "dirtree"
UNIX_APP_DIR_NAME = ".dirtree"

PATH_MISSING = "missing"
PATH_FILE = "file"
PATH_DIR = "dir"
PATH_SYMLINK = "symlink"
PATH_UNKNOWN = "unknown"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/dirtree
    - Linux/Mac: ~/.dirtree

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    os.makedirs(path, exist_ok=True)
    return os.path.abspath(path)


def rel_path(path: str) -> str:
    """
    Express a path relative to the current directory, using '/' separators.

    Args:
        path: Absolute or relative path.

    Returns:
        str: Relative path such as 'out/sub/note.txt'.
    """
    return os.path.relpath(path).replace("\\", "/")


def get_path_type(path: str) -> str:
    """
    Classify what currently exists at a path.

    Links are followed, so a link to a directory is a 'dir'. Only a
    dangling link is reported as 'symlink'.

    Args:
        path: Path to inspect.

    Returns:
        str: One of 'missing', 'file', 'dir', 'symlink' or 'unknown'.
    """
    if os.path.isdir(path):
        return PATH_DIR
    if os.path.isfile(path):
        return PATH_FILE
    if os.path.islink(path):
        return PATH_SYMLINK
    if os.path.lexists(path):
        return PATH_UNKNOWN
    return PATH_MISSING


def is_dir(path: str) -> bool:
    return get_path_type(path) == PATH_DIR


def is_file(path: str) -> bool:
    return get_path_type(path) == PATH_FILE

# -----------------------------------------------------------------------------
# FILESYSTEM MUTATION API
# -----------------------------------------------------------------------------

def mk_dir(path: str, clear: bool = False) -> None:
    """
    Create a directory if it does not exist.

    Args:
        path: Target directory path.
        clear: If True and the directory exists, empty it.
    """
    if clear and is_dir(path):
        clear_dir(path)
    else:
        os.makedirs(path, exist_ok=True)


def clear_dir(path: str) -> None:
    """
    Delete every file and subdirectory inside a directory, keeping the directory.

    Args:
        path: Directory to empty; created when missing.
    """
    if not is_dir(path):
        os.makedirs(path, exist_ok=True)
        return

    for entry in os.scandir(path):
        if entry.is_dir(follow_symlinks=False):
            shutil.rmtree(entry.path)
        else:
            os.remove(entry.path)


def mk_dirs_for_file(path: str) -> None:
    """
    Create any missing parent directories of a file path.

    Args:
        path: Target file path.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not is_dir(parent):
        os.makedirs(parent, exist_ok=True)


def barf(path: str, contents: str, append: bool = False) -> None:
    """
    Write a string to a file, creating its parent directories first.

    Args:
        path: Target file path.
        contents: Text to write.
        append: Append instead of overwrite when the file exists.
    """
    mk_dirs_for_file(path)
    mode = "a" if append and is_file(path) else "w"
    with open(path, mode, encoding="utf-8", newline="") as f:
        f.write(contents)


def slurp(path: str) -> str:
    """
    Read a whole text file, dropping carriage returns.

    Args:
        path: Source file path.

    Returns:
        str: File contents with '\\r' removed.
    """
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read().replace("\r", "")
