"""
Utility functions for agentlint.
"""

import os
import re
from typing import Optional


TEST_FILE_PATTERN = re.compile(r"\.(test|spec)\.[a-z]+$")


def file_extension(path: str) -> str:
    """
    Return a file's extension without the leading dot.

    Dot-files with no further dot (".env") use their name as the
    extension so that they can be matched by rules and allow-lists.
    """
    name = os.path.basename(path)
    if name.startswith(".") and name.count(".") == 1:
        return name[1:]
    return os.path.splitext(name)[1][1:]


def normalize_extension(ext: str) -> str:
    """Ensure an extension from configuration carries a leading dot."""
    return ext if ext.startswith(".") else f".{ext}"


def is_test_file(path: str) -> bool:
    """Check if a path names a test or spec file (foo.test.ts, foo.spec.js)."""
    return TEST_FILE_PATTERN.search(path) is not None


def relative_path(path: str, start: Optional[str] = None) -> str:
    """Return path relative to start (default: cwd), or unchanged if impossible."""
    try:
        return os.path.relpath(path, start or os.getcwd())
    except ValueError:
        # Different drives on Windows
        return path

