"""
Shared fixtures for the agentlint tests.
"""

import os
import sys
from typing import List

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agentlint.core.findings import Severity, Violation, Edit
from agentlint.core.rules import Rule, RuleMetadata
from agentlint.rules import default_registry


class MarkerRule(Rule):
    """
    Reports every line containing a marker string.

    With delete=True the fixer deletes those lines; with replace set it
    substitutes the marker instead.
    """

    def __init__(self, rule_id, marker, severity=Severity.WARNING, extensions=(),
                 delete=False, replace=None):
        self._metadata = RuleMetadata(
            rule_id=rule_id,
            description=f"Finds {marker}",
            severity=severity,
            extensions=extensions,
            auto_fixable=delete or replace is not None,
        )
        self.marker = marker
        self.delete = delete
        self.replace = replace

    @property
    def metadata(self) -> RuleMetadata:
        return self._metadata

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        return [
            self.create_violation(path, num, f"found {self.marker}", column=line.index(self.marker) + 1)
            for num, line in enumerate(lines, start=1)
            if self.marker in line
        ]

    def fix(self, path: str, content: str, lines: List[str]) -> List[Edit]:
        edits = []
        for num, line in enumerate(lines, start=1):
            if self.marker not in line:
                continue
            if self.delete:
                edits.append(self.create_edit(path, num, line, ""))
            elif self.replace is not None:
                edits.append(self.create_edit(path, num, self.marker, self.replace))
        return edits


@pytest.fixture
def marker_rule():
    """Factory for MarkerRule instances."""
    return MarkerRule


@pytest.fixture
def registry():
    """The built-in rule registry."""
    return default_registry()


@pytest.fixture
def write_file(tmp_path):
    """Write a text file under tmp_path and return its path as a string."""
    def _write(relative: str, content: str) -> str:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write
