"""
Fix engine for applying rule-proposed edits to source files.

This module provides:
- Collection of candidate edits from every fixable, enabled rule
- Conflict-free application of line-targeted edits to a line buffer
- Atomic rewrite of changed files, with dry-run and backup support
- A summary of what was changed
"""

import os
import difflib
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from agentlint.config import LintConfig
from agentlint.core.engine import collect_files, read_source
from agentlint.core.findings import Edit
from agentlint.core.rules import Rule, RuleRegistry
from agentlint.utils import relative_path


NOTHING_TO_FIX = "No auto-fixable violations found."


@dataclass
class EditOutcome:
    """Result of applying a batch of edits to one file's content."""
    content: str
    applied: List[Edit]
    dropped: List[Edit]

    @property
    def changed(self) -> bool:
        return bool(self.applied)


@dataclass
class FixSummary:
    """Summary of a fix run."""
    changed_files: List[str] = field(default_factory=list)
    applied_edits: int = 0
    dropped_edits: int = 0
    errors: List[str] = field(default_factory=list)
    diffs: List[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def has_changes(self) -> bool:
        return bool(self.changed_files)

    def format(self) -> str:
        """Format the summary for console output."""
        if not self.changed_files:
            return NOTHING_TO_FIX
        verb = "Would fix" if self.dry_run else "Fixed"
        lines = [f"{verb} {len(self.changed_files)} file(s):"]
        lines.extend(f"  {relative_path(path)}" for path in self.changed_files)
        return "\n".join(lines)


def apply_edits(content: str, edits: Sequence[Edit]) -> EditOutcome:
    """
    Apply line-targeted edits to content.

    Edits are applied from the highest target line to the lowest, so a
    deleted line can only shift lines that were already processed. At
    most one edit applies per line: the first one in descending, stable
    order wins and later ones for the same line are dropped.
    """
    buffer = content.split("\n")
    consumed: Set[int] = set()
    applied: List[Edit] = []
    dropped: List[Edit] = []

    # sorted() is stable with reverse=True
    for edit in sorted(edits, key=lambda e: e.line, reverse=True):
        index = edit.line - 1
        if index in consumed or not 0 <= index < len(buffer):
            dropped.append(edit)
            continue
        consumed.add(index)

        current = buffer[index]
        if edit.is_deletion:
            del buffer[index]
        elif edit.match_text == current:
            buffer[index] = edit.replacement
        else:
            buffer[index] = current.replace(edit.match_text, edit.replacement, 1)

        if edit.is_deletion or buffer[index] != current:
            applied.append(edit)
        else:
            dropped.append(edit)

    return EditOutcome(content="\n".join(buffer), applied=applied, dropped=dropped)


def write_atomic(path: str, content: str):
    """Write content to path through a temporary file and a rename."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".agentlint-", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        if os.path.exists(path):
            os.chmod(tmp_path, os.stat(path).st_mode & 0o7777)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


class FixEngine:
    """
    Engine for generating and applying automatic fixes.

    The fix engine:
    1. Collects edits from every fixable rule not configured "off"
    2. Resolves conflicts and applies edits to each file's lines
    3. Writes a file back only when its content actually changed
    4. Skips files that cannot be read or written without aborting
    """

    def __init__(
        self,
        registry: RuleRegistry,
        config: Optional[LintConfig] = None,
        dry_run: bool = False,
        backup: bool = False,
    ):
        self.registry = registry
        self.config = config or LintConfig()
        self.dry_run = dry_run
        self.backup = backup

    def fixable_rules(self) -> List[Rule]:
        return [
            rule for rule in self.registry.fixable_rules()
            if not self.config.is_disabled(rule.name)
        ]

    def collect_edits(self, path: str, content: str, rules: Optional[List[Rule]] = None) -> List[Edit]:
        """Gather candidate edits for one file from every applicable rule."""
        if rules is None:
            rules = self.fixable_rules()
        lines = content.split("\n")
        edits: List[Edit] = []
        for rule in rules:
            if rule.applies_to(path):
                edits.extend(rule.fix(path, content, lines))
        return edits

    def apply(self, files: Sequence[str]) -> FixSummary:
        """
        Fix a list of files.

        Files are processed one at a time; a failure on one file is
        recorded and the batch continues.
        """
        summary = FixSummary(dry_run=self.dry_run)
        rules = self.fixable_rules()
        if not rules:
            return summary

        for path in files:
            try:
                # Line endings are kept as-is
                content = read_source(path, newline="")
            except (OSError, UnicodeDecodeError) as e:
                summary.errors.append(f"{path}: {e}")
                continue

            edits = self.collect_edits(path, content, rules)
            if not edits:
                continue

            outcome = apply_edits(content, edits)
            if not outcome.changed:
                continue

            if self.dry_run:
                summary.diffs.append(self._generate_diff(content, outcome.content, path))
            else:
                try:
                    if self.backup:
                        write_atomic(path + ".bak", content)
                    write_atomic(path, outcome.content)
                except OSError as e:
                    summary.errors.append(f"{path}: {e}")
                    continue

            summary.changed_files.append(path)
            summary.applied_edits += len(outcome.applied)
            summary.dropped_edits += len(outcome.dropped)

        return summary

    def fix_path(self, target: str) -> FixSummary:
        """Discover and fix every file under target."""
        return self.apply(collect_files(target, self.config))

    def _generate_diff(self, original: str, fixed: str, file_path: str) -> str:
        """Generate a unified diff between original and fixed content."""
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            fixed.splitlines(keepends=True),
            fromfile=f"a/{file_path}",
            tofile=f"b/{file_path}",
        )
        return "".join(diff)
