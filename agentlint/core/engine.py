"""
Main lint engine for agentlint.

This module discovers source files, turns files or diffs into lint units,
and runs the enabled rules over them.
"""

import os
import time
import fnmatch
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from agentlint.config import LintConfig
from agentlint.core.diff import AddedLine, parse_diff
from agentlint.core.findings import Violation, LintResult
from agentlint.core.rules import Rule, RuleRegistry
from agentlint.utils import file_extension, normalize_extension


DEFAULT_EXTENSIONS = (
    ".ts", ".tsx", ".js", ".jsx", ".py", ".go", ".rs",
    ".json", ".yaml", ".yml", ".env",
)

DEFAULT_IGNORE = (
    "node_modules", "dist", "build", ".git", ".next",
    "coverage", "__pycache__", ".venv", "vendor",
)


@dataclass
class LintUnit:
    """
    One piece of text handed to the rules.

    For units built from a diff, content holds only the added lines and
    added_lines maps its line numbers back to the new file.
    """
    path: str
    content: str
    lines: List[str]
    added_lines: Optional[List[AddedLine]] = None

    @classmethod
    def from_text(cls, path: str, content: str) -> "LintUnit":
        return cls(path=path, content=content, lines=content.split("\n"))


def _ignored(name: str, rel_path: str, patterns: Sequence[str]) -> bool:
    for pattern in patterns:
        pattern = pattern.rstrip("/")
        if not pattern:
            continue
        if name == pattern or fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(rel_path, pattern):
            return True
    return False


def collect_files(target: str, config: Optional[LintConfig] = None) -> List[str]:
    """
    Discover the files to lint under target.

    A target that is a file is returned as-is. A missing target raises
    FileNotFoundError.
    """
    config = config or LintConfig()
    ignore = list(DEFAULT_IGNORE) + list(config.ignore)
    if config.extensions is not None:
        extensions = {normalize_extension(e) for e in config.extensions}
    else:
        extensions = set(DEFAULT_EXTENSIONS)

    root = Path(target)
    if not root.exists():
        raise FileNotFoundError(f"No such file or directory: {target}")
    if root.is_file():
        return [str(root)]

    files: List[str] = []
    for current, dirs, names in os.walk(root):
        rel_dir = os.path.relpath(current, root)

        def keep(name: str) -> bool:
            rel_path = os.path.normpath(os.path.join(rel_dir, name))
            if _ignored(name, rel_path, ignore):
                return False
            return not name.startswith(".") or name == ".env"

        dirs[:] = sorted(d for d in dirs if keep(d))
        for name in sorted(names):
            if keep(name) and normalize_extension(file_extension(name)) in extensions:
                files.append(os.path.join(current, name))
    return files


def read_source(path: str, newline: Optional[str] = None) -> str:
    """Read a UTF-8 source file; newline="" keeps line endings untranslated."""
    with open(path, "r", encoding="utf-8", newline=newline) as f:
        return f.read()


class LintEngine:
    """
    Runs enabled rules over lint units and aggregates their violations.

    The engine:
    1. Drops rules configured "off"
    2. Runs each remaining rule whose extensions match the unit
    3. Applies configured severity overrides
    4. Remaps diff-derived line numbers to new-file line numbers
    """

    def __init__(
        self,
        registry: RuleRegistry,
        config: Optional[LintConfig] = None,
        max_workers: int = 4,
    ):
        self.registry = registry
        self.config = config or LintConfig()
        self.max_workers = max_workers

    def enabled_rules(self) -> List[Rule]:
        """Rules not configured "off", in registry order."""
        return [rule for rule in self.registry if not self.config.is_disabled(rule.name)]

    def lint_unit(self, unit: LintUnit, rules: Optional[List[Rule]] = None) -> List[Violation]:
        """Run rules over a single unit."""
        if rules is None:
            rules = self.enabled_rules()
        violations: List[Violation] = []

        for rule in rules:
            if not rule.applies_to(unit.path):
                continue
            rule_violations = rule.check(unit.path, unit.content, unit.lines)

            override = self.config.severity_override(rule.name)
            if override is not None:
                for violation in rule_violations:
                    violation.severity = override

            if unit.added_lines is not None:
                for violation in rule_violations:
                    index = violation.line - 1
                    # Out-of-range lines stay unmapped
                    if 0 <= index < len(unit.added_lines):
                        violation.line = unit.added_lines[index].original_line

            violations.extend(rule_violations)
        return violations

    def run(self, units: Sequence[LintUnit]) -> LintResult:
        """
        Lint a sequence of units.

        Units may be evaluated concurrently; violations are always merged
        in unit order.
        """
        start_time = time.monotonic()
        rules = self.enabled_rules()
        violations: List[Violation] = []

        for unit_violations in self._map(lambda unit: self.lint_unit(unit, rules), units):
            violations.extend(unit_violations)

        return LintResult(
            violations=violations,
            units_scanned=len(units),
            rules_applied=len(rules),
            duration_ms=self._elapsed_ms(start_time),
        )

    def lint_files(self, paths: Sequence[str]) -> LintResult:
        """
        Read and lint a list of files.

        Files that cannot be read are skipped and reported in the
        result's errors.
        """
        start_time = time.monotonic()
        rules = self.enabled_rules()
        violations: List[Violation] = []
        errors: List[str] = []
        scanned = 0

        for path, unit_violations, error in self._map(lambda p: self._lint_file(p, rules), paths):
            if error is not None:
                errors.append(f"Error reading {path}: {error}")
                continue
            scanned += 1
            violations.extend(unit_violations)

        return LintResult(
            violations=violations,
            units_scanned=scanned,
            rules_applied=len(rules),
            duration_ms=self._elapsed_ms(start_time),
            errors=errors,
        )

    def lint_path(self, target: str) -> LintResult:
        """Discover and lint every file under target."""
        return self.lint_files(collect_files(target, self.config))

    def lint_diff(self, diff_text: str) -> LintResult:
        """Lint only the lines a unified diff adds."""
        units = [
            LintUnit(
                path=file_diff.path,
                content=file_diff.content,
                lines=file_diff.lines,
                added_lines=file_diff.added_lines,
            )
            for file_diff in parse_diff(diff_text)
        ]
        return self.run(units)

    def lint_content(self, content: str, path: str = "<stdin>") -> List[Violation]:
        """
        Lint text directly without reading from a file.

        Useful for editor integrations and testing.
        """
        return self.lint_unit(LintUnit.from_text(path, content))

    def _lint_file(self, path: str, rules: List[Rule]) -> Tuple[str, List[Violation], Optional[str]]:
        try:
            content = read_source(path)
        except (OSError, UnicodeDecodeError) as e:
            return path, [], str(e)
        return path, self.lint_unit(LintUnit.from_text(path, content), rules), None

    def _map(self, func, items: Sequence):
        if len(items) > 1 and self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return list(executor.map(func, items))
        return [func(item) for item in items]

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
