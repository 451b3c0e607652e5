"""
Violation and edit data structures for agentlint.

This module defines the records passed between rules, engines and
formatters: violations reported by a rule's check, edits proposed by a
rule's fixer, and the aggregated results of a lint or fix run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any


class Severity(Enum):
    """Severity levels for violations."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# Value accepted in configuration to disable a rule entirely
SEVERITY_OFF = "off"


@dataclass
class Violation:
    """
    One reported occurrence of a rule's pattern.

    Lines and columns are 1-based. The severity may be overwritten by the
    lint engine when the configuration overrides it for this rule.
    """
    rule_id: str
    severity: Severity
    message: str
    file_path: str
    line: int
    column: Optional[int] = None
    snippet: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.severity, str):
            self.severity = Severity(self.severity)

    def to_dict(self) -> Dict[str, Any]:
        """Convert violation to a dictionary."""
        result = {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
            "file": self.file_path,
            "line": self.line,
        }
        if self.column is not None:
            result["column"] = self.column
        if self.snippet is not None:
            result["snippet"] = self.snippet
        return result


@dataclass(frozen=True)
class Edit:
    """
    A line-targeted text change proposed by a rule's fixer.

    An empty replacement deletes the target line. Otherwise, when
    match_text equals the whole current line the line is replaced, and
    when it does not the first occurrence of match_text inside the line
    is substituted.
    """
    file_path: str
    line: int
    match_text: str
    replacement: str
    rule_id: str = ""

    @property
    def is_deletion(self) -> bool:
        return self.replacement == ""


@dataclass
class LintResult:
    """Results from a complete lint run."""
    violations: List[Violation]
    units_scanned: int
    rules_applied: int
    duration_ms: int
    errors: List[str] = field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for v in self.violations if v.severity == severity)

    @property
    def error_count(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def info_count(self) -> int:
        return self.count(Severity.INFO)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def only(self, severity: Severity) -> "LintResult":
        """Return a copy of this result keeping only one severity."""
        return LintResult(
            violations=[v for v in self.violations if v.severity == severity],
            units_scanned=self.units_scanned,
            rules_applied=self.rules_applied,
            duration_ms=self.duration_ms,
            errors=list(self.errors),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "violations": [v.to_dict() for v in self.violations],
            "summary": {
                "total": len(self.violations),
                "errors": self.error_count,
                "warnings": self.warning_count,
                "infos": self.info_count,
                "files_scanned": self.units_scanned,
                "rules_applied": self.rules_applied,
                "duration_ms": self.duration_ms,
            },
            "errors": self.errors,
        }
