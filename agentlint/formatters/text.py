"""
Text output formatter for human-readable results.
"""

import sys
from typing import Dict, List

from agentlint.core.findings import LintResult, Severity, Violation


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


SEVERITY_COLORS = {
    Severity.ERROR: Colors.RED,
    Severity.WARNING: Colors.YELLOW,
    Severity.INFO: Colors.CYAN,
}

SEVERITY_ICONS = {
    Severity.ERROR: "✗",
    Severity.WARNING: "⚠",
    Severity.INFO: "ℹ",
}


def supports_color() -> bool:
    """Check if the terminal supports color output."""
    if not hasattr(sys.stdout, "isatty"):
        return False
    if not sys.stdout.isatty():
        return False
    return True


class TextFormatter:
    """
    Formats lint results for the terminal.

    Violations are grouped by file in first-seen order and sorted by line
    within each file.
    """

    def __init__(self, use_color: bool = True):
        self.use_color = use_color and supports_color()

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_color:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _stats(self, result: LintResult) -> str:
        return f"({result.units_scanned} files, {result.rules_applied} rules, {result.duration_ms}ms)"

    def format_result(self, result: LintResult) -> str:
        """Format a complete lint result."""
        if not result.violations:
            lines = [f"{self._color('✓ No issues found', Colors.BOLD)} {self._stats(result)}"]
            lines.extend(self._format_errors(result))
            return "\n".join(lines) + "\n"

        by_file: Dict[str, List[Violation]] = {}
        for violation in result.violations:
            by_file.setdefault(violation.file_path, []).append(violation)

        lines = []
        for file_path, violations in by_file.items():
            lines.append("")
            lines.append(self._color(file_path, Colors.BOLD))
            for violation in sorted(violations, key=lambda v: v.line):
                lines.append(self.format_violation(violation))

        lines.append("")
        lines.append(f"{self._format_totals(result)} {self._stats(result)}")
        lines.extend(self._format_errors(result))
        return "\n".join(lines) + "\n"

    def format_violation(self, violation: Violation) -> str:
        """Format a single violation line."""
        color = SEVERITY_COLORS[violation.severity]
        icon = SEVERITY_ICONS[violation.severity]
        position = self._color(f"{violation.line}:{violation.column or 1}", Colors.DIM)
        label = self._color(f"{icon} {violation.severity.value}", color)
        rule = self._color(violation.rule_id, Colors.DIM)
        return f"  {position}  {label}  {violation.message}  {rule}"

    def _format_totals(self, result: LintResult) -> str:
        parts = []
        if result.error_count:
            plural = "s" if result.error_count > 1 else ""
            parts.append(self._color(f"{result.error_count} error{plural}", Colors.RED))
        if result.warning_count:
            plural = "s" if result.warning_count > 1 else ""
            parts.append(self._color(f"{result.warning_count} warning{plural}", Colors.YELLOW))
        if result.info_count:
            parts.append(self._color(f"{result.info_count} info", Colors.CYAN))
        return ", ".join(parts)

    def _format_errors(self, result: LintResult) -> List[str]:
        if not result.errors:
            return []
        lines = ["", self._color("Errors:", Colors.RED)]
        lines.extend(f"  • {error}" for error in result.errors)
        return lines
