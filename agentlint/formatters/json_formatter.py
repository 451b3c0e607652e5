"""
JSON output formatter for machine-readable results.
"""

import json

from agentlint.core.findings import LintResult, Violation


class JSONFormatter:
    """
    Formats lint results as JSON for machine consumption.
    """

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format_result(self, result: LintResult) -> str:
        """Format a complete lint result as JSON."""
        return json.dumps(result.to_dict(), indent=self.indent, ensure_ascii=False)

    def format_violation(self, violation: Violation) -> str:
        """Format a single violation as JSON."""
        return json.dumps(violation.to_dict(), indent=self.indent, ensure_ascii=False)
