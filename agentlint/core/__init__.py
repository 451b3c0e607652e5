"""
Core linting machinery: data model, diff mapping, rule base classes and
the lint engine.
"""

from agentlint.core.diff import AddedLine, FileDiff, DiffMapper, parse_diff
from agentlint.core.engine import LintEngine, LintUnit, collect_files
from agentlint.core.findings import Severity, Violation, Edit, LintResult
from agentlint.core.rules import Rule, PatternRule, ContentPatternRule, RuleMetadata, RuleRegistry

__all__ = [
    "AddedLine",
    "FileDiff",
    "DiffMapper",
    "parse_diff",
    "LintEngine",
    "LintUnit",
    "collect_files",
    "Severity",
    "Violation",
    "Edit",
    "LintResult",
    "Rule",
    "PatternRule",
    "ContentPatternRule",
    "RuleMetadata",
    "RuleRegistry",
]
