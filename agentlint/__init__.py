"""
agentlint

A linter for code written by AI coding agents. Detects risky patterns
(hard-coded secrets and paths, missing error handling, unbounded loops
and queries) in files or in the added lines of a diff, and applies
safe mechanical fixes.
"""

__version__ = "0.7.0"

from agentlint.core.engine import LintEngine
from agentlint.core.findings import Violation, Edit, LintResult, Severity
from agentlint.core.rules import Rule, RuleRegistry
from agentlint.config import LintConfig, load_config
from agentlint.remediation import FixEngine, FixSummary

__all__ = [
    "LintEngine",
    "FixEngine",
    "FixSummary",
    "Violation",
    "Edit",
    "LintResult",
    "Severity",
    "Rule",
    "RuleRegistry",
    "LintConfig",
    "load_config",
]
