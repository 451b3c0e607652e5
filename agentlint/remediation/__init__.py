"""
Automatic fixes for rule violations.
"""

from agentlint.remediation.engine import FixEngine, FixSummary, EditOutcome, apply_edits

__all__ = [
    "FixEngine",
    "FixSummary",
    "EditOutcome",
    "apply_edits",
]
