"""
Code and SQL injection detection rules.

Detects dynamic code execution and SQL queries built from interpolated
or concatenated strings.
"""

import re
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity
from agentlint.core.rules import ContentPatternRule, RuleMetadata
from agentlint.utils import file_extension


class UnsafeEvalRule(ContentPatternRule):
    """
    Detects eval(), new Function() and string timers.

    exec() is only reported in Python files.
    """

    EVAL_PATTERNS = [
        (re.compile(r"\beval\s*\("),
         "eval() is dangerous: agents frequently generate it for dynamic behavior"),
        (re.compile(r"\bnew Function\s*\("),
         "new Function() is equivalent to eval"),
        (re.compile(r"\bsetTimeout\s*\(\s*[\"'`]"),
         "setTimeout with string argument acts like eval"),
        (re.compile(r"\bsetInterval\s*\(\s*[\"'`]"),
         "setInterval with string argument acts like eval"),
    ]

    PYTHON_PATTERNS = [
        (re.compile(r"\bexec\s*\("),
         "exec() allows arbitrary code execution"),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="unsafe-eval",
            description="Detects eval(), exec(), and similar dynamic code execution",
            severity=Severity.ERROR,
            extensions=("ts", "js", "tsx", "jsx", "py"),
            tags=("security", "injection"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.EVAL_PATTERNS

    def patterns_for(self, path: str) -> List[Tuple[Pattern, str]]:
        if file_extension(path) == "py":
            return self.EVAL_PATTERNS + self.PYTHON_PATTERNS
        return self.EVAL_PATTERNS


class SqlInjectionRule(ContentPatternRule):
    """
    Detects SQL built with template literals, concatenation or f-strings.
    """

    SQL_PATTERNS = [
        (re.compile(r"`[^`]*\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER)\b[^`]*\$\{[^}]+\}[^`]*`", re.IGNORECASE),
         "SQL query uses template literal interpolation: use parameterized queries instead"),
        (re.compile(r"[\"'](?:SELECT|INSERT|UPDATE|DELETE|DROP)\b[^\"']*[\"']\s*\+", re.IGNORECASE),
         "SQL query uses string concatenation: use parameterized queries instead"),
        (re.compile(r"f[\"'](?:SELECT|INSERT|UPDATE|DELETE|DROP)\b[^\"']*\{[^}]+\}[^\"']*[\"']", re.IGNORECASE),
         "SQL query uses f-string interpolation: use parameterized queries instead"),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="sql-injection",
            description="Detects string concatenation/interpolation in SQL queries",
            severity=Severity.ERROR,
            extensions=("ts", "js", "tsx", "jsx", "py"),
            tags=("security", "injection", "sql"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.SQL_PATTERNS
