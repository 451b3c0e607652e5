"""
Overly permissive configuration detection.

Wildcard CORS, 0.0.0.0 binds, world-writable modes and disabled TLS
verification. Some patterns only count when nearby lines mention the
setting they belong to.
"""

import re
from typing import List, Optional, Pattern, Tuple

from agentlint.core.findings import Severity, Violation
from agentlint.core.rules import ContentPatternRule, RuleMetadata, line_of_offset, snippet_at


class OverlyPermissiveRule(ContentPatternRule):
    """
    Detects overly permissive CORS, permission and TLS settings.
    """

    # (pattern, required context near the match or None, message)
    PERMISSIVE_PATTERNS: List[Tuple[Pattern, Optional[Pattern], str]] = [
        (re.compile(r"['\"]?\*['\"]?\s*(?:$|,|\]|\})", re.MULTILINE),
         re.compile(r"cors|origin|allow", re.IGNORECASE),
         "Wildcard CORS origin (*): restrict to specific domains"),
        (re.compile(r"0\.0\.0\.0"),
         re.compile(r"listen|host|bind", re.IGNORECASE),
         "Binding to 0.0.0.0: consider restricting to a specific interface"),
        (re.compile(r"chmod\s+777"),
         None,
         "chmod 777 is world-writable: use restrictive permissions"),
        (re.compile(r"0o?777\b"),
         re.compile(r"mode|permission", re.IGNORECASE),
         "Permission mode 777 is world-writable"),
        (re.compile(r"disable.*(?:ssl|tls|certificate|verify)", re.IGNORECASE),
         None,
         "Disabling SSL/TLS verification is insecure"),
        (re.compile(r"verify\s*[=:]\s*(?:false|False)"),
         None,
         "SSL verification disabled"),
        (re.compile(r"NODE_TLS_REJECT_UNAUTHORIZED.*['\"]0['\"]"),
         None,
         "NODE_TLS_REJECT_UNAUTHORIZED=0 disables all TLS verification"),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="overly-permissive",
            description="Detects overly permissive CORS, permissions, and security settings",
            severity=Severity.WARNING,
            extensions=("ts", "js", "tsx", "jsx", "py", "json", "yaml", "yml"),
            tags=("security", "configuration"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(pattern, message) for pattern, _, message in self.PERMISSIVE_PATTERNS]

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        if self.skip_file(path, content):
            return violations

        for pattern, context, message in self.PERMISSIVE_PATTERNS:
            for match in pattern.finditer(content):
                line = line_of_offset(content, match.start())
                if context is not None:
                    # Two lines before through one line after
                    surrounding = "\n".join(lines[max(0, line - 3):min(len(lines), line + 2)])
                    if not context.search(surrounding):
                        continue
                violations.append(self.create_violation(
                    path, line, message, snippet=snippet_at(lines, line),
                ))
        return violations
