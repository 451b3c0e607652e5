"""
Hard-coded credentials detection.

Detects passwords, API keys, tokens and provider-specific key formats
that should be read from the environment or a secrets manager instead.
"""

import re
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity
from agentlint.core.rules import PatternRule, RuleMetadata


# Lines reading a value from the environment are not leaks
ENV_REFERENCE = re.compile(r"process\.env|os\.environ|std::env|env::var")

# Hides everything but the quotes of the first quoted literal
QUOTED_SECRET = re.compile(r"(['\"])[^'\"]{4}[^'\"]*(['\"])")


class CredentialLeakRule(PatternRule):
    """
    Detects hard-coded credentials.

    Snippets are masked so that reports never repeat the secret itself.
    """

    comment_prefixes = ()

    CREDENTIAL_PATTERNS = [
        (re.compile(r"(?:password|passwd|pwd)\s*[:=]\s*['\"][^'\"]{3,}['\"]", re.IGNORECASE),
         "Hardcoded password detected"),
        (re.compile(r"(?:api[_-]?key|apikey)\s*[:=]\s*['\"][^'\"]{8,}['\"]", re.IGNORECASE),
         "Hardcoded API key detected"),
        (re.compile(r"(?:secret|token)\s*[:=]\s*['\"][^'\"]{8,}['\"]", re.IGNORECASE),
         "Hardcoded secret/token detected"),
        (re.compile(r"(?:sk|pk)[-_](?:live|test)[-_]\w{10,}"),
         "Stripe-style API key detected"),
        (re.compile(r"ghp_[A-Za-z0-9_]{36,}"),
         "GitHub personal access token detected"),
        (re.compile(r"AIza[0-9A-Za-z_-]{35}"),
         "Google API key detected"),
        (re.compile(r"(?:aws_access_key_id|aws_secret_access_key)\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE),
         "AWS credential detected"),
        (re.compile(r"Bearer\s+[A-Za-z0-9_.-]{20,}"),
         "Hardcoded Bearer token detected"),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-credential-leak",
            description="Detects hardcoded credentials, API keys, and tokens in source code",
            severity=Severity.ERROR,
            extensions=("ts", "js", "tsx", "jsx", "py", "go", "rs", "env", "json", "yaml", "yml"),
            tags=("security", "secrets"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.CREDENTIAL_PATTERNS

    def skip_file(self, path: str, content: str) -> bool:
        # Templates such as .env.example are meant to hold placeholders
        return path.endswith((".example", ".template"))

    def skip_line(self, line: str) -> bool:
        return ENV_REFERENCE.search(line) is not None

    def format_snippet(self, line: str) -> str:
        return mask_secret(line.strip())


def mask_secret(text: str) -> str:
    """Replace the body of the first quoted literal of 4+ chars with ****."""
    return QUOTED_SECRET.sub(r"\1****\2", text, count=1)
