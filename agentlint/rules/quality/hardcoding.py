"""
Hard-coded value detection rules.

Agents tend to bake machine-specific paths, local URLs and unexplained
numeric literals straight into code. These rules flag them so they can
move into configuration or named constants.
"""

import re
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity
from agentlint.core.rules import PatternRule, RuleMetadata


SOURCE_EXTENSIONS = ("ts", "js", "tsx", "jsx", "py", "go", "rs")
JS_EXTENSIONS = ("ts", "js", "tsx", "jsx")


class HardcodedPathsRule(PatternRule):
    """
    Detects hard-coded file system paths.
    """

    comment_prefixes = ("//", "#", "*")

    PATH_PATTERNS = [
        (re.compile(r"/Users/\w+"), 'Hardcoded macOS user path: "{match}"'),
        (re.compile(r"/home/\w+"), 'Hardcoded Linux user path: "{match}"'),
        (re.compile(r"C:\\\\Users\\\\\w+"), 'Hardcoded Windows user path: "{match}"'),
        (re.compile(r"/tmp/[a-zA-Z]"), 'Hardcoded /tmp path: "{match}"'),
        (re.compile(r"/var/log/[a-zA-Z]"), 'Hardcoded /var/log path: "{match}"'),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-hardcoded-paths",
            description="Detects hardcoded file system paths that should use environment variables or config",
            severity=Severity.ERROR,
            extensions=SOURCE_EXTENSIONS,
            tags=("portability",),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.PATH_PATTERNS


class HardcodedUrlsRule(PatternRule):
    """
    Detects hard-coded localhost URLs and port numbers.

    Test, spec and config files are expected to contain these and are skipped.
    """

    comment_prefixes = ("//", "#")

    SKIPPED_FILES = re.compile(r"\.(test|spec|config)\.[a-z]+$")

    URL_PATTERNS = [
        (re.compile(r"https?://localhost[:/]"), 'Hardcoded localhost URL: "{match}"'),
        (re.compile(r"https?://127\.0\.0\.1[:/]"), 'Hardcoded 127.0.0.1 URL: "{match}"'),
        (re.compile(r"https?://0\.0\.0\.0[:/]"), 'Hardcoded 0.0.0.0 URL: "{match}"'),
        (re.compile(r"(?<!\w):\d{4,5}(?:/|\b)"), 'Hardcoded port number: "{match}"'),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-hardcoded-urls",
            description="Detects hardcoded localhost URLs and port numbers",
            severity=Severity.WARNING,
            extensions=SOURCE_EXTENSIONS,
            tags=("portability",),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.URL_PATTERNS

    def skip_file(self, path: str, content: str) -> bool:
        return self.SKIPPED_FILES.search(path) is not None


class MagicNumbersRule(PatternRule):
    """
    Detects numeric literals of two or more digits that should be named
    constants.

    Common sentinel values and HTTP status codes are allowed, as are
    import lines, simple constant declarations and numbers that appear
    shortly after a quote.
    """

    comment_prefixes = ("//", "*")
    report_column = False

    ALLOWED = {"-1", "0", "1", "2", "100", "200", "201", "204", "301", "302", "400", "401", "403", "404", "500"}

    DECLARATION = re.compile(r"^\s*(import|const\s+\w+\s*=)")
    NUMBER = re.compile(r"(?<![.\w])(\d{2,})\b")
    QUOTE = re.compile(r"['\"`]")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-magic-numbers",
            description="Detects magic numbers that should be named constants",
            severity=Severity.INFO,
            extensions=JS_EXTENSIONS,
            tags=("readability",),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(self.NUMBER, "Magic number {group}: extract to a named constant")]

    def skip_line(self, line: str) -> bool:
        return super().skip_line(line) or self.DECLARATION.match(line) is not None

    def accept_match(self, match: "re.Match", line: str) -> bool:
        if match.group(1) in self.ALLOWED:
            return False
        # Likely inside a string literal
        preceding = line[max(0, match.start() - 20):match.start()]
        return self.QUOTE.search(preceding) is None
