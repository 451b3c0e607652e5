"""
Reliability rules.

Detects code that works on the happy path but fails under load or bad
input: unbounded queries and loops, unvalidated handlers, network calls
without retries or timeouts, blocking I/O and leaked resources.
"""

import re
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity, Violation
from agentlint.core.rules import (
    Rule, PatternRule, ContentPatternRule, RuleMetadata, line_of_offset, snippet_at
)
from agentlint.utils import file_extension, is_test_file


JS_EXTENSIONS = ("ts", "js", "tsx", "jsx")


class UnboundedQueryRule(PatternRule):
    """
    Detects queries and list calls without pagination or limits.
    """

    comment_prefixes = ()
    first_match_only = True
    report_column = False

    QUERY_PATTERNS = [
        (re.compile(r"\.find\(\s*\{\s*\}\s*\)"), "Unbounded .find({{}}): missing limit/pagination"),
        (re.compile(r"\.findMany\(\s*\)"), "Unbounded .findMany(): missing take/skip"),
        (re.compile(r"SELECT\s+\*\s+FROM\s+\w+\b(?!\s+(?:WHERE|LIMIT))", re.IGNORECASE),
         "SELECT * without WHERE/LIMIT"),
        (re.compile(r"\.getAll\(\s*\)"), "Unbounded .getAll(): missing pagination"),
        (re.compile(r"\.list\(\s*\)"), ".list() without pagination parameters"),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-unbounded-query",
            description="Detects database queries and API calls without pagination or limits",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS + ("py",),
            tags=("reliability", "performance"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.QUERY_PATTERNS


class InputValidationRule(Rule):
    """
    Detects HTTP route handlers without input validation.

    The 500 characters following a handler registration are searched for
    a validation library, a typeof guard or a negated if-guard.
    """

    HANDLER_PATTERNS = [
        re.compile(r"\.(get|post|put|patch|delete)\s*\(\s*['\"`]"),
        re.compile(r"app\.(get|post|put|patch|delete)\s*\("),
        re.compile(r"router\.(get|post|put|patch|delete)\s*\("),
    ]

    VALIDATION_PATTERNS = [
        re.compile(r"zod|yup|joi|validate|schema|safeParse|parse\(|ajv|superstruct"),
        re.compile(r"typeof\s+\w+\s*[!=]=="),
        re.compile(r"if\s*\(\s*!\s*\w+"),
    ]

    LOOKAHEAD = 500

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-input-validation",
            description="Detects HTTP handlers and API endpoints without input validation",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS,
            tags=("security", "validation"),
        )

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        reported = set()

        for pattern in self.HANDLER_PATTERNS:
            for match in pattern.finditer(content):
                line = line_of_offset(content, match.start())
                # app.get('/x') matches more than one pattern
                if line in reported:
                    continue
                body = content[match.start():match.start() + self.LOOKAHEAD]
                if any(v.search(body) for v in self.VALIDATION_PATTERNS):
                    continue
                reported.add(line)
                violations.append(self.create_violation(
                    path, line, "HTTP handler without input validation",
                    snippet=snippet_at(lines, line),
                ))

        violations.sort(key=lambda v: v.line)
        return violations


class RetryLogicRule(ContentPatternRule):
    """
    Detects HTTP calls in files that contain no retry or backoff logic.
    """

    RETRY_VOCABULARY = re.compile(r"retry|backoff|attempt|maxRetries|exponential", re.IGNORECASE)

    HTTP_PATTERNS = [
        (re.compile(r"\bfetch\s*\("), 'HTTP call without retry/backoff logic: "{match}"'),
        (re.compile(r"axios\.\w+\s*\("), 'HTTP call without retry/backoff logic: "{match}"'),
        (re.compile(r"\.request\s*\("), 'HTTP call without retry/backoff logic: "{match}"'),
        (re.compile(r"http\.\w+\s*\("), 'HTTP call without retry/backoff logic: "{match}"'),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-retry-logic",
            description="Detects fetch/HTTP calls without retry or backoff logic",
            severity=Severity.INFO,
            extensions=JS_EXTENSIONS,
            tags=("reliability", "network"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.HTTP_PATTERNS

    def skip_file(self, path: str, content: str) -> bool:
        return super().skip_file(path, content) or self.RETRY_VOCABULARY.search(content) is not None


class SyncFsRule(PatternRule):
    """
    Detects synchronous file system calls that block the event loop.

    CLI entry points and config loaders are allowed to block.
    """

    comment_prefixes = ()
    first_match_only = True
    report_column = False

    ALLOWED_FILES = re.compile(r"(?:cli|config)\.[tj]s$")

    SYNC_PATTERNS = [
        (re.compile(rf"\b{name}\b"), "Synchronous {match} blocks the event loop: use the async version")
        for name in (
            "readFileSync", "writeFileSync", "existsSync", "mkdirSync",
            "readdirSync", "statSync", "unlinkSync", "copyFileSync",
        )
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-sync-fs",
            description="Detects synchronous file system operations that block the event loop",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS,
            tags=("performance", "async"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.SYNC_PATTERNS

    def skip_file(self, path: str, content: str) -> bool:
        return self.ALLOWED_FILES.search(path) is not None


class TimeoutRule(ContentPatternRule):
    """
    Detects fetch() calls in files with no timeout configuration.
    """

    TIMEOUT_CONFIG = re.compile(r"timeout|AbortSignal|signal\s*:")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-timeout",
            description="Detects HTTP/network calls without timeout configuration",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS,
            tags=("reliability", "network"),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(re.compile(r"\bfetch\s*\("), "fetch() without timeout/AbortSignal can hang indefinitely")]

    def skip_file(self, path: str, content: str) -> bool:
        return super().skip_file(path, content) or self.TIMEOUT_CONFIG.search(content) is not None


class UnboundedLoopRule(ContentPatternRule):
    """
    Detects infinite loops with no break or return in their first 20 lines.
    """

    EXIT_WINDOW = 20
    EXIT = re.compile(r"\b(break|return)\b")

    LOOP_PATTERNS = [
        (re.compile(r"\bwhile\s*\(\s*true\s*\)"),
         "while(true) without obvious bound: ensure a break/return condition exists"),
        (re.compile(r"\bwhile\s*\(\s*1\s*\)"),
         "while(1) infinite loop: use an explicit condition instead"),
        (re.compile(r"\bfor\s*\(\s*;\s*;\s*\)"),
         "for(;;) infinite loop: ensure an exit condition exists"),
        (re.compile(r"\bwhile\s+True\s*:"),
         "while True: without obvious bound: ensure a break condition exists"),
    ]

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="unbounded-loop",
            description="Detects while(true) and infinite loops without clear exit conditions",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS + ("py",),
            tags=("reliability",),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return self.LOOP_PATTERNS

    def accept(self, match: "re.Match", content: str, lines: List[str], line: int) -> bool:
        window = "\n".join(lines[line - 1:line - 1 + self.EXIT_WINDOW])
        return self.EXIT.search(window) is None


class ResourceLeakRule(Rule):
    """
    Detects opened resources without visible cleanup.

    Streams and connections are checked against cleanup calls anywhere
    in the file. In Python files, open() calls outside a with statement
    are reported.
    """

    STREAM = re.compile(r"\bcreate(?:Read|Write)Stream\s*\(")
    STREAM_CLEANUP = re.compile(r"\.close\(\)|\.destroy\(\)|pipeline|\.pipe\(")

    # (opener, cleanup call that releases it)
    CONNECTIONS = [
        (re.compile(r"new\s+Database\s*\("), re.compile(r"\.close\(\)")),
        (re.compile(r"createConnection\s*\("), re.compile(r"\.(?:close|end|destroy)\(\)")),
        (re.compile(r"createPool\s*\("), re.compile(r"\.(?:end|destroy)\(\)")),
    ]

    PYTHON_OPEN = re.compile(r"(?<!\w)open\s*\(")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="resource-leak",
            description="Detects opened resources (files, connections, streams) without proper cleanup",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS + ("py",),
            tags=("reliability", "resources"),
        )

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        if is_test_file(path):
            return violations

        if not self.STREAM_CLEANUP.search(content):
            for match in self.STREAM.finditer(content):
                line = line_of_offset(content, match.start())
                violations.append(self.create_violation(
                    path, line,
                    "Stream created without .close(), .destroy(), or pipeline: may leak file descriptors",
                    snippet=snippet_at(lines, line),
                ))

        for opener, cleanup in self.CONNECTIONS:
            if cleanup.search(content):
                continue
            for match in opener.finditer(content):
                line = line_of_offset(content, match.start())
                violations.append(self.create_violation(
                    path, line,
                    f"Resource opened with {match.group(0).strip()} but no close/cleanup found in file",
                    snippet=snippet_at(lines, line),
                ))

        if file_extension(path) == "py":
            for match in self.PYTHON_OPEN.finditer(content):
                line = line_of_offset(content, match.start())
                current = lines[line - 1] if line <= len(lines) else ""
                if "with " in current or ".close()" in current:
                    continue
                violations.append(self.create_violation(
                    path, line,
                    "open() without context manager (with statement): file handle may leak",
                    snippet=current.strip(),
                ))

        return violations
