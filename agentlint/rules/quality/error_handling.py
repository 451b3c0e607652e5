"""
Error handling quality rules.

Detects async code without error handling and catch blocks that
silently swallow errors.
"""

import re
from typing import List, Optional, Pattern, Tuple

from agentlint.core.findings import Severity, Violation, Edit
from agentlint.core.rules import (
    Rule, ContentPatternRule, RuleMetadata, line_of_offset, snippet_at
)


JS_EXTENSIONS = ("ts", "js", "tsx", "jsx")

EMPTY_CATCH_BODY = "{ /* handle error */ }"


def extract_block(content: str, start: int) -> Optional[str]:
    """Return the brace-balanced block that opens at or after start."""
    brace = content.find("{", start)
    if brace == -1:
        return None
    depth = 1
    i = brace + 1
    while i < len(content) and depth > 0:
        if content[i] == "{":
            depth += 1
        elif content[i] == "}":
            depth -= 1
        i += 1
    return content[brace:i]


class UnhandledAsyncRule(Rule):
    """
    Detects async functions and promise chains without error handling.

    An async function is reported when its body is longer than a trivial
    one-liner and contains neither try nor .catch(). A .then() call is
    reported when no .catch( follows within five lines.
    """

    ASYNC_FUNCTION = re.compile(r"async\s+(?:function\s+)?(\w+)?\s*\(")
    MIN_BODY_LENGTH = 50
    CATCH_WINDOW = 5

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-unhandled-async",
            description="Detects async functions and promises without try/catch or .catch()",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS,
            tags=("error-handling", "async"),
        )

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []

        for match in self.ASYNC_FUNCTION.finditer(content):
            body = extract_block(content, match.start())
            if body is None or len(body) <= self.MIN_BODY_LENGTH:
                continue
            if "try" in body or ".catch(" in body:
                continue
            line = line_of_offset(content, match.start())
            name = f' "{match.group(1)}"' if match.group(1) else ""
            violations.append(self.create_violation(
                path,
                line,
                f"Async function{name} has no try/catch or .catch() error handling",
                snippet=snippet_at(lines, line),
            ))

        for index, line in enumerate(lines):
            if ".then(" not in line:
                continue
            following = "\n".join(lines[index:index + self.CATCH_WINDOW])
            if ".catch(" not in following:
                violations.append(self.create_violation(
                    path,
                    index + 1,
                    ".then() without .catch(): unhandled promise rejection",
                    snippet=line.strip(),
                ))

        return violations


class EmptyCatchRule(ContentPatternRule):
    """
    Detects empty catch blocks.

    The fixer fills single-line empty blocks with a placeholder comment.
    """

    skip_test_files = False

    EMPTY_CATCH = re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}")
    SINGLE_LINE_EMPTY_CATCH = re.compile(r"(catch\s*\([^)\n]*\)[ \t]*)\{[ \t]*\}")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-empty-catch",
            description="Detects empty catch blocks that silently swallow errors",
            severity=Severity.ERROR,
            extensions=JS_EXTENSIONS,
            tags=("error-handling",),
            auto_fixable=True,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(self.EMPTY_CATCH, "Empty catch block silently swallows errors")]

    def fix(self, path: str, content: str, lines: List[str]) -> List[Edit]:
        edits: List[Edit] = []
        for line_num, line in enumerate(lines, start=1):
            match = self.SINGLE_LINE_EMPTY_CATCH.search(line)
            if match:
                edits.append(self.create_edit(
                    path,
                    line_num,
                    match.group(0),
                    match.group(1) + EMPTY_CATCH_BODY,
                ))
        return edits
