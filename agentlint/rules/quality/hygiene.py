"""
Code hygiene rules.

Leftover debugging output, unresolved TODO markers and loose TypeScript
typing. Most of these have safe mechanical fixes.
"""

import re
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity, Edit
from agentlint.core.rules import PatternRule, ContentPatternRule, RuleMetadata


JS_EXTENSIONS = ("ts", "js", "tsx", "jsx")
TS_EXTENSIONS = ("ts", "tsx")


class ConsoleLogRule(PatternRule):
    """
    Detects console logging that should go through a structured logger.

    The fixer deletes statements that occupy a whole line on their own;
    calls spanning several lines or sharing a line with other code are
    left for a human.
    """

    skip_test_files = True
    first_match_only = True
    report_column = False

    CONSOLE_CALL = re.compile(r"console\.(log|warn|error|info|debug)\s*\(")
    STANDALONE_STATEMENT = re.compile(r"^\s*console\.(?:log|warn|error|info|debug)\s*\(.*\)\s*;?\s*$")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-console-log",
            description="Detects console.log usage that should be replaced with structured logging",
            severity=Severity.WARNING,
            extensions=JS_EXTENSIONS,
            tags=("logging",),
            auto_fixable=True,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(self.CONSOLE_CALL, "console.{group}(): use a structured logger instead")]

    def fix(self, path: str, content: str, lines: List[str]) -> List[Edit]:
        if self.skip_file(path, content):
            return []
        edits: List[Edit] = []
        for line_num, line in enumerate(lines, start=1):
            if self.skip_line(line):
                continue
            if self.STANDALONE_STATEMENT.match(line) and line.count("(") == line.count(")"):
                edits.append(self.create_edit(path, line_num, line, ""))
        return edits


class TodoFixmeRule(PatternRule):
    """
    Detects TODO/FIXME/HACK/XXX/TEMP markers left in code.

    The fixer removes every line carrying a marker.
    """

    comment_prefixes = ()

    MARKER = re.compile(r"\b(TODO|FIXME|HACK|XXX|TEMP|TEMPORARY)\b")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-todo-fixme",
            description="Detects TODO/FIXME/HACK/XXX comments left by agents",
            severity=Severity.INFO,
            extensions=("ts", "js", "tsx", "jsx", "py", "go", "rs"),
            tags=("hygiene",),
            auto_fixable=True,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(self.MARKER, "{group} comment: resolve before shipping")]

    def fix(self, path: str, content: str, lines: List[str]) -> List[Edit]:
        return [
            self.create_edit(path, line_num, line, "")
            for line_num, line in enumerate(lines, start=1)
            if self.MARKER.search(line)
        ]


class AnyTypeRule(PatternRule):
    """
    Detects the TypeScript `any` type.

    The fixer rewrites each flagged occurrence on a line to `unknown`.
    """

    ANY_TYPE = re.compile(r"(?::\s*any\b|\bas\s+any\b|<any>|\bany\[\])")

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="no-any-type",
            description="Detects usage of `any` type",
            severity=Severity.WARNING,
            extensions=TS_EXTENSIONS,
            tags=("typing",),
            auto_fixable=True,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(self.ANY_TYPE, "Usage of `any` type: define a proper type")]

    def fix(self, path: str, content: str, lines: List[str]) -> List[Edit]:
        edits: List[Edit] = []
        for line_num, line in enumerate(lines, start=1):
            if self.skip_line(line):
                continue
            fixed = self.ANY_TYPE.sub(lambda m: re.sub(r"\bany\b", "unknown", m.group(0)), line)
            if fixed != line:
                edits.append(self.create_edit(path, line_num, line, fixed))
        return edits


class MissingTypesRule(ContentPatternRule):
    """
    Detects function declarations without a return type annotation.
    """

    FUNCTION_WITHOUT_RETURN_TYPE = re.compile(
        r"^(?:export\s+)?(?:async\s+)?function\s+(\w+)\s*\([^)]*\)\s*\{",
        re.MULTILINE,
    )

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="missing-types",
            description="Detects functions without return type annotations",
            severity=Severity.INFO,
            extensions=TS_EXTENSIONS,
            tags=("typing",),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(self.FUNCTION_WITHOUT_RETURN_TYPE, "Function '{group}' is missing a return type annotation")]

    def skip_file(self, path: str, content: str) -> bool:
        return super().skip_file(path, content) or path.endswith(".d.ts")
