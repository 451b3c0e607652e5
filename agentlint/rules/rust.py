"""
Rust-specific rules.

Panicking shortcuts (unwrap, panic!, todo!), undocumented unsafe blocks
and clone-heavy code written to appease the borrow checker.
"""

import os
import re
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity, Violation
from agentlint.core.rules import Rule, PatternRule, RuleMetadata, starts_with_comment
from agentlint.utils import is_test_file


TEST_ATTRIBUTE = re.compile(r"#\[cfg\(test\)\]|#\[test\]")


def rust_metadata(rule_id: str, description: str, severity: Severity) -> RuleMetadata:
    return RuleMetadata(
        rule_id=rule_id,
        description=description,
        severity=severity,
        extensions=("rs",),
        tags=("rust",),
    )


class RustUnwrapRule(PatternRule):
    """
    Detects .unwrap() outside of test code.
    """

    skip_test_files = True

    @property
    def metadata(self) -> RuleMetadata:
        return rust_metadata(
            "rust-unwrap",
            "Detects .unwrap() calls outside of tests; use proper error handling with ? or match",
            Severity.ERROR,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(
            re.compile(r"\.unwrap\(\)"),
            ".unwrap() will panic on None/Err: use `?`, `unwrap_or`, or `match` instead",
        )]

    def skip_file(self, path: str, content: str) -> bool:
        return super().skip_file(path, content) or TEST_ATTRIBUTE.search(content) is not None


class RustPanicRule(PatternRule):
    """
    Detects panic!() in library code.

    Binaries (main.rs) and files carrying test modules may panic.
    """

    skip_test_files = True
    first_match_only = True

    @property
    def metadata(self) -> RuleMetadata:
        return rust_metadata(
            "rust-panic",
            "Detects panic!() in library code (non-main, non-test); return Result instead",
            Severity.ERROR,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(
            re.compile(r"\bpanic!\s*\("),
            "panic!() in library code: return Result or Option instead",
        )]

    def skip_file(self, path: str, content: str) -> bool:
        if super().skip_file(path, content):
            return True
        return os.path.basename(path) == "main.rs" or TEST_ATTRIBUTE.search(content) is not None


class RustTodoMacroRule(PatternRule):
    """
    Detects todo!() and unimplemented!() placeholders.
    """

    skip_test_files = True

    @property
    def metadata(self) -> RuleMetadata:
        return rust_metadata(
            "rust-todo-macro",
            "Detects todo!() and unimplemented!() macros left in code",
            Severity.ERROR,
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(
            re.compile(r"\b(todo|unimplemented)!\s*\("),
            "{group}!() macro left in code: implement before shipping",
        )]


class RustUnsafeBlockRule(Rule):
    """
    Detects unsafe blocks with no `// SAFETY` comment in the three
    preceding lines.
    """

    UNSAFE_BLOCK = re.compile(r"\bunsafe\s*\{")
    SAFETY_COMMENT = re.compile(r"//\s*SAFETY\b", re.IGNORECASE)
    WINDOW = 3

    @property
    def metadata(self) -> RuleMetadata:
        return rust_metadata(
            "rust-unsafe-block",
            "Detects unsafe blocks without SAFETY comments",
            Severity.ERROR,
        )

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        if is_test_file(path):
            return violations

        for index, line in enumerate(lines):
            if starts_with_comment(line) or not self.UNSAFE_BLOCK.search(line):
                continue
            preceding = "\n".join(lines[max(0, index - self.WINDOW):index])
            if self.SAFETY_COMMENT.search(preceding):
                continue
            violations.append(self.create_violation(
                path, index + 1,
                "unsafe block without `// SAFETY:` comment: document why this is safe",
                snippet=line.strip(),
            ))
        return violations


class RustCloneHeavyRule(Rule):
    """
    Detects files with many .clone() calls.

    Once a file reaches the threshold, every line with a clone is reported.
    """

    CLONE = re.compile(r"\.clone\(\)")
    THRESHOLD = 5

    @property
    def metadata(self) -> RuleMetadata:
        return rust_metadata(
            "rust-clone-heavy",
            "Detects excessive .clone() calls made to satisfy the borrow checker",
            Severity.WARNING,
        )

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        if is_test_file(path):
            return []

        clone_lines = [
            index + 1 for index, line in enumerate(lines)
            if not starts_with_comment(line) and self.CLONE.search(line)
        ]
        if len(clone_lines) < self.THRESHOLD:
            return []

        message = (
            f"Excessive .clone() usage ({len(clone_lines)} in file): "
            "consider borrowing or using references"
        )
        return [
            self.create_violation(path, line, message, snippet=lines[line - 1].strip())
            for line in clone_lines
        ]
