"""
Go-specific rules.

Line-oriented heuristics for Go idioms agents commonly get wrong:
ignored errors, defers in loops, unsupervised goroutines, init()
functions, missing nil checks and naked returns.
"""

import re
from abc import abstractmethod
from typing import List, Pattern, Tuple

from agentlint.core.findings import Severity, Violation
from agentlint.core.rules import Rule, PatternRule, RuleMetadata, starts_with_comment
from agentlint.utils import is_test_file


def is_go_test_file(path: str) -> bool:
    return is_test_file(path) or path.endswith("_test.go")


class GoRule(Rule):
    """Base for Go rules; test files are never analyzed."""

    def metadata_for(self, rule_id: str, description: str, severity: Severity) -> RuleMetadata:
        return RuleMetadata(
            rule_id=rule_id,
            description=description,
            severity=severity,
            extensions=("go",),
            tags=("go",),
        )

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        if is_go_test_file(path):
            return []
        return self.check_lines(path, content, lines)

    @abstractmethod
    def check_lines(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        """Analyze a non-test Go file."""
        pass


class GoErrorIgnoredRule(GoRule):
    """
    Detects error returns discarded with `_` or never captured.
    """

    BLANK_ASSIGNMENT = re.compile(r",\s*_\s*:?=")
    CALL = re.compile(r"\w+\s*\(")
    BARE_CALL = re.compile(r"^\s+(\w+(?:\.\w+)*)\s*\([^)]*\)\s*$")
    ERR = re.compile(r"\berr\b")

    # Calls that return no error worth checking
    SAFE_CALLS = {
        "fmt.Print", "fmt.Println", "fmt.Printf", "panic", "append", "len",
        "cap", "make", "new", "close", "delete", "copy", "recover",
    }

    @property
    def metadata(self) -> RuleMetadata:
        return self.metadata_for(
            "go-error-ignored",
            "Detects Go code that ignores error returns (blank identifier or unchecked err)",
            Severity.ERROR,
        )

    def check_lines(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        for index, line in enumerate(lines):
            if starts_with_comment(line):
                continue

            blank = self.BLANK_ASSIGNMENT.search(line)
            if blank and self.CALL.search(line):
                violations.append(self.create_violation(
                    path, index + 1,
                    "Error return value ignored with blank identifier `_`",
                    column=blank.start() + 1,
                    snippet=line.strip(),
                ))

            bare = self.BARE_CALL.match(line)
            if bare and not self._is_safe_call(bare.group(1)):
                following = " ".join(lines[index + 1:index + 3])
                if not self.ERR.search(following):
                    violations.append(self.create_violation(
                        path, index + 1,
                        f"Return value of {bare.group(1)}() likely ignored: check for errors",
                        snippet=line.strip(),
                    ))
        return violations

    def _is_safe_call(self, name: str) -> bool:
        return name in self.SAFE_CALLS or name.startswith("log.")


class GoDeferInLoopRule(GoRule):
    """
    Detects defer statements inside for loops.

    Braces are tracked on a stack whose entries remember whether they
    were opened by a for statement.
    """

    FOR_STATEMENT = re.compile(r"^\s*for\s")
    DEFER_STATEMENT = re.compile(r"^\s*defer\s")

    @property
    def metadata(self) -> RuleMetadata:
        return self.metadata_for(
            "go-defer-in-loop",
            "Detects defer inside for loops (deferred calls run at function exit, not loop iteration)",
            Severity.ERROR,
        )

    def check_lines(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        loop_depth = 0
        stack: List[str] = []

        for index, line in enumerate(lines):
            if starts_with_comment(line):
                continue

            if self.FOR_STATEMENT.match(line):
                loop_depth += 1
                stack.append("for")

            for ch in line:
                if ch == "{":
                    # The for statement's own brace is already on the stack
                    if not stack or stack[-1] != "for":
                        stack.append("block")
                elif ch == "}":
                    if stack and stack.pop() == "for":
                        loop_depth -= 1

            if loop_depth > 0 and self.DEFER_STATEMENT.match(line):
                violations.append(self.create_violation(
                    path, index + 1,
                    "defer inside for loop: deferred calls execute at function exit, not loop iteration end",
                    snippet=line.strip(),
                ))
        return violations


class GoGoroutineLeakRule(GoRule):
    """
    Detects goroutines in files with no sync primitives or cancellation.
    """

    SYNC = re.compile(
        r"\b(?:sync\.WaitGroup|context\.WithCancel|context\.WithTimeout|context\.WithDeadline|errgroup)\b"
        r"|\bchan\s|\bselect\s*\{|<-ctx\.Done"
    )
    GO_STATEMENT = re.compile(r"\bgo\s+(func\s*\(|[a-zA-Z_]\w*\s*\()")

    @property
    def metadata(self) -> RuleMetadata:
        return self.metadata_for(
            "go-goroutine-leak",
            "Detects goroutines launched without sync primitives or context cancellation",
            Severity.WARNING,
        )

    def check_lines(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        if self.SYNC.search(content):
            return []
        return [
            self.create_violation(
                path, index + 1,
                "Goroutine launched without visible sync/context: potential goroutine leak",
                snippet=line.strip(),
            )
            for index, line in enumerate(lines)
            if not starts_with_comment(line) and self.GO_STATEMENT.search(line)
        ]


class GoInitFunctionRule(PatternRule):
    """
    Detects init() functions.
    """

    first_match_only = True
    report_column = False

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(
            rule_id="go-init-function",
            description="Detects init() functions with hidden initialization",
            severity=Severity.WARNING,
            extensions=("go",),
            tags=("go",),
        )

    @property
    def patterns(self) -> List[Tuple[Pattern, str]]:
        return [(
            re.compile(r"^\s*func\s+init\s*\(\s*\)\s*\{"),
            "init() function: prefer explicit initialization for clarity and testability",
        )]

    def skip_file(self, path: str, content: str) -> bool:
        return is_go_test_file(path)


class GoNilCheckMissingRule(GoRule):
    """
    Detects a result used before its companion err is checked.

    Looks at up to four lines after `x, err := call()` and reports the
    assignment if `x.` appears before `if err != nil`.
    """

    ASSIGNMENT = re.compile(r"(\w+)\s*,\s*(\w+)\s*:?=\s*\w+")
    ERR_CHECK = re.compile(r"\bif\s+err\s*!=\s*nil\b")
    WINDOW = 4

    @property
    def metadata(self) -> RuleMetadata:
        return self.metadata_for(
            "go-nil-check-missing",
            "Detects pointer dereference without nil check after error-returning function calls",
            Severity.ERROR,
        )

    def check_lines(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        for index, line in enumerate(lines):
            if starts_with_comment(line):
                continue
            assignment = self.ASSIGNMENT.search(line)
            if not assignment or assignment.group(2) != "err":
                continue

            result = assignment.group(1)
            dereference = re.compile(rf"\b{re.escape(result)}\s*\.")
            for following in lines[index + 1:index + 1 + self.WINDOW]:
                if self.ERR_CHECK.search(following):
                    break
                if dereference.search(following):
                    violations.append(self.create_violation(
                        path, index + 1,
                        f"'{result}' used before checking 'err': may dereference nil pointer",
                        snippet=line.strip(),
                    ))
                    break
        return violations


class GoBareReturnRule(GoRule):
    """
    Detects naked returns in functions with named results.
    """

    NAMED_RESULTS_FUNC = re.compile(
        r"\bfunc\s+(?:\([^)]*\)\s*)?\w+\s*\([^)]*\)\s*\((\w+\s+\w+(?:\s*,\s*\w+\s+\w+)*)\)\s*\{"
    )

    @property
    def metadata(self) -> RuleMetadata:
        return self.metadata_for(
            "go-bare-return",
            "Detects naked returns in functions with named return values",
            Severity.WARNING,
        )

    def check_lines(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        for match in self.NAMED_RESULTS_FUNC.finditer(content):
            start = content.count("\n", 0, match.start())
            end = self._closing_line(lines, start)
            if end is None:
                continue
            for index in range(start + 1, end):
                stripped = lines[index].strip()
                if stripped == "return":
                    violations.append(self.create_violation(
                        path, index + 1,
                        "Naked return in function with named return values reduces readability",
                        snippet=stripped,
                    ))
        return violations

    @staticmethod
    def _closing_line(lines: List[str], start: int):
        """Return the index of the line closing the block opened on start."""
        depth = 0
        opened = False
        for index in range(start, len(lines)):
            for ch in lines[index]:
                if ch == "{":
                    depth += 1
                    opened = True
                elif ch == "}":
                    depth -= 1
            if opened and depth == 0:
                return index
        return None
