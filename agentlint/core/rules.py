"""
Rule engine for agentlint.

This module provides the base classes for defining detectors and fixers,
and the registry that collects rule instances for the engines.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Dict, Optional, Pattern, Tuple
import re

from agentlint.core.findings import Violation, Edit, Severity
from agentlint.utils import file_extension, is_test_file


@dataclass(frozen=True)
class RuleMetadata:
    """Metadata for a rule."""
    rule_id: str
    description: str
    severity: Severity
    extensions: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = field(default_factory=tuple)
    auto_fixable: bool = False


def line_of_offset(content: str, offset: int) -> int:
    """Return the 1-based line number of a character offset in content."""
    return content.count("\n", 0, offset) + 1


def snippet_at(lines: List[str], line: int) -> Optional[str]:
    """Return the stripped text of a 1-based line, or None if out of range."""
    if 1 <= line <= len(lines):
        return lines[line - 1].strip()
    return None


def starts_with_comment(line: str, prefixes: Iterable[str] = ("//",)) -> bool:
    """Check if a line starts with one of the given comment markers."""
    return line.lstrip().startswith(tuple(prefixes))


class Rule(ABC):
    """
    Base class for all lint rules.

    Each rule detects one class of risky pattern. check() and fix() must
    be pure: they only look at their arguments and never touch shared
    state or the filesystem, so engines may call them concurrently.
    """

    @property
    @abstractmethod
    def metadata(self) -> RuleMetadata:
        """Return rule metadata."""
        pass

    @abstractmethod
    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        """
        Analyze one unit of source text.

        Args:
            path: The file path the content belongs to.
            content: The full text.
            lines: content split on newlines.

        Returns:
            Violations whose lines are within 1..len(lines).
        """
        pass

    def fix(self, path: str, content: str, lines: List[str]) -> List[Edit]:
        """
        Propose edits for this rule's violations.

        Only rules whose metadata is auto_fixable override this.
        """
        return []

    @property
    def name(self) -> str:
        return self.metadata.rule_id

    @property
    def fixable(self) -> bool:
        return self.metadata.auto_fixable

    def applies_to(self, path: str) -> bool:
        """Check if this rule handles a path's extension (empty set = all)."""
        extensions = self.metadata.extensions
        return not extensions or file_extension(path) in extensions

    def create_violation(
        self,
        path: str,
        line: int,
        message: str,
        column: Optional[int] = None,
        snippet: Optional[str] = None,
    ) -> Violation:
        """
        Create a violation using the rule's metadata as defaults.
        """
        return Violation(
            rule_id=self.metadata.rule_id,
            severity=self.metadata.severity,
            message=message,
            file_path=path,
            line=line,
            column=column,
            snippet=snippet,
        )

    def create_edit(self, path: str, line: int, match_text: str, replacement: str) -> Edit:
        return Edit(
            file_path=path,
            line=line,
            match_text=match_text,
            replacement=replacement,
            rule_id=self.metadata.rule_id,
        )


class PatternRule(Rule):
    """
    A rule that matches regex patterns line by line.

    Every match of every pattern yields one violation. With
    first_match_only set, each pattern reports at most once per line.
    Columns are reported unless report_column is turned off.
    """

    comment_prefixes: Tuple[str, ...] = ("//",)
    skip_test_files: bool = False
    first_match_only: bool = False
    report_column: bool = True

    @property
    @abstractmethod
    def patterns(self) -> List[Tuple[Pattern, str]]:
        """Return (pattern, message) pairs. Messages may use {match} and {group}."""
        pass

    def skip_file(self, path: str, content: str) -> bool:
        """Return True to ignore a whole unit."""
        return self.skip_test_files and is_test_file(path)

    def skip_line(self, line: str) -> bool:
        """Return True to ignore a line."""
        return bool(self.comment_prefixes) and starts_with_comment(line, self.comment_prefixes)

    def accept_match(self, match: "re.Match", line: str) -> bool:
        """Return False to discard a single match."""
        return True

    def format_snippet(self, line: str) -> str:
        return line.strip()

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        if self.skip_file(path, content):
            return violations

        for line_num, line in enumerate(lines, start=1):
            if self.skip_line(line):
                continue
            for pattern, message in self.patterns:
                for match in self._matches(pattern, line):
                    violations.append(self.create_violation(
                        path,
                        line_num,
                        message.format(match=match.group(0), group=match.group(match.lastindex or 0)),
                        column=match.start() + 1 if self.report_column else None,
                        snippet=self.format_snippet(line),
                    ))
        return violations

    def _matches(self, pattern: Pattern, line: str) -> Iterator["re.Match"]:
        for match in pattern.finditer(line):
            if not self.accept_match(match, line):
                continue
            yield match
            if self.first_match_only:
                return


class ContentPatternRule(Rule):
    """
    A rule that matches regex patterns against the whole content.

    Useful for constructs that can span lines; the reported line is the
    line where the match starts.
    """

    skip_test_files: bool = True

    @property
    @abstractmethod
    def patterns(self) -> List[Tuple[Pattern, str]]:
        """Return (pattern, message) pairs. Messages may use {match} and {group}."""
        pass

    def patterns_for(self, path: str) -> List[Tuple[Pattern, str]]:
        """Return the patterns to run for a given path."""
        return self.patterns

    def skip_file(self, path: str, content: str) -> bool:
        return self.skip_test_files and is_test_file(path)

    def accept(self, match: "re.Match", content: str, lines: List[str], line: int) -> bool:
        """Return False to discard a match after inspecting its surroundings."""
        return True

    def check(self, path: str, content: str, lines: List[str]) -> List[Violation]:
        violations: List[Violation] = []
        if self.skip_file(path, content):
            return violations

        for pattern, message in self.patterns_for(path):
            for match in pattern.finditer(content):
                line = line_of_offset(content, match.start())
                if not self.accept(match, content, lines, line):
                    continue
                violations.append(self.create_violation(
                    path,
                    line,
                    message.format(match=match.group(0).strip(), group=match.group(match.lastindex or 0)),
                    snippet=snippet_at(lines, line),
                ))
        return violations


class RuleRegistry:
    """
    Immutable, ordered collection of rule instances.

    Built once at startup and handed to the engines; rule order is the
    order in which violations and edits are collected.
    """

    def __init__(self, rules: Iterable[Rule]):
        self._rules: Tuple[Rule, ...] = tuple(rules)
        self._by_id: Dict[str, Rule] = {}
        for rule in self._rules:
            if rule.name in self._by_id:
                raise ValueError(f"Duplicate rule id: {rule.name}")
            self._by_id[rule.name] = rule

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._by_id

    def get(self, rule_id: str) -> Optional[Rule]:
        """Get a rule by id."""
        return self._by_id.get(rule_id)

    @property
    def rule_ids(self) -> List[str]:
        return [rule.name for rule in self._rules]

    def fixable_rules(self) -> List[Rule]:
        return [rule for rule in self._rules if rule.fixable]

    def rules_for_extension(self, ext: str) -> List[Rule]:
        """Get the rules that apply to a bare extension such as "ts"."""
        return [
            rule for rule in self._rules
            if not rule.metadata.extensions or ext in rule.metadata.extensions
        ]
