"""
Tests for the lint engine and file discovery.
"""

import pytest

from agentlint.config import LintConfig
from agentlint.core.engine import LintEngine, LintUnit, collect_files
from agentlint.core.findings import Severity
from agentlint.core.rules import Rule, RuleMetadata, RuleRegistry


class OverreachingRule(Rule):
    """Reports a line five past the end of whatever it is given."""

    @property
    def metadata(self) -> RuleMetadata:
        return RuleMetadata(rule_id="overreach", description="Reports past the end", severity=Severity.WARNING)

    def check(self, path, content, lines):
        return [self.create_violation(path, len(lines) + 5, "past the end")]


class TestLintEngine:
    """Tests for running rules over units."""

    def test_disabled_rule_is_excluded(self, marker_rule):
        """A rule configured "off" never reports (R1 three times, R2 once)."""
        registry = RuleRegistry([marker_rule("R1", "foo"), marker_rule("R2", "bar")])
        config, _ = LintConfig.from_dict({"rules": {"R1": "off"}})
        engine = LintEngine(registry, config)

        unit = LintUnit.from_text("x.ts", "foo\nfoo\nfoo bar")
        violations = engine.lint_unit(unit)

        assert len(violations) == 1
        assert violations[0].rule_id == "R2"

    def test_severity_override(self, marker_rule):
        registry = RuleRegistry([marker_rule("R1", "foo", severity=Severity.INFO)])
        config, _ = LintConfig.from_dict({"rules": {"R1": "error"}})
        engine = LintEngine(registry, config)

        violations = engine.lint_content("foo\nfoo", path="x.ts")

        assert [v.severity for v in violations] == [Severity.ERROR, Severity.ERROR]

    def test_default_severity_without_override(self, marker_rule):
        engine = LintEngine(RuleRegistry([marker_rule("R1", "foo", severity=Severity.INFO)]))

        violations = engine.lint_content("foo", path="x.ts")

        assert violations[0].severity == Severity.INFO

    def test_extension_filtering(self, marker_rule):
        registry = RuleRegistry([
            marker_rule("ts-only", "foo", extensions=("ts",)),
            marker_rule("any-file", "foo"),
        ])
        engine = LintEngine(registry)

        assert {v.rule_id for v in engine.lint_content("foo", path="a.ts")} == {"ts-only", "any-file"}
        assert {v.rule_id for v in engine.lint_content("foo", path="a.go")} == {"any-file"}

    def test_results_merged_in_unit_order(self, marker_rule):
        engine = LintEngine(RuleRegistry([marker_rule("R1", "foo")]), max_workers=4)
        units = [LintUnit.from_text(f"file{i}.ts", "foo") for i in range(20)]

        result = engine.run(units)

        assert [v.file_path for v in result.violations] == [f"file{i}.ts" for i in range(20)]
        assert result.units_scanned == 20
        assert result.rules_applied == 1

    def test_rules_applied_counts_enabled_rules(self, marker_rule):
        registry = RuleRegistry([marker_rule("R1", "foo"), marker_rule("R2", "bar")])
        config, _ = LintConfig.from_dict({"rules": {"R2": "off"}})

        result = LintEngine(registry, config).run([LintUnit.from_text("x.ts", "")])

        assert result.rules_applied == 1


class TestLintDiff:
    """Tests for linting the added lines of a diff."""

    def test_violations_are_remapped(self, marker_rule):
        engine = LintEngine(RuleRegistry([marker_rule("R1", "bad")]))
        diff = "+++ b/x.ts\n@@ -10,2 +10,3 @@\n context\n+bad line\n context2"

        result = engine.lint_diff(diff)

        assert len(result.violations) == 1
        assert result.violations[0].file_path == "x.ts"
        assert result.violations[0].line == 11
        assert result.units_scanned == 1

    def test_remapping_matches_full_file_lint(self, marker_rule):
        """Linting added lines then remapping equals linting the new file."""
        engine = LintEngine(RuleRegistry([marker_rule("R1", "bad")]))
        new_file = ["ok", "bad 1", "ok", "ok", "bad 2", "bad 3", "ok"]
        added = {2, 5, 6, 7}
        diff_lines = ["+++ b/x.ts", "@@ -1,3 +1,7 @@"]
        for num, text in enumerate(new_file, start=1):
            diff_lines.append(("+" if num in added else " ") + text)

        from_diff = engine.lint_diff("\n".join(diff_lines))
        from_file = engine.lint_content("\n".join(new_file), path="x.ts")

        assert [v.line for v in from_diff.violations] == [
            v.line for v in from_file if v.line in added
        ]

    def test_out_of_range_line_stays_unmapped(self):
        engine = LintEngine(RuleRegistry([OverreachingRule()]))
        diff = "+++ b/x.ts\n@@ -10,2 +10,3 @@\n context\n+added\n context2"

        result = engine.lint_diff(diff)

        assert [(v.file_path, v.line) for v in result.violations] == [("x.ts", 6)]

    def test_added_line_starting_with_plus_plus_keeps_file_open(self, registry):
        engine = LintEngine(registry)
        diff = "+++ b/app.js\n@@ -1,1 +1,4 @@\n let i = 0;\n+++i;\n+eval(userInput);\n+const x = 1;"

        result = engine.lint_diff(diff)

        evals = [v for v in result.violations if v.rule_id == "unsafe-eval"]
        assert [(v.file_path, v.line) for v in evals] == [("app.js", 3)]

    def test_diff_to_removed_file_yields_nothing(self, marker_rule):
        engine = LintEngine(RuleRegistry([marker_rule("R1", "bad")]))

        result = engine.lint_diff("--- a/x.ts\n+++ /dev/null\n@@ -1 +0,0 @@\n-bad")

        assert result.violations == []
        assert result.units_scanned == 0


class TestLintPath:
    """Tests for linting files on disk."""

    def test_lint_directory(self, marker_rule, write_file, tmp_path):
        write_file("src/a.ts", "foo\n")
        write_file("src/b.py", "nothing\n")
        engine = LintEngine(RuleRegistry([marker_rule("R1", "foo")]))

        result = engine.lint_path(str(tmp_path))

        assert result.units_scanned == 2
        assert len(result.violations) == 1
        assert result.violations[0].file_path.endswith("a.ts")

    def test_unreadable_file_is_skipped(self, marker_rule, write_file, tmp_path):
        write_file("good.ts", "foo\n")
        (tmp_path / "bad.ts").write_bytes(b"\xff\xfe\xfa foo")
        engine = LintEngine(RuleRegistry([marker_rule("R1", "foo")]))

        result = engine.lint_path(str(tmp_path))

        assert result.units_scanned == 1
        assert len(result.violations) == 1
        assert len(result.errors) == 1
        assert "bad.ts" in result.errors[0]

    def test_missing_target_raises(self, registry, tmp_path):
        engine = LintEngine(registry)

        with pytest.raises(FileNotFoundError):
            engine.lint_path(str(tmp_path / "missing"))


class TestCollectFiles:
    """Tests for file discovery."""

    def test_default_ignores_and_extensions(self, write_file, tmp_path):
        write_file("src/app.ts", "")
        write_file("src/util.go", "")
        write_file("README.md", "")
        write_file("node_modules/pkg/index.js", "")
        write_file("dist/bundle.js", "")
        write_file(".hidden/secret.ts", "")
        write_file(".env", "")
        write_file(".eslintrc.json", "")

        files = collect_files(str(tmp_path))
        names = sorted(p.replace(str(tmp_path), "").replace("\\", "/") for p in files)

        assert names == ["/.env", "/src/app.ts", "/src/util.go"]

    def test_configured_ignore_and_extensions(self, write_file, tmp_path):
        write_file("src/app.ts", "")
        write_file("src/app.py", "")
        write_file("generated/types.ts", "")
        config = LintConfig(ignore=("generated/",), extensions=("ts",))

        files = collect_files(str(tmp_path), config)

        assert len(files) == 1
        assert files[0].endswith("app.ts")

    def test_ignore_glob_pattern(self, write_file, tmp_path):
        write_file("src/app.ts", "")
        write_file("src/app.min.js", "")
        config = LintConfig(ignore=("*.min.js",))

        files = collect_files(str(tmp_path), config)

        assert [f for f in files if f.endswith(".js")] == []

    def test_file_target_returned_as_is(self, write_file):
        path = write_file("notes.txt", "")

        assert collect_files(path) == [path]

    def test_missing_target_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            collect_files(str(tmp_path / "missing"))
