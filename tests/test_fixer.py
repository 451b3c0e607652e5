"""
Tests for the fix engine.
"""

import os

from agentlint.config import LintConfig
from agentlint.core.findings import Edit
from agentlint.core.rules import RuleRegistry
from agentlint.remediation import FixEngine, FixSummary, apply_edits
from agentlint.remediation import engine as engine_module


class TestApplyEdits:
    """Tests for conflict-free edit application."""

    def test_deletion_and_replace_above_it(self):
        """A deletion at L does not disturb a replace at L' < L."""
        content = "one\ntwo\nthree\nfour"
        edits = [
            Edit("x.ts", 2, "two", "TWO"),
            Edit("x.ts", 4, "four", ""),
        ]

        outcome = apply_edits(content, edits)

        assert outcome.content == "one\nTWO\nthree"
        assert len(outcome.applied) == 2
        assert outcome.dropped == []

    def test_two_edits_on_same_line(self):
        """Exactly one edit applies per line; the other is dropped."""
        content = "a\nDEBUG_PRINT(x) // TODO\nb"
        edits = [
            Edit("x.ts", 2, "DEBUG_PRINT(x) // TODO", "", rule_id="R1"),
            Edit("x.ts", 2, "TODO", "", rule_id="R2"),
        ]

        outcome = apply_edits(content, edits)

        assert len(outcome.applied) == 1
        assert len(outcome.dropped) == 1
        # Stable order: the first proposed edit wins
        assert outcome.applied[0].rule_id == "R1"
        assert outcome.content == "a\nb"

    def test_whole_line_and_substring_replace(self):
        content = "let a = 1\nlet b = a + a"
        edits = [
            Edit("x.ts", 1, "let a = 1", "const a = 1"),
            Edit("x.ts", 2, "a", "c"),
        ]

        outcome = apply_edits(content, edits)

        assert outcome.content == "const a = 1\nlet b = c + a"

    def test_out_of_range_edit_is_dropped(self):
        outcome = apply_edits("only", [Edit("x.ts", 5, "x", "y")])

        assert outcome.content == "only"
        assert outcome.applied == []
        assert len(outcome.dropped) == 1

    def test_noop_replace_is_not_counted(self):
        outcome = apply_edits("abc", [Edit("x.ts", 1, "zzz", "yyy")])

        assert outcome.content == "abc"
        assert outcome.applied == []
        assert not outcome.changed

    def test_trailing_newline_is_preserved(self):
        outcome = apply_edits("keep\ndrop\n", [Edit("x.ts", 2, "drop", "")])

        assert outcome.content == "keep\n"


class TestFixEngine:
    """Tests for fixing files on disk."""

    def test_conflicting_rules_example(self, marker_rule, write_file):
        """R1 deletes DEBUG_PRINT lines, R2 rewrites TODO: one applies."""
        path = write_file("x.ts", "a\nDEBUG_PRINT(x) // TODO\nb")
        registry = RuleRegistry([
            marker_rule("R1", "DEBUG_PRINT", delete=True),
            marker_rule("R2", "TODO", replace="DONE"),
        ])

        summary = FixEngine(registry).apply([path])

        with open(path, encoding="utf-8") as f:
            fixed = f.read()
        assert summary.applied_edits == 1
        assert summary.dropped_edits == 1
        assert fixed in ("a\nb", "a\nDEBUG_PRINT(x) // DONE\nb")

    def test_builtin_fixes(self, registry, write_file):
        path = write_file("app.ts", "\n".join([
            "const a: any = load();",
            "try { run(); } catch (e) {}",
            "console.log(\"debug\");",
            "// TODO: remove this",
            "",
        ]))

        summary = FixEngine(registry).apply([path])

        with open(path, encoding="utf-8") as f:
            fixed = f.read()
        assert fixed == "\n".join([
            "const a: unknown = load();",
            "try { run(); } catch (e) { /* handle error */ }",
            "",
        ])
        assert summary.changed_files == [path]
        assert summary.applied_edits == 4

    def test_fix_is_idempotent(self, registry, write_file):
        path = write_file("app.ts", "function f(x: any) {\n  try { g(x); } catch (err) {}\n}\n")
        engine = FixEngine(registry)

        engine.apply([path])
        with open(path, encoding="utf-8") as f:
            fixed = f.read()

        assert engine.collect_edits(path, fixed) == []
        second = engine.apply([path])
        assert second.changed_files == []
        assert second.format() == "No auto-fixable violations found."

    def test_disabled_rule_contributes_no_edits(self, registry, write_file):
        path = write_file("app.ts", "// TODO: keep me\n")
        config, _ = LintConfig.from_dict({"rules": {"no-todo-fixme": "off"}})

        summary = FixEngine(registry, config).apply([path])

        with open(path, encoding="utf-8") as f:
            assert f.read() == "// TODO: keep me\n"
        assert summary.changed_files == []

    def test_dry_run_leaves_files_untouched(self, registry, write_file):
        path = write_file("app.ts", "console.log(1);\nconst x = 1;\n")

        summary = FixEngine(registry, dry_run=True).apply([path])

        with open(path, encoding="utf-8") as f:
            assert f.read() == "console.log(1);\nconst x = 1;\n"
        assert summary.changed_files == [path]
        assert len(summary.diffs) == 1
        assert "-console.log(1);" in summary.diffs[0]

    def test_backup_keeps_original(self, registry, write_file):
        path = write_file("app.ts", "console.log(1);\nconst x = 1;\n")

        FixEngine(registry, backup=True).apply([path])

        with open(path + ".bak", encoding="utf-8") as f:
            assert f.read() == "console.log(1);\nconst x = 1;\n"
        with open(path, encoding="utf-8") as f:
            assert f.read() == "const x = 1;\n"

    def test_unreadable_file_does_not_stop_batch(self, registry, write_file, tmp_path):
        bad = tmp_path / "bad.ts"
        bad.write_bytes(b"\xff\xfe console.log(1);")
        good = write_file("good.ts", "console.log(1);\n")

        summary = FixEngine(registry).apply([str(bad), good])

        assert summary.changed_files == [good]
        assert len(summary.errors) == 1
        assert summary.errors[0].startswith(str(bad))

    def test_write_failure_does_not_stop_batch(self, registry, write_file, monkeypatch):
        blocked = write_file("blocked.ts", "console.log(1);\n")
        good = write_file("good.ts", "console.log(2);\nconst x = 1;\n")
        real_write = engine_module.write_atomic

        def write_or_fail(path, content):
            if path == blocked:
                raise OSError("Read-only file system")
            real_write(path, content)

        monkeypatch.setattr(engine_module, "write_atomic", write_or_fail)
        summary = FixEngine(registry).apply([blocked, good])

        assert summary.changed_files == [good]
        assert summary.errors == [f"{blocked}: Read-only file system"]
        with open(good, encoding="utf-8") as f:
            assert f.read() == "const x = 1;\n"
        with open(blocked, "rb") as f:
            assert f.read() == b"console.log(1);\n"

    def test_failed_rename_leaves_no_partial_file(self, registry, write_file, monkeypatch, tmp_path):
        path = write_file("app.ts", "console.log(1);\n")

        def fail_replace(src, dst):
            raise OSError("rename failed")

        monkeypatch.setattr(os, "replace", fail_replace)
        summary = FixEngine(registry).apply([path])
        monkeypatch.undo()

        assert summary.changed_files == []
        assert len(summary.errors) == 1
        with open(path, "rb") as f:
            assert f.read() == b"console.log(1);\n"
        assert sorted(os.listdir(tmp_path)) == ["app.ts"]

    def test_crlf_line_endings_are_preserved(self, registry, tmp_path):
        """Only the targeted line changes; the others keep their "\\r\\n"."""
        path = tmp_path / "app.ts"
        path.write_bytes(b"const a = 1;\r\nconsole.log(a);\r\nconst b = 2;\r\n")

        summary = FixEngine(registry).apply([str(path)])

        assert summary.applied_edits == 1
        assert path.read_bytes() == b"const a = 1;\r\nconst b = 2;\r\n"

    def test_crlf_any_type_fix_keeps_line_ending(self, registry, tmp_path):
        path = tmp_path / "types.ts"
        path.write_bytes(b"let a: any = 1;\r\nlet b = 2;\r\n")

        FixEngine(registry).apply([str(path)])

        assert path.read_bytes() == b"let a: unknown = 1;\r\nlet b = 2;\r\n"

    def test_unchanged_file_is_not_rewritten(self, registry, write_file):
        path = write_file("clean.ts", "const x = 1;\n")
        before = os.stat(path).st_mtime_ns

        summary = FixEngine(registry).apply([path])

        assert os.stat(path).st_mtime_ns == before
        assert summary.changed_files == []

    def test_fix_path_walks_directory(self, registry, write_file, tmp_path):
        write_file("src/a.ts", "console.log(1);\n")
        write_file("src/b.ts", "const ok = true;\n")

        summary = FixEngine(registry).fix_path(str(tmp_path))

        assert len(summary.changed_files) == 1
        assert summary.changed_files[0].endswith("a.ts")


class TestFixSummary:
    """Tests for summary formatting."""

    def test_format_nothing_fixed(self):
        assert FixSummary().format() == "No auto-fixable violations found."

    def test_format_fixed_files(self, tmp_path):
        summary = FixSummary(changed_files=[os.path.join("src", "a.ts"), os.path.join("src", "b.ts")])

        lines = summary.format().split("\n")

        assert lines[0] == "Fixed 2 file(s):"
        assert lines[1] == "  " + os.path.join("src", "a.ts")
        assert lines[2] == "  " + os.path.join("src", "b.ts")
