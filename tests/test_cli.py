"""
Tests for the command-line interface.
"""

import io
import json

import pytest

from agentlint import __version__
from agentlint.cli import main


DIFF = """--- a/src/app.ts
+++ b/src/app.ts
@@ -10,2 +10,3 @@
 const a = 1;
+const password = "hunter2222";
 const b = 2;
"""


@pytest.fixture
def project(tmp_path, monkeypatch):
    """An empty project directory that is also the working directory."""
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


class TestScanCommand:
    """Tests for `agentlint scan`."""

    def test_errors_exit_1(self, project, capsys):
        (project / "app.ts").write_text('const password = "hunter22";\n')

        exit_code = main(["scan", str(project), "--no-color"])

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "no-credential-leak" in out
        assert "Hardcoded password detected" in out

    def test_clean_exit_0(self, project, capsys):
        (project / "app.ts").write_text("export const x = 1;\n")

        exit_code = main(["scan", str(project)])

        assert exit_code == 0
        assert "No issues found" in capsys.readouterr().out

    def test_json_format(self, project, capsys):
        (project / "app.ts").write_text('const password = "hunter22";\n')

        main(["scan", str(project), "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["errors"] == 1
        assert data["summary"]["files_scanned"] == 1

    def test_errors_only(self, project, capsys):
        (project / "app.ts").write_text('console.log("hi");\n')

        exit_code = main(["scan", str(project), "-f", "json", "--errors-only"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["violations"] == []

    def test_stdin_diff(self, project, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO(DIFF))

        exit_code = main(["scan", "--stdin", "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        leaks = [v for v in data["violations"] if v["rule_id"] == "no-credential-leak"]
        assert [(v["file"], v["line"]) for v in leaks] == [("src/app.ts", 11)]
        assert data["summary"]["files_scanned"] == 1

    def test_output_file(self, project, tmp_path, capsys):
        (project / "app.ts").write_text('const password = "hunter22";\n')
        out_file = tmp_path / "report.sarif"

        main(["scan", str(project), "-f", "sarif", "-o", str(out_file)])

        sarif = json.loads(out_file.read_text())
        assert sarif["runs"][0]["results"][0]["ruleId"] == "no-credential-leak"
        assert capsys.readouterr().out == ""

    def test_config_disables_rule(self, project, capsys):
        (project / "app.ts").write_text('const password = "hunter22";\n')
        (project / ".agentlintrc.yaml").write_text("rules:\n  no-credential-leak: off\n")

        assert main(["scan", str(project)]) == 0

    def test_invalid_config_warns(self, project, capsys):
        (project / "app.ts").write_text("export const x = 1;\n")
        config = project / "custom.yaml"
        config.write_text("rules:\n  no-console-log: loud\n")

        exit_code = main(["scan", str(project), "-c", str(config)])

        assert exit_code == 0
        assert "Invalid setting for rule 'no-console-log'" in capsys.readouterr().err

    def test_missing_target(self, project, capsys):
        exit_code = main(["scan", str(project / "nope")])

        assert exit_code == 2
        assert "agentlint error:" in capsys.readouterr().err


class TestFixCommand:
    """Tests for `agentlint fix`."""

    def test_fix_rewrites_file(self, project, capsys):
        source = project / "app.ts"
        source.write_text('console.log("x");\nexport const y = 2;\n')

        exit_code = main(["fix", str(project)])

        assert exit_code == 0
        assert source.read_text() == "export const y = 2;\n"
        assert "Fixed 1 file(s):" in capsys.readouterr().out

    def test_dry_run_leaves_file(self, project, capsys):
        source = project / "app.ts"
        original = 'console.log("x");\nexport const y = 2;\n'
        source.write_text(original)

        exit_code = main(["fix", str(project), "--dry-run"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert source.read_text() == original
        assert '-console.log("x");' in out
        assert "[DRY RUN] No files were modified." in out

    def test_backup(self, project):
        source = project / "app.ts"
        source.write_text("// TODO remove\nexport const y = 2;\n")

        main(["fix", str(project), "--backup"])

        assert (project / "app.ts.bak").read_text() == "// TODO remove\nexport const y = 2;\n"

    def test_nothing_to_fix(self, project, capsys):
        (project / "app.ts").write_text("export const y = 2;\n")

        assert main(["fix", str(project)]) == 0
        assert "No auto-fixable violations found." in capsys.readouterr().out


class TestInitCommand:

    def test_init_creates_config(self, project, capsys):
        assert main(["init"]) == 0
        assert (project / ".agentlintrc.yaml").exists()

    def test_init_refuses_to_overwrite(self, project, capsys):
        (project / ".agentlintrc.yaml").write_text("rules: {}\n")

        assert main(["init"]) == 1
        assert (project / ".agentlintrc.yaml").read_text() == "rules: {}\n"

    def test_init_force(self, project, capsys):
        (project / ".agentlintrc.yaml").write_text("rules: {}\n")

        assert main(["init", "--force"]) == 0
        assert "no-magic-numbers" in (project / ".agentlintrc.yaml").read_text()


class TestListRulesCommand:

    def test_lists_all_rules(self, capsys):
        assert main(["list-rules"]) == 0

        out = capsys.readouterr().out
        assert "Total: 31 rules" in out
        assert "no-console-log" in out

    def test_filter_by_extension(self, capsys):
        main(["list-rules", "--extension", ".rs"])

        out = capsys.readouterr().out
        assert "rust-unwrap" in out
        assert "go-init-function" not in out


class TestMain:

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: agentlint" in capsys.readouterr().out
