"""
SARIF output formatter for code scanning integrations.

SARIF (Static Analysis Results Interchange Format) is a standard
format for static analysis tool output, consumed by GitHub Code
Scanning and most IDEs.
"""

import json
from typing import Any, Dict, List, Optional

from agentlint import __version__
from agentlint.core.findings import LintResult, Severity, Violation
from agentlint.core.rules import RuleRegistry


SARIF_LEVEL = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}


def _artifact_uri(path: str) -> str:
    """Make a path relative to %SRCROOT% by dropping one leading slash."""
    return path[1:] if path.startswith("/") else path


class SARIFFormatter:
    """
    Formats lint results in SARIF 2.1.0.

    Rule descriptions and default levels come from the registry when one
    is given; otherwise the rule id stands in for its description.
    """

    SARIF_VERSION = "2.1.0"
    SCHEMA_URI = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"
    INFORMATION_URI = "https://github.com/alexmelges/agentlint"

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.registry = registry

    def format_result(self, result: LintResult) -> str:
        """Format a complete lint result in SARIF format."""
        sarif = {
            "version": self.SARIF_VERSION,
            "$schema": self.SCHEMA_URI,
            "runs": [self._create_run(result)],
        }
        return json.dumps(sarif, indent=2, ensure_ascii=False)

    def _create_run(self, result: LintResult) -> Dict[str, Any]:
        """Create a SARIF run object."""
        rule_ids = self._collect_rule_ids(result.violations)
        rule_index = {rule_id: index for index, rule_id in enumerate(rule_ids)}

        return {
            "tool": {
                "driver": {
                    "name": "agentlint",
                    "version": __version__,
                    "informationUri": self.INFORMATION_URI,
                    "rules": [self._create_rule(rule_id) for rule_id in rule_ids],
                }
            },
            "results": [
                self._create_result(violation, rule_index[violation.rule_id])
                for violation in result.violations
            ],
            "invocations": [self._create_invocation(result)],
        }

    def _collect_rule_ids(self, violations: List[Violation]) -> List[str]:
        """Collect unique rule ids in first-seen order."""
        seen = {}
        for violation in violations:
            seen.setdefault(violation.rule_id, None)
        return list(seen)

    def _create_rule(self, rule_id: str) -> Dict[str, Any]:
        """Create a SARIF reportingDescriptor for a rule id."""
        rule = self.registry.get(rule_id) if self.registry is not None else None
        if rule is not None:
            metadata = rule.metadata
            description = metadata.description
            level = SARIF_LEVEL[metadata.severity]
            tags = list(metadata.extensions) or ["general"]
        else:
            description = rule_id
            level = SARIF_LEVEL[Severity.WARNING]
            tags = ["general"]

        return {
            "id": rule_id,
            "name": rule_id,
            "shortDescription": {"text": description},
            "defaultConfiguration": {"level": level},
            "properties": {"tags": tags},
        }

    def _create_result(self, violation: Violation, rule_index: int) -> Dict[str, Any]:
        """Create a SARIF result object from a violation."""
        region: Dict[str, Any] = {
            "startLine": violation.line,
            "startColumn": violation.column or 1,
        }
        result: Dict[str, Any] = {
            "ruleId": violation.rule_id,
            "ruleIndex": rule_index,
            "level": SARIF_LEVEL[violation.severity],
            "message": {"text": violation.message},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {
                            "uri": _artifact_uri(violation.file_path),
                            "uriBaseId": "%SRCROOT%",
                        },
                        "region": region,
                    },
                }
            ],
        }

        if violation.snippet:
            region["snippet"] = {"text": violation.snippet}
            result["properties"] = {"snippet": violation.snippet}

        return result

    def _create_invocation(self, result: LintResult) -> Dict[str, Any]:
        """Create a SARIF invocation object."""
        return {
            "executionSuccessful": not result.errors,
            "toolExecutionNotifications": [
                {
                    "message": {"text": error},
                    "level": "error",
                }
                for error in result.errors
            ],
            "properties": {
                "filesScanned": result.units_scanned,
                "rulesApplied": result.rules_applied,
                "durationMs": result.duration_ms,
            },
        }
