"""
Configuration system for agentlint.

Supports JSON and YAML configuration files. Loading is deliberately
lenient: a missing or broken config never blocks linting, it only
produces warnings and falls back to defaults.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field

import yaml

from agentlint.core.findings import Severity, SEVERITY_OFF


# Default configuration file names to search for
CONFIG_FILE_NAMES = [
    ".agentlintrc.json",
    ".agentlintrc.yaml",
    ".agentlintrc.yml",
    "agentlint.json",
]

RULE_SETTINGS = {s.value for s in Severity} | {SEVERITY_OFF}


@dataclass(frozen=True)
class LintConfig:
    """
    Main configuration for agentlint.

    Example YAML config:

    ```yaml
    rules:
      no-console-log: "off"      # Disable a rule
      no-magic-numbers: error    # Upgrade severity
      no-todo-fixme: warning     # Change severity
    ignore:
      - generated/
    extensions:
      - .ts
      - .js
    ```
    """
    rules: Dict[str, str] = field(default_factory=dict)
    ignore: Tuple[str, ...] = ()
    extensions: Optional[Tuple[str, ...]] = None

    def setting_for(self, rule_id: str) -> Optional[str]:
        """Return the configured severity or "off" for a rule, if any."""
        return self.rules.get(rule_id)

    def is_disabled(self, rule_id: str) -> bool:
        return self.rules.get(rule_id) == SEVERITY_OFF

    def severity_override(self, rule_id: str) -> Optional[Severity]:
        setting = self.rules.get(rule_id)
        if setting is None or setting == SEVERITY_OFF:
            return None
        return Severity(setting)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"rules": dict(self.rules), "ignore": list(self.ignore)}
        if self.extensions is not None:
            data["extensions"] = list(self.extensions)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Tuple["LintConfig", List[str]]:
        """
        Create config from a dictionary, dropping invalid entries.

        Returns the config and a list of warnings describing what was dropped.
        """
        warnings: List[str] = []

        rules: Dict[str, str] = {}
        raw_rules = data.get("rules", {})
        if not isinstance(raw_rules, dict):
            warnings.append("'rules' must be a mapping of rule id to severity; ignored")
            raw_rules = {}
        for rule_id, setting in raw_rules.items():
            # YAML reads a bare `off` as False
            if setting is False:
                setting = SEVERITY_OFF
            if isinstance(setting, str) and setting.lower() in RULE_SETTINGS:
                rules[str(rule_id)] = setting.lower()
            else:
                warnings.append(f"Invalid setting for rule '{rule_id}': {setting!r}; ignored")

        ignore = _string_list(data, "ignore", warnings) or []
        extensions = _string_list(data, "extensions", warnings)

        return cls(
            rules=rules,
            ignore=tuple(ignore),
            extensions=tuple(extensions) if extensions is not None else None,
        ), warnings


def _string_list(data: Dict[str, Any], key: str, warnings: List[str]) -> Optional[List[str]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        warnings.append(f"'{key}' must be a list of strings; ignored")
        return None
    return value


def parse_config_text(text: str, suffix: str) -> Any:
    """Parse configuration text as JSON or YAML based on the file suffix."""
    if suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def find_config(start_path: str = ".") -> Optional[str]:
    """
    Find a configuration file by searching up the directory tree.

    Returns the path to the first config file found, or None.
    """
    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent

    while True:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.is_file():
                return str(config_path)
        if current == current.parent:
            return None
        current = current.parent


def load_config(path: Optional[str] = None, start_dir: str = ".") -> Tuple[LintConfig, List[str]]:
    """
    Load a LintConfig from a file, or discover one from start_dir.

    Never raises: any failure yields the default config and a warning.
    """
    explicit = path is not None
    if path is None:
        path = find_config(start_dir)
    if path is None:
        return LintConfig(), []

    config_path = Path(path)
    try:
        data = parse_config_text(config_path.read_text(encoding="utf-8"), config_path.suffix.lower())
    except OSError as e:
        if not explicit and not config_path.exists():
            return LintConfig(), []
        return LintConfig(), [f"could not load config from {config_path}: {e}"]
    except (ValueError, yaml.YAMLError) as e:
        return LintConfig(), [f"could not parse config {config_path}: {e}"]

    if data is None:
        return LintConfig(), []
    if not isinstance(data, dict):
        return LintConfig(), [f"config {config_path} is not a mapping; using defaults"]

    config, warnings = LintConfig.from_dict(data)
    return config, [f"{config_path}: {w}" for w in warnings]


def create_default_config() -> str:
    """
    Create a default configuration file content.
    """
    config = {
        "rules": {
            "no-magic-numbers": "off",
            "no-todo-fixme": "info",
        },
        "ignore": [
            "generated",
        ],
        "extensions": [
            ".ts", ".tsx", ".js", ".jsx", ".py", ".go", ".rs",
            ".json", ".yaml", ".yml", ".env",
        ],
    }
    return yaml.safe_dump(config, default_flow_style=False, sort_keys=False)
