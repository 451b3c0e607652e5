"""
Output formatters for lint results.

Provides multiple output formats including:
- Human-readable text output
- JSON for machine processing
- SARIF for code scanning integrations
"""

from typing import Optional

from agentlint.core.rules import RuleRegistry
from agentlint.formatters.text import TextFormatter
from agentlint.formatters.json_formatter import JSONFormatter
from agentlint.formatters.sarif import SARIFFormatter

__all__ = [
    "TextFormatter",
    "JSONFormatter",
    "SARIFFormatter",
    "get_formatter",
]


def get_formatter(
    format_name: str,
    registry: Optional[RuleRegistry] = None,
    use_color: bool = True,
):
    """Get a formatter by name."""
    name = format_name.lower()
    if name == "text":
        return TextFormatter(use_color=use_color)
    if name == "json":
        return JSONFormatter()
    if name == "sarif":
        return SARIFFormatter(registry=registry)

    raise ValueError(f"Unknown format: {format_name}")
