"""
Command-line interface for agentlint.

Provides subcommands for scanning files or diffs, applying automatic
fixes, creating a configuration file and listing the built-in rules.
"""

import argparse
import logging
import os
import sys
from typing import Optional, List

from agentlint import __version__
from agentlint.config import load_config, create_default_config
from agentlint.core.engine import LintEngine
from agentlint.core.findings import Severity
from agentlint.formatters import get_formatter
from agentlint.remediation import FixEngine
from agentlint.rules import default_registry


logger = logging.getLogger("agentlint")

DEFAULT_CONFIG_FILE = ".agentlintrc.yaml"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="agentlint",
        description="Lint agent-written code for risky patterns and fix the mechanical ones.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  agentlint scan ./src                     # Lint a directory
  agentlint scan app.ts                    # Lint a single file
  git diff | agentlint scan --stdin        # Lint only added lines
  agentlint scan . -f sarif -o out.sarif   # SARIF output to file
  agentlint fix ./src --dry-run            # Show fixes without applying
  agentlint init                           # Create config file
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Lint files or a diff")
    scan_parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Target file or directory to lint (default: current directory)",
    )
    scan_parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read a unified diff from stdin and lint only the added lines",
    )
    scan_parser.add_argument(
        "-f", "--format",
        choices=["text", "json", "sarif"],
        default="text",
        help="Output format (default: text)",
    )
    scan_parser.add_argument(
        "-o", "--output",
        help="Output file (default: stdout)",
    )
    scan_parser.add_argument(
        "--errors-only",
        action="store_true",
        help="Only report error-severity violations",
    )
    scan_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )
    scan_parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=4,
        help="Number of parallel workers (default: 4)",
    )
    scan_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    scan_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Fix command
    fix_parser = subparsers.add_parser("fix", help="Apply automatic fixes")
    fix_parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Target file or directory",
    )
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show fixes without applying them",
    )
    fix_parser.add_argument(
        "--backup",
        action="store_true",
        help="Keep a .bak copy of every file that is changed",
    )
    fix_parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
    )

    # Init command
    init_parser = subparsers.add_parser("init", help="Create a configuration file")
    init_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite existing config file",
    )

    # List-rules command
    rules_parser = subparsers.add_parser("list-rules", help="List available rules")
    rules_parser.add_argument(
        "--extension",
        help="Only list rules that apply to this file extension",
    )

    return parser


def configure_logging(verbose: bool = False):
    """Send agentlint diagnostics to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("agentlint: %(levelname)s: %(message)s"))
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _load_config(config_path: Optional[str], target: str):
    start_dir = target if os.path.isdir(target) else os.path.dirname(os.path.abspath(target))
    config, warnings = load_config(config_path, start_dir=start_dir)
    for warning in warnings:
        logger.warning(warning)
    return config


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute the scan command."""
    config = _load_config(args.config, "." if args.stdin else args.target)
    registry = default_registry()
    engine = LintEngine(registry, config, max_workers=args.jobs)

    if args.stdin:
        logger.debug("Linting diff from stdin")
        result = engine.lint_diff(sys.stdin.read())
    else:
        logger.debug("Linting %s", os.path.abspath(args.target))
        result = engine.lint_path(args.target)

    for error in result.errors:
        logger.debug(error)
    logger.debug(
        "Scanned %d file(s) with %d rule(s) in %dms",
        result.units_scanned, result.rules_applied, result.duration_ms,
    )

    if args.errors_only:
        result = result.only(Severity.ERROR)

    formatter = get_formatter(
        args.format,
        registry=registry,
        use_color=not args.no_color and not args.output,
    )
    output = formatter.format_result(result)
    if not output.endswith("\n"):
        output += "\n"

    # Write output
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        if args.format == "text":
            print(f"Results written to {args.output}")
    else:
        sys.stdout.write(output)

    return 1 if result.has_errors else 0


def cmd_fix(args: argparse.Namespace) -> int:
    """Execute the fix command."""
    config = _load_config(args.config, args.target)
    engine = FixEngine(default_registry(), config, dry_run=args.dry_run, backup=args.backup)

    summary = engine.fix_path(args.target)

    for error in summary.errors:
        logger.warning("Skipped %s", error)

    for diff in summary.diffs:
        sys.stdout.write(diff)
    print(summary.format())

    if args.dry_run and summary.has_changes:
        print("\n[DRY RUN] No files were modified.")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute the init command."""
    config_file = DEFAULT_CONFIG_FILE

    if os.path.exists(config_file) and not args.force:
        print(f"Configuration file {config_file} already exists.")
        print("Use --force to overwrite.")
        return 1

    with open(config_file, "w", encoding="utf-8") as f:
        f.write(create_default_config())

    print(f"Created configuration file: {config_file}")
    return 0


def cmd_list_rules(args: argparse.Namespace) -> int:
    """Execute the list-rules command."""
    registry = default_registry()

    if args.extension:
        rules = registry.rules_for_extension(args.extension.lstrip("."))
    else:
        rules = list(registry)

    print("\nAvailable Rules")
    print("=" * 70)
    for rule in rules:
        meta = rule.metadata
        fixable = "[fix]" if meta.auto_fixable else ""
        print(f"  {meta.rule_id:<22} {meta.severity.value:<8} {fixable:<5}  {meta.description}")

    print(f"\nTotal: {len(rules)} rules")
    print("[fix] = auto-fixable with `agentlint fix`")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(getattr(args, "verbose", False))

    try:
        if args.command == "scan":
            return cmd_scan(args)
        elif args.command == "fix":
            return cmd_fix(args)
        elif args.command == "init":
            return cmd_init(args)
        elif args.command == "list-rules":
            return cmd_list_rules(args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"agentlint error: {e}", file=sys.stderr)
        if os.environ.get("DEBUG"):
            raise
        return 2


if __name__ == "__main__":
    sys.exit(main())
