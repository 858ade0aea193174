#!/usr/bin/env python3
"""
secretguard CLI - Entry point for pip-installed package.

Handles config discovery, hook setup, and delegates to scanner.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .cli_setup import (
    confirm_override,
    find_config,
    init_config,
    install_hook,
    uninstall,
)
from .config import (
    ConfigError,
    filter_excluded,
    load_config,
    max_file_size,
    registry_from_config,
    validate_config,
)
from .rules import RuleRegistry
from .scanner import BLUE, NC, RED, get_staged_files, scan_files
from .scanner_cli import print_validation, report_findings, report_json, show_rules

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "SECRETGUARD_LOG_LEVEL"


def setup_logging(verbose: bool = False) -> None:
    """Configure plain message logging for terminal output."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secretguard",
        description="secretguard - Catch secrets before they are committed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  secretguard app.py .env      Scan specific files
  secretguard --staged         Scan files staged in git
  secretguard --show           Show active rules
  secretguard --init           Create secretguard.yaml
  secretguard --hook           Install git pre-commit hook
        """,
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Files to scan")
    parser.add_argument("--version", "-v", action="version", version=f"secretguard {__version__}")
    parser.add_argument("--staged", action="store_true", help="Scan files staged in git")
    parser.add_argument("--confirm", action="store_true", help="Ask before failing when secrets are found")
    parser.add_argument("--json", action="store_true", help="Print findings as JSON")
    parser.add_argument("--jobs", "-j", type=int, default=None, help="Files to scan in parallel")
    parser.add_argument("--config", "-c", help="Path to secretguard.yaml")
    parser.add_argument("--init", action="store_true", help="Initialize secretguard.yaml")
    parser.add_argument("--hook", action="store_true", help="Install git pre-commit hook")
    parser.add_argument("--uninstall", action="store_true", help="Remove secretguard from project")
    parser.add_argument("--validate", action="store_true", help="Validate YAML config")
    parser.add_argument("--show", action="store_true", help="Show active rules")
    parser.add_argument("--verbose", action="store_true", help="Log skipped files and debug details")
    return parser


def run_scan(
    files: list[str],
    registry: RuleRegistry,
    config: dict,
    jobs: int = 1,
    as_json: bool = False,
    confirm: bool = False,
) -> int:
    """Run scan and return exit code."""
    files = filter_excluded(files, config)

    if not as_json:
        logger.info(f"{BLUE}secretguard - Secret Scan{NC}")
        logger.info(f"Scanning {len(files)} file(s)...")

    findings = scan_files(files, registry, max_size=max_file_size(config), jobs=jobs)
    exit_code = report_json(findings) if as_json else report_findings(findings)

    if exit_code and confirm and confirm_override(findings):
        return 0
    return exit_code


def _load(config_path: Path | None) -> tuple[dict, RuleRegistry]:
    config = load_config(config_path)
    return config, registry_from_config(config)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    # Handle init (doesn't need config)
    if args.init:
        sys.exit(0 if init_config() else 1)

    # Handle hook (doesn't need config)
    if args.hook:
        sys.exit(0 if install_hook() else 1)

    if args.uninstall:
        sys.exit(0 if uninstall() else 1)

    config_path = Path(args.config) if args.config else find_config()

    if args.validate:
        if config_path is None:
            logger.error(f"{RED}ERROR: No secretguard.yaml found{NC}")
            logger.info("Run: secretguard --init")
            sys.exit(1)
        try:
            config = load_config(config_path)
        except ConfigError as e:
            sys.exit(0 if print_validation([str(e)]) else 1)
        sys.exit(0 if print_validation(validate_config(config)) else 1)

    try:
        config, registry = _load(config_path)
    except ConfigError as e:
        logger.error(f"{RED}ERROR: {e}{NC}")
        sys.exit(1)

    if args.show:
        show_rules(registry)
        sys.exit(0)

    if args.staged:
        files = args.files + get_staged_files()
    elif args.files:
        files = args.files
    else:
        logger.error(parser.format_usage().strip())
        logger.error("secretguard: error: no files to scan (pass FILE arguments or --staged)")
        sys.exit(1)

    jobs = args.jobs if args.jobs is not None else config.get("jobs", 1)
    sys.exit(run_scan(files, registry, config, jobs=max(1, jobs), as_json=args.json, confirm=args.confirm))


if __name__ == "__main__":
    main()
