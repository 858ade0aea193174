"""Reporting functions for secretguard scanner."""

import json
import logging

from .rules import RuleRegistry
from .scanner_types import BLUE, GREEN, NC, RED, Finding

logger = logging.getLogger(__name__)


def format_finding(finding: Finding) -> str:
    return f"{finding.path}:{finding.line_number} - Potential {finding.rule_name}"


def report_findings(findings: list[Finding]) -> int:
    """Print scan results and return exit code.

    The report goes to stdout directly so no log level can hide it.
    """
    if not findings:
        print(f"{GREEN}secretguard: no secrets found{NC}")
        return 0

    print(f"{RED}ALERT: potential secrets detected!{NC}")
    for finding in findings:
        print(format_finding(finding))
    print("=" * 30)
    files = len({f.path for f in findings})
    print(f"{len(findings)} finding(s) in {files} file(s)")
    return 1


def report_json(findings: list[Finding]) -> int:
    """Print findings as JSON on stdout and return exit code."""
    payload = {
        "findings": [finding.to_dict() for finding in findings],
        "count": len(findings),
    }
    print(json.dumps(payload, indent=2))
    return 1 if findings else 0


def show_rules(registry: RuleRegistry) -> None:
    """Display the active rules in evaluation order."""
    logger.info(f"{BLUE}=== secretguard rules ({len(registry)}) ==={NC}")
    for i, rule in enumerate(registry.rules(), 1):
        logger.info(f"  {i:>2}. {rule.name}")
        logger.info(f"      {rule.pattern.pattern}")


def print_validation(errors: list[str]) -> bool:
    """Log config validation errors. Returns True if the config is valid."""
    if errors:
        logger.error(f"{RED}Validation errors:{NC}")
        for e in errors:
            logger.error(f"  - {e}")
        return False

    logger.info(f"{GREEN}secretguard.yaml is valid{NC}")
    return True

