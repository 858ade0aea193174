#!/usr/bin/env python3
"""
secretguard - Secret scanner for files about to be committed.

Every line of every candidate file is checked against the rule registry:
1. Comment lines are skipped (prefix heuristic, language-agnostic)
2. The first matching rule yields one finding; later rules are not tried

Usage:
    secretguard FILE [FILE ...]      # Scan the given files
    secretguard --staged             # Scan files staged in git
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

# Re-export all public names so existing imports continue to work
from .rules import (  # noqa: F401
    DEFAULT_RULES,
    RegistryError,
    RuleRegistry,
    build_registry,
)
from .scanner_git import get_staged_files, is_git_repo  # noqa: F401
from .scanner_types import (  # noqa: F401
    BLUE,
    GREEN,
    NC,
    RED,
    YELLOW,
    Finding,
    Rule,
    ScanTarget,
)
from .scanner_utils import (  # noqa: F401
    COMMENT_MARKERS,
    MAX_FILE_SIZE,
    is_comment_line,
    read_scan_target,
)

logger = logging.getLogger(__name__)


def _first_match(line: str, registry: RuleRegistry) -> Rule | None:
    """Return the first rule, in registration order, that matches the line."""
    for rule in registry.rules():
        if rule.pattern.search(line):
            return rule
    return None


def scan_content(target: ScanTarget, registry: RuleRegistry) -> list[Finding]:
    """Scan decoded file content, one finding at most per line."""
    findings = []
    lines = target.content.split("\n")

    for i, line in enumerate(lines, 1):
        if is_comment_line(line):
            continue
        rule = _first_match(line, registry)
        if rule is not None:
            findings.append(Finding(path=target.path, line_number=i, rule_name=rule.name))

    return findings


def scan_file(filepath: str, registry: RuleRegistry, max_size: int = MAX_FILE_SIZE) -> list[Finding]:
    """Scan a single file. Files that cannot be read as text yield nothing."""
    target = read_scan_target(filepath, max_size)
    if target is None:
        return []
    findings = scan_content(target, registry)
    logger.debug("%s: %d finding(s)", filepath, len(findings))
    return findings


def scan_files(
    files: Iterable[str],
    registry: RuleRegistry,
    max_size: int = MAX_FILE_SIZE,
    jobs: int = 1,
) -> list[Finding]:
    """Scan files and return findings in argument order, then line order.

    With ``jobs > 1`` files are scanned on a thread pool; ``Executor.map``
    yields results in submission order so the output is unchanged.
    """
    files = list(files)
    if jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            per_file = list(pool.map(lambda f: scan_file(f, registry, max_size), files))
    else:
        per_file = [scan_file(f, registry, max_size) for f in files]

    all_findings = []
    for findings in per_file:
        all_findings.extend(findings)
    return all_findings


if __name__ == "__main__":
    from .cli import main

    main()
