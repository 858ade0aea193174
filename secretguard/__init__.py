"""
secretguard - Catch secrets before they are committed.

A line-based secret scanner for files staged in git.
"""

__version__ = "1.0.0"

from .scanner import (
    Finding,
    Rule,
    RuleRegistry,
    ScanTarget,
    build_registry,
    get_staged_files,
    scan_content,
    scan_file,
    scan_files,
)

__all__ = [
    "scan_content",
    "scan_file",
    "scan_files",
    "build_registry",
    "RuleRegistry",
    "Rule",
    "Finding",
    "ScanTarget",
    "get_staged_files",
    "__version__",
]
