"""Utility functions for secretguard scanner."""

import logging
from fnmatch import fnmatch
from pathlib import Path

from .scanner_types import ScanTarget

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1024 * 1024  # 1 MiB

# Lines starting with one of these (after leading whitespace) are treated as
# comments, whatever the language.
COMMENT_MARKERS = ("#", "//", "/*", "*", "<!--")


def is_comment_line(line: str) -> bool:
    """Check if a line looks like a comment in any common syntax."""
    return line.lstrip().startswith(COMMENT_MARKERS)


def matches_pattern(filepath: str, patterns: list[str]) -> bool:
    """Check if filepath matches any glob pattern (supports **)."""
    path = Path(filepath)
    for p in patterns:
        # Use Path.match for ** patterns, fnmatch for simple patterns
        if "**" in p:
            if path.match(p) or fnmatch(filepath, p):
                return True
            # Leading **/ also matches zero directories
            if p.startswith("**/") and path.match(p[3:]):
                return True
        elif fnmatch(filepath, p) or fnmatch(path.name, p):
            return True
    return False


def _decode_text(raw: bytes) -> str | None:
    """Decode file bytes as UTF-8 text, or None for binary content."""
    if b"\x00" in raw:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def read_scan_target(filepath: str, max_size: int = MAX_FILE_SIZE) -> ScanTarget | None:
    """Read a file for scanning, or return None if it must be skipped.

    Missing paths, non-regular files, files larger than ``max_size`` bytes and
    content that is not UTF-8 text are skipped silently. Read errors are
    skipped too, so one unreadable file never aborts a run.
    """
    path = Path(filepath)
    try:
        if not path.is_file():
            logger.debug("SKIP %s (not a regular file)", filepath)
            return None
        size = path.stat().st_size
        if size > max_size:
            logger.debug("SKIP %s (%d bytes > %d)", filepath, size, max_size)
            return None
        raw = path.read_bytes()
    except OSError as e:
        logger.debug("SKIP %s (read error: %s)", filepath, e)
        return None

    content = _decode_text(raw)
    if content is None:
        logger.debug("SKIP %s (not text)", filepath)
        return None
    return ScanTarget(path=filepath, content=content)
