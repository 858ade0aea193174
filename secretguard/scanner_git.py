"""Git-related utilities for secretguard scanner."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30


def _git(*args: str) -> subprocess.CompletedProcess | None:
    try:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("git %s failed: %s", " ".join(args), e)
        return None


def is_git_repo() -> bool:
    """Check if current directory is a git repository."""
    result = _git("rev-parse", "--git-dir")
    return result is not None and result.returncode == 0


def get_staged_files() -> list[str]:
    """Get files added, copied or modified in the index."""
    if not is_git_repo():
        return []

    result = _git("diff", "--cached", "--name-only", "--diff-filter=ACM")
    if result is None or result.returncode != 0:
        return []

    files = [f for f in result.stdout.split("\n") if f.strip()]
    return [f for f in files if Path(f).exists()]
