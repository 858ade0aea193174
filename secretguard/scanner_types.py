"""Type definitions and constants for secretguard scanner."""

import re
from typing import NamedTuple

# Colors for terminal output
RED = "\033[0;31m"
YELLOW = "\033[1;33m"
GREEN = "\033[0;32m"
BLUE = "\033[0;34m"
NC = "\033[0m"  # No Color


class Rule(NamedTuple):
    """A named, pre-compiled detection pattern."""

    name: str
    pattern: re.Pattern


class ScanTarget(NamedTuple):
    """Decoded content of a single file, ready to scan."""

    path: str
    content: str


class Finding(NamedTuple):
    """One potential secret on one line of one file."""

    path: str
    line_number: int  # 1-based
    rule_name: str

    def to_dict(self) -> dict:
        return self._asdict()
