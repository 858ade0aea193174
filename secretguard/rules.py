"""
secretguard rule registry.

The built-in rules are an ordered list of (name, regex) pairs. Order matters:
a line is attributed to the first rule that matches it, so the broad shapes
(Generic Token, Auth0 Secret Pattern) sit after the specific ones.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator

from .scanner_types import Rule

logger = logging.getLogger(__name__)

# Integrity hashes in package-lock.json / yarn.lock are base64 runs that would
# otherwise look exactly like an AWS secret access key.
_LOCKFILE_PREFIXES = "".join(
    rf"(?<!{prefix})" for prefix in ("sha1-", "sha256-", "sha384-", "sha512-")
)

DEFAULT_RULES: list[tuple[str, str]] = [
    ("AWS Key", r"AKIA[0-9A-Z]{16}"),
    ("AWS Secret", _LOCKFILE_PREFIXES + r"(?<![A-Za-z0-9/+])[A-Za-z0-9/+]{40}(?![A-Za-z0-9/+=])"),
    ("Private Key", r"-----BEGIN (?:RSA|DSA|EC|OPENSSH) PRIVATE KEY-----"),
    ("SSH Key", r"ssh-rsa\s+AAAA[0-9A-Za-z+/]+={0,3}"),
    ("GitHub Token", r"(?i)github[\s_.-]?token[^0-9a-z]{0,5}[0-9a-z]{35,40}"),
    ("API Key", r"(?i)api[\s_.-]?key[^0-9a-z]{0,5}[0-9a-z]{16,45}"),
    ("Generic Secret", r"(?i)secret[^0-9a-z]{0,5}[0-9a-z]{16,45}"),
    ("Password Assignment", r"(?i)(?:password|passwd|pwd)[\"']?\s*(?::=|=>|[:=])\s*\S+"),
    ("Authorization Header", r"(?i)authorization[\"']?\s*[:=]\s*[\"']?bearer\s+[A-Za-z0-9\-._~+/]+=*"),
    ("Connection String", r"[A-Za-z][A-Za-z0-9+.-]{1,30}://[^\s:/@]{3,20}:[^\s:/@]{3,20}@[^\s/:]+"),
    ("Generic Token", r"\b[a-z0-9]{32,64}\b"),
    ("Auth0 Client Secret", r"(?i)client[\s_.-]?secret[\"']?\s*[:=]\s*[\"']?[A-Za-z0-9_]{64}\b"),
    ("Auth0 Secret Pattern", r"\b[A-Za-z0-9_]{64}\b"),
    ("Stripe Live Key", r"sk_live_[0-9A-Za-z]{10,}"),
]


class RegistryError(ValueError):
    """Raised when the rule set cannot be built (bad regex, duplicate name)."""


class RuleRegistry:
    """Ordered, read-only collection of compiled rules."""

    def __init__(self, rules: Iterable[Rule]):
        self._rules = tuple(rules)

    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry({self.names()!r})"


def compile_rule(name: str, regex: str, flags: int = 0) -> Rule:
    """Compile a single rule, raising RegistryError on a bad pattern."""
    if not name or not isinstance(name, str):
        raise RegistryError(f"Rule name must be a non-empty string, got {name!r}")
    try:
        return Rule(name=name, pattern=re.compile(regex, flags))
    except (re.error, TypeError) as e:
        raise RegistryError(f"Invalid pattern for rule '{name}': {e}") from e


def build_registry(
    definitions: Iterable[tuple[str, str]] = DEFAULT_RULES,
    disabled: Iterable[str] = (),
    extra: Iterable[Rule] = (),
) -> RuleRegistry:
    """Compile the rule set once, failing fast on any defect.

    Args:
        definitions: Ordered (name, regex) pairs, built-ins by default.
        disabled: Names of rules from ``definitions`` to leave out.
        extra: Already compiled rules appended after the definitions.
    """
    disabled = set(disabled)
    compiled: list[Rule] = []
    seen: set[str] = set()

    for name, regex in definitions:
        if name in seen:
            raise RegistryError(f"Duplicate rule name: {name}")
        seen.add(name)
        if name in disabled:
            logger.debug("Rule disabled: %s", name)
            continue
        compiled.append(compile_rule(name, regex))

    unknown = disabled - seen
    if unknown:
        raise RegistryError(f"Unknown rule(s) in disabled_rules: {', '.join(sorted(unknown))}")

    for rule in extra:
        if rule.name in seen:
            raise RegistryError(f"Duplicate rule name: {rule.name}")
        seen.add(rule.name)
        compiled.append(rule)

    return RuleRegistry(compiled)
