"""PyYAML loading for secretguard.yaml with size and alias limits.

Config files are small. A file over MAX_YAML_BYTES, or a document using more
than MAX_ALIASES alias references (billion laughs), is refused before it is
expanded in memory.
"""

from __future__ import annotations

from pathlib import Path

import yaml

MAX_ALIASES = 100
MAX_YAML_BYTES = 1_000_000


class YamlLimitError(yaml.YAMLError):
    """Raised when a YAML document exceeds the size or alias limit."""


class _LimitedLoader(yaml.SafeLoader):
    """SafeLoader that counts alias references per document load."""

    def __init__(self, stream):
        super().__init__(stream)
        self.alias_count = 0

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            self.alias_count += 1
            if self.alias_count > MAX_ALIASES:
                raise YamlLimitError(f"YAML alias limit exceeded (max {MAX_ALIASES})")
        return super().compose_node(parent, index)


def safe_yaml_load(stream):
    """yaml.safe_load replacement with alias bomb protection."""
    return yaml.load(stream, Loader=_LimitedLoader)


def load_yaml_file(path: Path, max_bytes: int = MAX_YAML_BYTES):
    """Parse a YAML file, refusing anything larger than ``max_bytes``.

    The raw bytes go to PyYAML, so content that is not valid UTF-8 surfaces
    as a YAMLError like any other parse failure.
    """
    size = path.stat().st_size
    if size > max_bytes:
        raise YamlLimitError(f"file too large ({size} bytes, max {max_bytes})")
    return safe_yaml_load(path.read_bytes())
