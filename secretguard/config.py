"""
secretguard config management with extends/inheritance support.

Supports:
- Local file: extends: "./base.yaml"
- Multiple extends: extends: ["./base.yaml", "../shared/secretguard.yaml"]

A project without a secretguard.yaml scans with the built-in rules only.
"""

import logging
import re
from pathlib import Path

import yaml

from .rules import DEFAULT_RULES, RegistryError, RuleRegistry, build_registry, compile_rule
from .scanner_utils import MAX_FILE_SIZE, matches_pattern
from .yaml_safety import YamlLimitError, load_yaml_file

logger = logging.getLogger(__name__)

# Keys whose entries accumulate along an extends chain
_LIST_KEYS = ("disabled_rules", "exclude", "rules")


class ConfigError(ValueError):
    """Raised when secretguard.yaml cannot be loaded or is invalid."""


def merge_configs(base: dict, override: dict) -> dict:
    """Layer a child config over its parent.

    ``disabled_rules``, ``exclude`` and ``rules`` keep the parent's entries
    first and append the child's; any other key in the child replaces the
    parent's value.
    """
    merged = dict(base)
    for key, value in override.items():
        parent = merged.get(key)
        if key in _LIST_KEYS and isinstance(parent, list) and isinstance(value, list):
            merged[key] = parent + value
        else:
            merged[key] = value
    return merged


def _read_yaml(config_path: Path) -> dict:
    try:
        data = load_yaml_file(config_path)
    except YamlLimitError as e:
        raise ConfigError(f"{config_path}: {e}") from e
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark:
            raise ConfigError(
                f"{config_path} is malformed (line {mark.line + 1}, column {mark.column + 1})"
            ) from e
        raise ConfigError(f"{config_path} is malformed: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at top level")
    return data


def load_extended_config(config_path: Path, seen_paths: set[str] | None = None) -> dict:
    """Load config with extends resolution.

    Args:
        config_path: Path to the config file
        seen_paths: Set of already-loaded paths (circular reference detection)

    Returns:
        Merged config dict
    """
    if seen_paths is None:
        seen_paths = set()

    path_key = str(config_path.resolve())
    if path_key in seen_paths:
        raise ConfigError(f"Circular config reference detected: {config_path}")
    seen_paths.add(path_key)

    config = _read_yaml(config_path)

    extends = config.pop("extends", None)
    if not extends:
        return config

    if isinstance(extends, str):
        extends = [extends]
    if not isinstance(extends, list):
        raise ConfigError(f"{config_path}: 'extends' must be a path or a list of paths")

    merged: dict = {}
    for parent_ref in extends:
        parent_path = Path(parent_ref)
        if not parent_path.is_absolute():
            parent_path = config_path.parent / parent_ref
        if not parent_path.exists():
            raise ConfigError(f"{config_path}: extended config not found: {parent_path}")
        merged = merge_configs(merged, load_extended_config(parent_path, seen_paths.copy()))

    # Child config overrides parents
    return merge_configs(merged, config)


def load_config(config_path: Path | str | None = None) -> dict:
    """Load secretguard.yaml, or return an empty config when there is none."""
    if config_path is None:
        return {}

    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigError(f"Config not found: {config_path}")

    config = load_extended_config(config_path)
    logger.debug("Loaded config from %s", config_path)
    return config


def validate_config(config: dict) -> list[str]:
    """Return a list of problems with a loaded config (empty if valid)."""
    errors = []

    for key in _LIST_KEYS:
        if key in config and not isinstance(config[key], list):
            errors.append(f"'{key}' must be a list")

    exclude = config.get("exclude") or []
    if isinstance(exclude, list) and not all(isinstance(p, str) for p in exclude):
        errors.append("'exclude' entries must be glob strings")

    size = config.get("max_file_size_bytes", MAX_FILE_SIZE)
    if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
        errors.append("'max_file_size_bytes' must be a positive integer")

    jobs = config.get("jobs", 1)
    if not isinstance(jobs, int) or isinstance(jobs, bool) or jobs < 1:
        errors.append("'jobs' must be an integer >= 1")

    builtin_names = {name for name, _ in DEFAULT_RULES}
    disabled = config.get("disabled_rules") or []
    if isinstance(disabled, list):
        for name in disabled:
            if not isinstance(name, str) or name not in builtin_names:
                errors.append(f"disabled_rules: unknown rule '{name}'")

    custom = config.get("rules") or []
    if isinstance(custom, list):
        names = set(builtin_names)
        for i, rule in enumerate(custom):
            if not isinstance(rule, dict):
                errors.append(f"rules[{i}]: must be a mapping")
                continue
            if "name" not in rule:
                errors.append(f"rules[{i}]: missing 'name'")
            elif not isinstance(rule["name"], str) or not rule["name"]:
                errors.append(f"rules[{i}]: 'name' must be a non-empty string")
            elif rule["name"] in names:
                errors.append(f"rules[{i}]: duplicate rule name '{rule['name']}'")
            else:
                names.add(rule["name"])
            if "regex" not in rule:
                errors.append(f"rules[{i}]: missing 'regex'")
                continue
            try:
                re.compile(rule["regex"], _rule_flags(rule))
            except (re.error, TypeError) as e:
                errors.append(f"rules[{i}]: invalid regex: {e}")

    return errors


def _rule_flags(rule: dict) -> int:
    return re.IGNORECASE if rule.get("flags") == "i" else 0


def registry_from_config(config: dict) -> RuleRegistry:
    """Build the rule registry: built-ins first, then custom rules.

    Raises:
        ConfigError: if the config is invalid or a pattern does not compile.
    """
    errors = validate_config(config)
    if errors:
        raise ConfigError("; ".join(errors))

    try:
        extra = [
            compile_rule(rule["name"], rule["regex"], _rule_flags(rule))
            for rule in config.get("rules") or []
        ]
        return build_registry(
            DEFAULT_RULES,
            disabled=config.get("disabled_rules") or [],
            extra=extra,
        )
    except RegistryError as e:
        raise ConfigError(str(e)) from e


def max_file_size(config: dict) -> int:
    return config.get("max_file_size_bytes", MAX_FILE_SIZE)


def filter_excluded(files: list[str], config: dict) -> list[str]:
    """Drop files matching the config's exclude globs."""
    exclude = config.get("exclude") or []
    if not exclude:
        return list(files)
    kept = []
    for f in files:
        if matches_pattern(f, exclude):
            logger.debug("SKIP %s (excluded by config)", f)
            continue
        kept.append(f)
    return kept
