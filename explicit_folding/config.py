"""Configuration loading and management."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib

from .constants import (
    CONFIG_TABLE_NAME,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_LINE_LENGTH,
    DOTFILE_FILENAME,
    PYPROJECT_FILENAME,
    RULE_KEYS,
)


@dataclass
class FoldingSettings:
    """Configuration for computing folding ranges.

    Attributes:
        rules: Folding rules, each a mapping using the ``begin``/``end`` or
            ``beginRegex``/``endRegex`` keys plus optional skip markers and
            offsets.
        clamp: Whether ranges are clamped to the document bounds.
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum line length allowed when loading documents.

    Examples:
        FoldingSettings(rules=[{"begin": "#region", "end": "#endregion"}])
    """

    rules: list[dict[str, object]] = field(default_factory=list)
    clamp: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`max_line_length` must be a positive integer")
    """


def _camel_to_snake(key: str) -> str:
    return re.sub(r"([A-Z])", r"_\1", key).lower()


# Rule tables accept both host-style camelCase and TOML-style snake_case keys
_RULE_KEY_ALIASES = {key: key for key in RULE_KEYS}
_RULE_KEY_ALIASES.update({_camel_to_snake(key): key for key in RULE_KEYS})


def load_config(search_path: Path) -> FoldingSettings:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.explicit-folding]`` table from `pyproject.toml` and the
    ``[explicit-folding]`` or ``[tool.explicit-folding]`` table from
    `.explicit-folding.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FoldingSettings: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but is not a mapping, contains
            unsupported keys, or declares malformed rules.

    Examples:
        load_config(Path("src"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / PYPROJECT_FILENAME, table_paths=[("tool", CONFIG_TABLE_NAME)]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / DOTFILE_FILENAME,
            table_paths=[(CONFIG_TABLE_NAME,), ("tool", CONFIG_TABLE_NAME)],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FoldingSettings()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FoldingSettings | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FoldingSettings:
    table_display = ".".join(table_path)

    if raw_config is None:
        return FoldingSettings()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return FoldingSettings()

    try:
        return FoldingSettings(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_rule(rule: object, position: int) -> dict[str, object]:
    """Translate a rule table to the key names used by the compiler.

    TOML rules may use snake_case keys (``begin_regex``); host-style camelCase
    keys (``beginRegex``) are accepted unchanged. Values are not checked here:
    a rule whose patterns do not compile is dropped by the compiler instead.

    Args:
        rule: Raw rule table.
        position: Zero-based position of the rule, used in error messages.

    Returns:
        dict[str, object]: Rule keyed by camelCase names.

    Raises:
        ConfigError: If the rule is not a table or uses an unknown key.

    Examples:
        normalize_rule({"begin_regex": "^#if", "end_regex": "^#endif"}, 0)
    """
    if not isinstance(rule, dict):
        raise ConfigError(f"`rules[{position}]` must be a table")

    normalized: dict[str, object] = {}
    for key, value in rule.items():
        canonical = _RULE_KEY_ALIASES.get(key)
        if canonical is None:
            raise ConfigError(f"`rules[{position}]` has unsupported key `{key}`")
        normalized[canonical] = value
    return normalized


def normalize_config(config: FoldingSettings) -> FoldingSettings:
    rules = config.rules
    if isinstance(rules, dict):
        rules = [rules]
    if not isinstance(rules, list):
        raise ConfigError("`rules` must be a list of tables")

    return replace(
        config, rules=[normalize_rule(rule, position) for position, rule in enumerate(rules)]
    )


def validate_config(config: FoldingSettings) -> None:
    """Validate a `FoldingSettings` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If rules are malformed, `clamp` is not a boolean, or
            numeric limits are not positive integers.

    Examples:
        validate_config(FoldingSettings(max_line_length=500))
    """
    config = normalize_config(config)

    if not isinstance(config.clamp, bool):
        raise ConfigError("`clamp` must be a boolean")

    _ensure_integers(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )
    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )


def apply_overrides(config: FoldingSettings, **overrides: object) -> FoldingSettings:
    """Apply override values to a `FoldingSettings`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FoldingSettings: New configuration with the provided overrides applied.
        The original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FoldingSettings`.

    Examples:
        updated = apply_overrides(config, rules=[{"begin": "{", "end": "}"}])
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FoldingSettings:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FoldingSettings: Validated configuration ready for scanning.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), clamp=False)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
