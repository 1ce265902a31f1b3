"""Constants used across the explicit-folding package."""

from __future__ import annotations

# Limits applied when loading documents from disk
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_LINE_LENGTH = 100_000

MAX_FILE_SIZE_ENV_VAR = "EXPLICIT_FOLDING_MAX_FILE_SIZE"
MAX_LINE_LENGTH_ENV_VAR = "EXPLICIT_FOLDING_MAX_LINE_LENGTH"

# Configuration lookup
PYPROJECT_FILENAME = "pyproject.toml"
DOTFILE_FILENAME = ".explicit-folding.toml"
CONFIG_TABLE_NAME = "explicit-folding"

# Rule keys, as written in host configuration
RULE_KEYS = (
    "begin",
    "end",
    "beginRegex",
    "endRegex",
    "skipLine",
    "skipLineRegex",
    "skipBegin",
    "skipBeginRegex",
    "skipEnd",
    "skipEndRegex",
    "offsetTop",
    "offsetBottom",
)
