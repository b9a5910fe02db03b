"""Utility modules."""

from .logging_config import (
    get_logger,
    setup_logging,
    ensure_logging,
    TilekindsFormatter,
    FileFormatter,
)
from .validation import (
    is_no_value,
    clean_tag_value,
    parse_int_or_none,
    parse_rounded_int_or_none,
    TilekindsError,
    RuleConfigError,
    NO_VALUE_SENTINELS,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "ensure_logging",
    "TilekindsFormatter",
    "FileFormatter",
    # Validation
    "is_no_value",
    "clean_tag_value",
    "parse_int_or_none",
    "parse_rounded_int_or_none",
    "TilekindsError",
    "RuleConfigError",
    "NO_VALUE_SENTINELS",
]
