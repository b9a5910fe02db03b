"""
Input validation utilities for tilekinds.

Tag values coming out of OSM and Natural Earth are inconsistently filled:
missing, empty and sentinel values all mean "no value".

Usage:
    from tilekinds.utils.validation import is_no_value, parse_int_or_none

    parse_int_or_none("4")    # 4
    parse_int_or_none("4;6")  # None
"""

import math
from typing import Any, List, Optional
import logging

logger = logging.getLogger(__name__)


# Values that reference datasets use in place of a missing field
NO_VALUE_SENTINELS = frozenset({"", "-99", "-"})


class TilekindsError(Exception):
    """Base class for tilekinds errors."""


class RuleConfigError(TilekindsError, ValueError):
    """Raised when a rule table or index is misconfigured at build time."""

    def __init__(self, message: str, field: str = "", suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
        self.suggestions = suggestions or []


def is_no_value(value: Any) -> bool:
    """True for absent, empty or sentinel tag values."""
    if value is None:
        return True
    return str(value) in NO_VALUE_SENTINELS


def clean_tag_value(value: Any) -> Optional[str]:
    """Return the tag value as a string, or None when it carries no value."""
    if is_no_value(value):
        return None
    return str(value)


def parse_int_or_none(value: Any) -> Optional[int]:
    """
    Parse an integer tag such as admin_level or layer.

    Returns:
        The integer, or None when the value is absent or malformed
    """
    text = clean_tag_value(value)
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        logger.debug(f"Ignoring malformed integer tag value: {text!r}")
        return None


def parse_rounded_int_or_none(value: Any) -> Optional[int]:
    """
    Parse a numeric tag that may carry decimals (e.g. Natural Earth min_zoom
    values like "1.7") and round half up.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(math.floor(value + 0.5)) if math.isfinite(value) else None
    text = clean_tag_value(value)
    if text is None:
        return None
    try:
        number = float(text.strip())
    except ValueError:
        logger.debug(f"Ignoring malformed numeric tag value: {text!r}")
        return None
    if not math.isfinite(number):
        return None
    return int(math.floor(number + 0.5))
