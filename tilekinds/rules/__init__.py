"""
Tag rules: predicates and the ordered match index.
"""

from .predicates import (
    Predicate,
    has_tag,
    has_any_of_tag,
    has_key,
    missing_from_set,
    missing_key,
    is_polygon,
    is_point,
    is_line,
    any_of,
    none_of,
    parse_values,
)
from .matcher import (
    Action,
    Rule,
    MatchIndex,
    MatchResult,
    FromTag,
    from_tag,
    set_literal,
    set_from_tag,
    clear,
    use,
    rule,
)

__all__ = [
    "Predicate",
    "has_tag",
    "has_any_of_tag",
    "has_key",
    "missing_from_set",
    "missing_key",
    "is_polygon",
    "is_point",
    "is_line",
    "any_of",
    "none_of",
    "parse_values",
    "Action",
    "Rule",
    "MatchIndex",
    "MatchResult",
    "FromTag",
    "from_tag",
    "set_literal",
    "set_from_tag",
    "clear",
    "use",
    "rule",
]
