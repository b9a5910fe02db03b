"""
Tag predicates - single conditions tested against a feature.

A predicate is plain data (operator + operands) evaluated by `test`, so rule
tables stay declarative and can be validated when the index is built.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple

from ..features.source import GeometryKinds
from ..utils.validation import RuleConfigError, clean_tag_value


# Operators
HAS_TAG = "has_tag"
HAS_ANY_OF = "has_any_of"
HAS_KEY = "has_key"
MISSING_FROM_SET = "missing_from_set"
MISSING_KEY = "missing_key"
GEOMETRY = "geometry"

TAG_OPERATORS = (HAS_TAG, HAS_ANY_OF, HAS_KEY, MISSING_FROM_SET, MISSING_KEY)
GEOMETRY_KINDS = ("point", "line", "polygon")


@dataclass(frozen=True)
class Predicate:
    """A single test against tags or geometry kind."""
    op: str
    key: Optional[str] = None
    values: frozenset = frozenset()
    geometry: Optional[str] = None  # 'point', 'line', 'polygon' for GEOMETRY

    def __post_init__(self):
        if self.op in TAG_OPERATORS:
            if not self.key:
                raise RuleConfigError(f"{self.op} predicate needs a tag key", field="key")
            if self.op in (HAS_TAG, HAS_ANY_OF, MISSING_FROM_SET) and not self.values:
                raise RuleConfigError(
                    f"{self.op} predicate on '{self.key}' needs at least one value",
                    field="values",
                )
        elif self.op == GEOMETRY:
            if self.geometry not in GEOMETRY_KINDS:
                raise RuleConfigError(
                    f"Unknown geometry kind: {self.geometry!r}",
                    field="geometry",
                    suggestions=list(GEOMETRY_KINDS),
                )
        else:
            raise RuleConfigError(f"Unknown predicate operator: {self.op!r}", field="op")

    def test(self, tags: Mapping[str, Any], kinds: GeometryKinds) -> bool:
        if self.op == GEOMETRY:
            return getattr(kinds, self.geometry)

        value = clean_tag_value(tags.get(self.key))
        if self.op in (HAS_TAG, HAS_ANY_OF):
            return value is not None and value in self.values
        if self.op == HAS_KEY:
            return value is not None
        if self.op == MISSING_FROM_SET:
            return value is None or value not in self.values
        # MISSING_KEY
        return value is None

    def __str__(self) -> str:
        if self.op == GEOMETRY:
            return f"is_{self.geometry}"
        if self.values:
            return f"{self.op}:{self.key}={','.join(sorted(self.values))}"
        return f"{self.op}:{self.key}"


def parse_values(block: str) -> Tuple[str, frozenset]:
    """
    Split a rule-table block into (key, values).

    The first non-blank line is the tag key; every following non-blank line
    is one value, so values may contain spaces ("Alkaline Lake").
    """
    lines = [line.strip() for line in block.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        raise RuleConfigError(
            f"Value block needs a key and at least one value: {block!r}",
            field="values",
        )
    return lines[0], frozenset(lines[1:])


def has_tag(key: str, value: str) -> Predicate:
    return Predicate(HAS_TAG, key=key, values=frozenset([value]))


def has_any_of_tag(key: str, values: Iterable[str]) -> Predicate:
    return Predicate(HAS_ANY_OF, key=key, values=frozenset(values))


def has_key(key: str) -> Predicate:
    return Predicate(HAS_KEY, key=key)


def missing_from_set(key: str, excluded: Iterable[str]) -> Predicate:
    """Matches when the tag is absent or its value is not in `excluded`."""
    return Predicate(MISSING_FROM_SET, key=key, values=frozenset(excluded))


def missing_key(key: str) -> Predicate:
    return Predicate(MISSING_KEY, key=key)


def is_polygon() -> Predicate:
    return Predicate(GEOMETRY, geometry="polygon")


def is_point() -> Predicate:
    return Predicate(GEOMETRY, geometry="point")


def is_line() -> Predicate:
    return Predicate(GEOMETRY, geometry="line")


def any_of(block: str) -> Predicate:
    """`has_any_of_tag` from a multi-line key/values block."""
    key, values = parse_values(block)
    return has_any_of_tag(key, values)


def none_of(block: str) -> Predicate:
    """`missing_from_set` from a multi-line key/values block."""
    key, values = parse_values(block)
    return missing_from_set(key, values)
