"""
Ordered match index - fold every matching rule onto one attribute map.

Rules are evaluated in declaration order and every matching rule applies its
actions, so a later rule overrides an earlier one for the same attribute.
Order is the precedence; there is no scoring.

Usage:
    index = MatchIndex([
        rule(has_tag("waterway", "river"), use("kind", "river"), use("min_zoom", 7)),
        rule(has_tag("covered", "yes"), use("kind", None)),
    ], attributes={"kind", "min_zoom"})

    result = index.matches(feature)
    kind = result.get_string("kind")   # None -> do not emit
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .predicates import Predicate
from ..features.source import GeometryKinds, SourceFeature
from ..utils.validation import (
    RuleConfigError,
    clean_tag_value,
    parse_rounded_int_or_none,
)


# Action operators
SET_LITERAL = "set_literal"
SET_FROM_TAG = "set_from_tag"
CLEAR = "clear"


@dataclass(frozen=True)
class FromTag:
    """Marker for `use()`: copy the value of a tag."""
    key: str


def from_tag(key: str) -> FromTag:
    return FromTag(key)


@dataclass(frozen=True)
class Action:
    """Writes one attribute of the match result."""
    op: str
    attr: str
    value: Any = None  # literal for SET_LITERAL, tag key for SET_FROM_TAG

    def apply(self, acc: Dict[str, Any], tags: Mapping[str, Any]) -> None:
        if self.op == SET_LITERAL:
            acc[self.attr] = self.value
        elif self.op == SET_FROM_TAG:
            acc[self.attr] = clean_tag_value(tags.get(self.value))
        else:
            acc[self.attr] = None


def set_literal(attr: str, value: Any) -> Action:
    if value is None:
        raise RuleConfigError(f"Use clear('{attr}') to null an attribute", field=attr)
    return Action(SET_LITERAL, attr, value)


def set_from_tag(attr: str, tag_key: str) -> Action:
    if not tag_key:
        raise RuleConfigError(f"set_from_tag for '{attr}' needs a tag key", field=attr)
    return Action(SET_FROM_TAG, attr, tag_key)


def clear(attr: str) -> Action:
    return Action(CLEAR, attr)


def use(attr: str, value: Any) -> Action:
    """Shorthand: None clears, FromTag copies a tag, anything else is a literal."""
    if value is None:
        return clear(attr)
    if isinstance(value, FromTag):
        return set_from_tag(attr, value.key)
    return set_literal(attr, value)


@dataclass(frozen=True)
class Rule:
    """A conjunction of predicates and the actions to apply when all hold."""
    predicates: Tuple[Predicate, ...]
    actions: Tuple[Action, ...]

    def test(self, tags: Mapping[str, Any], kinds: GeometryKinds) -> bool:
        return all(p.test(tags, kinds) for p in self.predicates)


def rule(*parts) -> Rule:
    """Build a rule from predicates and actions given in any order."""
    predicates = tuple(p for p in parts if isinstance(p, Predicate))
    actions = tuple(a for a in parts if isinstance(a, Action))
    unknown = [p for p in parts if not isinstance(p, (Predicate, Action))]
    if unknown:
        raise RuleConfigError(f"Rule parts must be predicates or actions, got {unknown!r}")
    return Rule(predicates, actions)


class MatchResult(Mapping[str, Any]):
    """
    Attributes derived for one feature.

    An attribute explicitly cleared by a rule is present with value None and
    reported by `is_cleared`; an attribute no rule touched is absent.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values = dict(values or {})

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MatchResult({self._values!r})"

    def is_cleared(self, attr: str) -> bool:
        return attr in self._values and self._values[attr] is None

    def get_string(self, attr: str, default: Optional[str] = None) -> Optional[str]:
        value = self._values.get(attr)
        if value is None:
            return default
        return str(value)

    def get_integer(self, attr: str, default: Optional[int] = None) -> Optional[int]:
        parsed = parse_rounded_int_or_none(self._values.get(attr))
        return default if parsed is None else parsed

    def get_boolean(self, attr: str, default: bool = False) -> bool:
        value = self._values.get(attr)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("yes", "true", "1")


class MatchIndex:
    """
    Immutable ordered list of rules evaluated with a left-to-right fold.

    Args:
        rules: Rules in precedence order (later wins)
        attributes: Attribute vocabulary; actions outside it are rejected
            when the index is built
    """

    def __init__(self, rules: Iterable[Rule], attributes: Iterable[str]):
        self.rules: Tuple[Rule, ...] = tuple(rules)
        self.attributes = frozenset(attributes)
        self._validate()

    def _validate(self) -> None:
        for position, r in enumerate(self.rules):
            if not r.predicates:
                raise RuleConfigError(f"Rule #{position} has no predicates", field="predicates")
            if not r.actions:
                raise RuleConfigError(f"Rule #{position} has no actions", field="actions")
            for action in r.actions:
                if action.attr not in self.attributes:
                    raise RuleConfigError(
                        f"Rule #{position} sets undeclared attribute '{action.attr}'",
                        field=action.attr,
                        suggestions=sorted(self.attributes),
                    )

    def __len__(self) -> int:
        return len(self.rules)

    def evaluate(self, tags: Mapping[str, Any], kinds: GeometryKinds) -> MatchResult:
        acc: Dict[str, Any] = {}
        for r in self.rules:
            if r.test(tags, kinds):
                for action in r.actions:
                    action.apply(acc, tags)
        return MatchResult(acc)

    def matches(self, sf: SourceFeature, tags: Optional[Mapping[str, Any]] = None) -> MatchResult:
        """
        Evaluate against a source feature.

        Args:
            sf: Feature supplying tags and geometry kind
            tags: Tag view to use instead of `sf.tags` (e.g. with virtual tags)
        """
        kinds = GeometryKinds(
            point=sf.is_point(),
            line=sf.can_be_line(),
            polygon=sf.can_be_polygon(),
        )
        return self.evaluate(sf.tags if tags is None else tags, kinds)
