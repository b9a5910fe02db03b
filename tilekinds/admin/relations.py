"""
Administrative boundary relations.

A boundary way is often shared by several relations (a country border is
also the border of the regions along it). Each admitted relation becomes a
`RelationMembership`; `aggregate` reduces a feature's memberships to one
effective classification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Optional

from ..features.source import OsmRelation, RelationMember
from ..utils.validation import parse_int_or_none

logger = logging.getLogger(__name__)


# Finest admin level this system classifies
MAX_ADMIN_LEVEL = 8

# Level assumed for disputed boundaries without an admin_level tag
DISPUTED_DEFAULT_LEVEL = 2

COUNTRY_LEVEL = 2

SORT_RANK_BASE = 200


@dataclass(frozen=True)
class RelationMembership:
    """Preprocessed admin relation a feature belongs to."""
    relation_id: int
    admin_level: int
    disputed: bool = False


@dataclass(frozen=True)
class EffectiveAdminClass:
    """Admin classification after reducing all memberships."""
    admin_level: int
    disputed: bool

    @property
    def is_country(self) -> bool:
        return self.admin_level == COUNTRY_LEVEL


class AdminTheme(NamedTuple):
    kind: str
    min_zoom: int


ADMIN_THEMES: Mapping[int, AdminTheme] = MappingProxyType({
    2: AdminTheme("country", 6),
    3: AdminTheme("region", 6),   # Colombia, Brazil, Kenya (historical)
    4: AdminTheme("region", 6),
    5: AdminTheme("county", 8),   # Colombia, Brazil
    6: AdminTheme("county", 8),
    8: AdminTheme("locality", 10),
})

DEFAULT_ADMIN_THEME = AdminTheme("locality", 10)


def admin_theme(admin_level: int) -> AdminTheme:
    """Kind and theme min zoom for an admin level."""
    return ADMIN_THEMES.get(admin_level, DEFAULT_ADMIN_THEME)


def admin_sort_rank(admin_level: int) -> int:
    """
    Draw order for admin areas.

    Higher numeric sort_rank draws above, which puts countries (198) above
    the localities (192) inside them.
    """
    return SORT_RANK_BASE - admin_level


def preprocess_relation(relation: OsmRelation) -> list[RelationMembership]:
    """
    Turn an OSM relation into zero or one admin memberships.

    Admitted relations:
    - boundary=administrative with a parseable admin_level <= 8
    - boundary=disputed; admin_level defaults to 2 when missing or
      unparseable, and is still rejected above 8

    Returns:
        A one-element list for admitted relations, else an empty list
    """
    boundary = relation.get_string("boundary")
    admin_level = parse_int_or_none(relation.get_string("admin_level"))

    if boundary == "administrative":
        if admin_level is None or admin_level > MAX_ADMIN_LEVEL:
            return []
        return [RelationMembership(relation.id, admin_level, disputed=False)]

    if boundary == "disputed":
        if admin_level is None:
            admin_level = DISPUTED_DEFAULT_LEVEL
        if admin_level > MAX_ADMIN_LEVEL:
            return []
        return [RelationMembership(relation.id, admin_level, disputed=True)]

    return []


def aggregate(
    memberships: Iterable[RelationMembership | RelationMember],
) -> Optional[EffectiveAdminClass]:
    """
    Reduce memberships to (lowest admin level, any disputed).

    Lower admin levels are broader entities, so the minimum wins; a single
    disputing relation marks the whole feature disputed.

    Returns:
        EffectiveAdminClass, or None when there are no memberships
    """
    records = [m.relation if isinstance(m, RelationMember) else m for m in memberships]
    if not records:
        return None
    return EffectiveAdminClass(
        admin_level=min(r.admin_level for r in records),
        disputed=any(r.disputed for r in records),
    )
