"""
Administrative classification: boundary relations and country codes.
"""

from .relations import (
    RelationMembership,
    EffectiveAdminClass,
    AdminTheme,
    ADMIN_THEMES,
    admin_theme,
    admin_sort_rank,
    preprocess_relation,
    aggregate,
)
from .iso_codes import (
    CountryCodeResolver,
    CountryCodes,
    COUNTRY_NAME_TO_ISO2,
    ISO3_TO_ISO2,
    ISO_A2_FIELDS,
    ISO_A3_FIELDS,
    OSM_ISO_A2_TAGS,
)

__all__ = [
    "RelationMembership",
    "EffectiveAdminClass",
    "AdminTheme",
    "ADMIN_THEMES",
    "admin_theme",
    "admin_sort_rank",
    "preprocess_relation",
    "aggregate",
    "CountryCodeResolver",
    "CountryCodes",
    "COUNTRY_NAME_TO_ISO2",
    "ISO3_TO_ISO2",
    "ISO_A2_FIELDS",
    "ISO_A3_FIELDS",
    "OSM_ISO_A2_TAGS",
]
