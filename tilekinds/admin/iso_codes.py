"""
Country code resolution.

Natural Earth and OSM both carry ISO 3166-1 codes, but under different field
names and with gaps (-99 placeholders, missing codes for some major
countries). Resolution tries a fixed sequence of strategies; the first one
that produces a code wins.

Usage:
    resolver = CountryCodeResolver()
    codes = resolver.resolve(feature, name="France", is_country_level=True)
    codes.iso_code   # "FR"
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence
import logging

from ..features.source import SourceFeature

logger = logging.getLogger(__name__)


# Natural Earth fields carrying alpha-2 codes, in priority order
ISO_A2_FIELDS = (
    "iso_a2", "ISO_A2", "ISO_A2_EH", "ISO3166-1", "ADM0_A2", "adm0_a2", "SOV_A2",
)

# Natural Earth fields carrying alpha-3 codes, in priority order
ISO_A3_FIELDS = ("ADM0_A3", "BRK_A3", "ISO_A3")

# OSM tag variants carrying alpha-2 codes, in priority order
OSM_ISO_A2_TAGS = (
    "ISO3166-1:alpha2",
    "ISO3166-1",
    "country_code_iso3166_1_alpha_2",
    "iso3166-1:alpha2",
)

# Countries whose source records are known to have bad or missing codes
COUNTRY_NAME_TO_ISO2: Mapping[str, str] = MappingProxyType({
    "France": "FR",
    "Germany": "DE",
    "Italy": "IT",
    "Spain": "ES",
    "United Kingdom": "GB",
    "United States of America": "US",
    "United States": "US",
    "Canada": "CA",
    "Brazil": "BR",
    "Russia": "RU",
    "Australia": "AU",
    "China": "CN",
    "Japan": "JP",
    "India": "IN",
    "Mexico": "MX",
    "South Africa": "ZA",
})

ISO3_TO_ISO2: Mapping[str, str] = MappingProxyType({
    "FRA": "FR",
    "DEU": "DE",
    "ITA": "IT",
    "ESP": "ES",
    "GBR": "GB",
    "USA": "US",
    "CAN": "CA",
    "BRA": "BR",
    "RUS": "RU",
    "AUS": "AU",
    "CHN": "CN",
    "JPN": "JP",
    "IND": "IN",
    "MEX": "MX",
    "ZAF": "ZA",
})


# Strategy labels reported on CountryCodes
ALPHA2_FIELD = "alpha2_field"
ALPHA3_TABLE = "alpha3_table"
NAME_TABLE = "name_table"
UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class CountryCodes:
    """Resolved codes for one feature."""
    iso_code: Optional[str] = None
    iso_code3: Optional[str] = None   # unmapped alpha-3, reference data only
    strategy: str = UNRESOLVED


class CountryCodeResolver:
    """
    Multi-strategy ISO alpha-2 resolver.

    Field lists and tables are fixed at construction and never mutated, so a
    single resolver can be shared across worker threads.
    """

    def __init__(
        self,
        alpha2_fields: Sequence[str] = ISO_A2_FIELDS,
        alpha3_fields: Sequence[str] = ISO_A3_FIELDS,
        osm_alpha2_tags: Sequence[str] = OSM_ISO_A2_TAGS,
        iso3_to_iso2: Mapping[str, str] = ISO3_TO_ISO2,
        name_to_iso2: Mapping[str, str] = COUNTRY_NAME_TO_ISO2,
    ):
        self.alpha2_fields = tuple(alpha2_fields)
        self.alpha3_fields = tuple(alpha3_fields)
        self.osm_alpha2_tags = tuple(osm_alpha2_tags)
        self.iso3_to_iso2 = MappingProxyType(dict(iso3_to_iso2))
        self.name_to_iso2 = MappingProxyType(dict(name_to_iso2))

    def resolve(
        self,
        sf: SourceFeature,
        name: Optional[str],
        is_country_level: bool = True,
    ) -> CountryCodes:
        """Resolve using the strategy chain for the feature's source dataset."""
        if sf.source == "osm":
            return self.resolve_osm(sf, name, is_country_level)
        return self.resolve_reference(sf, name)

    def resolve_reference(self, sf: SourceFeature, name: Optional[str]) -> CountryCodes:
        """
        Natural Earth chain: alpha-2 fields, then alpha-3 table, then name.

        An alpha-3 value with no table entry is kept as iso_code3.
        """
        for field in self.alpha2_fields:
            value = sf.get_string(field)
            if value is not None and len(value) == 2:
                return CountryCodes(iso_code=value, strategy=ALPHA2_FIELD)

        iso_code3 = None
        for field in self.alpha3_fields:
            alpha3 = sf.get_string(field)
            if alpha3 is None:
                continue
            mapped = self.iso3_to_iso2.get(alpha3)
            if mapped is not None:
                return CountryCodes(iso_code=mapped, iso_code3=iso_code3, strategy=ALPHA3_TABLE)
            iso_code3 = alpha3

        mapped = self._lookup_name(name)
        if mapped is not None:
            return CountryCodes(iso_code=mapped, iso_code3=iso_code3, strategy=NAME_TABLE)

        if iso_code3 is not None:
            logger.debug(f"No alpha-2 code for alpha-3 {iso_code3}")
        return CountryCodes(iso_code3=iso_code3)

    def resolve_osm(
        self,
        sf: SourceFeature,
        name: Optional[str],
        is_country_level: bool,
    ) -> CountryCodes:
        """
        OSM chain: the first alpha-2 tag variant carrying a value, accepted
        only when it is two characters; otherwise the name table, for
        country-level features only.
        """
        value = None
        for tag in self.osm_alpha2_tags:
            value = sf.get_string(tag)
            if value is not None:
                break

        if value is not None and len(value) == 2:
            return CountryCodes(iso_code=value, strategy=ALPHA2_FIELD)

        if is_country_level:
            mapped = self._lookup_name(name)
            if mapped is not None:
                return CountryCodes(iso_code=mapped, strategy=NAME_TABLE)
        return CountryCodes()

    def _lookup_name(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        return self.name_to_iso2.get(name)


# Shared read-only resolver
DEFAULT_RESOLVER = CountryCodeResolver()
