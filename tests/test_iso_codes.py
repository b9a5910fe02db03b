"""
Tests for country code resolution.
"""

import pytest

from tilekinds.admin import (
    COUNTRY_NAME_TO_ISO2,
    ISO3_TO_ISO2,
    ISO_A2_FIELDS,
    ISO_A3_FIELDS,
    OSM_ISO_A2_TAGS,
    CountryCodeResolver,
    CountryCodes,
)
from tilekinds.features import SimpleFeature


@pytest.fixture
def resolver():
    return CountryCodeResolver()


def ne_feature(tags, geometry):
    return SimpleFeature(geometry, tags, source="ne", source_layer="ne_10m_admin_0_countries")


def osm_feature(tags, geometry):
    return SimpleFeature(geometry, tags, source="osm", id=7, osm_type="relation")


class TestTables:
    """Field priority lists and lookup tables are fixed."""

    def test_alpha2_field_order(self):
        assert ISO_A2_FIELDS == (
            "iso_a2", "ISO_A2", "ISO_A2_EH", "ISO3166-1", "ADM0_A2", "adm0_a2", "SOV_A2",
        )

    def test_alpha3_field_order(self):
        assert ISO_A3_FIELDS == ("ADM0_A3", "BRK_A3", "ISO_A3")

    def test_osm_tag_order(self):
        assert OSM_ISO_A2_TAGS[0] == "ISO3166-1:alpha2"
        assert len(OSM_ISO_A2_TAGS) == 4

    def test_tables(self):
        assert len(ISO3_TO_ISO2) == 15
        assert len(COUNTRY_NAME_TO_ISO2) == 16
        assert ISO3_TO_ISO2["GBR"] == "GB"
        assert COUNTRY_NAME_TO_ISO2["United States"] == "US"
        assert COUNTRY_NAME_TO_ISO2["United States of America"] == "US"

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            ISO3_TO_ISO2["NLD"] = "NL"


class TestReferenceChain:
    """Natural Earth resolution."""

    def test_first_alpha2_field_wins(self, resolver, unit_square):
        sf = ne_feature({"ISO_A2": "TC", "SOV_A2": "XX"}, unit_square)
        codes = resolver.resolve(sf, "Test Country")
        assert codes == CountryCodes(iso_code="TC", strategy="alpha2_field")

    def test_sentinel_alpha2_skipped(self, resolver, unit_square):
        sf = ne_feature({"iso_a2": "-99", "ISO_A2_EH": "NO"}, unit_square)
        assert resolver.resolve(sf, "Norway").iso_code == "NO"

    def test_wrong_length_alpha2_skipped(self, resolver, unit_square):
        sf = ne_feature({"iso_a2": "NOR", "ADM0_A2": "NO"}, unit_square)
        assert resolver.resolve(sf, None).iso_code == "NO"

    def test_alpha3_table(self, resolver, unit_square):
        sf = ne_feature({"iso_a2": "-99", "ADM0_A3": "FRA"}, unit_square)
        codes = resolver.resolve(sf, "France")
        assert codes.iso_code == "FR"
        assert codes.strategy == "alpha3_table"

    def test_name_table(self, resolver, unit_square):
        sf = ne_feature({"iso_a2": "-99"}, unit_square)
        codes = resolver.resolve(sf, "United States")
        assert codes.iso_code == "US"
        assert codes.strategy == "name_table"

    def test_unmapped_alpha3_kept(self, resolver, unit_square):
        sf = ne_feature({"ADM0_A3": "KOS"}, unit_square)
        codes = resolver.resolve(sf, "Kosovo")
        assert codes.iso_code is None
        assert codes.iso_code3 == "KOS"
        assert codes.strategy == "unresolved"

    def test_last_unmapped_alpha3_wins(self, resolver, unit_square):
        sf = ne_feature({"ADM0_A3": "SDS", "ISO_A3": "SSD"}, unit_square)
        assert resolver.resolve(sf, None).iso_code3 == "SSD"

    def test_unmapped_alpha3_with_name_fallback(self, resolver, unit_square):
        sf = ne_feature({"ADM0_A3": "XFR"}, unit_square)
        codes = resolver.resolve(sf, "France")
        assert codes.iso_code == "FR"
        assert codes.iso_code3 == "XFR"

    def test_nothing_resolves(self, resolver, unit_square):
        sf = ne_feature({}, unit_square)
        assert resolver.resolve(sf, "Atlantis") == CountryCodes()


class TestOsmChain:
    """OSM resolution."""

    def test_primary_tag(self, resolver, unit_square):
        sf = osm_feature({"ISO3166-1:alpha2": "DE"}, unit_square)
        assert resolver.resolve(sf, "Deutschland", is_country_level=True).iso_code == "DE"

    def test_alternate_tag(self, resolver, unit_square):
        sf = osm_feature({"country_code_iso3166_1_alpha_2": "NL"}, unit_square)
        assert resolver.resolve(sf, "Nederland").iso_code == "NL"

    def test_name_fallback_for_countries_only(self, resolver, unit_square):
        sf = osm_feature({}, unit_square)
        assert resolver.resolve(sf, "France", is_country_level=True).iso_code == "FR"
        assert resolver.resolve(sf, "France", is_country_level=False).iso_code is None

    def test_first_present_tag_decides(self, resolver, unit_square):
        """A malformed first tag is not skipped in favour of a later one."""
        sf = osm_feature({"ISO3166-1:alpha2": "DEU", "ISO3166-1": "DE"}, unit_square)
        assert resolver.resolve(sf, None, is_country_level=True).iso_code is None

    def test_osm_never_sets_alpha3(self, resolver, unit_square):
        sf = osm_feature({"ADM0_A3": "KOS"}, unit_square)
        assert resolver.resolve(sf, None).iso_code3 is None
