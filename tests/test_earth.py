"""
Tests for the earth layer and Antarctic glaciers.
"""

import logging

from shapely.geometry import Polygon, box

from tilekinds.features import SimpleFeature


class TestLand:
    """Land polygons."""

    def test_prepared_land_split_in_two_bands(self, profile, unit_square):
        """Test preprocessed land polygons are emitted for two zoom bands."""
        sf = SimpleFeature(unit_square, {}, source="osm_land")
        low, high = profile.classify(sf)

        assert (low.min_zoom, low.max_zoom, low.buffer_pixels) == (3, 9, 12)
        assert (high.min_zoom, high.max_zoom, high.buffer_pixels) == (10, 15, 8)
        assert low.attributes == high.attributes == {"kind": "earth"}

    def test_ne_land(self, profile, unit_square):
        """Test Natural Earth land covers the lowest zooms."""
        sf = SimpleFeature(unit_square, {"featurecla": "Land"}, source="ne", source_layer="ne_10m_land")
        feature = profile.classify(sf)[0]
        assert feature.layer == "earth"
        assert (feature.min_zoom, feature.max_zoom) == (0, 2)
        assert feature.buffer_pixels == 8

    def test_coarse_land_ignored(self, profile, unit_square):
        """Test only the 10m land layer is used."""
        sf = SimpleFeature(unit_square, {}, source="ne", source_layer="ne_50m_land")
        assert profile.classify(sf) == []


class TestGlaciers:
    """Antarctic glaciers for the landcover layer."""

    def test_antarctic_glacier(self, profile):
        """Test a glacier south of 60°S."""
        sf = SimpleFeature(
            box(0.1, 0.8, 0.2, 0.9), {}, source="ne", source_layer="ne_10m_glaciated_areas"
        )
        feature = profile.classify(sf)[0]
        assert feature.layer == "landcover"
        assert feature.attributes == {"kind": "glacier"}
        assert (feature.min_zoom, feature.max_zoom) == (0, 7)
        assert feature.min_pixel_size == 0.0

    def test_northern_glacier_ignored(self, profile):
        """Test glaciers outside Antarctica are left to OSM landcover."""
        sf = SimpleFeature(
            box(0.1, 0.1, 0.2, 0.2), {}, source="ne", source_layer="ne_10m_glaciated_areas"
        )
        assert profile.classify(sf) == []

    def test_glacier_from_lonlat(self, profile):
        """Test the threshold against a projected Antarctic polygon."""
        sf = SimpleFeature.from_lonlat(
            Polygon([(0, -75), (10, -75), (10, -70), (0, -70)]),
            {},
            source="ne",
            source_layer="ne_10m_glaciated_areas",
        )
        assert [f.attributes["kind"] for f in profile.classify(sf)] == ["glacier"]

    def test_centroid_failure_skips_feature(self, profile, caplog):
        """Test an empty geometry is logged and skipped."""
        sf = SimpleFeature(
            Polygon(), {}, source="ne", source_layer="ne_10m_glaciated_areas", id=77
        )
        with caplog.at_level(logging.WARNING):
            assert profile.classify(sf) == []
        assert "Centroid calculation failed" in caplog.text
        record = [r for r in caplog.records if r.levelno == logging.WARNING][-1]
        assert record.feature_id == 77
        assert record.layer == "landcover"


class TestEarthMerge:
    """Per-zoom merging of land polygons."""

    def test_post_process_merges_overlapping(self, profile, merger):
        """Test land polygons are unioned with the minimum area."""
        items = [object(), object()]
        assert profile.post_process("earth", 3, items, merger) == items
        assert merger.calls == [("overlapping", 1.0)]
