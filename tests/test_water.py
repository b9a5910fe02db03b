"""
Tests for the water layer.

Run with: pytest tests/test_water.py -v
"""

import pytest
from shapely.geometry import Point

from tilekinds.features import SimpleFeature
from tilekinds.layers.water import line_buffer_pixels


def by_type(features, geometry_type):
    return [f for f in features if f.geometry_type == geometry_type]


def osm(geometry, tags, id=1, osm_type="way"):
    return SimpleFeature(geometry, tags, source="osm", id=id, osm_type=osm_type)


class TestNaturalEarthWater:
    """Oceans and lakes from Natural Earth."""

    def test_coarse_lake_rounds_min_zoom(self, profile, unit_square):
        """Test a ne_50m lake with a fractional min_zoom."""
        sf = SimpleFeature(
            unit_square, {"featurecla": "Lake", "min_zoom": "1.7"},
            source="ne", source_layer="ne_50m_lakes",
        )
        feature = profile.classify(sf)[0]
        assert feature.layer == "water"
        assert (feature.min_zoom, feature.max_zoom) == (2, 3)
        assert feature.buffer_pixels == 16
        assert feature.attributes == {"kind": "lake", "sort_rank": 200}

    def test_fine_lake_capped_at_tier_max(self, profile, unit_square):
        """Test a ne_10m lake whose min_zoom is above the tier."""
        sf = SimpleFeature(
            unit_square, {"featurecla": "Lake", "min_zoom": "6"},
            source="ne", source_layer="ne_10m_lakes",
        )
        feature = profile.classify(sf)[0]
        assert (feature.min_zoom, feature.max_zoom) == (5, 5)

    def test_ocean(self, profile, unit_square):
        """Test a ne_10m ocean polygon."""
        sf = SimpleFeature(
            unit_square, {"featurecla": "Ocean", "min_zoom": "0"},
            source="ne", source_layer="ne_10m_ocean",
        )
        feature = profile.classify(sf)[0]
        assert feature.attributes["kind"] == "ocean"
        assert (feature.min_zoom, feature.max_zoom) == (4, 5)
        assert feature.buffer_pixels == 8

    @pytest.mark.parametrize("featurecla,kind", [
        ("Reservoir", "lake"),
        ("Alkaline Lake", "lake"),
        ("Playa", "playa"),
    ])
    def test_lake_classes(self, profile, unit_square, featurecla, kind):
        """Test feature classes mapped onto water kinds."""
        sf = SimpleFeature(
            unit_square, {"featurecla": featurecla, "min_zoom": "2"},
            source="ne", source_layer="ne_50m_lakes",
        )
        assert profile.classify(sf)[0].attributes["kind"] == kind

    def test_missing_min_zoom_skipped(self, profile, unit_square):
        """Test that a lake without min_zoom is not emitted."""
        sf = SimpleFeature(
            unit_square, {"featurecla": "Lake", "min_zoom": "-99"},
            source="ne", source_layer="ne_50m_lakes",
        )
        assert profile.classify(sf) == []

    def test_other_source_layers_cleared(self, profile, unit_square):
        """Test that lake features outside the water layers are dropped."""
        sf = SimpleFeature(
            unit_square, {"featurecla": "Lake", "min_zoom": "2"},
            source="ne", source_layer="ne_10m_rivers_lake_centerlines",
        )
        assert profile.classify(sf) == []

    def test_non_polygon_skipped(self, profile):
        """Test that Natural Earth water points are not emitted."""
        sf = SimpleFeature(
            Point(0.5, 0.5), {"featurecla": "Lake", "min_zoom": "2"},
            source="ne", source_layer="ne_50m_lakes",
        )
        assert profile.classify(sf) == []


class TestPreparedWater:
    """Ocean polygons from the preprocessed water dataset."""

    def test_ocean_polygon(self, profile, unit_square):
        """Test the fixed ocean output."""
        sf = SimpleFeature(unit_square, {}, source="osm_water", id=99)
        feature = profile.classify(sf)[0]
        assert feature.id == 1
        assert feature.min_zoom == 6
        assert feature.buffer_pixels == 8
        assert feature.attributes == {"kind": "ocean", "sort_rank": 200}


class TestOsmLines:
    """Waterway lines."""

    def test_river(self, profile, river_line):
        """Test a named river line."""
        sf = osm(river_line, {"waterway": "river", "name": "Rhine", "name:de": "Rhein"})
        line = by_type(profile.classify(sf), "line")[0]

        assert line.min_zoom == 7
        assert line.sort_key == 7
        assert line.pixel_tolerance == 0.0
        assert line.buffer_pixels == 12
        assert line.min_pixel_size == 0.0
        attrs = line.attributes
        assert attrs["kind"] == "river"
        assert attrs["min_zoom"] == 8
        assert attrs["name"] == "Rhine"
        assert attrs["name:de"] == "Rhein"
        assert attrs["sort_rank"] == 200

    def test_stream(self, profile, river_line):
        """Test a stream line."""
        line = profile.classify(osm(river_line, {"waterway": "stream"}))[0]
        assert line.min_zoom == 11
        assert line.pixel_tolerance == 0.5
        assert line.buffer_pixels == 4

    def test_canal_with_boats(self, profile, river_line):
        """Test the boat=yes rule keeps the canal zoom."""
        line = profile.classify(osm(river_line, {"waterway": "canal", "boat": "yes"}))[0]
        assert line.attributes["kind"] == "canal"
        assert line.min_zoom == 9
        assert line.buffer_pixels == 8

    def test_line_default_min_zoom(self, profile, river_line):
        """Test a line kind without a rule-provided zoom."""
        line = profile.classify(osm(river_line, {"waterway": "dock"}))[0]
        assert line.min_zoom == 12
        assert line.attributes["min_zoom"] == 13

    def test_layer_attribute_at_street_level(self, profile, river_line):
        """Test that layer is only emitted from zoom 14."""
        line = profile.classify(osm(river_line, {"waterway": "drain", "layer": "-1"}))[0]
        assert line.min_zoom == 15
        assert "layer" not in line.attrs_at(13)
        assert line.attrs_at(15)["layer"] == -1

    def test_covered_dropped(self, profile, river_line):
        """Test that covered waterways are not emitted."""
        assert profile.classify(osm(river_line, {"waterway": "stream", "covered": "yes"})) == []

    def test_line_buffer_pixels(self):
        """Test buffers for low-zoom rivers."""
        assert line_buffer_pixels("river", 7) == 12
        assert line_buffer_pixels("canal", 9) == 8
        assert line_buffer_pixels("stream", 11) == 4


class TestOsmPolygons:
    """Water areas."""

    def test_lake_polygon_and_label(self, profile, unit_square):
        """Test a named pond produces a polygon and a label."""
        sf = osm(unit_square, {"natural": "water", "water": "pond", "name": "Pond"})
        emitted = profile.classify(sf)

        polygon = by_type(emitted, "polygon")[0]
        assert polygon.min_zoom == 6
        assert polygon.min_pixel_size == 1.0
        assert polygon.attributes["kind"] == "water"
        assert polygon.attributes["kind_detail"] == "lake"

        label = by_type(emitted, "point_on_surface")[0]
        assert label.min_zoom == 6
        assert label.buffer_pixels == 128
        assert label.attributes["min_zoom"] == 7
        assert label.attributes["name"] == "Pond"

    def test_kind_detail_copied_from_water_tag(self, profile, unit_square):
        """Test water=river keeps its own detail value."""
        polygon = profile.classify(osm(unit_square, {"natural": "water", "water": "river"}))[0]
        assert polygon.attributes["kind_detail"] == "river"

    def test_unnamed_polygon_has_no_label(self, profile, unit_square):
        """Test that labels need a name."""
        emitted = profile.classify(osm(unit_square, {"natural": "water"}))
        assert [f.geometry_type for f in emitted] == ["polygon"]

    def test_riverbank(self, profile, unit_square):
        """Test riverbanks keep more detail."""
        polygon = profile.classify(osm(unit_square, {"waterway": "riverbank"}))[0]
        assert polygon.pixel_tolerance == pytest.approx(0.15)
        assert polygon.min_pixel_size == 0.5

    def test_river_polygon_not_area_filtered(self, profile, unit_square):
        """Test river areas keep every polygon regardless of pixel size."""
        polygon = by_type(profile.classify(osm(unit_square, {"waterway": "river"})), "polygon")[0]
        assert polygon.attributes["kind"] == "river"
        assert polygon.min_pixel_size == 0.0

    def test_reef_detail(self, profile, unit_square):
        """Test reef types."""
        polygon = profile.classify(osm(unit_square, {"natural": "reef", "reef": "coral"}))[0]
        assert polygon.attributes["kind"] == "reef"
        assert polygon.attributes["kind_detail"] == "coral"

    def test_fjord_label_only(self, profile, unit_square):
        """Test that fjords emit a label but no polygon."""
        emitted = profile.classify(osm(unit_square, {"natural": "fjord", "name": "Sognefjord"}))
        assert [f.geometry_type for f in emitted] == ["point_on_surface"]
        assert emitted[0].attributes["kind"] == "fjord"

    def test_tunnel_attributes_at_street_level(self, profile, unit_square):
        """Test bridge/tunnel/layer attributes are gated at zoom 14."""
        polygon = profile.classify(
            osm(unit_square, {"natural": "water", "tunnel": "culvert", "layer": "-1"})
        )[0]
        assert "tunnel" not in polygon.attrs_at(13)
        assert polygon.attrs_at(14)["tunnel"] == "culvert"
        assert polygon.attrs_at(14)["layer"] == -1

    def test_label_zoom_from_area(self, profile, small_square):
        """Test a tiny named lake is labelled at zoom 15."""
        emitted = profile.classify(osm(small_square, {"natural": "water", "name": "Tiny"}))
        label = by_type(emitted, "point_on_surface")[0]
        assert label.min_zoom == 15
        assert label.attributes["min_zoom"] == 16


class TestSeas:
    """Named seas and oceans."""

    def test_north_sea_polygon_dropped(self, profile, unit_square):
        """Test that the North Sea polygon produces nothing."""
        sf = osm(unit_square, {"place": "sea", "name": "Nordsee", "name:en": "North Sea"})
        assert profile.classify(sf) == []

    def test_black_sea_polygon_label(self, profile, unit_square):
        """Test a sea polygon yields only a label with an English name."""
        sf = osm(unit_square, {"place": "sea", "name": "Чорне море", "name:en": "Black Sea"})
        emitted = profile.classify(sf)

        assert [f.geometry_type for f in emitted] == ["point_on_surface"]
        label = emitted[0]
        assert label.min_zoom == 3
        assert label.attributes["kind"] == "sea"
        assert label.attributes["min_zoom"] == 4
        assert label.attributes["name"] == "Black Sea"
        assert label.attributes["name:en"] == "Black Sea"

    def test_sea_polygon_labelled_from_english_name(self, profile, unit_square):
        """Test a listed sea without a local name is still labelled."""
        emitted = profile.classify(osm(unit_square, {"place": "sea", "name:en": "Black Sea"}))

        assert [f.geometry_type for f in emitted] == ["point_on_surface"]
        assert emitted[0].min_zoom == 3
        assert emitted[0].attributes["name"] == "Black Sea"

    def test_sea_point(self, profile, sea_point):
        """Test an unlisted sea point."""
        point = profile.classify(osm(sea_point, {"place": "sea", "name": "Irish Sea"}, osm_type="node"))[0]
        assert point.geometry_type == "point"
        assert point.min_zoom == 6
        assert point.attributes["min_zoom"] == 7
        assert point.id == (1 << 44) | 1

    def test_major_sea_point(self, profile, sea_point):
        """Test a listed sea point is shown from zoom 3 under its English name."""
        point = profile.classify(
            osm(sea_point, {"place": "sea", "name": "Nordsee", "name:en": "North Sea"}, osm_type="node")
        )[0]
        assert point.min_zoom == 3
        assert point.attributes["name"] == "North Sea"

    def test_ocean_point(self, profile, sea_point):
        """Test ocean points are shown from zoom 0."""
        point = profile.classify(osm(sea_point, {"place": "ocean", "name": "Atlantic"}))[0]
        assert point.attributes["kind"] == "ocean"
        assert point.min_zoom == 0
        assert point.attributes["min_zoom"] == 1


class TestWaterMerge:
    """Per-zoom merging of water features."""

    def test_post_process_merges_lines_then_polygons(self, profile, merger):
        """Test the merge sequence and its low-zoom parameters."""
        profile.post_process("water", 5, ["x"], merger)
        assert merger.calls == [
            ("lines", 0.25, 0.1, 1.0),
            ("nearby", 0.5, 0.5, 0.25, 1.0),
        ]

    def test_post_process_high_zoom(self, profile, merger):
        """Test high-zoom merge parameters."""
        profile.post_process("water", 12, [], merger)
        assert merger.calls == [
            ("lines", 0.5, 0.2, 2.0),
            ("nearby", 1.0, 1.0, 0.5, 0.5),
        ]
