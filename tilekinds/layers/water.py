"""
Water layer.

Oceans, seas, lakes, rivers and smaller water features from Natural Earth
(small scales) and OSM. OSM features may produce a polygon, a line, a point
and a label point, each with its own zoom rules.
"""

from __future__ import annotations

import logging
from collections import ChainMap
from typing import Optional, Sequence

from .base import Layer
from ..core.config import MergePolicy
from ..features.collector import FeatureCollector
from ..features.names import set_osm_names
from ..features.source import SourceFeature, feature_id
from ..lod.merge import FeatureMerger
from ..lod.policy import (
    LodSpec,
    client_min_zoom,
    label_min_zoom,
    polygon_min_pixel_size,
    reference_polygon_lod,
)
from ..rules.matcher import MatchIndex, from_tag, rule, use
from ..rules.predicates import any_of, has_tag, is_point, is_polygon, none_of
from ..utils.validation import parse_int_or_none

logger = logging.getLogger(__name__)


WATER_SORT_RANK = 200

# Attributes like bridge/tunnel/layer only matter at street level
EXTRA_ATTR_MIN_ZOOM = 14

DEFAULT_LINE_MIN_ZOOM = 12
DEFAULT_POINT_MIN_ZOOM = 15
LABEL_BUFFER_PIXELS = 128

RIVER_LIKE = ("river", "canal")

# Virtual tag carrying the Natural Earth source layer name during matching
SOURCE_LAYER_TAG = "_source_layer"

WATER_ATTRIBUTES = ("kind", "kind_detail", "min_zoom", "keep_polygon", "name_override")


NE_WATER_INDEX = MatchIndex([
    rule(has_tag("featurecla", "Ocean"), use("min_zoom", from_tag("min_zoom")), use("kind", "ocean")),
    rule(has_tag("featurecla", "Playa"), use("min_zoom", from_tag("min_zoom")), use("kind", "playa")),
    rule(has_tag("featurecla", "Reservoir"), use("min_zoom", from_tag("min_zoom")), use("kind", "lake")),
    rule(has_tag("featurecla", "Lake"), use("min_zoom", from_tag("min_zoom")), use("kind", "lake")),
    rule(has_tag("featurecla", "Alkaline Lake"), use("min_zoom", from_tag("min_zoom")), use("kind", "lake")),
    rule(
        none_of("""
            _source_layer
            ne_50m_ocean
            ne_50m_lakes
            ne_10m_ocean
            ne_10m_lakes
        """),
        use("kind", None),
    ),
], attributes=WATER_ATTRIBUTES)


OSM_WATER_INDEX = MatchIndex([
    rule(has_tag("natural", "reef"), use("kind", "reef")),
    rule(
        has_tag("natural", "reef"),
        any_of("""
            reef
            coral
            rock
            sand
        """),
        use("kind_detail", from_tag("reef")),
    ),
    rule(has_tag("waterway", "drain"), use("kind", "drain"), use("min_zoom", 15)),
    rule(has_tag("waterway", "ditch"), use("kind", "ditch"), use("min_zoom", 15)),
    rule(has_tag("waterway", "stream"), use("kind", "stream"), use("min_zoom", 11)),
    rule(has_tag("waterway", "river"), use("kind", "river"), use("min_zoom", 7)),
    rule(has_tag("waterway", "canal"), use("kind", "canal"), use("min_zoom", 9)),
    rule(has_tag("waterway", "canal"), has_tag("boat", "yes"), use("kind", "canal"), use("min_zoom", 9)),
    rule(has_tag("amenity", "swimming_pool"), use("kind", "swimming_pool")),
    rule(has_tag("leisure", "swimming_pool"), use("kind", "swimming_pool")),
    rule(has_tag("landuse", "reservoir"), use("kind", "lake")),
    rule(has_tag("landuse", "basin"), use("kind", "basin")),
    rule(
        any_of("""
            natural
            fjord
            strait
            bay
        """),
        use("kind", from_tag("natural")),
        use("keep_polygon", False),
    ),
    rule(has_tag("natural", "water"), use("kind", "water")),
    rule(
        has_tag("natural", "water"),
        any_of("""
            water
            basin
            canal
            ditch
            drain
            lake
            river
            stream
        """),
        use("kind_detail", from_tag("water")),
    ),
    rule(
        has_tag("natural", "water"),
        any_of("""
            water
            lagoon
            oxbow
            pond
            reservoir
            wastewater
        """),
        use("kind_detail", "lake"),
    ),
    rule(has_tag("amenity", "fountain"), use("kind", "fountain")),
    rule(has_tag("waterway", "dock"), use("kind", "dock")),
    rule(has_tag("waterway", "riverbank"), use("kind", "riverbank"), use("min_zoom", 7)),
    rule(has_tag("covered", "yes"), use("kind", None)),
    rule(has_tag("place", "sea"), is_polygon(), use("kind", "sea"), use("keep_polygon", False)),
    rule(
        has_tag("place", "sea"),
        is_polygon(),
        any_of("""
            name:en
            North Sea
            Alboran Sea
        """),
        use("kind", None),
    ),
    rule(
        has_tag("place", "sea"),
        is_polygon(),
        any_of("""
            name:en
            Caspian Sea
            Red Sea
            Persian Gulf
            Sea of Oman
            Gulf of Aden
            Gulf of Thailand
            Sea of Japan
        """),
        use("min_zoom", 5),
    ),
    rule(
        has_tag("place", "sea"),
        is_polygon(),
        any_of("""
            name:en
            Arabian Sea
            Bay of Bengal
            Black Sea
        """),
        use("min_zoom", 3),
    ),
    rule(
        has_tag("place", "sea"),
        any_of("""
            name:en
            North Sea
            Baltic Sea
            Black Sea
            Caspian Sea
        """),
        use("name_override", from_tag("name:en")),
    ),
    rule(has_tag("place", "sea"), is_point(), use("kind", "sea"), use("min_zoom", 6)),
    rule(
        has_tag("place", "sea"),
        is_point(),
        any_of("""
            name:en
            North Atlantic Ocean
            South Atlantic Ocean
            Caribbean Sea
            Gulf of Mexico
            Mediterranean Sea
            North Sea
            Philippine Sea
            Tasman Sea
            Fiji Sea
            South China Sea
            North Pacific Ocean
            South Pacific Ocean
            Scotia Sea
            Weddell Sea
            Indian Ocean
            Bering Sea
            Gulf of Alaska
            Gulf of Guinea
        """),
        use("min_zoom", 3),
    ),
    rule(has_tag("place", "ocean"), use("kind", "ocean"), use("min_zoom", 0)),
], attributes=WATER_ATTRIBUTES)


def line_buffer_pixels(kind: str, min_zoom: int) -> int:
    """Rivers visible at low zooms get wider buffers to avoid gaps at tile edges."""
    if kind in RIVER_LIKE:
        return 12 if min_zoom <= 8 else 8
    return 4


class Water(Layer):
    """Water polygons, lines, points and labels."""

    name = "water"

    def __init__(self, settings=None, ne_index: Optional[MatchIndex] = None,
                 osm_index: Optional[MatchIndex] = None):
        super().__init__(settings)
        self.ne_index = ne_index or NE_WATER_INDEX
        self.osm_index = osm_index or OSM_WATER_INDEX

    @property
    def merge_policy(self) -> MergePolicy:
        return self.settings.water_merge

    def process_prepared_osm(self, sf: SourceFeature, features: FeatureCollector) -> None:
        """Ocean polygon from the preprocessed water polygons dataset."""
        polygon = features.polygon(self.name).set_id(1).set_attr("kind", "ocean")
        LodSpec(
            min_zoom=6,
            pixel_tolerance=self.settings.pixel_tolerance,
            buffer_pixels=8,
            sort_rank=WATER_SORT_RANK,
        ).apply(polygon)

    def process_ne(self, sf: SourceFeature, features: FeatureCollector) -> None:
        source_layer = sf.source_layer or ""
        tags = ChainMap({SOURCE_LAYER_TAG: source_layer}, sf.tags)
        matches = self.ne_index.matches(sf, tags)

        kind = matches.get_string("kind")
        if kind is None:
            return

        min_zoom = matches.get_integer("min_zoom")
        if not sf.can_be_polygon() or min_zoom is None:
            return

        buffer_pixels = 16 if kind in ("river", "lake") else 8
        polygon = features.polygon(self.name).set_attr("kind", kind)
        reference_polygon_lod(
            source_layer,
            sort_rank=WATER_SORT_RANK,
            explicit_min_zoom=min_zoom,
            buffer_pixels=buffer_pixels,
            settings=self.settings,
        ).apply(polygon)

    def process_osm(self, sf: SourceFeature, features: FeatureCollector) -> None:
        matches = self.osm_index.matches(sf)

        kind = matches.get_string("kind")
        if kind is None:
            return

        name_override = matches.get_string("name_override")
        kind_detail = matches.get_string("kind_detail")
        keep_polygon = matches.get_boolean("keep_polygon", True)
        layer = parse_int_or_none(sf.get_string("layer"))

        if sf.can_be_polygon() and keep_polygon:
            self._emit_polygon(sf, features, kind, kind_detail, layer)

        if sf.can_be_line() and not sf.can_be_polygon():
            min_zoom = matches.get_integer("min_zoom", DEFAULT_LINE_MIN_ZOOM)
            line = (
                features.line(self.name)
                .set_id(feature_id(sf))
                .set_attr("kind", kind)
                .set_attr("min_zoom", client_min_zoom(min_zoom))
                .set_attr_with_min_zoom("layer", layer, EXTRA_ATTR_MIN_ZOOM)
                .set_sort_key(min_zoom)
            )
            LodSpec(
                min_zoom=min_zoom,
                pixel_tolerance=0.0 if kind in RIVER_LIKE else 0.5,
                buffer_pixels=line_buffer_pixels(kind, min_zoom),
                min_pixel_size=0.0,
                sort_rank=WATER_SORT_RANK,
            ).apply(line)
            set_osm_names(line, sf, 0, name_override)

        if sf.is_point():
            min_zoom = matches.get_integer("min_zoom", DEFAULT_POINT_MIN_ZOOM)
            point = (
                features.point(self.name)
                .set_id(feature_id(sf))
                .set_attr("kind", kind)
                .set_attr("min_zoom", client_min_zoom(min_zoom))
                .set_sort_key(min_zoom)
                .set_min_zoom(min_zoom)
            )
            set_osm_names(point, sf, 0, name_override)

        if (name_override is not None or sf.has_tag("name")) and sf.can_be_polygon():
            name_min_zoom = label_min_zoom(sf, matches.get_integer("min_zoom"))
            label = (
                features.point_on_surface(self.name)
                .set_attr("kind", kind)
                .set_attr("kind_detail", kind_detail)
                .set_attr("min_zoom", client_min_zoom(name_min_zoom))
                .set_attr("sort_rank", WATER_SORT_RANK)
                .set_sort_key(name_min_zoom)
                .set_min_zoom(name_min_zoom)
                .set_buffer_pixels(LABEL_BUFFER_PIXELS)
            )
            set_osm_names(label, sf, 0, name_override)

    def _emit_polygon(self, sf, features, kind, kind_detail, layer) -> None:
        # Riverbanks keep more detail at lower zooms
        pixel_tolerance = self.settings.pixel_tolerance
        if kind == "riverbank":
            pixel_tolerance *= 0.75

        if kind == "riverbank":
            min_pixel_size = 0.5
        else:
            min_pixel_size = polygon_min_pixel_size(kind, self.settings)

        polygon = (
            features.polygon(self.name)
            .set_attr("kind", kind)
            .set_attr("kind_detail", kind_detail)
            .set_attr_with_min_zoom("bridge", sf.get_string("bridge"), EXTRA_ATTR_MIN_ZOOM)
            .set_attr_with_min_zoom("tunnel", sf.get_string("tunnel"), EXTRA_ATTR_MIN_ZOOM)
            .set_attr_with_min_zoom("layer", layer, EXTRA_ATTR_MIN_ZOOM)
        )
        LodSpec(
            min_zoom=6,
            pixel_tolerance=pixel_tolerance,
            buffer_pixels=self.settings.polygon_buffer_pixels,
            min_pixel_size=min_pixel_size,
            sort_rank=WATER_SORT_RANK,
        ).apply(polygon)

    def post_process(self, zoom: int, items: Sequence, merger: FeatureMerger) -> list:
        params = self.merge_params(zoom)
        items = merger.merge_line_strings(
            items, params.merge_distance, params.pixel_tolerance, params.simplify_tolerance
        )
        return merger.merge_nearby_polygons(
            items, params.min_area, params.min_area, params.merge_distance, params.buffer
        )
