"""
Earth layer - the land surface, plus Antarctic glaciers for landcover.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .base import Layer
from ..core.config import MergePolicy
from ..features.collector import FeatureCollector
from ..features.source import SourceFeature, feature_id, try_centroid
from ..lod.merge import FeatureMerger
from ..lod.policy import LodSpec

logger = logging.getLogger(__name__)


LANDCOVER_LAYER = "landcover"

# World Y of roughly 60°S; glaciers south of it are Antarctic
ANTARCTICA_MIN_WORLD_Y = 0.7


class Earth(Layer):
    """Land polygons at every zoom."""

    name = "earth"

    @property
    def merge_policy(self) -> MergePolicy:
        return self.settings.earth_merge

    def process_prepared_osm(self, sf: SourceFeature, features: FeatureCollector) -> None:
        """Land polygons from the preprocessed land dataset, split in two zoom bands."""
        LodSpec(min_zoom=3, max_zoom=9, buffer_pixels=12).apply(
            features.polygon(self.name).set_attr("kind", "earth")
        )
        LodSpec(min_zoom=10, max_zoom=self.settings.max_zoom, buffer_pixels=8).apply(
            features.polygon(self.name).set_attr("kind", "earth")
        )

    def process_ne(self, sf: SourceFeature, features: FeatureCollector) -> None:
        source_layer = sf.source_layer or ""

        if source_layer == "ne_10m_land":
            LodSpec(min_zoom=0, max_zoom=2, buffer_pixels=8).apply(
                features.polygon(self.name).set_attr("kind", "earth")
            )

        # The OSM-derived landcover stops around 80°S, so Antarctic glaciers
        # come from Natural Earth instead.
        if source_layer == "ne_10m_glaciated_areas":
            centroid = try_centroid(sf)
            if not centroid.ok:
                logger.warning(
                    f"Centroid calculation failed: {centroid.error}",
                    extra={"feature_id": feature_id(sf), "layer": LANDCOVER_LAYER},
                )
                return
            if centroid.value.y > ANTARCTICA_MIN_WORLD_Y:
                LodSpec(min_zoom=0, max_zoom=7, min_pixel_size=0.0).apply(
                    features.polygon(LANDCOVER_LAYER).set_attr("kind", "glacier")
                )

    def post_process(self, zoom: int, items: Sequence, merger: FeatureMerger) -> list:
        return merger.merge_overlapping_polygons(items, self.merge_params(zoom).min_area)
