"""
Basemap profile - routes source features to the layer drivers.

Each source dataset is handled by a fixed list of layer hooks:

    ne         -> admin_areas, water, earth (Natural Earth)
    osm        -> admin_areas, water
    osm_water  -> water (preprocessed ocean polygons)
    osm_land   -> earth (preprocessed land polygons)

Rule indexes, lookup tables and settings are built once and only read while
features are classified, so features can be classified on many threads.

Usage:
    profile = Profile()
    memberships = profile.preprocess_osm_relation(relation)
    emitted = profile.classify(feature)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .core.config import Settings, settings as default_settings
from .features.collector import FeatureCollector, OutputFeature
from .features.source import OsmRelation, SourceFeature
from .layers.admin_areas import AdminAreas
from .layers.base import Layer
from .layers.earth import Earth
from .layers.water import Water
from .lod.merge import FeatureMerger, MergeParams

logger = logging.getLogger(__name__)


Handler = Callable[[SourceFeature, FeatureCollector], None]


class Profile:
    """Dispatches features, relations and per-zoom merges to layers."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.admin_areas = AdminAreas(self.settings)
        self.water = Water(self.settings)
        self.earth = Earth(self.settings)

        self.layers: Dict[str, Layer] = {
            layer.name: layer for layer in (self.admin_areas, self.water, self.earth)
        }
        self.handlers: Dict[str, List[Handler]] = {
            "ne": [self.admin_areas.process_ne, self.water.process_ne, self.earth.process_ne],
            "osm": [self.admin_areas.process_osm, self.water.process_osm],
            "osm_water": [self.water.process_prepared_osm],
            "osm_land": [self.earth.process_prepared_osm],
        }

    # =========================================================================
    # PREPROCESSING
    # =========================================================================

    def preprocess_osm_relation(self, relation: OsmRelation) -> list:
        """Relation records to attach to the relation's member features."""
        return self.admin_areas.preprocess_osm_relation(relation)

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def process_feature(self, sf: SourceFeature, features: FeatureCollector) -> None:
        handlers = self.handlers.get(sf.source)
        if handlers is None:
            logger.debug(f"No layers handle source {sf.source!r}", extra={"feature_id": sf.id})
            return
        for handler in handlers:
            handler(sf, features)

    def classify(self, sf: SourceFeature) -> list[OutputFeature]:
        """All output features emitted for one source feature."""
        collector = FeatureCollector(self.settings)
        self.process_feature(sf, collector)
        return collector.features

    def _classify_isolated(self, sf: SourceFeature) -> list[OutputFeature]:
        try:
            return self.classify(sf)
        except Exception:
            logger.exception(
                "Feature classification failed",
                extra={"feature_id": sf.id, "source": sf.source, "source_layer": sf.source_layer},
            )
            return []

    def classify_all(
        self,
        features: Iterable[SourceFeature],
        max_workers: Optional[int] = None,
    ) -> list[list[OutputFeature]]:
        """
        Classify features independently, in input order.

        Args:
            features: Source features
            max_workers: Thread pool size; 1 classifies on the calling thread

        Returns:
            One list of output features per input feature. A feature whose
            classification fails yields an empty list and does not affect
            the others.
        """
        if max_workers == 1:
            return [self._classify_isolated(sf) for sf in features]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self._classify_isolated, features))

    # =========================================================================
    # POST-PROCESSING
    # =========================================================================

    def layer(self, layer_name: str) -> Layer:
        try:
            return self.layers[layer_name]
        except KeyError:
            raise KeyError(
                f"Unknown layer {layer_name!r}, expected one of {sorted(self.layers)}"
            ) from None

    def merge_params(self, layer_name: str, zoom: int) -> MergeParams:
        return self.layer(layer_name).merge_params(zoom)

    def post_process(
        self,
        layer_name: str,
        zoom: int,
        items: Sequence,
        merger: FeatureMerger,
    ) -> list:
        return self.layer(layer_name).post_process(zoom, items, merger)
