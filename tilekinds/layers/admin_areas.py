"""
Administrative areas layer.

Natural Earth countries and states cover the small scales; OSM boundary
relations take over from zoom 6.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Sequence

from .base import Layer
from ..admin.iso_codes import DEFAULT_RESOLVER, CountryCodeResolver, CountryCodes
from ..admin.relations import (
    RelationMembership,
    admin_sort_rank,
    admin_theme,
    aggregate,
    preprocess_relation,
)
from ..core.config import MergePolicy, Settings
from ..features.collector import FeatureCollector, OutputFeature
from ..features.source import OsmRelation, SourceFeature, feature_id
from ..lod.merge import FeatureMerger
from ..lod.policy import LodSpec, osm_polygon_lod, reference_polygon_lod

logger = logging.getLogger(__name__)


class NeAdminSource(NamedTuple):
    kind: str
    admin_level: int


NE_ADMIN_LAYERS: Mapping[str, NeAdminSource] = MappingProxyType({
    "ne_50m_admin_0_countries": NeAdminSource("country", 2),
    "ne_10m_admin_0_countries": NeAdminSource("country", 2),
    "ne_10m_admin_1_states_provinces": NeAdminSource("region", 4),
})


def _set_codes(polygon: OutputFeature, codes: CountryCodes) -> None:
    polygon.set_attr("iso_code", codes.iso_code)
    polygon.set_attr("iso_code3", codes.iso_code3)


class AdminAreas(Layer):
    """Country, region, county and locality polygons."""

    name = "admin_areas"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        resolver: Optional[CountryCodeResolver] = None,
    ):
        super().__init__(settings)
        self.resolver = resolver or DEFAULT_RESOLVER

    @property
    def merge_policy(self) -> MergePolicy:
        return self.settings.admin_merge

    def preprocess_osm_relation(self, relation: OsmRelation) -> list[RelationMembership]:
        return preprocess_relation(relation)

    def process_ne(self, sf: SourceFeature, features: FeatureCollector) -> None:
        source = NE_ADMIN_LAYERS.get(sf.source_layer or "")
        if source is None or not sf.can_be_polygon():
            return

        name = sf.get_string("name")
        lod = reference_polygon_lod(
            sf.source_layer,
            sort_rank=admin_sort_rank(source.admin_level),
            settings=self.settings,
        )

        polygon = (
            features.polygon(self.name)
            .set_id(feature_id(sf))
            .set_attr("kind", source.kind)
            .set_attr("kind_detail", source.admin_level)
            .set_attr("name", name)
        )
        lod.apply(polygon)
        _set_codes(polygon, self.resolver.resolve_reference(sf, name))

    def process_osm(self, sf: SourceFeature, features: FeatureCollector) -> None:
        if not sf.can_be_polygon():
            return

        effective = aggregate(sf.relation_info(RelationMembership))
        if effective is None:
            return

        theme = admin_theme(effective.admin_level)
        lod: LodSpec = osm_polygon_lod(
            theme.min_zoom,
            theme.kind,
            sort_rank=admin_sort_rank(effective.admin_level),
            min_pixel_size=0.0,
            settings=self.settings,
        )

        polygon = (
            features.polygon(self.name)
            .set_id(feature_id(sf))
            .set_attr("kind", theme.kind)
            .set_attr("kind_detail", effective.admin_level)
        )
        lod.apply(polygon)

        name = sf.get_string("name")
        polygon.set_attr("name", name)
        codes = self.resolver.resolve_osm(sf, name, effective.is_country)
        polygon.set_attr("iso_code", codes.iso_code)

        if effective.disputed:
            polygon.set_attr("disputed", True)

        logger.debug(
            f"Admin polygon {theme.kind} level={effective.admin_level}",
            extra={"feature_id": sf.id, "layer": self.name},
        )

    def post_process(self, zoom: int, items: Sequence, merger: FeatureMerger) -> list:
        params = self.merge_params(zoom)
        return merger.merge_nearby_polygons(
            items, params.min_area, params.min_area, params.merge_distance, params.buffer
        )
