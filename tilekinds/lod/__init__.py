"""
Level of detail: zoom ranges, tolerances, buffers and merge parameters.
"""

from .policy import (
    LodSpec,
    ResolutionTier,
    resolution_tier,
    tier_zoom_range,
    reference_polygon_lod,
    osm_polygon_lod,
    polygon_min_pixel_size,
    area_ratio,
    name_min_zoom_from_area,
    label_min_zoom,
    client_min_zoom,
)
from .merge import MergeParams, FeatureMerger, params_for, params_table

__all__ = [
    "LodSpec",
    "ResolutionTier",
    "resolution_tier",
    "tier_zoom_range",
    "reference_polygon_lod",
    "osm_polygon_lod",
    "polygon_min_pixel_size",
    "area_ratio",
    "name_min_zoom_from_area",
    "label_min_zoom",
    "client_min_zoom",
    "MergeParams",
    "FeatureMerger",
    "params_for",
    "params_table",
]
