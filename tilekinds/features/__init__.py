"""
Feature contracts shared with the reader and the tile encoder.

- SourceFeature / SimpleFeature: tagged input geometry
- FeatureCollector / OutputFeature: emitted geometry with attributes
"""

from .source import (
    SourceFeature,
    SimpleFeature,
    GeometryError,
    GeometryKinds,
    Measured,
    OsmRelation,
    RelationMember,
    POINT,
    LINE,
    POLYGON,
    feature_id,
    try_area,
    try_centroid,
)
from .collector import FeatureCollector, OutputFeature
from .names import set_osm_names

__all__ = [
    "SourceFeature",
    "SimpleFeature",
    "GeometryError",
    "GeometryKinds",
    "Measured",
    "OsmRelation",
    "RelationMember",
    "POINT",
    "LINE",
    "POLYGON",
    "feature_id",
    "try_area",
    "try_centroid",
    "FeatureCollector",
    "OutputFeature",
    "set_osm_names",
]
