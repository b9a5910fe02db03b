"""
Pytest configuration and fixtures for tilekinds tests.

Provides reusable test fixtures for:
- Source feature geometries (world coordinates)
- Profile and collector instances
- Admin relation memberships
- A recording merger standing in for the tile assembler
"""

import pytest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from shapely.geometry import LineString, Point, Polygon, box

from tilekinds.core.config import Settings
from tilekinds.features import FeatureCollector, OsmRelation, RelationMember, SimpleFeature
from tilekinds.profile import Profile


# =============================================================================
# GEOMETRY FIXTURES
# =============================================================================

@pytest.fixture
def unit_square() -> Polygon:
    """The polygon used by most layer tests (whole world at zoom 0)."""
    return Polygon([(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)])


@pytest.fixture
def small_square() -> Polygon:
    """A tiny polygon, well below any label area threshold."""
    return box(0.5, 0.5, 0.5 + 1e-9, 0.5 + 1e-9)


@pytest.fixture
def river_line() -> LineString:
    return LineString([(0.1, 0.1), (0.2, 0.2), (0.3, 0.25)])


@pytest.fixture
def sea_point() -> Point:
    return Point(0.3, 0.4)


# =============================================================================
# PROFILE FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from the environment's .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def profile(settings) -> Profile:
    return Profile(settings)


@pytest.fixture
def collector(settings) -> FeatureCollector:
    return FeatureCollector(settings)


# =============================================================================
# FEATURE BUILDERS
# =============================================================================

@pytest.fixture
def osm_admin_feature(profile, unit_square):
    """
    Build an OSM polygon that belongs to the given boundary relations.

    Usage:
        sf = osm_admin_feature({"name": "X"}, {"boundary": "administrative", "admin_level": "2"})
    """

    def _build(tags: dict, *relation_tags: dict, geometry=None) -> SimpleFeature:
        members = []
        for rel_id, rtags in enumerate(relation_tags, start=1):
            for record in profile.preprocess_osm_relation(OsmRelation(rel_id, rtags)):
                members.append(RelationMember("", record))
        return SimpleFeature(
            geometry if geometry is not None else unit_square,
            tags,
            source="osm",
            id=123,
            relations=members,
            osm_type="way",
        )

    return _build


# =============================================================================
# MERGE FIXTURES
# =============================================================================

class RecordingMerger:
    """Records merge calls and returns the items unchanged."""

    def __init__(self):
        self.calls = []

    def merge_line_strings(self, items, min_length, tolerance, buffer):
        self.calls.append(("lines", min_length, tolerance, buffer))
        return list(items)

    def merge_nearby_polygons(self, items, min_area, min_hole_area, min_dist, buffer):
        self.calls.append(("nearby", min_area, min_hole_area, min_dist, buffer))
        return list(items)

    def merge_overlapping_polygons(self, items, min_area):
        self.calls.append(("overlapping", min_area))
        return list(items)


@pytest.fixture
def merger() -> RecordingMerger:
    return RecordingMerger()
