"""
Source feature abstraction.

The reader that decodes OSM and Natural Earth data is an external
collaborator; this module pins the contract the classification engine relies
on (`SourceFeature`) and provides `SimpleFeature`, a shapely-backed
implementation used by the CLI, tests and benchmarks.

Geometry is expected in world coordinates (Web Mercator scaled to the unit
square, y growing southward), see `tilekinds.core.coordinates`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Optional, Protocol, Sequence, TypeVar

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from ..core.coordinates import get_transformer
from ..utils.validation import TilekindsError, clean_tag_value


# =============================================================================
# GEOMETRY ERRORS
# =============================================================================


class GeometryError(TilekindsError):
    """Raised when area or centroid cannot be computed for a feature."""

    MISSING = "missing"
    EMPTY = "empty"
    NOT_POLYGONAL = "not_polygonal"
    INVALID = "invalid"

    def __init__(self, message: str, kind: str = INVALID):
        super().__init__(message)
        self.kind = kind


T = TypeVar("T")


@dataclass(frozen=True)
class Measured(Generic[T]):
    """Outcome of a fallible geometry computation: a value or the error."""

    value: Optional[T] = None
    error: Optional[GeometryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.error is None else default


@dataclass(frozen=True)
class GeometryKinds:
    """Which output geometries a source feature can produce."""

    point: bool = False
    line: bool = False
    polygon: bool = False

    @classmethod
    def of(cls, geometry: Optional[BaseGeometry]) -> "GeometryKinds":
        if geometry is None:
            return cls()
        geom_type = geometry.geom_type
        return cls(
            point=geom_type in ("Point", "MultiPoint"),
            line=geom_type in ("LineString", "LinearRing", "MultiLineString"),
            polygon=geom_type in ("Polygon", "MultiPolygon"),
        )


POINT = GeometryKinds(point=True)
LINE = GeometryKinds(line=True)
POLYGON = GeometryKinds(polygon=True)


# =============================================================================
# RELATIONS
# =============================================================================


@dataclass(frozen=True)
class OsmRelation:
    """An OSM relation as seen by relation preprocessors."""

    id: int
    tags: Mapping[str, Any] = field(default_factory=dict)

    def get_string(self, key: str) -> Optional[str]:
        return clean_tag_value(self.tags.get(key))

    def has_tag(self, key: str, value: str) -> bool:
        return self.get_string(key) == value


R = TypeVar("R")


@dataclass(frozen=True)
class RelationMember(Generic[R]):
    """Membership of a feature in a preprocessed relation."""

    role: str
    relation: R


# =============================================================================
# SOURCE FEATURE CONTRACT
# =============================================================================


class SourceFeature(Protocol):
    """What the engine needs from a reader-provided feature."""

    source: str
    source_layer: Optional[str]
    id: int

    @property
    def tags(self) -> Mapping[str, Any]: ...

    def get_string(self, key: str) -> Optional[str]: ...

    def has_tag(self, key: str, *values: str) -> bool: ...

    def is_point(self) -> bool: ...

    def can_be_line(self) -> bool: ...

    def can_be_polygon(self) -> bool: ...

    def area(self) -> float: ...

    def centroid(self) -> Point: ...

    def relation_info(self, record_type: type) -> list: ...


class SimpleFeature:
    """
    In-memory source feature backed by a shapely geometry.

    Usage:
        sf = SimpleFeature(
            Polygon([(0, 0), (0, 1), (1, 1), (1, 0)]),
            {"name": "Test Country", "iso_a2": "TC"},
            source="ne",
            source_layer="ne_50m_admin_0_countries",
            id=123,
        )
    """

    def __init__(
        self,
        geometry: Optional[BaseGeometry],
        tags: Optional[Mapping[str, Any]] = None,
        source: str = "osm",
        source_layer: Optional[str] = None,
        id: int = 0,
        relations: Optional[Sequence[RelationMember]] = None,
        osm_type: Optional[str] = None,
    ):
        self.geometry = geometry
        self._tags = dict(tags or {})
        self.source = source
        self.source_layer = source_layer
        self.id = id
        self.relations = list(relations or [])
        self.osm_type = osm_type
        self._kinds = GeometryKinds.of(geometry)

    @classmethod
    def from_lonlat(
        cls,
        geometry: BaseGeometry,
        tags: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> "SimpleFeature":
        """Create a feature from a WGS84 geometry, projecting to world coordinates."""
        return cls(get_transformer().lonlat_to_world(geometry), tags, **kwargs)

    def __repr__(self) -> str:
        return (
            f"SimpleFeature(id={self.id}, source={self.source!r}, "
            f"source_layer={self.source_layer!r}, kinds={self._kinds})"
        )

    # -- tags -----------------------------------------------------------------

    @property
    def tags(self) -> Mapping[str, Any]:
        return self._tags

    def get_string(self, key: str) -> Optional[str]:
        """Tag value, or None when absent, empty or a sentinel."""
        return clean_tag_value(self._tags.get(key))

    def has_tag(self, key: str, *values: str) -> bool:
        """True if the tag has a value (and, when given, one of `values`)."""
        value = self.get_string(key)
        if value is None:
            return False
        return not values or value in values

    # -- geometry -------------------------------------------------------------

    @property
    def geometry_kinds(self) -> GeometryKinds:
        return self._kinds

    def is_point(self) -> bool:
        return self._kinds.point

    def can_be_line(self) -> bool:
        return self._kinds.line

    def can_be_polygon(self) -> bool:
        return self._kinds.polygon

    def _checked_geometry(self) -> BaseGeometry:
        if self.geometry is None:
            raise GeometryError(f"Feature {self.id} has no geometry", GeometryError.MISSING)
        if self.geometry.is_empty:
            raise GeometryError(f"Feature {self.id} has an empty geometry", GeometryError.EMPTY)
        return self.geometry

    def area(self) -> float:
        """Polygon area in world units."""
        geometry = self._checked_geometry()
        if not self._kinds.polygon:
            raise GeometryError(
                f"Cannot compute area of {geometry.geom_type}", GeometryError.NOT_POLYGONAL
            )
        if not geometry.is_valid:
            raise GeometryError(f"Feature {self.id} has an invalid polygon", GeometryError.INVALID)
        return geometry.area

    def centroid(self) -> Point:
        return self._checked_geometry().centroid

    # -- relations ------------------------------------------------------------

    def relation_info(self, record_type: type) -> list[RelationMember]:
        """Memberships whose preprocessed relation record is a `record_type`."""
        return [m for m in self.relations if isinstance(m.relation, record_type)]


def try_area(sf: SourceFeature) -> Measured[float]:
    """Area of the feature, capturing geometry failures instead of raising."""
    try:
        return Measured(value=sf.area())
    except GeometryError as e:
        return Measured(error=e)


def try_centroid(sf: SourceFeature) -> Measured[Point]:
    """Centroid of the feature, capturing geometry failures instead of raising."""
    try:
        return Measured(value=sf.centroid())
    except GeometryError as e:
        return Measured(error=e)


# OSM element type codes packed into output feature ids
OSM_TYPE_CODES = {"node": 0x1, "way": 0x2, "relation": 0x3}


def feature_id(sf: SourceFeature) -> int:
    """
    Stable output id for a source feature.

    OSM ids are only unique per element type, so the type is packed into the
    bits above the id.
    """
    osm_type = getattr(sf, "osm_type", None)
    if sf.source == "osm" and osm_type in OSM_TYPE_CODES:
        return (OSM_TYPE_CODES[osm_type] << 44) | sf.id
    return sf.id
