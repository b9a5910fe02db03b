"""
Coordinate transformation utilities.

Handles conversion between:
- WGS84 (EPSG:4326) - lon/lat, used by GeoJSON inputs
- Web Mercator (EPSG:3857) - meters, the tile projection
- World coordinates - Web Mercator scaled to the unit square, with y growing
  southward. Source features carry their geometry in this space, so areas are
  fractions of the whole world at zoom 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import shapely
from pyproj import Transformer
from shapely.geometry.base import BaseGeometry


# Equatorial circumference of the WGS84 ellipsoid (2 * pi * 6378137)
WORLD_CIRCUMFERENCE_METERS = 2 * math.pi * 6_378_137.0

TILE_SIZE_PIXELS = 256


def meters_per_pixel_at_equator(zoom: int) -> float:
    """Ground resolution of one 256px-tile pixel at the equator."""
    return WORLD_CIRCUMFERENCE_METERS / math.pow(2, zoom + 8)


def meters_to_pixel_at_equator(zoom: int, meters: float) -> float:
    """Convert a ground distance at the equator to pixels at `zoom`."""
    return meters / meters_per_pixel_at_equator(zoom)


# Area of a 70,000 m² square expressed in world units (unit square at zoom 0)
WORLD_AREA_FOR_70K_SQUARE_METERS = math.pow(
    meters_to_pixel_at_equator(0, math.sqrt(70_000)) / TILE_SIZE_PIXELS, 2
)


@dataclass
class BoundingBox:
    """Bounding box in any coordinate system."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def center(self) -> tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Return as (min_x, min_y, max_x, max_y)."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)


class CoordinateTransformer:
    """
    Transform geometries between WGS84 and world coordinates.

    Usage:
        transformer = CoordinateTransformer()
        world_geom = transformer.lonlat_to_world(shape(geojson_geometry))
    """

    WGS84 = "EPSG:4326"
    WEB_MERCATOR = "EPSG:3857"

    # Web Mercator latitude limit
    MAX_LATITUDE = 85.05112878

    def __init__(self):
        self._wgs84_to_mercator = Transformer.from_crs(
            self.WGS84, self.WEB_MERCATOR, always_xy=True
        )
        self._mercator_to_wgs84 = Transformer.from_crs(
            self.WEB_MERCATOR, self.WGS84, always_xy=True
        )

    def lonlat_to_world_xy(self, lon: float, lat: float) -> tuple[float, float]:
        """
        Convert a single lon/lat to world coordinates.

        Latitudes beyond the Web Mercator limit are clamped.
        """
        lat = max(-self.MAX_LATITUDE, min(self.MAX_LATITUDE, lat))
        x, y = self._wgs84_to_mercator.transform(lon, lat)
        half = WORLD_CIRCUMFERENCE_METERS / 2
        return (
            (x + half) / WORLD_CIRCUMFERENCE_METERS,
            (half - y) / WORLD_CIRCUMFERENCE_METERS,
        )

    def world_xy_to_lonlat(self, x: float, y: float) -> tuple[float, float]:
        """Convert world coordinates back to lon/lat."""
        half = WORLD_CIRCUMFERENCE_METERS / 2
        mx = x * WORLD_CIRCUMFERENCE_METERS - half
        my = half - y * WORLD_CIRCUMFERENCE_METERS
        return self._mercator_to_wgs84.transform(mx, my)

    def lonlat_to_world(self, geometry: BaseGeometry) -> BaseGeometry:
        """
        Project a shapely geometry from WGS84 into world coordinates.

        Args:
            geometry: Geometry with (lon, lat) coordinates

        Returns:
            Geometry of the same type in world coordinates
        """
        half = WORLD_CIRCUMFERENCE_METERS / 2

        def _project(coords: np.ndarray) -> np.ndarray:
            lats = np.clip(coords[:, 1], -self.MAX_LATITUDE, self.MAX_LATITUDE)
            x, y = self._wgs84_to_mercator.transform(coords[:, 0], lats)
            return np.column_stack((
                (np.asarray(x) + half) / WORLD_CIRCUMFERENCE_METERS,
                (half - np.asarray(y)) / WORLD_CIRCUMFERENCE_METERS,
            ))

        return shapely.transform(geometry, _project)

    def world_bounds(self, geometry: BaseGeometry) -> BoundingBox:
        """Bounding box of a world-coordinate geometry."""
        min_x, min_y, max_x, max_y = geometry.bounds
        return BoundingBox(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)


_default_transformer: CoordinateTransformer | None = None


def get_transformer() -> CoordinateTransformer:
    """Shared transformer instance (pyproj transformers are costly to build)."""
    global _default_transformer
    if _default_transformer is None:
        _default_transformer = CoordinateTransformer()
    return _default_transformer
