"""Core configuration and coordinate utilities."""

from .config import Settings, MergePolicy, BandedValue, ZoomBand, settings
from .coordinates import (
    CoordinateTransformer,
    BoundingBox,
    WORLD_AREA_FOR_70K_SQUARE_METERS,
    meters_to_pixel_at_equator,
    get_transformer,
)

__all__ = [
    "Settings",
    "MergePolicy",
    "BandedValue",
    "ZoomBand",
    "settings",
    "CoordinateTransformer",
    "BoundingBox",
    "WORLD_AREA_FOR_70K_SQUARE_METERS",
    "meters_to_pixel_at_equator",
    "get_transformer",
]
