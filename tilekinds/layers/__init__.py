"""
Thematic layer drivers.
"""

from .base import Layer
from .admin_areas import AdminAreas, NE_ADMIN_LAYERS
from .water import Water, NE_WATER_INDEX, OSM_WATER_INDEX
from .earth import Earth

__all__ = [
    "Layer",
    "AdminAreas",
    "NE_ADMIN_LAYERS",
    "Water",
    "NE_WATER_INDEX",
    "OSM_WATER_INDEX",
    "Earth",
]
