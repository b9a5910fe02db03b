"""
tilekinds - classify OSM and Natural Earth features into basemap kinds.

Derives kind, kind_detail, zoom range, tolerance, buffer and sort rank for
admin areas, water and earth layers.
"""

from .profile import Profile

__version__ = "0.1.0"

__all__ = ["Profile", "__version__"]
