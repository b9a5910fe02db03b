"""
Output feature builder.

Tile encoding is external; layers describe what to emit through this builder
and the encoder consumes the collected `OutputFeature`s.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from ..core.config import Settings, settings as default_settings


@dataclass
class OutputFeature:
    """One geometry to emit, with attributes and level-of-detail settings."""

    layer: str
    geometry_type: str  # 'polygon', 'line', 'point', 'point_on_surface'
    min_zoom: int = 0
    max_zoom: int = 15
    pixel_tolerance: float = 0.1
    buffer_pixels: float = 4.0
    min_pixel_size: float = 1.0
    sort_key: int = 0
    id: Optional[int] = None
    # attribute -> (value, min zoom at which the attribute is visible)
    attrs: dict[str, tuple[Any, int]] = field(default_factory=dict)

    def set_id(self, feature_id: int) -> "OutputFeature":
        self.id = feature_id
        return self

    def set_attr(self, key: str, value: Any) -> "OutputFeature":
        """Set an attribute; None values are not emitted."""
        return self.set_attr_with_min_zoom(key, value, 0)

    def set_attr_with_min_zoom(self, key: str, value: Any, min_zoom: int) -> "OutputFeature":
        if value is None:
            self.attrs.pop(key, None)
        else:
            self.attrs[key] = (value, min_zoom)
        return self

    def set_zoom_range(self, min_zoom: int, max_zoom: int) -> "OutputFeature":
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        return self

    def set_min_zoom(self, min_zoom: int) -> "OutputFeature":
        self.min_zoom = min_zoom
        return self

    def set_max_zoom(self, max_zoom: int) -> "OutputFeature":
        self.max_zoom = max_zoom
        return self

    def set_pixel_tolerance(self, tolerance: float) -> "OutputFeature":
        self.pixel_tolerance = tolerance
        return self

    def set_buffer_pixels(self, buffer: float) -> "OutputFeature":
        self.buffer_pixels = buffer
        return self

    def set_min_pixel_size(self, size: float) -> "OutputFeature":
        self.min_pixel_size = size
        return self

    def set_sort_key(self, sort_key: int) -> "OutputFeature":
        self.sort_key = sort_key
        return self

    @property
    def attributes(self) -> dict[str, Any]:
        """All attribute values, regardless of their min zoom."""
        return {key: value for key, (value, _) in self.attrs.items()}

    def visible_at(self, zoom: int) -> bool:
        return self.min_zoom <= zoom <= self.max_zoom

    def attrs_at(self, zoom: int) -> dict[str, Any]:
        """Attributes emitted at `zoom`, or {} if the feature is not visible."""
        if not self.visible_at(zoom):
            return {}
        return {key: value for key, (value, min_zoom) in self.attrs.items() if zoom >= min_zoom}

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer": self.layer,
            "geometry_type": self.geometry_type,
            "id": self.id,
            "min_zoom": self.min_zoom,
            "max_zoom": self.max_zoom,
            "pixel_tolerance": self.pixel_tolerance,
            "buffer_pixels": self.buffer_pixels,
            "min_pixel_size": self.min_pixel_size,
            "sort_key": self.sort_key,
            "attributes": self.attributes,
        }


class FeatureCollector:
    """
    Collects the output features produced for a single source feature.

    Usage:
        collector = FeatureCollector()
        collector.polygon("water").set_attr("kind", "lake").set_min_zoom(6)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.features: list[OutputFeature] = []

    def _add(self, layer: str, geometry_type: str) -> OutputFeature:
        feature = OutputFeature(
            layer=layer,
            geometry_type=geometry_type,
            max_zoom=self.settings.max_zoom,
        )
        self.features.append(feature)
        return feature

    def polygon(self, layer: str) -> OutputFeature:
        return self._add(layer, "polygon")

    def line(self, layer: str) -> OutputFeature:
        return self._add(layer, "line")

    def point(self, layer: str) -> OutputFeature:
        return self._add(layer, "point")

    def point_on_surface(self, layer: str) -> OutputFeature:
        return self._add(layer, "point_on_surface")

    def __iter__(self) -> Iterator[OutputFeature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def in_layer(self, layer: str) -> list[OutputFeature]:
        return [f for f in self.features if f.layer == layer]
