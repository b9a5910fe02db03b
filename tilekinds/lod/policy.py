"""
Level-of-detail policy.

Derives zoom range, simplification tolerance, buffer and minimum pixel size
from a feature's classification and, for labels, from its area.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.config import Settings, settings as default_settings
from ..core.coordinates import WORLD_AREA_FOR_70K_SQUARE_METERS
from ..features.collector import OutputFeature
from ..features.source import SourceFeature, feature_id, try_area

logger = logging.getLogger(__name__)


# Zoom range scanned for area-based label placement
LABEL_SCAN_MIN_ZOOM = 6
LABEL_SCAN_MAX_ZOOM = 14

# Label zoom when the feature is too small for any scanned zoom
DEFAULT_LABEL_MIN_ZOOM = 15

RIVER_KINDS = ("river",)


class ResolutionTier(str, Enum):
    COARSE = "coarse"
    FINE = "fine"


@dataclass(frozen=True)
class LodSpec:
    """Derived level-of-detail for one output feature."""

    min_zoom: int
    max_zoom: Optional[int] = None
    pixel_tolerance: Optional[float] = None
    buffer_pixels: Optional[float] = None
    min_pixel_size: Optional[float] = None
    sort_rank: Optional[int] = None

    def apply(self, feature: OutputFeature) -> OutputFeature:
        """Write these settings onto an output feature; unset fields keep defaults."""
        feature.set_min_zoom(self.min_zoom)
        if self.max_zoom is not None:
            feature.set_max_zoom(self.max_zoom)
        if self.pixel_tolerance is not None:
            feature.set_pixel_tolerance(self.pixel_tolerance)
        if self.buffer_pixels is not None:
            feature.set_buffer_pixels(self.buffer_pixels)
        if self.min_pixel_size is not None:
            feature.set_min_pixel_size(self.min_pixel_size)
        if self.sort_rank is not None:
            feature.set_attr("sort_rank", self.sort_rank)
        return feature


# =============================================================================
# REFERENCE DATASET (small scale)
# =============================================================================


def resolution_tier(source_layer: str, settings: Settings = default_settings) -> ResolutionTier:
    """Coarse when the layer name carries a coarse marker (e.g. `_50m_`)."""
    if any(marker in source_layer for marker in settings.coarse_layer_markers):
        return ResolutionTier.COARSE
    return ResolutionTier.FINE


def tier_zoom_range(
    tier: ResolutionTier,
    explicit_min_zoom: Optional[int] = None,
    settings: Settings = default_settings,
) -> tuple[int, int]:
    """
    Zoom range for a reference-dataset feature.

    An explicit min zoom raises the tier floor but never past the tier max.
    """
    if tier is ResolutionTier.COARSE:
        tier_min, tier_max = settings.coarse_zoom_range
    else:
        tier_min, tier_max = settings.fine_zoom_range
    min_zoom = tier_min if explicit_min_zoom is None else max(tier_min, explicit_min_zoom)
    return min(min_zoom, tier_max), tier_max


def reference_polygon_lod(
    source_layer: str,
    sort_rank: int,
    explicit_min_zoom: Optional[int] = None,
    buffer_pixels: float = 8,
    settings: Settings = default_settings,
) -> LodSpec:
    min_zoom, max_zoom = tier_zoom_range(
        resolution_tier(source_layer, settings), explicit_min_zoom, settings
    )
    return LodSpec(
        min_zoom=min_zoom,
        max_zoom=max_zoom,
        pixel_tolerance=settings.pixel_tolerance,
        buffer_pixels=buffer_pixels,
        min_pixel_size=settings.min_pixel_size,
        sort_rank=sort_rank,
    )


# =============================================================================
# OSM POLYGONS
# =============================================================================


def polygon_min_pixel_size(kind: str, settings: Settings = default_settings) -> float:
    """Rivers are never area-filtered."""
    if kind in RIVER_KINDS:
        return 0.0
    return settings.min_pixel_size


def osm_polygon_lod(
    theme_min_zoom: int,
    kind: str,
    sort_rank: Optional[int] = None,
    min_pixel_size: Optional[float] = None,
    settings: Settings = default_settings,
) -> LodSpec:
    return LodSpec(
        min_zoom=theme_min_zoom,
        pixel_tolerance=settings.pixel_tolerance,
        buffer_pixels=settings.polygon_buffer_pixels,
        min_pixel_size=(
            polygon_min_pixel_size(kind, settings) if min_pixel_size is None else min_pixel_size
        ),
        sort_rank=sort_rank,
    )


# =============================================================================
# LABELS
# =============================================================================


def area_ratio(area: float) -> float:
    """Feature area as a multiple of 70,000 m² (both in world units)."""
    return area / WORLD_AREA_FOR_70K_SQUARE_METERS


def name_min_zoom_from_area(ratio: float) -> int:
    """
    First zoom (scanning 6..14 upward) at which the feature is large enough
    for a point label: ratio > 4^(15 - zoom).
    """
    for zoom in range(LABEL_SCAN_MIN_ZOOM, LABEL_SCAN_MAX_ZOOM + 1):
        if ratio > math.pow(4.0, 15.0 - zoom):
            return zoom
    return DEFAULT_LABEL_MIN_ZOOM


def label_min_zoom(sf: SourceFeature, explicit_min_zoom: Optional[int] = None) -> int:
    """
    Label zoom for a polygon feature.

    A rule-provided min zoom wins. Otherwise the zoom comes from the area;
    if the area cannot be computed the feature is treated as having none.
    """
    measured = try_area(sf)
    if not measured.ok:
        logger.warning(
            f"Area calculation failed ({measured.error.kind}): {measured.error}",
            extra={"feature_id": feature_id(sf)},
        )
    computed = name_min_zoom_from_area(area_ratio(measured.value_or(0.0)))
    return computed if explicit_min_zoom is None else explicit_min_zoom


def client_min_zoom(min_zoom: int) -> int:
    """
    Value of the `min_zoom` attribute for a gate zoom.

    Clients work with 512px tiles, one level above the 256px logical zoom
    used for the gate, and their label collision depends on this offset.
    """
    return min_zoom + 1
