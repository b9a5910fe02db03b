"""
Configuration management for tilekinds.

Level-of-detail constants and the per-zoom merge policy tables live here so
they can be tuned without touching layer code.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ZoomBand(BaseModel):
    """A value applying to every zoom up to and including `max_zoom`."""

    model_config = {"frozen": True}

    max_zoom: int
    value: float


class BandedValue(BaseModel):
    """
    Zoom-tiered value.

    Bands are checked in the order given; the first band whose `max_zoom`
    covers the zoom wins, otherwise `default` applies.
    """

    model_config = {"frozen": True}

    bands: tuple[ZoomBand, ...] = ()
    default: float

    def at(self, zoom: int) -> float:
        for band in self.bands:
            if zoom <= band.max_zoom:
                return band.value
        return self.default


def constant(value: float) -> BandedValue:
    return BandedValue(default=value)


def banded(default: float, *bands: tuple[int, float]) -> BandedValue:
    """Build a BandedValue from (max_zoom, value) pairs."""
    return BandedValue(
        bands=tuple(ZoomBand(max_zoom=z, value=v) for z, v in bands),
        default=default,
    )


class MergePolicy(BaseModel):
    """Per-zoom parameters handed to the external merge stage."""

    model_config = {"frozen": True}

    pixel_tolerance: BandedValue = Field(default_factory=lambda: constant(0.0))
    min_area: BandedValue = Field(default_factory=lambda: constant(0.0))
    buffer: BandedValue = Field(default_factory=lambda: constant(0.0))
    merge_distance: BandedValue = Field(default_factory=lambda: constant(0.0))
    simplify_tolerance: BandedValue = Field(default_factory=lambda: constant(0.0))


# Shared level-of-detail constants
DEFAULT_PIXEL_TOLERANCE = 0.2
DEFAULT_MIN_AREA = 1.0
DEFAULT_BUFFER = 0.5


def default_admin_merge() -> MergePolicy:
    return MergePolicy(
        min_area=constant(0.0),
        buffer=constant(12.0),
        merge_distance=banded(0.4, (5, 0.2)),
    )


def default_water_merge(
    pixel_tolerance: float = DEFAULT_PIXEL_TOLERANCE,
    min_area: float = DEFAULT_MIN_AREA,
    buffer: float = DEFAULT_BUFFER,
) -> MergePolicy:
    """Water merge table scaled from the shared level-of-detail constants."""
    return MergePolicy(
        pixel_tolerance=banded(pixel_tolerance, (8, 0.1)),
        min_area=banded(min_area, (8, min_area * 0.5)),
        buffer=banded(buffer, (6, buffer * 2), (8, buffer * 1.5)),
        merge_distance=banded(0.5, (6, 0.25)),
        simplify_tolerance=banded(2.0, (6, 1.0)),
    )


def default_earth_merge(min_area: float = DEFAULT_MIN_AREA) -> MergePolicy:
    return MergePolicy(min_area=constant(min_area))


class Settings(BaseSettings):
    """
    Application settings.

    Can be configured via environment variables (TILEKINDS_*) or .env file.
    Merge policies accept JSON, e.g.
    TILEKINDS_ADMIN_MERGE='{"buffer": {"default": 8}}'. Unless set explicitly,
    the water and earth tables are scaled from the shared level-of-detail
    fields above them.
    """

    model_config = SettingsConfigDict(
        env_prefix="TILEKINDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Zoom limits
    max_zoom: int = Field(default=15, description="Highest zoom a feature can be emitted at")

    # Level of detail
    pixel_tolerance: float = Field(default=DEFAULT_PIXEL_TOLERANCE, description="Shared simplification tolerance (px)")
    min_area: float = Field(default=DEFAULT_MIN_AREA, description="Shared minimum polygon area (px²)")
    buffer: float = Field(default=DEFAULT_BUFFER, description="Shared merge buffer (px)")
    min_pixel_size: float = Field(default=1.0, description="Polygons smaller than this are dropped")
    polygon_buffer_pixels: float = Field(default=8.0, description="Tile buffer for OSM polygons")

    # Reference dataset resolution tiers
    coarse_layer_markers: tuple[str, ...] = Field(
        default=("_50m_",), description="Source-layer substrings marking the coarse tier"
    )
    coarse_zoom_range: tuple[int, int] = (0, 3)
    fine_zoom_range: tuple[int, int] = (4, 5)

    # Per-zoom merge tables
    admin_merge: MergePolicy = Field(default_factory=default_admin_merge)
    water_merge: MergePolicy = Field(default_factory=default_water_merge)
    earth_merge: MergePolicy = Field(default_factory=default_earth_merge)

    @model_validator(mode="after")
    def derive_merge_tables(self) -> "Settings":
        # Tables not set explicitly follow the shared constants
        if "water_merge" not in self.model_fields_set:
            self.water_merge = default_water_merge(self.pixel_tolerance, self.min_area, self.buffer)
        if "earth_merge" not in self.model_fields_set:
            self.earth_merge = default_earth_merge(self.min_area)
        return self


# Global settings instance
settings = Settings()
