"""
Per-zoom merge parameters.

Merging and simplifying features inside a tile happens in the external tile
assembler. Layers only decide which merge to run and with which parameters,
taken from the `MergePolicy` tables in the settings.
"""

from __future__ import annotations

from typing import NamedTuple, Protocol, Sequence

from ..core.config import MergePolicy


class MergeParams(NamedTuple):
    pixel_tolerance: float
    min_area: float
    buffer: float
    merge_distance: float
    simplify_tolerance: float


def params_for(policy: MergePolicy, zoom: int) -> MergeParams:
    """Resolve every banded value of a policy at `zoom`."""
    return MergeParams(
        pixel_tolerance=policy.pixel_tolerance.at(zoom),
        min_area=policy.min_area.at(zoom),
        buffer=policy.buffer.at(zoom),
        merge_distance=policy.merge_distance.at(zoom),
        simplify_tolerance=policy.simplify_tolerance.at(zoom),
    )


def params_table(policy: MergePolicy, max_zoom: int) -> list[tuple[int, MergeParams]]:
    return [(zoom, params_for(policy, zoom)) for zoom in range(max_zoom + 1)]


class FeatureMerger(Protocol):
    """Merge operations provided by the tile assembler."""

    def merge_line_strings(
        self,
        items: Sequence,
        min_length: float,
        tolerance: float,
        buffer: float,
    ) -> list: ...

    def merge_nearby_polygons(
        self,
        items: Sequence,
        min_area: float,
        min_hole_area: float,
        min_dist: float,
        buffer: float,
    ) -> list: ...

    def merge_overlapping_polygons(self, items: Sequence, min_area: float) -> list: ...
