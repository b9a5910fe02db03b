"""Common layer plumbing."""

from __future__ import annotations

from typing import Optional, Sequence

from ..core.config import MergePolicy, Settings, settings as default_settings
from ..lod.merge import FeatureMerger, MergeParams, params_for


class Layer:
    """
    A thematic output layer.

    Subclasses implement the `process_*` hooks for the sources they handle
    and `post_process` for the per-zoom merge.
    """

    name: str = ""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    @property
    def merge_policy(self) -> MergePolicy:
        raise NotImplementedError

    def merge_params(self, zoom: int) -> MergeParams:
        return params_for(self.merge_policy, zoom)

    def post_process(self, zoom: int, items: Sequence, merger: FeatureMerger) -> list:
        return list(items)
