"""Name attributes copied from OSM tags onto output features."""

from typing import Optional

from .collector import OutputFeature
from .source import SourceFeature


NAME_KEY = "name"
LOCALIZED_PREFIX = "name:"


def set_osm_names(
    feature: OutputFeature,
    sf: SourceFeature,
    min_zoom: int = 0,
    name_override: Optional[str] = None,
) -> OutputFeature:
    """
    Copy `name` and every `name:<lang>` tag onto the output feature.

    Localized names are copied in sorted key order so output does not depend
    on how the reader stored the tags.

    Args:
        feature: Output feature to annotate
        sf: Source feature providing the tags
        min_zoom: Zoom from which the names are emitted
        name_override: Replaces the `name` tag value when given
    """
    name = name_override if name_override is not None else sf.get_string(NAME_KEY)
    feature.set_attr_with_min_zoom(NAME_KEY, name, min_zoom)

    for key in sorted(k for k in sf.tags if k.startswith(LOCALIZED_PREFIX)):
        feature.set_attr_with_min_zoom(key, sf.get_string(key), min_zoom)
    return feature
