"""KML import: a composable pipeline.

Reads a KML document into features carrying an ``EditableFeature``
(type, title, colours, sizes, icon), ready to be shown and edited by the
drawing tool.

The pipeline is split into focused stages:
- **_reader**: lxml element tree → features with geometry and style
- **_feature_type**: explicit or guessed feature type
- **_styles**: text scale, icon style, icon size, fill colour
- **_icons**: icon URL grammar and icon catalog resolution
- **_deserialize**: feature → ``EditableFeature``

Graceful degradation: one bad feature never blocks the rest of a valid
document. Only document-level failures (not XML, not KML, empty)
raise.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mapviewer.importers.parse_kml._constants import (
    LEGACY_ICON_XML_SCALE_FACTOR,
    READER_DEFAULTS,
    ReaderDefaults,
)
from mapviewer.importers.parse_kml._deserialize import (
    geometry_to_geojson,
    get_editable_feature_from_kml_feature,
    get_kml_feature_coordinates,
)
from mapviewer.importers.parse_kml._feature_type import (
    FEATURE_TYPE_RULES,
    get_feature_type,
)
from mapviewer.importers.parse_kml._icons import (
    build_icon_url,
    build_legacy_color_url,
    build_legacy_set_url,
    generate_icon_from_style,
    get_icon,
    parse_icon_url,
)
from mapviewer.importers.parse_kml._reader import (
    EmptyKMLError,
    KmlParseError,
    parse_coordinates_text,
    read_features,
    read_name,
)
from mapviewer.importers.parse_kml._styles import (
    correct_legacy_icon_style,
    get_fill_color,
    get_icon_size,
    get_icon_style,
    get_text_color,
    get_text_scale,
)
from mapviewer.utils.geodesic import GeodesicGeometries
from mapviewer.utils.projection import WGS84
from mapviewer.utils.styles import feature_style_function

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from mapviewer.models.feature import Feature
    from mapviewer.models.icon import DrawingIconSet
    from mapviewer.utils.projection import CoordinateSystem, Extent

logger = logging.getLogger("mapviewer.importers.parse_kml")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "FEATURE_TYPE_RULES",
    "LEGACY_ICON_XML_SCALE_FACTOR",
    "READER_DEFAULTS",
    "EmptyKMLError",
    "KmlParseError",
    "ReaderDefaults",
    "build_icon_url",
    "build_legacy_color_url",
    "build_legacy_set_url",
    "correct_legacy_icon_style",
    "generate_icon_from_style",
    "geometry_to_geojson",
    "get_editable_feature_from_kml_feature",
    "get_feature_type",
    "get_features_extent",
    "get_fill_color",
    "get_icon",
    "get_icon_size",
    "get_icon_style",
    "get_kml_extent",
    "get_kml_feature_coordinates",
    "get_text_color",
    "get_text_scale",
    "parse_coordinates_text",
    "parse_icon_url",
    "parse_kml",
    "parse_kml_name",
]


def parse_kml(
    content: str | bytes,
    projection: CoordinateSystem = WGS84,
    icon_sets: Sequence[DrawingIconSet] | None = None,
) -> list[Feature]:
    """Parse a KML document into features carrying an ``EditableFeature``.

    Args:
        content: KML document (always WGS 84).
        projection: Working projection to read geometries into.
        icon_sets: Icon catalog used to resolve icons, ``None`` if not
            loaded yet (icons are then built from their URL).

    Returns:
        Every feature of the document. Features that could not be
        deserialized are returned without ``editable_feature``.

    Raises:
        KmlParseError: If the content is not valid KML.
        EmptyKMLError: If the document has no feature or an empty extent.
    """
    features = read_features(content, projection)
    if not features or get_features_extent(features) is None:
        raise EmptyKMLError()

    deserialized = 0
    for feature in features:
        editable_feature = get_editable_feature_from_kml_feature(feature, icon_sets)
        if editable_feature is None:
            continue
        deserialized += 1
        feature.editable_feature = editable_feature
        feature.style_function = feature_style_function
        if editable_feature.is_line_or_measure() and feature.geometry is not None:
            # lines are drawn along great circles, not straight on screen
            feature.geodesic = GeodesicGeometries(feature.geometry, projection)

    logger.info(
        "Parsed %d KML feature(s), %d editable, into %s",
        len(features),
        deserialized,
        projection.epsg,
    )
    return features


def parse_kml_name(content: str | bytes) -> str | None:
    """Return the KML document name, ``None`` if it has none."""
    return read_name(content)


def get_kml_extent(content: str | bytes) -> Extent | None:
    """Return the WGS 84 extent of a KML document, ``None`` if empty."""
    return get_features_extent(read_features(content, WGS84))


def get_features_extent(features: Iterable[Feature]) -> Extent | None:
    """Union the extents of *features*.

    Returns:
        ``(min_x, min_y, max_x, max_y)``, or ``None`` when there is
        nothing to zoom to (no feature, or only empty geometries).
    """
    bounds = [
        feature.geometry.bounds
        for feature in features
        if feature.geometry is not None and not feature.geometry.is_empty
    ]
    if not bounds:
        return None
    return (
        min(b[0] for b in bounds),
        min(b[1] for b in bounds),
        max(b[2] for b in bounds),
        max(b[3] for b in bounds),
    )
