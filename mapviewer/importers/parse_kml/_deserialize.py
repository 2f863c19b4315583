"""Deserialization of KML features into ``EditableFeature``.

Per feature: classify the type, normalize the style (text, icon, legacy
scale), resolve the icon against the catalog, pick the fill colour, and
extract coordinates and the GeoJSON geometry. A feature that cannot be
deserialized yields ``None``; its siblings are unaffected.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from mapviewer.core.exceptions import InvalidColorError
from mapviewer.importers.parse_kml._feature_type import get_feature_type
from mapviewer.importers.parse_kml._icons import get_icon, parse_icon_url
from mapviewer.importers.parse_kml._styles import (
    correct_legacy_icon_style,
    get_fill_color,
    get_icon_size,
    get_icon_style,
    get_text_color,
    get_text_scale,
)
from mapviewer.models.editable_feature import EditableFeature
from mapviewer.models.feature import Feature
from mapviewer.models.styling import get_text_size

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shapely.geometry.base import BaseGeometry

    from mapviewer.models.icon import DrawingIconSet, IconArgs

logger = logging.getLogger("mapviewer.importers.parse_kml")


def get_editable_feature_from_kml_feature(
    kml_feature: object,
    available_icon_sets: Sequence[DrawingIconSet] | None = None,
) -> EditableFeature | None:
    """Build the ``EditableFeature`` of a KML feature.

    Args:
        kml_feature: Feature read from the KML document.
        available_icon_sets: Icon catalog, ``None`` if not loaded yet.

    Returns:
        The editable feature, or ``None`` if *kml_feature* is not a
        feature with a geometry and a resolvable style.
    """
    if not isinstance(kml_feature, Feature) or kml_feature.geometry is None:
        logger.error("Cannot generate EditableFeature from KML feature %r", kml_feature)
        return None

    style = kml_feature.style
    if style is None:
        logger.error("Parsing error: could not get the style of feature %s", kml_feature.id)
        return None

    feature_type = get_feature_type(kml_feature)
    geometry_type = kml_feature.geometry_type

    text_size = get_text_size(get_text_scale(style))
    text_color = get_text_color(style)

    icon_style = get_icon_style(style)
    icon_args = _parse_icon_args(icon_style.src, kml_feature.id) if icon_style else None
    if icon_style is not None and icon_args is not None and icon_args.is_legacy:
        icon_style = correct_legacy_icon_style(icon_style)

    icon = get_icon(icon_args, icon_style, available_icon_sets)
    icon_size = get_icon_size(icon_style) if icon is not None else None

    return EditableFeature(
        id=kml_feature.id or f"drawing_feature_{uuid.uuid4().hex}",
        feature_type=feature_type,
        title=str(kml_feature.get("name", "")),
        description=str(kml_feature.get("description", "")),
        coordinates=get_kml_feature_coordinates(kml_feature),
        geometry=geometry_to_geojson(kml_feature.geometry),
        text_color=text_color,
        text_size=text_size,
        fill_color=get_fill_color(style, geometry_type, icon_args),
        icon=icon,
        icon_size=icon_size,
    )


def _parse_icon_args(url: str, feature_id: str | None) -> IconArgs | None:
    try:
        return parse_icon_url(url)
    except InvalidColorError as exc:
        logger.error("Invalid icon colour in %s (feature %s): %s", url, feature_id, exc)
        return None


def get_kml_feature_coordinates(kml_feature: Feature) -> list[Any]:
    """Return the feature's coordinates.

    For a polygon only the outer ring is returned: holes are dropped, as
    the drawing tool has no multi-polygon nor hole support.
    """
    if kml_feature.geometry is None:
        return []
    coordinates = geometry_to_geojson(kml_feature.geometry).get("coordinates", [])
    if kml_feature.geometry_type == "Polygon":
        return coordinates[0] if coordinates else []
    return coordinates


def geometry_to_geojson(geometry: BaseGeometry) -> dict[str, Any]:
    """Return a GeoJSON geometry object with list (not tuple) coordinates."""
    from shapely.geometry import mapping

    return _to_lists(mapping(geometry))  # type: ignore[no-any-return]


def _to_lists(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _to_lists(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_lists(item) for item in value]
    return value
