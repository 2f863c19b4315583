"""Renderer styling callbacks attached to imported features.

The renderer itself is outside this package; these callbacks translate a
feature into a plain style description (colours as ``#RRGGBB``, scales,
icon URL) that the renderer consumes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mapviewer.models.styling import RED

if TYPE_CHECKING:
    from mapviewer.models.feature import Feature

GPX_STROKE_COLOR = RED.fill
GPX_STROKE_WIDTH = 1.5
GPX_POINT_RADIUS = 6


def feature_style_function(feature: Feature, resolution: float | None = None) -> dict[str, Any]:
    """Describe how to draw a feature carrying an ``EditableFeature``."""
    editable = feature.editable_feature
    if editable is None:
        return {}

    style: dict[str, Any] = {
        "fill_color": editable.fill_color.fill,
        "stroke_color": editable.fill_color.fill,
        "text": editable.title or None,
        "text_color": editable.text_color.fill,
        "text_border_color": editable.text_color.border,
        "text_scale": editable.text_size.text_scale,
    }
    if editable.icon is not None and editable.icon_size is not None:
        style["icon_url"] = editable.icon.image_url
        style["icon_anchor"] = editable.icon.anchor
        style["icon_scale"] = editable.icon_size.icon_scale
    if feature.geodesic is not None:
        style["geometry"] = feature.geodesic.geodesic_geometry
    return style


def gpx_style(feature: Feature, resolution: float | None = None) -> dict[str, Any]:
    """Fixed track style for GPX features."""
    style: dict[str, Any] = {
        "stroke_color": GPX_STROKE_COLOR,
        "stroke_width": GPX_STROKE_WIDTH,
    }
    if feature.geometry_type == "Point":
        style["point_radius"] = GPX_POINT_RADIUS
        style["fill_color"] = GPX_STROKE_COLOR
    return style
