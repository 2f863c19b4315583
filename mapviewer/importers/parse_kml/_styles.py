"""Style normalization: text scale, icon style, icon size, colours.

Works on the immutable ``KmlStyle`` records built by the reader. The
reader fills in a default label scale and a placeholder pushpin icon
when a document omits them (``READER_DEFAULTS``); both substitutions
are undone here.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from mapviewer.importers.parse_kml._constants import (
    LEGACY_ICON_XML_SCALE_FACTOR,
    READER_DEFAULTS,
)
from mapviewer.models.styling import (
    ALL_SIZES,
    RED,
    SMALL,
    FeatureStyleColor,
    FeatureStyleSize,
    get_feature_style_color,
)

if TYPE_CHECKING:
    from mapviewer.models.icon import IconArgs
    from mapviewer.models.kml_style import IconStyle, KmlStyle


def get_text_scale(style: KmlStyle) -> float | None:
    """Return the label scale, or ``None`` if the style has no text.

    Documents omit the label scale when it is 1, and the reader then
    substitutes its own default; that default is read back as 1.
    """
    text_scale = style.text.scale if style.text is not None else None
    if text_scale == READER_DEFAULTS.text_scale:
        return 1.0
    return text_scale


def get_text_color(style: KmlStyle) -> FeatureStyleColor:
    """Return the label colour, ``RED`` if none matches the palette."""
    if style.text is None or style.text.color is None:
        return RED
    return get_feature_style_color(style.text.color)


def get_icon_style(style: KmlStyle | None) -> IconStyle | None:
    """Return the authored icon of *style*, ``None`` for reader placeholders."""
    if style is None or style.image is None:
        return None
    src = style.image.src or ""
    if "google" in src or src == READER_DEFAULTS.icon_src:
        return None
    return style.image


def correct_legacy_icon_style(icon_style: IconStyle) -> IconStyle:
    """Return a copy of a legacy icon style with its scale normalized."""
    return replace(icon_style, scale=icon_style.scale * LEGACY_ICON_XML_SCALE_FACTOR)


def get_icon_size(icon_style: IconStyle | None) -> FeatureStyleSize:
    """Return the size preset matching the icon scale, ``SMALL`` otherwise."""
    if icon_style is None or not icon_style.scale:
        return SMALL
    for size in ALL_SIZES:
        if size.icon_scale == icon_style.scale:
            return size
    return SMALL


def get_fill_color(
    style: KmlStyle, geometry_type: str, icon_args: IconArgs | None
) -> FeatureStyleColor:
    """Return the feature colour; the first matching rule wins.

    1. Point with icon colour: the icon colour.
    2. Line or point with a stroke: the stroke colour.
    3. Polygon with a fill: the fill colour.
    4. ``RED``.
    """
    if geometry_type == "Point" and icon_args is not None and icon_args.color is not None:
        return get_feature_style_color(icon_args.color.as_tuple())
    if geometry_type in ("LineString", "Point") and style.stroke is not None:
        return get_feature_style_color(style.stroke.color)
    if geometry_type == "Polygon" and style.fill is not None:
        return get_feature_style_color(style.fill.color)
    return RED
