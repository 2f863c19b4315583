"""Icon URL grammar and icon resolution against the drawing catalog.

Three URL grammars are recognised, tried in this order:

- legacy colored: ``.../color/{r},{g},{b}/{name}-{size}@{scale}x.png``
- legacy set: ``.../images/{set}/{name}.png``
- current: ``.../api/icons/sets/{set}/icons/{name}@{scale}x-{r},{g},{b}.png``

Resolution never fails: when the catalog is unavailable or does not
contain the icon, a ``DrawingIcon`` is synthesised from the URL itself.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from mapviewer.core.constants import DEFAULT_ICON_SET
from mapviewer.importers.parse_kml._constants import (
    DEFAULT_ICON_COLOR,
    ICON_PATTERN,
    LEGACY_COLOR_ICON_PATTERN,
    LEGACY_SET_ICON_PATTERN,
)
from mapviewer.models.icon import DrawingIcon, IconArgs, IconColorArg
from mapviewer.utils.colors import parse_rgb_color

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mapviewer.models.icon import DrawingIconSet
    from mapviewer.models.kml_style import IconStyle

logger = logging.getLogger("mapviewer.importers.parse_kml")


def parse_icon_url(url: str) -> IconArgs | None:
    """Decode an icon URL into ``IconArgs``.

    Returns:
        The parsed arguments, or ``None`` if no grammar matches.

    Raises:
        InvalidColorError: If a colour channel in a matching URL is
            outside ``[0, 255]``.
    """
    legacy_color_match = LEGACY_COLOR_ICON_PATTERN.search(url)
    legacy_set_match = LEGACY_SET_ICON_PATTERN.search(url)
    match = legacy_color_match or legacy_set_match or ICON_PATTERN.search(url)
    if match is None:
        logger.warning("Could not retrieve icon infos from URL %s", url)
        return None

    groups = match.groupdict()
    default_r, default_g, default_b = DEFAULT_ICON_COLOR
    return IconArgs(
        set=groups.get("set") or DEFAULT_ICON_SET,
        name=groups.get("name") or "unknown",
        color=IconColorArg(
            parse_rgb_color(groups.get("r") or default_r, "R"),
            parse_rgb_color(groups.get("g") or default_g, "G"),
            parse_rgb_color(groups.get("b") or default_b, "B"),
        ),
        is_legacy=bool(legacy_color_match or legacy_set_match),
    )


# ---------------------------------------------------------------------------
# URL builders (inverse of parse_icon_url)
# ---------------------------------------------------------------------------


def build_legacy_color_url(
    base: str, name: str, color: IconColorArg, size: int = 24, scale: int = 2
) -> str:
    return f"{base}color/{color.r},{color.g},{color.b}/{name}-{size}@{scale}x.png"


def build_legacy_set_url(base: str, icon_set: str, name: str) -> str:
    return f"{base}images/{icon_set}/{name}.png"


def build_icon_url(
    base: str, icon_set: str, name: str, color: IconColorArg, scale: float = 1.0
) -> str:
    return (
        f"{base}api/icons/sets/{icon_set}/icons/"
        f"{name}@{scale:g}x-{color.r},{color.g},{color.b}.png"
    )


# ---------------------------------------------------------------------------
# Icon resolution
# ---------------------------------------------------------------------------


def get_icon(
    icon_args: IconArgs | None,
    icon_style: IconStyle | None,
    available_icon_sets: Sequence[DrawingIconSet] | None,
) -> DrawingIcon | None:
    """Resolve *icon_args* against the icon catalog.

    Falls back to an icon generated from the style's own URL when the
    catalog is not loaded yet, the set is unknown, or the set has no
    matching icon. The fallback is exact for every URL except legacy
    default-set ones, whose names lack the catalog's numbered prefix.
    """
    if icon_args is None:
        return None

    if available_icon_sets is None:
        logger.error("Icon sets not yet available, fallback to icon from URL")
        return generate_icon_from_style(icon_style, icon_args)

    icon_set = next((s for s in available_icon_sets if s.name == icon_args.set), None)
    if icon_set is None:
        logger.error("Icon set %s not found, fallback to icon from URL", icon_args.set)
        return generate_icon_from_style(icon_style, icon_args)

    # legacy names carry no numbered prefix ("marker" vs "001-marker")
    name_prefix = r"(\d+-)?" if icon_args.is_legacy else ""
    name_pattern = re.compile(f"^{name_prefix}{re.escape(icon_args.name)}$")
    icon = next((i for i in icon_set.icons if name_pattern.match(i.name)), None)
    if icon is None:
        logger.error(
            "Cannot find icon %s in set %s, fallback to icon from URL",
            icon_args.name,
            icon_args.set,
        )
        return generate_icon_from_style(icon_style, icon_args)
    return icon


def generate_icon_from_style(
    icon_style: IconStyle | None, icon_args: IconArgs | None
) -> DrawingIcon | None:
    """Build a ``DrawingIcon`` pointing at the style's own image URL.

    The anchor is normalised to a fraction of the icon size; a
    degenerate size gives an anchor of ``(0, 0)``.
    """
    if icon_style is None or icon_args is None:
        return None
    if not icon_style.src:
        return None

    width, height = icon_style.size
    anchor_x, anchor_y = icon_style.get_anchor()
    if width and height:
        anchor = (anchor_x / width, anchor_y / height)
    else:
        logger.error(
            "Failed to compute icon anchor: anchor=%s, size=%s",
            (anchor_x, anchor_y),
            icon_style.size,
        )
        anchor = (0.0, 0.0)

    return DrawingIcon(
        name=icon_args.name,
        image_url=icon_style.src,
        image_template_url=icon_style.src,
        icon_set_name=icon_args.set,
        anchor=anchor,
    )
