"""Shared constants for KML parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Legacy drawings stored the icon scale as is, with icons always 48 px
# wide. Icon scales are now normalized to 32 px, hence 48 / 32.
LEGACY_ICON_XML_SCALE_FACTOR = 1.5


@dataclass(frozen=True, slots=True)
class ReaderDefaults:
    """Values the KML reader substitutes when a document omits them.

    Attributes:
        text_scale: Label scale used when ``LabelStyle/scale`` is absent.
        icon_src: Placeholder icon added to points without an authored icon.
    """

    text_scale: float = 0.8
    icon_src: str = "https://maps.google.com/mapfiles/kml/pushpin/ylw-pushpin.png"


READER_DEFAULTS = ReaderDefaults()

# ---------------------------------------------------------------------------
# Icon URL grammars, in precedence order
# ---------------------------------------------------------------------------

# .../color/{r},{g},{b}/{name}-{size}@{scale}x.png
LEGACY_COLOR_ICON_PATTERN = re.compile(
    r"color/(?P<r>\d+),(?P<g>\d+),(?P<b>\d+)/(?P<name>[^/]+)-(?P<size>\d+)@(?P<scale>\d+)x\.png$"
)

# .../images/{set}/{name}.png
LEGACY_SET_ICON_PATTERN = re.compile(r"images/(?P<set>\w+)/(?P<name>[^/]+)\.png$")

# .../api/icons/sets/{set}/icons/{name}@{scale}x-{r},{g},{b}.png
ICON_PATTERN = re.compile(
    r"api/icons/sets/(?P<set>\w+)/icons/(?P<name>.+?)"
    r"(@(?P<scale>\d+(\.\d+)?)x-(?P<r>\d+),(?P<g>\d+),(?P<b>\d+))\.png"
)

# Channels used when the URL carries no colour
DEFAULT_ICON_COLOR = (255, 0, 0)
