"""Visual style records read from a KML document.

A ``KmlStyle`` is an explicit record of the four independently optional
style parts a placemark can carry: stroke (``LineStyle``), fill
(``PolyStyle``), text (``LabelStyle``) and image (``IconStyle``). All
records are immutable; corrections such as the legacy icon scale are
applied by building a new record.
"""

from __future__ import annotations

from dataclasses import dataclass

from mapviewer.core.constants import DEFAULT_ICON_SIZE_PX

# (r, g, b, alpha) with alpha in [0, 1]
Color = tuple[int, int, int, float]


@dataclass(frozen=True, slots=True)
class StrokeStyle:
    color: Color | None = None
    width: float = 1.0


@dataclass(frozen=True, slots=True)
class FillStyle:
    color: Color | None = None


@dataclass(frozen=True, slots=True)
class TextStyle:
    scale: float | None = None
    color: Color | None = None


@dataclass(frozen=True, slots=True)
class IconStyle:
    """An icon image.

    Attributes:
        src: Icon URL (``Icon/href``).
        scale: Render scale.
        size: Icon size in pixels ``(width, height)``.
        anchor: Anchor in pixels from the top-left corner.
    """

    src: str
    scale: float = 1.0
    size: tuple[float, float] = DEFAULT_ICON_SIZE_PX
    anchor: tuple[float, float] | None = None

    def get_anchor(self) -> tuple[float, float]:
        """Return the pixel anchor, the icon centre when none was authored."""
        if self.anchor is not None:
            return self.anchor
        return (self.size[0] / 2, self.size[1] / 2)


@dataclass(frozen=True, slots=True)
class KmlStyle:
    stroke: StrokeStyle | None = None
    fill: FillStyle | None = None
    text: TextStyle | None = None
    image: IconStyle | None = None
