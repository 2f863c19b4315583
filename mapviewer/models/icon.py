"""Drawing icon models.

- ``DrawingIcon`` / ``DrawingIconSet``: the icon catalog served by the
  icons API (read-only for the import pipeline).
- ``IconArgs`` / ``IconColorArg``: transient values decoded from an
  icon URL found in a KML style, consumed immediately by icon resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mapviewer.core.constants import DEFAULT_ICON_SET


@dataclass(frozen=True, slots=True)
class IconColorArg:
    r: int
    g: int
    b: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True, slots=True)
class IconArgs:
    """Icon arguments parsed from an icon URL.

    Attributes:
        set: Icon set name (``"default"`` for legacy colored URLs).
        name: Icon name as written in the URL.
        color: Colour encoded in the URL (red when the URL has none).
        is_legacy: Whether the URL follows one of the legacy grammars.
    """

    set: str
    name: str
    color: IconColorArg
    is_legacy: bool


@dataclass(frozen=True, slots=True)
class DrawingIcon:
    """An icon of the drawing catalog.

    Attributes:
        name: Icon name, numbered in the default set (e.g. ``"001-marker"``).
        image_url: URL of the rendered icon.
        image_template_url: URL template with ``{icon_scale}``, ``{r}``,
            ``{g}``, ``{b}`` placeholders.
        icon_set_name: Name of the owning set.
        anchor: Anchor point as a fraction of the icon size ``(x, y)``.
    """

    name: str
    image_url: str
    image_template_url: str
    icon_set_name: str = DEFAULT_ICON_SET
    anchor: tuple[float, float] = (0.5, 0.5)

    def generate_url(self, color: IconColorArg | None = None, icon_scale: float = 1.0) -> str:
        """Render the template URL for a colour and scale."""
        if "{" not in self.image_template_url:
            return self.image_template_url
        color = color or IconColorArg(255, 0, 0)
        return self.image_template_url.format(
            icon_set_name=self.icon_set_name,
            icon_name=self.name,
            icon_scale=_format_scale(icon_scale),
            r=color.r,
            g=color.g,
            b=color.b,
        )


@dataclass(frozen=True, slots=True)
class DrawingIconSet:
    """A named set of drawing icons.

    Attributes:
        name: Set name (e.g. ``"default"``, ``"babs"``).
        is_colorable: Whether icons of this set accept a colour.
        icons: Icons of the set, in catalog order.
        template_url: URL template for the set's icons.
        language: Set language when the set is localised, else ``None``.
    """

    name: str
    is_colorable: bool = True
    icons: tuple[DrawingIcon, ...] = field(default_factory=tuple)
    template_url: str = ""
    language: str | None = None


def _format_scale(scale: float) -> str:
    """Format a scale the way icon URLs spell it (``1`` not ``1.0``)."""
    return f"{scale:g}"
