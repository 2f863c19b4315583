"""Editable feature model.

An ``EditableFeature`` is the normalized, style-annotated representation
of one imported geometry. It is created once per raw KML feature by the
deserializer and mutated afterwards only by the drawing tool.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mapviewer.models.styling import MEDIUM, RED, FeatureStyleColor, FeatureStyleSize

if TYPE_CHECKING:
    from mapviewer.models.icon import DrawingIcon


class EditableFeatureTypes(enum.StrEnum):
    """Semantic type of a drawn feature (the ``type`` KML property)."""

    MARKER = "MARKER"
    ANNOTATION = "ANNOTATION"
    LINEPOLYGON = "LINEPOLYGON"
    MEASURE = "MEASURE"


@dataclass(slots=True)
class EditableFeature:
    """A drawable, editable map feature.

    Attributes:
        id: Identifier from the source document, or a generated one.
        feature_type: Resolved semantic type, never undetermined.
        title: Feature name (optional on markers, absent on lines).
        description: Free text description.
        coordinates: Coordinates in the working projection. For polygons
            only the outer ring is kept.
        geometry: GeoJSON-like geometry mapping (``type`` + ``coordinates``).
        text_color: Label colour.
        text_size: Label size.
        fill_color: Marker / stroke / fill colour.
        icon: Catalog icon, ``None`` for non-iconic features.
        icon_size: Icon size, set if and only if ``icon`` is set.
    """

    id: str
    feature_type: EditableFeatureTypes
    title: str = ""
    description: str = ""
    coordinates: list[Any] = field(default_factory=list)
    geometry: dict[str, Any] = field(default_factory=dict)
    text_color: FeatureStyleColor = RED
    text_size: FeatureStyleSize = MEDIUM
    fill_color: FeatureStyleColor = RED
    icon: DrawingIcon | None = None
    icon_size: FeatureStyleSize | None = None

    def __post_init__(self) -> None:
        if (self.icon is None) != (self.icon_size is None):
            msg = f"Feature {self.id!r}: icon and icon_size must be set together"
            raise ValueError(msg)

    def is_line_or_measure(self) -> bool:
        return self.feature_type in (
            EditableFeatureTypes.LINEPOLYGON,
            EditableFeatureTypes.MEASURE,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict (colours and sizes by name)."""
        return {
            "id": self.id,
            "feature_type": str(self.feature_type),
            "title": self.title,
            "description": self.description,
            "coordinates": self.coordinates,
            "geometry": self.geometry,
            "text_color": self.text_color.name,
            "text_size": self.text_size.label,
            "fill_color": self.fill_color.name,
            "icon": (
                {"set": self.icon.icon_set_name, "name": self.icon.name} if self.icon else None
            ),
            "icon_size": self.icon_size.label if self.icon_size else None,
        }
