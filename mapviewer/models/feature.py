"""Data model for a feature read from an imported KML or GPX document.

A ``Feature`` is the geometry-level record produced by the document
readers: a shapely geometry in the working projection, its raw
properties, and its style. The import pipeline then attaches the
derived ``EditableFeature``, the geodesic helper, and the styling
callback used by the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from shapely.geometry.base import BaseGeometry

    from mapviewer.models.editable_feature import EditableFeature
    from mapviewer.models.kml_style import KmlStyle
    from mapviewer.utils.geodesic import GeodesicGeometries


@dataclass(slots=True)
class Feature:
    """A single feature extracted from an imported document.

    Attributes:
        id: Feature id from the document (``Placemark/@id``), or ``None``.
        geometry: Shapely geometry, in the projection it was read into.
        properties: ``name``, ``description`` and ``ExtendedData`` values.
        style: Style resolved by the reader, ``None`` when unresolvable.
        editable_feature: Deserialized editable feature, once attached.
        geodesic: Great-circle helper for lines and measures, once attached.
        style_function: Styling callback used by the renderer.
    """

    id: str | None
    geometry: BaseGeometry | None
    properties: dict[str, Any] = field(default_factory=dict)
    style: KmlStyle | None = None
    editable_feature: EditableFeature | None = None
    geodesic: GeodesicGeometries | None = None
    style_function: Callable[..., Any] | None = None

    def get(self, key: str, default: Any = None) -> Any:
        """Return a property value."""
        return self.properties.get(key, default)

    @property
    def geometry_type(self) -> str:
        """Geometry type name (``"Point"``, ``"Polygon"``, ...), ``""`` if none."""
        if self.geometry is None:
            return ""
        return self.geometry.geom_type
