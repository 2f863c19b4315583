"""lxml-based KML reader.

Walks the element tree and produces one ``Feature`` per Placemark, with
a shapely geometry (reprojected from WGS 84 into the requested
projection) and a resolved ``KmlStyle``.

Style resolution per Placemark:
- shared ``Style`` / ``StyleMap`` referenced by ``styleUrl``, overridden
  part by part by an inline ``Style``;
- a ``styleUrl`` that resolves to nothing, with no inline style, leaves
  the feature without style;
- a Placemark with no style information at all gets the reader defaults.

Like common KML readers, the label scale defaults to
``READER_DEFAULTS.text_scale`` and a placeholder pushpin icon is added
when no icon is authored; the style normalizer undoes both.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mapviewer.core.constants import DEFAULT_ICON_SIZE_PX
from mapviewer.core.exceptions import ValidationError
from mapviewer.importers.parse_kml._constants import READER_DEFAULTS
from mapviewer.models.feature import Feature
from mapviewer.models.kml_style import FillStyle, IconStyle, KmlStyle, StrokeStyle, TextStyle
from mapviewer.utils.colors import parse_kml_color
from mapviewer.utils.projection import WGS84, transform_geometry

if TYPE_CHECKING:
    from lxml.etree import _Element
    from shapely.geometry.base import BaseGeometry

    from mapviewer.utils.projection import CoordinateSystem

logger = logging.getLogger("mapviewer.importers.parse_kml")

_GEOMETRY_TAGS = ("Point", "LineString", "LinearRing", "Polygon", "MultiGeometry")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class KmlParseError(ValidationError):
    """Raised when a KML document cannot be parsed."""

    default_stage = "parse_kml"
    default_code = "KML_PARSE_FAILED"


class EmptyKMLError(KmlParseError):
    """Raised when a KML document contains no displayable feature."""

    default_code = "KML_EMPTY"

    def __init__(self, message: str = "KML document contains no features", **kwargs: object) -> None:
        super().__init__(message, **kwargs)


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def parse_document(content: str | bytes) -> _Element:
    """Parse KML content into an element tree with namespaces stripped.

    Raises:
        KmlParseError: If the content is not well-formed XML or the
            root element is not ``<kml>``.
    """
    from lxml import etree  # type: ignore[attr-defined]

    if isinstance(content, str):
        content = content.encode("utf-8")
    if not content.strip():
        msg = "KML content is empty"
        raise KmlParseError(msg)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)
    try:
        root: _Element = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Not valid XML: {exc}"
        raise KmlParseError(msg) from exc

    # KML 2.0/2.1/2.2 and gx: elements are all read by local name
    for element in root.iter():
        if isinstance(element.tag, str):
            element.tag = etree.QName(element).localname
    etree.cleanup_namespaces(root)

    if root.tag.lower() != "kml":
        msg = f"Not a KML document: root element is <{root.tag}>"
        raise KmlParseError(msg)
    return root


def read_name(content: str | bytes) -> str | None:
    """Return the document name (``Document/name``, else the first ``name``)."""
    root = parse_document(content)
    name_elem = root.find("Document/name")
    if name_elem is None:
        name_elem = root.find(".//name")
    if name_elem is None or not name_elem.text:
        return None
    return name_elem.text.strip()


def read_features(
    content: str | bytes, projection: CoordinateSystem = WGS84
) -> list[Feature]:
    """Read every Placemark of a KML document.

    Args:
        content: KML document.
        projection: Projection to read geometries into (source is WGS 84).

    Returns:
        One ``Feature`` per Placemark, in document order. Placemarks with
        an unreadable geometry are kept with ``geometry=None``.
    """
    root = parse_document(content)
    shared_styles = _read_shared_styles(root)

    features: list[Feature] = []
    for placemark in root.iter("Placemark"):
        geometry = _read_placemark_geometry(placemark)
        if geometry is not None:
            geometry = transform_geometry(geometry, WGS84, projection)
        features.append(
            Feature(
                id=placemark.get("id"),
                geometry=geometry,
                properties=_read_properties(placemark),
                style=_resolve_placemark_style(placemark, shared_styles),
            )
        )
    return features


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def _read_properties(placemark: _Element) -> dict[str, str]:
    properties: dict[str, str] = {}
    for key in ("name", "description"):
        elem = placemark.find(key)
        if elem is not None and elem.text:
            properties[key] = elem.text.strip()
    properties.update(extract_extended_data(placemark))
    return properties


def extract_extended_data(placemark: _Element) -> dict[str, str]:
    """Extract ExtendedData metadata from a Placemark element.

    Handles both KML metadata patterns:
    - ``ExtendedData/Data/value``: untyped key-value pairs (the drawing
      tool stores the feature ``type`` this way).
    - ``ExtendedData/SchemaData/SimpleData``: typed fields.
    """
    metadata: dict[str, str] = {}

    for data_elem in placemark.findall("ExtendedData/Data"):
        key = data_elem.get("name", "")
        value_elem = data_elem.find("value")
        if key and value_elem is not None and value_elem.text:
            metadata[key] = value_elem.text.strip()

    for simple_data in placemark.findall("ExtendedData/SchemaData/SimpleData"):
        key = simple_data.get("name", "")
        if key and simple_data.text:
            metadata[key] = simple_data.text.strip()

    return metadata


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------


def _read_shared_styles(root: _Element) -> dict[str, KmlStyle]:
    """Index shared ``Style`` and ``StyleMap`` elements by ``#id``."""
    styles: dict[str, KmlStyle] = {}
    for style_elem in root.iter("Style"):
        style_id = style_elem.get("id")
        if style_id:
            styles[f"#{style_id}"] = _read_style(style_elem)

    for style_map in root.iter("StyleMap"):
        map_id = style_map.get("id")
        if not map_id:
            continue
        for pair in style_map.findall("Pair"):
            key = pair.findtext("key", default="").strip()
            if key != "normal":
                continue
            inline = pair.find("Style")
            if inline is not None:
                styles[f"#{map_id}"] = _read_style(inline)
            else:
                target = _style_url_key(pair.findtext("styleUrl", default=""))
                if target in styles:
                    styles[f"#{map_id}"] = styles[target]
    return styles


def _style_url_key(style_url: str) -> str:
    """Reduce ``doc.kml#id`` / ``#id`` to ``#id``."""
    style_url = style_url.strip()
    if "#" in style_url:
        return "#" + style_url.split("#", 1)[1]
    return style_url


def _resolve_placemark_style(
    placemark: _Element, shared_styles: dict[str, KmlStyle]
) -> KmlStyle | None:
    inline_elem = placemark.find("Style")
    inline = _read_style(inline_elem) if inline_elem is not None else None

    style_url = placemark.findtext("styleUrl")
    shared: KmlStyle | None = None
    if style_url:
        shared = shared_styles.get(_style_url_key(style_url))
        if shared is None and inline is None:
            logger.warning(
                "Style %s of Placemark %s not found", style_url, placemark.get("id")
            )
            return None

    if shared is None and inline is None:
        return _with_reader_defaults(KmlStyle())
    if shared is None:
        return _with_reader_defaults(inline)  # type: ignore[arg-type]
    if inline is None:
        return _with_reader_defaults(shared)
    return _with_reader_defaults(
        KmlStyle(
            stroke=inline.stroke or shared.stroke,
            fill=inline.fill or shared.fill,
            text=inline.text or shared.text,
            image=inline.image or shared.image,
        )
    )


def _with_reader_defaults(style: KmlStyle) -> KmlStyle:
    text = style.text or TextStyle()
    if text.scale is None:
        text = TextStyle(scale=READER_DEFAULTS.text_scale, color=text.color)
    image = style.image or IconStyle(src=READER_DEFAULTS.icon_src)
    return KmlStyle(stroke=style.stroke, fill=style.fill, text=text, image=image)


def _read_style(style_elem: _Element) -> KmlStyle:
    return KmlStyle(
        stroke=_read_line_style(style_elem.find("LineStyle")),
        fill=_read_poly_style(style_elem.find("PolyStyle")),
        text=_read_label_style(style_elem.find("LabelStyle")),
        image=_read_icon_style(style_elem.find("IconStyle")),
    )


def _read_line_style(elem: _Element | None) -> StrokeStyle | None:
    if elem is None:
        return None
    width = _read_float(elem, "width")
    return StrokeStyle(
        color=parse_kml_color(elem.findtext("color", default="")),
        width=width if width is not None else 1.0,
    )


def _read_poly_style(elem: _Element | None) -> FillStyle | None:
    if elem is None:
        return None
    if elem.findtext("fill", default="1").strip() == "0":
        return None
    return FillStyle(color=parse_kml_color(elem.findtext("color", default="")))


def _read_label_style(elem: _Element | None) -> TextStyle | None:
    if elem is None:
        return None
    return TextStyle(
        scale=_read_float(elem, "scale"),
        color=parse_kml_color(elem.findtext("color", default="")),
    )


def _read_icon_style(elem: _Element | None) -> IconStyle | None:
    if elem is None:
        return None
    href = (elem.findtext("Icon/href") or "").strip() or READER_DEFAULTS.icon_src
    scale = _read_float(elem, "scale")
    width = _read_float(elem, "Icon/w")
    height = _read_float(elem, "Icon/h")
    size = (
        width if width is not None else DEFAULT_ICON_SIZE_PX[0],
        height if height is not None else DEFAULT_ICON_SIZE_PX[1],
    )
    return IconStyle(
        src=href,
        scale=scale if scale is not None else 1.0,
        size=size,
        anchor=_read_hot_spot(elem.find("hotSpot"), size),
    )


def _read_hot_spot(
    elem: _Element | None, size: tuple[float, float]
) -> tuple[float, float] | None:
    """Convert a ``hotSpot`` (origin bottom-left) to a top-left pixel anchor."""
    if elem is None:
        return None
    try:
        x = float(elem.get("x", "0.5"))
        y = float(elem.get("y", "0.5"))
    except ValueError:
        logger.warning("Ignoring unreadable hotSpot %s", dict(elem.attrib))
        return None
    width, height = size
    x_units = elem.get("xunits", "fraction")
    y_units = elem.get("yunits", "fraction")

    if x_units == "pixels":
        anchor_x = x
    elif x_units == "insetPixels":
        anchor_x = width - x
    else:
        anchor_x = x * width

    if y_units == "pixels":
        anchor_y = height - y
    elif y_units == "insetPixels":
        anchor_y = y
    else:
        anchor_y = height - y * height

    return (anchor_x, anchor_y)


def _read_float(elem: _Element, path: str) -> float | None:
    text = elem.findtext(path)
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        logger.warning("Ignoring non-numeric <%s> value %r", path, text)
        return None


# ---------------------------------------------------------------------------
# Geometries
# ---------------------------------------------------------------------------


def _read_placemark_geometry(placemark: _Element) -> BaseGeometry | None:
    for child in placemark:
        if child.tag in _GEOMETRY_TAGS:
            try:
                return _read_geometry(child)
            except ValueError as exc:
                logger.warning(
                    "Skipping unreadable geometry of Placemark %s: %s",
                    placemark.get("id"),
                    exc,
                )
                return None
    return None


def _read_geometry(elem: _Element) -> BaseGeometry | None:
    from shapely.geometry import (
        GeometryCollection,
        LineString,
        MultiLineString,
        MultiPoint,
        MultiPolygon,
        Point,
        Polygon,
    )

    tag = elem.tag
    if tag == "Point":
        coords = parse_coordinates_text(elem.findtext("coordinates", default=""))
        return Point(coords[0]) if coords else None

    if tag == "LineString":
        coords = parse_coordinates_text(elem.findtext("coordinates", default=""))
        return LineString(coords) if len(coords) >= 2 else None

    if tag == "LinearRing":
        coords = parse_coordinates_text(elem.findtext("coordinates", default=""))
        return Polygon(coords) if len(coords) >= 3 else None

    if tag == "Polygon":
        exterior = parse_coordinates_text(
            elem.findtext("outerBoundaryIs/LinearRing/coordinates", default="")
        )
        if len(exterior) < 3:
            return None
        holes = [
            ring
            for ring in (
                parse_coordinates_text(inner.text or "")
                for inner in elem.findall("innerBoundaryIs/LinearRing/coordinates")
            )
            if len(ring) >= 3
        ]
        return Polygon(exterior, holes)

    if tag == "MultiGeometry":
        parts = [
            part
            for part in (_read_geometry(child) for child in elem if child.tag in _GEOMETRY_TAGS)
            if part is not None
        ]
        if not parts:
            return None
        kinds = {part.geom_type for part in parts}
        if kinds == {"Point"}:
            return MultiPoint(parts)
        if kinds == {"LineString"}:
            return MultiLineString(parts)
        if kinds == {"Polygon"}:
            return MultiPolygon(parts)
        return GeometryCollection(parts)

    return None


def parse_coordinates_text(text: str) -> list[tuple[float, ...]]:
    """Parse KML coordinate text (``lon,lat[,alt] ...``) to tuples.

    Altitudes are kept; when only some tuples carry one, the others get
    an altitude of 0 so that the geometry stays homogeneous.

    Raises:
        ValueError: If a coordinate value is not numeric.
    """
    coords: list[tuple[float, ...]] = []
    for token in text.split():
        parts = [part for part in token.strip().split(",") if part]
        if len(parts) < 2:
            continue
        coords.append(tuple(float(part) for part in parts[:3]))

    if any(len(c) == 3 for c in coords):
        coords = [c if len(c) == 3 else (*c, 0.0) for c in coords]
    return coords
