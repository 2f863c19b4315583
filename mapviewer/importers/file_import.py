"""Entry point for imported file content (local upload or remote URL).

Sniffs the format, builds the matching external layer and computes the
extent to zoom to in the working projection. Adding the layer and
zooming are left to the caller (the store).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mapviewer.core.config import ViewerConfig
from mapviewer.core.exceptions import OutOfBoundsError, UnsupportedContentError
from mapviewer.importers.parse_gpx import get_gpx_extent, read_gpx_metadata
from mapviewer.importers.parse_kml import EmptyKMLError, get_kml_extent, parse_kml_name
from mapviewer.models.layers import GPXLayer, KMLLayer
from mapviewer.utils.projection import get_coordinate_system, get_extent_for_projection

if TYPE_CHECKING:
    from mapviewer.models.layers import AbstractLayer
    from mapviewer.utils.projection import CoordinateSystem, Extent

logger = logging.getLogger("mapviewer.importers.file_import")

_KML_OPEN = re.compile(r"<kml")
_KML_CLOSE = re.compile(r"</kml\s*>")
_GPX_OPEN = re.compile(r"<gpx")
_GPX_CLOSE = re.compile(r"</gpx\s*>")


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of a file import.

    Attributes:
        layer: Layer to add to the map.
        extent: Extent to zoom to, in the working projection, or
            ``None`` when there is nothing to zoom to.
    """

    layer: AbstractLayer
    extent: Extent | None


def is_kml(content: str) -> bool:
    """Return ``True`` if *content* looks like KML (no XML validation)."""
    return bool(_KML_OPEN.search(content) and _KML_CLOSE.search(content))


def is_gpx(content: str) -> bool:
    """Return ``True`` if *content* looks like GPX (no XML validation)."""
    return bool(_GPX_OPEN.search(content) and _GPX_CLOSE.search(content))


def handle_file_content(
    content: str | bytes,
    source: str,
    projection: CoordinateSystem | None = None,
    config: ViewerConfig | None = None,
) -> ImportResult:
    """Build the layer for imported file content.

    Args:
        content: File content.
        source: URL or file path the content comes from.
        projection: Map working projection. Defaults to the projection
            configured by ``working_projection_epsg``.
        config: Viewer configuration, defaults to ``ViewerConfig()``.

    Returns:
        The layer and the extent to zoom to.

    Raises:
        EmptyKMLError: If a KML document has no feature to show.
        OutOfBoundsError: If the data lies outside *projection*'s bounds.
        UnsupportedContentError: If the content is neither KML nor GPX,
            or is not UTF-8 text.
    """
    if projection is None:
        projection = get_coordinate_system((config or ViewerConfig()).working_projection_epsg)

    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Unsupported file {source} content: not UTF-8 text"
            raise UnsupportedContentError(msg) from exc

    if is_kml(content):
        return _import_kml(content, source, projection)
    if is_gpx(content):
        return _import_gpx(content, source, projection)

    msg = f"Unsupported file {source} content"
    raise UnsupportedContentError(msg)


def _import_kml(content: str, source: str, projection: CoordinateSystem) -> ImportResult:
    extent = get_kml_extent(content)
    if extent is None:
        raise EmptyKMLError()

    projected_extent = get_extent_for_projection(projection, extent)
    if projected_extent is None:
        msg = f"KML out of projection bounds: {extent}"
        raise OutOfBoundsError(msg)

    layer = KMLLayer(
        name=parse_kml_name(content) or _name_from_source(source),
        kml_file_url=source,
        content=content,
    )
    logger.info("Imported KML %s as layer %s", source, layer.get_id())
    return ImportResult(layer=layer, extent=projected_extent)


def _import_gpx(content: str, source: str, projection: CoordinateSystem) -> ImportResult:
    metadata = read_gpx_metadata(content)
    layer = GPXLayer(
        name=str(metadata.get("name") or _name_from_source(source)),
        gpx_file_url=source,
        content=content,
        metadata=metadata,
    )

    extent = get_gpx_extent(content)
    projected_extent = None
    if extent is not None:
        projected_extent = get_extent_for_projection(projection, extent)
        if projected_extent is None:
            msg = f"GPX out of projection bounds: {extent}"
            raise OutOfBoundsError(msg)

    logger.info("Imported GPX %s as layer %s", source, layer.get_id())
    return ImportResult(layer=layer, extent=projected_extent)


def _name_from_source(source: str) -> str:
    return source.rstrip("/").replace("\\", "/").split("/")[-1] or source
