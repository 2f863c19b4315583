"""GPX import.

Reads waypoints, routes and tracks with gpxpy into features in the
map's working projection. GPX documents are always WGS 84. GPX features
are display-only: they carry the fixed ``gpx_style`` and no
``EditableFeature``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mapviewer.core.exceptions import ValidationError
from mapviewer.models.feature import Feature
from mapviewer.utils.projection import WGS84, transform_geometry
from mapviewer.utils.styles import gpx_style

if TYPE_CHECKING:
    import gpxpy.gpx

    from mapviewer.utils.projection import CoordinateSystem, Extent

logger = logging.getLogger("mapviewer.importers.parse_gpx")


class GpxParseError(ValidationError):
    """Raised when GPX content cannot be read."""

    default_stage = "parse_gpx"
    default_code = "GPX_PARSE_FAILED"


def parse_gpx(
    content: str | bytes, projection: CoordinateSystem = WGS84
) -> list[Feature]:
    """Parse a GPX document into styled features.

    Waypoints become ``Point``, routes ``LineString`` and tracks
    ``MultiLineString`` (one line per track segment). Routes and track
    segments with fewer than two points are skipped.

    Args:
        content: GPX document.
        projection: Working projection to read geometries into.

    Returns:
        Features in document order: waypoints, routes, then tracks.

    Raises:
        GpxParseError: If gpxpy cannot read the document.
    """
    from shapely.geometry import LineString, MultiLineString, Point

    gpx = _load(content)
    features: list[Feature] = []

    for waypoint in gpx.waypoints:
        features.append(
            _feature(
                Point(_xyz(waypoint)),
                kind="waypoint",
                name=waypoint.name,
                description=waypoint.description,
                projection=projection,
            )
        )

    for route in gpx.routes:
        if len(route.points) < 2:
            logger.warning("Skipping GPX route %r with less than 2 points", route.name)
            continue
        features.append(
            _feature(
                LineString([_xyz(point) for point in route.points]),
                kind="route",
                name=route.name,
                description=route.description,
                projection=projection,
            )
        )

    for track in gpx.tracks:
        lines = [
            [_xyz(point) for point in segment.points]
            for segment in track.segments
            if len(segment.points) >= 2
        ]
        if not lines:
            logger.warning("Skipping GPX track %r without usable segment", track.name)
            continue
        features.append(
            _feature(
                MultiLineString(lines),
                kind="track",
                name=track.name,
                description=track.description,
                projection=projection,
            )
        )

    logger.info(
        "Parsed GPX: %d waypoint(s), %d route(s), %d track(s), %d feature(s)",
        len(gpx.waypoints),
        len(gpx.routes),
        len(gpx.tracks),
        len(features),
    )
    return features


def read_gpx_metadata(content: str | bytes) -> dict[str, Any]:
    """Return the document metadata.

    Keys: ``name``, ``description``, ``author``, ``time`` (ISO 8601 or
    ``None``), ``keywords`` and ``bounds`` (see ``get_gpx_extent``).
    """
    gpx = _load(content)
    return {
        "name": gpx.name,
        "description": gpx.description,
        "author": gpx.author_name,
        "time": gpx.time.isoformat() if gpx.time else None,
        "keywords": gpx.keywords,
        "bounds": _bounds(gpx),
    }


def get_gpx_extent(content: str | bytes) -> Extent | None:
    """Return the WGS 84 extent of a GPX document, ``None`` if it has no point."""
    return _bounds(_load(content))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load(content: str | bytes) -> gpxpy.gpx.GPX:
    import gpxpy
    import gpxpy.gpx

    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Invalid GPX document: {exc}"
            raise GpxParseError(msg) from exc
    try:
        return gpxpy.parse(content)
    except gpxpy.gpx.GPXException as exc:
        msg = f"Invalid GPX document: {exc}"
        raise GpxParseError(msg) from exc


def _bounds(gpx: gpxpy.gpx.GPX) -> Extent | None:
    # GPX.get_bounds() only looks at tracks, waypoints and routes count too
    points = [
        *gpx.waypoints,
        *(point for route in gpx.routes for point in route.points),
        *(point for track in gpx.tracks for segment in track.segments for point in segment.points),
    ]
    if not points:
        return None
    longitudes = [point.longitude for point in points]
    latitudes = [point.latitude for point in points]
    return (min(longitudes), min(latitudes), max(longitudes), max(latitudes))


def _xyz(point: gpxpy.gpx.GPXWaypoint) -> tuple[float, float, float]:
    # GPX is lat/lon, geometries are x/y
    return (point.longitude, point.latitude, point.elevation or 0.0)


def _feature(
    geometry: Any,
    *,
    kind: str,
    name: str | None,
    description: str | None,
    projection: CoordinateSystem,
) -> Feature:
    return Feature(
        id=None,
        geometry=transform_geometry(geometry, WGS84, projection),
        properties={
            "name": name or "",
            "description": description or "",
            "gpx_type": kind,
        },
        style_function=gpx_style,
    )
