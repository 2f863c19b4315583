"""Great-circle geometries for lines and measures.

Straight segments in a projected CRS do not follow the shortest path on
the ellipsoid. ``GeodesicGeometries`` keeps a densified copy of a
feature's geometry whose vertices lie on the geodesic between each pair
of original vertices, so that the renderer can draw it instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mapviewer.utils.projection import WGS84, transform_geometry

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from mapviewer.utils.projection import CoordinateSystem

logger = logging.getLogger("mapviewer.utils.geodesic")

# Segments are split so that no sub-segment exceeds this length.
MAX_SEGMENT_LENGTH_M = 1_000.0


class GeodesicGeometries:
    """Geodesic rendition of a line or polygon geometry.

    Args:
        geometry: Line or polygon geometry in *projection*.
        projection: The projection *geometry* is expressed in.
    """

    def __init__(self, geometry: BaseGeometry, projection: CoordinateSystem) -> None:
        self.projection = projection
        self.geometry = geometry
        self.geodesic_geometry = self._compute(geometry)

    def _compute(self, geometry: BaseGeometry) -> BaseGeometry:
        from shapely.geometry import LinearRing, LineString, Polygon

        wgs84_geometry = transform_geometry(geometry, self.projection, WGS84)
        if isinstance(wgs84_geometry, Polygon):
            densified = Polygon(
                densify_ring(list(wgs84_geometry.exterior.coords)),
                [densify_ring(list(ring.coords)) for ring in wgs84_geometry.interiors],
            )
        elif isinstance(wgs84_geometry, (LineString, LinearRing)):
            densified = LineString(densify_ring(list(wgs84_geometry.coords)))
        else:
            logger.debug("No geodesic rendition for %s", wgs84_geometry.geom_type)
            return geometry
        return transform_geometry(densified, WGS84, self.projection)


def densify_ring(
    coords: list[tuple[float, ...]], max_segment_m: float = MAX_SEGMENT_LENGTH_M
) -> list[tuple[float, float]]:
    """Insert intermediate great-circle points between WGS 84 vertices.

    Z values are dropped, geodesic rendering is 2D only.
    """
    from pyproj import Geod

    geod = Geod(ellps="WGS84")
    if len(coords) < 2:
        return [(c[0], c[1]) for c in coords]

    result: list[tuple[float, float]] = [(coords[0][0], coords[0][1])]
    for start, end in zip(coords, coords[1:]):
        _az, _back_az, distance = geod.inv(start[0], start[1], end[0], end[1])
        intermediate = int(distance // max_segment_m)
        if intermediate > 0:
            result.extend(geod.npts(start[0], start[1], end[0], end[1], intermediate))
        result.append((end[0], end[1]))
    return result
