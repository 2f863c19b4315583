"""Projection helpers built on pyproj.

Imported documents are always WGS 84; features are reprojected into the
map's working projection. Extents are clipped to the working
projection's area of use before being projected, an extent entirely
outside of it cannot be displayed.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mapviewer.core.constants import LV95_EPSG, WEBMERCATOR_EPSG, WGS84_EPSG

if TYPE_CHECKING:
    from pyproj import Transformer
    from shapely.geometry.base import BaseGeometry

logger = logging.getLogger("mapviewer.utils.projection")

Extent = tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class CoordinateSystem:
    """Working projection descriptor.

    Attributes:
        epsg_code: EPSG code (e.g. ``2056``).
        resolutions: Zoom level resolutions, in projection units per pixel.
    """

    epsg_code: int
    resolutions: tuple[float, ...] = field(default_factory=tuple)

    @property
    def epsg(self) -> str:
        return f"EPSG:{self.epsg_code}"

    @property
    def bounds(self) -> Extent:
        """Area of use as ``(west, south, east, north)`` in WGS 84 degrees."""
        return _area_of_use(self.epsg_code)


WGS84 = CoordinateSystem(WGS84_EPSG)
WEBMERCATOR = CoordinateSystem(WEBMERCATOR_EPSG)
LV95 = CoordinateSystem(
    LV95_EPSG,
    resolutions=(
        650.0, 500.0, 250.0, 100.0, 50.0, 20.0, 10.0, 5.0, 2.5, 2.0, 1.5, 1.0, 0.5, 0.25, 0.1,
    ),
)

_KNOWN_SYSTEMS = {system.epsg_code: system for system in (WGS84, WEBMERCATOR, LV95)}


def get_coordinate_system(epsg_code: int) -> CoordinateSystem:
    """Return the coordinate system for *epsg_code*.

    WGS 84, Web Mercator and LV95 are returned as predefined, any other
    code gets a ``CoordinateSystem`` without resolutions.
    """
    return _KNOWN_SYSTEMS.get(epsg_code) or CoordinateSystem(epsg_code)


@functools.lru_cache(maxsize=32)
def get_transformer(source_epsg: int, target_epsg: int) -> Transformer:
    """Return an ``always_xy`` transformer, cached per projection pair."""
    from pyproj import Transformer

    return Transformer.from_crs(f"EPSG:{source_epsg}", f"EPSG:{target_epsg}", always_xy=True)


@functools.lru_cache(maxsize=32)
def _area_of_use(epsg_code: int) -> Extent:
    from pyproj import CRS

    area = CRS.from_epsg(epsg_code).area_of_use
    if area is None:
        return (-180.0, -90.0, 180.0, 90.0)
    return area.bounds


def transform_geometry(
    geometry: BaseGeometry, source: CoordinateSystem, target: CoordinateSystem
) -> BaseGeometry:
    """Reproject a shapely geometry, keeping Z values untouched."""
    if source.epsg_code == target.epsg_code:
        return geometry

    import shapely

    transformer = get_transformer(source.epsg_code, target.epsg_code)

    def _project(x, y, z=None):  # type: ignore[no-untyped-def]
        px, py = transformer.transform(x, y)
        if z is None:
            return px, py
        return px, py, z

    return shapely.transform(geometry, _project, include_z=geometry.has_z, interleaved=False)


def get_extent_for_projection(projection: CoordinateSystem, extent: Extent) -> Extent | None:
    """Clip a WGS 84 extent to *projection*'s bounds and project it.

    Args:
        projection: Target working projection.
        extent: ``(min_lon, min_lat, max_lon, max_lat)`` in WGS 84.

    Returns:
        The projected extent, or ``None`` when *extent* does not
        intersect the projection's area of use.
    """
    west, south, east, north = projection.bounds
    min_x = max(extent[0], west)
    min_y = max(extent[1], south)
    max_x = min(extent[2], east)
    max_y = min(extent[3], north)
    if min_x > max_x or min_y > max_y:
        logger.warning("Extent %s outside of %s bounds", extent, projection.epsg)
        return None

    if projection.epsg_code == WGS84_EPSG:
        return (min_x, min_y, max_x, max_y)

    transformer = get_transformer(WGS84_EPSG, projection.epsg_code)
    return transformer.transform_bounds(min_x, min_y, max_x, max_y)
