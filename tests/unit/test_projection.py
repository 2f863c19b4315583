"""Tests for projection and geodesic helpers."""

from __future__ import annotations

import warnings

import pytest
from shapely.geometry import LineString, Point, Polygon

from mapviewer.utils.geodesic import GeodesicGeometries, densify_ring
from mapviewer.utils.projection import (
    LV95,
    WEBMERCATOR,
    WGS84,
    get_coordinate_system,
    get_extent_for_projection,
    transform_geometry,
)

BERN = (7.4386, 46.9511)


class TestTransformGeometry:
    def test_same_projection_is_identity(self) -> None:
        point = Point(*BERN)
        assert transform_geometry(point, WGS84, WGS84) is point

    def test_wgs84_to_lv95(self) -> None:
        projected = transform_geometry(Point(*BERN), WGS84, LV95)
        assert projected.x == pytest.approx(2_600_000, abs=1_000)
        assert projected.y == pytest.approx(1_200_000, abs=1_000)

    def test_z_is_preserved(self) -> None:
        projected = transform_geometry(Point(BERN[0], BERN[1], 540.0), WGS84, LV95)
        assert projected.has_z
        assert projected.z == 540.0

    def test_round_trip(self) -> None:
        line = LineString([BERN, (7.5, 47.0)])
        back = transform_geometry(transform_geometry(line, WGS84, LV95), LV95, WGS84)
        for (x1, y1), (x2, y2) in zip(line.coords, back.coords):
            assert x1 == pytest.approx(x2, abs=1e-6)
            assert y1 == pytest.approx(y2, abs=1e-6)

    def test_no_deprecation_warning(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            transform_geometry(LineString([BERN, (7.5, 47.0)]), WGS84, LV95)


class TestGetCoordinateSystem:
    def test_predefined_systems(self) -> None:
        assert get_coordinate_system(2056) is LV95
        assert get_coordinate_system(3857) is WEBMERCATOR
        assert get_coordinate_system(4326) is WGS84

    def test_other_code(self) -> None:
        system = get_coordinate_system(32632)
        assert system.epsg == "EPSG:32632"
        assert system.resolutions == ()


class TestExtentForProjection:
    def test_wgs84_passthrough(self) -> None:
        extent = (7.0, 46.0, 8.0, 47.0)
        assert get_extent_for_projection(WGS84, extent) == extent

    def test_swiss_extent_projected(self) -> None:
        min_x, min_y, max_x, max_y = get_extent_for_projection(LV95, (7.3, 46.8, 7.6, 47.1))
        assert 2_550_000 < min_x < max_x < 2_650_000
        assert 1_150_000 < min_y < max_y < 1_250_000

    def test_outside_projection_bounds(self) -> None:
        assert get_extent_for_projection(LV95, (-74.1, 40.6, -73.9, 40.8)) is None

    def test_partially_outside_is_clipped(self) -> None:
        extent = get_extent_for_projection(LV95, (0.0, 46.0, 8.0, 47.0))
        assert extent is not None
        assert extent[0] > 2_400_000

    def test_world_wide_projection(self) -> None:
        assert get_extent_for_projection(WEBMERCATOR, (-74.1, 40.6, -73.9, 40.8)) is not None


class TestGeodesic:
    def test_short_segment_not_densified(self) -> None:
        coords = [(7.44, 46.95), (7.441, 46.951)]
        assert densify_ring(coords) == coords

    def test_long_segment_densified(self) -> None:
        # roughly 40 km
        result = densify_ring([(7.0, 46.8), (7.5, 47.0)])
        assert len(result) > 30
        assert result[0] == (7.0, 46.8)
        assert result[-1] == (7.5, 47.0)

    def test_z_dropped(self) -> None:
        assert densify_ring([(7.0, 46.8, 500.0)]) == [(7.0, 46.8)]

    def test_line_in_projected_crs(self) -> None:
        line = transform_geometry(LineString([(7.0, 46.8), (7.5, 47.0)]), WGS84, LV95)
        geodesic = GeodesicGeometries(line, LV95)
        assert geodesic.geometry is line
        assert geodesic.geodesic_geometry.geom_type == "LineString"
        assert len(geodesic.geodesic_geometry.coords) > len(line.coords)

    def test_polygon_keeps_type(self) -> None:
        polygon = Polygon([(7.0, 46.8), (7.5, 46.8), (7.5, 47.0), (7.0, 46.8)])
        geodesic = GeodesicGeometries(polygon, WGS84)
        assert geodesic.geodesic_geometry.geom_type == "Polygon"

    def test_point_unchanged(self) -> None:
        point = Point(*BERN)
        assert GeodesicGeometries(point, WGS84).geodesic_geometry is point
