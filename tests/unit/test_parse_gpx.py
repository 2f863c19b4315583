"""Tests for GPX parsing."""

from __future__ import annotations

import pytest

from mapviewer.importers.parse_gpx import (
    GpxParseError,
    get_gpx_extent,
    parse_gpx,
    read_gpx_metadata,
)
from mapviewer.utils.projection import LV95, WGS84
from mapviewer.utils.styles import gpx_style


class TestParseGpx:
    """Waypoints, routes and tracks."""

    def test_feature_kinds(self, track_gpx: str) -> None:
        features = parse_gpx(track_gpx, WGS84)
        assert [f.geometry_type for f in features] == ["Point", "LineString", "MultiLineString"]
        assert [f.get("gpx_type") for f in features] == ["waypoint", "route", "track"]

    def test_waypoint(self, track_gpx: str) -> None:
        waypoint = parse_gpx(track_gpx, WGS84)[0]
        assert waypoint.get("name") == "Gurten Kulm"
        assert waypoint.geometry.x == pytest.approx(7.4396)
        assert waypoint.geometry.y == pytest.approx(46.9196)
        assert waypoint.geometry.z == pytest.approx(858)

    def test_track_segments(self, track_gpx: str) -> None:
        track = parse_gpx(track_gpx, WGS84)[2]
        assert track.get("name") == "Loop"
        assert [len(line.coords) for line in track.geometry.geoms] == [2, 3]

    def test_fixed_style(self, track_gpx: str) -> None:
        features = parse_gpx(track_gpx, WGS84)
        assert all(f.style_function is gpx_style for f in features)
        assert all(f.editable_feature is None for f in features)
        assert "point_radius" in gpx_style(features[0])
        assert "point_radius" not in gpx_style(features[1])

    def test_reprojected(self, track_gpx: str) -> None:
        waypoint = parse_gpx(track_gpx, LV95)[0]
        assert 2_595_000 < waypoint.geometry.x < 2_605_000
        assert 1_190_000 < waypoint.geometry.y < 1_200_000

    def test_short_route_is_skipped(self) -> None:
        content = (
            '<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1">'
            '<rte><rtept lat="46.9" lon="7.4"/></rte></gpx>'
        )
        assert parse_gpx(content, WGS84) == []

    def test_invalid_gpx_raises(self) -> None:
        with pytest.raises(GpxParseError) as exc_info:
            parse_gpx("<gpx><trk></gpx>", WGS84)
        assert exc_info.value.code == "GPX_PARSE_FAILED"

    def test_invalid_utf8_bytes_raise_parse_error(self) -> None:
        with pytest.raises(GpxParseError) as exc_info:
            parse_gpx(b"<gpx>\xff</gpx>", WGS84)
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert exc_info.value.category == "validation"


class TestGpxMetadata:
    """Document metadata and extent."""

    def test_metadata(self, track_gpx: str) -> None:
        metadata = read_gpx_metadata(track_gpx)
        assert metadata["name"] == "Gurten loop"
        assert metadata["description"] == "Short hike above Bern"
        assert metadata["author"] == "Test Author"
        assert metadata["keywords"] == "hike, bern"
        assert metadata["time"].startswith("2024-06-01T08:00:00")

    def test_extent_covers_every_point(self, track_gpx: str) -> None:
        assert get_gpx_extent(track_gpx) == pytest.approx((7.4300, 46.9196, 7.4420, 46.9410))

    def test_extent_of_waypoint_only_document(self) -> None:
        content = (
            '<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1">'
            '<wpt lat="46.9" lon="7.4"/></gpx>'
        )
        assert get_gpx_extent(content) == pytest.approx((7.4, 46.9, 7.4, 46.9))

    def test_empty_document_has_no_extent(self) -> None:
        content = '<gpx version="1.1" creator="t" xmlns="http://www.topografix.com/GPX/1/1"></gpx>'
        assert get_gpx_extent(content) is None
        assert read_gpx_metadata(content)["bounds"] is None
