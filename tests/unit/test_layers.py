"""Tests for external layer metadata and the layer collection."""

from __future__ import annotations

import pytest

from mapviewer.models.layers import AbstractLayer, GPXLayer, KMLLayer, LayerCollection, LayerTypes

KML_URL = "https://public.geo.admin.ch/api/kml/files/abc123"


class TestAbstractLayer:
    def test_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            AbstractLayer(name="x", type=LayerTypes.KML)  # type: ignore[abstract]


class TestKMLLayer:
    """Composite id and derived fields."""

    def test_id(self) -> None:
        layer = KMLLayer(name="Drawing", kml_file_url=KML_URL)
        assert layer.type == LayerTypes.KML
        assert layer.get_id() == f"KML|{KML_URL}|Drawing"
        assert layer.get_url() == KML_URL

    def test_admin_id_suffix(self) -> None:
        layer = KMLLayer(name="Drawing", kml_file_url=KML_URL, admin_id="secret")
        assert layer.get_id() == f"KML|{KML_URL}|Drawing@adminId=secret"

    def test_file_id_from_url(self) -> None:
        assert KMLLayer(name="d", kml_file_url=KML_URL).file_id == "abc123"
        assert KMLLayer(name="d", kml_file_url=KML_URL + "/").file_id == "abc123"

    def test_explicit_file_id_kept(self) -> None:
        assert KMLLayer(name="d", kml_file_url=KML_URL, file_id="other").file_id == "other"

    @pytest.mark.parametrize("opacity", [-0.1, 1.5])
    def test_opacity_out_of_range(self, opacity: float) -> None:
        with pytest.raises(ValueError, match="Opacity"):
            KMLLayer(name="d", kml_file_url=KML_URL, opacity=opacity)

    def test_opacity_bounds_accepted(self) -> None:
        assert KMLLayer(name="d", kml_file_url=KML_URL, opacity=0.0).opacity == 0.0
        assert KMLLayer(name="d", kml_file_url=KML_URL, opacity=1.0).visible is True


class TestGPXLayer:
    def test_id(self) -> None:
        layer = GPXLayer(name="Track", gpx_file_url="/tmp/track.gpx")
        assert layer.get_id() == "GPX|/tmp/track.gpx|Track"
        assert layer.metadata == {}


class TestLayerCollection:
    """Layers are keyed by composite id."""

    def test_duplicate_not_added(self) -> None:
        layers = LayerCollection()
        assert layers.add(KMLLayer(name="Drawing", kml_file_url=KML_URL)) is True
        assert layers.add(KMLLayer(name="Drawing", kml_file_url=KML_URL, opacity=0.5)) is False
        assert len(layers) == 1

    def test_admin_id_makes_a_distinct_layer(self) -> None:
        layers = LayerCollection()
        layers.add(KMLLayer(name="Drawing", kml_file_url=KML_URL))
        layers.add(KMLLayer(name="Drawing", kml_file_url=KML_URL, admin_id="secret"))
        assert len(layers) == 2

    def test_get_and_remove(self) -> None:
        layers = LayerCollection()
        layer = GPXLayer(name="Track", gpx_file_url="track.gpx")
        layers.add(layer)
        layer_id = layer.get_id()
        assert layer_id in layers
        assert layers.get(layer_id) is layer
        assert list(layers) == [layer]
        assert layers.remove(layer_id) is layer
        assert layer_id not in layers
        assert layers.remove(layer_id) is None
