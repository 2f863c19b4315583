"""Tests for the drawing icon catalog loader."""

from __future__ import annotations

import httpx
import pytest

from mapviewer.core.config import ViewerConfig
from mapviewer.importers.parse_kml import parse_kml
from mapviewer.models.icon import DrawingIconSet, IconColorArg
from mapviewer.services.icons import IconCatalogError, load_icon_sets
from mapviewer.utils.projection import WGS84

BASE = "https://icons.example.com/api/icons/"

SETS = {
    "success": True,
    "items": [
        {
            "name": "default",
            "colorable": True,
            "icons_url": f"{BASE}sets/default/icons",
            "template_url": f"{BASE}sets/default/icons/{{icon_name}}@{{icon_scale}}x-{{r}},{{g}},{{b}}.png",
            "language": None,
        },
        {
            "name": "babs",
            "colorable": False,
            "icons_url": f"{BASE}sets/babs/icons",
            "language": "de",
        },
    ],
}

ICONS = {
    f"{BASE}sets/default/icons": {
        "items": [
            {
                "name": "001-marker",
                "url": f"{BASE}sets/default/icons/001-marker@1x-255,0,0.png",
                "template_url": (
                    f"{BASE}sets/{{icon_set_name}}/icons/{{icon_name}}@{{icon_scale}}x-{{r}},{{g}},{{b}}.png"
                ),
                "anchor": [0.5, 0.875],
            },
        ]
    },
    f"{BASE}sets/babs/icons": {
        "items": [
            {"name": "babs-3", "url": f"{BASE}sets/babs/icons/babs-3@1x-255,0,0.png"},
        ]
    },
}


def _catalog_handler(request: httpx.Request) -> httpx.Response:
    url = str(request.url)
    if url == f"{BASE}sets":
        return httpx.Response(200, json=SETS)
    if url in ICONS:
        return httpx.Response(200, json=ICONS[url])
    return httpx.Response(404)


def _load(handler=_catalog_handler) -> list[DrawingIconSet]:  # type: ignore[no-untyped-def]
    config = ViewerConfig(icons_base_url=BASE)
    return load_icon_sets(config, transport=httpx.MockTransport(handler))


class TestLoadIconSets:
    """Catalog loading."""

    def test_sets_and_icons(self) -> None:
        icon_sets = _load()
        assert [s.name for s in icon_sets] == ["default", "babs"]
        assert icon_sets[0].is_colorable is True
        assert icon_sets[1].is_colorable is False
        assert icon_sets[1].language == "de"
        assert [i.name for i in icon_sets[0].icons] == ["001-marker"]

    def test_icon_fields(self) -> None:
        marker = _load()[0].icons[0]
        assert marker.icon_set_name == "default"
        assert marker.anchor == (0.5, 0.875)
        assert marker.generate_url(IconColorArg(0, 0, 255), 1.5) == (
            f"{BASE}sets/default/icons/001-marker@1.5x-0,0,255.png"
        )

    def test_icon_without_template_uses_url(self) -> None:
        babs = _load()[1].icons[0]
        assert babs.image_template_url == babs.image_url
        assert babs.anchor == (0.5, 0.5)

    def test_base_url_without_trailing_slash(self) -> None:
        config = ViewerConfig(icons_base_url=BASE.rstrip("/"))
        icon_sets = load_icon_sets(config, transport=httpx.MockTransport(_catalog_handler))
        assert len(icon_sets) == 2

    def test_loaded_catalog_resolves_legacy_icons(self, legacy_drawing_kml: str) -> None:
        features = parse_kml(legacy_drawing_kml, WGS84, _load())
        marker = next(f for f in features if f.id == "legacy_marker")
        assert marker.editable_feature.icon.image_url.startswith(BASE)


class TestCatalogErrors:
    """Failures raise ``IconCatalogError``."""

    def test_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(IconCatalogError) as exc_info:
            _load(handler)
        assert exc_info.value.retryable is True

    def test_http_error(self) -> None:
        with pytest.raises(IconCatalogError, match="Failed to load icon catalog"):
            _load(lambda request: httpx.Response(500))

    def test_malformed_payload(self) -> None:
        with pytest.raises(IconCatalogError, match="Malformed") as exc_info:
            _load(lambda request: httpx.Response(200, json={"items": [{"colorable": True}]}))
        assert exc_info.value.retryable is False
