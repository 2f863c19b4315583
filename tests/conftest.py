"""Shared pytest fixtures for the map viewer import test suite."""

from pathlib import Path

import pytest

from mapviewer.models.icon import DrawingIcon, DrawingIconSet

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


# ---------------------------------------------------------------------------
# Sample document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def drawing_kml(data_dir: Path) -> str:
    """Drawing tool export: marker, annotation, line, polygon, measure."""
    return (data_dir / "drawing.kml").read_text(encoding="utf-8")


@pytest.fixture()
def legacy_drawing_kml(data_dir: Path) -> str:
    """Drawing with legacy colored and legacy set icon URLs."""
    return (data_dir / "legacy_drawing.kml").read_text(encoding="utf-8")


@pytest.fixture()
def empty_kml(data_dir: Path) -> str:
    """Valid KML without any Placemark."""
    return (data_dir / "empty.kml").read_text(encoding="utf-8")


@pytest.fixture()
def out_of_bounds_kml(data_dir: Path) -> str:
    """Valid KML with a single point in New York."""
    return (data_dir / "out_of_bounds.kml").read_text(encoding="utf-8")


@pytest.fixture()
def malformed_kml(data_dir: Path) -> str:
    """KML-looking content that is not well-formed XML."""
    return (data_dir / "malformed.kml").read_text(encoding="utf-8")


@pytest.fixture()
def track_gpx(data_dir: Path) -> str:
    """GPX with metadata, one waypoint, one route and a two-segment track."""
    return (data_dir / "track.gpx").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Icon catalog fixtures
# ---------------------------------------------------------------------------

ICONS_BASE = "https://map.geo.admin.ch/api/icons/sets"


def make_icon(icon_set: str, name: str) -> DrawingIcon:
    template = f"{ICONS_BASE}/{{icon_set_name}}/icons/{{icon_name}}@{{icon_scale}}x-{{r}},{{g}},{{b}}.png"
    return DrawingIcon(
        name=name,
        image_url=f"{ICONS_BASE}/{icon_set}/icons/{name}@1x-255,0,0.png",
        image_template_url=template,
        icon_set_name=icon_set,
        anchor=(0.5, 0.875),
    )


@pytest.fixture()
def icon_sets() -> list[DrawingIconSet]:
    """A small catalog: a colorable default set and a fixed babs set."""
    return [
        DrawingIconSet(
            name="default",
            is_colorable=True,
            icons=(make_icon("default", "001-marker"), make_icon("default", "002-circle")),
        ),
        DrawingIconSet(
            name="babs",
            is_colorable=False,
            icons=(make_icon("babs", "babs-3"),),
        ),
    ]
