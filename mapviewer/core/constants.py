"""Shared constants.

Centralises service URLs, projection codes, and the drawing defaults
shared by the importers, the profile client, and the icon catalog.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Backend services
# ---------------------------------------------------------------------------

DEFAULT_ALTI_BASE_URL: str = "https://api3.geo.admin.ch/"
"""Altimetry service hosting the ``rest/services/profile`` endpoint."""

DEFAULT_ICONS_BASE_URL: str = "https://map.geo.admin.ch/api/icons/"
"""Drawing icon catalog (``sets`` and ``sets/{name}/icons``)."""

DEFAULT_HTTP_TIMEOUT_S: float = 30.0

# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------

WGS84_EPSG: int = 4326
"""KML and GPX coordinates are always WGS 84."""

WEBMERCATOR_EPSG: int = 3857

LV95_EPSG: int = 2056

DEFAULT_WORKING_PROJECTION_EPSG: int = LV95_EPSG

# ---------------------------------------------------------------------------
# Drawing icons
# ---------------------------------------------------------------------------

DEFAULT_ICON_SET: str = "default"
"""Icon set assumed by legacy colored icon URLs."""

DEFAULT_ICON_SIZE_PX: tuple[int, int] = (48, 48)
"""Pixel size of drawing icons when the document does not state one."""
