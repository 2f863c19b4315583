"""Elevation profile client.

Requests the profile of a line from the altimetry service
(``{base}rest/services/profile.json`` or ``.csv``). JSON responses are
validated with pydantic and turned into an ``ElevationProfile``; CSV
responses are returned as text for download.

Coordinates are sent in LV95 (EPSG:2056), as the service expects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from mapviewer.core.config import ViewerConfig
from mapviewer.core.constants import LV95_EPSG
from mapviewer.core.exceptions import PermanentError, TransientError, ValidationError
from mapviewer.models.profile import ElevationProfile, ProfilePoint

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("mapviewer.services.profile")

JSON_FORMAT = ".json"
CSV_FORMAT = ".csv"
SUPPORTED_FORMATS = (JSON_FORMAT, CSV_FORMAT)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ProfileRequestError(ValidationError):
    """Raised before any request when the profile request is invalid."""

    default_stage = "profile"
    default_code = "PROFILE_BAD_REQUEST"


class ProfileServiceError(TransientError):
    """Raised when the altimetry service cannot be reached or fails."""

    default_stage = "profile"
    default_code = "PROFILE_SERVICE_UNAVAILABLE"


class ProfileResponseError(PermanentError):
    """Raised when the altimetry service answers with unusable data."""

    default_stage = "profile"
    default_code = "PROFILE_BAD_RESPONSE"


# ---------------------------------------------------------------------------
# Backend response schema
# ---------------------------------------------------------------------------


class ProfileAltitudes(BaseModel):
    """Altitudes of one sample, per elevation model."""

    comb: float = Field(alias="COMB")

    model_config = {"populate_by_name": True}


class ProfileSample(BaseModel):
    """One sample of the altimetry service JSON response.

    Attributes:
        dist: Distance from the first sample, in metres.
        easting: LV95 easting.
        northing: LV95 northing.
        alts: Altitudes; only ``COMB`` is used.
    """

    dist: float
    easting: float
    northing: float
    alts: ProfileAltitudes

    def to_point(self) -> ProfilePoint:
        return ProfilePoint(
            dist=self.dist,
            coordinate=(self.easting, self.northing),
            elevation=self.alts.comb,
        )


_SAMPLES_ADAPTER = TypeAdapter(list[ProfileSample])


def parse_profile_response(data: Any) -> ElevationProfile:
    """Build an ``ElevationProfile`` from decoded JSON response data.

    Raises:
        ProfileResponseError: If *data* does not match the sample schema.
    """
    try:
        samples = _SAMPLES_ADAPTER.validate_python(data)
    except PydanticValidationError as exc:
        msg = f"Incorrect response while getting profile: {exc.error_count()} invalid field(s)"
        raise ProfileResponseError(msg) from exc
    return ElevationProfile(sample.to_point() for sample in samples)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ProfileClient:
    """Client of the altimetry service profile endpoint.

    Args:
        config: Viewer configuration (base URL, timeout, offset).
            Defaults to ``ViewerConfig()``.
        transport: Optional httpx transport, for tests or custom
            connection handling.
    """

    def __init__(
        self,
        config: ViewerConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or ViewerConfig()
        self._transport = transport

    def profile_json(self, coordinates: Sequence[Sequence[float]]) -> ElevationProfile:
        """Return the elevation profile of a line given in LV95."""
        response = self._request(coordinates, JSON_FORMAT)
        try:
            data = response.json()
        except ValueError as exc:
            msg = "Incorrect response while getting profile: body is not JSON"
            raise ProfileResponseError(msg) from exc
        if data is None:
            msg = "Incorrect response while getting profile: empty body"
            raise ProfileResponseError(msg)

        profile = parse_profile_response(data)
        logger.info(
            "Profile received: %d point(s), %.1f m long", len(profile), profile.max_dist
        )
        return profile

    def profile_csv(self, coordinates: Sequence[Sequence[float]]) -> str:
        """Return the elevation profile of a line given in LV95, as CSV text."""
        response = self._request(coordinates, CSV_FORMAT)
        if not response.text:
            msg = "Incorrect response while getting profile: empty body"
            raise ProfileResponseError(msg)
        return response.text

    def profile(
        self, coordinates: Sequence[Sequence[float]], file_extension: str = JSON_FORMAT
    ) -> ElevationProfile | str:
        """Dispatch on *file_extension* (``.json`` or ``.csv``).

        Raises:
            ProfileRequestError: If the format is not supported.
        """
        if file_extension == CSV_FORMAT:
            return self.profile_csv(coordinates)
        if file_extension == JSON_FORMAT:
            return self.profile_json(coordinates)
        msg = f"Not supported file extension {file_extension!r}"
        logger.error(msg)
        raise ProfileRequestError(msg)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(
        self, coordinates: Sequence[Sequence[float]], file_extension: str
    ) -> httpx.Response:
        if file_extension not in SUPPORTED_FORMATS:
            msg = f"Not supported file extension {file_extension!r}"
            logger.error(msg)
            raise ProfileRequestError(msg)
        if not coordinates:
            msg = "Coordinates not provided"
            logger.error(msg)
            raise ProfileRequestError(msg)

        url = f"{self._config.alti_base_url}rest/services/profile{file_extension}"
        params = {
            "offset": self._config.profile_offset,
            "sr": LV95_EPSG,
            "distinct_points": "true",
        }
        body = {
            "type": "LineString",
            "coordinates": [[float(c) for c in coordinate] for coordinate in coordinates],
        }

        try:
            with httpx.Client(
                timeout=self._config.http_timeout_s, transport=self._transport
            ) as client:
                response = client.post(url, params=params, json=body)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("Error while getting profile (HTTP %d) for %s", status, coordinates)
            msg = f"Profile service answered HTTP {status}"
            if status < 500:
                raise ProfileResponseError(msg) from exc
            raise ProfileServiceError(msg) from exc
        except httpx.HTTPError as exc:
            logger.error("Error while getting profile for %s: %s", coordinates, exc)
            msg = f"Profile service unreachable: {exc}"
            raise ProfileServiceError(msg) from exc

        return response
