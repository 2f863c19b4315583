"""Viewer configuration loaded from environment variables.

All values have defaults pointing at the public production services, so
the import pipeline works without any environment set up.

``from_env()`` raises ``ConfigValidationError`` if any value is out of
its valid range, catching bad configuration at startup rather than on
the first profile request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from mapviewer.core.constants import (
    DEFAULT_ALTI_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_S,
    DEFAULT_ICONS_BASE_URL,
    DEFAULT_WORKING_PROJECTION_EPSG,
)
from mapviewer.core.exceptions import MapViewerError


class ConfigValidationError(MapViewerError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Immutable viewer configuration.

    Attributes:
        alti_base_url: Base URL of the altimetry service (profile endpoint).
            Must end with a slash, the endpoint path is appended verbatim.
        icons_base_url: Base URL of the drawing icon catalog.
        working_projection_epsg: EPSG code of the map's working projection.
        http_timeout_s: Timeout in seconds for backend requests.
        profile_offset: ``offset`` query parameter sent to the profile service.
    """

    alti_base_url: str = DEFAULT_ALTI_BASE_URL
    icons_base_url: str = DEFAULT_ICONS_BASE_URL
    working_projection_epsg: int = DEFAULT_WORKING_PROJECTION_EPSG
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S
    profile_offset: int = 0

    @classmethod
    def from_env(cls) -> ViewerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required URL is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``HTTP_TIMEOUT_S=abc``).
        """
        config = cls(
            alti_base_url=os.getenv("API_SERVICE_ALTI_BASE_URL", DEFAULT_ALTI_BASE_URL),
            icons_base_url=os.getenv("API_ICONS_BASE_URL", DEFAULT_ICONS_BASE_URL),
            working_projection_epsg=int(
                os.getenv("WORKING_PROJECTION_EPSG", str(DEFAULT_WORKING_PROJECTION_EPSG))
            ),
            http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", str(DEFAULT_HTTP_TIMEOUT_S))),
            profile_offset=int(os.getenv("PROFILE_OFFSET", "0")),
        )
        _validate(config)
        return config


def _validate(config: ViewerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.alti_base_url:
        raise ConfigValidationError(
            "API_SERVICE_ALTI_BASE_URL", config.alti_base_url, "must not be empty"
        )

    if not config.alti_base_url.endswith("/"):
        raise ConfigValidationError(
            "API_SERVICE_ALTI_BASE_URL", config.alti_base_url, "must end with '/'"
        )

    if not config.icons_base_url:
        raise ConfigValidationError("API_ICONS_BASE_URL", config.icons_base_url, "must not be empty")

    if config.working_projection_epsg <= 0:
        raise ConfigValidationError(
            "WORKING_PROJECTION_EPSG",
            config.working_projection_epsg,
            "must be a positive EPSG code",
        )

    if config.http_timeout_s <= 0:
        raise ConfigValidationError(
            "HTTP_TIMEOUT_S",
            config.http_timeout_s,
            "must be > 0 (seconds)",
        )

    if config.profile_offset < 0:
        raise ConfigValidationError(
            "PROFILE_OFFSET",
            config.profile_offset,
            "must be >= 0",
        )
