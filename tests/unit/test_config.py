"""Tests for viewer configuration.

Covers:
- Default values point at the public services
- Loading from environment variables
- Type coercion (string env vars → numeric fields)
- Fail-fast range validation
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from mapviewer.core.config import ConfigValidationError, ViewerConfig


class TestViewerConfigDefaults:
    """Verify default configuration values."""

    def test_default_alti_base_url(self) -> None:
        assert ViewerConfig().alti_base_url == "https://api3.geo.admin.ch/"

    def test_default_icons_base_url(self) -> None:
        assert ViewerConfig().icons_base_url == "https://map.geo.admin.ch/api/icons/"

    def test_default_projection_is_lv95(self) -> None:
        assert ViewerConfig().working_projection_epsg == 2056

    def test_default_timeout_and_offset(self) -> None:
        cfg = ViewerConfig()
        assert cfg.http_timeout_s == 30.0
        assert cfg.profile_offset == 0


class TestViewerConfigFromEnv:
    """Verify loading from environment variables."""

    def test_loads_from_environment(self) -> None:
        """All env vars are read and coerced to correct types."""
        env = {
            "API_SERVICE_ALTI_BASE_URL": "https://sys-api3.dev.bgdi.ch/",
            "API_ICONS_BASE_URL": "https://sys-map.dev.bgdi.ch/api/icons/",
            "WORKING_PROJECTION_EPSG": "3857",
            "HTTP_TIMEOUT_S": "5.5",
            "PROFILE_OFFSET": "3",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = ViewerConfig.from_env()

        assert cfg.alti_base_url == "https://sys-api3.dev.bgdi.ch/"
        assert cfg.icons_base_url == "https://sys-map.dev.bgdi.ch/api/icons/"
        assert cfg.working_projection_epsg == 3857
        assert cfg.http_timeout_s == 5.5
        assert cfg.profile_offset == 3

    def test_defaults_when_env_missing(self) -> None:
        """Missing environment variables fall back to defaults."""
        with patch.dict(os.environ, {}, clear=True):
            cfg = ViewerConfig.from_env()

        assert cfg == ViewerConfig()

    def test_frozen_immutability(self) -> None:
        cfg = ViewerConfig()
        with pytest.raises(AttributeError):
            cfg.http_timeout_s = 1.0  # type: ignore[misc]


class TestViewerConfigValidation:
    """Fail-fast range validation in from_env."""

    def test_empty_alti_url_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"API_SERVICE_ALTI_BASE_URL": ""}, clear=True),
            pytest.raises(ConfigValidationError, match="must not be empty"),
        ):
            ViewerConfig.from_env()

    def test_alti_url_without_trailing_slash_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"API_SERVICE_ALTI_BASE_URL": "https://api3.geo.admin.ch"}, clear=True),
            pytest.raises(ConfigValidationError, match="must end with '/'"),
        ):
            ViewerConfig.from_env()

    def test_empty_icons_url_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"API_ICONS_BASE_URL": ""}, clear=True),
            pytest.raises(ConfigValidationError, match="API_ICONS_BASE_URL"),
        ):
            ViewerConfig.from_env()

    def test_negative_epsg_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"WORKING_PROJECTION_EPSG": "-1"}, clear=True),
            pytest.raises(ConfigValidationError, match="WORKING_PROJECTION_EPSG"),
        ):
            ViewerConfig.from_env()

    def test_zero_timeout_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"HTTP_TIMEOUT_S": "0"}, clear=True),
            pytest.raises(ConfigValidationError, match="must be > 0"),
        ):
            ViewerConfig.from_env()

    def test_negative_offset_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"PROFILE_OFFSET": "-2"}, clear=True),
            pytest.raises(ConfigValidationError, match="PROFILE_OFFSET"),
        ):
            ViewerConfig.from_env()

    def test_zero_offset_accepted(self) -> None:
        with patch.dict(os.environ, {"PROFILE_OFFSET": "0"}, clear=True):
            cfg = ViewerConfig.from_env()
        assert cfg.profile_offset == 0

    def test_non_numeric_env_raises_value_error(self) -> None:
        with (
            patch.dict(os.environ, {"HTTP_TIMEOUT_S": "abc"}, clear=True),
            pytest.raises(ValueError),
        ):
            ViewerConfig.from_env()

    def test_error_contains_key_and_value(self) -> None:
        with (
            patch.dict(os.environ, {"HTTP_TIMEOUT_S": "-3"}, clear=True),
            pytest.raises(ConfigValidationError) as exc_info,
        ):
            ViewerConfig.from_env()
        assert exc_info.value.key == "HTTP_TIMEOUT_S"
        assert exc_info.value.value == -3.0
        assert exc_info.value.code == "CONFIG_VALIDATION_FAILED"
