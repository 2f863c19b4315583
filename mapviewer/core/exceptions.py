"""Unified exception taxonomy for the import and profile pipelines.

Every domain exception inherits from ``MapViewerError`` and carries
structured context fields so that the UI layer can branch on error kind
(e.g. "empty document" vs. "unsupported content") and show the right
message to the user.

Taxonomy categories
-------------------
- ``ValidationError``: bad input (file content, coordinates, colours), never retryable.
- ``TransientError``: temporary failures (network, backend), retryable.
- ``PermanentError``: unrecoverable domain failures, not retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging and UI messaging.
"""

from __future__ import annotations


class MapViewerError(Exception):
    """Base exception for all import/profile errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"parse_kml"``, ``"profile"``).
        code: Machine-readable error code (e.g. ``"KML_EMPTY"``).
        retryable: Whether the caller may retry the operation.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(MapViewerError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(MapViewerError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(MapViewerError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Import errors
# ---------------------------------------------------------------------------


class UnsupportedContentError(ValidationError):
    """Raised when file content is neither KML nor GPX."""

    default_stage = "import"
    default_code = "UNSUPPORTED_CONTENT"


class OutOfBoundsError(ValidationError):
    """Raised when imported data lies outside the working projection's domain."""

    default_stage = "import"
    default_code = "OUT_OF_BOUNDS"


class InvalidColorError(ValidationError):
    """Raised when an RGB channel is not an integer within [0, 255]."""

    default_stage = "parse_kml"
    default_code = "INVALID_COLOR"
