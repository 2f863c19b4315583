"""Colour helpers shared by the icon URL parser and the KML style reader."""

from __future__ import annotations

from mapviewer.core.exceptions import InvalidColorError

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, float]


def parse_rgb_color(value: object, channel: str) -> int:
    """Parse a single RGB channel value.

    Args:
        value: Channel value, as int or numeric string.
        channel: Channel label (``"R"``, ``"G"`` or ``"B"``) for the error message.

    Returns:
        The channel as an int in ``[0, 255]``.

    Raises:
        InvalidColorError: If the value is not an integer or is out of range.
    """
    if isinstance(value, bool):
        raise InvalidColorError(f"Invalid {channel} channel value {value!r}: not an integer")
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        msg = f"Invalid {channel} channel value {value!r}: not an integer"
        raise InvalidColorError(msg) from exc
    if not 0 <= parsed <= 255:
        msg = f"Invalid {channel} channel value {parsed}: must be between 0 and 255"
        raise InvalidColorError(msg)
    return parsed


def parse_kml_color(text: str) -> RGBA | None:
    """Parse a KML ``aabbggrr`` hex colour into ``(r, g, b, alpha)``.

    Returns ``None`` for malformed values rather than raising, KML
    readers ignore colours they cannot read.
    """
    text = text.strip().lstrip("#")
    if len(text) != 8:
        return None
    try:
        a, b, g, r = (int(text[i : i + 2], 16) for i in range(0, 8, 2))
    except ValueError:
        return None
    return (r, g, b, a / 255)


def hex_to_rgb(value: str) -> RGB:
    """Convert ``#RRGGBB`` to an ``(r, g, b)`` tuple."""
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
