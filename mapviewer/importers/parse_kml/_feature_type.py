"""Feature type classification.

The type is read from the ``type`` property written by the drawing tool.
Features without a recognised type get one guessed from their geometry
and style by ``FEATURE_TYPE_RULES``, evaluated top-down; the first rule
that matches wins and ``MARKER`` is the last resort.

Measures cannot be told apart from lines, an untyped ``LineString`` is
always a ``LINEPOLYGON``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from mapviewer.models.editable_feature import EditableFeatureTypes

if TYPE_CHECKING:
    from collections.abc import Callable

    from mapviewer.models.feature import Feature

logger = logging.getLogger("mapviewer.importers.parse_kml")


class FeatureTypeRule(NamedTuple):
    name: str
    matches: Callable[[Feature], bool]
    feature_type: EditableFeatureTypes


def _has_scaled_image(feature: Feature) -> bool:
    style = feature.style
    return bool(style and style.image and style.image.scale > 0)


FEATURE_TYPE_RULES: tuple[FeatureTypeRule, ...] = (
    FeatureTypeRule(
        "point with scaled image",
        lambda f: f.geometry_type == "Point" and _has_scaled_image(f),
        EditableFeatureTypes.MARKER,
    ),
    FeatureTypeRule(
        "point without scaled image",
        lambda f: f.geometry_type == "Point",
        EditableFeatureTypes.ANNOTATION,
    ),
    FeatureTypeRule(
        "line",
        lambda f: f.geometry_type == "LineString",
        EditableFeatureTypes.LINEPOLYGON,
    ),
    FeatureTypeRule(
        "polygon",
        lambda f: f.geometry_type == "Polygon",
        EditableFeatureTypes.LINEPOLYGON,
    ),
)

FALLBACK_FEATURE_TYPE = EditableFeatureTypes.MARKER


def get_feature_type(feature: Feature) -> EditableFeatureTypes:
    """Return the explicit feature type, or guess it from geometry and style."""
    raw_type = feature.get("type")
    if isinstance(raw_type, str) and raw_type.strip():
        try:
            return EditableFeatureTypes(raw_type.strip().upper())
        except ValueError:
            logger.error(
                "Type %s of feature %s not recognized, guessing it from geometry",
                raw_type,
                feature.id,
            )

    for rule in FEATURE_TYPE_RULES:
        if rule.matches(feature):
            return rule.feature_type

    logger.warning(
        "Could not guess the type of feature %s (%s), fallback to %s",
        feature.id,
        feature.geometry_type or "no geometry",
        FALLBACK_FEATURE_TYPE,
    )
    return FALLBACK_FEATURE_TYPE
