"""Data models.

Defines the data structures shared by the importers and the profile client:
- Feature: Geometry, properties and style read from a KML/GPX document
- EditableFeature: Normalized drawing feature (type, colours, sizes, icon)
- KMLLayer / GPXLayer: External layers produced by a file import
- ElevationProfile: Profile samples and derived hiking statistics
"""

from mapviewer.models.editable_feature import EditableFeature, EditableFeatureTypes
from mapviewer.models.feature import Feature
from mapviewer.models.layers import GPXLayer, KMLLayer, LayerCollection, LayerTypes
from mapviewer.models.profile import ElevationProfile, ProfilePoint

__all__ = [
    "EditableFeature",
    "EditableFeatureTypes",
    "ElevationProfile",
    "Feature",
    "GPXLayer",
    "KMLLayer",
    "LayerCollection",
    "LayerTypes",
    "ProfilePoint",
]
