"""Backend service clients.

- profile: Elevation profile requests to the altimetry service
- icons: Drawing icon catalog
"""

from mapviewer.services.icons import IconCatalogError, load_icon_sets
from mapviewer.services.profile import (
    ProfileClient,
    ProfileRequestError,
    ProfileResponseError,
    ProfileServiceError,
)

__all__ = [
    "IconCatalogError",
    "ProfileClient",
    "ProfileRequestError",
    "ProfileResponseError",
    "ProfileServiceError",
    "load_icon_sets",
]
