"""Drawing icon catalog loader.

Fetches the icon sets served by the icons API (``{base}sets``) and the
icons of each set (the set's ``icons_url``). The resulting
``DrawingIconSet`` list is what KML icon resolution matches against.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from mapviewer.core.config import ViewerConfig
from mapviewer.core.exceptions import TransientError
from mapviewer.models.icon import DrawingIcon, DrawingIconSet

logger = logging.getLogger("mapviewer.services.icons")


class IconCatalogError(TransientError):
    """Raised when the icon catalog cannot be loaded."""

    default_stage = "icons"
    default_code = "ICON_CATALOG_UNAVAILABLE"


# ---------------------------------------------------------------------------
# Icons API schema
# ---------------------------------------------------------------------------


class IconSetEntry(BaseModel):
    name: str
    colorable: bool = True
    icons_url: str
    template_url: str = ""
    language: str | None = None


class IconEntry(BaseModel):
    name: str
    url: str
    template_url: str = ""
    anchor: tuple[float, float] = (0.5, 0.5)


class IconSetsResponse(BaseModel):
    items: list[IconSetEntry] = Field(default_factory=list)


class IconsResponse(BaseModel):
    items: list[IconEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def load_icon_sets(
    config: ViewerConfig | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> list[DrawingIconSet]:
    """Load every icon set with its icons.

    Args:
        config: Viewer configuration (icons base URL, timeout).
        transport: Optional httpx transport.

    Returns:
        Icon sets in catalog order.

    Raises:
        IconCatalogError: If the catalog cannot be fetched or is malformed.
    """
    config = config or ViewerConfig()
    base_url = config.icons_base_url
    if not base_url.endswith("/"):
        base_url += "/"

    with httpx.Client(timeout=config.http_timeout_s, transport=transport) as client:
        sets = _fetch(client, f"{base_url}sets", IconSetsResponse)
        icon_sets = [
            _to_icon_set(entry, _fetch(client, entry.icons_url, IconsResponse))
            for entry in sets.items
        ]

    logger.info(
        "Loaded %d icon set(s), %d icon(s)",
        len(icon_sets),
        sum(len(icon_set.icons) for icon_set in icon_sets),
    )
    return icon_sets


def _fetch(client: httpx.Client, url: str, model: type[Any]) -> Any:
    try:
        response = client.get(url)
        response.raise_for_status()
        return model.model_validate(response.json())
    except httpx.HTTPError as exc:
        msg = f"Failed to load icon catalog from {url}: {exc}"
        raise IconCatalogError(msg) from exc
    except (ValueError, PydanticValidationError) as exc:
        msg = f"Malformed icon catalog response from {url}: {exc}"
        raise IconCatalogError(msg, retryable=False) from exc


def _to_icon_set(entry: IconSetEntry, icons: IconsResponse) -> DrawingIconSet:
    return DrawingIconSet(
        name=entry.name,
        is_colorable=entry.colorable,
        icons=tuple(
            DrawingIcon(
                name=icon.name,
                image_url=icon.url,
                image_template_url=icon.template_url or icon.url,
                icon_set_name=entry.name,
                anchor=icon.anchor,
            )
            for icon in icons.items
        ),
        template_url=entry.template_url,
        language=entry.language,
    )
