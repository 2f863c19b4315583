"""External layer metadata produced by a file import.

A layer's identity is its composite id (``TYPE|sourceUrl|displayName``,
plus ``@adminId=...`` for editable KMLs). Two imports producing the same
id refer to the same logical layer and must not be added twice; the
``LayerCollection`` enforces this.
"""

from __future__ import annotations

import abc
import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("mapviewer.models.layers")


class LayerTypes(enum.StrEnum):
    KML = "KML"
    GPX = "GPX"


@dataclass(slots=True)
class AbstractLayer(abc.ABC):
    """Fields common to every external layer.

    Subclasses provide the composite id and the data URL.

    Attributes:
        name: Display name.
        type: Layer type, first segment of the composite id.
        opacity: Between 0.0 (transparent) and 1.0 (opaque).
        visible: Whether the layer is shown.
    """

    name: str
    type: LayerTypes
    opacity: float = 1.0
    visible: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.opacity <= 1.0:
            msg = f"Opacity {self.opacity} out of range [0, 1] for layer '{self.name}'"
            raise ValueError(msg)

    @abc.abstractmethod
    def get_id(self) -> str:
        """Return ``TYPE|url|name``, the layer identity."""

    @abc.abstractmethod
    def get_url(self) -> str:
        """Return the URL (or path) of the layer data."""


@dataclass(slots=True)
class KMLLayer(AbstractLayer):
    """An external KML layer, mostly used to show drawings.

    Attributes:
        kml_file_url: URL (or local file path) of the KML data.
        file_id: KML id, taken from the last URL segment when not given
            (the KML service serves files at ``/kml/files/{kml_id}``).
        admin_id: Admin id allowing edition, ``None`` for read-only.
        content: Raw KML content when already loaded.
    """

    type: LayerTypes = LayerTypes.KML
    kml_file_url: str = ""
    file_id: str | None = None
    admin_id: str | None = None
    content: str | None = None

    def __post_init__(self) -> None:
        AbstractLayer.__post_init__(self)
        if not self.file_id:
            self.file_id = self.kml_file_url.rstrip("/").split("/")[-1]

    def get_id(self) -> str:
        layer_id = f"{self.type}|{self.kml_file_url}|{self.name}"
        if self.admin_id:
            layer_id += f"@adminId={self.admin_id}"
        return layer_id

    def get_url(self) -> str:
        return self.kml_file_url


@dataclass(slots=True)
class GPXLayer(AbstractLayer):
    """An external GPX layer (tracks, routes, waypoints).

    Attributes:
        gpx_file_url: URL (or local file path) of the GPX data.
        content: Raw GPX content when already loaded.
        metadata: Document metadata (name, description, author, ...).
    """

    type: LayerTypes = LayerTypes.GPX
    gpx_file_url: str = ""
    content: str | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    def get_id(self) -> str:
        return f"{self.type}|{self.gpx_file_url}|{self.name}"

    def get_url(self) -> str:
        return self.gpx_file_url


class LayerCollection:
    """Ordered set of layers keyed by composite id."""

    def __init__(self) -> None:
        self._layers: dict[str, AbstractLayer] = {}

    def add(self, layer: AbstractLayer) -> bool:
        """Add *layer*, returning ``False`` if a layer with the same id exists."""
        layer_id = layer.get_id()
        if layer_id in self._layers:
            logger.info("Layer %s already present, not adding it twice", layer_id)
            return False
        self._layers[layer_id] = layer
        return True

    def remove(self, layer_id: str) -> AbstractLayer | None:
        return self._layers.pop(layer_id, None)

    def get(self, layer_id: str) -> AbstractLayer | None:
        return self._layers.get(layer_id)

    def __contains__(self, layer_id: object) -> bool:
        return layer_id in self._layers

    def __iter__(self) -> Iterator[AbstractLayer]:
        return iter(self._layers.values())

    def __len__(self) -> int:
        return len(self._layers)
