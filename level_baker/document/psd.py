"""Photoshop document reader built on ``psd-tools``.

Maps a ``PSDImage`` onto :class:`level_baker.document.model.Document`:

* top-level groups, in container order, become ``Group``s numbered from 0
  by position (top-level pixel layers outside any group are ignored);
  ``psd_tools`` reports ``layer_id`` -1 for every layer of a file without a
  layer-ID block, so container ids cannot tell groups apart;
* every pixel layer below a group, nested groups flattened, becomes a
  ``Layer`` with a full-document RGBA buffer;
* ``Layer.visible`` carries the container's raw flag, which is the
  complement of ``psd_tools``' decoded ``visible`` attribute.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List

import numpy as np
from psd_tools import PSDImage

from level_baker.document.model import Document, Group, Layer
from level_baker.errors import DocumentReadError
from level_baker.types import UInt8Array

DOCUMENT_EXTENSION = ".psd"

logger = logging.getLogger(__name__)


def render_full_canvas(layer: Any, width: int, height: int) -> UInt8Array:
    """Render ``layer`` into a transparent ``(height, width, 4)`` canvas.

    The layer image is placed at its ``(left, top)`` offset; parts outside the
    document rectangle are clipped.
    """
    canvas: UInt8Array = np.zeros((height, width, 4), dtype=np.uint8)
    image = layer.topil()
    if image is None:
        return canvas
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    pixels: UInt8Array = np.asarray(image, dtype=np.uint8)

    left, top = int(layer.left), int(layer.top)
    x0, y0 = max(left, 0), max(top, 0)
    x1 = min(left + pixels.shape[1], width)
    y1 = min(top + pixels.shape[0], height)
    if x0 >= x1 or y0 >= y1:
        return canvas

    canvas[y0:y1, x0:x1] = pixels[y0 - top : y1 - top, x0 - left : x1 - left]
    return canvas


def _pixel_layers(group: Any) -> Iterable[Any]:
    return (node for node in group.descendants() if not node.is_group())


def document_from_psd(psd: Any) -> Document:
    """Build a ``Document`` from an opened ``PSDImage`` (or a look-alike)."""
    width, height = int(psd.width), int(psd.height)
    groups: List[Group] = []
    for group_id, node in enumerate(child for child in psd if child.is_group()):
        layers = [
            Layer(
                name=layer.name,
                visible=not layer.visible,
                pixels=render_full_canvas(layer, width, height),
            )
            for layer in _pixel_layers(node)
        ]
        groups.append(Group(group_id=group_id, name=node.name, layers=layers))
    return Document(width=width, height=height, groups=groups)


def read_document(path: Path) -> Document:
    """Open and decode the document at ``path``.

    Raises:
        DocumentReadError: If the file cannot be read or decoded.
    """
    try:
        psd = PSDImage.open(path)
        document = document_from_psd(psd)
    except Exception as exc:  # noqa: BLE001 - any decoder failure skips the document
        raise DocumentReadError(path, exc) from exc
    logger.debug(
        "Read %s: %dx%d, %d groups",
        path,
        document.width,
        document.height,
        len(document.groups),
    )
    return document
