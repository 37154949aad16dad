"""Raster allocation, collision layouts and encoding to disk.

A raster is a ``(height, width, channels)`` uint8 numpy array, zero filled
on creation. The collision raster is shared by the occupancy and area
passes; both agree that the *last* channel (the gate) is non-zero once a
pixel has been claimed, either as blocked or as part of an area.
"""

import logging
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image
from pyrsistent import pmap
from pyrsistent.typing import PMap

from level_baker.errors import OutputWriteError
from level_baker.types import BoolArray, RasterLayout, UInt8Array

GATE_OPEN = 0
GATE_SET = 255

OUTPUT_EXTENSION = "webp"
BACKGROUND_FILE_NAME = f"background.{OUTPUT_EXTENSION}"
COLLISIONS_FILE_NAME = f"collisions.{OUTPUT_EXTENSION}"

LAYOUT_CHANNELS: PMap[RasterLayout, int] = pmap(
    {
        RasterLayout.RGBA: 4,
        RasterLayout.LUMA_ALPHA: 2,
    }
)

LAYOUT_PIL_MODES: PMap[RasterLayout, str] = pmap(
    {
        RasterLayout.RGBA: "RGBA",
        RasterLayout.LUMA_ALPHA: "LA",
    }
)

logger = logging.getLogger(__name__)


def new_raster(width: int, height: int, channels: int) -> UInt8Array:
    return np.zeros((height, width, channels), dtype=np.uint8)


def new_collision_raster(width: int, height: int, layout: RasterLayout) -> UInt8Array:
    return new_raster(width, height, LAYOUT_CHANNELS[layout])


def blocked_value(layout: RasterLayout) -> Tuple[int, ...]:
    """Pixel value written for a blocked pixel: rank 0 with the gate set."""
    channels = LAYOUT_CHANNELS[layout]
    return (0,) * (channels - 1) + (GATE_SET,)


def gate_is_set(raster: UInt8Array) -> BoolArray:
    """Mask of pixels already claimed by the occupancy or area pass."""
    return raster[..., -1] != GATE_OPEN


def layout_of(raster: UInt8Array) -> RasterLayout:
    for layout, channels in LAYOUT_CHANNELS.items():
        if raster.shape[-1] == channels:
            return layout
    raise ValueError(f"No collision layout with {raster.shape[-1]} channels")


def save_raster(raster: UInt8Array, path: Path) -> Path:
    """Encode ``raster`` losslessly to ``path``.

    Two-channel rasters are written as luma+alpha, four-channel ones as RGBA.
    Lossless WebP is required: the collision raster stores exact integers.

    Raises:
        OutputWriteError: If Pillow cannot encode or write the file.
    """
    mode = LAYOUT_PIL_MODES[layout_of(raster)]
    try:
        image = Image.fromarray(np.ascontiguousarray(raster))
        image.save(path, lossless=True, exact=True)
    except (OSError, ValueError) as exc:
        raise OutputWriteError(path, exc) from exc
    logger.debug("Wrote %s (%s, %dx%d)", path, mode, raster.shape[1], raster.shape[0])
    return path
