"""Dilate wall opacity by the character footprint.

A pixel is blocked when any wall layer has a non-transparent pixel inside the
window ``[y - half_h, y + half_h) x [x - half_w, x + half_w)`` around it,
clipped to the raster. The window is half open, so it spans ``2 * half``
pixels per axis and sits one pixel towards the low side of its center; a
zero half extent gives an empty window and blocks nothing.

Instead of scanning every window, the union of all wall alpha masks is turned
into a summed-area table and each window is answered with four lookups.
"""

import numpy as np

from level_baker.bake.layer_stack import LayerStack
from level_baker.bake.raster import blocked_value, new_collision_raster
from level_baker.types import BoolArray, RasterLayout, UInt8Array


def opaque_union(stack: LayerStack) -> BoolArray:
    """Pixels where at least one layer of ``stack`` has alpha > 0."""
    if len(stack) == 0:
        return np.zeros((stack.height, stack.width), dtype=np.bool_)
    return (stack.alpha() > 0).any(axis=0)


def window_any(mask: BoolArray, half_width: int, half_height: int) -> BoolArray:
    """For every pixel, whether ``mask`` is set anywhere in its window."""
    height, width = mask.shape
    if half_width <= 0 or half_height <= 0 or mask.size == 0:
        return np.zeros_like(mask, dtype=np.bool_)

    table = np.zeros((height + 1, width + 1), dtype=np.int64)
    table[1:, 1:] = mask.astype(np.int64).cumsum(axis=0).cumsum(axis=1)

    rows = np.arange(height)
    cols = np.arange(width)
    y0 = np.clip(rows - half_height, 0, height)
    y1 = np.clip(rows + half_height, 0, height)
    x0 = np.clip(cols - half_width, 0, width)
    x1 = np.clip(cols + half_width, 0, width)

    counts = (
        table[y1][:, x1] - table[y0][:, x1] - table[y1][:, x0] + table[y0][:, x0]
    )
    return counts > 0


def occupancy_mask(stack: LayerStack, half_width: int, half_height: int) -> BoolArray:
    return window_any(opaque_union(stack), half_width, half_height)


def rasterize_occupancy(
    stack: LayerStack,
    half_width: int,
    half_height: int,
    layout: RasterLayout = RasterLayout.RGBA,
) -> UInt8Array:
    """Build the collision raster with every blocked pixel marked.

    Unblocked pixels are left zeroed so the area pass can claim them.
    """
    raster = new_collision_raster(stack.width, stack.height, layout)
    blocked = occupancy_mask(stack, half_width, half_height)
    raster[blocked] = blocked_value(layout)
    return raster
