"""Flatten a background ``LayerStack`` into one RGBA raster.

Layers are visited from the top of the stack down. The topmost layer seeds
the accumulator and each lower layer is slid *under* it with the Porter-Duff
"over" operator, so a pixel that has become fully opaque can ignore every
layer below it. The pass works on whole rasters: ``pending`` tracks which
pixels still need input from lower layers.
"""

import numpy as np

from level_baker.bake.layer_stack import LayerStack
from level_baker.bake.raster import new_raster
from level_baker.types import BoolArray, UInt8Array

OPAQUE = 255
TRANSPARENT = 0


def blend_over(fg: UInt8Array, bg: UInt8Array) -> UInt8Array:
    """Composite straight-alpha ``fg`` over ``bg``, both ``(..., 4)`` uint8.

    ``a = fa + ba * (1 - fa)`` and ``c = (fc * fa + bc * ba * (1 - fa)) / a``,
    rounded to the nearest integer.
    """
    f = fg.astype(np.float64) / 255.0
    b = bg.astype(np.float64) / 255.0
    fa = f[..., 3:4]
    ba = b[..., 3:4]

    out_a = fa + ba * (1.0 - fa)
    premultiplied = f[..., :3] * fa + b[..., :3] * ba * (1.0 - fa)
    # Both inputs transparent: colour is irrelevant, keep it at zero
    safe_a = np.where(out_a == 0.0, 1.0, out_a)
    out_rgb = premultiplied / safe_a

    out = np.concatenate([out_rgb, out_a], axis=-1) * 255.0
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def composite(stack: LayerStack) -> UInt8Array:
    """Return the flattened ``(height, width, 4)`` image of ``stack``.

    An empty stack yields a fully transparent raster.
    """
    out = new_raster(stack.width, stack.height, 4)
    if len(stack) == 0:
        return out

    top_down = stack.buffers[::-1]
    out[...] = top_down[0]
    pending: BoolArray = out[..., 3] != OPAQUE

    for buffer in top_down[1:]:
        active = pending & (buffer[..., 3] != TRANSPARENT)
        if not active.any():
            continue
        out[active] = blend_over(out[active], buffer[active])
        pending &= out[..., 3] != OPAQUE
        if not pending.any():
            break

    return out
