"""Read-side view of a baked collision raster.

Game code treats the collision image as a point-collision map: a pixel whose
gate (alpha) is zero is open ground outside any area, a gated pixel with
rank 0 is blocked, and a gated pixel with a non-zero rank belongs to an
area. WebP has no luma+alpha mode, so a legacy ``luma_alpha`` raster comes
back from disk as RGBA with the rank repeated in R, G and B; ``layout`` says
which reading to apply.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from level_baker.bake.areas import AreaCell
from level_baker.bake.raster import GATE_OPEN, layout_of
from level_baker.types import RasterLayout, UInt8Array


@dataclass(frozen=True, eq=False)
class CollisionMask:
    pixels: UInt8Array
    layout: RasterLayout = RasterLayout.RGBA

    @classmethod
    def open(cls, path: Path, layout: RasterLayout = RasterLayout.RGBA) -> CollisionMask:
        with Image.open(path) as image:
            pixels: UInt8Array = np.array(image.convert("RGBA"), dtype=np.uint8)
        return cls(pixels=pixels, layout=layout)

    @classmethod
    def from_raster(cls, raster: UInt8Array) -> CollisionMask:
        """Wrap an in-memory raster straight from the bake passes."""
        return cls(pixels=raster, layout=layout_of(raster))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def _pixel(self, x: int, y: int) -> Tuple[int, ...]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"Out of bounds: {(x, y)} for mask {self.width}x{self.height}"
            )
        pixel = self.pixels[y, x]
        if self.layout is RasterLayout.LUMA_ALPHA:
            return (int(pixel[0]), int(pixel[-1]))
        return tuple(int(channel) for channel in pixel)

    def is_blocked(self, x: int, y: int) -> bool:
        pixel = self._pixel(x, y)
        return pixel[-1] != GATE_OPEN and pixel[0] == 0

    def area_at(self, x: int, y: int) -> AreaCell:
        return AreaCell.decode(self._pixel(x, y))
