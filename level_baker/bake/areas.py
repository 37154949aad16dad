"""Resolve which area layer covers each walkable pixel.

Area layers are ranked by their stored (bottom-to-top) position, starting at
1; rank 0 means "no area". The topmost layer with a non-transparent pixel
wins. Pixels already claimed by the occupancy pass keep their blocked value.

The winner is packed into the collision raster by :class:`AreaCell`:

* ``rgba``:       ``(rank, area tag, 0, 255)``
* ``luma_alpha``: ``(rank, 255)``, the legacy form without an area tag
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from level_baker.bake.layer_stack import LayerStack
from level_baker.bake.raster import (
    GATE_OPEN,
    GATE_SET,
    LAYOUT_CHANNELS,
    gate_is_set,
    layout_of,
)
from level_baker.errors import TooManyAreaLayersError, UnknownAreaTypeError
from level_baker.types import (
    AREA_TYPE_TAGS,
    TAG_AREA_TYPES,
    AreaType,
    RasterLayout,
    UInt8Array,
)

# One byte per rank, with 255 kept out of range
MAX_AREA_RANK = 254


@dataclass(frozen=True)
class AreaCell:
    """Decoded content of one collision-raster pixel.

    Attributes:
        rank: 1-based rank of the covering area layer, 0 for none.
        area_type: Area kind of that layer; ``None`` when ``rank`` is 0 or the
            layout does not store it.
    """

    rank: int = 0
    area_type: Optional[AreaType] = None

    def encode(self, layout: RasterLayout = RasterLayout.RGBA) -> Tuple[int, ...]:
        if not 0 <= self.rank <= MAX_AREA_RANK:
            raise ValueError(f"Area rank {self.rank} outside 0..{MAX_AREA_RANK}")
        if self.rank == 0:
            return (0,) * LAYOUT_CHANNELS[layout]
        if layout is RasterLayout.LUMA_ALPHA:
            return (self.rank, GATE_SET)
        if self.area_type is None:
            raise ValueError(f"Area rank {self.rank} needs an area type")
        return (self.rank, AREA_TYPE_TAGS[self.area_type], 0, GATE_SET)

    @classmethod
    def decode(cls, pixel: Sequence[int]) -> AreaCell:
        """Decode a 2- or 4-channel pixel; blocked and unset pixels give rank 0."""
        if pixel[-1] == GATE_OPEN or pixel[0] == 0:
            return cls()
        if len(pixel) == LAYOUT_CHANNELS[RasterLayout.LUMA_ALPHA]:
            return cls(rank=int(pixel[0]))
        tag = int(pixel[1])
        if tag not in TAG_AREA_TYPES:
            raise ValueError(f"Unknown area tag {tag}")
        return cls(rank=int(pixel[0]), area_type=TAG_AREA_TYPES[tag])


def resolve_area_types(names: Sequence[str]) -> List[AreaType]:
    """Map area layer names onto ``AreaType`` by exact match.

    Raises:
        UnknownAreaTypeError: On the first name that is not an area type.
    """
    area_types: List[AreaType] = []
    for name in names:
        try:
            area_types.append(AreaType(name))
        except ValueError:
            raise UnknownAreaTypeError(name) from None
    return area_types


def check_area_layer_count(count: int) -> None:
    if count > MAX_AREA_RANK:
        raise TooManyAreaLayersError(count, MAX_AREA_RANK)


def resolve_areas(
    raster: UInt8Array,
    stack: LayerStack,
    area_types: Sequence[AreaType],
) -> UInt8Array:
    """Write the winning area of every unclaimed pixel into ``raster``.

    ``raster`` is the output of the occupancy pass and is updated in place.

    Raises:
        TooManyAreaLayersError: If ``stack`` holds more than 254 layers.
    """
    check_area_layer_count(len(stack))
    if len(area_types) != len(stack):
        raise ValueError(
            f"{len(area_types)} area types given for {len(stack)} area layers"
        )

    layout = layout_of(raster)
    unclaimed = ~gate_is_set(raster)
    for index in range(len(stack) - 1, -1, -1):
        if not unclaimed.any():
            break
        hit = unclaimed & (stack.buffers[index][..., 3] > 0)
        if not hit.any():
            continue
        raster[hit] = AreaCell(rank=index + 1, area_type=area_types[index]).encode(
            layout
        )
        unclaimed &= ~hit
    return raster
