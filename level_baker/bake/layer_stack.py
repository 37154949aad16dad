"""Visibility-filtered stacks of same-size layer buffers.

Which layers of a group take part in a bake depends on the group's role.
The raw visibility flag reported for walls and background layers is the
complement of what an editor shows, while area layers are read at face
value, so the predicate is chosen per role from ``ROLE_VISIBILITY``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence

import numpy as np
from pyrsistent import pmap
from pyrsistent.typing import PMap

from level_baker.document.model import Layer
from level_baker.errors import LayerShapeError
from level_baker.types import GroupRole, UInt8Array

VisibilityPredicate = Callable[[Layer], bool]


def raw_flag_cleared(layer: Layer) -> bool:
    return not layer.visible


def raw_flag_set(layer: Layer) -> bool:
    return layer.visible


ROLE_VISIBILITY: PMap[GroupRole, VisibilityPredicate] = pmap(
    {
        GroupRole.WALLS: raw_flag_cleared,
        GroupRole.AREAS: raw_flag_set,
        GroupRole.BACKGROUND: raw_flag_cleared,
    }
)


@dataclass(frozen=True, eq=False)
class LayerStack:
    """Ordered (bottom-to-top) RGBA buffers of one group.

    Attributes:
        width: Document width shared by every buffer.
        height: Document height shared by every buffer.
        names: Layer names, parallel to ``buffers``.
        buffers: ``(height, width, 4)`` uint8 arrays, read only.
    """

    width: int
    height: int
    names: List[str]
    buffers: List[UInt8Array]

    def __len__(self) -> int:
        return len(self.buffers)

    def alpha(self) -> UInt8Array:
        """Alpha planes stacked into a ``(len, height, width)`` array."""
        if not self.buffers:
            return np.zeros((0, self.height, self.width), dtype=np.uint8)
        return np.stack([buffer[..., 3] for buffer in self.buffers])


def build_layer_stack(
    layers: Sequence[Layer],
    predicate: VisibilityPredicate,
    width: int,
    height: int,
) -> LayerStack:
    """Keep the layers for which ``predicate`` holds, preserving order.

    Raises:
        LayerShapeError: If a kept layer's buffer is not ``(height, width, 4)``.
    """
    expected = (height, width, 4)
    names: List[str] = []
    buffers: List[UInt8Array] = []
    for layer in layers:
        if not predicate(layer):
            continue
        if layer.pixels.shape != expected:
            raise LayerShapeError(layer.name, layer.pixels.shape, expected)
        names.append(layer.name)
        buffers.append(layer.pixels.astype(np.uint8, copy=False))
    return LayerStack(width=width, height=height, names=names, buffers=buffers)


def build_role_stack(
    layers: Sequence[Layer], role: GroupRole, width: int, height: int
) -> LayerStack:
    return build_layer_stack(layers, ROLE_VISIBILITY[role], width, height)
