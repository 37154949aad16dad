"""Format-agnostic layered document model.

A ``Document`` is what the bake engine consumes: ordered top-level groups,
each holding ordered layers whose pixels already cover the full document
rectangle. Readers for concrete container formats (see
:mod:`level_baker.document.psd`) build these objects; tests build them
directly from numpy arrays.

Layer order inside a group is bottom-to-top, the order layers are stored in
the container.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from level_baker.types import UInt8Array


@dataclass(frozen=True, eq=False)
class Layer:
    """A single image plane.

    Attributes:
        name: Layer name as authored.
        visible: Raw visibility flag as reported by the container reader. For
            walls and background this is the complement of what an editor
            shows; see :data:`level_baker.bake.layer_stack.ROLE_VISIBILITY`.
        pixels: ``(height, width, 4)`` uint8 RGBA buffer.
    """

    name: str
    visible: bool
    pixels: UInt8Array


@dataclass(frozen=True, eq=False)
class Group:
    group_id: int
    name: str
    layers: List[Layer] = field(default_factory=list)


@dataclass(frozen=True, eq=False)
class Document:
    width: int
    height: int
    groups: List[Group] = field(default_factory=list)

    def group_ids_in_order(self) -> List[int]:
        """Return the ids of the top-level groups in container order."""
        return [group.group_id for group in self.groups]

    def get_group_sub_layers(self, group_id: int) -> List[Layer]:
        """Return the layers of ``group_id`` bottom-to-top.

        Raises:
            KeyError: If no group carries that id.
        """
        for group in self.groups:
            if group.group_id == group_id:
                return list(group.layers)
        raise KeyError(f"No group with id {group_id}")
