"""Layered document model and container readers.

:mod:`level_baker.document.model` defines the format-agnostic ``Document``
that the bake engine consumes; :mod:`level_baker.document.psd` builds one
from a Photoshop file through ``psd-tools``. ``locate_group`` isolates the
fixed group-position convention (walls, areas, background) in one place.
"""

from pyrsistent import pmap
from pyrsistent.typing import PMap

from level_baker.errors import MissingGroupError
from level_baker.types import GroupRole

from .model import Document, Group, Layer

GROUP_POSITIONS: PMap[GroupRole, int] = pmap(
    {
        GroupRole.WALLS: 0,
        GroupRole.AREAS: 1,
        GroupRole.BACKGROUND: 2,
    }
)


def locate_group(document: Document, role: GroupRole) -> int:
    """Return the id of the group that plays ``role`` in ``document``.

    Raises:
        MissingGroupError: If the document has no group at the role's position.
    """
    position = GROUP_POSITIONS[role]
    group_ids = document.group_ids_in_order()
    if position >= len(group_ids):
        raise MissingGroupError(role.value, position, len(group_ids))
    return group_ids[position]


__all__ = [
    "Document",
    "Group",
    "Layer",
    "GROUP_POSITIONS",
    "locate_group",
]
