"""Common type aliases and enumerations.

``AreaType`` is the closed set of level-area kinds a baked collision mask can
report. Layer names in the areas group must match one of the member values
exactly; the small integer tag written into the mask comes from
``AREA_TYPE_TAGS``.
"""

from enum import StrEnum, auto

import numpy as np
import numpy.typing as npt
from pyrsistent import pmap
from pyrsistent.typing import PMap

# Type aliases for clarity
UInt8Array = npt.NDArray[np.uint8]
BoolArray = npt.NDArray[np.bool_]

LevelName = str


class AreaType(StrEnum):
    """Semantic area classification, matched against area layer names."""

    DINING_AREA = "DiningArea"
    KITCHEN = "Kitchen"
    BEDROOM = "Bedroom"
    BATHROOM = "Bathroom"
    JAIL = "Jail"
    CRYPT = "Crypt"


AREA_TYPE_TAGS: PMap[AreaType, int] = pmap(
    {
        AreaType.DINING_AREA: 0,
        AreaType.KITCHEN: 1,
        AreaType.BEDROOM: 2,
        AreaType.BATHROOM: 3,
        AreaType.JAIL: 4,
        AreaType.CRYPT: 5,
    }
)

TAG_AREA_TYPES: PMap[int, AreaType] = pmap(
    {tag: area_type for area_type, tag in AREA_TYPE_TAGS.items()}
)


class GroupRole(StrEnum):
    """Semantic role of a top-level document group."""

    WALLS = auto()
    AREAS = auto()
    BACKGROUND = auto()


class RasterLayout(StrEnum):
    """Channel layout of the baked collision raster.

    ``RGBA`` stores ``(rank, area tag, 0, gate)``; ``LUMA_ALPHA`` is the
    legacy two-channel form ``(rank, gate)`` with no area tag.
    """

    RGBA = "rgba"
    LUMA_ALPHA = "luma_alpha"
