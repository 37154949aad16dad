"""Per-pixel derivation engine.

Three passes turn layer stacks into output rasters:

* :func:`composite`: background image from the background group.
* :func:`rasterize_occupancy`: blocked pixels from the walls group, dilated
  by the character footprint.
* :func:`resolve_areas`: area rank and type for every unblocked pixel, from
  the areas group, written into the occupancy raster in place.
"""

from .areas import (
    MAX_AREA_RANK,
    AreaCell,
    check_area_layer_count,
    resolve_area_types,
    resolve_areas,
)
from .compositor import blend_over, composite
from .layer_stack import (
    ROLE_VISIBILITY,
    LayerStack,
    build_layer_stack,
    build_role_stack,
)
from .occupancy import occupancy_mask, rasterize_occupancy
from .raster import (
    BACKGROUND_FILE_NAME,
    COLLISIONS_FILE_NAME,
    blocked_value,
    gate_is_set,
    new_collision_raster,
    save_raster,
)

__all__ = [
    "MAX_AREA_RANK",
    "AreaCell",
    "check_area_layer_count",
    "resolve_area_types",
    "resolve_areas",
    "blend_over",
    "composite",
    "ROLE_VISIBILITY",
    "LayerStack",
    "build_layer_stack",
    "build_role_stack",
    "occupancy_mask",
    "rasterize_occupancy",
    "BACKGROUND_FILE_NAME",
    "COLLISIONS_FILE_NAME",
    "blocked_value",
    "gate_is_set",
    "new_collision_raster",
    "save_raster",
]
