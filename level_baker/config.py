"""Per-level configuration loaded from ``levels.toml``.

Each top-level table names a level (the document's file stem) and carries the
half extents of the movable character's footprint::

    [mansion]
    character_half_width = 12
    character_half_height = 6
    collision_layout = "rgba"   # optional, or "luma_alpha"
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from pyrsistent import pmap
from pyrsistent.typing import PMap

from level_baker.errors import ConfigError
from level_baker.types import LevelName, RasterLayout

LEVELS_FILE_NAME = "levels.toml"


@dataclass(frozen=True)
class LevelConfig:
    """Footprint parameters for one level.

    Attributes:
        character_half_width: Horizontal half extent of the character, in pixels.
        character_half_height: Vertical half extent of the character, in pixels.
        collision_layout: Channel layout used for the baked collision raster.
    """

    character_half_width: int
    character_half_height: int
    collision_layout: RasterLayout = RasterLayout.RGBA


def _read_extent(level_name: str, table: Mapping[str, Any], key: str) -> int:
    if key not in table:
        raise ConfigError(f"Level {level_name!r} is missing {key!r}")
    value = table[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"Level {level_name!r}: {key!r} must be an integer, got {value!r}"
        )
    if value < 0:
        raise ConfigError(f"Level {level_name!r}: {key!r} must be >= 0, got {value}")
    return value


def parse_level_config(level_name: str, table: Any) -> LevelConfig:
    """Validate one ``levels.toml`` table into a ``LevelConfig``."""
    if not isinstance(table, Mapping):
        raise ConfigError(f"Level {level_name!r} must be a table, got {table!r}")

    layout_name = table.get("collision_layout", RasterLayout.RGBA.value)
    try:
        layout = RasterLayout(layout_name)
    except ValueError:
        choices = ", ".join(layout.value for layout in RasterLayout)
        raise ConfigError(
            f"Level {level_name!r}: unknown collision_layout {layout_name!r} "
            f"(expected one of {choices})"
        ) from None

    return LevelConfig(
        character_half_width=_read_extent(level_name, table, "character_half_width"),
        character_half_height=_read_extent(
            level_name, table, "character_half_height"
        ),
        collision_layout=layout,
    )


def parse_level_configs(text: str) -> PMap[LevelName, LevelConfig]:
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed {LEVELS_FILE_NAME}: {exc}") from exc
    return pmap({name: parse_level_config(name, table) for name, table in raw.items()})


def load_level_configs(path: Path) -> PMap[LevelName, LevelConfig]:
    """Read and validate ``levels.toml``.

    Raises:
        ConfigError: If the file cannot be read or any entry is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Reading {str(path)!r}: {exc}") from exc
    return parse_level_configs(text)
