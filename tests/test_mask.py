from pathlib import Path

import numpy as np
import pytest

from level_baker.bake import AreaCell, save_raster
from level_baker.mask import CollisionMask
from level_baker.types import AreaType, RasterLayout


def rgba_raster() -> np.ndarray:
    raster = np.zeros((2, 3, 4), dtype=np.uint8)
    raster[0, 0] = (0, 0, 0, 255)
    raster[0, 1] = AreaCell(4, AreaType.CRYPT).encode()
    return raster


def test_from_raster_reads_blocked_and_areas() -> None:
    mask = CollisionMask.from_raster(rgba_raster())
    assert (mask.width, mask.height) == (3, 2)
    assert mask.is_blocked(0, 0)
    assert not mask.is_blocked(1, 0)
    assert not mask.is_blocked(2, 1)
    assert mask.area_at(1, 0) == AreaCell(4, AreaType.CRYPT)
    assert mask.area_at(0, 0) == AreaCell()
    assert mask.area_at(2, 1) == AreaCell()


def test_out_of_bounds_sample() -> None:
    mask = CollisionMask.from_raster(rgba_raster())
    with pytest.raises(IndexError):
        mask.is_blocked(3, 0)
    with pytest.raises(IndexError):
        mask.area_at(0, -1)


def test_luma_alpha_raster() -> None:
    raster = np.zeros((1, 2, 2), dtype=np.uint8)
    raster[0, 0] = (0, 255)
    raster[0, 1] = (7, 255)
    mask = CollisionMask.from_raster(raster)
    assert mask.layout is RasterLayout.LUMA_ALPHA
    assert mask.is_blocked(0, 0)
    assert mask.area_at(1, 0) == AreaCell(rank=7)


def test_open_saved_raster(tmp_path: Path) -> None:
    path = save_raster(rgba_raster(), tmp_path / "collisions.webp")
    mask = CollisionMask.open(path)
    assert np.array_equal(mask.pixels, rgba_raster())
