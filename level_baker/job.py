"""Bake one layered document into its level assets.

``bake_document`` runs the whole job for one file and never raises for
per-document problems: every ``BakeError`` or ``OSError`` is logged and
collected into the returned :class:`DocumentReport`. The two output branches
(background, and walls followed by areas) run on a two-thread pool and fail
independently.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional

from level_baker.bake import (
    BACKGROUND_FILE_NAME,
    COLLISIONS_FILE_NAME,
    build_role_stack,
    check_area_layer_count,
    composite,
    rasterize_occupancy,
    resolve_area_types,
    resolve_areas,
    save_raster,
)
from level_baker.config import LevelConfig
from level_baker.document import Document, locate_group
from level_baker.document.psd import read_document
from level_baker.errors import BakeError, MissingLevelConfigError
from level_baker.types import GroupRole, LevelName, UInt8Array

DocumentReader = Callable[[Path], Document]

logger = logging.getLogger(__name__)


@dataclass
class DocumentReport:
    """Outcome of one document job.

    Attributes:
        path: Source document.
        written: Output files successfully written.
        errors: Human-readable failure messages, one per failed step.
    """

    path: Path
    written: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def fail(self, exc: BaseException) -> None:
        message = f"{self.path}: {exc}"
        logger.error("%s", message)
        self.errors.append(message)


def level_name_for(path: Path) -> LevelName:
    """Level name of a document: its file name without extension."""
    return path.stem


def output_dir_for(path: Path) -> Path:
    return path.with_suffix("")


def lookup_level_config(
    level_configs: Mapping[LevelName, LevelConfig], level_name: LevelName
) -> LevelConfig:
    config: Optional[LevelConfig] = level_configs.get(level_name)
    if config is None:
        raise MissingLevelConfigError(level_name)
    return config


def bake_background(document: Document) -> UInt8Array:
    group_id = locate_group(document, GroupRole.BACKGROUND)
    stack = build_role_stack(
        document.get_group_sub_layers(group_id),
        GroupRole.BACKGROUND,
        document.width,
        document.height,
    )
    return composite(stack)


def bake_collisions(document: Document, config: LevelConfig) -> UInt8Array:
    """Occupancy pass followed by the area pass over the same raster.

    Raises:
        UnknownAreaTypeError: If an area layer name is not an ``AreaType``.
        TooManyAreaLayersError: If more than 254 area layers are eligible.
    """
    walls_id = locate_group(document, GroupRole.WALLS)
    areas_id = locate_group(document, GroupRole.AREAS)
    walls = build_role_stack(
        document.get_group_sub_layers(walls_id),
        GroupRole.WALLS,
        document.width,
        document.height,
    )
    raster = rasterize_occupancy(
        walls,
        config.character_half_width,
        config.character_half_height,
        config.collision_layout,
    )
    del walls

    areas = build_role_stack(
        document.get_group_sub_layers(areas_id),
        GroupRole.AREAS,
        document.width,
        document.height,
    )
    check_area_layer_count(len(areas))
    area_types = resolve_area_types(areas.names)
    return resolve_areas(raster, areas, area_types)


def _run_branch(
    report: DocumentReport, label: str, bake: Callable[[], UInt8Array], target: Path
) -> None:
    try:
        raster = bake()
        report.written.append(save_raster(raster, target))
    except (BakeError, OSError) as exc:
        report.fail(exc)
        return
    logger.debug("%s: %s written to %s", report.path, label, target)


def bake_document(
    path: Path,
    level_configs: Mapping[LevelName, LevelConfig],
    reader: Optional[DocumentReader] = None,
) -> DocumentReport:
    """Bake ``path`` into ``<stem>/background.webp`` and ``<stem>/collisions.webp``.

    Arguments:
        path: Layered document to bake.
        level_configs: Per-level footprint parameters, keyed by level name.
        reader: Document loader; defaults to :func:`read_document`.

    Returns:
        DocumentReport: Files written and errors met. Never raises for
        failures scoped to this document.
    """
    report = DocumentReport(path=path)
    level_name = level_name_for(path)
    try:
        config = lookup_level_config(level_configs, level_name)
        document = (reader or read_document)(path)
        folder = output_dir_for(path)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BakeError(f"Error creating folder {str(folder)!r}: {exc}") from exc
        for role in GroupRole:
            locate_group(document, role)
    except BakeError as exc:
        report.fail(exc)
        return report

    logger.info("Baking %s (%dx%d)", path, document.width, document.height)
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix=level_name) as pool:
        background = pool.submit(
            _run_branch,
            report,
            "background",
            lambda: bake_background(document),
            folder / BACKGROUND_FILE_NAME,
        )
        collisions = pool.submit(
            _run_branch,
            report,
            "collisions",
            lambda: bake_collisions(document, config),
            folder / COLLISIONS_FILE_NAME,
        )
        background.result()
        collisions.result()

    return report
