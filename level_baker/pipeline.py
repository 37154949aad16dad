"""Discover documents in a working directory and bake them all.

Documents are independent: they are spread over a process pool and each one
comes back as a :class:`level_baker.job.DocumentReport`. A failing document
only shows up in the summary.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from level_baker.config import LEVELS_FILE_NAME, LevelConfig, load_level_configs
from level_baker.document.psd import DOCUMENT_EXTENSION
from level_baker.job import DocumentReport, bake_document
from level_baker.types import LevelName

logger = logging.getLogger(__name__)


@dataclass
class BakeSummary:
    reports: List[DocumentReport] = field(default_factory=list)

    @property
    def baked(self) -> int:
        return sum(1 for report in self.reports if report.ok)

    @property
    def failed(self) -> int:
        return len(self.reports) - self.baked


def discover_documents(working_dir: Path) -> List[Path]:
    """Layered documents directly inside ``working_dir``, sorted by name.

    Raises:
        OSError: If the directory cannot be listed.
    """
    return sorted(
        entry
        for entry in working_dir.iterdir()
        if entry.is_file() and entry.suffix.lower() == DOCUMENT_EXTENSION
    )


def default_workers() -> int:
    return max(1, os.cpu_count() or 1)


def bake_one(
    path: Path, level_configs: Mapping[LevelName, LevelConfig]
) -> DocumentReport:
    """Run one document job, turning unexpected failures into a report."""
    try:
        return bake_document(path, level_configs)
    except Exception as exc:  # noqa: BLE001 - one document never stops the run
        report = DocumentReport(path=path)
        report.fail(exc)
        return report


def bake_documents(
    paths: List[Path],
    level_configs: Mapping[LevelName, LevelConfig],
    workers: Optional[int] = None,
) -> BakeSummary:
    """Bake every path, in parallel when ``workers`` is greater than one."""
    workers = default_workers() if workers is None else max(1, workers)
    summary = BakeSummary()
    if not paths:
        return summary

    if workers == 1 or len(paths) == 1:
        for path in paths:
            summary.reports.append(bake_one(path, level_configs))
        return summary

    job = partial(bake_one, level_configs=level_configs)
    logger.info("Using %d worker process(es).", workers)
    with ProcessPoolExecutor(max_workers=min(workers, len(paths))) as pool:
        futures: Dict[Future[DocumentReport], Path] = {
            pool.submit(job, path): path for path in paths
        }
        for future in as_completed(futures):
            path = futures[future]
            try:
                summary.reports.append(future.result())
            except Exception as exc:  # noqa: BLE001 - a crashed worker only fails its document
                report = DocumentReport(path=path)
                report.fail(exc)
                summary.reports.append(report)
    summary.reports.sort(key=lambda report: report.path)
    return summary


def run(working_dir: Path, workers: Optional[int] = None) -> BakeSummary:
    """Load ``levels.toml`` from ``working_dir`` and bake every document in it.

    Raises:
        ConfigError: If ``levels.toml`` is missing or invalid.
        OSError: If ``working_dir`` cannot be listed.
    """
    level_configs = load_level_configs(working_dir / LEVELS_FILE_NAME)
    logger.debug("Loaded %d level config(s)", len(level_configs))
    paths = discover_documents(working_dir)
    logger.info("Found %d document(s) in %s", len(paths), working_dir)
    summary = bake_documents(paths, level_configs, workers)
    logger.info("Done! %d baked, %d failed", summary.baked, summary.failed)
    return summary
