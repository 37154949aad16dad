"""Command line entry point.

Usage::

    level-baker [WORKING_DIR]

``WORKING_DIR`` defaults to ``static/levels``. The exit status is non-zero
only when the run cannot start (bad working directory or ``levels.toml``);
documents that fail are reported on stderr and do not change it.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from level_baker.errors import ConfigError
from level_baker.pipeline import run

DEFAULT_WORKING_DIR = Path("static/levels")

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="level-baker",
        description=(
            "Bake layered level documents into background and collision rasters."
        ),
    )
    parser.add_argument(
        "working_dir",
        nargs="?",
        type=Path,
        default=DEFAULT_WORKING_DIR,
        help=f"Directory holding levels.toml and the documents (default: {DEFAULT_WORKING_DIR}).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    working_dir: Path = args.working_dir
    if not working_dir.is_dir():
        logger.error("Working directory does not exist: %s", working_dir)
        return 1

    try:
        run(working_dir.resolve())
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Cannot read working directory %s: %s", working_dir, exc)
        return 1
    return 0
