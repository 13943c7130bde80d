"""Command-line entry points.

    contourmap <input_path> <output_path> <thread_count>
    contourmap-tiles <directory> [--size N]
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading

from dotenv import load_dotenv
from PIL import Image, UnidentifiedImageError

from contourmap.config import settings
from contourmap.engine.pipeline import process_file
from contourmap.engine.worker import WorkerError
from contourmap.imaging.tiles import write_default_tiles

load_dotenv()

logger = logging.getLogger("contourmap")


def _setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.contourmap_log_level.upper(), logging.INFO),
        format="%(asctime)s %(threadName)s %(name)s %(levelname)s %(message)s",
    )


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with status 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"thread count must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="contourmap",
        description="Stamp marching-squares contours onto an image using a fixed pool of threads.",
    )
    parser.add_argument("input_path", help="source image (PPM or any format Pillow reads)")
    parser.add_argument("output_path", help="binary PPM to write")
    parser.add_argument("thread_count", type=_positive_int, help="number of worker threads")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging()

    try:
        summary = process_file(
            args.input_path,
            args.output_path,
            args.thread_count,
            tile_dir=settings.contourmap_contour_dir,
            tile_ext=settings.contourmap_contour_ext,
        )
    except MemoryError:
        logger.error("Unable to allocate memory")
        return 1
    except threading.BrokenBarrierError as e:
        logger.error("Barrier failure: %s", e)
        return 1
    except WorkerError as e:
        logger.error("%s", e)
        return 1
    except RuntimeError as e:
        # Thread creation or join
        logger.error("Error running worker threads: %s", e)
        return 1
    except Image.DecompressionBombError as e:
        # Pixel limit re-enabled by an embedding caller
        logger.error("Refusing oversized input: %s", e)
        return 1
    except (OSError, UnidentifiedImageError, ValueError) as e:
        logger.error("%s", e)
        return 1

    logger.info(
        "Done: %s mode, %d workers, %.0fms", summary.mode.value, summary.workers, summary.processing_time_ms
    )
    logger.debug("Run summary: %s", summary.model_dump_json())
    return 0


def tiles_main(argv: list[str] | None = None) -> int:
    parser = _ArgumentParser(
        prog="contourmap-tiles",
        description="Write the default 16 marching-squares contour tiles.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=settings.contourmap_contour_dir,
        help="target directory (default: %(default)s)",
    )
    parser.add_argument("--size", type=_positive_int, default=8, help="tile edge in pixels")
    args = parser.parse_args(argv)
    _setup_logging()

    try:
        write_default_tiles(args.directory, args.size, settings.contourmap_contour_ext)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
