"""Pipeline orchestrator — runs the stage plan of a mode on a fixed pool of threads."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import threading
import time
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from contourmap.engine.config import PipelineConfig
from contourmap.engine.context import Mode, PipelineContext, Resampler
from contourmap.engine.partition import Partition
from contourmap.engine.registry import StageRegistry, StageSpec, get_registry
from contourmap.engine.worker import Worker, WorkerError
from contourmap.imaging.ppm import read_image, write_image
from contourmap.imaging.tiles import ContourTileSet
from contourmap.models.summary import RunSummary

logger = logging.getLogger(__name__)


def register_stages() -> None:
    """Import every stage module so the @stage decorators fire."""
    package = importlib.import_module("contourmap.engine.stages")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"contourmap.engine.stages.{module_name}")


class Pipeline:
    """Orchestrates one contour run across ``workers`` threads."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        if registry is None:
            register_stages()
        self.registry = registry or get_registry()
        self.config = config or PipelineConfig()

    def prepare(
        self,
        source: NDArray[np.uint8],
        tiles: ContourTileSet,
        resampler: Resampler | None = None,
    ) -> PipelineContext:
        """Allocate the run's buffers and pick DIRECT or RESCALED."""
        ctx = PipelineContext.prepare(source, tiles, self.config, resampler)
        p, q = ctx.grid_extent
        logger.info(
            "Source %dx%d: %s mode, grid %dx%d",
            source.shape[1],
            source.shape[0],
            ctx.mode.value,
            q + 1,
            p + 1,
        )
        return ctx

    def run(self, ctx: PipelineContext, workers: int) -> PipelineContext:
        """Run the plan of ``ctx.mode`` on exactly ``workers`` threads.

        Threads are created once and joined once. If any worker raises, the
        barrier is aborted so its peers stop too, and a WorkerError is raised
        after every thread has been joined.
        """
        if workers < 1:
            raise ValueError(f"workers must be a positive integer, got {workers}")

        plan = self.registry.plan(ctx.mode)
        logger.info(
            "Pipeline: %d workers, plan %s",
            workers,
            " -> ".join(spec.id for spec in plan),
        )

        start = time.perf_counter()
        barrier = threading.Barrier(workers)
        pool = [Worker(Partition(i, workers), barrier) for i in range(workers)]
        ctx.completed_stages = {w.id: w.completed for w in pool}

        threads: list[threading.Thread] = []
        try:
            for worker in pool:
                thread = threading.Thread(
                    target=self._work,
                    args=(ctx, worker, plan),
                    name=f"contour-worker-{worker.id}",
                )
                thread.start()
                threads.append(thread)
        except RuntimeError:
            # Started peers would wait forever for the missing ones
            barrier.abort()
            logger.error("Could not start worker %d of %d", len(threads), workers)
            raise
        finally:
            for thread in threads:
                thread.join()

        failed = _root_failure(pool)
        if failed is not None and failed.error is not None:
            raise WorkerError(failed.id, failed.failed_stage, failed.error) from failed.error

        ctx.elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d stages x %d workers in %.0fms",
            len(plan),
            workers,
            ctx.elapsed_ms,
        )
        return ctx

    def process(
        self,
        source: NDArray[np.uint8],
        tiles: ContourTileSet,
        workers: int,
        resampler: Resampler | None = None,
    ) -> PipelineContext:
        """prepare() then run()."""
        ctx = self.prepare(source, tiles, resampler)
        return self.run(ctx, workers)

    @staticmethod
    def _work(ctx: PipelineContext, worker: Worker, plan: list[StageSpec]) -> None:
        for spec in plan:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx, worker)
            except Exception as e:
                worker.failed_stage = spec.id
                worker.error = e
                worker.barrier.abort()
                if not isinstance(e, threading.BrokenBarrierError):
                    logger.error("worker %d: %s FAILED: %s", worker.id, spec.id, e)
                return
            worker.completed.append(spec.id)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("worker %d: %s completed in %.1fms", worker.id, spec.id, elapsed)


def _root_failure(pool: list[Worker]) -> Worker | None:
    """The worker whose error caused the run to fail, if any.

    Peers released by an aborted barrier report BrokenBarrierError; the worker
    that raised something else is the one to blame.
    """
    failed = [w for w in pool if w.error is not None]
    if not failed:
        return None
    for worker in failed:
        if not isinstance(worker.error, threading.BrokenBarrierError):
            return worker
    return failed[0]


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    return Pipeline(config=config)


def summarize(ctx: PipelineContext, source: NDArray[np.uint8]) -> RunSummary:
    """Summary of a finished run. Call before the context is released."""
    h, w = ctx.active_image.shape[:2]
    p, q = ctx.grid_extent
    return RunSummary(
        mode=ctx.mode,
        workers=len(ctx.completed_stages),
        source_size=(source.shape[1], source.shape[0]),
        output_size=(w, h),
        grid_size=(q + 1, p + 1),
        processing_time_ms=round(ctx.elapsed_ms, 1),
        completed_stages={wid: list(stages) for wid, stages in ctx.completed_stages.items()},
    )


def process_file(
    input_path: str | Path,
    output_path: str | Path,
    workers: int,
    tile_dir: str | Path,
    tile_ext: str = "ppm",
    config: PipelineConfig | None = None,
) -> RunSummary:
    """Read, contour and write one image; returns a summary of the run.

    Both image buffers are released once the output is written, or when the
    run fails, whichever of them was the output.
    """
    if workers < 1:
        raise ValueError(f"workers must be a positive integer, got {workers}")

    source = read_image(input_path)
    tiles = ContourTileSet.load(tile_dir, tile_ext)
    pipeline = create_pipeline(config)
    ctx = pipeline.prepare(source, tiles)
    try:
        pipeline.run(ctx, workers)
        write_image(ctx.active_image, output_path)
        logger.info("Wrote %s (%s)", output_path, ctx.mode.value)
        return summarize(ctx, source)
    finally:
        ctx.release()
