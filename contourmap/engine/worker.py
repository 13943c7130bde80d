"""Per-thread worker state: its partition, the shared barrier, what it finished."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from contourmap.engine.partition import Partition


class WorkerError(RuntimeError):
    """A worker thread raised; the run produced no output."""

    def __init__(self, worker_id: int, stage_id: str, cause: BaseException) -> None:
        super().__init__(f"worker {worker_id} failed in stage {stage_id!r}: {cause}")
        self.worker_id = worker_id
        self.stage_id = stage_id
        self.cause = cause


@dataclass
class Worker:
    partition: Partition
    barrier: threading.Barrier
    completed: list[str] = field(default_factory=list)
    failed_stage: str = ""
    error: Exception | None = None

    @property
    def id(self) -> int:
        return self.partition.id

    def rendezvous(self) -> None:
        """Block until every worker of the run reaches the same point."""
        self.barrier.wait()
