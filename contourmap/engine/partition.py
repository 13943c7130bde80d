"""Work partitioning — one formula for every partitioned loop.

Worker ``id`` of ``workers`` owns the half-open range

    [floor(id * N / workers), min(floor((id + 1) * N / workers), N))

of an index space of extent ``N``. Rescale rows, grid rows, last-row grid
columns and stamping rows all go through :func:`partition_range`, so two
loops over the same extent can never disagree about ownership.
"""

from __future__ import annotations

from dataclasses import dataclass


def partition_range(worker_id: int, workers: int, extent: int) -> range:
    """Indices of ``[0, extent)`` owned by ``worker_id``.

    Empty when there are more workers than elements to share.
    """
    if workers < 1:
        raise ValueError(f"workers must be positive, got {workers}")
    if not 0 <= worker_id < workers:
        raise ValueError(f"worker_id {worker_id} outside [0, {workers})")
    if extent < 0:
        raise ValueError(f"extent must be non-negative, got {extent}")

    start = worker_id * extent // workers
    end = min((worker_id + 1) * extent // workers, extent)
    return range(start, end)


@dataclass(frozen=True)
class Partition:
    """Immutable descriptor handed to a worker: who it is and how many peers."""

    id: int
    workers: int

    def __post_init__(self) -> None:
        partition_range(self.id, self.workers, 0)

    def range(self, extent: int) -> range:
        return partition_range(self.id, self.workers, extent)
