"""Stage registry — every pipeline stage is a function registered via decorator.

Usage:
    @stage(id="sample", modes={Mode.DIRECT, Mode.RESCALED}, dependencies=["rescale_barrier"])
    def sample(ctx: PipelineContext, worker: Worker) -> None:
        for i in worker.partition.range(p):
            ...

A stage runs once per worker thread. Each mode gets its own fixed plan: the
stages registered for that mode, ordered by their dependencies. Dependencies on
stages outside the plan are ignored, so DIRECT can skip the rescale stages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from contourmap.engine.context import Mode

if TYPE_CHECKING:
    from contourmap.engine.context import PipelineContext
    from contourmap.engine.worker import Worker

logger = logging.getLogger(__name__)

StageFn = Callable[["PipelineContext", "Worker"], None]


@dataclass
class StageSpec:
    id: str
    fn: StageFn
    modes: frozenset[Mode] = frozenset(Mode)
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    """Registry of all stages, module-level singleton by default."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug(
            "Registered stage %s (%s)",
            spec.id,
            ", ".join(sorted(m.value for m in spec.modes)),
        )

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: s.id)

    def plan(self, mode: Mode) -> list[StageSpec]:
        """Stages of ``mode`` in dependency order (Kahn's algorithm, ties by id)."""
        pool = {sid: spec for sid, spec in self._stages.items() if mode in spec.modes}

        in_degree: dict[str, int] = {sid: 0 for sid in pool}
        for sid, spec in pool.items():
            for dep in spec.dependencies:
                if dep in pool:
                    in_degree[sid] += 1

        queue = sorted(sid for sid, d in in_degree.items() if d == 0)
        ordered: list[StageSpec] = []

        while queue:
            sid = queue.pop(0)
            ordered.append(pool[sid])
            for other_id, other_spec in pool.items():
                if sid in other_spec.dependencies:
                    in_degree[other_id] -= 1
                    if in_degree[other_id] == 0:
                        queue.append(other_id)
                        queue.sort()

        if len(ordered) != len(pool):
            missing = set(pool) - {s.id for s in ordered}
            raise ValueError(f"Circular dependency detected among: {missing}")

        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    modes: set[Mode] | frozenset[Mode] | None = None,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: StageFn):
        spec = StageSpec(
            id=id,
            fn=fn,
            modes=frozenset(modes) if modes is not None else frozenset(Mode),
            dependencies=dependencies or [],
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
