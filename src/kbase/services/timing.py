"""Stage timings for ``--verbose`` output.

A service method wrapped in :func:`timed` reports how long it ran. Inside
it, :func:`stage` blocks record named steps (the index build's scan and
its two saves) together with counts the step produced. The report lands
in ``ServiceResult.meta["timing"]``.

Nothing is measured unless ``-v`` switched timing on, so the disabled
path costs one ``ContextVar.get`` per call.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec

import structlog

from kbase.services.result import ServiceResult

log = structlog.get_logger(__name__)

_enabled: ContextVar[bool] = ContextVar("kbase_timing_enabled", default=False)
_active: ContextVar[Timing | None] = ContextVar("kbase_timing_active", default=None)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


@dataclass
class Stage:
    """One timed step of an operation."""

    name: str
    elapsed_ms: float
    counts: dict[str, int] = field(default_factory=dict)


@dataclass
class Timing:
    """Wall-clock report for one service operation."""

    operation: str
    elapsed_ms: float = 0.0
    stages: list[Stage] = field(default_factory=list)

    def as_meta(self) -> dict[str, Any]:
        stages: list[dict[str, Any]] = []
        for step in self.stages:
            entry: dict[str, Any] = {"name": step.name, "elapsed_ms": step.elapsed_ms}
            if step.counts:
                entry["counts"] = dict(step.counts)
            stages.append(entry)
        return {"operation": self.operation, "elapsed_ms": self.elapsed_ms, "stages": stages}


def set_timing(enabled: bool) -> None:
    """Switch timing on or off for the current context (``-v`` turns it on)."""
    _enabled.set(enabled)


def timing_enabled() -> bool:
    return _enabled.get()


@contextmanager
def stage(name: str) -> Generator[dict[str, int]]:
    """Time the enclosed block as step *name* of the running operation.

    Yields a dict the caller may fill with counts. Outside a
    :func:`timed` call, or with timing off, the block runs untimed.
    """
    counts: dict[str, int] = {}
    timing = _active.get()
    started = time.perf_counter()
    try:
        yield counts
    finally:
        if timing is not None:
            timing.stages.append(Stage(name=name, elapsed_ms=_elapsed_ms(started), counts=counts))


_P = ParamSpec("_P")


def timed(func: Callable[_P, ServiceResult]) -> Callable[_P, ServiceResult]:
    """Attach a :class:`Timing` report to the result of a service method."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return func(*args, **kwargs)

        timing = Timing(operation=func.__qualname__)
        token = _active.set(timing)
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        finally:
            timing.elapsed_ms = _elapsed_ms(started)
            _active.reset(token)
            log.debug(
                "service.timed",
                operation=timing.operation,
                elapsed_ms=timing.elapsed_ms,
                stages=[step.name for step in timing.stages],
            )

        meta = {**(result.meta or {}), "timing": timing.as_meta()}
        return result.model_copy(update={"meta": meta})

    return wrapper
