from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from querybench_probe.logging import get_logger

logger = get_logger("querybench.sampler")


class ProbeError(RuntimeError):
    def __init__(self, probe_index: int, message: str) -> None:
        super().__init__(f"probe {probe_index} failed: {message}")
        self.probe_index = probe_index


@dataclass(frozen=True)
class ProbeRun:
    durations: tuple[timedelta, ...]
    elapsed_total: timedelta

    @property
    def iterations(self) -> int:
        return len(self.durations)


def _ns_to_timedelta(nanoseconds: int) -> timedelta:
    return timedelta(microseconds=nanoseconds / 1000)


def probe_once(conn: Any, query: str) -> None:
    with conn.cursor() as cur:
        cur.execute(query)
        cur.fetchone()


def run_probes(
    conn: Any,
    *,
    iterations: int,
    warmup: int = 0,
    query: str = "select 1",
    clock: Callable[[], int] = time.perf_counter_ns,
) -> ProbeRun:
    """Run ``warmup`` untimed probes, then ``iterations`` timed ones.

    Probes run sequentially on ``conn``. The total covers only the timed
    loop.
    """
    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    if warmup < 0:
        raise ValueError("warmup must be >= 0")

    for index in range(warmup):
        try:
            probe_once(conn, query)
        except Exception as exc:
            raise ProbeError(index, f"warm-up: {exc}") from exc

    durations: list[timedelta] = []
    started = clock()
    for index in range(iterations):
        probe_started = clock()
        try:
            probe_once(conn, query)
        except Exception as exc:
            raise ProbeError(index, str(exc)) from exc
        durations.append(_ns_to_timedelta(clock() - probe_started))
    elapsed_total = _ns_to_timedelta(clock() - started)

    logger.info(
        "probe run finished",
        iterations=iterations,
        warmup=warmup,
        elapsed_total_ms=elapsed_total / timedelta(milliseconds=1),
    )
    return ProbeRun(durations=tuple(durations), elapsed_total=elapsed_total)
