from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from querybench_core.order_stats import copy_sort, percentile_sorted
from querybench_probe.logging import get_logger
from querybench_probe.sampler import ProbeRun

logger = get_logger("querybench.benchmark")

ZERO_DURATION = timedelta(0)


@dataclass(frozen=True)
class LatencySummary:
    iterations: int
    elapsed_total: timedelta
    p50: timedelta
    p95: timedelta


def summarize_latency(run: ProbeRun) -> LatencySummary:
    if not run.durations:
        logger.warning("no probe samples collected; percentiles default to zero")
    ordered = copy_sort(run.durations)
    return LatencySummary(
        iterations=run.iterations,
        elapsed_total=run.elapsed_total,
        p50=percentile_sorted(ordered, 50.0, zero=ZERO_DURATION),
        p95=percentile_sorted(ordered, 95.0, zero=ZERO_DURATION),
    )


def exceeds_budget(summary: LatencySummary, p95_budget_ms: float | None) -> bool:
    if p95_budget_ms is None:
        return False
    return summary.p95 / timedelta(milliseconds=1) > p95_budget_ms
