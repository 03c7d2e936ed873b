from __future__ import annotations

import json
from datetime import timedelta

from querybench_probe.benchmark import LatencySummary

MICROSECOND = timedelta(microseconds=1)
MILLISECOND = timedelta(milliseconds=1)

_NS_PER_SECOND = 1_000_000_000
_NS_PER_MINUTE = 60 * _NS_PER_SECOND
_NS_PER_HOUR = 60 * _NS_PER_MINUTE


def round_duration(value: timedelta, unit: timedelta = MILLISECOND) -> timedelta:
    """Round to the nearest multiple of ``unit``; halfway values round away from zero."""
    step = unit // MICROSECOND
    if step <= 0:
        return value
    micros = value // MICROSECOND
    magnitude = abs(micros)
    quotient, remainder = divmod(magnitude, step)
    if remainder * 2 >= step:
        quotient += 1
    rounded = quotient * step
    return timedelta(microseconds=-rounded if micros < 0 else rounded)


def _scaled(value: int, scale: int) -> str:
    whole, fraction = divmod(value, scale)
    if fraction == 0:
        return str(whole)
    width = len(str(scale)) - 1
    return f"{whole}.{fraction:0{width}d}".rstrip("0")


def format_duration(value: timedelta) -> str:
    """Render a duration as ``0s``, ``950µs``, ``12ms``, ``1.5s`` or ``2m3.456s``."""
    nanos = (value // MICROSECOND) * 1000
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)

    if nanos < _NS_PER_SECOND:
        if nanos < 1_000:
            return f"{sign}{nanos}ns"
        if nanos < 1_000_000:
            return f"{sign}{_scaled(nanos, 1_000)}µs"
        return f"{sign}{_scaled(nanos, 1_000_000)}ms"

    hours, remainder = divmod(nanos, _NS_PER_HOUR)
    minutes, remainder = divmod(remainder, _NS_PER_MINUTE)
    parts = [sign]
    if hours:
        parts.append(f"{hours}h")
    if hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{_scaled(remainder, _NS_PER_SECOND)}s")
    return "".join(parts)


def render_text(summary: LatencySummary) -> str:
    lines = [
        f"iterations={summary.iterations}",
        f"elapsedTotal={format_duration(round_duration(summary.elapsed_total))}",
        f"queryElapsedP95={format_duration(round_duration(summary.p95))}",
        f"queryElapsedP50={format_duration(round_duration(summary.p50))}",
    ]
    return "\n".join(lines)


def _ms(value: timedelta) -> float:
    return value / MILLISECOND


def render_json(summary: LatencySummary) -> str:
    return json.dumps(
        {
            "iterations": summary.iterations,
            "elapsed_total_ms": _ms(summary.elapsed_total),
            "p95_ms": _ms(summary.p95),
            "p50_ms": _ms(summary.p50),
        }
    )
