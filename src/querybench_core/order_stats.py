from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, Protocol, TypeVar


class Orderable(Protocol):
    """Values that can be sorted: numbers, timedeltas, strings."""

    def __lt__(self, other: Any, /) -> bool: ...


class Averageable(Orderable, Protocol):
    """Orderable values that also support a midpoint, ``(a + b) / 2``."""

    def __add__(self, other: Any, /) -> Any: ...

    def __truediv__(self, other: Any, /) -> Any: ...


OrderableT = TypeVar("OrderableT", bound=Orderable)
AverageableT = TypeVar("AverageableT", bound=Averageable)


class PercentileRangeError(ValueError):
    pass


def copy_sort(values: Sequence[OrderableT]) -> list[OrderableT]:
    """Return a new ascending list; ``values`` is left untouched."""
    return sorted(values)


def _validate_percent(percent: float) -> None:
    if math.isnan(percent) or percent < 0 or percent >= 100:
        raise PercentileRangeError(
            f"percent must be in the interval [0, 100), got {percent!r}"
        )


def percentile_sorted(
    sorted_values: Sequence[AverageableT],
    percent: float,
    *,
    zero: Any = 0,
) -> AverageableT:
    """Find the value at ``percent`` in an ascending sequence.

    ``sorted_values`` must already be in ascending order; this is not checked.
    ``percent`` is a rank on the interval [0, 100).

    The rank maps to ``index = percent / 100 * len``, rounded half to even.
    When ``index`` lands exactly on an integer the two neighbouring samples
    are averaged, otherwise the sample just below the rounded position is
    returned. Positions before the first sample are clamped to it, so the
    result always lies between the smallest and largest sample.

    An empty sequence returns ``zero`` for any ``percent``. Callers summarizing
    durations should pass ``zero=timedelta(0)``. A zero result can hide a run
    that collected no samples at all.
    """
    length = len(sorted_values)
    if length == 0:
        return zero
    _validate_percent(percent)

    index = (percent / 100.0) * length
    position = round(index)
    lower = max(position - 1, 0)
    if index.is_integer():
        upper = min(position, length - 1)
        return (sorted_values[lower] + sorted_values[upper]) / 2
    return sorted_values[lower]


def percentile(
    values: Sequence[AverageableT],
    percent: float,
    *,
    zero: Any = 0,
) -> AverageableT:
    """Copy and sort ``values``, then find the value at ``percent``.

    See :func:`percentile_sorted` for the rank semantics. The caller's
    sequence is never reordered.
    """
    if len(values) == 0:
        return zero
    return percentile_sorted(copy_sort(values), percent, zero=zero)
