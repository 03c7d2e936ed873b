from __future__ import annotations

import math
import random
from datetime import timedelta

import pytest

from querybench_core.order_stats import (
    PercentileRangeError,
    copy_sort,
    percentile,
    percentile_sorted,
)

MS = timedelta(milliseconds=1)


def test_copy_sort_returns_new_ascending_list() -> None:
    values = [3, 1, 2]
    ordered = copy_sort(values)
    assert ordered == [1, 2, 3]
    assert values == [3, 1, 2]
    assert ordered is not values


def test_copy_sort_accepts_empty_and_text() -> None:
    assert copy_sort([]) == []
    assert copy_sort(("pear", "apple", "fig")) == ["apple", "fig", "pear"]


def test_percentile_odd_length_median_is_middle_element() -> None:
    assert percentile([3, 1, 2], 50) == 2


def test_percentile_even_length_median_averages_middle_pair() -> None:
    assert percentile([1, 2, 3, 4], 50) == 2.5


def test_exact_integer_index_takes_midpoint_branch() -> None:
    # length 4, percent 25 -> index 1.0: average of positions 0 and 1
    assert percentile_sorted([10.0, 20.0, 30.0, 40.0], 25) == 15.0


def test_percentile_sorted_durations_p95_and_p50() -> None:
    samples = [10 * MS, 20 * MS, 30 * MS, 40 * MS, 50 * MS]
    assert percentile_sorted(samples, 95) == 50 * MS
    # index 2.5 rounds half to even -> 2, so position 1
    assert percentile_sorted(samples, 50) == 20 * MS


def test_duration_midpoint_uses_timedelta_arithmetic() -> None:
    samples = [1 * MS, 2 * MS, 3 * MS, 4 * MS]
    assert percentile(samples, 50) == timedelta(microseconds=2500)


def test_empty_input_returns_zero_value() -> None:
    assert percentile([], 50) == 0
    assert percentile_sorted([], 95) == 0
    assert percentile([], 50, zero=timedelta(0)) == timedelta(0)


def test_empty_input_ignores_percent() -> None:
    assert percentile([], 250) == 0


def test_percentile_does_not_mutate_input() -> None:
    values = [5, 3, 9, 1, 7]
    snapshot = list(values)
    percentile(values, 95)
    assert values == snapshot


def test_percentile_is_deterministic() -> None:
    values = [0.4, 0.1, 0.9, 0.3, 0.3, 0.8]
    assert percentile(values, 95) == percentile(values, 95)


@pytest.mark.parametrize("percent", [-0.1, 100, 100.5, math.nan])
def test_out_of_range_percent_is_rejected(percent: float) -> None:
    with pytest.raises(PercentileRangeError):
        percentile([1, 2, 3], percent)


def test_zero_percent_clamps_to_minimum() -> None:
    assert percentile([7, 3, 5], 0) == 3
    assert percentile([4], 0) == 4


def test_small_rank_rounding_to_zero_clamps_to_minimum() -> None:
    # index 0.3 rounds to 0; the position before it is clamped to the first sample
    assert percentile([30, 10, 20], 10) == 10


def test_single_sample_is_returned_for_any_rank() -> None:
    for percent in (0, 1, 50, 95, 99.9):
        assert percentile([42 * MS], percent) == 42 * MS


def test_result_stays_within_sample_range() -> None:
    rng = random.Random(1234)
    for length in range(1, 40):
        values = [rng.randint(0, 1000) for _ in range(length)]
        low, high = min(values), max(values)
        for percent in (0, 0.5, 5, 25, 33.3, 50, 66.6, 75, 90, 95, 99, 99.99):
            result = percentile(values, percent)
            assert low <= result <= high


@pytest.mark.parametrize("percent", [-1, 100, 150, math.nan])
def test_percentile_sorted_rejects_out_of_range_percent(percent: float) -> None:
    with pytest.raises(PercentileRangeError):
        percentile_sorted([1, 2, 3], percent)


@pytest.mark.parametrize("length", [1, 2, 3, 4, 5, 8, 16, 100])
def test_rank_just_below_hundred_returns_maximum(length: int) -> None:
    values = list(range(length))
    assert percentile_sorted(values, 100 - 1e-14) == length - 1
