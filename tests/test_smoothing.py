"""
Tests for the rolling-median reading smoother.
"""

import threading

import pytest

from proteinscore.pipeline.extraction import Reading
from proteinscore.pipeline.smoothing import ReadingSmoother, lower_median


def feed(smoother, calories, protein):
    out = None
    for c, p in zip(calories, protein):
        out = smoother.add(Reading(calories=c, protein=p))
    return out


def test_median_suppresses_outlier():
    """
    Test smoothing over a full window.

    Verifies:
    - The 150 cal / 30 g outlier does not reach the output
    - Each field is the middle of its own sorted history
    """
    smoother = ReadingSmoother()

    out = feed(smoother, [100, 102, 98, 150, 101], [20, 21, 19, 30, 20])

    assert out == Reading(calories=101, protein=20)


def test_returns_raw_reading_until_min_samples():
    smoother = ReadingSmoother()

    first = smoother.add(Reading(100, 20))
    second = smoother.add(Reading(300, 5))

    assert first == Reading(100, 20)
    assert second == Reading(300, 5)


def test_third_reading_is_smoothed():
    smoother = ReadingSmoother()

    out = feed(smoother, [100, 300, 200], [5, 30, 10])

    assert out == Reading(calories=200, protein=10)


def test_even_history_uses_lower_middle_rule():
    """
    Test that an even-sized history uses sorted position n // 2.

    Verifies:
    - With 4 readings the element at index 2 of the sorted values is taken
    """
    smoother = ReadingSmoother()

    out = feed(smoother, [100, 200, 300, 400], [1, 2, 3, 4])

    assert out == Reading(calories=300, protein=3)


def test_medians_are_independent_per_field():
    smoother = ReadingSmoother()

    out = feed(smoother, [100, 200, 300], [30, 20, 10])

    assert out == Reading(calories=200, protein=20)


def test_oldest_reading_is_evicted():
    smoother = ReadingSmoother()

    feed(smoother, [900, 900, 900, 100, 100], [90, 90, 90, 10, 10])
    out = feed(smoother, [100], [10])

    assert len(smoother) == 5
    assert smoother.history[0] == Reading(900, 90)
    assert out == Reading(calories=100, protein=10)


def test_reset_clears_history():
    smoother = ReadingSmoother()
    feed(smoother, [100, 102, 98], [20, 21, 19])

    smoother.reset()
    out = smoother.add(Reading(500, 50))

    assert len(smoother) == 1
    assert out == Reading(500, 50)


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ReadingSmoother(capacity=0)


def test_lower_median():
    assert lower_median([3, 1, 2]) == 2
    assert lower_median([4, 1, 3, 2]) == 3
    assert lower_median([7]) == 7


def test_concurrent_adds_keep_history_bounded():
    smoother = ReadingSmoother()

    def worker():
        for _ in range(200):
            smoother.add(Reading(120, 12))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(smoother) == 5
    assert smoother.add(Reading(120, 12)) == Reading(120, 12)
