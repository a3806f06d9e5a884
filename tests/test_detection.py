import threading
import tracemalloc
import warnings

import numpy as np
import pytest

from clearskies.criteria import calculate_criteria, evaluate_criteria
from clearskies.detection import clear_points, detect_clear_points
from clearskies.errors import (
    InvalidThresholdCount,
    InvalidWindowLength,
    LengthMismatch,
    ScanCancelled,
)
from clearskies.thresholds import CHUNK_ELEMENTS, as_threshold_table

THRESHOLDS = [(-1, 1), (-2, 1), (0, 1), (-0.5, 1), (-10, 10)]


def _brute_force(observed, predicted, thresholds, window_len):
    table = as_threshold_table(thresholds)
    clear = np.zeros(len(observed), dtype=bool)
    for s in range(len(observed) - window_len + 1):
        c = calculate_criteria(observed[s:s + window_len], predicted[s:s + window_len])
        if evaluate_criteria(c, table):
            clear[s:s + window_len] = True
    return clear


@pytest.mark.parametrize("window_len", [1, 10])
def test_identical_series_are_all_clear(window_len):
    x = np.arange(1, 51, dtype=float)

    clear = detect_clear_points(x, x, THRESHOLDS, window_len)

    assert clear.dtype == bool
    assert len(clear) == 50
    assert clear.all()


def test_clear_points_is_the_same_function():
    x = np.arange(1, 51, dtype=float)
    np.testing.assert_array_equal(clear_points(x, x, THRESHOLDS, 10), np.ones(50, dtype=bool))


def test_bound_order_is_irrelevant():
    rng = np.random.default_rng(1)
    predicted = np.linspace(100.0, 600.0, 60)
    observed = predicted + rng.normal(0.0, 1.0, 60)

    flipped = [(hi, lo) for lo, hi in THRESHOLDS]

    np.testing.assert_array_equal(
        detect_clear_points(observed, predicted, THRESHOLDS, 5),
        detect_clear_points(observed, predicted, flipped, 5),
    )


def test_failing_first_window_then_passing_window():
    predicted = np.full(20, 100.0)
    observed = predicted.copy()
    # only the window starting at 0 sees the spike
    observed[0] = 200.0

    clear = detect_clear_points(observed, predicted, THRESHOLDS, 5)

    assert not clear[0]
    assert clear[1:].all()


def test_clear_points_stay_clear_after_a_failing_window():
    predicted = np.full(20, 100.0)
    observed = predicted.copy()
    # windows 0..14 pass, window 15 (points 15..19) fails
    observed[19] = 200.0

    clear = detect_clear_points(observed, predicted, THRESHOLDS, 5)

    assert clear[:19].all()
    assert not clear[19]


def test_no_clear_window_gives_no_clear_points():
    predicted = np.full(30, 100.0)
    observed = predicted + 50.0

    clear = detect_clear_points(observed, predicted, THRESHOLDS, 10)

    assert not clear.any()


def test_matches_per_window_definition():
    rng = np.random.default_rng(42)
    predicted = 800.0 * np.sin(np.linspace(0.1, 3.0, 300))
    observed = predicted + rng.normal(0.0, 0.6, 300)
    # a cloudy stretch
    observed[120:160] *= rng.uniform(0.4, 1.0, 40)

    for window_len in (1, 2, 3, 10, 25, 299, 300):
        np.testing.assert_array_equal(
            detect_clear_points(observed, predicted, THRESHOLDS, window_len),
            _brute_force(observed, predicted, THRESHOLDS, window_len),
        )


def test_result_does_not_depend_on_chunk_size():
    rng = np.random.default_rng(3)
    predicted = np.linspace(0.0, 500.0, 200)
    observed = predicted + rng.normal(0.0, 0.8, 200)

    reference = detect_clear_points(observed, predicted, THRESHOLDS, 10)
    for chunk_size in (1, 7, 191, 10000):
        np.testing.assert_array_equal(
            detect_clear_points(observed, predicted, THRESHOLDS, 10, chunk_size=chunk_size),
            reference,
        )


def test_repeated_calls_are_identical():
    rng = np.random.default_rng(11)
    predicted = np.linspace(50.0, 300.0, 120)
    observed = predicted + rng.normal(0.0, 1.0, 120)

    first = detect_clear_points(observed, predicted, THRESHOLDS, 10)
    second = detect_clear_points(observed, predicted, THRESHOLDS, 10)

    np.testing.assert_array_equal(first, second)
    assert first is not second


def test_zero_irradiance_does_not_warn_or_fail():
    observed = np.zeros(30)
    observed[10:20] = [-1.0, 1.0] * 5
    predicted = np.zeros(30)

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        clear = detect_clear_points(observed, predicted, [(-10, 10)] * 4 + [(0, 10)], 4)
        criteria = calculate_criteria(observed[10:14], predicted[10:14])

    assert np.all(np.isfinite(criteria))
    assert criteria[3] == 0.0
    assert clear.all()


def test_inputs_are_not_modified():
    observed = np.arange(20, dtype=float)
    predicted = np.arange(20, dtype=float)
    observed_copy = observed.copy()

    detect_clear_points(observed, predicted, THRESHOLDS, 5)

    np.testing.assert_array_equal(observed, observed_copy)


def test_length_mismatch():
    rng = np.random.default_rng(0)
    with pytest.raises(LengthMismatch, match="same length"):
        detect_clear_points(rng.normal(size=20), rng.normal(size=10), THRESHOLDS, 10)
    with pytest.raises(LengthMismatch):
        detect_clear_points(rng.normal(size=35), rng.normal(size=20), THRESHOLDS, 10)
    # checked before thresholds
    with pytest.raises(LengthMismatch):
        detect_clear_points(rng.normal(size=20), rng.normal(size=10), THRESHOLDS[:4], 0)


@pytest.mark.parametrize("window_len", [0, -10, 25, 2.5, "ten", True, False, np.True_])
def test_invalid_window_length(window_len):
    rng = np.random.default_rng(0)
    x = rng.normal(size=20)
    y = rng.normal(size=20)
    with pytest.raises(InvalidWindowLength, match="window_len"):
        detect_clear_points(x, y, THRESHOLDS, window_len)


def test_integral_float_window_length_is_accepted():
    x = np.arange(1, 21, dtype=float)
    assert detect_clear_points(x, x, THRESHOLDS, 10.0).all()


@pytest.mark.parametrize("count", [4, 6])
def test_invalid_threshold_count(count):
    rng = np.random.default_rng(0)
    x = rng.normal(size=20)
    y = rng.normal(size=20)
    thresholds = (THRESHOLDS + [(1, 3)])[:count]
    with pytest.raises(InvalidThresholdCount, match="length 5"):
        detect_clear_points(x, y, thresholds, 10)


def test_validation_errors_are_value_errors():
    with pytest.raises(ValueError):
        detect_clear_points(np.ones(5), np.ones(4), THRESHOLDS, 2)


def test_empty_series_has_no_valid_window():
    with pytest.raises(InvalidWindowLength):
        detect_clear_points([], [], THRESHOLDS, 1)


def test_two_dimensional_input_is_rejected():
    with pytest.raises(ValueError, match="one dimensional"):
        detect_clear_points(np.ones((4, 5)), np.ones((4, 5)), THRESHOLDS, 2)


def test_cancelled_scan_raises():
    x = np.arange(1, 51, dtype=float)
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(ScanCancelled):
        detect_clear_points(x, x, THRESHOLDS, 10, cancel=cancel, chunk_size=1)


def test_cancel_during_scan():
    class CancelAfter:
        def __init__(self, checks):
            self.checks = checks

        def is_set(self):
            self.checks -= 1
            return self.checks < 0

    x = np.arange(1, 51, dtype=float)
    cancel = CancelAfter(5)

    with pytest.raises(ScanCancelled, match="window 5 of 41"):
        detect_clear_points(x, x, THRESHOLDS, 10, cancel=cancel, chunk_size=1)


def test_unset_cancel_event_does_not_interfere():
    x = np.arange(1, 51, dtype=float)
    cancel = threading.Event()
    assert detect_clear_points(x, x, THRESHOLDS, 10, cancel=cancel, chunk_size=3).all()


def test_cancel_during_scan_with_default_chunks():
    class CancelAfter:
        def __init__(self, checks):
            self.checks = checks

        def is_set(self):
            self.checks -= 1
            return self.checks < 0

    x = np.arange(1, 20001, dtype=float)
    rows = CHUNK_ELEMENTS // 10

    with pytest.raises(ScanCancelled, match=f"window {rows} of 19991"):
        detect_clear_points(x, x, THRESHOLDS, 10, cancel=CancelAfter(1))


def test_long_windows_scan_in_bounded_memory():
    x = np.arange(1, 6001, dtype=float)

    tracemalloc.start()
    try:
        clear = detect_clear_points(x, x, THRESHOLDS, 2000)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    assert clear.all()
    # one (4001, 2000) float window stack alone would take 64 MB
    assert peak < 16 * 2**20
