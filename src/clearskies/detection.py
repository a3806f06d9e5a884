#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Clear sky detection with a rolling window and five criteria (Reno 2012).

A window of measured irradiance is clear if all five criteria comparing it to
the clear sky irradiance are within their thresholds. A point is declared
clear if it is part of at least one clear window.

References
----------
Reno, M. J., Hansen, C. W. and Stein, J. S. 2012:
    Global Horizontal Irradiance Clear Sky Models: Implementation and
    Analysis. Sandia report SAND2012-2389, pp. 28-36.
"""
import logging
import operator

import numpy as np

from .criteria import calculate_criteria, evaluate_criteria, windows
from .errors import InvalidWindowLength, LengthMismatch, ScanCancelled
from .thresholds import CHUNK_ELEMENTS, as_threshold_table

logger = logging.getLogger(__name__)


def _window_length(window_len, n):
    if isinstance(window_len, (bool, np.bool_)):
        raise InvalidWindowLength("Incorrect value to window_len")
    try:
        window_len = operator.index(window_len)
    except TypeError:
        # accept integral floats such as 10.0
        try:
            as_float = float(window_len)
        except (TypeError, ValueError):
            raise InvalidWindowLength("Incorrect value to window_len") from None
        if not as_float.is_integer():
            raise InvalidWindowLength("Incorrect value to window_len")
        window_len = int(as_float)
    if window_len <= 0 or window_len > n:
        raise InvalidWindowLength("Incorrect value to window_len")
    return window_len


def clear_windows(observed, predicted, table, window_len,
                  cancel=None, chunk_size=None):
    """
    Evaluate every window position of a validated pair of series.

    Parameters
    ----------
    observed, predicted : array, float
        Equal length series.
    table : array, float, shape (5, 2)
        Normalised thresholds.
    window_len : int
        Samples per window, 1 <= window_len <= len(observed).
    cancel : object with is_set(), optional
        Checked before every chunk of window positions.
    chunk_size : int, optional
        Most window positions evaluated per chunk. Chunks never hold more
        than CHUNK_ELEMENTS window samples, whatever chunk_size is.

    Returns
    -------
    passed : array, bool, length len(observed) - window_len + 1
        True where the window starting at that position is clear.
    """
    n_windows = len(observed) - window_len + 1
    # rows per chunk, so that memory and the time between two cancel
    # checks do not grow with window_len
    rows = max(1, CHUNK_ELEMENTS // window_len)
    if chunk_size is not None:
        rows = min(rows, max(1, int(chunk_size)))
    passed = np.zeros(n_windows, dtype=bool)

    for start in range(0, n_windows, rows):
        if cancel is not None and cancel.is_set():
            logger.info("Clear sky scan cancelled at window %d of %d",
                        start, n_windows)
            raise ScanCancelled(
                f"scan cancelled at window {start} of {n_windows}")
        stop = min(start + rows, n_windows)
        criteria = calculate_criteria(
            windows(observed, window_len, start, stop),
            windows(predicted, window_len, start, stop))
        passed[start:stop] = evaluate_criteria(criteria, table)
    return passed


def detect_clear_points(observed, predicted, thresholds, window_len,
                        cancel=None, chunk_size=None):
    """
    Clear sky detection.

    Determine clear points using a rolling window and five clear sky
    criteria. The window advances one sample at a time; every point of a
    clear window is marked clear and stays clear, even if a later window
    covering it is not.

    Parameters
    ----------
    observed : array, float
        Measured irradiance, uniformly sampled.
    predicted : array, float
        Clear sky irradiance at the same time steps as observed.
    thresholds : iterable or mapping
        Five (min, max) pairs in the order mean, max, line length, sigma and
        maximum deviation from the clear sky slope, see
        clearskies.thresholds.as_threshold_table. Bounds are inclusive.
    window_len : int
        Length of window, in samples.
    cancel : object with is_set(), optional
        e.g. a threading.Event. When set while the scan is running,
        ScanCancelled is raised and no result is returned.
    chunk_size : int, optional
        Most window positions evaluated at once; the cancel check runs once
        per chunk. By default a chunk holds about CHUNK_ELEMENTS window
        samples, and chunk_size=1 checks before every window.

    Returns
    -------
    clear : array, bool
        Same length as observed. True indicates that the corresponding
        measured irradiance value is clear.

    Raises
    ------
    LengthMismatch
        observed and predicted differ in length.
    InvalidWindowLength
        window_len is not an integer in [1, len(observed)].
    InvalidThresholdCount
        thresholds does not have exactly 5 entries.
    ScanCancelled
        cancel was set during the scan.
    """
    observed = np.asarray(observed, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    if observed.ndim != 1 or predicted.ndim != 1:
        raise ValueError("observed and predicted must be one dimensional")

    n = len(observed)
    if n != len(predicted):
        raise LengthMismatch("observed must be the same length as predicted")
    window_len = _window_length(window_len, n)
    table = as_threshold_table(thresholds)

    logger.debug("Scanning %d points with %d windows of length %d",
                 n, n - window_len + 1, window_len)
    passed = clear_windows(observed, predicted, table, window_len,
                           cancel=cancel, chunk_size=chunk_size)

    # a point is clear if any window covering it is clear: the window
    # starting at s covers s..s+window_len-1
    counts = np.concatenate(([0], np.cumsum(passed)))
    i = np.arange(n)
    covering = counts[np.minimum(i, len(passed) - 1) + 1] \
        - counts[np.maximum(i - window_len + 1, 0)]
    clear = covering > 0
    logger.debug("%d of %d windows clear, %d of %d points clear",
                 np.count_nonzero(passed), len(passed),
                 np.count_nonzero(clear), n)
    return clear


clear_points = detect_clear_points
