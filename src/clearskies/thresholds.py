#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Threshold tables and default parameterisation for the Reno clear sky
criteria.

References
----------
Reno, M. J., Hansen, C. W. and Stein, J. S. 2012:
    Global Horizontal Irradiance Clear Sky Models: Implementation and
    Analysis. Sandia report SAND2012-2389, pp. 28-36.
"""
from collections.abc import Mapping

import numpy as np

from .errors import InvalidThresholdCount


# Criteria are always compared by position, in this order.
CRITERIA = ("mean", "max", "line_length", "sigma", "max_deviation")

### Parameterisation
## Reno 2012 thresholds for 10 min windows of 1 min data (pp. 34)
RENO_MEAN_DIFF = 75.
RENO_MAX_DIFF = 75.
RENO_LOWER_LINE_LEN = -5.
RENO_UPPER_LINE_LEN = 10.
RENO_VAR_DIFF = 0.005
RENO_SLOPE_DEV = 8.

RENO_THRESHOLDS = (
    (-RENO_MEAN_DIFF, RENO_MEAN_DIFF),
    (-RENO_MAX_DIFF, RENO_MAX_DIFF),
    (RENO_LOWER_LINE_LEN, RENO_UPPER_LINE_LEN),
    (-RENO_VAR_DIFF, RENO_VAR_DIFF),
    (0., RENO_SLOPE_DEV),
)

# the thresholds above are calibrated for this window length
WINDOW_LENGTH = 10
# window samples (rows times window length) evaluated between two
# cancellation checks; bounds the memory of one chunk
CHUNK_ELEMENTS = 2**16


def as_threshold_table(thresholds):
    """
    Normalise thresholds to an array of inclusive [lower, upper] bounds.

    Parameters
    ----------
    thresholds : iterable or mapping
        Five entries, one per criterion in the order of CRITERIA. Each entry
        holds two or more numbers; the smallest is the lower and the largest
        the upper bound, so (1, -1) and (-1, 1) are the same range.
        A mapping is looked up by criterion name.

    Returns
    -------
    table : array, float, shape (5, 2)
        Lower bounds in column 0, upper bounds in column 1.

    Raises
    ------
    InvalidThresholdCount
        If there are not exactly five entries.
    """
    if not isinstance(thresholds, Mapping):
        # generators and other iterables without a length
        try:
            thresholds = list(thresholds)
        except TypeError:
            raise InvalidThresholdCount(
                "Thresholds must be a list of length 5") from None
    if len(thresholds) != len(CRITERIA):
        raise InvalidThresholdCount("Thresholds must be a list of length 5")

    if isinstance(thresholds, Mapping):
        missing = [name for name in CRITERIA if name not in thresholds]
        if missing:
            raise KeyError(f"Missing thresholds for: {', '.join(missing)}")
        thresholds = [thresholds[name] for name in CRITERIA]

    table = np.empty((len(CRITERIA), 2), dtype=float)
    for i, bounds in enumerate(thresholds):
        bounds = np.asarray(bounds, dtype=float).ravel()
        if bounds.size == 0:
            raise ValueError(f"No bounds given for criterion {CRITERIA[i]!r}")
        table[i] = bounds.min(), bounds.max()
    return table
