#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The five clear sky criteria of Reno 2012.

Every helper reduces along the last axis, so the same code evaluates a single
window (1-D input) or a stack of windows (2-D input, one window per row) as
produced by ``windows``.

References
----------
Reno, M. J., Hansen, C. W. and Stein, J. S. 2012:
    Global Horizontal Irradiance Clear Sky Models: Implementation and
    Analysis. Sandia report SAND2012-2389, pp. 30-31.

Ellis 2018:
    PVLIB detect_clearsky at commit
    f4e4ad3bbe335fa49bf300ce53784d69d719ca98
    https://github.com/pvlib/pvlib-python/pull/596/commits
"""
import numpy as np
from scipy.linalg import hankel


def windows(irradiance, window_length, start=0, stop=None):
    """
    Stack the windows of a series, one window per row.

    Row i holds irradiance[start+i : start+i+window_length]. Only complete
    windows are produced, so the default returns len(irradiance) -
    window_length + 1 rows.

    Parameters
    ----------
    irradiance : array, float
        The full series.
    window_length : int
        Samples per window.
    start, stop : int
        Range of window start positions to produce, stop exclusive.

    Returns
    -------
    i_window : array, float, shape (stop - start, window_length)
    """
    last = len(irradiance) - window_length + 1
    if stop is None or stop > last:
        stop = last
    # a Hankel matrix is a staggered set of the time series: each row is a
    # window and each column is the series offset by the column number.
    return hankel(irradiance[start:stop],
                  irradiance[stop - 1:stop - 1 + window_length])


def line_length(irradiance):
    r"""
    Length of the line connecting consecutive points.

    .. math::
        L = \sum_{i=1}^{n-1} \sqrt{(GHI_{i+1} - GHI_{i})^2 + 1}

    The time step between samples is taken to be 1, which is what the
    thresholds were calibrated with. A single point has length 0.
    """
    i_diff = np.diff(irradiance, axis=-1)
    return np.sum(np.sqrt(i_diff**2 + 1), axis=-1)


def sigma(irradiance):
    r"""
    Normalized standard deviation of the slope between sequential points.

    .. math::
        \sigma = \frac{1}{\overline{GHI}}
                 \sqrt{\frac{1}{n-2} \sum_{i=1}^{n-1} (s_{i} - \overline{s})^2}

    with :math:`s_{i} = GHI_{i+1} - GHI_{i}`.
    Wherever the ratio is not finite (zero mean irradiance, fewer than two
    slopes, missing values) sigma is 0.
    """
    irradiance = np.asarray(irradiance, dtype=float)
    i_diff = np.diff(irradiance, axis=-1)
    if i_diff.shape[-1] < 2:
        # sample standard deviation is undefined
        return np.zeros(irradiance.shape[:-1])
    with np.errstate(divide='ignore', invalid='ignore'):
        i_slope_nstd = np.std(i_diff, axis=-1, ddof=1) \
            / np.mean(irradiance, axis=-1)
    return np.where(np.isfinite(i_slope_nstd), i_slope_nstd, 0.)


def max_deviation(irradiance, irradiance_cs):
    r"""
    Maximum deviation of the measured from the clear sky slope.

    .. math::
        S = \max\{|s_{i} - d_{i}|\}

    with :math:`s_{i}` and :math:`d_{i}` the slopes of the measured and the
    clear sky irradiance. A single point has no slope and gives 0.
    """
    slope_dev = np.abs(np.diff(irradiance, axis=-1)
                       - np.diff(irradiance_cs, axis=-1))
    if slope_dev.shape[-1] == 0:
        return np.zeros(slope_dev.shape[:-1])
    return np.max(slope_dev, axis=-1)


def calculate_criteria(irradiance, irradiance_cs):
    """
    Calculate the five clear sky criteria.

    Parameters
    ----------
    irradiance : array, float
        Measured irradiance, one window or one window per row.
    irradiance_cs : array, float
        Clear sky irradiance, same shape as irradiance. The shapes are not
        checked.

    Returns
    -------
    criteria : array, float, shape (..., 5)
        mean difference, max difference, line length difference,
        sigma difference and maximum slope deviation, in this order.
    """
    irradiance = np.asarray(irradiance, dtype=float)
    irradiance_cs = np.asarray(irradiance_cs, dtype=float)

    mean_diff = np.mean(irradiance, axis=-1) - np.mean(irradiance_cs, axis=-1)
    max_diff = np.max(irradiance, axis=-1) - np.max(irradiance_cs, axis=-1)
    line_diff = line_length(irradiance) - line_length(irradiance_cs)
    sigma_diff = sigma(irradiance) - sigma(irradiance_cs)
    slope_dev = max_deviation(irradiance, irradiance_cs)

    return np.stack((mean_diff, max_diff, line_diff, sigma_diff, slope_dev),
                    axis=-1)


def evaluate_criteria(criteria, table):
    """
    Check whether all criteria are within their thresholds.

    Parameters
    ----------
    criteria : array, float, shape (..., 5)
        Output of calculate_criteria.
    table : array, float, shape (5, 2)
        Inclusive lower and upper bounds, see
        clearskies.thresholds.as_threshold_table.

    Returns
    -------
    clear : bool or array, bool
        True where every criterion lies within its bounds. A missing (NaN)
        criterion is never within bounds.
    """
    criteria = np.asarray(criteria, dtype=float)
    inside = (criteria >= table[:, 0]) & (criteria <= table[:, 1])
    return np.all(inside, axis=-1)
