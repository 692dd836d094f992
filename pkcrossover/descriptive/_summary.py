"""Geometric mean with CI and median with IQR.

Both summaries drop missing values (NaN) before computing. They are the
building blocks of the crossover summary table: medians (IQR) describe
each treatment period, geometric means of within-subject ratios (GMR)
describe the change.

The geometric-mean CI is computed on the log scale with a t critical
value (n - 1 degrees of freedom) and back-transformed::

    exp(mean(log x) +/- t(1 - alpha/2, n-1) * sd(log x) / sqrt(n))

Percentiles use linear interpolation between order statistics
(numpy's default, identical to R ``quantile(type = 7)``).
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats

from pkcrossover.descriptive._common import GeometricMeanResult, MedianIQRResult


def _as_clean_vector(values: ArrayLike) -> NDArray[np.float64]:
    """1-D float64 array with NaN removed."""
    arr = np.asarray(values, dtype=np.float64).ravel()
    return arr[~np.isnan(arr)]


# ---------------------------------------------------------------------------
# Geometric mean
# ---------------------------------------------------------------------------

def geometric_mean_ci(
    values: ArrayLike,
    *,
    conf_level: float = 0.95,
) -> GeometricMeanResult:
    """Geometric mean and its confidence interval.

    Parameters
    ----------
    values : array-like
        Strictly positive values. NaN entries are ignored.
    conf_level : float
        Confidence level (default 0.95).

    Returns
    -------
    GeometricMeanResult

    Raises
    ------
    ValueError
        If any value is zero, negative or infinite, or fewer than two
        values remain after dropping NaN.

    Examples
    --------
    >>> r = geometric_mean_ci([1, 2, 4, 8])
    >>> round(r.mean, 4)
    2.8284
    """
    if not (0.0 < conf_level < 1.0):
        raise ValueError(f"conf_level must be in (0, 1), got {conf_level}")

    x = _as_clean_vector(values)
    if np.any(~np.isfinite(x)):
        raise ValueError("values must be finite for a geometric mean")
    if np.any(x <= 0):
        bad = x[x <= 0][:3].tolist()
        raise ValueError(
            f"geometric mean requires strictly positive values, got {bad}"
        )
    n = x.shape[0]
    if n < 2:
        raise ValueError(
            f"need at least 2 non-missing values for a confidence interval, got {n}"
        )

    log_x = np.log(x)
    log_mean = float(np.mean(log_x))
    se = float(np.std(log_x, ddof=1)) / math.sqrt(n)
    t_crit = float(stats.t.ppf(0.5 + conf_level / 2.0, n - 1))

    return GeometricMeanResult(
        mean=math.exp(log_mean),
        lower=math.exp(log_mean - t_crit * se),
        upper=math.exp(log_mean + t_crit * se),
        conf_level=conf_level,
        n=n,
    )


def format_geometric_mean_ci(
    values: ArrayLike, *, conf_level: float = 0.95, digits: int = 2,
) -> str:
    """``"gmean (lower-upper)"`` string for *values*."""
    return geometric_mean_ci(values, conf_level=conf_level).format(digits)


# ---------------------------------------------------------------------------
# Median / IQR
# ---------------------------------------------------------------------------

def median_iqr(values: ArrayLike) -> MedianIQRResult:
    """Median and interquartile range (25th/75th percentiles).

    Examples
    --------
    >>> r = median_iqr(range(1, 10))
    >>> r.median, r.q1, r.q3
    (5.0, 3.0, 7.0)
    """
    x = _as_clean_vector(values)
    if x.shape[0] == 0:
        raise ValueError("median_iqr requires at least one non-missing value")

    q1, med, q3 = np.percentile(x, [25.0, 50.0, 75.0])
    return MedianIQRResult(
        median=float(med), q1=float(q1), q3=float(q3), n=int(x.shape[0]),
    )


def format_median_iqr(values: ArrayLike, *, digits: int = 2) -> str:
    """``"median (Q1-Q3)"`` string for *values*."""
    return median_iqr(values).format(digits)
