"""Cohen's d from group summaries or samples."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike


def pooled_sd(x: ArrayLike, y: ArrayLike) -> float:
    """Pooled standard deviation of two samples (NaN ignored).

    ``sqrt(((n1 - 1) s1^2 + (n2 - 1) s2^2) / (n1 + n2 - 2))``
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    x = x[~np.isnan(x)]
    y = y[~np.isnan(y)]
    if x.shape[0] < 2 or y.shape[0] < 2:
        raise ValueError("each sample needs at least 2 non-missing values")

    n1, n2 = x.shape[0], y.shape[0]
    var = ((n1 - 1) * np.var(x, ddof=1) + (n2 - 1) * np.var(y, ddof=1)) / (n1 + n2 - 2)
    return float(math.sqrt(var))


def cohens_d(mean1: float, mean2: float, sd_pooled: float) -> float:
    """Standardised mean difference ``(mean1 - mean2) / sd_pooled``.

    Examples
    --------
    >>> cohens_d(10.0, 20.0, 5.0)
    -2.0
    """
    if not (math.isfinite(sd_pooled) and sd_pooled > 0):
        raise ValueError(f"sd_pooled must be positive, got {sd_pooled}")
    return (mean1 - mean2) / sd_pooled


def cohens_d_from_samples(x: ArrayLike, y: ArrayLike) -> float:
    """Cohen's d of sample *x* relative to sample *y* using the pooled SD."""
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    return cohens_d(float(np.nanmean(x)), float(np.nanmean(y)), pooled_sd(x, y))
