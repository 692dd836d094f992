"""Paired significance tests between the two treatment periods.

Each test compares a parameter measured without the inducer (group 0)
against the same parameter measured with it (group 1), matched by
subject. Subjects lacking either measurement are left out of the test.

Validates against: R ``t.test(paired = TRUE)``,
``wilcox.test(paired = TRUE)``.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from scipy import stats

from pkcrossover.crossover._common import PairedTestResult, paired_column
from pkcrossover.crossover._reshape import complete_pairs
from pkcrossover.data._common import ID, INDUCER, NO_INDUCER

logger = logging.getLogger(__name__)

_VALID_ALTERNATIVES = ("two-sided", "less", "greater")


def _paired_samples(
    wide: pd.DataFrame, key: str, alternative: str,
) -> tuple[np.ndarray, np.ndarray]:
    """(no inducer, inducer) arrays restricted to complete pairs."""
    if alternative not in _VALID_ALTERNATIVES:
        raise ValueError(
            f"alternative must be one of {_VALID_ALTERNATIVES}, got {alternative!r}"
        )
    ref_col = paired_column(key, NO_INDUCER)
    test_col = paired_column(key, INDUCER)
    missing = [c for c in (ref_col, test_col) if c not in wide.columns]
    if missing:
        raise ValueError(f"wide table has no column(s) {missing} for {key!r}")

    pairs = complete_pairs(wide, key)
    n_dropped = len(wide) - len(pairs)
    if n_dropped:
        dropped = wide.loc[~wide.index.isin(pairs.index), ID].tolist()
        logger.warning(
            "%s: %d subject(s) without both periods excluded from the paired test %s",
            key, n_dropped, dropped,
        )
    if len(pairs) < 2:
        raise ValueError(
            f"need at least 2 complete pairs for {key!r}, got {len(pairs)}"
        )
    return (
        pairs[ref_col].to_numpy(dtype=np.float64),
        pairs[test_col].to_numpy(dtype=np.float64),
    )


def paired_t_test(
    wide: pd.DataFrame,
    key: str,
    *,
    alternative: str = "two-sided",
) -> PairedTestResult:
    """Paired t-test of *key*: inducer vs no inducer.

    The statistic is signed as ``mean(inducer - no inducer) / SE``.

    Parameters
    ----------
    wide : DataFrame
        Output of :func:`pkcrossover.crossover.to_wide`.
    key : str
        Parameter key, e.g. ``'AUCLAST'``.
    alternative : str
        ``'two-sided'``, ``'less'`` or ``'greater'``.
    """
    ref, test = _paired_samples(wide, key, alternative)
    res = stats.ttest_rel(test, ref, alternative=alternative)
    return PairedTestResult(
        parameter=key,
        method="Paired t-test",
        statistic=float(res.statistic),
        p_value=float(res.pvalue),
        n_pairs=int(ref.shape[0]),
        mean_difference=float(np.mean(test - ref)),
    )


def paired_wilcoxon(
    wide: pd.DataFrame,
    key: str,
    *,
    alternative: str = "two-sided",
) -> PairedTestResult:
    """Wilcoxon signed-rank test of *key*: inducer vs no inducer.

    Zero differences are discarded (``zero_method='wilcox'``, as R does).
    If every difference is zero there is nothing to rank and the result is
    a statistic of 0 with a p-value of 1.
    """
    ref, test = _paired_samples(wide, key, alternative)
    diff = test - ref
    if np.all(diff == 0):
        logger.warning("%s: all paired differences are zero", key)
        statistic, p_value = 0.0, 1.0
    else:
        res = stats.wilcoxon(test, ref, zero_method="wilcox", alternative=alternative)
        statistic, p_value = float(res.statistic), float(res.pvalue)
    return PairedTestResult(
        parameter=key,
        method="Wilcoxon signed rank test",
        statistic=statistic,
        p_value=p_value,
        n_pairs=int(ref.shape[0]),
        mean_difference=float(np.mean(diff)),
    )
