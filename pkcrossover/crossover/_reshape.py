"""Long-to-wide reshape of per-period NCA results and within-subject ratios."""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from pkcrossover.crossover._common import (
    PK_PARAMETERS,
    PKParameter,
    column_map,
    paired_column,
    ratio_column,
)
from pkcrossover.data._common import ID, IND, INDUCER, NO_INDUCER


def compute_ratio(numerator: ArrayLike, denominator: ArrayLike) -> NDArray[np.float64]:
    """Elementwise ``numerator / denominator``.

    A missing operand or a zero denominator gives NaN, never 0 or inf.

    Examples
    --------
    >>> compute_ratio([4.0, np.nan], [2.0, 2.0])
    array([ 2., nan])
    """
    num = np.asarray(numerator, dtype=np.float64)
    den = np.asarray(denominator, dtype=np.float64)
    if num.shape != den.shape:
        raise ValueError(
            f"numerator and denominator must have equal shape, "
            f"got {num.shape} and {den.shape}"
        )
    out = np.full(num.shape, np.nan)
    ok = ~np.isnan(num) & ~np.isnan(den) & (den != 0)
    np.divide(num, den, out=out, where=ok)
    return out


def to_wide(
    nca_table: pd.DataFrame,
    parameters: tuple[PKParameter, ...] = PK_PARAMETERS,
) -> pd.DataFrame:
    """One row per subject with per-group parameter columns and ratios.

    Parameters
    ----------
    nca_table : DataFrame
        Long NCA results, one row per (``ID``, ``IND``).
    parameters : tuple of PKParameter
        Parameters to carry over; each gets ``<key>_0``, ``<key>_1`` and,
        when ``ratio`` is set, ``<key>_RATIO`` (inducer / no inducer).

    Returns
    -------
    DataFrame
        Sorted by ``ID``. Every subject present in either group is kept;
        the missing side of an incomplete pair and its ratio are NaN.
    """
    keys = [p.key for p in parameters]
    missing = [c for c in [ID, IND, *keys] if c not in nca_table.columns]
    if missing:
        raise ValueError(f"to_wide: missing column(s) {missing}")

    dup = nca_table.duplicated(subset=[ID, IND], keep=False)
    if dup.any():
        subjects = sorted(nca_table.loc[dup, ID].unique().tolist())
        raise ValueError(f"duplicate (ID, IND) rows for subject(s) {subjects}")

    mapping = column_map(parameters)
    subjects = pd.Index(sorted(nca_table[ID].unique()), name=ID)
    wide = pd.DataFrame(index=subjects)

    by_group = {
        group: nca_table.loc[nca_table[IND] == group].set_index(ID)
        for group in (NO_INDUCER, INDUCER)
    }
    for param in parameters:
        for group, rows in by_group.items():
            wide[mapping[(param.key, group)]] = (
                rows[param.key].astype(np.float64).reindex(subjects)
            )
        if param.ratio:
            wide[ratio_column(param.key)] = compute_ratio(
                wide[mapping[(param.key, INDUCER)]],
                wide[mapping[(param.key, NO_INDUCER)]],
            )

    return wide.reset_index()


def complete_pairs(wide: pd.DataFrame, key: str) -> pd.DataFrame:
    """Rows of *wide* that have both group values of *key*."""
    cols = [paired_column(key, NO_INDUCER), paired_column(key, INDUCER)]
    return wide.dropna(subset=cols)
