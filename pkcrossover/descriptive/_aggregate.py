"""Mean concentration-time profiles per treatment group."""

from __future__ import annotations

import pandas as pd

from pkcrossover.data._common import DV, IND, TAD

MEAN = "MEAN"
SD = "SD"
N = "N"


def aggregate_profiles(obs: pd.DataFrame) -> pd.DataFrame:
    """Mean and standard deviation of concentration by (TAD, IND).

    Parameters
    ----------
    obs : DataFrame
        Validated observations (see :func:`pkcrossover.data.validate_observations`).

    Returns
    -------
    DataFrame
        Columns ``TAD``, ``IND``, ``MEAN``, ``SD``, ``N``; exactly one row
        per distinct (TAD, IND) pair present in *obs*, sorted by group then
        time. Missing concentrations are ignored. ``SD`` uses ``ddof=1`` and
        is NaN when fewer than two concentrations contribute; ``N`` counts
        the non-missing concentrations.
    """
    missing = [c for c in (TAD, IND, DV) if c not in obs.columns]
    if missing:
        raise ValueError(f"aggregate_profiles: missing column(s) {missing}")

    grouped = obs.groupby([TAD, IND], sort=False)[DV]
    profiles = grouped.agg(["mean", "std", "count"]).reset_index()
    profiles.columns = [TAD, IND, MEAN, SD, N]
    profiles[N] = profiles[N].astype(int)

    return profiles.sort_values([IND, TAD], kind="stable").reset_index(drop=True)
