"""Summary table of PK parameters by treatment period ("Table 2")."""

from __future__ import annotations

import logging

import pandas as pd

from pkcrossover.crossover._common import (
    PK_PARAMETERS,
    PKParameter,
    paired_column,
    ratio_column,
)
from pkcrossover.data._common import IND, INDUCER, NO_INDUCER
from pkcrossover.descriptive._summary import geometric_mean_ci, median_iqr

logger = logging.getLogger(__name__)

TABLE_COLUMNS = (
    "Parameter",
    "Unit",
    "No inducer, median (IQR)",
    "Inducer, median (IQR)",
    "GMR (95% CI)",
)
NOT_APPLICABLE = "NA"


def _median_cell(wide: pd.DataFrame, key: str, group: int, digits: int) -> str:
    values = wide[paired_column(key, group)]
    if values.notna().sum() == 0:
        logger.warning(
            "%s: no values for %s=%s; reporting %s", key, IND, group, NOT_APPLICABLE,
        )
        return NOT_APPLICABLE
    return median_iqr(values).format(digits)


def _gmr_cell(wide: pd.DataFrame, key: str, conf_level: float, digits: int) -> str:
    """GMR cell; undefined ratios are left out, fewer than 2 defined gives NA."""
    ratios = wide[ratio_column(key)]
    n_undefined = int(ratios.isna().sum())
    if n_undefined:
        logger.warning("%s: %d undefined ratio(s) left out of the GMR", key, n_undefined)
    if len(ratios) - n_undefined < 2:
        logger.warning(
            "%s: fewer than 2 defined ratios; reporting %s", key, NOT_APPLICABLE,
        )
        return NOT_APPLICABLE
    return geometric_mean_ci(ratios, conf_level=conf_level).format(digits)


def summary_table(
    wide: pd.DataFrame,
    parameters: tuple[PKParameter, ...] = PK_PARAMETERS,
    *,
    conf_level: float = 0.95,
    digits: int = 2,
) -> pd.DataFrame:
    """Assemble the per-parameter summary table.

    Parameters
    ----------
    wide : DataFrame
        Output of :func:`pkcrossover.crossover.to_wide`.
    parameters : tuple of PKParameter
        Row order. Parameters with ``ratio=False`` get ``"NA"`` in the GMR
        column.
    conf_level : float
        Confidence level of the GMR interval.
    digits : int
        Decimals in the formatted cells.

    Returns
    -------
    DataFrame
        Columns ``TABLE_COLUMNS``. The first row (``N``) gives the number of
        subjects with a value in each period and the number of complete
        pairs; one row per parameter follows.
    """
    first = parameters[0].key
    n_ref = int(wide[paired_column(first, NO_INDUCER)].notna().sum())
    n_test = int(wide[paired_column(first, INDUCER)].notna().sum())
    n_pairs = int(wide[[paired_column(first, g) for g in (NO_INDUCER, INDUCER)]]
                  .notna().all(axis=1).sum())

    rows = [["N", "", str(n_ref), str(n_test), str(n_pairs)]]
    for param in parameters:
        ref = _median_cell(wide, param.key, NO_INDUCER, digits)
        test = _median_cell(wide, param.key, INDUCER, digits)
        if param.ratio:
            gmr = _gmr_cell(wide, param.key, conf_level, digits)
        else:
            gmr = NOT_APPLICABLE
        rows.append([param.label, param.unit, ref, test, gmr])

    return pd.DataFrame(rows, columns=list(TABLE_COLUMNS))


def format_table(table: pd.DataFrame) -> str:
    """Plain-text rendering of a summary table."""
    return table.to_string(index=False)
