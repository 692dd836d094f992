"""Loading and validating concentration-time observations.

The source data is a spreadsheet with one row per plasma sample. Columns
``ID``, ``TAD``, ``DV``, ``IND`` and ``DOSE`` are a load-time contract:
anything missing fails immediately rather than surfacing later as a
confusing ``KeyError`` deep inside the analysis.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from pkcrossover.data._common import (
    DOSE,
    DV,
    GROUPS,
    ID,
    IND,
    REQUIRED_COLUMNS,
    TAD,
    MissingColumnError,
)

logger = logging.getLogger(__name__)

_EXCEL_SUFFIXES = (".xlsx", ".xlsm")


def _coerce_numeric(df: pd.DataFrame, column: str) -> pd.Series:
    """Convert a column to float, rejecting non-numeric text."""
    values = pd.to_numeric(df[column], errors="coerce")
    bad = values.isna() & df[column].notna()
    if bad.any():
        examples = df.loc[bad, column].astype(str).unique()[:3]
        raise ValueError(
            f"column {column!r} has non-numeric values: {', '.join(examples)}"
        )
    return values.astype(np.float64)


def validate_observations(df: pd.DataFrame) -> pd.DataFrame:
    """Check the column contract and normalise dtypes.

    Parameters
    ----------
    df : DataFrame
        Raw observation table.

    Returns
    -------
    DataFrame
        Validated copy. ``TAD``, ``DV`` and ``DOSE`` are float64 (``DV``
        may hold NaN for missing samples), ``IND`` is int.

    Raises
    ------
    MissingColumnError
        If any of ``ID``, ``TAD``, ``DV``, ``IND``, ``DOSE`` is absent.
    ValueError
        On non-numeric values, missing/negative times or a group flag
        other than 0/1.
    """
    if not isinstance(df, pd.DataFrame):
        raise TypeError(f"expected a pandas DataFrame, got {type(df).__name__}")

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise MissingColumnError(missing, list(df.columns))

    out = df.copy()
    for column in (TAD, DV, DOSE):
        out[column] = _coerce_numeric(out, column)

    if out[ID].isna().any():
        raise ValueError(f"column {ID!r} has missing subject identifiers")

    if out[TAD].isna().any():
        raise ValueError(f"column {TAD!r} has missing time values")
    if (out[TAD] < 0).any():
        raise ValueError(f"column {TAD!r} must be non-negative")

    ind = _coerce_numeric(out, IND)
    if ind.isna().any() or not ind.isin(GROUPS).all():
        found = sorted(set(ind.dropna().unique()) - set(GROUPS))
        raise ValueError(
            f"column {IND!r} must only contain 0 or 1"
            + (f", found {found}" if found else " (missing values present)")
        )
    out[IND] = ind.astype(int)

    n_missing = int(out[DV].isna().sum())
    if n_missing:
        logger.debug("%d observation(s) have no concentration value", n_missing)

    return out.reset_index(drop=True)


def load_observations(path: str | Path, *, sheet_name: str | int = 0) -> pd.DataFrame:
    """Read an observation spreadsheet (``.xlsx``/``.xlsm``) or ``.csv`` file.

    Parameters
    ----------
    path : str or Path
        Input file.
    sheet_name : str or int
        Worksheet to read for Excel input (ignored for CSV).

    Returns
    -------
    DataFrame
        Validated observations, see :func:`validate_observations`.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in _EXCEL_SUFFIXES:
        raw = pd.read_excel(path, sheet_name=sheet_name)
    elif suffix == ".csv":
        raw = pd.read_csv(path)
    else:
        raise ValueError(
            f"unsupported file type {suffix!r}; expected one of "
            f"{_EXCEL_SUFFIXES + ('.csv',)}"
        )

    logger.info("Loaded %d rows from %s", len(raw), path)
    return validate_observations(raw)
