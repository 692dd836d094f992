"""NCA for every subject and treatment period of an observation table.

**Per-profile loop**: each (subject, group) profile is analysed with
:func:`nca` independently. The result is a long table, one row per
profile, that later stages reshape by group.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from pkcrossover.data._common import DOSE, DV, ID, IND, TAD

logger = logging.getLogger(__name__)

CLEARANCE_UNIT_ATTR = "clearance_unit"
RAW_CLEARANCE_UNIT = "mL/h"
RESCALED_CLEARANCE_UNIT = "L/h"

NCA_COLUMNS = (
    ID, IND, DOSE, "CMAX", "TMAX", "AUCLAST", "AUCINF",
    "HL", "LAMBDA_Z", "R2ADJ", "NTERM", "CL",
)
_MIN_MEASURED = 3
_UNESTIMABLE = dict.fromkeys(NCA_COLUMNS[3:], np.nan)


class NCAError(ValueError):
    """NCA failed for one subject/group profile."""

    def __init__(self, subject, group, reason: str) -> None:
        self.subject = subject
        self.group = group
        super().__init__(f"NCA failed for subject {subject!r}, {IND}={group}: {reason}")


def _profile_dose(subject, group, doses: pd.Series) -> float | None:
    """Dose of one profile: first non-missing value."""
    doses = doses.dropna()
    if doses.empty:
        return None
    if doses.nunique() > 1:
        logger.warning(
            "subject %r, %s=%s has several doses %s; using %s",
            subject, IND, group, sorted(doses.unique()), doses.iloc[0],
        )
    return float(doses.iloc[0])


def nca_by_subject(
    obs: pd.DataFrame,
    *,
    route: str = "ev",
    auc_method: str = "linear-up/log-down",
    lambda_z_n_points: int | None = None,
) -> pd.DataFrame:
    """Run NCA per (subject, group).

    Parameters
    ----------
    obs : DataFrame
        Validated observations.
    route, auc_method, lambda_z_n_points
        Passed to :func:`pkcrossover.pk.nca`.

    Returns
    -------
    DataFrame
        One row per (``ID``, ``IND``) with columns ``ID``, ``IND``,
        ``DOSE``, ``CMAX``, ``TMAX``, ``AUCLAST``, ``AUCINF``, ``HL``,
        ``LAMBDA_Z``, ``R2ADJ``, ``NTERM``, ``CL``. Parameters that cannot
        be estimated are NaN, as are all parameters of a profile with fewer
        than 3 measured samples. ``attrs["clearance_unit"]`` is ``"mL/h"``.

    Raises
    ------
    NCAError
        Naming the subject and group whose profile is malformed (negative
        values, duplicate times, ...).
    """
    from pkcrossover.pk._nca import nca

    records = []
    for (subject, group), profile in obs.groupby([ID, IND], sort=True):
        measured = profile.dropna(subset=[DV])
        dose = _profile_dose(subject, group, profile[DOSE])
        if len(measured) < _MIN_MEASURED:
            logger.warning(
                "subject %r, %s=%s has %d measured sample(s); parameters set to NaN",
                subject, IND, group, len(measured),
            )
            params = _UNESTIMABLE
        else:
            try:
                result = nca(
                    measured[TAD].to_numpy(),
                    measured[DV].to_numpy(),
                    dose=dose,
                    route=route,
                    auc_method=auc_method,
                    lambda_z_n_points=lambda_z_n_points,
                )
            except ValueError as exc:
                raise NCAError(subject, group, str(exc)) from exc
            if result.half_life is None:
                logger.warning(
                    "terminal half-life not estimable for subject %r, %s=%s",
                    subject, IND, group,
                )
            params = result.as_record()

        records.append({
            ID: subject,
            IND: int(group),
            DOSE: np.nan if dose is None else dose,
            **params,
        })

    table = pd.DataFrame.from_records(records, columns=list(NCA_COLUMNS))
    table.attrs[CLEARANCE_UNIT_ATTR] = RAW_CLEARANCE_UNIT
    logger.info("NCA completed for %d profile(s)", len(table))
    return table


def rescale_clearance(
    nca_table: pd.DataFrame,
    *,
    factor: float = 1000.0,
) -> pd.DataFrame:
    """Convert clearance from mL/h to L/h (divide by *factor*), once.

    The unit is tracked in ``attrs["clearance_unit"]``; a table already
    labelled ``"L/h"`` is rejected so the division can never be applied
    twice.

    Returns
    -------
    DataFrame
        Rescaled copy; the input is not modified.
    """
    unit = nca_table.attrs.get(CLEARANCE_UNIT_ATTR)
    if unit == RESCALED_CLEARANCE_UNIT:
        raise ValueError(
            f"clearance is already in {RESCALED_CLEARANCE_UNIT}; "
            f"refusing to rescale twice"
        )
    if unit != RAW_CLEARANCE_UNIT:
        raise ValueError(
            f"unknown clearance unit {unit!r}; expected {RAW_CLEARANCE_UNIT!r} "
            f"(tables from nca_by_subject carry it in attrs)"
        )
    if not factor > 0:
        raise ValueError(f"factor must be positive, got {factor}")

    out = nca_table.copy()
    out["CL"] = out["CL"] / factor
    out.attrs[CLEARANCE_UNIT_ATTR] = RESCALED_CLEARANCE_UNIT
    return out
