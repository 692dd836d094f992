"""Non-compartmental pharmacokinetic analysis (NCA) of a single profile.

AUC uses the linear-up/log-down trapezoidal rule by default: linear on
rising or flat segments, logarithmic on falling segments. The terminal
elimination rate constant (lambda_z) comes from an unweighted regression
of log(C) on time over the last points after Cmax; the number of points
is chosen automatically as the fit with the best adjusted r-squared
(at least 3 points), unless fixed by the caller.

Derived parameters::

    t1/2   = ln(2) / lambda_z
    AUCinf = AUClast + Clast / lambda_z
    CL     = Dose / AUCinf        (CL/F for extravascular dosing)

References
----------
Gabrielsson & Weiner (2000). *Pharmacokinetic and Pharmacodynamic
Data Analysis*, 3rd ed.

Validates against: R ``PKNCA::pk.nca()``, ``NonCompart::sNCA()``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pkcrossover.pk._common import NCAResult

_ROUTES = ("iv", "ev")
_AUC_METHODS = ("linear", "log-linear", "linear-up/log-down")


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def _validate_inputs(
    time: NDArray[np.floating],
    concentration: NDArray[np.floating],
    dose: float | None,
    route: str,
    auc_method: str,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return time and concentration as float64 arrays sorted by time."""
    time = np.asarray(time, dtype=np.float64).ravel()
    concentration = np.asarray(concentration, dtype=np.float64).ravel()

    if time.shape[0] != concentration.shape[0]:
        raise ValueError(
            f"time and concentration must have equal length, "
            f"got {time.shape[0]} and {concentration.shape[0]}"
        )
    if time.shape[0] < 3:
        raise ValueError("Need at least 3 time-concentration points for NCA")
    if np.any(~np.isfinite(time)) or np.any(~np.isfinite(concentration)):
        raise ValueError("time and concentration must be finite (drop missing samples first)")
    if np.any(time < 0):
        raise ValueError("time values must be non-negative")
    if np.any(concentration < 0):
        raise ValueError("concentration values must be non-negative")

    if dose is not None and not (np.isfinite(dose) and dose > 0):
        raise ValueError(f"dose must be positive, got {dose}")
    if route not in _ROUTES:
        raise ValueError(f"route must be 'iv' or 'ev', got {route!r}")
    if auc_method not in _AUC_METHODS:
        raise ValueError(
            f"auc_method must be one of {_AUC_METHODS}, got {auc_method!r}"
        )

    order = np.argsort(time, kind="stable")
    time = time[order]
    concentration = concentration[order]

    if np.any(np.diff(time) == 0):
        raise ValueError("Duplicate time points detected; merge or remove them")

    return time, concentration


# ---------------------------------------------------------------------------
# AUC
# ---------------------------------------------------------------------------

def _auc_segments(
    time: NDArray[np.float64],
    concentration: NDArray[np.float64],
    method: str,
) -> NDArray[np.float64]:
    """Per-interval AUC contributions (length n - 1)."""
    dt = np.diff(time)
    c1 = concentration[:-1]
    c2 = concentration[1:]
    linear = 0.5 * (c1 + c2) * dt

    if method == "linear":
        return linear

    # Log trapezoid is undefined with a zero or flat end; those segments
    # stay linear.
    use_log = (c1 > 0) & (c2 > 0) & (c1 != c2)
    if method == "linear-up/log-down":
        use_log &= c2 < c1

    segments = linear.copy()
    idx = np.where(use_log)[0]
    segments[idx] = (c1[idx] - c2[idx]) * dt[idx] / np.log(c1[idx] / c2[idx])
    return segments


def _last_measurable(concentration: NDArray[np.float64]) -> int:
    """Index of the last positive concentration (Clast), -1 if none."""
    positive = np.flatnonzero(concentration > 0)
    return int(positive[-1]) if positive.size else -1


# ---------------------------------------------------------------------------
# Terminal elimination rate constant
# ---------------------------------------------------------------------------

def _adjusted_r_squared(r_value: float, n: int) -> float:
    r_sq = r_value ** 2
    return 1.0 - (1.0 - r_sq) * (n - 1) / (n - 2)


def _estimate_lambda_z(
    time: NDArray[np.float64],
    concentration: NDArray[np.float64],
    idx_cmax: int,
    idx_last: int,
    n_points: int | None,
) -> tuple[float | None, float | None, int]:
    """Terminal rate constant from a log-linear fit of the last points.

    Returns ``(lambda_z, adjusted r-squared, points used)``, or
    ``(None, None, 0)`` when fewer than 3 usable points exist or the fitted
    slope is not negative.
    """
    window = np.arange(idx_cmax + 1, idx_last + 1)
    candidates = window[concentration[window] > 0]
    if candidates.size < 3:
        # Fall back to including Cmax itself
        window = np.arange(idx_cmax, idx_last + 1)
        candidates = window[concentration[window] > 0]
        if candidates.size < 3:
            return None, None, 0

    if n_points is not None:
        if n_points < 3:
            raise ValueError("lambda_z_n_points must be >= 3")
        if n_points > candidates.size:
            raise ValueError(
                f"lambda_z_n_points={n_points} exceeds available "
                f"terminal points ({candidates.size})"
            )
        trials = [n_points]
    else:
        trials = range(3, candidates.size + 1)

    best: tuple[float, float, int] | None = None
    for n_try in trials:
        use = candidates[-n_try:]
        fit = stats.linregress(time[use], np.log(concentration[use]))
        r_sq_adj = _adjusted_r_squared(fit.rvalue, n_try)
        if best is None or r_sq_adj > best[1]:
            best = (fit.slope, r_sq_adj, n_try)

    slope, r_sq_adj, n_fit = best
    if not slope < 0:
        return None, None, 0
    return float(-slope), float(r_sq_adj), n_fit


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def nca(
    time: NDArray[np.floating],
    concentration: NDArray[np.floating],
    *,
    dose: float | None = None,
    route: str = "ev",
    auc_method: str = "linear-up/log-down",
    lambda_z_n_points: int | None = None,
) -> NCAResult:
    """Non-compartmental analysis of one concentration-time profile.

    Parameters
    ----------
    time : array
        Sampling times (non-negative, no duplicates).
    concentration : array
        Observed concentrations (non-negative, no missing values).
    dose : float or None
        Administered dose; required for clearance.
    route : str
        ``'iv'`` or ``'ev'`` (extravascular). Only changes labelling:
        extravascular clearance is apparent clearance (CL/F).
    auc_method : str
        ``'linear'``, ``'log-linear'`` or ``'linear-up/log-down'`` (default).
    lambda_z_n_points : int or None
        Fixed number of terminal points for the half-life regression,
        or ``None`` for automatic selection.

    Returns
    -------
    NCAResult

    Notes
    -----
    Parameters that need the terminal slope (half-life, AUCinf, CL) are
    ``None`` when lambda_z cannot be estimated.
    """
    time, concentration = _validate_inputs(
        time, concentration, dose, route, auc_method,
    )
    n_points = time.shape[0]

    idx_cmax = int(np.argmax(concentration))
    cmax = float(concentration[idx_cmax])
    tmax = float(time[idx_cmax])

    idx_last = _last_measurable(concentration)
    if idx_last < 0:
        # All concentrations zero
        return NCAResult(
            cmax=0.0, tmax=float(time[0]), auc_last=0.0, auc_inf=None,
            lambda_z=None, lambda_z_r_squared=None, half_life=None,
            n_terminal=0, clearance=None, dose=dose,
            route=route, auc_method=auc_method, n_points=n_points,
        )

    auc_last = float(np.sum(
        _auc_segments(time[: idx_last + 1], concentration[: idx_last + 1], auc_method)
    ))

    lambda_z, r_sq_adj, n_terminal = _estimate_lambda_z(
        time, concentration, idx_cmax, idx_last, lambda_z_n_points,
    )

    half_life = auc_inf = clearance = None
    if lambda_z is not None:
        half_life = float(np.log(2.0) / lambda_z)
        auc_inf = auc_last + float(concentration[idx_last]) / lambda_z
        if dose is not None:
            clearance = dose / auc_inf

    return NCAResult(
        cmax=cmax,
        tmax=tmax,
        auc_last=auc_last,
        auc_inf=auc_inf,
        lambda_z=lambda_z,
        lambda_z_r_squared=r_sq_adj,
        half_life=half_life,
        n_terminal=n_terminal,
        clearance=clearance,
        dose=dose,
        route=route,
        auc_method=auc_method,
        n_points=n_points,
    )
