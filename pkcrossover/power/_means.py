"""Power and sample size for paired and two-sample t-tests.

Power of the two-sided test is computed exactly from the noncentral t
distribution::

    ncp   = d * sqrt(n)          (paired; n pairs, df = n - 1)
    ncp   = d * sqrt(n / 2)      (two-sample; n per group, df = 2n - 2)
    power = P(T' > t_crit) + P(T' < -t_crit),  T' ~ t(df, ncp)

Sample size is the smallest integer n reaching the requested power,
found by root-finding on the continuous power curve and rounding up.

Validates against: R ``pwr::pwr.t.test()``
"""

from __future__ import annotations

import math

from scipy.optimize import brentq
from scipy.stats import nct, norm
from scipy.stats import t as t_dist

from pkcrossover.power._common import PowerResult

_VALID_TYPES = ("two.sample", "paired")
_VALID_ALTERNATIVES = ("two.sided", "less", "greater")
_TYPE_LABELS = {"two.sample": "Two-sample", "paired": "Paired"}


def _normal_approx_power(ncp: float, alpha: float, alternative: str) -> float:
    """Normal limit of the noncentral t power (df -> inf)."""
    if alternative == "two.sided":
        z_crit = norm.ppf(1.0 - alpha / 2.0)
        return float(norm.sf(z_crit - ncp) + norm.cdf(-z_crit - ncp))
    if alternative == "greater":
        return float(norm.sf(norm.ppf(1.0 - alpha) - ncp))
    return float(norm.cdf(norm.ppf(alpha) - ncp))


def _t_test_power(
    n: float,
    d: float,
    alpha: float,
    alternative: str,
    type: str,
) -> float:
    """Power for (possibly non-integer) *n* and Cohen's *d*."""
    if type == "two.sample":
        ncp = d * math.sqrt(n / 2.0)
        df = 2.0 * n - 2.0
    else:
        ncp = d * math.sqrt(n)
        df = n - 1.0

    if df < 1.0:
        return 0.0
    if df > 1e5:
        return _normal_approx_power(ncp, alpha, alternative)

    if alternative == "two.sided":
        t_crit = t_dist.ppf(1.0 - alpha / 2.0, df)
        pwr = float(nct.sf(t_crit, df, ncp) + nct.cdf(-t_crit, df, ncp))
    elif alternative == "greater":
        pwr = float(nct.sf(t_dist.ppf(1.0 - alpha, df), df, ncp))
    else:
        pwr = float(nct.cdf(t_dist.ppf(alpha, df), df, ncp))

    # scipy's nct can return NaN for large noncentrality; the normal
    # approximation is accurate there.
    if math.isnan(pwr):
        pwr = _normal_approx_power(ncp, alpha, alternative)
    return pwr


def _unknown(n: int | None, d: float | None, power: float | None, alpha: float) -> str:
    """Name of the single argument left as ``None``."""
    given = {"n": n, "d": d, "power": power}
    missing = [name for name, value in given.items() if value is None]
    if len(missing) != 1:
        raise ValueError(
            f"Exactly one of n, d, power must be None (got {len(missing)} None values)"
        )
    if not (0.0 < alpha < 1.0):
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")
    if n is not None and n < 2:
        raise ValueError(f"n must be >= 2, got {n}")
    if power is not None and not (0.0 < power < 1.0):
        raise ValueError(f"power must be in (0, 1), got {power}")
    if d is not None and not math.isfinite(d):
        raise ValueError(f"d must be finite, got {d}")
    return missing[0]


def _invert(power_of, target: float, lo: float, hi: float) -> float:
    """Argument in [lo, hi] at which the monotonic ``power_of`` equals *target*."""
    p_lo, p_hi = power_of(lo), power_of(hi)
    if (p_lo - target) * (p_hi - target) > 0:
        raise ValueError(
            f"power {target:.6f} is not reachable: the curve spans "
            f"[{p_lo:.6f}, {p_hi:.6f}] on [{lo:g}, {hi:g}]"
        )
    return brentq(lambda x: power_of(x) - target, lo, hi, xtol=1e-10, maxiter=1000)


def power_t_test(
    n: int | None = None,
    d: float | None = None,
    alpha: float = 0.05,
    power: float | None = None,
    alternative: str = "two.sided",
    type: str = "two.sample",
) -> PowerResult:
    """Power calculation for t-tests.

    Exactly one of ``n``, ``d``, ``power`` must be ``None``; it is solved
    for given the others.

    Parameters
    ----------
    n : int or None
        Number of pairs (paired) or subjects per group (two-sample).
    d : float or None
        Cohen's d. For two-sided tests only ``|d|`` matters.
    alpha : float
        Significance level.
    power : float or None
        Desired power (1 - beta).
    alternative : str
        ``'two.sided'``, ``'less'`` or ``'greater'``.
    type : str
        ``'two.sample'`` or ``'paired'``.

    Returns
    -------
    PowerResult

    Examples
    --------
    >>> power_t_test(d=0.5, power=0.80).n
    64
    """
    if alternative not in _VALID_ALTERNATIVES:
        raise ValueError(
            f"alternative must be one of {_VALID_ALTERNATIVES}, got {alternative!r}"
        )
    if type not in _VALID_TYPES:
        raise ValueError(f"type must be one of {_VALID_TYPES}, got {type!r}")

    unknown = _unknown(n, d, power, alpha)

    d_internal = abs(d) if (d is not None and alternative == "two.sided") else d

    def power_at(n_: float, d_: float) -> float:
        return _t_test_power(n_, d_, alpha, alternative, type)

    result_n, result_d, result_power = n, d, power
    if unknown == "power":
        result_power = power_at(float(n), d_internal)
    elif unknown == "n":
        if d_internal == 0.0:
            raise ValueError("Cannot solve for n when d = 0 (no effect)")
        result_n = math.ceil(_invert(lambda x: power_at(x, d_internal), power, 2.0, 1e7))
    else:
        lo, hi = (-100.0, -1e-10) if alternative == "less" else (1e-10, 100.0)
        result_d = _invert(lambda x: power_at(float(n), x), power, lo, hi)

    return PowerResult(
        n=result_n,
        power=result_power,
        effect_size=result_d,
        alpha=alpha,
        alternative=alternative,
        method=f"{_TYPE_LABELS[type]} t test power calculation",
        note=(
            "n is number of *pairs*" if type == "paired"
            else "n is number in *each* group"
        ),
    )


def power_paired_t_test(
    n: int | None = None,
    d: float | None = None,
    alpha: float = 0.05,
    power: float | None = None,
    alternative: str = "two.sided",
) -> PowerResult:
    """``power_t_test`` with ``type='paired'``.

    Validates against: R ``pwr::pwr.t.test(type = "paired")``
    """
    return power_t_test(
        n=n, d=d, alpha=alpha, power=power, alternative=alternative, type="paired",
    )
