"""Shared result types for pharmacokinetic analysis."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class NCAResult:
    """Non-compartmental parameters of one concentration-time profile."""

    # Exposure
    cmax: float  # peak observed concentration
    tmax: float  # time of first peak
    auc_last: float  # AUC from first sample to last measurable concentration
    auc_inf: float | None  # AUC extrapolated to infinity

    # Terminal phase
    lambda_z: float | None  # terminal elimination rate constant
    lambda_z_r_squared: float | None  # adjusted r-squared of the log-linear fit
    half_life: float | None  # ln(2) / lambda_z
    n_terminal: int  # points used for the terminal slope

    # Dose-dependent
    clearance: float | None  # Dose / AUC_inf (CL/F for extravascular)
    dose: float | None

    # Metadata
    route: str  # 'iv' or 'ev'
    auc_method: str
    n_points: int

    def as_record(self) -> dict[str, float]:
        """Flat mapping of the numeric parameters; ``None`` becomes NaN."""

        def _f(value: float | None) -> float:
            return math.nan if value is None else float(value)

        return {
            "CMAX": _f(self.cmax),
            "TMAX": _f(self.tmax),
            "AUCLAST": _f(self.auc_last),
            "AUCINF": _f(self.auc_inf),
            "HL": _f(self.half_life),
            "LAMBDA_Z": _f(self.lambda_z),
            "R2ADJ": _f(self.lambda_z_r_squared),
            "NTERM": self.n_terminal,
            "CL": _f(self.clearance),
        }

    def summary(self) -> str:
        """Human-readable PK summary."""
        lines = ["Non-Compartmental Analysis", ""]
        lines.append(f"  Route: {self.route.upper()}")
        lines.append(f"  AUC method: {self.auc_method}")
        if self.dose is not None:
            lines.append(f"  Dose: {self.dose}")
        lines.append("")
        lines.append(f"  Cmax          = {self.cmax:.4g}")
        lines.append(f"  Tmax          = {self.tmax:.4g}")
        lines.append(f"  AUC(0-last)   = {self.auc_last:.4g}")
        if self.auc_inf is not None:
            lines.append(f"  AUC(0-inf)    = {self.auc_inf:.4g}")
        if self.half_life is not None:
            lines.append(f"  t1/2          = {self.half_life:.4g}")
            lines.append(f"  lambda_z      = {self.lambda_z:.4g}")
            lines.append(f"  adj. r2       = {self.lambda_z_r_squared:.4f}")
            lines.append(f"  n terminal    = {self.n_terminal}")
        else:
            lines.append("  t1/2          = not estimable")
        if self.clearance is not None:
            label = "CL" if self.route == "iv" else "CL/F"
            lines.append(f"  {label:<14s}= {self.clearance:.4g}")
        return "\n".join(lines)
