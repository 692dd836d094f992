"""Shared result types for descriptive summaries."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeometricMeanResult:
    """Geometric mean with a confidence interval from the log scale."""

    mean: float
    lower: float
    upper: float
    conf_level: float
    n: int  # number of values used (missing values excluded)

    def format(self, digits: int = 2) -> str:
        """``"mean (lower-upper)"`` rounded to *digits* decimals."""
        return (
            f"{self.mean:.{digits}f} "
            f"({self.lower:.{digits}f}-{self.upper:.{digits}f})"
        )

    def summary(self) -> str:
        """Human-readable summary."""
        return "\n".join([
            "Geometric mean",
            f"  n             = {self.n}",
            f"  mean          = {self.mean:.4g}",
            f"  {self.conf_level:.0%} CI        = [{self.lower:.4g}, {self.upper:.4g}]",
        ])


@dataclass(frozen=True)
class MedianIQRResult:
    """Median with 25th and 75th percentiles."""

    median: float
    q1: float
    q3: float
    n: int

    def format(self, digits: int = 2) -> str:
        """``"median (Q1-Q3)"`` rounded to *digits* decimals."""
        return (
            f"{self.median:.{digits}f} "
            f"({self.q1:.{digits}f}-{self.q3:.{digits}f})"
        )
