"""
Descriptive statistics for crossover PK data.

Mean profiles by time and group, geometric means with confidence
intervals (for ratios of PK parameters) and medians with interquartile
ranges (for per-period parameter summaries).
"""

from pkcrossover.descriptive._common import GeometricMeanResult, MedianIQRResult
from pkcrossover.descriptive._aggregate import aggregate_profiles
from pkcrossover.descriptive._summary import (
    format_geometric_mean_ci,
    format_median_iqr,
    geometric_mean_ci,
    median_iqr,
)

__all__ = [
    "GeometricMeanResult",
    "MedianIQRResult",
    "aggregate_profiles",
    "geometric_mean_ci",
    "format_geometric_mean_ci",
    "median_iqr",
    "format_median_iqr",
]
