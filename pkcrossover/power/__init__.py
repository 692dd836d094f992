"""
Sample size and power for the paired crossover comparison.

"How many subjects would a follow-up study need?" Solves the paired
(or two-sample) t-test power equation for whichever of n, d and power is
left unspecified, and computes Cohen's d from group summaries.

Validates against: R package pwr.
"""

from pkcrossover.power._common import PowerResult
from pkcrossover.power._means import power_t_test, power_paired_t_test
from pkcrossover.power._effect import cohens_d, cohens_d_from_samples, pooled_sd

__all__ = [
    "PowerResult",
    "power_t_test",
    "power_paired_t_test",
    "cohens_d",
    "cohens_d_from_samples",
    "pooled_sd",
]
