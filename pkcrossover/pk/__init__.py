"""
Non-compartmental pharmacokinetic analysis (NCA).

Cmax, Tmax, AUC (linear-up/log-down), terminal half-life and clearance
for single profiles, and a per-subject/per-period loop over an
observation table.

Validates against: R packages PKNCA, NonCompart.
"""

from pkcrossover.pk._common import NCAResult
from pkcrossover.pk._nca import nca
from pkcrossover.pk._batch import NCAError, nca_by_subject, rescale_clearance

__all__ = [
    "NCAResult",
    "NCAError",
    "nca",
    "nca_by_subject",
    "rescale_clearance",
]
