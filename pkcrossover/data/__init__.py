"""
Observation loading for crossover PK studies.

One row per plasma sample: subject (``ID``), time after dose (``TAD``),
concentration (``DV``), induction flag (``IND``) and dose (``DOSE``).
"""

from pkcrossover.data._common import (
    DOSE,
    DV,
    GROUP_LABELS,
    GROUPS,
    ID,
    IND,
    INDUCER,
    NO_INDUCER,
    REQUIRED_COLUMNS,
    TAD,
    MissingColumnError,
)
from pkcrossover.data._io import load_observations, validate_observations

__all__ = [
    "ID",
    "TAD",
    "DV",
    "IND",
    "DOSE",
    "REQUIRED_COLUMNS",
    "GROUPS",
    "GROUP_LABELS",
    "NO_INDUCER",
    "INDUCER",
    "MissingColumnError",
    "load_observations",
    "validate_observations",
]
