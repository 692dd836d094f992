"""
Within-subject comparison of the two treatment periods.

Reshapes per-period NCA results to one row per subject, computes
inducer / no-inducer ratios, assembles the summary table (medians with
IQR per period, geometric mean ratios with 95% CI) and runs paired
significance tests.
"""

from pkcrossover.crossover._common import (
    PK_PARAMETERS,
    PKParameter,
    PairedTestResult,
    column_map,
    paired_column,
    ratio_column,
)
from pkcrossover.crossover._reshape import complete_pairs, compute_ratio, to_wide
from pkcrossover.crossover._table import (
    NOT_APPLICABLE,
    TABLE_COLUMNS,
    format_table,
    summary_table,
)
from pkcrossover.crossover._hypothesis import paired_t_test, paired_wilcoxon

__all__ = [
    "PK_PARAMETERS",
    "PKParameter",
    "PairedTestResult",
    "column_map",
    "paired_column",
    "ratio_column",
    "compute_ratio",
    "complete_pairs",
    "to_wide",
    "TABLE_COLUMNS",
    "NOT_APPLICABLE",
    "summary_table",
    "format_table",
    "paired_t_test",
    "paired_wilcoxon",
]
