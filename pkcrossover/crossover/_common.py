"""Declared PK parameters and result types for crossover comparisons."""

from __future__ import annotations

from dataclasses import dataclass

from pkcrossover.data._common import GROUPS


@dataclass(frozen=True)
class PKParameter:
    """A per-subject NCA parameter carried into the crossover summary."""

    key: str  # column in the NCA table
    label: str  # row label in the summary table
    unit: str
    ratio: bool = True  # whether inducer/no-inducer ratios are meaningful


# Order is the row order of the summary table.
PK_PARAMETERS: tuple[PKParameter, ...] = (
    PKParameter("AUCLAST", "AUC", "h*ng/mL"),
    PKParameter("CMAX", "Cmax", "ng/mL"),
    PKParameter("HL", "Half-life", "h"),
    PKParameter("CL", "CL/F", "L/h"),
    PKParameter("TMAX", "Tmax", "h", ratio=False),
)


def paired_column(key: str, group: int) -> str:
    """Wide-table column holding parameter *key* for treatment *group*."""
    if group not in GROUPS:
        raise ValueError(f"group must be one of {GROUPS}, got {group!r}")
    return f"{key}_{group}"


def ratio_column(key: str) -> str:
    """Wide-table column holding the inducer / no-inducer ratio of *key*."""
    return f"{key}_RATIO"


def column_map(
    parameters: tuple[PKParameter, ...] = PK_PARAMETERS,
) -> dict[tuple[str, int], str]:
    """Explicit ``(parameter, group) -> column`` mapping for *parameters*.

    Raises if two (parameter, group) pairs would share a column name.
    """
    mapping: dict[tuple[str, int], str] = {}
    for param in parameters:
        for group in GROUPS:
            mapping[(param.key, group)] = paired_column(param.key, group)

    names = list(mapping.values()) + [ratio_column(p.key) for p in parameters]
    if len(set(names)) != len(names):
        raise ValueError(f"parameter keys produce colliding columns: {names}")
    return mapping


@dataclass(frozen=True)
class PairedTestResult:
    """Result of a paired two-sample test (group 0 vs group 1 per subject)."""

    parameter: str
    method: str
    statistic: float
    p_value: float
    n_pairs: int
    mean_difference: float  # mean of (inducer - no inducer)

    def summary(self) -> str:
        """Human-readable summary, similar to R's print.htest."""
        return "\n".join([
            self.method,
            "",
            f"data:  {self.parameter} (inducer vs no inducer, paired by subject)",
            f"statistic = {self.statistic:.4f}, n pairs = {self.n_pairs}, "
            f"p-value = {self.p_value:.4g}",
            f"mean difference = {self.mean_difference:.4g}",
        ])
