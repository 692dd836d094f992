"""Column contract and errors for observation tables."""

from __future__ import annotations

# Input columns (bit-exact names expected in the source spreadsheet)
ID = "ID"      # subject identifier
TAD = "TAD"    # time after dose, hours
DV = "DV"      # observed concentration, ng/mL
IND = "IND"    # induction flag: 0 = no inducer, 1 = inducer
DOSE = "DOSE"  # administered dose

REQUIRED_COLUMNS = (ID, TAD, DV, IND, DOSE)

NO_INDUCER = 0
INDUCER = 1
GROUPS = (NO_INDUCER, INDUCER)
GROUP_LABELS = {NO_INDUCER: "No inducer", INDUCER: "Inducer"}


class MissingColumnError(ValueError):
    """Raised when an observation table lacks required columns."""

    def __init__(self, missing: list[str], available: list[str]) -> None:
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            f"missing column(s) {', '.join(self.missing)}; "
            f"table has {', '.join(map(str, self.available)) or 'no columns'}"
        )
