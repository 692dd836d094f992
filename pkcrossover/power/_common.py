"""Result type shared by the power and sample size calculations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PowerResult:
    """Result of a power/sample size calculation.

    Exactly one of n, power or effect_size was solved for; the others are
    the caller's inputs.
    """

    n: int | None
    power: float | None
    effect_size: float | None
    alpha: float
    alternative: str
    method: str
    note: str = ""

    def summary(self) -> str:
        """Human-readable summary, similar to R's print.power.htest."""
        lines = [self.method, ""]
        if self.n is not None:
            lines.append(f"              n = {self.n}")
        if self.effect_size is not None:
            lines.append(f"              d = {self.effect_size:.6f}")
        lines.append(f"      sig.level = {self.alpha}")
        if self.power is not None:
            lines.append(f"          power = {self.power:.6f}")
        lines.append(f"    alternative = {self.alternative}")
        if self.note:
            lines.append("")
            lines.append(f"NOTE: {self.note}")
        return "\n".join(lines)

