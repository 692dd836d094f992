"""
Plots for crossover PK studies (matplotlib).

Mean profiles by group, paired subject plots of NCA parameters and
faceted per-subject concentration curves.
"""

from pkcrossover.viz._plots import (
    plot_mean_profiles,
    plot_paired,
    plot_subject_profiles,
    save_figure,
)

__all__ = [
    "plot_mean_profiles",
    "plot_paired",
    "plot_subject_profiles",
    "save_figure",
]
