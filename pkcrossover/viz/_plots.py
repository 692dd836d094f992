"""Figures for the crossover PK analysis.

All functions return a matplotlib ``Figure``; writing it to disk is left
to :func:`save_figure`.
"""

from __future__ import annotations

import math
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from pkcrossover.crossover._common import PK_PARAMETERS, paired_column
from pkcrossover.data._common import DV, GROUP_LABELS, GROUPS, ID, IND, INDUCER, NO_INDUCER, TAD
from pkcrossover.descriptive._aggregate import MEAN, SD

GROUP_COLORS = {NO_INDUCER: "#1f77b4", INDUCER: "#d62728"}
GROUP_MARKERS = {NO_INDUCER: "o", INDUCER: "s"}


def _parameter_label(key: str) -> str:
    for param in PK_PARAMETERS:
        if param.key == key:
            return f"{param.label} ({param.unit})"
    return key


def plot_mean_profiles(
    profiles: pd.DataFrame,
    *,
    log_scale: bool = False,
    title: str | None = "Mean concentration-time profiles",
    xlabel: str = "Time after dose (h)",
    ylabel: str = "Concentration (ng/mL)",
    figsize: tuple[float, float] = (8, 5),
) -> Figure:
    """Mean +/- SD concentration versus time, one line per group.

    Parameters
    ----------
    profiles : DataFrame
        Output of :func:`pkcrossover.descriptive.aggregate_profiles`.
        Undefined SDs (single observation) are drawn without error bars.
    """
    fig, ax = plt.subplots(figsize=figsize)
    for group in GROUPS:
        rows = profiles.loc[profiles[IND] == group].sort_values(TAD)
        if rows.empty:
            continue
        ax.errorbar(
            rows[TAD], rows[MEAN], yerr=rows[SD].fillna(0.0),
            color=GROUP_COLORS[group], marker=GROUP_MARKERS[group],
            capsize=3, linewidth=1.5, label=GROUP_LABELS[group],
        )
    if log_scale:
        ax.set_yscale("log")
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    if title:
        ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def plot_paired(
    wide: pd.DataFrame,
    key: str,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (5, 5),
) -> Figure:
    """Parameter per subject in each period, joined by a line per subject."""
    ref = wide[paired_column(key, NO_INDUCER)].to_numpy(dtype=np.float64)
    test = wide[paired_column(key, INDUCER)].to_numpy(dtype=np.float64)

    fig, ax = plt.subplots(figsize=figsize)
    x = np.array([0.0, 1.0])
    for r, t in zip(ref, test):
        ax.plot(x, [r, t], color="grey", alpha=0.6, marker="o", markersize=4)
    # Group medians
    for pos, (group, values) in enumerate(((NO_INDUCER, ref), (INDUCER, test))):
        if np.all(np.isnan(values)):
            continue
        ax.plot(pos, np.nanmedian(values), marker="_", markersize=30,
                markeredgewidth=3, color=GROUP_COLORS[group])

    ax.set_xticks(x)
    ax.set_xticklabels([GROUP_LABELS[NO_INDUCER], GROUP_LABELS[INDUCER]])
    ax.set_xlim(-0.5, 1.5)
    ax.set_ylabel(_parameter_label(key))
    ax.set_title(title if title is not None else _parameter_label(key))
    fig.tight_layout()
    return fig


def plot_subject_profiles(
    obs: pd.DataFrame,
    *,
    log_scale: bool = True,
    ncols: int = 4,
    xlabel: str = "Time after dose (h)",
    ylabel: str = "Concentration (ng/mL)",
    panel_size: tuple[float, float] = (3.0, 2.5),
) -> Figure:
    """Faceted concentration-time curves, one panel per subject.

    Both periods are overlaid in each panel. Missing and (on a log axis)
    non-positive concentrations are not drawn.
    """
    if ncols < 1:
        raise ValueError(f"ncols must be >= 1, got {ncols}")
    subjects = sorted(obs[ID].unique())
    if not subjects:
        raise ValueError("no subjects to plot")

    ncols = min(ncols, len(subjects))
    nrows = math.ceil(len(subjects) / ncols)
    fig, axes = plt.subplots(
        nrows, ncols, squeeze=False, sharex=True, sharey=True,
        figsize=(panel_size[0] * ncols, panel_size[1] * nrows),
    )

    for ax, subject in zip(axes.flat, subjects):
        data = obs.loc[(obs[ID] == subject) & obs[DV].notna()]
        if log_scale:
            data = data.loc[data[DV] > 0]
        for group in GROUPS:
            rows = data.loc[data[IND] == group].sort_values(TAD)
            if rows.empty:
                continue
            ax.plot(rows[TAD], rows[DV], color=GROUP_COLORS[group],
                    marker=GROUP_MARKERS[group], markersize=3,
                    label=GROUP_LABELS[group])
        ax.set_title(f"{ID} {subject}", fontsize=9)
        if log_scale:
            ax.set_yscale("log")

    for ax in list(axes.flat)[len(subjects):]:
        ax.set_visible(False)

    handles, labels = axes.flat[0].get_legend_handles_labels()
    if handles:
        fig.legend(handles, labels, loc="upper right")
    fig.supxlabel(xlabel)
    fig.supylabel(ylabel)
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, *, dpi: int = 150) -> Path:
    """Write *fig* to *path* (parent directories created) and close it."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return path
