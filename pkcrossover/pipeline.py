"""End-to-end crossover PK analysis.

Stages, each consuming the previous stage's output::

    observations -> mean profiles
                 -> per-subject NCA -> clearance in L/h -> wide table
                 -> summary table, paired tests, sample size, plots

A failing stage raises :class:`AnalysisStageError` naming the stage; the
original exception is chained.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
from matplotlib.figure import Figure

from pkcrossover.crossover import (
    PairedTestResult,
    format_table,
    paired_column,
    paired_t_test,
    paired_wilcoxon,
    summary_table,
    to_wide,
)
from pkcrossover.data import INDUCER, NO_INDUCER, load_observations, validate_observations
from pkcrossover.descriptive import aggregate_profiles
from pkcrossover.pk import nca_by_subject, rescale_clearance
from pkcrossover.power import PowerResult, cohens_d_from_samples, power_paired_t_test

logger = logging.getLogger(__name__)


class AnalysisStageError(RuntimeError):
    """A pipeline stage failed."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        self.stage = stage
        super().__init__(f"stage {stage!r} failed: {cause}")


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for :func:`run_analysis`.

    ``effect_size`` is the Cohen's d used for the sample size; ``None``
    computes it from the observed AUC of the two periods.
    """

    route: str = "ev"
    auc_method: str = "linear-up/log-down"
    lambda_z_n_points: int | None = None
    clearance_factor: float = 1000.0
    conf_level: float = 0.95
    t_test_parameter: str = "AUCLAST"
    wilcoxon_parameter: str = "TMAX"
    effect_size: float | None = -1.68
    alpha: float = 0.05
    power: float = 0.80
    output_dir: Path | None = None
    make_plots: bool = True
    paired_plot_parameters: tuple[str, ...] = ("AUCLAST", "CMAX", "HL", "CL")


@dataclass(frozen=True)
class AnalysisResult:
    """Every intermediate table and result of one analysis run.

    ``figures`` are closed in pyplot once created; save them with
    :func:`pkcrossover.viz.save_figure` or ``Figure.savefig``.
    """

    profiles: pd.DataFrame
    nca: pd.DataFrame
    wide: pd.DataFrame
    table: pd.DataFrame
    t_test: PairedTestResult
    wilcoxon: PairedTestResult
    sample_size: PowerResult
    figures: dict[str, Figure] = field(default_factory=dict)

    def summary(self) -> str:
        """Text report: summary table, tests and sample size."""
        return "\n\n".join([
            "Table 2. PK parameters without and with inducer",
            format_table(self.table),
            self.t_test.summary(),
            self.wilcoxon.summary(),
            self.sample_size.summary(),
        ])


@contextmanager
def _stage(name: str):
    logger.info("Stage: %s", name)
    try:
        yield
    except Exception as exc:
        logger.error("Stage %s failed: %s", name, exc)
        raise AnalysisStageError(name, exc) from exc


def _sample_size(wide: pd.DataFrame, config: AnalysisConfig) -> PowerResult:
    d = config.effect_size
    if d is None:
        key = config.t_test_parameter
        d = cohens_d_from_samples(
            wide[paired_column(key, INDUCER)], wide[paired_column(key, NO_INDUCER)],
        )
        logger.info("Effect size from observed %s: d = %.3f", key, d)
    return power_paired_t_test(d=d, alpha=config.alpha, power=config.power)


def _make_figures(obs, profiles, wide, config: AnalysisConfig) -> dict[str, Figure]:
    import matplotlib.pyplot as plt

    from pkcrossover.viz import plot_mean_profiles, plot_paired, plot_subject_profiles

    figures = {
        "mean_profiles": plot_mean_profiles(profiles),
        "mean_profiles_log": plot_mean_profiles(profiles, log_scale=True),
        "subject_profiles": plot_subject_profiles(obs),
    }
    for key in config.paired_plot_parameters:
        figures[f"paired_{key.lower()}"] = plot_paired(wide, key)
    # detached from pyplot; still drawable with Figure.savefig
    for fig in figures.values():
        plt.close(fig)
    return figures


def _write_outputs(result: AnalysisResult, output_dir: Path) -> None:
    from pkcrossover.viz import save_figure

    output_dir.mkdir(parents=True, exist_ok=True)
    result.table.to_csv(output_dir / "table2.csv", index=False)
    (output_dir / "table2.txt").write_text(result.summary() + "\n", encoding="utf-8")
    for name, fig in result.figures.items():
        save_figure(fig, output_dir / f"{name}.png")
    logger.info("Wrote outputs to %s", output_dir)


def run_analysis(
    obs: pd.DataFrame,
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """Run the full analysis on an observation table.

    Parameters
    ----------
    obs : DataFrame
        Observations with columns ``ID``, ``TAD``, ``DV``, ``IND``, ``DOSE``.
    config : AnalysisConfig or None
        Settings; defaults to ``AnalysisConfig()``.

    Returns
    -------
    AnalysisResult
    """
    config = config or AnalysisConfig()

    with _stage("validate"):
        obs = validate_observations(obs)
    with _stage("aggregate"):
        profiles = aggregate_profiles(obs)
    with _stage("nca"):
        nca_table = nca_by_subject(
            obs,
            route=config.route,
            auc_method=config.auc_method,
            lambda_z_n_points=config.lambda_z_n_points,
        )
    with _stage("rescale clearance"):
        nca_table = rescale_clearance(nca_table, factor=config.clearance_factor)
    with _stage("reshape"):
        wide = to_wide(nca_table)
    with _stage("summary table"):
        table = summary_table(wide, conf_level=config.conf_level)
    with _stage("paired t-test"):
        t_res = paired_t_test(wide, config.t_test_parameter)
    with _stage("wilcoxon test"):
        w_res = paired_wilcoxon(wide, config.wilcoxon_parameter)
    with _stage("sample size"):
        n_res = _sample_size(wide, config)

    figures: dict[str, Figure] = {}
    if config.make_plots:
        with _stage("plots"):
            figures = _make_figures(obs, profiles, wide, config)

    result = AnalysisResult(
        profiles=profiles,
        nca=nca_table,
        wide=wide,
        table=table,
        t_test=t_res,
        wilcoxon=w_res,
        sample_size=n_res,
        figures=figures,
    )

    if config.output_dir is not None:
        with _stage("write outputs"):
            _write_outputs(result, Path(config.output_dir))
    return result


def run_from_file(
    path: str | Path,
    config: AnalysisConfig | None = None,
    *,
    sheet_name: str | int = 0,
) -> AnalysisResult:
    """Load an observation spreadsheet and run :func:`run_analysis`."""
    with _stage("load"):
        obs = load_observations(path, sheet_name=sheet_name)
    return run_analysis(obs, config)
