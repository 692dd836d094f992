"""
pkcrossover: crossover pharmacokinetic analysis for Python.

Reproduces a two-period enzyme-induction study analysis: plasma
concentrations measured in each subject without and with an inducer are
summarised as mean profiles, analysed by non-compartmental analysis,
compared within subject (geometric mean ratios, paired tests) and used
to size a follow-up study.

Usage:
    from pkcrossover import data, descriptive, pk, crossover, power, viz
    from pkcrossover.pipeline import run_from_file
"""

__version__ = "0.1.0"

from pkcrossover import data
from pkcrossover import descriptive
from pkcrossover import pk
from pkcrossover import crossover
from pkcrossover import power

__all__ = [
    "__version__",
    "data",
    "descriptive",
    "pk",
    "crossover",
    "power",
]
