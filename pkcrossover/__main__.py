"""Command line entry point: ``python -m pkcrossover DATA``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pkcrossover.pipeline import AnalysisConfig, AnalysisStageError, run_from_file


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkcrossover",
        description="Crossover PK analysis: NCA, summary table, paired tests, sample size.",
    )
    parser.add_argument("data", type=Path, help="observation file (.xlsx or .csv)")
    parser.add_argument("--sheet", default=0, help="worksheet name or index (Excel input)")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("output"),
                        help="directory for the table and figures (default: ./output)")
    parser.add_argument("--effect-size", type=float, default=-1.68,
                        help="Cohen's d for the sample size (default: -1.68)")
    parser.add_argument("--observed-effect", action="store_true",
                        help="compute Cohen's d from the observed AUC instead")
    parser.add_argument("--alpha", type=float, default=0.05)
    parser.add_argument("--power", type=float, default=0.80)
    parser.add_argument("--no-plots", action="store_true", help="skip figures")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sheet = int(args.sheet) if str(args.sheet).isdigit() else args.sheet
    config = AnalysisConfig(
        effect_size=None if args.observed_effect else args.effect_size,
        alpha=args.alpha,
        power=args.power,
        output_dir=args.output_dir,
        make_plots=not args.no_plots,
    )
    try:
        result = run_from_file(args.data, config, sheet_name=sheet)
    except AnalysisStageError as exc:
        logging.getLogger("pkcrossover").error("%s", exc)
        return 1

    print(result.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
