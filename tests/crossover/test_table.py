"""Tests for the per-parameter summary table."""

import numpy as np
import pandas as pd
import pytest

from pkcrossover.crossover import TABLE_COLUMNS, format_table, summary_table, to_wide


@pytest.fixture
def wide():
    """Three subjects with identical ratios, one subject lacking the inducer period."""
    return to_wide(pd.DataFrame({
        "ID":      [1,   1,   2,   2,   3,   3,   4],
        "IND":     [0,   1,   0,   1,   0,   1,   0],
        "AUCLAST": [10., 5.,  20., 10., 30., 15., 40.],
        "CMAX":    [2.,  4.,  4.,  8.,  6.,  12., 8.],
        "HL":      [4.,  2.,  4.,  2.,  4.,  2.,  4.],
        "CL":      [1.,  2.,  .5,  1.,  2.,  4.,  1.],
        "TMAX":    [1.,  2.,  1.,  2.,  1.,  2.,  1.],
    }))


class TestSummaryTable:

    def test_shape_and_columns(self, wide):
        table = summary_table(wide)
        assert table.shape == (6, 5)
        assert list(table.columns) == list(TABLE_COLUMNS)

    def test_row_order(self, wide):
        table = summary_table(wide)
        assert table["Parameter"].tolist() == ["N", "AUC", "Cmax", "Half-life", "CL/F", "Tmax"]

    def test_header_row_counts(self, wide):
        header = summary_table(wide).iloc[0].tolist()
        assert header == ["N", "", "4", "3", "3"]

    def test_medians(self, wide):
        table = summary_table(wide).set_index("Parameter")
        assert table.loc["AUC", "No inducer, median (IQR)"] == "25.00 (17.50-32.50)"
        assert table.loc["AUC", "Inducer, median (IQR)"] == "10.00 (7.50-12.50)"

    def test_gmr_of_identical_ratios(self, wide):
        table = summary_table(wide).set_index("Parameter")
        assert table.loc["AUC", "GMR (95% CI)"] == "0.50 (0.50-0.50)"
        assert table.loc["Cmax", "GMR (95% CI)"] == "2.00 (2.00-2.00)"
        assert table.loc["CL/F", "GMR (95% CI)"] == "2.00 (2.00-2.00)"

    def test_tmax_has_no_ratio(self, wide):
        table = summary_table(wide).set_index("Parameter")
        assert table.loc["Tmax", "GMR (95% CI)"] == "NA"

    def test_units(self, wide):
        table = summary_table(wide).set_index("Parameter")
        assert table.loc["CL/F", "Unit"] == "L/h"
        assert table.loc["Cmax", "Unit"] == "ng/mL"

    def test_non_positive_ratio_fails(self, wide):
        wide.loc[0, "CMAX_RATIO"] = 0.0
        with pytest.raises(ValueError, match="strictly positive"):
            summary_table(wide)

    def test_format_table(self, wide):
        text = format_table(summary_table(wide))
        assert "GMR (95% CI)" in text
        assert "0.50 (0.50-0.50)" in text

    def test_period_without_values_reports_na(self, wide):
        wide["HL_1"] = np.nan
        wide["HL_RATIO"] = np.nan
        row = summary_table(wide).set_index("Parameter").loc["Half-life"]
        assert row["No inducer, median (IQR)"] == "4.00 (4.00-4.00)"
        assert row["Inducer, median (IQR)"] == "NA"
        assert row["GMR (95% CI)"] == "NA"

    def test_single_defined_ratio_reports_na(self, wide):
        wide.loc[wide["ID"] != 1, "AUCLAST_RATIO"] = np.nan
        table = summary_table(wide).set_index("Parameter")
        assert table.loc["AUC", "GMR (95% CI)"] == "NA"
        assert table.loc["Cmax", "GMR (95% CI)"] == "2.00 (2.00-2.00)"
