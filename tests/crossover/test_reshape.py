"""Tests for long-to-wide reshaping and within-subject ratios."""

import numpy as np
import pandas as pd
import pytest

from pkcrossover.crossover import (
    PK_PARAMETERS,
    PKParameter,
    column_map,
    complete_pairs,
    compute_ratio,
    paired_column,
    ratio_column,
    to_wide,
)


@pytest.fixture
def nca_long():
    """Subject 3 lacks the inducer period."""
    return pd.DataFrame({
        "ID":      [1,    1,    2,    2,    3],
        "IND":     [0,    1,    0,    1,    0],
        "AUCLAST": [2.0,  4.0,  10.0, 5.0,  7.0],
        "CMAX":    [1.0,  3.0,  2.0,  0.0,  1.0],
        "HL":      [5.0,  2.5,  np.nan, 4.0, 3.0],
        "CL":      [0.1,  0.4,  0.2,  0.2,  0.3],
        "TMAX":    [1.0,  2.0,  1.0,  1.0,  0.5],
    })


class TestComputeRatio:

    def test_exact(self):
        assert compute_ratio([4.0], [2.0])[0] == 2.0

    def test_missing_numerator_is_nan(self):
        out = compute_ratio([np.nan], [2.0])
        assert np.isnan(out[0])

    def test_missing_denominator_is_nan(self):
        assert np.isnan(compute_ratio([4.0], [np.nan])[0])

    def test_zero_denominator_is_nan(self):
        assert np.isnan(compute_ratio([4.0], [0.0])[0])

    def test_zero_numerator_is_zero(self):
        assert compute_ratio([0.0], [2.0])[0] == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="equal shape"):
            compute_ratio([1.0, 2.0], [1.0])


class TestColumnMapping:

    def test_explicit_names(self):
        assert paired_column("AUCLAST", 0) == "AUCLAST_0"
        assert paired_column("AUCLAST", 1) == "AUCLAST_1"
        assert ratio_column("AUCLAST") == "AUCLAST_RATIO"

    def test_invalid_group(self):
        with pytest.raises(ValueError, match="group"):
            paired_column("CMAX", 2)

    def test_map_covers_every_parameter_and_group(self):
        mapping = column_map()
        assert len(mapping) == 2 * len(PK_PARAMETERS)
        assert mapping[("CL", 1)] == "CL_1"

    def test_duplicate_keys_collide(self):
        params = (PKParameter("CMAX", "Cmax", ""), PKParameter("CMAX", "Peak", ""))
        with pytest.raises(ValueError, match="colliding"):
            column_map(params)


class TestToWide:

    def test_one_row_per_subject(self, nca_long):
        wide = to_wide(nca_long)
        assert wide["ID"].tolist() == [1, 2, 3]

    def test_columns(self, nca_long):
        wide = to_wide(nca_long)
        for param in PK_PARAMETERS:
            assert paired_column(param.key, 0) in wide.columns
            assert paired_column(param.key, 1) in wide.columns
            assert (ratio_column(param.key) in wide.columns) == param.ratio

    def test_values_and_ratio(self, nca_long):
        wide = to_wide(nca_long).set_index("ID")
        assert wide.loc[1, "AUCLAST_0"] == 2.0
        assert wide.loc[1, "AUCLAST_1"] == 4.0
        assert wide.loc[1, "AUCLAST_RATIO"] == 2.0
        assert wide.loc[2, "AUCLAST_RATIO"] == 0.5

    def test_incomplete_subject_kept_with_nan_ratio(self, nca_long):
        wide = to_wide(nca_long).set_index("ID")
        assert wide.loc[3, "AUCLAST_0"] == 7.0
        assert np.isnan(wide.loc[3, "AUCLAST_1"])
        assert np.isnan(wide.loc[3, "AUCLAST_RATIO"])

    def test_missing_parameter_gives_nan_ratio(self, nca_long):
        wide = to_wide(nca_long).set_index("ID")
        assert np.isnan(wide.loc[2, "HL_RATIO"])
        assert wide.loc[1, "HL_RATIO"] == 0.5

    def test_zero_numerator_ratio(self, nca_long):
        wide = to_wide(nca_long).set_index("ID")
        assert wide.loc[2, "CMAX_RATIO"] == 0.0

    def test_duplicate_rows_rejected(self, nca_long):
        dup = pd.concat([nca_long, nca_long.iloc[[0]]], ignore_index=True)
        with pytest.raises(ValueError, match="duplicate"):
            to_wide(dup)

    def test_missing_column(self, nca_long):
        with pytest.raises(ValueError, match="missing column"):
            to_wide(nca_long.drop(columns="HL"))

    def test_complete_pairs(self, nca_long):
        wide = to_wide(nca_long)
        assert complete_pairs(wide, "AUCLAST")["ID"].tolist() == [1, 2]
        assert complete_pairs(wide, "HL")["ID"].tolist() == [1]
