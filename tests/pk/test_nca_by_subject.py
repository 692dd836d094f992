"""Tests for per-subject NCA over an observation table and clearance rescaling."""

import logging
import math

import numpy as np
import pandas as pd
import pytest

from pkcrossover.pk import NCAError, nca_by_subject, rescale_clearance


@pytest.fixture
def observations():
    """Two subjects, both periods; concentration halves each hour.

    Subject 2 has a missing sample in the inducer period.
    """
    rows = []
    for subject, c0 in ((1, 16.0), (2, 32.0)):
        for group, scale in ((0, 1.0), (1, 0.5)):
            for t in (0.0, 1.0, 2.0, 3.0):
                rows.append({
                    "ID": subject, "TAD": t, "DV": c0 * scale * 0.5 ** t,
                    "IND": group, "DOSE": 1000.0,
                })
    rows.append({"ID": 2, "TAD": 4.0, "DV": np.nan, "IND": 1, "DOSE": 1000.0})
    return pd.DataFrame(rows)


class TestNCABySubject:

    def test_one_row_per_profile(self, observations):
        out = nca_by_subject(observations)
        assert len(out) == 4
        assert list(zip(out["ID"], out["IND"])) == [(1, 0), (1, 1), (2, 0), (2, 1)]

    def test_columns(self, observations):
        out = nca_by_subject(observations)
        assert list(out.columns) == [
            "ID", "IND", "DOSE", "CMAX", "TMAX", "AUCLAST", "AUCINF",
            "HL", "LAMBDA_Z", "R2ADJ", "NTERM", "CL",
        ]

    def test_values(self, observations):
        out = nca_by_subject(observations).set_index(["ID", "IND"])
        row = out.loc[(1, 0)]
        assert row["CMAX"] == pytest.approx(16.0)
        assert row["TMAX"] == 0.0
        assert row["AUCLAST"] == pytest.approx(14.0 / math.log(2))
        assert row["HL"] == pytest.approx(1.0)
        assert row["CL"] == pytest.approx(1000 * math.log(2) / 16.0)

    def test_missing_concentration_dropped(self, observations):
        out = nca_by_subject(observations).set_index(["ID", "IND"])
        assert out.loc[(2, 1), "CMAX"] == pytest.approx(16.0)
        assert not np.isnan(out.loc[(2, 1), "AUCLAST"])

    def test_unit_label(self, observations):
        assert nca_by_subject(observations).attrs["clearance_unit"] == "mL/h"

    def test_not_estimable_is_nan(self):
        obs = pd.DataFrame({
            "ID": [1, 1, 1], "TAD": [0.0, 1.0, 2.0], "DV": [0.0, 10.0, 5.0],
            "IND": [0, 0, 0], "DOSE": [100.0] * 3,
        })
        out = nca_by_subject(obs)
        assert np.isnan(out.loc[0, "HL"])
        assert np.isnan(out.loc[0, "CL"])

    def test_malformed_profile_names_subject(self, observations):
        obs = observations.copy()
        obs.loc[(obs["ID"] == 2) & (obs["IND"] == 0) & (obs["TAD"] == 3.0), "DV"] = -1.0
        with pytest.raises(NCAError, match="subject 2.*non-negative") as exc_info:
            nca_by_subject(obs)
        assert exc_info.value.group == 0
        assert isinstance(exc_info.value, ValueError)

    def test_duplicate_times_raise(self, observations):
        obs = observations.copy()
        obs.loc[(obs["ID"] == 1) & (obs["IND"] == 1) & (obs["TAD"] == 3.0), "TAD"] = 2.0
        with pytest.raises(NCAError, match="Duplicate"):
            nca_by_subject(obs)

    @pytest.mark.parametrize("kept", [0, 2])
    def test_sparse_profile_gives_nan_row(self, observations, kept, caplog):
        sparse = (observations["ID"] == 2) & (observations["IND"] == 1)
        obs = observations.copy()
        obs.loc[sparse & (obs["TAD"] >= kept), "DV"] = np.nan
        with caplog.at_level(logging.WARNING, logger="pkcrossover.pk._batch"):
            out = nca_by_subject(obs).set_index(["ID", "IND"])
        assert len(out) == 4
        row = out.loc[(2, 1)]
        assert row["DOSE"] == 1000.0
        assert row.drop("DOSE").isna().all()
        assert f"has {kept} measured sample(s)" in caplog.text
        assert out.loc[(2, 0), "CMAX"] == pytest.approx(32.0)

    def test_mixed_doses_warn(self, observations, caplog):
        obs = observations.copy()
        obs.loc[(obs["ID"] == 1) & (obs["IND"] == 0) & (obs["TAD"] == 3.0), "DOSE"] = 500.0
        with caplog.at_level(logging.WARNING, logger="pkcrossover.pk._batch"):
            out = nca_by_subject(obs)
        assert "several doses" in caplog.text
        assert out.loc[0, "DOSE"] == 1000.0


class TestRescaleClearance:

    def test_divides_once(self, observations):
        raw = nca_by_subject(observations)
        scaled = rescale_clearance(raw)
        np.testing.assert_allclose(scaled["CL"], raw["CL"] / 1000.0)
        assert scaled.attrs["clearance_unit"] == "L/h"

    def test_input_unchanged(self, observations):
        raw = nca_by_subject(observations)
        before = raw["CL"].copy()
        rescale_clearance(raw)
        pd.testing.assert_series_equal(raw["CL"], before)
        assert raw.attrs["clearance_unit"] == "mL/h"

    def test_second_application_is_an_error(self, observations):
        scaled = rescale_clearance(nca_by_subject(observations))
        with pytest.raises(ValueError, match="already in L/h"):
            rescale_clearance(scaled)

    def test_unlabelled_table_rejected(self):
        with pytest.raises(ValueError, match="unknown clearance unit"):
            rescale_clearance(pd.DataFrame({"CL": [1.0]}))
