"""Tests for Cohen's d helpers."""

import math

import numpy as np
import pytest

from pkcrossover.power import cohens_d, cohens_d_from_samples, pooled_sd


class TestPooledSD:

    def test_equal_sizes(self):
        # variances 1 and 4 -> pooled sqrt(2.5)
        assert pooled_sd([1, 2, 3], [2, 4, 6]) == pytest.approx(math.sqrt(2.5))

    def test_unequal_sizes(self):
        x, y = [1.0, 3.0], [0.0, 2.0, 4.0, 6.0]
        expected = math.sqrt((1 * 2.0 + 3 * np.var(y, ddof=1)) / 4)
        assert pooled_sd(x, y) == pytest.approx(expected)

    def test_nan_ignored(self):
        assert pooled_sd([1, 2, 3, np.nan], [2, 4, 6]) == pytest.approx(math.sqrt(2.5))

    def test_too_small(self):
        with pytest.raises(ValueError, match="at least 2"):
            pooled_sd([1.0], [1.0, 2.0])


class TestCohensD:

    def test_formula(self):
        assert cohens_d(10.0, 20.0, 5.0) == -2.0

    def test_bad_sd(self):
        with pytest.raises(ValueError, match="sd_pooled"):
            cohens_d(1.0, 2.0, 0.0)

    def test_from_samples(self):
        d = cohens_d_from_samples([1, 2, 3], [2, 4, 6])
        assert d == pytest.approx((2.0 - 4.0) / math.sqrt(2.5))
