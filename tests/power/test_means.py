"""Tests for power_t_test and power_paired_t_test."""

import pytest

from pkcrossover.power import PowerResult, power_paired_t_test, power_t_test


# pwr::pwr.t.test(d = 1.68, power = 0.8, type = "paired") gives n just above 5;
# rounding up gives 6 pairs. Power at 5 pairs falls just short of 0.80.
STUDY_D = -1.68
STUDY_N = 6


class TestSolveN:

    def test_classic_textbook(self):
        """d=0.5, alpha=0.05, power=0.80 -> n=64 per group (two-sample)."""
        assert power_t_test(d=0.5, alpha=0.05, power=0.80).n == 64

    def test_paired_textbook(self):
        """pwr.t.test(d=0.5, power=0.8, type='paired') -> n = 33.37 -> 34."""
        assert power_paired_t_test(d=0.5, power=0.80).n == 34

    def test_study_effect_size(self):
        """d=-1.68 from the induction study, alpha 0.05, power 0.80, two-sided."""
        assert power_paired_t_test(d=STUDY_D, alpha=0.05, power=0.80).n == STUDY_N

    def test_study_n_is_smallest(self):
        assert power_paired_t_test(n=STUDY_N - 1, d=STUDY_D).power == pytest.approx(0.799, abs=0.003)
        assert power_paired_t_test(n=STUDY_N, d=STUDY_D).power > 0.85

    def test_sign_irrelevant_two_sided(self):
        assert power_paired_t_test(d=-1.68, power=0.8).n == power_paired_t_test(d=1.68, power=0.8).n

    def test_paired_needs_fewer_than_two_sample(self):
        assert (power_t_test(d=0.5, power=0.8, type="paired").n
                < power_t_test(d=0.5, power=0.8, type="two.sample").n)

    def test_one_sided_smaller_n(self):
        two = power_t_test(d=0.5, power=0.80)
        one = power_t_test(d=0.5, power=0.80, alternative="greater")
        assert one.n < two.n

    def test_higher_power_more_n(self):
        assert power_t_test(d=0.5, power=0.90).n > power_t_test(d=0.5, power=0.80).n

    def test_zero_effect(self):
        with pytest.raises(ValueError, match="d = 0"):
            power_t_test(d=0.0, power=0.80)


class TestSolvePower:

    def test_n64_d05(self):
        assert power_t_test(n=64, d=0.5).power == pytest.approx(0.8015, abs=0.001)

    def test_increases_with_n(self):
        powers = [power_t_test(n=n, d=0.5).power for n in (20, 40, 60, 80)]
        assert powers == sorted(powers)

    def test_bounded(self):
        assert 0.0 <= power_t_test(n=10, d=0.1).power <= 1.0


class TestSolveEffect:

    def test_round_trip(self):
        r = power_paired_t_test(n=20, power=0.80)
        assert power_paired_t_test(n=20, d=r.effect_size).power == pytest.approx(0.80, abs=1e-6)

    def test_less_gives_negative_d(self):
        assert power_t_test(n=30, power=0.80, alternative="less").effect_size < 0


class TestValidation:

    def test_need_exactly_one_none(self):
        with pytest.raises(ValueError, match="Exactly one"):
            power_t_test(n=10, d=0.5, power=0.8)

    def test_alpha_range(self):
        with pytest.raises(ValueError, match="alpha"):
            power_t_test(d=0.5, power=0.8, alpha=1.5)

    def test_bad_type(self):
        with pytest.raises(ValueError, match="type"):
            power_t_test(d=0.5, power=0.8, type="one.sample")

    def test_bad_alternative(self):
        with pytest.raises(ValueError, match="alternative"):
            power_t_test(d=0.5, power=0.8, alternative="two-sided")


class TestResult:

    def test_type(self):
        r = power_paired_t_test(d=-1.68, power=0.80)
        assert isinstance(r, PowerResult)
        assert r.effect_size == -1.68
        assert r.method == "Paired t test power calculation"

    def test_summary(self):
        s = power_paired_t_test(d=-1.68, power=0.80).summary()
        assert "n = " in s
        assert "pairs" in s
