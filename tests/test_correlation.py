"""Tests for regression and correlation routines."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")
pytest.importorskip("scipy")

from unilibstats.stats import (  # noqa: E402
	correlation_matrix, correlation_strength, linear_regression,
	ordinal_ranks, pearson_correlation, spearman_correlation,
)


def test_regression_is_exact_on_a_line():
	reg = linear_regression([1, 2, 3, 4], [2, 4, 6, 8])
	assert math.isclose(reg.slope, 2.0)
	assert math.isclose(reg.intercept, 0.0, abs_tol=1e-12)
	assert math.isclose(reg.r, 1.0)
	assert math.isclose(reg.r2, 1.0)
	assert math.isclose(reg.predict(10), 20.0)
	assert reg.trendline([4, 1, 3]) == [(1.0, 2.0), (4.0, 8.0)]


def test_regression_degenerate_inputs_do_not_raise():
	assert linear_regression([], []).to_dict() == {"slope": 0.0, "intercept": 0.0, "r": 0.0, "r2": 0.0}
	assert linear_regression([1], [5]).slope == 0.0

	flat_x = linear_regression([3, 3, 3], [1, 2, 3])
	assert flat_x.slope == 0.0
	assert math.isclose(flat_x.intercept, 2.0)
	assert flat_x.r == 0.0

	flat_y = linear_regression([1, 2, 3], [4, 4, 4])
	assert flat_y.slope == 0.0
	assert flat_y.r == 0.0


def test_regression_rejects_mismatched_lengths():
	with pytest.raises(ValueError):
		linear_regression([1, 2, 3], [1, 2])


@pytest.mark.parametrize(
	("xs", "ys"),
	[
		([1, 2, 3, 4, 5], [5, 3, 4, 1, 2]),
		([0.5, 9.0, 2.25, 4.0], [1.0, 2.0, 2.0, 100.0]),
		([10, 20, 30, 40, 1000], [3, 1, 4, 1, 5]),
	],
)
def test_pearson_is_symmetric_and_bounded(xs, ys):
	r = pearson_correlation(xs, ys)
	assert r == pearson_correlation(ys, xs)
	assert -1.0 <= r <= 1.0
	assert math.isclose(r, float(np.corrcoef(xs, ys)[0, 1]), rel_tol=1e-9)


def test_spearman_on_monotone_relationship():
	xs = [1, 2, 3, 4, 5]
	ys = [1, 4, 9, 16, 1000]
	assert pearson_correlation(xs, ys) < 1.0
	assert math.isclose(spearman_correlation(xs, ys), 1.0)
	assert math.isclose(spearman_correlation(xs, ys[::-1]), -1.0)
	assert spearman_correlation([1], [2]) == 0.0


def test_spearman_ties_take_ordinal_ranks():
	assert ordinal_ranks([10, 10, 5]).tolist() == [2.0, 3.0, 1.0]
	# identical xs still get distinct ranks 1..n, so rho is not 0
	assert math.isclose(spearman_correlation([7, 7, 7], [1, 2, 3]), 1.0)


def test_correlation_matrix_uses_finite_pairs():
	a = [1.0, 2.0, 3.0, 4.0]
	b = [2.0, 4.0, 6.0, float("nan")]
	c = [4.0, 3.0, 2.0, 1.0]
	m = correlation_matrix([a, b, c])
	assert [m[i][i] for i in range(3)] == [1.0, 1.0, 1.0]
	assert math.isclose(m[0][1], 1.0)
	assert math.isclose(m[0][2], -1.0)
	assert m[1][2] == m[2][1]
	with pytest.raises(ValueError):
		correlation_matrix([[1, 2], [1, 2, 3]])


@pytest.mark.parametrize(
	("r", "label"),
	[(0.95, "strong"), (-0.7, "strong"), (0.5, "moderate"), (-0.25, "weak"), (0.1, "none"), (0.0, "none")],
)
def test_correlation_strength_labels(r, label):
	assert correlation_strength(r) == label
