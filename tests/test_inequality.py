"""Tests for Gini, Lorenz curve, tail shares and Pareto concentration."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")

from unilibstats.stats import (  # noqa: E402
	bottom_share, gini_coefficient, inequality_level, pareto, top_share,
)


def test_gini_of_identical_values_is_zero():
	result = gini_coefficient([5, 5, 5, 5])
	assert result.gini == 0.0
	assert result.lorenz[0].x == 0.0 and result.lorenz[0].y == 0.0
	assert (result.lorenz[-1].x, result.lorenz[-1].y) == (100.0, 100.0)


def test_gini_reaches_its_maximum_for_one_holder():
	# (n - 1) / n for n = 4
	assert gini_coefficient([0, 0, 0, 100]).gini == 0.75


@pytest.mark.parametrize(
	"data",
	[[1, 2, 3, 4, 5], [0, 1, 0, 7], [1000, 1, 1, 1, 1, 1], list(range(200))],
)
def test_gini_is_bounded(data):
	assert 0.0 <= gini_coefficient(data).gini <= 1.0


def test_gini_ignores_negative_values_and_handles_empty_input():
	assert gini_coefficient([-5, 5, 5]).gini == gini_coefficient([5, 5]).gini
	assert gini_coefficient([]).to_dict() == {"gini": 0.0, "lorenz": []}
	assert gini_coefficient([0, 0]).lorenz == []


def test_lorenz_curve_is_downsampled_and_monotone():
	data = list(range(1, 101))
	result = gini_coefficient(data, lorenz_points=10)
	# origin plus every 10th record
	assert len(result.lorenz) == 11
	xs = [p.x for p in result.lorenz]
	ys = [p.y for p in result.lorenz]
	assert xs == sorted(xs) and ys == sorted(ys)
	assert all(y <= x for x, y in zip(xs, ys))

	small = gini_coefficient([1, 2, 3], lorenz_points=50)
	assert [p.x for p in small.lorenz] == [0.0, 33.3, 66.7, 100.0]


@pytest.mark.parametrize("bad", [0, -3, 2.5, "50", True, np.int64(0)])
def test_gini_rejects_bad_lorenz_points(bad):
	with pytest.raises(ValueError):
		gini_coefficient([1, 2, 3], lorenz_points=bad)


def test_gini_accepts_numpy_integer_lorenz_points():
	data = list(range(1, 21))
	assert gini_coefficient(data, lorenz_points=np.int64(10)) == gini_coefficient(data, lorenz_points=10)


def test_tail_shares():
	data = [1, 1, 1, 1, 1, 1, 1, 1, 1, 11]  # total 20
	assert top_share(data, 0.1) == 55.0
	assert bottom_share(data, 0.5) == 25.0
	assert top_share([], 0.1) == 0.0


def test_pareto_counts_and_cumulative_shares():
	data = [50, 20, 10, 10, 5, 5, 0, -1]
	result = pareto(data)
	# six positive values: ceil(0.6) == 1, ceil(1.2) == 2
	assert (result.top10_count, result.top20_count) == (1, 2)
	assert result.top10_share == 50.0
	assert result.top20_share == 70.0
	assert result.cumulative == [50.0, 70.0, 80.0, 90.0, 95.0, 100.0]
	assert pareto([0, 0]).to_dict()["cumulative"] == []


@pytest.mark.parametrize(
	("gini", "level"),
	[(0.62, "high"), (0.5, "high"), (0.4, "considerable"), (0.25, "moderate"), (0.1, "low")],
)
def test_inequality_levels(gini, level):
	assert inequality_level(gini) == level
