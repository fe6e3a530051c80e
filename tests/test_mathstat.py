"""Integration tests for :class:`unilibstats.stats.mathstat.MathStat`."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")


from unilibstats import MathStat, normal_round  # noqa: E402
from unilibstats.stats import (  # noqa: E402
	coefficient_of_variation, gini_coefficient, outliers_iqr, quartiles, z_scores,
)
from unilibstats.stats.rounding import round_all  # noqa: E402


def test_mathstat_workflow_matches_function_equivalents():
	data = [10, 20, 30, 40, 1000]
	ms = MathStat(data)

	assert ms.quartiles() == quartiles(data)
	assert math.isclose(ms.cv(), coefficient_of_variation(data), rel_tol=1e-12)
	assert np.allclose(ms.z_scores(), z_scores(data))
	assert ms.gini() == gini_coefficient(data)
	assert ms.percentiles()["p50"] == 30.0
	assert ms.summary()["count"] == 5

	assert ms.outliers() == []
	assert ms.outliers(method="iqr") == outliers_iqr(data)
	assert ms.outliers(threshold=1.5) == [(4, pytest.approx(1.9993, abs=1e-4))]


def test_mathstat_filters_values_before_statistics():
	data = pd.Series([5.0, -1.0, float("nan"), 15.0])
	ms = MathStat(data)
	assert len(ms) == 2
	assert ms.vector().tolist() == [5.0, 15.0]
	assert len(MathStat(data, value_filter=None)) == 4


def test_mathstat_rejects_unknown_outlier_method():
	ms = MathStat([1, 2, 3])
	with pytest.raises(ValueError):
		ms.outliers(method="grubbs")


@pytest.mark.parametrize(
	("value", "decimals", "expected"),
	[
		(0.5, 0, 1.0),
		(1.25, 1, 1.3),
		(-1.25, 1, -1.2),
		(-2.505, 2, -2.5),
		(-0.5, 0, 0.0),
		(-1.26, 1, -1.3),
		(2.0, 0, 2.0),
		(0.125, 2, 0.13),
		(1.005, 2, 1.01),
	],
)
def test_normal_round_half_up(value: float, decimals: int, expected: float):
	assert math.isclose(normal_round(value, decimals), expected)


def test_normal_round_edge_cases():
	assert math.isnan(normal_round(float("nan")))
	assert normal_round(np.float64(2.675)) == 2.68
	assert round_all([0.5, 1.5, 2.5], 0) == [1.0, 2.0, 3.0]
	with pytest.raises(TypeError):
		normal_round(None)  # type: ignore[arg-type]
	with pytest.raises(ValueError):
		normal_round(1.5, -1)
