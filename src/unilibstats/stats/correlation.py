# src/unilibstats/stats/correlation.py

"""Ordinary least squares, Pearson and Spearman correlation."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence, Tuple

from ..logutil import get_logger
from .coerce import DataLike, coerce_pair, coerce_vector
from .transforms import ordinal_ranks

from ..imports import numpy as np  # type: ignore

LOG = get_logger(__name__)

__all__ = [
	"Regression",
	"linear_regression", "pearson_correlation", "spearman_correlation",
	"correlation_matrix", "correlation_strength",
]


@dataclass(frozen=True)
class Regression:
	"""Result of a simple linear regression ``y = slope * x + intercept``."""

	slope: float
	intercept: float
	r: float
	r2: float

	def predict(self, x: float) -> float:
		return self.slope * x + self.intercept

	def trendline(self, xs: DataLike) -> List[Tuple[float, float]]:
		"""End points of the fitted line over the range of ``xs``."""
		x = coerce_vector(xs)
		if x.size == 0:
			return []
		lo, hi = float(x.min()), float(x.max())
		return [(lo, self.predict(lo)), (hi, self.predict(hi))]

	def to_dict(self) -> Dict[str, float]:
		return asdict(self)


_DEGENERATE = Regression(0.0, 0.0, 0.0, 0.0)


def linear_regression(xs: DataLike, ys: DataLike) -> Regression:
	"""
	Fit ``ys`` on ``xs`` by ordinary least squares.

	Degenerate inputs never raise:

	* fewer than two points give ``Regression(0, 0, 0, 0)``;
	* ``slope`` is 0 when ``xs`` has no variance (``intercept`` is then the mean of ``ys``);
	* ``r`` is 0 when either variable has no variance.

	:param xs: Explanatory values.
	:param ys: Response values, same length as ``xs``.
	:return: :class:`Regression` with ``r2 == r ** 2``.
	:raises ValueError: If the vectors differ in length.
	"""
	x, y = coerce_pair(xs, ys)
	n = x.size
	if n < 2:
		LOG.debug("linear_regression(): %d point(s), returning degenerate fit", n)
		return _DEGENERATE

	mx = float(x.mean())
	my = float(y.mean())
	dx = x - mx
	dy = y - my
	ss_xy = float((dx * dy).sum())
	ss_xx = float((dx * dx).sum())
	ss_yy = float((dy * dy).sum())

	slope = 0.0 if ss_xx == 0 else ss_xy / ss_xx
	intercept = my - slope * mx
	denom = ss_xx * ss_yy
	r = 0.0 if denom == 0 else ss_xy / math.sqrt(denom)
	return Regression(slope=slope, intercept=intercept, r=r, r2=r * r)


def pearson_correlation(xs: DataLike, ys: DataLike) -> float:
	"""Pearson's r; the ``r`` of :func:`linear_regression`, so both always agree."""
	return linear_regression(xs, ys).r


def spearman_correlation(xs: DataLike, ys: DataLike) -> float:
	"""
	Spearman's rank correlation with ordinal (non-averaged) tie ranks.

	Each vector is ranked by sorted position, ties keeping input order, and
	Pearson's r is taken over the ranks. With many repeated values this departs
	from the textbook coefficient, which averages tied ranks.
	"""
	x, y = coerce_pair(xs, ys)
	if x.size < 2:
		return 0.0
	return pearson_correlation(ordinal_ranks(x), ordinal_ranks(y))


def correlation_matrix(vectors: Sequence[DataLike]) -> List[List[float]]:
	"""
	Pairwise Pearson correlations between equally long vectors.

	For every pair only positions where both values are finite are used. The
	diagonal is fixed at 1.0.
	"""
	arrays = [coerce_vector(v) for v in vectors]
	if arrays and any(a.size != arrays[0].size for a in arrays):
		raise ValueError("correlation_matrix() needs vectors of equal length")

	size = len(arrays)
	matrix = [[1.0] * size for _ in range(size)]
	for i in range(size):
		for j in range(i + 1, size):
			mask = np.isfinite(arrays[i]) & np.isfinite(arrays[j])
			r = pearson_correlation(arrays[i][mask], arrays[j][mask])
			matrix[i][j] = matrix[j][i] = r
	return matrix


def correlation_strength(r: float) -> str:
	"""Verbal strength of a correlation: strong, moderate, weak or none."""
	a = abs(r)
	if a >= 0.7:
		return "strong"
	if a >= 0.4:
		return "moderate"
	if a >= 0.2:
		return "weak"
	return "none"
