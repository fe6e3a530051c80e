# src/unilibstats/stats/inequality.py

"""Distributional inequality: Gini coefficient, Lorenz curve, concentration shares."""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..logutil import get_logger
from .coerce import DataLike, coerce_vector
from .rounding import normal_round

from ..imports import numpy as np  # type: ignore

LOG = get_logger(__name__)

__all__ = [
	"LorenzPoint", "GiniResult", "ParetoResult",
	"gini_coefficient", "top_share", "bottom_share", "pareto", "inequality_level",
]

DEFAULT_LORENZ_POINTS = 50


@dataclass(frozen=True)
class LorenzPoint:
	"""Cumulative population percent ``x`` against cumulative resource percent ``y``."""

	x: float
	y: float


@dataclass(frozen=True)
class GiniResult:
	gini: float
	lorenz: List[LorenzPoint] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {"gini": self.gini, "lorenz": [{"x": p.x, "y": p.y} for p in self.lorenz]}


@dataclass(frozen=True)
class ParetoResult:
	top10_share: float
	top20_share: float
	top10_count: int
	top20_count: int
	cumulative: List[float] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"top10_share": self.top10_share,
			"top20_share": self.top20_share,
			"top10_count": self.top10_count,
			"top20_count": self.top20_count,
			"cumulative": list(self.cumulative),
		}


def _positive_count(value: Any) -> int:
	# operator.index accepts numpy integers but not floats or strings
	try:
		count = None if isinstance(value, bool) else operator.index(value)
	except TypeError:
		count = None
	if count is None or count < 1:
		raise ValueError(f"lorenz_points must be a positive integer, got {value!r}")
	return count


def gini_coefficient(data: DataLike, *, lorenz_points: int = DEFAULT_LORENZ_POINTS) -> GiniResult:
	"""
	Gini coefficient and a down-sampled Lorenz curve.

	Negative values are dropped and the rest sorted ascending. With ``n`` values
	summing to ``total`` and running sums ``c_i``::

		G = 1 - 2 * sum(c_i) / (n * total) + 1 / n

	which is the trapezoidal area under the Lorenz curve. ``G`` is rounded to
	3 decimals.

	The curve starts at ``(0, 0)`` and then takes every
	``max(1, n // lorenz_points)``-th record plus the last one; coordinates are
	percentages rounded to 1 decimal.

	:param data: Resource amounts per institution.
	:param lorenz_points: Approximate number of curve points (positive).
	:return: :class:`GiniResult`; ``GiniResult(0.0, [])`` when nothing is left
			 after filtering or the total is 0.
	:raises ValueError: If ``lorenz_points`` is not a positive integer.
	"""
	lorenz_points = _positive_count(lorenz_points)

	x = coerce_vector(data)
	x = np.sort(x[x >= 0])
	n = int(x.size)
	if n == 0:
		return GiniResult(0.0, [])
	total = float(x.sum())
	if total == 0:
		LOG.debug("gini_coefficient(): zero total over %d values", n)
		return GiniResult(0.0, [])

	cumulative = np.cumsum(x)
	step = max(1, n // lorenz_points)
	lorenz = [LorenzPoint(0.0, 0.0)]
	for i in range(n):
		if (i + 1) % step == 0 or i == n - 1:
			lorenz.append(LorenzPoint(
				normal_round((i + 1) / n * 100, 1),
				normal_round(float(cumulative[i]) / total * 100, 1),
			))

	area = float(cumulative.sum())
	gini = 1 - (2 * area) / (n * total) + 1 / n
	return GiniResult(normal_round(gini, 3), lorenz)


def _share(part: float, total: float) -> float:
	if total == 0:
		return 0.0
	return normal_round(part / total * 100, 1)


def top_share(data: DataLike, fraction: float) -> float:
	"""Percent of the total held by the largest ``ceil(n * fraction)`` values."""
	x = coerce_vector(data)
	if x.size == 0:
		return 0.0
	ordered = np.sort(x)[::-1]
	count = math.ceil(x.size * fraction)
	return _share(float(ordered[:count].sum()), float(x.sum()))


def bottom_share(data: DataLike, fraction: float) -> float:
	"""Percent of the total held by the smallest ``floor(n * fraction)`` values."""
	x = coerce_vector(data)
	if x.size == 0:
		return 0.0
	ordered = np.sort(x)
	count = math.floor(x.size * fraction)
	return _share(float(ordered[:count].sum()), float(x.sum()))


def pareto(data: DataLike, *, head: int = 30) -> ParetoResult:
	"""
	Concentration of a resource among its largest holders.

	Only positive values take part. ``cumulative`` is the running percent of
	the total over the ``head`` largest values.
	"""
	x = coerce_vector(data)
	x = np.sort(x[x > 0])[::-1]
	if x.size == 0:
		return ParetoResult(0.0, 0.0, 0, 0, [])
	total = float(x.sum())
	top10 = math.ceil(x.size * 0.1)
	top20 = math.ceil(x.size * 0.2)
	running = np.cumsum(x[:head])
	return ParetoResult(
		top10_share=_share(float(x[:top10].sum()), total),
		top20_share=_share(float(x[:top20].sum()), total),
		top10_count=top10,
		top20_count=top20,
		cumulative=[_share(float(c), total) for c in running],
	)


def inequality_level(gini: float) -> str:
	"""Verbal level of a Gini value: high, considerable, moderate or low."""
	if gini >= 0.5:
		return "high"
	if gini >= 0.35:
		return "considerable"
	if gini >= 0.2:
		return "moderate"
	return "low"
