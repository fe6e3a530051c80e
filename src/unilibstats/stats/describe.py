# src/unilibstats/stats/describe.py

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

from ..logutil import get_logger
from .coerce import DataLike, coerce_vector
from .rounding import normal_round

from ..imports import numpy as np  # type: ignore

LOG = get_logger(__name__)

__all__ = [
	"Quartiles",
	"quartiles", "percentile", "percentiles",
	"nearest_rank", "percentile_summary", "summary_row",
	"coefficient_of_variation", "z_scores", "box_whiskers",
]


@dataclass(frozen=True)
class Quartiles:
	"""Five-number summary plus interquartile range."""

	min: float
	q1: float
	median: float
	q3: float
	max: float
	iqr: float

	def to_dict(self) -> Dict[str, float]:
		return asdict(self)


def _interpolate(sorted_x: "np.ndarray", p: float) -> float:
	# R-7: fractional rank p*(n-1), linear between floor and ceil
	idx = p * (sorted_x.size - 1)
	lo = math.floor(idx)
	hi = math.ceil(idx)
	return float(sorted_x[lo] + (sorted_x[hi] - sorted_x[lo]) * (idx - lo))


def quartiles(data: DataLike) -> Quartiles:
	"""
	Quartiles by linear interpolation between order statistics (R-7).

	For a percentile ``p`` the fractional index is ``p * (n - 1)`` on the sorted
	values. The input is never mutated; a sorted copy is used.

	:param data: Numeric vector.
	:return: :class:`Quartiles`; every field is ``0.0`` for empty input.
	"""
	x = np.sort(coerce_vector(data))
	if x.size == 0:
		LOG.debug("quartiles() on empty input")
		return Quartiles(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
	q1 = _interpolate(x, 0.25)
	q3 = _interpolate(x, 0.75)
	return Quartiles(
		min=float(x[0]),
		q1=q1,
		median=_interpolate(x, 0.5),
		q3=q3,
		max=float(x[-1]),
		iqr=q3 - q1,
	)


def percentile(data: DataLike, p: float) -> float:
	"""R-7 percentile for a fraction ``p`` in ``[0, 1]``; 0 for empty input."""
	if not 0.0 <= p <= 1.0:
		raise ValueError(f"p must lie in [0, 1], got {p}")
	x = np.sort(coerce_vector(data))
	if x.size == 0:
		return 0.0
	return _interpolate(x, p)


def percentiles(data: DataLike, pct: Iterable[float]) -> "np.ndarray":
	"""R-7 percentiles for ``pct`` given on the 0-100 scale (NaN-aware)."""
	x = coerce_vector(data)
	q = list(pct)
	if x.size == 0:
		return np.zeros(len(q), dtype=float)
	return np.nanpercentile(x, q)


def nearest_rank(sorted_x: "np.ndarray", p: float) -> float:
	"""
	Dashboard percentile: ``sorted[floor(n * p)]``, 0 when out of range.

	Distinct from :func:`percentile`; the summary tables were published with
	this rule and the figures must stay comparable.
	"""
	idx = math.floor(sorted_x.size * p)
	if 0 <= idx < sorted_x.size:
		return float(sorted_x[idx])
	return 0.0


def percentile_summary(data: DataLike, *, decimals: int = 1) -> Dict[str, float]:
	"""
	Nearest-rank p10/p25/p50/p75/p90 and mean, rounded to ``decimals``.

	Empty input yields zeros.
	"""
	x = np.sort(coerce_vector(data))
	mean = float(x.mean()) if x.size else 0.0
	out = {
		f"p{int(round(p * 100))}": normal_round(nearest_rank(x, p), decimals)
		for p in (0.1, 0.25, 0.5, 0.75, 0.9)
	}
	out["mean"] = normal_round(mean, decimals)
	return out


def summary_row(data: DataLike) -> Optional[Dict[str, float]]:
	"""
	Count, mean, median, p25, p75, p90, min and max over the finite values.

	:return: The row, or ``None`` when no finite value remains.
	"""
	x = coerce_vector(data)
	x = np.sort(x[np.isfinite(x)])
	if x.size == 0:
		return None
	return {
		"count": int(x.size),
		"mean": float(x.mean()),
		"median": nearest_rank(x, 0.5),
		"p25": nearest_rank(x, 0.25),
		"p75": nearest_rank(x, 0.75),
		"p90": nearest_rank(x, 0.9),
		"min": float(x[0]),
		"max": float(x[-1]),
	}


def _mean_std(x: "np.ndarray") -> Tuple[float, float]:
	mean = float(x.mean())
	# population standard deviation (ddof=0)
	std = float(math.sqrt(float(((x - mean) ** 2).sum()) / x.size))
	return mean, std


def coefficient_of_variation(data: DataLike) -> float:
	"""
	Population standard deviation divided by ``|mean|``.

	Returns ``0.0`` for empty input or a zero mean. That 0 is a policy value,
	not a measurement of "no dispersion"; check the sample first.
	"""
	x = coerce_vector(data)
	if x.size == 0:
		return 0.0
	mean, std = _mean_std(x)
	if mean == 0:
		LOG.debug("coefficient_of_variation(): zero mean over %d values", x.size)
		return 0.0
	return std / abs(mean)


def z_scores(data: DataLike) -> "np.ndarray":
	"""
	Standard scores ``(x - mean) / std`` with population mean and std.

	:return: One score per input value; all zeros when std is 0, empty for empty input.
	"""
	x = coerce_vector(data)
	if x.size == 0:
		return np.array([], dtype=float)
	mean, std = _mean_std(x)
	if std == 0:
		return np.zeros_like(x)
	return (x - mean) / std


def box_whiskers(q: Union[Quartiles, DataLike], *, whisker: float = 1.5) -> Tuple[float, float]:
	"""Tukey whiskers clipped to the observed range: ``(low, high)``."""
	if not isinstance(q, Quartiles):
		q = quartiles(q)
	low = max(q.min, q.q1 - whisker * q.iqr)
	high = min(q.max, q.q3 + whisker * q.iqr)
	return low, high
