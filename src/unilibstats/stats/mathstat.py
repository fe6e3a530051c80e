# src/unilibstats/stats/mathstat.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .coerce import DataLike, ValueFilter, filter_vector, non_negative_finite
from .describe import Quartiles, coefficient_of_variation, percentile_summary, quartiles, summary_row, z_scores
from .inequality import DEFAULT_LORENZ_POINTS, GiniResult, gini_coefficient
from .outliers import outliers_iqr, outliers_zscore

from ..imports import numpy as np  # type: ignore

__all__ = ["MathStat"]


@dataclass(frozen=True)
class MathStat:
	"""
	Thin wrapper bundling the univariate routines over one AnalysisInput.

	Examples
	--------
	>>> ms = MathStat([10, 20, 30, 40, 1000])
	>>> ms.quartiles().median
	30.0
	>>> round(ms.cv(), 3)
	1.773

	Notes
	-----
	- ``data`` passes through ``value_filter`` (finite, non-negative by
	  default) before every statistic; pass ``value_filter=None`` to keep
	  every value.
	- The module-level functions remain the primary API.
	"""

	data: DataLike
	value_filter: Optional[ValueFilter] = non_negative_finite

	def vector(self) -> "np.ndarray":
		"""Return the filtered 1D vector (a fresh copy on each call)."""
		return filter_vector(self.data, self.value_filter)

	def __len__(self) -> int:
		return int(self.vector().size)

	def quartiles(self) -> Quartiles:
		return quartiles(self.vector())

	def percentiles(self) -> Dict[str, float]:
		return percentile_summary(self.vector())

	def summary(self) -> Optional[Dict[str, float]]:
		return summary_row(self.vector())

	def cv(self) -> float:
		"""Coefficient of variation of the filtered vector."""
		return coefficient_of_variation(self.vector())

	def z_scores(self) -> "np.ndarray":
		return z_scores(self.vector())

	def gini(self, *, lorenz_points: int = DEFAULT_LORENZ_POINTS) -> GiniResult:
		return gini_coefficient(self.vector(), lorenz_points=lorenz_points)

	def outliers(
			self,
			*,
			method: str = "zscore",
			threshold: Union[float, None] = None
	) -> Union[List[Tuple[int, float]], List[int]]:
		"""
		Outliers in the filtered vector.

		:param method: ``"zscore"`` (default threshold 2.5) or ``"iqr"`` (1.5).
		:param threshold: Override the method's default threshold.
		:raises ValueError: On an unknown ``method``.
		"""
		if method == "zscore":
			return outliers_zscore(self.vector(), threshold=2.5 if threshold is None else threshold)
		if method == "iqr":
			return outliers_iqr(self.vector(), threshold=1.5 if threshold is None else threshold)
		raise ValueError(f"Unknown outlier method: {method!r}")
