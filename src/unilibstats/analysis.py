# src/unilibstats/analysis.py

"""
Dashboard-level analyses over a :class:`~unilibstats.population.Population`.

Each function combines a population with indicator selectors and returns
plain serialisable values (dataclasses with ``to_dict()``, lists of dicts)
or a pandas DataFrame for the tabular views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config.settings import DEFAULT_SETTINGS, AnalysisSettings
from .logutil import get_logger
from .population import Population
from .records import INDICATORS, Indicator, SelectorLike, describe_selector
from .stats.clustering import ClusterSummary, k_means_2d, cluster_summaries
from .stats.coerce import finite, positive_finite
from .stats.correlation import Regression, correlation_matrix, correlation_strength, linear_regression
from .stats.describe import Quartiles, box_whiskers, coefficient_of_variation, percentile_summary, quartiles, summary_row, z_scores
from .stats.inequality import (
	GiniResult, ParetoResult, bottom_share, gini_coefficient, inequality_level, pareto, top_share,
)
from .stats.rounding import normal_round

from .imports import numpy as np  # type: ignore
from .imports import pandas as pd  # type: ignore

LOG = get_logger(__name__)

__all__ = [
	"BoxGroup", "BoxPlotResult", "RegressionAnalysis", "InequalityAnalysis", "ClusterAnalysis",
	"outlier_table", "cv_comparison", "correlation_heatmap", "percentile_distribution",
	"box_plot_groups", "group_averages", "regression_analysis", "inequality_analysis", "pareto_analysis",
	"cluster_analysis", "stats_summary_table",
]

_GROUP_ATTRIBUTES = ("type", "category", "size")


def _settings(settings: Optional[AnalysisSettings]) -> AnalysisSettings:
	return settings if settings is not None else DEFAULT_SETTINGS


# --- Outliers ---
def outlier_table(
		population: Population,
		indicators: Sequence[Indicator] = tuple(Indicator),
		*,
		threshold: Optional[float] = None,
		limit: int = 30,
		settings: Optional[AnalysisSettings] = None
) -> List[Dict[str, Any]]:
	"""
	Institutions whose indicator value is far from the population mean.

	Z-scores are computed per indicator over the active records with a finite,
	non-negative value. Rows are sorted by ``|z|`` descending and cut at ``limit``.

	:param population: Records to scan.
	:param indicators: Indicators to check.
	:param threshold: Minimum ``|z|``; defaults to ``settings.outlier_threshold``.
	:param limit: Maximum number of rows.
	:param settings: Analysis settings; the module defaults when omitted.
	:return: Rows ``{id, name, indicator, label, value, unit, z, direction}``.
	"""
	cfg = _settings(settings)
	t = cfg.outlier_threshold if threshold is None else threshold
	active = population.active()

	rows: List[Dict[str, Any]] = []
	for ind in indicators:
		definition = INDICATORS[Indicator(ind)]
		values = active.values(ind)
		mask = np.isfinite(values) & (values >= 0)
		members = [r for r, m in zip(active, mask) if m]
		kept = values[mask]
		if kept.size == 0:
			continue
		for rec, value, z in zip(members, kept, z_scores(kept)):
			if abs(z) < t:
				continue
			rows.append({
				"id": rec.id,
				"name": rec.name,
				"indicator": definition.key.value,
				"label": definition.label,
				"value": float(value),
				"unit": definition.unit,
				"z": normal_round(float(z), 2),
				"direction": "high" if z > 0 else "low",
			})

	rows.sort(key=lambda row: abs(row["z"]), reverse=True)
	LOG.debug("outlier_table(): %d rows at |z| >= %s (limit %d)", len(rows), t, limit)
	return rows[:limit]


# --- Dispersion ---
def cv_comparison(population: Population, selectors: Sequence[SelectorLike]) -> List[Dict[str, Any]]:
	"""
	Coefficient of variation of each selector, in percent, sorted descending.

	:return: Rows ``{name, cv_percent}`` over the active records.
	"""
	active = population.active()
	rows = [
		{"name": describe_selector(sel), "cv_percent": normal_round(coefficient_of_variation(active.vector(sel)) * 100, 1)}
		for sel in selectors
	]
	rows.sort(key=lambda row: row["cv_percent"], reverse=True)
	return rows


# --- Correlation ---
def correlation_heatmap(population: Population, selectors: Sequence[SelectorLike]) -> "pd.DataFrame":
	"""
	Pearson correlation matrix between selectors over the active records.

	Each pair uses the records where both values are finite.

	:return: Square DataFrame labelled by selector.
	"""
	active = population.active()
	labels = [describe_selector(sel) for sel in selectors]
	vectors = [active.values(sel) for sel in selectors]
	matrix = correlation_matrix(vectors)
	return pd.DataFrame(matrix, index=labels, columns=labels)


@dataclass(frozen=True)
class RegressionAnalysis:
	x: str
	y: str
	n: int
	regression: Regression
	strength: str
	points: List[Dict[str, Any]] = field(default_factory=list)
	trendline: List[Dict[str, float]] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"x": self.x,
			"y": self.y,
			"n": self.n,
			"regression": self.regression.to_dict(),
			"strength": self.strength,
			"points": [dict(p) for p in self.points],
			"trendline": [dict(p) for p in self.trendline],
		}


def regression_analysis(population: Population, x: SelectorLike, y: SelectorLike) -> RegressionAnalysis:
	"""
	OLS fit of ``y`` on ``x`` over active records where both values are positive.

	The trendline spans the observed ``x`` range with two points.
	"""
	xs, ys, members = population.active().labelled_pairs(x, y, value_filter=positive_finite)
	reg = linear_regression(xs, ys)
	trend: List[Dict[str, float]] = []
	if xs.size >= 2:
		trend = [{"x": px, "y": py} for px, py in reg.trendline([float(xs.min()), float(xs.max())])]
	points = [
		{"id": rec.id, "name": rec.name, "x": float(px), "y": float(py)}
		for rec, px, py in zip(members, xs, ys)
	]
	return RegressionAnalysis(
		x=describe_selector(x),
		y=describe_selector(y),
		n=int(xs.size),
		regression=reg,
		strength=correlation_strength(reg.r),
		points=points,
		trendline=trend,
	)


# --- Distributions ---
def percentile_distribution(population: Population, selector: SelectorLike) -> Dict[str, Any]:
	"""Nearest-rank percentiles of a selector over the active records."""
	values = population.active().vector(selector)
	out: Dict[str, Any] = {"name": describe_selector(selector), "count": int(values.size)}
	out.update(percentile_summary(values))
	return out


@dataclass(frozen=True)
class BoxGroup:
	name: str
	count: int
	quartiles: Quartiles
	whisker_low: float
	whisker_high: float

	def to_dict(self) -> Dict[str, Any]:
		out: Dict[str, Any] = {"name": self.name, "count": self.count}
		out.update(self.quartiles.to_dict())
		out["whisker_low"] = self.whisker_low
		out["whisker_high"] = self.whisker_high
		return out


@dataclass(frozen=True)
class BoxPlotResult:
	overall: BoxGroup
	groups: List[BoxGroup] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {"overall": self.overall.to_dict(), "groups": [g.to_dict() for g in self.groups]}


def _box(name: str, values: "np.ndarray", whisker: float) -> BoxGroup:
	q = quartiles(values)
	low, high = box_whiskers(q, whisker=whisker)
	return BoxGroup(name=name, count=int(values.size), quartiles=q, whisker_low=low, whisker_high=high)


def box_plot_groups(
		population: Population,
		selector: SelectorLike,
		*,
		group_by: str = "type",
		min_group_size: Optional[int] = None,
		settings: Optional[AnalysisSettings] = None
) -> BoxPlotResult:
	"""
	Quartiles and whiskers overall and per group over the active records.

	Groups with fewer than ``min_group_size`` values are left out.

	:param group_by: Record attribute to group on (``type``, ``category`` or ``size``).
	:raises ValueError: For any other ``group_by``.
	"""
	if group_by not in _GROUP_ATTRIBUTES:
		raise ValueError(f"group_by must be one of {_GROUP_ATTRIBUTES}, got {group_by!r}")
	cfg = _settings(settings)
	min_size = cfg.min_group_size if min_group_size is None else min_group_size
	active = population.active()

	overall = _box("overall", active.vector(selector), cfg.iqr_whisker)
	groups: List[BoxGroup] = []
	for name, sub in active.group_by(group_by).items():
		values = sub.vector(selector)
		if values.size < min_size:
			LOG.debug("box_plot_groups(): skipping group %r with %d values", name, values.size)
			continue
		groups.append(_box(name, values, cfg.iqr_whisker))
	return BoxPlotResult(overall=overall, groups=groups)


def group_averages(
		population: Population,
		selectors: Sequence[SelectorLike],
		*,
		group_by: str = "category",
		min_group_size: int = 3,
		decimals: int = 1,
		missing_label: str = "other"
) -> List[Dict[str, Any]]:
	"""
	Mean and middle-element median of each selector per group.

	All records of ``population`` take part (pass ``population.active()`` for
	per-student indicators). Records with an empty group attribute are pooled
	under ``missing_label``. Non-finite values are dropped, negative ones kept,
	so differences such as net collection growth average correctly. The median
	is ``sorted[n // 2]``.

	:param group_by: Record attribute to group on (``type``, ``category`` or ``size``).
	:param min_group_size: Groups with fewer finite values are left out.
	:param decimals: Rounding of ``mean`` and ``median``.
	:param missing_label: Group name for records without the attribute.
	:return: Rows ``{group, name, count, mean, median}``; per selector, groups
			 are sorted by mean descending.
	:raises ValueError: For an unsupported ``group_by``.
	"""
	if group_by not in _GROUP_ATTRIBUTES:
		raise ValueError(f"group_by must be one of {_GROUP_ATTRIBUTES}, got {group_by!r}")
	groups = dict(population.group_by(group_by))
	unlabelled = population.where(lambda r: not getattr(r, group_by))
	if len(unlabelled):
		groups[missing_label] = unlabelled

	rows: List[Dict[str, Any]] = []
	for sel in selectors:
		name = describe_selector(sel)
		block: List[Dict[str, Any]] = []
		for group, sub in groups.items():
			values = np.sort(sub.vector(sel, value_filter=finite))
			if values.size < min_group_size:
				continue
			block.append({
				"group": group,
				"name": name,
				"count": int(values.size),
				"mean": normal_round(float(values.mean()), decimals),
				"median": normal_round(float(values[values.size // 2]), decimals),
			})
		block.sort(key=lambda row: row["mean"], reverse=True)
		rows.extend(block)
	LOG.debug("group_averages(): %d rows grouped by %s", len(rows), group_by)
	return rows


# --- Inequality ---
@dataclass(frozen=True)
class InequalityAnalysis:
	name: str
	gini: GiniResult
	level: str
	top10_share: float
	bottom50_share: float

	def to_dict(self) -> Dict[str, Any]:
		out = {"name": self.name, "level": self.level,
			   "top10_share": self.top10_share, "bottom50_share": self.bottom50_share}
		out.update(self.gini.to_dict())
		return out


def inequality_analysis(
		population: Population,
		selector: SelectorLike,
		*,
		lorenz_points: Optional[int] = None,
		settings: Optional[AnalysisSettings] = None
) -> InequalityAnalysis:
	"""Gini, Lorenz curve and tail shares of a resource over all records with a positive value."""
	cfg = _settings(settings)
	points = cfg.lorenz_points if lorenz_points is None else lorenz_points
	values = population.vector(selector, value_filter=positive_finite)
	result = gini_coefficient(values, lorenz_points=points)
	return InequalityAnalysis(
		name=describe_selector(selector),
		gini=result,
		level=inequality_level(result.gini),
		top10_share=top_share(values, 0.1),
		bottom50_share=bottom_share(values, 0.5),
	)


def pareto_analysis(population: Population, selector: SelectorLike, *, head: int = 30) -> ParetoResult:
	"""Share of a resource held by the top 10 % and 20 % of institutions."""
	return pareto(population.vector(selector, value_filter=positive_finite), head=head)


# --- Clustering ---
@dataclass(frozen=True)
class ClusterAnalysis:
	x: str
	y: str
	k: int
	iterations: int
	converged: bool
	centroids: List[Dict[str, float]] = field(default_factory=list)
	points: List[Dict[str, Any]] = field(default_factory=list)
	clusters: List[ClusterSummary] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"x": self.x,
			"y": self.y,
			"k": self.k,
			"iterations": self.iterations,
			"converged": self.converged,
			"centroids": [dict(c) for c in self.centroids],
			"points": [dict(p) for p in self.points],
			"clusters": [
				{"index": c.index, "count": c.count, "mean_x": c.mean_x, "mean_y": c.mean_y,
				 "members": list(c.members)}
				for c in self.clusters
			],
		}


def cluster_analysis(
		population: Population,
		x: SelectorLike,
		y: SelectorLike,
		k: Optional[int] = None,
		*,
		settings: Optional[AnalysisSettings] = None
) -> ClusterAnalysis:
	"""
	Partition active records by two indicators with deterministic K-Means.

	Records take part when both values are positive. Cluster members are listed
	by institution name.
	"""
	cfg = _settings(settings)
	k = cfg.default_k if k is None else k
	xs, ys, members = population.active().labelled_pairs(x, y, value_filter=positive_finite)
	pts = np.column_stack([xs, ys]) if xs.size else np.empty((0, 2))
	result = k_means_2d(pts, k, max_iterations=cfg.kmeans_max_iterations)
	if not result.converged and pts.shape[0]:
		LOG.info("cluster_analysis(): stopped after %d iterations without converging", result.iterations)
	names = [r.name for r in members]
	points = [
		{"id": rec.id, "name": rec.name, "x": float(px), "y": float(py), "cluster": label}
		for rec, px, py, label in zip(members, xs, ys, result.labels)
	]
	return ClusterAnalysis(
		x=describe_selector(x),
		y=describe_selector(y),
		k=k,
		iterations=result.iterations,
		converged=result.converged,
		centroids=[{"x": cx, "y": cy} for cx, cy in result.centroids],
		points=points,
		clusters=cluster_summaries(pts, result.labels, k, names=names),
	)


# --- Summary table ---
def stats_summary_table(population: Population, selectors: Sequence[SelectorLike]) -> "pd.DataFrame":
	"""
	Count, mean, median, p25, p75, p90, min and max per selector.

	Values are taken over the active records where they are positive; selectors
	with no such value are left out of the table.

	:return: DataFrame indexed by selector label.
	"""
	active = population.active()
	rows: Dict[str, Dict[str, float]] = {}
	for sel in selectors:
		row = summary_row(active.vector(sel, value_filter=positive_finite))
		if row is None:
			continue
		rows[describe_selector(sel)] = row
	columns = ["count", "mean", "median", "p25", "p75", "p90", "min", "max"]
	if not rows:
		return pd.DataFrame(columns=columns)
	frame = pd.DataFrame.from_dict(rows, orient="index", columns=columns)
	frame["count"] = frame["count"].astype(int)
	return frame
