# src/unilibstats/stats/__init__.py
"""
Statistical core: pure functions from numeric vectors to statistics.

Nothing here knows about institution records; callers extract vectors first
(see :meth:`unilibstats.population.Population.vector`).
"""

from importlib import import_module
from typing import TYPE_CHECKING

__all__ = [
	# coercion
	"coerce_vector", "filter_vector", "filter_pair", "non_negative_finite", "positive_finite",
	# descriptive
	"Quartiles", "quartiles", "percentile", "percentiles", "percentile_summary", "summary_row",
	"coefficient_of_variation", "z_scores", "box_whiskers",
	# correlation
	"Regression", "linear_regression", "pearson_correlation", "spearman_correlation",
	"correlation_matrix", "correlation_strength",
	# inequality
	"GiniResult", "LorenzPoint", "ParetoResult", "gini_coefficient", "top_share", "bottom_share", "pareto",
	"inequality_level",
	# clustering
	"KMeansResult", "ClusterSummary", "k_means_2d", "cluster_summaries",
	# outliers
	"outliers_zscore", "outliers_iqr",
	# transforms / rounding
	"min_max_normalize", "denormalize", "ordinal_ranks", "normal_round",
	# class
	"MathStat",
]

_MOD_OF = {
	"coerce_vector": "coerce",
	"filter_vector": "coerce",
	"filter_pair": "coerce",
	"non_negative_finite": "coerce",
	"positive_finite": "coerce",
	"Quartiles": "describe",
	"quartiles": "describe",
	"percentile": "describe",
	"percentiles": "describe",
	"percentile_summary": "describe",
	"summary_row": "describe",
	"coefficient_of_variation": "describe",
	"z_scores": "describe",
	"box_whiskers": "describe",
	"Regression": "correlation",
	"linear_regression": "correlation",
	"pearson_correlation": "correlation",
	"spearman_correlation": "correlation",
	"correlation_matrix": "correlation",
	"correlation_strength": "correlation",
	"GiniResult": "inequality",
	"LorenzPoint": "inequality",
	"ParetoResult": "inequality",
	"gini_coefficient": "inequality",
	"top_share": "inequality",
	"bottom_share": "inequality",
	"pareto": "inequality",
	"inequality_level": "inequality",
	"KMeansResult": "clustering",
	"ClusterSummary": "clustering",
	"k_means_2d": "clustering",
	"cluster_summaries": "clustering",
	"outliers_zscore": "outliers",
	"outliers_iqr": "outliers",
	"min_max_normalize": "transforms",
	"denormalize": "transforms",
	"ordinal_ranks": "transforms",
	"normal_round": "rounding",
	"MathStat": "mathstat",
}


def __getattr__(name: str):
	if name in _MOD_OF:
		mod = import_module(f"unilibstats.stats.{_MOD_OF[name]}")
		return getattr(mod, name)
	raise AttributeError(f"module 'unilibstats.stats' has no attribute {name!r}")


if TYPE_CHECKING:
	from .coerce import coerce_vector, filter_vector, filter_pair, non_negative_finite, positive_finite
	from .describe import (
		Quartiles, quartiles, percentile, percentiles, percentile_summary, summary_row,
		coefficient_of_variation, z_scores, box_whiskers,
	)
	from .correlation import (
		Regression, linear_regression, pearson_correlation, spearman_correlation,
		correlation_matrix, correlation_strength,
	)
	from .inequality import (
		GiniResult, LorenzPoint, ParetoResult, gini_coefficient, top_share, bottom_share, pareto, inequality_level,
	)
	from .clustering import KMeansResult, ClusterSummary, k_means_2d, cluster_summaries
	from .outliers import outliers_zscore, outliers_iqr
	from .transforms import min_max_normalize, denormalize, ordinal_ranks
	from .rounding import normal_round
	from .mathstat import MathStat
