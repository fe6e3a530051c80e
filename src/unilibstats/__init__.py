"""
unilibstats: statistics over university library survey data.

Top-level API keeps imports lazy:

    from unilibstats import Population, Indicator
    pop = Population.from_json("universities.json")
    books = pop.active().vector(Indicator.BOOKS_PER_STUDENT)

    from unilibstats import quartiles, gini_coefficient  # both lazy
    q = quartiles(books)

    from unilibstats import analysis
    table = analysis.outlier_table(pop)
"""

from importlib import import_module
from importlib.metadata import version, PackageNotFoundError as _PNF
from typing import TYPE_CHECKING

try:
	__version__ = version("unilibstats")
except _PNF:
	__version__ = "0.0.0+local"

__all__ = [
	"__version__",
	# main facades
	"Population", "InstitutionRecord", "Indicator", "Resource", "DataError",
	"AnalysisSettings", "DEFAULT_SETTINGS", "configure_logging",
	# namespaces
	"imports", "config", "logutil", "records", "stats", "analysis",
	# stats convenience (lazy)
	"MathStat", "normal_round", "quartiles", "coefficient_of_variation", "z_scores",
	"linear_regression", "pearson_correlation", "spearman_correlation",
	"gini_coefficient", "k_means_2d",
]

# --- lazy maps ---------------------------------------------------------------
_RECORDS_EXPORTS = {"InstitutionRecord", "Indicator", "Resource", "DataError"}
_CONFIG_EXPORTS = {"AnalysisSettings", "DEFAULT_SETTINGS"}
_NAMESPACES = {"imports", "config", "logutil", "records", "stats", "analysis"}

_STATS_EXPORTS = {
	"MathStat", "normal_round", "quartiles", "coefficient_of_variation", "z_scores",
	"linear_regression", "pearson_correlation", "spearman_correlation",
	"gini_coefficient", "k_means_2d",
}


def __getattr__(name: str):
	# --- main facades ---
	if name == "Population":
		return import_module("unilibstats.population").Population
	if name == "configure_logging":
		return import_module("unilibstats.logutil").configure_logging

	# --- namespaces (lazy) ---
	if name in _NAMESPACES:
		return import_module(f"unilibstats.{name}")

	# --- lazy re-exports from subpackages ---
	if name in _RECORDS_EXPORTS:
		return getattr(import_module("unilibstats.records"), name)
	if name in _CONFIG_EXPORTS:
		return getattr(import_module("unilibstats.config"), name)
	if name in _STATS_EXPORTS:
		return getattr(import_module("unilibstats.stats"), name)

	raise AttributeError(f"module 'unilibstats' has no attribute {name!r}")


# Help type-checkers without eager imports
if TYPE_CHECKING:
	from . import imports, config, logutil, records, stats, analysis  # noqa: F401
	from .logutil import configure_logging  # noqa: F401
	from .population import Population  # noqa: F401
	from .records import InstitutionRecord, Indicator, Resource, DataError  # noqa: F401
	from .config import AnalysisSettings, DEFAULT_SETTINGS  # noqa: F401
	from .stats import (
		MathStat, normal_round, quartiles, coefficient_of_variation, z_scores,
		linear_regression, pearson_correlation, spearman_correlation,
		gini_coefficient, k_means_2d,  # noqa: F401
	)
