"""Tunable parameters of the analyses, with an optional file-based override."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ..logutil import get_logger
from .loader import ConfigError, load_config_files
from .schema import KeySpec, apply_defaults, make_range_validator, validate_data

LOG = get_logger(__name__)

PathLike = Union[str, Path]

SECTION = "analysis"

__all__ = ["AnalysisSettings", "DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "SECTION"]


@dataclass(frozen=True)
class AnalysisSettings:
	"""
	Parameters shared by the dashboard analyses.

	:param outlier_threshold: ``|z|`` at or above which a value is an outlier.
	:param lorenz_points: Approximate number of Lorenz curve points.
	:param kmeans_max_iterations: Cap on K-Means assignment passes.
	:param default_k: Cluster count when the caller gives none.
	:param min_group_size: Smallest subgroup that gets its own box plot.
	:param iqr_whisker: Whisker / fence multiplier of the IQR.
	"""

	outlier_threshold: float = 2.5
	lorenz_points: int = 50
	kmeans_max_iterations: int = 50
	default_k: int = 3
	min_group_size: int = 5
	iqr_whisker: float = 1.5

	@classmethod
	def from_mapping(cls, values: Mapping[str, Any]) -> "AnalysisSettings":
		"""
		Validate ``values`` (keys of this class) and build settings.

		Missing keys take their defaults. Integers are accepted for float keys.

		:raises ConfigError: On unknown keys, wrong types or out-of-range values.
		"""
		data: Dict[str, Dict[str, Any]] = {SECTION: {str(k).lower(): v for k, v in values.items()}}
		apply_defaults(data, SETTINGS_SCHEMA)
		validate_data(data, SETTINGS_SCHEMA)
		section = data[SECTION]
		# int values are accepted for float keys; cast to the declared kind
		return cls(**{f.name: type(f.default)(section[f.name]) for f in fields(cls)})

	@classmethod
	def from_files(cls, *paths: PathLike) -> "AnalysisSettings":
		"""
		Read the ``[analysis]`` section from INI and/or JSON files.

		Later files override earlier ones; files without the section are allowed.

		:raises ConfigError: On read errors or invalid values.
		"""
		merged = load_config_files(paths)
		settings = cls.from_mapping(merged.get(SECTION, {}))
		LOG.info("Analysis settings loaded from %d file(s)", len(paths))
		return settings

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


_POSITIVE = make_range_validator(0, exclusive_minimum=True)

SETTINGS_SCHEMA: Dict[str, Dict[str, KeySpec]] = {
	SECTION: {
		"outlier_threshold": KeySpec((int, float), default=2.5, validator=_POSITIVE),
		"lorenz_points": KeySpec(int, default=50, validator=_POSITIVE),
		"kmeans_max_iterations": KeySpec(int, default=50, validator=_POSITIVE),
		"default_k": KeySpec(int, default=3, validator=_POSITIVE),
		"min_group_size": KeySpec(int, default=5, validator=make_range_validator(1)),
		"iqr_whisker": KeySpec((int, float), default=1.5, validator=_POSITIVE),
	}
}


if {f.name for f in fields(AnalysisSettings)} != set(SETTINGS_SCHEMA[SECTION]):
	raise ConfigError("SETTINGS_SCHEMA is out of sync with AnalysisSettings")

DEFAULT_SETTINGS = AnalysisSettings()
