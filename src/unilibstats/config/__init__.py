from .loader import (
	ConfigError, load_config_files, load_ini_files, load_json_files, read_ini_file, read_json_file,
)
from .schema import KeySpec, make_range_validator, validate_data
from .settings import AnalysisSettings, DEFAULT_SETTINGS

__all__ = [
	"ConfigError",
	"load_config_files",
	"load_ini_files",
	"load_json_files",
	"read_ini_file",
	"read_json_file",
	"KeySpec",
	"make_range_validator",
	"validate_data",
	"AnalysisSettings",
	"DEFAULT_SETTINGS",
]
