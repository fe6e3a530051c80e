# src/unilibstats/config/loader.py

from __future__ import annotations

import ast
import configparser
import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, MutableMapping, Union

from ..logutil import get_logger

LOG = get_logger(__name__)

PathLike = Union[str, Path]
Layer = Dict[str, Dict[str, Any]]

__all__ = [
	"ConfigError",
	"parse_value",
	"merge_layer",
	"read_ini_file",
	"read_json_file",
	"load_ini_files",
	"load_json_files",
	"load_config_files",
]


class ConfigError(Exception):
	"""Configuration could not be read or failed validation."""


def parse_value(raw: str) -> Any:
	"""
	Turn an INI string into a Python value.

	A safe literal (``ast.literal_eval``) wins; tuples come back as lists.
	Otherwise ``none``/``null`` map to None and ``true/yes/on`` or
	``false/no/off`` to booleans. Anything else is returned as stripped text.
	"""
	text = raw.strip()
	try:
		value = ast.literal_eval(text)
	except (ValueError, SyntaxError):
		pass
	else:
		return list(value) if isinstance(value, tuple) else value

	word = text.lower()
	if word in {"none", "null"}:
		return None
	if word in {"true", "yes", "on"}:
		return True
	if word in {"false", "no", "off"}:
		return False
	return text


def merge_layer(base: MutableMapping[str, Dict[str, Any]], layer: Mapping[str, Mapping[str, Any]]) -> None:
	"""
	Overlay ``layer`` on ``base`` key by key; values in ``layer`` win.

	:raises ConfigError: If a section of ``layer`` is not a mapping.
	"""
	for section, values in layer.items():
		if not isinstance(values, Mapping):
			raise ConfigError(f"Section '{section}' must be a mapping, got {type(values).__name__}.")
		base.setdefault(section, {}).update(values)


def _existing(path_like: PathLike) -> Path:
	path = Path(path_like)
	if not path.is_file():
		raise ConfigError(f"Config file not found: {path}")
	return path


def read_ini_file(path_like: PathLike) -> Layer:
	"""
	One INI file as ``section -> key -> value``.

	Names are lower-cased and values go through :func:`parse_value`.
	Interpolation is off, so ``%`` in values is literal.

	:raises ConfigError: If the file is missing or not valid INI.
	"""
	path = _existing(path_like)
	parser = configparser.ConfigParser(interpolation=None)
	try:
		with path.open("r", encoding="utf-8") as fh:
			parser.read_file(fh)
	except (OSError, configparser.Error) as exc:
		raise ConfigError(f"Cannot read INI '{path}': {exc}") from exc
	LOG.info("Read INI config %s", path)
	return {
		section.lower(): {key.lower(): parse_value(raw) for key, raw in parser.items(section)}
		for section in parser.sections()
	}


def read_json_file(path_like: PathLike) -> Layer:
	"""
	One JSON file shaped ``{"section": {"key": value}}``.

	:raises ConfigError: If the file is missing, not JSON, or not an object of objects.
	"""
	path = _existing(path_like)
	try:
		payload = json.loads(path.read_text(encoding="utf-8"))
	except (OSError, json.JSONDecodeError) as exc:
		raise ConfigError(f"Cannot read JSON '{path}': {exc}") from exc
	if not isinstance(payload, dict):
		raise ConfigError(f"JSON config '{path}' must hold an object at the top level.")

	layer: Layer = {}
	for section, values in payload.items():
		if not isinstance(values, dict):
			raise ConfigError(f"Section '{section}' in '{path}' must be an object.")
		layer[str(section).lower()] = {str(k).lower(): v for k, v in values.items()}
	LOG.info("Read JSON config %s", path)
	return layer


def _read_any(path_like: PathLike) -> Layer:
	reader = read_json_file if Path(path_like).suffix.lower() == ".json" else read_ini_file
	return reader(path_like)


def _merge_files(files: Iterable[PathLike], reader: Callable[[PathLike], Layer]) -> Layer:
	merged: Layer = {}
	for path_like in files:
		merge_layer(merged, reader(path_like))
	return merged


def load_ini_files(files: Iterable[PathLike]) -> Layer:
	"""Merge INI files in order; later files override earlier ones."""
	return _merge_files(files, read_ini_file)


def load_json_files(files: Iterable[PathLike]) -> Layer:
	"""Merge JSON files in order; later files override earlier ones."""
	return _merge_files(files, read_json_file)


def load_config_files(files: Iterable[PathLike]) -> Layer:
	"""Merge a mix of ``.json`` and INI files in order, choosing the reader by suffix."""
	return _merge_files(files, _read_any)
