# src/unilibstats/logutil.py

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal, Optional, Union

PathLike = Union[str, Path]

ConsoleLevelName = Literal[
	"CRITICAL",
	"ERROR",
	"WARNING",
	"INFO",
	"DEBUG",
	"NOTSET",
]

LevelLike = Union[int, ConsoleLevelName]

ROOT_LOGGER = "unilibstats"
CONSOLE_HANDLER = "unilibstats.console"
_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _normalize_level(value: LevelLike, *, param_name: str) -> int:
	if isinstance(value, int):
		return value

	resolved = logging.getLevelName(str(value).upper())
	if isinstance(resolved, int):
		return resolved

	raise ValueError(f"Unknown logging level name for {param_name}: {value}")


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
	"""
	Return a package logger.

	Module loggers (``unilibstats.stats.describe`` etc.) carry no handlers of
	their own and propagate to the package root, which receives a console
	handler once, on first use. The handler is named :data:`CONSOLE_HANDLER`
	so handlers attached by other code (test runners, applications) are never
	mistaken for it.

	:param name: Logger name, usually ``__name__``.
	:return: The logger.
	"""
	root = logging.getLogger(ROOT_LOGGER)
	if _console_handler(root) is None:
		handler = logging.StreamHandler()
		handler.set_name(CONSOLE_HANDLER)
		handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
		root.addHandler(handler)
		root.setLevel(logging.WARNING)
		root.propagate = False
	return logging.getLogger(name)


def _console_handler(log: logging.Logger) -> Optional[logging.Handler]:
	return next((h for h in log.handlers if h.get_name() == CONSOLE_HANDLER), None)


def _has_file_handler(log: logging.Logger, file_path: PathLike) -> bool:
	target = os.path.abspath(file_path)
	return any(getattr(h, "baseFilename", None) == target for h in log.handlers)


def _file_handler(path: Path, *, mode: str, rotate: bool, max_bytes: int, backup_count: int) -> logging.Handler:
	path.parent.mkdir(parents=True, exist_ok=True)
	if rotate:
		return RotatingFileHandler(path, mode=mode, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
	return logging.FileHandler(path, mode=mode, encoding="utf-8")


def configure_logging(
		*,
		console_level: LevelLike = "INFO",
		file_path: Optional[PathLike] = None,
		file_level: Optional[LevelLike] = None,
		mode: str = "a",
		rotate: bool = False,
		max_bytes: int = 2_000_000,
		backup_count: int = 3,
		formatter: Optional[logging.Formatter] = None,
		propagate: bool = False
) -> logging.Logger:
	"""
	Configure the package root logger for an application embedding unilibstats.

	:param console_level: Console handler level (int or level name).
	:param file_path: Optional log file; a file handler is added when given.
	:param file_level: File handler level, defaults to ``console_level``.
	:param mode: ``'a'`` to append, ``'w'`` to overwrite.
	:param rotate: Use :class:`RotatingFileHandler` when True.
	:param max_bytes: Rotation threshold per file.
	:param backup_count: Number of rotated backups kept.
	:param formatter: Custom formatter; the default includes a timestamp.
	:param propagate: Whether records propagate to the Python root logger.
	:return: The configured package logger.
	"""
	console_value = _normalize_level(console_level, param_name="console_level")
	file_value = (
		_normalize_level(file_level, param_name="file_level")
		if file_level is not None
		else console_value
	)

	log = get_logger(ROOT_LOGGER)
	log.setLevel(min(console_value, file_value) if file_path else console_value)
	log.propagate = propagate

	fmt = formatter or logging.Formatter(_DEFAULT_FORMAT)

	# only the package's own console handler; foreign handlers keep their setup
	console = _console_handler(log)
	if console is not None:
		console.setLevel(console_value)
		console.setFormatter(fmt)

	if file_path and not _has_file_handler(log, file_path):
		file_handler = _file_handler(Path(file_path), mode=mode, rotate=rotate, max_bytes=max_bytes, backup_count=backup_count)
		file_handler.setLevel(file_value)
		file_handler.setFormatter(fmt)
		log.addHandler(file_handler)

	return log
