"""Tests for package logging setup and the lazy import proxies."""

from __future__ import annotations

import logging
import os

import pytest

from unilibstats.imports import LazyModule, lazy_module
from unilibstats.logutil import CONSOLE_HANDLER, ROOT_LOGGER, configure_logging, get_logger


def test_module_loggers_share_the_package_handler():
	log = get_logger("unilibstats.stats.describe")
	root = logging.getLogger(ROOT_LOGGER)
	assert log.name == "unilibstats.stats.describe"
	assert [h.get_name() for h in root.handlers].count(CONSOLE_HANDLER) == 1
	assert not log.handlers
	assert root.propagate is False


def _handlers_for(log: logging.Logger, path) -> list:
	target = os.path.abspath(path)
	return [h for h in log.handlers if getattr(h, "baseFilename", None) == target]


def test_configure_logging_writes_file(tmp_path):
	path = tmp_path / "logs" / "run.log"
	log = configure_logging(console_level="WARNING", file_path=path, file_level="DEBUG")
	try:
		get_logger("unilibstats.analysis").debug("ranked %d institutions", 3)
		for handler in _handlers_for(log, path):
			handler.flush()
		assert "ranked 3 institutions" in path.read_text(encoding="utf-8")
		# a second call does not attach the same file twice
		configure_logging(console_level="WARNING", file_path=path, file_level="DEBUG")
		assert len(_handlers_for(log, path)) == 1
	finally:
		for handler in _handlers_for(log, path):
			log.removeHandler(handler)
			handler.close()
		log.setLevel(logging.WARNING)


def test_configure_logging_leaves_foreign_handlers_alone():
	log = get_logger(ROOT_LOGGER)
	foreign = logging.StreamHandler()
	foreign.setLevel(logging.ERROR)
	marker = logging.Formatter("foreign %(message)s")
	foreign.setFormatter(marker)
	log.addHandler(foreign)
	try:
		configure_logging(console_level="DEBUG")
		assert foreign.level == logging.ERROR
		assert foreign.formatter is marker
		console = next(h for h in log.handlers if h.get_name() == CONSOLE_HANDLER)
		assert console.level == logging.DEBUG
	finally:
		log.removeHandler(foreign)
		configure_logging(console_level="WARNING")
		log.setLevel(logging.WARNING)


def test_configure_logging_rejects_unknown_level():
	with pytest.raises(ValueError):
		configure_logging(console_level="LOUD")  # type: ignore[arg-type]


def test_lazy_module_imports_on_first_use():
	proxy = lazy_module("json")
	assert isinstance(proxy, LazyModule)
	assert not proxy.loaded
	assert proxy.dumps([1]) == "[1]"
	assert proxy.loaded


def test_lazy_module_reports_missing_dependency():
	proxy = lazy_module("surely_not_installed_pkg", install="pip install surely-not-installed-pkg")
	with pytest.raises(ImportError, match="pip install surely-not-installed-pkg"):
		proxy.anything
