# src/unilibstats/imports/lazyproxy.py

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, List, Optional

__all__ = ["LazyModule", "lazy_module"]


class LazyModule:
	"""
	Stand-in for a third-party module that is imported on first use.

	Analysis modules bind these proxies at import time (``np.sort(...)`` works
	as usual) and the numerical stack is only loaded when a routine runs. A
	missing distribution is reported as :class:`ImportError` with the package
	to install; submodules such as ``scipy.stats`` resolve on attribute access.
	"""

	__slots__ = ("_name", "_module", "_hint")

	def __init__(
			self,
			name: str,
			*,
			install: Optional[str] = None,
			reason: Optional[str] = None
	) -> None:
		self._name = name
		self._module: Optional[ModuleType] = None
		hint = [f"Dependency module '{name}' is not installed."]
		if reason:
			hint.append(f"Needed for {reason}.")
		if install:
			hint.append(f"Install with '{install}'.")
		self._hint = " ".join(hint)

	@property
	def loaded(self) -> bool:
		"""True once the wrapped module has been imported."""
		return self._module is not None

	def _resolve(self) -> ModuleType:
		if self._module is None:
			try:
				self._module = importlib.import_module(self._name)
			except ImportError as exc:
				raise ImportError(self._hint) from exc
		return self._module

	def _submodule(self, module: ModuleType, item: str) -> ModuleType:
		qualified = f"{self._name}.{item}"
		try:
			sub = importlib.import_module(qualified)
		except ImportError as exc:
			raise AttributeError(f"'{self._name}' has no attribute '{item}' (no submodule {qualified!r})") from exc
		setattr(module, item, sub)
		return sub

	def __getattr__(self, item: str) -> Any:
		if item.startswith("__") and item.endswith("__"):
			# dunder probes (copy, pickle, doctest) must not trigger the import
			raise AttributeError(item)
		module = self._resolve()
		try:
			return getattr(module, item)
		except AttributeError:
			return self._submodule(module, item)

	def __dir__(self) -> List[str]:
		return dir(self._resolve())

	def __repr__(self) -> str:
		return f"<LazyModule {self._name!r} ({'loaded' if self.loaded else 'pending'})>"


def lazy_module(name: str, *, install: Optional[str] = None, reason: Optional[str] = None) -> LazyModule:
	"""
	Build a :class:`LazyModule` for ``name``.

	:param name: Importable module name.
	:param install: Command shown when the import fails.
	:param reason: What the package is used for, also shown on failure.
	"""
	return LazyModule(name, install=install, reason=reason)
