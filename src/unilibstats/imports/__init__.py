# src/unilibstats/imports/__init__.py

from __future__ import annotations

from .lazyproxy import LazyModule, lazy_module

np = numpy = lazy_module("numpy", install="pip install numpy", reason="indicator vectors")
pd = pandas = lazy_module("pandas", install="pip install pandas", reason="population tables")
sp = scipy = lazy_module("scipy", install="pip install scipy", reason="rank statistics")

__all__ = [
	"LazyModule", "lazy_module",
	"np", "numpy", "pd", "pandas", "sp", "scipy",
]
