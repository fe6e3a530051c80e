# src/unilibstats/stats/coerce.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Callable, Iterable, Optional, Tuple, Union

from ..logutil import get_logger
from ..imports import numpy as np  # type: ignore
from ..imports import pandas as pd  # type: ignore

LOG = get_logger(__name__)

__all__ = [
	"DataLike", "ValueFilter",
	"coerce_vector", "coerce_pair", "coerce_points",
	"non_negative_finite", "positive_finite", "finite",
	"filter_vector", "filter_pair",
]

ArrayLike1D = Union[Sequence[float], "np.ndarray", "pd.Series"]  # type: ignore[name-defined]
DataLike = Union[ArrayLike1D, "pd.DataFrame", Mapping[str, float], Iterable[float]]  # type: ignore[name-defined]
ValueFilter = Callable[["np.ndarray"], "np.ndarray"]


# --- Value filters (vectorised: array in, boolean mask out) ---
def finite(a: "np.ndarray") -> "np.ndarray":
	return np.isfinite(a)


def non_negative_finite(a: "np.ndarray") -> "np.ndarray":
	"""Default AnalysisInput filter: finite and ``>= 0``."""
	return np.isfinite(a) & (a >= 0)


def positive_finite(a: "np.ndarray") -> "np.ndarray":
	return np.isfinite(a) & (a > 0)


# --- Core conversion helpers ---
def _ensure_numeric(a: "np.ndarray") -> "np.ndarray":
	if not np.issubdtype(a.dtype, np.number):
		raise ValueError(f"Expected numeric data, got dtype={a.dtype!r}")
	return a


def _from_dataframe(
		df: "pd.DataFrame",
		column: Optional[Union[int, str]],
		dtype: Any
) -> "np.ndarray":
	if df.shape[1] == 1 and column is None:
		arr = df.iloc[:, 0].to_numpy()
	else:
		if column is None:
			raise ValueError(
				f"DataFrame has {df.shape[1]} columns; please specify `column` (name or 0-based index)."
			)
		try:
			col = df.iloc[:, column] if isinstance(column, int) else df[column]
		except (KeyError, IndexError) as exc:
			LOG.error("Failed to select column %r: %s", column, exc)
			raise ValueError(f"Invalid column selector: {column!r}") from exc
		arr = col.to_numpy()
	return _ensure_numeric(np.asarray(arr, dtype=dtype))


def coerce_vector(
		data: DataLike,
		*,
		column: Optional[Union[int, str]] = None,
		dtype: Any = float,
) -> "np.ndarray":
	"""
	Convert a data container into a fresh 1D numpy array.

	Accepts sequences, generators, ndarrays, pandas Series, Mapping values (in
	insertion order) and DataFrames (single column, or pick one with ``column``).
	Empty input yields an empty array: the statistics built on top resolve
	empty vectors to neutral values instead of failing.

	The result never aliases ``data``, so callers may sort or modify it freely.

	:param data: Input data.
	:param column: Column selector when ``data`` is a DataFrame.
	:param dtype: Numpy dtype of the result (default float).
	:return: 1D numeric array.
	:raises ValueError: On multi-dimensional or non-numeric input, or a DataFrame
						with several columns and no ``column``.
	"""
	if isinstance(data, pd.DataFrame):
		return _from_dataframe(data, column, dtype)

	if isinstance(data, pd.Series):
		return _ensure_numeric(np.array(data.to_numpy(), dtype=dtype))

	if isinstance(data, np.ndarray):
		if data.ndim > 1:
			raise ValueError(f"Expected 1D array-like; got ndim={data.ndim}")
		return _ensure_numeric(np.array(data, dtype=dtype).reshape(-1))

	if isinstance(data, (str, bytes, bytearray)):
		raise ValueError(f"Unsupported data type: {type(data)}")

	if isinstance(data, Mapping):
		return _ensure_numeric(np.array(list(data.values()), dtype=dtype))

	if isinstance(data, Iterable):
		items = list(data)
		if not items:
			return np.array([], dtype=dtype)
		arr = np.array(items, dtype=dtype)
		if arr.ndim != 1:
			raise ValueError(f"Expected 1D array-like; got ndim={arr.ndim}")
		return _ensure_numeric(arr)

	raise ValueError(f"Unsupported data type: {type(data)}")


def coerce_pair(xs: DataLike, ys: DataLike) -> Tuple["np.ndarray", "np.ndarray"]:
	"""
	Coerce paired vectors for bivariate routines.

	:raises ValueError: If the vectors differ in length.
	"""
	x = coerce_vector(xs)
	y = coerce_vector(ys)
	if x.size != y.size:
		raise ValueError(f"Paired vectors differ in length: {x.size} != {y.size}")
	return x, y


def coerce_points(points: Any) -> "np.ndarray":
	"""
	Coerce 2D points into an ``(n, 2)`` float array.

	Accepts an ``(n, 2)`` array/DataFrame, a sequence of ``(x, y)`` pairs, or a
	sequence of mappings with ``x``/``y`` keys.
	"""
	if isinstance(points, pd.DataFrame):
		points = points.to_numpy()
	if isinstance(points, np.ndarray):
		arr = np.array(points, dtype=float)
	else:
		items = list(points)
		if not items:
			return np.empty((0, 2), dtype=float)
		if isinstance(items[0], Mapping):
			items = [(p["x"], p["y"]) for p in items]
		arr = np.array(items, dtype=float)
	if arr.size == 0:
		return np.empty((0, 2), dtype=float)
	if arr.ndim != 2 or arr.shape[1] != 2:
		raise ValueError(f"Expected points of shape (n, 2); got {arr.shape}")
	return arr


# --- AnalysisInput filtering ---
def filter_vector(data: DataLike, value_filter: Optional[ValueFilter] = non_negative_finite) -> "np.ndarray":
	"""Coerce ``data`` and keep only values accepted by ``value_filter``."""
	x = coerce_vector(data)
	if value_filter is None:
		return x
	return x[value_filter(x)]


def filter_pair(
		xs: DataLike,
		ys: DataLike,
		value_filter: Optional[ValueFilter] = non_negative_finite
) -> Tuple["np.ndarray", "np.ndarray"]:
	"""Keep positions where both ``xs`` and ``ys`` pass ``value_filter``; stays aligned."""
	x, y = coerce_pair(xs, ys)
	if value_filter is None:
		return x, y
	mask = value_filter(x) & value_filter(y)
	dropped = int(x.size - mask.sum())
	if dropped:
		LOG.debug("filter_pair dropped %d of %d pairs", dropped, x.size)
	return x[mask], y[mask]
