# src/unilibstats/stats/transforms.py

from __future__ import annotations

from typing import Tuple

from ..logutil import get_logger
from .coerce import DataLike, coerce_vector

from ..imports import numpy as np  # type: ignore
from ..imports import scipy  # type: ignore

LOG = get_logger(__name__)

__all__ = ["min_max_normalize", "denormalize", "ordinal_ranks"]


def min_max_normalize(data: DataLike) -> Tuple["np.ndarray", float, float]:
	"""
	Scale a vector into ``[0, 1]`` by its own minimum and range.

	A zero range is replaced by 1, so a constant vector maps to all zeros
	instead of NaN.

	:param data: Numeric vector.
	:return: ``(normalized, minimum, range)``; the last two feed :func:`denormalize`.
	"""
	x = coerce_vector(data)
	if x.size == 0:
		return x, 0.0, 1.0
	lo = float(x.min())
	span = float(x.max()) - lo
	if span == 0:
		LOG.debug("min_max_normalize(): zero range, dividing by 1")
		span = 1.0
	return (x - lo) / span, lo, span


def denormalize(data: DataLike, minimum: float, span: float) -> "np.ndarray":
	"""Inverse of :func:`min_max_normalize`."""
	return coerce_vector(data) * span + minimum


def ordinal_ranks(data: DataLike) -> "np.ndarray":
	"""
	1-based ranks by sorted position.

	Ties are not averaged: equal values receive consecutive ranks in input
	order (``scipy.stats.rankdata(method="ordinal")``).
	"""
	x = coerce_vector(data)
	if x.size == 0:
		return np.array([], dtype=float)
	return scipy.stats.rankdata(x, method="ordinal").astype(float)
