# src/unilibstats/stats/outliers.py

from __future__ import annotations

from typing import List, Tuple

from ..logutil import get_logger
from .coerce import DataLike, coerce_vector
from .describe import quartiles, z_scores

from ..imports import numpy as np  # type: ignore

LOG = get_logger(__name__)

__all__ = ["outliers_zscore", "outliers_iqr"]


def outliers_zscore(data: DataLike, *, threshold: float = 2.5) -> List[Tuple[int, float]]:
	"""
	Flag values whose population Z-score reaches ``threshold`` in magnitude.

	Note that with ``n`` values no score can exceed ``sqrt(n - 1)``, so small
	populations may never produce a flag at the default threshold.

	:param data: Numeric vector.
	:param threshold: Minimum ``|z|`` to flag (inclusive).
	:return: ``(index, z)`` pairs in input order.
	"""
	z = z_scores(data)
	hits = np.flatnonzero(np.abs(z) >= threshold)
	LOG.debug("outliers_zscore(): %d of %d values at |z| >= %s", hits.size, z.size, threshold)
	return [(int(i), float(z[i])) for i in hits]


def outliers_iqr(data: DataLike, *, threshold: float = 1.5) -> List[int]:
	"""
	Indices of values outside the Tukey fences ``[Q1 - t*IQR, Q3 + t*IQR]``.

	Quartiles use the same R-7 interpolation as :func:`~unilibstats.stats.describe.quartiles`,
	so the fences line up with the box-plot whiskers.

	:param data: Numeric vector.
	:param threshold: Fence multiplier ``t`` applied to the IQR.
	:return: Indices in input order; empty for empty input.
	"""
	x = coerce_vector(data)
	if x.size == 0:
		return []
	q = quartiles(x)
	lo = q.q1 - threshold * q.iqr
	hi = q.q3 + threshold * q.iqr
	return [int(i) for i in np.flatnonzero((x < lo) | (x > hi))]
