# src/unilibstats/stats/clustering.py

"""Deterministic K-Means for two indicators at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..logutil import get_logger
from .coerce import coerce_points
from .rounding import normal_round
from .transforms import denormalize, min_max_normalize

from ..imports import numpy as np  # type: ignore

LOG = get_logger(__name__)

__all__ = ["KMeansResult", "ClusterSummary", "k_means_2d", "cluster_summaries"]

Point = Tuple[float, float]


@dataclass(frozen=True)
class KMeansResult:
	"""
	Partition found by :func:`k_means_2d`.

	``centroids`` are in the original coordinate scale; ``labels[i]`` is the
	cluster index of point ``i``. ``converged`` is False when the iteration cap
	was reached first, which still yields a usable partition.
	"""

	centroids: List[Point] = field(default_factory=list)
	labels: List[int] = field(default_factory=list)
	iterations: int = 0
	converged: bool = False

	def to_dict(self) -> Dict[str, Any]:
		return {
			"centroids": [{"x": x, "y": y} for x, y in self.centroids],
			"labels": list(self.labels),
			"iterations": self.iterations,
			"converged": self.converged,
		}


@dataclass(frozen=True)
class ClusterSummary:
	index: int
	count: int
	mean_x: float
	mean_y: float
	members: List[Any] = field(default_factory=list)


def _assign(norm: "np.ndarray", centroids: "np.ndarray") -> "np.ndarray":
	# squared distances, shape (n, k); argmin returns the first minimum,
	# i.e. ties go to the lowest cluster index
	diff = norm[:, None, :] - centroids[None, :, :]
	dist = (diff ** 2).sum(axis=2)
	return dist.argmin(axis=1)


def k_means_2d(points: Any, k: int, max_iterations: int = 50) -> KMeansResult:
	"""
	Cluster 2D points with Lloyd's algorithm on min-max normalised axes.

	Both axes are scaled into ``[0, 1]`` independently (a zero range divides by
	1). Centroids start on the diagonal at ``((i + 0.5) / k, (i + 0.5) / k)``,
	so identical input always yields identical output. Each pass assigns every
	point to its nearest centroid by squared Euclidean distance and moves each
	centroid to the mean of its members; a cluster left without members keeps
	its previous centroid. The loop stops as soon as a pass leaves every label
	unchanged, or after ``max_iterations`` passes.

	:param points: ``(x, y)`` pairs, mappings with ``x``/``y`` or an ``(n, 2)`` array.
	:param k: Number of clusters.
	:param max_iterations: Upper bound on assignment passes.
	:return: :class:`KMeansResult`; empty when there are no points or ``k <= 0``.
	"""
	pts = coerce_points(points)
	n = pts.shape[0]
	if n == 0 or k <= 0:
		return KMeansResult()

	nx, x_min, x_span = min_max_normalize(pts[:, 0])
	ny, y_min, y_span = min_max_normalize(pts[:, 1])
	norm = np.column_stack([nx, ny])

	diagonal = (np.arange(k, dtype=float) + 0.5) / k
	centroids = np.column_stack([diagonal, diagonal])
	labels = np.zeros(n, dtype=int)

	iterations = 0
	converged = False
	for _ in range(max_iterations):
		new_labels = _assign(norm, centroids)
		iterations += 1
		if np.array_equal(new_labels, labels):
			converged = True
			break
		labels = new_labels
		for c in range(k):
			members = norm[labels == c]
			if members.shape[0]:
				centroids[c] = members.mean(axis=0)

	if not converged:
		LOG.debug("k_means_2d(): no convergence after %d iterations (n=%d, k=%d)", max_iterations, n, k)

	cx = denormalize(centroids[:, 0], x_min, x_span)
	cy = denormalize(centroids[:, 1], y_min, y_span)
	return KMeansResult(
		centroids=[(float(x), float(y)) for x, y in zip(cx, cy)],
		labels=[int(v) for v in labels],
		iterations=iterations,
		converged=converged,
	)


def cluster_summaries(
		points: Any,
		labels: Sequence[int],
		k: int,
		*,
		names: Optional[Sequence[Any]] = None,
		representatives: int = 3
) -> List[ClusterSummary]:
	"""
	Size, mean position and representative members of each cluster.

	Representatives are the members closest to their cluster's mean, given as
	``names[i]`` when ``names`` is supplied and as point indices otherwise.
	Means are rounded to 1 decimal; an empty cluster reports zeros.
	"""
	pts = coerce_points(points)
	lab = np.asarray(list(labels), dtype=int)
	if lab.size != pts.shape[0]:
		raise ValueError(f"labels ({lab.size}) and points ({pts.shape[0]}) differ in length")
	if names is not None and len(names) != pts.shape[0]:
		raise ValueError("names and points differ in length")

	out: List[ClusterSummary] = []
	for c in range(max(k, 0)):
		idx = np.flatnonzero(lab == c)
		if idx.size == 0:
			out.append(ClusterSummary(c, 0, 0.0, 0.0, []))
			continue
		members = pts[idx]
		mean = members.mean(axis=0)
		dist = ((members - mean) ** 2).sum(axis=1)
		nearest = idx[np.argsort(dist, kind="stable")[:representatives]]
		out.append(ClusterSummary(
			index=c,
			count=int(idx.size),
			mean_x=normal_round(float(mean[0]), 1),
			mean_y=normal_round(float(mean[1]), 1),
			members=[names[i] for i in nearest] if names is not None else [int(i) for i in nearest],
		))
	return out
