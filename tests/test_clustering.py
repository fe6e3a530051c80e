"""Tests for the deterministic 2D K-Means."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")

from unilibstats.stats import cluster_summaries, denormalize, k_means_2d, min_max_normalize  # noqa: E402

POINTS = [
	(1.0, 1.0), (1.5, 2.0), (2.0, 1.0),
	(50.0, 50.0), (52.0, 51.0), (51.0, 49.0),
	(100.0, 100.0), (98.0, 101.0), (99.0, 97.0),
]


@pytest.mark.parametrize("k", [1, 2, 3, 4, 12])
def test_labels_are_valid(k):
	result = k_means_2d(POINTS, k)
	assert len(result.labels) == len(POINTS)
	assert all(0 <= label < k for label in result.labels)
	assert len(result.centroids) == k


def test_k_means_is_deterministic():
	first = k_means_2d(POINTS, 3, max_iterations=50)
	second = k_means_2d(list(POINTS), 3, max_iterations=50)
	assert first.labels == second.labels
	assert first.centroids == second.centroids


def test_k_means_separates_obvious_groups():
	result = k_means_2d(POINTS, 3)
	assert result.converged
	assert result.labels == [0, 0, 0, 1, 1, 1, 2, 2, 2]
	cx, cy = result.centroids[1]
	assert math.isclose(cx, 51.0) and math.isclose(cy, 50.0)


def test_k_means_accepts_mappings_and_arrays():
	as_dicts = [{"x": x, "y": y} for x, y in POINTS]
	as_array = np.array(POINTS)
	assert k_means_2d(as_dicts, 3).labels == k_means_2d(as_array, 3).labels


def test_k_means_degenerate_inputs():
	assert k_means_2d([], 3).to_dict() == {"centroids": [], "labels": [], "iterations": 0, "converged": False}
	assert k_means_2d(POINTS, 0).labels == []

	same = k_means_2d([(5, 5)] * 4, 2)
	assert same.labels == [0, 0, 0, 0]
	assert same.converged


def test_iteration_cap_is_respected():
	result = k_means_2d(POINTS, 3, max_iterations=1)
	assert result.iterations == 1
	assert not result.converged
	assert all(0 <= label < 3 for label in result.labels)


def test_cluster_summaries_report_representatives():
	result = k_means_2d(POINTS, 3)
	names = [f"p{i}" for i in range(len(POINTS))]
	summaries = cluster_summaries(POINTS, result.labels, 3, names=names, representatives=2)
	assert [s.count for s in summaries] == [3, 3, 3]
	assert summaries[0].mean_x == 1.5
	assert summaries[0].mean_y == 1.3
	# (1.5, 2.0) is farthest from the mean of the first group
	assert summaries[0].members == ["p0", "p2"]

	empty = cluster_summaries(POINTS[:1], [0], 2)
	assert empty[1].count == 0 and empty[1].members == []
	with pytest.raises(ValueError):
		cluster_summaries(POINTS, [0, 1], 3)


def test_min_max_normalize_round_trip_and_constant_vector():
	norm, lo, span = min_max_normalize([2.0, 4.0, 6.0])
	assert norm.tolist() == [0.0, 0.5, 1.0]
	assert denormalize(norm, lo, span).tolist() == [2.0, 4.0, 6.0]

	flat, _, span = min_max_normalize([3.0, 3.0])
	assert flat.tolist() == [0.0, 0.0]
	assert span == 1.0
