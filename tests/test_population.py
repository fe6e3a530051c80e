"""Tests for :class:`unilibstats.population.Population`."""

from __future__ import annotations

import json
import math

import pytest

np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")

from conftest import make_mapping  # noqa: E402
from unilibstats import DataError, Indicator, Population, Resource  # noqa: E402
from unilibstats.stats.coerce import positive_finite  # noqa: E402


def test_from_json_loads_array(tmp_path):
	path = tmp_path / "universities.json"
	path.write_text(json.dumps([make_mapping("a"), make_mapping("b")]), encoding="utf-8")
	pop = Population.from_json(path)
	assert len(pop) == 2
	assert [r.id for r in pop] == ["a", "b"]


@pytest.mark.parametrize("payload", ['{"id": "a"}', "not json", '[{"name": "no id"}]'])
def test_from_json_rejects_bad_payload(tmp_path, payload):
	path = tmp_path / "bad.json"
	path.write_text(payload, encoding="utf-8")
	with pytest.raises(DataError):
		Population.from_json(path)


def test_population_only_holds_records():
	with pytest.raises(TypeError):
		Population([make_mapping("a")])


def test_filtering_returns_new_populations(population):
	assert len(population.active()) == 5
	assert [r.id for r in population.filter(type="private")] == ["u2", "u4", "u6"]
	assert [r.id for r in population.filter(type="private", size="small")] == ["u2", "u6"]
	assert len(population.filter(type="")) == len(population)
	assert [r.id for r in population.search("UNIVERSITY")] == ["u1", "u3", "u5"]
	assert population.by_id("u3").name == "Gamma University"
	assert population.by_id("missing") is None
	assert [r.id for r in population.by_ids(["u4", "u1"])] == ["u1", "u4"]
	assert len(population) == 6


def test_distinct_values_keep_first_seen_order(population):
	assert population.types() == ["national", "private", "public"]
	assert population.sizes() == ["large", "small", "medium"]
	groups = population.group_by("type")
	assert {k: len(v) for k, v in groups.items()} == {"national": 2, "private": 3, "public": 1}


def test_vector_extraction(population):
	active = population.active()
	assert active.vector(Indicator.BOOKS_PER_STUDENT).tolist() == [10.0, 20.0, 30.0, 40.0, 1000.0]
	assert population.vector("totalBooks").tolist() == [10_000, 20_000, 30_000, 40_000, 100_000, 5_000]
	assert population.vector(lambda r: -1.0).size == 0
	assert population.vector(lambda r: -1.0, value_filter=None).size == 6


def test_pairs_stay_aligned(population):
	xs, ys = population.pairs(Indicator.BOOKS_PER_STUDENT, Resource.TOTAL_BOOKS, value_filter=positive_finite)
	# u6 has no students, so its books-per-student is 0 and the pair is dropped
	assert xs.tolist() == [10.0, 20.0, 30.0, 40.0, 1000.0]
	assert ys.tolist() == [10_000, 20_000, 30_000, 40_000, 100_000]


def test_to_frame_has_raw_and_derived_columns(population):
	frame = population.to_frame()
	assert isinstance(frame, pd.DataFrame)
	assert len(frame) == 6
	assert frame.loc["u5", "books_per_student"] == 1000.0
	assert frame.loc["u1", "collection_total_books"] == 10_000
	assert "eservice_db_searches" in frame.columns
	assert Population().to_frame().empty


def test_summary_and_averages(population):
	summary = population.summary()
	assert summary.total_institutions == 6
	assert summary.total_books == 205_000
	# 205000 books over 4100 students
	assert summary.avg_books_per_student == 50.0
	assert summary.avg_digital_budget_ratio == 40.0
	assert summary.to_dict()["total_visitors"] == 600_000

	averages = population.averages([Indicator.BOOKS_PER_STUDENT])
	# the zero of the record without students is left out
	assert math.isclose(averages["booksPerStudent"], 220.0)
	assert Population().summary().avg_books_per_student == 0.0


def test_rank_in_group(population):
	u3 = population.by_id("u3")
	assert population.rank_in_group(u3, Indicator.BOOKS_PER_STUDENT).rank == 3
	national = population.filter(type="national")
	rank = population.rank_in_group(u3, Indicator.BOOKS_PER_STUDENT, national)
	assert (rank.rank, rank.total) == (1, 2)
	assert population.rank_in_group(population.by_id("u2"), "booksPerStudent", national).rank == 0
