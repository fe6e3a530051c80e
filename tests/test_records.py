"""Tests for institution records, derived indicators and the indicator registry."""

from __future__ import annotations

import dataclasses

import pytest

from conftest import make_mapping
from unilibstats.records import (
	INDICATORS, RESOURCES, DataError, DerivedIndicators, Indicator, InstitutionRecord, Resource,
	describe_selector, resolve_selector, selector_for,
)


def test_indicators_are_derived_from_raw_fields():
	rec = InstitutionRecord.from_mapping(make_mapping("u1", students=800, books=12_345, staff=6, borrowers=200))
	ind = rec.indicators
	assert ind.books_per_student == 15.43
	assert ind.staff_per_1000 == 7.5
	assert ind.budget_ratio == 1.0
	assert ind.budget_per_student == 1250.0
	assert ind.digital_budget_ratio == 40.0
	assert ind.loans_per_student == 25.0
	assert ind.borrower_ratio == 25.0
	assert ind.area_per_student == 6.25
	assert ind.annual_increase_per_student == 1.25


def test_zero_denominators_give_zero_indicators():
	rec = InstitutionRecord.from_mapping(make_mapping("u0", students=0, budget=0, university=0))
	assert dataclasses.asdict(rec.indicators) == dataclasses.asdict(DerivedIndicators())


def test_from_mapping_coerces_missing_and_malformed_numbers():
	rec = InstitutionRecord.from_mapping({
		"id": " 42 ",
		"name": "Sparse University",
		"studentsCurrYear": "1,200",
		"collection": {"totalBooks": "n/a", "domestic": {"total": None}},
		"budget": {"materialBudgetTotal": float("nan")},
		"eService": "not an object",
	})
	assert rec.id == "42"
	assert rec.students_curr_year == 1200.0
	assert rec.collection.total_books == 0.0
	assert rec.collection.domestic_total == 0.0
	assert rec.budget.material_budget_total == 0.0
	assert rec.eservice.db_searches == 0.0
	assert rec.type == ""


@pytest.mark.parametrize("bad", [[], "u1", {"name": "No id"}, {"id": "   "}])
def test_from_mapping_rejects_bad_input(bad):
	with pytest.raises(DataError):
		InstitutionRecord.from_mapping(bad)


def test_to_dict_round_trips_ingestion_shape():
	source = make_mapping("u7", students=500)
	source["digital"] = {"webDbPackages": 12, "totalPackages": 30}
	source["eService"] = {"dbSearches": 1500, "dbDownloadsFulltext": 70}
	rec = InstitutionRecord.from_mapping(source)
	out = rec.to_dict()

	assert out["collection"]["domestic"]["total"] == 25_000
	assert out["digital"]["webDbPackages"] == 12
	assert out["eService"]["dbDownloadsFulltext"] == 70
	assert out["indicators"]["booksPerStudent"] == 100.0
	assert InstitutionRecord.from_mapping(out) == rec


def test_stored_indicators_are_recomputed():
	source = make_mapping("u8", students=100, books=1000)
	source["indicators"] = {"booksPerStudent": 999}
	assert InstitutionRecord.from_mapping(source).indicators.books_per_student == 10.0


def test_records_are_immutable():
	rec = InstitutionRecord(id="x", students_curr_year=10)
	with pytest.raises(dataclasses.FrozenInstanceError):
		rec.name = "changed"  # type: ignore[misc]
	with pytest.raises(TypeError):
		InstitutionRecord(id="x", indicators=DerivedIndicators())  # type: ignore[call-arg]


def test_registry_covers_every_indicator():
	assert set(INDICATORS) == set(Indicator)
	fields = {f.name for f in dataclasses.fields(DerivedIndicators)}
	assert {ind.field_name for ind in Indicator} == fields
	assert set(RESOURCES) == set(Resource)


def test_selectors_resolve_by_enum_string_or_callable():
	rec = InstitutionRecord.from_mapping(make_mapping("u1", students=1000, books=30_000))
	assert selector_for(Indicator.BOOKS_PER_STUDENT)(rec) == 30.0
	assert selector_for("booksPerStudent")(rec) == 30.0
	assert selector_for(Resource.TOTAL_BOOKS)(rec) == 30_000

	fn = lambda r: r.students_curr_year  # noqa: E731
	assert resolve_selector(fn) is fn
	assert describe_selector(Indicator.STAFF_PER_1000) == INDICATORS[Indicator.STAFF_PER_1000].label

	with pytest.raises(KeyError):
		selector_for("noSuchIndicator")
	with pytest.raises(TypeError):
		resolve_selector(42)  # type: ignore[arg-type]
