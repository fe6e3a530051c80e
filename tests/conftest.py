# tests/conftest.py

from pathlib import Path
import sys
from typing import Any, Dict

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))


def make_mapping(rid: str, **overrides: Any) -> Dict[str, Any]:
	"""Ingestion-shaped record with a handful of populated fields."""
	students = overrides.pop("students", 1000)
	books = overrides.pop("books", 50_000)
	budget = overrides.pop("budget", 1_000_000)
	digital = overrides.pop("digital", 400_000)
	university = overrides.pop("university", 100_000_000)
	loans = overrides.pop("loans", 20_000)
	borrowers = overrides.pop("borrowers", 600)
	staff = overrides.pop("staff", 10)
	area = overrides.pop("area", 5_000)
	visitors = overrides.pop("visitors", 100_000)
	mapping: Dict[str, Any] = {
		"id": rid,
		"name": overrides.pop("name", f"University {rid}"),
		"type": overrides.pop("type", "national"),
		"category": overrides.pop("category", "university"),
		"size": overrides.pop("size", "medium"),
		"studentsPrevYear": students,
		"studentsCurrYear": students,
		"collection": {
			"domestic": {"total": books // 2, "types": 0},
			"foreign": {"total": books - books // 2, "types": 0},
			"totalBooks": books,
			"annualIncrease": overrides.pop("increase", 1_000),
		},
		"facilities": {"buildingArea": area, "seats": 300, "computers": 40},
		"staff": {"totalStaff": staff, "librarians": staff // 2, "fullTimeRatio": 80},
		"budget": {
			"universityTotal": university,
			"materialBudgetTotal": budget,
			"digitalTotal": digital,
		},
		"usage": {"visitors": visitors, "borrowers": borrowers, "loanBooks": loans},
	}
	mapping.update(overrides)
	return mapping


@pytest.fixture()
def mapping_factory():
	return make_mapping


@pytest.fixture()
def population():
	pytest.importorskip("numpy")
	from unilibstats.population import Population

	# books per student: 10, 20, 30, 40, 1000; the last record has no students
	items = [
		make_mapping("u1", name="Alpha University", type="national", size="large", students=1000, books=10_000),
		make_mapping("u2", name="Beta College", type="private", size="small", students=1000, books=20_000),
		make_mapping("u3", name="Gamma University", type="national", size="medium", students=1000, books=30_000),
		make_mapping("u4", name="Delta Institute", type="private", size="medium", students=1000, books=40_000),
		make_mapping("u5", name="Epsilon University", type="public", size="large", students=100, books=100_000),
		make_mapping("u6", name="Closed Campus", type="private", size="small", students=0, books=5_000),
	]
	return Population.from_records(items)
