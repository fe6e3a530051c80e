# src/unilibstats/records/model.py

"""Institution records as delivered by the ingestion step, plus derived indicators."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar

from ..logutil import get_logger
from ..stats.rounding import normal_round

LOG = get_logger(__name__)

__all__ = [
	"DataError",
	"Collection", "Digital", "Facilities", "Staff", "Budget", "Usage", "EService",
	"DerivedIndicators", "InstitutionRecord",
]

INDICATOR_PRECISION = 2

G = TypeVar("G", bound="_Group")


class DataError(ValueError):
	"""Raised when record input does not have the expected shape."""


# --- Value coercion (missing/unparseable numbers become 0) ---
def _num(value: Any) -> float:
	if value is None or isinstance(value, bool):
		return 0.0
	if isinstance(value, str):
		value = value.strip().replace(",", "")
		if not value:
			return 0.0
	try:
		out = float(value)
	except (TypeError, ValueError):
		return 0.0
	return out if math.isfinite(out) else 0.0


def _str(value: Any) -> str:
	if value is None:
		return ""
	return str(value).strip()


def _camel(name: str) -> str:
	head, *rest = name.split("_")
	return head + "".join(part.capitalize() for part in rest)


def _dig(mapping: Mapping[str, Any], path: Tuple[str, ...]) -> Any:
	node: Any = mapping
	for key in path:
		if not isinstance(node, Mapping):
			return None
		node = node.get(key)
	return node


def _plain(value: float) -> Any:
	return int(value) if float(value).is_integer() else value


# --- Record groups ---
@dataclass(frozen=True)
class _Group:
	"""Base for a block of numeric fields read from one nested JSON object."""

	# field name -> path inside the group's JSON object; default is camelCase name
	_PATHS: ClassVar[Dict[str, Tuple[str, ...]]] = {}

	@classmethod
	def _path(cls, name: str) -> Tuple[str, ...]:
		return cls._PATHS.get(name, (_camel(name),))

	@classmethod
	def from_mapping(cls: Type[G], mapping: Optional[Mapping[str, Any]]) -> G:
		source = mapping if isinstance(mapping, Mapping) else {}
		return cls(**{f.name: _num(_dig(source, cls._path(f.name))) for f in fields(cls)})

	def to_dict(self) -> Dict[str, Any]:
		out: Dict[str, Any] = {}
		for f in fields(self):
			*parents, leaf = self._path(f.name)
			node = out
			for key in parents:
				node = node.setdefault(key, {})
			node[leaf] = _plain(getattr(self, f.name))
		return out


@dataclass(frozen=True)
class Collection(_Group):
	domestic_total: float = 0.0
	domestic_types: float = 0.0
	foreign_total: float = 0.0
	foreign_types: float = 0.0
	total_books: float = 0.0
	total_types: float = 0.0
	ebooks: float = 0.0
	non_book_materials: float = 0.0
	annual_increase: float = 0.0
	annual_discard: float = 0.0

	_PATHS: ClassVar[Dict[str, Tuple[str, ...]]] = {
		"domestic_total": ("domestic", "total"),
		"domestic_types": ("domestic", "types"),
		"foreign_total": ("foreign", "total"),
		"foreign_types": ("foreign", "types"),
	}


@dataclass(frozen=True)
class Digital(_Group):
	ejournal_packages: float = 0.0
	ejournal_types: float = 0.0
	webdb_packages: float = 0.0
	ebook_packages: float = 0.0
	ebook_types: float = 0.0
	total_packages: float = 0.0
	total_types: float = 0.0

	_PATHS: ClassVar[Dict[str, Tuple[str, ...]]] = {"webdb_packages": ("webDbPackages",)}


@dataclass(frozen=True)
class Facilities(_Group):
	building_area: float = 0.0
	seats: float = 0.0
	computers: float = 0.0


@dataclass(frozen=True)
class Staff(_Group):
	total_staff: float = 0.0
	librarians: float = 0.0
	full_time_ratio: float = 0.0


@dataclass(frozen=True)
class Budget(_Group):
	university_total: float = 0.0
	material_budget_total: float = 0.0
	domestic_books: float = 0.0
	foreign_books: float = 0.0
	digital_total: float = 0.0
	ejournal_domestic: float = 0.0
	ejournal_foreign: float = 0.0
	webdb_domestic: float = 0.0
	webdb_foreign: float = 0.0

	_PATHS: ClassVar[Dict[str, Tuple[str, ...]]] = {
		"webdb_domestic": ("webDbDomestic",),
		"webdb_foreign": ("webDbForeign",),
	}


@dataclass(frozen=True)
class Usage(_Group):
	service_targets: float = 0.0
	visitors: float = 0.0
	borrowers: float = 0.0
	loan_count: float = 0.0
	loan_books: float = 0.0
	ill_requests: float = 0.0
	ill_provided: float = 0.0
	education_sessions: float = 0.0
	education_participants: float = 0.0


@dataclass(frozen=True)
class EService(_Group):
	marc_records: float = 0.0
	digital_contents: float = 0.0
	homepage_visits: float = 0.0
	opac_searches: float = 0.0
	db_searches: float = 0.0
	db_downloads_fulltext: float = 0.0
	db_downloads_dataset: float = 0.0


# --- Derived indicators ---
def _ratio(numerator: float, denominator: float, scale: float = 1.0) -> float:
	if denominator <= 0:
		return 0.0
	return normal_round(numerator / denominator * scale, INDICATOR_PRECISION)


@dataclass(frozen=True)
class DerivedIndicators:
	"""
	Per-institution ratios, fixed at record construction.

	Per-student figures divide by the current-year enrolment. ``staff_per_1000``
	is per thousand students; ``budget_ratio``, ``digital_budget_ratio`` and
	``borrower_ratio`` are percentages. A zero or missing denominator yields 0.
	"""

	books_per_student: float = 0.0
	annual_increase_per_student: float = 0.0
	area_per_student: float = 0.0
	staff_per_1000: float = 0.0
	budget_ratio: float = 0.0
	budget_per_student: float = 0.0
	digital_budget_ratio: float = 0.0
	loans_per_student: float = 0.0
	borrower_ratio: float = 0.0

	@classmethod
	def compute(cls, record: "InstitutionRecord") -> "DerivedIndicators":
		students = record.students_curr_year
		budget = record.budget
		return cls(
			books_per_student=_ratio(record.collection.total_books, students),
			annual_increase_per_student=_ratio(record.collection.annual_increase, students),
			area_per_student=_ratio(record.facilities.building_area, students),
			staff_per_1000=_ratio(record.staff.total_staff, students, 1000),
			budget_ratio=_ratio(budget.material_budget_total, budget.university_total, 100),
			budget_per_student=_ratio(budget.material_budget_total, students),
			digital_budget_ratio=_ratio(budget.digital_total, budget.material_budget_total, 100),
			loans_per_student=_ratio(record.usage.loan_books, students),
			borrower_ratio=_ratio(record.usage.borrowers, students, 100),
		)

	def to_dict(self) -> Dict[str, float]:
		return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


# --- The record ---
_GROUPS: Tuple[Tuple[str, str, Type[_Group]], ...] = (
	("collection", "collection", Collection),
	("digital", "digital", Digital),
	("facilities", "facilities", Facilities),
	("staff", "staff", Staff),
	("budget", "budget", Budget),
	("usage", "usage", Usage),
	("eservice", "eService", EService),
)


@dataclass(frozen=True)
class InstitutionRecord:
	"""
	One surveyed university library.

	Records are immutable; :attr:`indicators` is computed once in
	``__post_init__`` from the raw fields and cannot be supplied by the caller.
	"""

	id: str
	name: str = ""
	type: str = ""
	category: str = ""
	size: str = ""
	students_prev_year: float = 0.0
	students_curr_year: float = 0.0
	collection: Collection = field(default_factory=Collection)
	digital: Digital = field(default_factory=Digital)
	facilities: Facilities = field(default_factory=Facilities)
	staff: Staff = field(default_factory=Staff)
	budget: Budget = field(default_factory=Budget)
	usage: Usage = field(default_factory=Usage)
	eservice: EService = field(default_factory=EService)
	indicators: DerivedIndicators = field(init=False, compare=False)

	def __post_init__(self) -> None:
		object.__setattr__(self, "indicators", DerivedIndicators.compute(self))

	@classmethod
	def from_mapping(cls, mapping: Mapping[str, Any]) -> "InstitutionRecord":
		"""
		Build a record from the ingestion JSON shape.

		Keys are camelCase with nested groups (``collection.domestic.total``,
		``eService.dbSearches``, ...). Missing or unparseable numbers become 0; a
		stored ``indicators`` block is ignored and recomputed.

		:raises DataError: If ``mapping`` is not a mapping or lacks an ``id``.
		"""
		if not isinstance(mapping, Mapping):
			raise DataError(f"Institution record must be a mapping, got {type(mapping).__name__}")
		rid = _str(mapping.get("id"))
		if not rid:
			raise DataError(f"Institution record without id: name={_str(mapping.get('name'))!r}")

		groups = {attr: group.from_mapping(mapping.get(key)) for attr, key, group in _GROUPS}
		return cls(
			id=rid,
			name=_str(mapping.get("name")),
			type=_str(mapping.get("type")),
			category=_str(mapping.get("category")),
			size=_str(mapping.get("size")),
			students_prev_year=_num(mapping.get("studentsPrevYear")),
			students_curr_year=_num(mapping.get("studentsCurrYear")),
			**groups,
		)

	def to_dict(self) -> Dict[str, Any]:
		"""Inverse of :meth:`from_mapping`, indicators included."""
		out: Dict[str, Any] = {
			"id": self.id,
			"name": self.name,
			"type": self.type,
			"category": self.category,
			"studentsPrevYear": _plain(self.students_prev_year),
			"studentsCurrYear": _plain(self.students_curr_year),
			"size": self.size,
		}
		for attr, key, _group in _GROUPS:
			out[key] = getattr(self, attr).to_dict()
		out["indicators"] = self.indicators.to_dict()
		return out
