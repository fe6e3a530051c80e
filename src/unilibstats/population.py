# src/unilibstats/population.py

"""A read-only collection of institution records and vector extraction from it."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from .logutil import get_logger
from .records import (
	DataError, Indicator, InstitutionRecord, SelectorLike, resolve_selector,
)
from .stats.coerce import ValueFilter, filter_pair, filter_vector, non_negative_finite
from .stats.rounding import normal_round

from .imports import numpy as np  # type: ignore
from .imports import pandas as pd  # type: ignore

LOG = get_logger(__name__)

PathLike = Union[str, Path]

__all__ = ["Population", "SummaryStats", "GroupRank"]

_GROUP_ATTRS = ("collection", "digital", "facilities", "staff", "budget", "usage", "eservice")


@dataclass(frozen=True)
class SummaryStats:
	"""Headline totals of a population."""

	total_institutions: int
	total_books: float
	avg_books_per_student: float
	total_material_budget: float
	total_visitors: float
	total_loans: float
	avg_budget_per_student: float
	avg_digital_budget_ratio: float

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


@dataclass(frozen=True)
class GroupRank:
	rank: int
	total: int


class Population:
	"""
	Ordered, immutable set of :class:`InstitutionRecord`.

	Filtering methods return new populations; nothing is modified in place.
	Vectors for the statistics routines are built on demand with
	:meth:`vector` and :meth:`pairs`.

	Examples
	--------
	>>> pop = Population.from_json("universities.json")
	>>> national = pop.active().filter(type="국립")
	>>> quartiles(national.vector(Indicator.BOOKS_PER_STUDENT))
	"""

	def __init__(self, records: Iterable[InstitutionRecord] = ()) -> None:
		self._records: Tuple[InstitutionRecord, ...] = tuple(records)
		for rec in self._records:
			if not isinstance(rec, InstitutionRecord):
				raise TypeError(f"Population holds InstitutionRecord items, got {type(rec).__name__}")

	# --- Construction ---
	@classmethod
	def from_records(cls, items: Iterable[Union[InstitutionRecord, Mapping[str, Any]]]) -> "Population":
		"""Build from records and/or ingestion mappings (see :meth:`InstitutionRecord.from_mapping`)."""
		records = [
			item if isinstance(item, InstitutionRecord) else InstitutionRecord.from_mapping(item)
			for item in items
		]
		return cls(records)

	@classmethod
	def from_json(cls, path: PathLike) -> "Population":
		"""
		Load the ingestion output: a JSON array of institution objects.

		:raises DataError: If the file is not a JSON array or an item is malformed.
		:raises OSError: If the file cannot be read.
		"""
		p = Path(path)
		with p.open("r", encoding="utf-8") as fh:
			try:
				payload = json.load(fh)
			except json.JSONDecodeError as exc:
				raise DataError(f"Invalid JSON in '{p}': {exc}") from exc
		if not isinstance(payload, list):
			raise DataError(f"Expected a JSON array of institutions in '{p}', got {type(payload).__name__}")
		population = cls.from_records(payload)
		LOG.info("Loaded %d institution records from %s", len(population), p)
		return population

	# --- Container protocol ---
	def __len__(self) -> int:
		return len(self._records)

	def __iter__(self) -> Iterator[InstitutionRecord]:
		return iter(self._records)

	def __getitem__(self, index: int) -> InstitutionRecord:
		return self._records[index]

	def __repr__(self) -> str:
		return f"{self.__class__.__name__}(n={len(self._records)})"

	@property
	def records(self) -> Tuple[InstitutionRecord, ...]:
		return self._records

	# --- Lookup and filtering ---
	def by_id(self, rid: str) -> Optional[InstitutionRecord]:
		return next((r for r in self._records if r.id == rid), None)

	def by_ids(self, ids: Iterable[str]) -> "Population":
		wanted = set(ids)
		return Population(r for r in self._records if r.id in wanted)

	def search(self, query: str) -> "Population":
		"""Records whose name contains ``query`` (case-insensitive)."""
		q = query.lower()
		return Population(r for r in self._records if q in r.name.lower())

	def filter(
			self,
			*,
			type: Optional[str] = None,
			category: Optional[str] = None,
			size: Optional[str] = None
	) -> "Population":
		"""Keep records matching every given attribute; ``None``/empty means any."""
		def keep(r: InstitutionRecord) -> bool:
			if type and r.type != type:
				return False
			if category and r.category != category:
				return False
			if size and r.size != size:
				return False
			return True

		return self.where(keep)

	def where(self, predicate: Callable[[InstitutionRecord], bool]) -> "Population":
		return Population(r for r in self._records if predicate(r))

	def active(self) -> "Population":
		"""Records with a positive current enrolment (per-student indicators are meaningful)."""
		return self.where(lambda r: r.students_curr_year > 0)

	def distinct(self, attribute: str) -> List[str]:
		"""Distinct non-empty values of a string attribute, in first-seen order."""
		values = (getattr(r, attribute) for r in self._records)
		return [v for v in dict.fromkeys(values) if v]

	def types(self) -> List[str]:
		return self.distinct("type")

	def sizes(self) -> List[str]:
		return self.distinct("size")

	def group_by(self, attribute: str) -> Dict[str, "Population"]:
		"""Split into sub-populations keyed by ``attribute`` (first-seen order)."""
		return {value: self.where(lambda r, v=value: getattr(r, attribute) == v) for value in self.distinct(attribute)}

	# --- AnalysisInput extraction ---
	def values(self, selector: SelectorLike) -> "np.ndarray":
		"""Selector applied to every record, unfiltered."""
		fn = resolve_selector(selector)
		return np.array([fn(r) for r in self._records], dtype=float)

	def vector(
			self,
			selector: SelectorLike,
			*,
			value_filter: Optional[ValueFilter] = non_negative_finite
	) -> "np.ndarray":
		"""
		Extract an AnalysisInput vector.

		:param selector: Callable ``record -> number``, :class:`Indicator`,
						 :class:`Resource` or the string value of either.
		:param value_filter: Mask function over the raw values; ``None`` keeps all.
		:return: Fresh 1D float array.
		"""
		return filter_vector(self.values(selector), value_filter)

	def pairs(
			self,
			x: SelectorLike,
			y: SelectorLike,
			*,
			value_filter: Optional[ValueFilter] = non_negative_finite
	) -> Tuple["np.ndarray", "np.ndarray"]:
		"""Aligned ``(xs, ys)``: a record contributes only if both values pass the filter."""
		return filter_pair(self.values(x), self.values(y), value_filter)

	def labelled_pairs(
			self,
			x: SelectorLike,
			y: SelectorLike,
			*,
			value_filter: Optional[ValueFilter] = non_negative_finite
	) -> Tuple["np.ndarray", "np.ndarray", List[InstitutionRecord]]:
		"""Like :meth:`pairs`, also returning the records that contributed."""
		xs, ys = self.values(x), self.values(y)
		if value_filter is None:
			return xs, ys, list(self._records)
		mask = value_filter(xs) & value_filter(ys)
		kept = [r for r, m in zip(self._records, mask) if m]
		return xs[mask], ys[mask], kept

	# --- Tabular export ---
	def to_frame(self) -> "pd.DataFrame":
		"""
		One row per record with flat columns.

		Raw fields are named ``<group>_<field>`` (``budget_digital_total``), derived
		indicators keep their plain names (``books_per_student``).
		"""
		rows: List[Dict[str, Any]] = []
		for r in self._records:
			row: Dict[str, Any] = {
				"id": r.id, "name": r.name, "type": r.type, "category": r.category, "size": r.size,
				"students_prev_year": r.students_prev_year,
				"students_curr_year": r.students_curr_year,
			}
			for attr in _GROUP_ATTRS:
				group = getattr(r, attr)
				for f in fields(group):
					row[f"{attr}_{f.name}"] = getattr(group, f.name)
			row.update(asdict(r.indicators))
			rows.append(row)
		frame = pd.DataFrame(rows)
		if not rows:
			return frame
		return frame.set_index("id", drop=False)

	# --- Aggregates ---
	def summary(self) -> SummaryStats:
		"""Totals and population-weighted averages of the whole set."""
		books = sum(r.collection.total_books for r in self._records)
		budget = sum(r.budget.material_budget_total for r in self._records)
		students = sum(r.students_curr_year for r in self._records)
		with_budget = [r for r in self._records if r.budget.material_budget_total > 0]
		avg_digital = (
			sum(r.indicators.digital_budget_ratio for r in with_budget) / len(with_budget)
			if with_budget else 0.0
		)
		return SummaryStats(
			total_institutions=len(self._records),
			total_books=books,
			avg_books_per_student=normal_round(books / students) if students > 0 else 0.0,
			total_material_budget=budget,
			total_visitors=sum(r.usage.visitors for r in self._records),
			total_loans=sum(r.usage.loan_books for r in self._records),
			avg_budget_per_student=normal_round(budget / students) if students > 0 else 0.0,
			avg_digital_budget_ratio=normal_round(avg_digital),
		)

	def averages(self, indicators: Sequence[Indicator] = tuple(Indicator)) -> Dict[str, float]:
		"""Mean of each indicator over the records where it is positive (0 if none)."""
		out: Dict[str, float] = {}
		for ind in indicators:
			vals = self.vector(ind, value_filter=lambda a: a > 0)
			out[ind.value] = float(vals.mean()) if vals.size else 0.0
		return out

	def rank_in_group(
			self,
			record: InstitutionRecord,
			selector: SelectorLike,
			group: Optional["Population"] = None
	) -> GroupRank:
		"""
		Position of ``record`` when ``group`` (default: this population) is sorted descending.

		Ties keep population order. A record absent from the group has rank 0.
		"""
		members = list(group if group is not None else self)
		fn = resolve_selector(selector)
		ordered = sorted(members, key=fn, reverse=True)
		rank = next((i + 1 for i, r in enumerate(ordered) if r.id == record.id), 0)
		return GroupRank(rank=rank, total=len(ordered))
