# src/unilibstats/records/indicators.py

"""
Indicator identifiers and their extraction functions.

Analyses name indicators by :class:`Indicator` (or its camelCase string value)
instead of looking record attributes up by arbitrary strings. The registry is
checked once, at import, so a lookup can only fail for an unknown name.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from operator import attrgetter
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Union

from .model import DerivedIndicators, InstitutionRecord

__all__ = [
	"Selector", "SelectorLike", "RegistryError",
	"Indicator", "IndicatorDefinition", "INDICATORS",
	"Resource", "RESOURCES",
	"selector_for", "resolve_selector", "describe_selector",
]

Selector = Callable[[InstitutionRecord], float]


class RegistryError(RuntimeError):
	"""The indicator registry is inconsistent with :class:`DerivedIndicators`."""


class Indicator(str, Enum):
	BOOKS_PER_STUDENT = "booksPerStudent"
	ANNUAL_INCREASE_PER_STUDENT = "annualIncreasePerStudent"
	AREA_PER_STUDENT = "areaPerStudent"
	STAFF_PER_1000 = "staffPer1000"
	BUDGET_RATIO = "budgetRatio"
	BUDGET_PER_STUDENT = "budgetPerStudent"
	DIGITAL_BUDGET_RATIO = "digitalBudgetRatio"
	LOANS_PER_STUDENT = "loansPerStudent"
	BORROWER_RATIO = "borrowerRatio"

	@property
	def field_name(self) -> str:
		"""Attribute name on :class:`DerivedIndicators`."""
		return self.name.lower()


class Resource(str, Enum):
	"""Raw totals whose distribution across institutions is analysed."""

	TOTAL_BOOKS = "totalBooks"
	MATERIAL_BUDGET = "materialBudget"
	LOAN_BOOKS = "loanBooks"
	VISITORS = "visitors"
	DIGITAL_BUDGET = "digitalBudget"


@dataclass(frozen=True)
class IndicatorDefinition:
	key: Union[Indicator, Resource]
	label: str
	unit: str
	selector: Selector


SelectorLike = Union[Selector, Indicator, Resource, str]


def _indicator(ind: Indicator, label: str, unit: str) -> IndicatorDefinition:
	getter = attrgetter(f"indicators.{ind.field_name}")
	return IndicatorDefinition(ind, label, unit, getter)


def _validate(registry: Mapping[Indicator, IndicatorDefinition]) -> None:
	expected = {f.name for f in fields(DerivedIndicators)}
	members = {ind.field_name for ind in Indicator}
	if members != expected:
		raise RegistryError(f"Indicator members {sorted(members)} do not match DerivedIndicators {sorted(expected)}")
	missing = [ind.value for ind in Indicator if ind not in registry]
	if missing:
		raise RegistryError(f"No definition for indicator(s): {', '.join(missing)}")
	for ind, definition in registry.items():
		if definition.key is not ind or not callable(definition.selector):
			raise RegistryError(f"Invalid definition for {ind.value!r}")


_INDICATORS: Dict[Indicator, IndicatorDefinition] = {
	d.key: d for d in (
		_indicator(Indicator.BOOKS_PER_STUDENT, "Books per student", "volumes"),
		_indicator(Indicator.ANNUAL_INCREASE_PER_STUDENT, "Annual accessions per student", "volumes"),
		_indicator(Indicator.AREA_PER_STUDENT, "Floor area per student", "m2"),
		_indicator(Indicator.STAFF_PER_1000, "Staff per 1,000 students", "persons"),
		_indicator(Indicator.BUDGET_RATIO, "Material budget share of university budget", "%"),
		_indicator(Indicator.BUDGET_PER_STUDENT, "Material budget per student", "KRW"),
		_indicator(Indicator.DIGITAL_BUDGET_RATIO, "Digital share of material budget", "%"),
		_indicator(Indicator.LOANS_PER_STUDENT, "Loans per student", "volumes"),
		_indicator(Indicator.BORROWER_RATIO, "Borrowers per enrolled student", "%"),
	)
}
_validate(_INDICATORS)

INDICATORS: Mapping[Indicator, IndicatorDefinition] = MappingProxyType(_INDICATORS)

RESOURCES: Mapping[Resource, IndicatorDefinition] = MappingProxyType({
	Resource.TOTAL_BOOKS: IndicatorDefinition(
		Resource.TOTAL_BOOKS, "Total books", "volumes", attrgetter("collection.total_books")),
	Resource.MATERIAL_BUDGET: IndicatorDefinition(
		Resource.MATERIAL_BUDGET, "Material budget", "KRW", attrgetter("budget.material_budget_total")),
	Resource.LOAN_BOOKS: IndicatorDefinition(
		Resource.LOAN_BOOKS, "Books loaned", "volumes", attrgetter("usage.loan_books")),
	Resource.VISITORS: IndicatorDefinition(
		Resource.VISITORS, "Visitors", "persons", attrgetter("usage.visitors")),
	Resource.DIGITAL_BUDGET: IndicatorDefinition(
		Resource.DIGITAL_BUDGET, "Digital material budget", "KRW", attrgetter("budget.digital_total")),
})


def _definition(key: Union[Indicator, Resource, str]) -> IndicatorDefinition:
	if isinstance(key, Indicator):
		return INDICATORS[key]
	if isinstance(key, Resource):
		return RESOURCES[key]
	for enum_cls, registry in ((Indicator, INDICATORS), (Resource, RESOURCES)):
		try:
			return registry[enum_cls(key)]  # type: ignore[index]
		except ValueError:
			continue
	raise KeyError(f"Unknown indicator or resource: {key!r}")


def selector_for(key: Union[Indicator, Resource, str]) -> Selector:
	"""
	Extraction function for an indicator or resource.

	:param key: :class:`Indicator`, :class:`Resource` or the string value of either.
	:raises KeyError: For an unknown name.
	"""
	return _definition(key).selector


def resolve_selector(selector: SelectorLike) -> Selector:
	"""Return ``selector`` itself when callable, else look it up with :func:`selector_for`."""
	if isinstance(selector, (Indicator, Resource, str)):
		return selector_for(selector)
	if callable(selector):
		return selector
	raise TypeError(f"selector must be callable or an indicator name, got {type(selector).__name__}")


def describe_selector(selector: SelectorLike) -> str:
	"""Human-readable label for a selector (its registry label, or its name)."""
	if isinstance(selector, (Indicator, Resource, str)):
		return _definition(selector).label
	return getattr(selector, "__name__", repr(selector))
