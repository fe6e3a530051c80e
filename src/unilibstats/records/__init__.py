from .model import (
	DataError,
	Collection, Digital, Facilities, Staff, Budget, Usage, EService,
	DerivedIndicators, InstitutionRecord,
)
from .indicators import (
	Selector, SelectorLike, RegistryError,
	Indicator, IndicatorDefinition, INDICATORS,
	Resource, RESOURCES,
	selector_for, resolve_selector, describe_selector,
)

__all__ = [
	"DataError",
	"Collection", "Digital", "Facilities", "Staff", "Budget", "Usage", "EService",
	"DerivedIndicators", "InstitutionRecord",
	"Selector", "SelectorLike", "RegistryError",
	"Indicator", "IndicatorDefinition", "INDICATORS",
	"Resource", "RESOURCES",
	"selector_for", "resolve_selector", "describe_selector",
]
