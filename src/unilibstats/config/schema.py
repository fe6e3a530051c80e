# src/unilibstats/config/schema.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .loader import ConfigError

Validator = Callable[[Any], None]

__all__ = [
    "KeySpec",
    "Validator",
    "make_range_validator",
    "apply_defaults",
    "validate_data",
]


@dataclass(frozen=True)
class KeySpec:
    """
    Specification for one configuration key.

    :param expected_type: Allowed type (or tuple of types) for the value.
    :param required: Whether the key must be present in its section.
    :param default: Value filled in by :func:`apply_defaults` when absent.
    :param validator: Optional callable receiving the parsed value; it must
                      raise on invalid content.
    """
    expected_type: Union[type, Tuple[type, ...]]
    required: bool = False
    default: Any = None
    validator: Optional[Validator] = None

    def __post_init__(self) -> None:
        if self.validator is not None and not callable(self.validator):
            raise TypeError("KeySpec.validator must be callable or None")


def make_range_validator(
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    *,
    exclusive_minimum: bool = False,
) -> Validator:
    """
    Build a validator enforcing ``minimum <= value <= maximum``.

    :param minimum: Lower bound, or ``None`` for unbounded.
    :param maximum: Upper bound, or ``None`` for unbounded.
    :param exclusive_minimum: Require ``value > minimum`` instead.
    :return: Callable raising ``ValueError`` when out of range.
    """
    def _validator(value: Any) -> None:
        if minimum is not None:
            if exclusive_minimum and not value > minimum:
                raise ValueError(f"value {value!r} must be > {minimum}")
            if not exclusive_minimum and value < minimum:
                raise ValueError(f"value {value!r} must be >= {minimum}")
        if maximum is not None and value > maximum:
            raise ValueError(f"value {value!r} must be <= {maximum}")

    return _validator


def apply_defaults(data: Dict[str, Dict[str, Any]], schema: Mapping[str, Mapping[str, KeySpec]]) -> None:
    """
    Fill in defaults for keys missing from *data* (sections are created as needed).

    :param data: Configuration values (modified in place).
    :param schema: ``section -> key -> KeySpec``.
    """
    for sec, specs in schema.items():
        bucket = data.setdefault(sec, {})
        for key, spec in specs.items():
            if key not in bucket and not spec.required:
                bucket[key] = spec.default


def validate_data(data: Mapping[str, Mapping[str, Any]],
                  schema: Mapping[str, Mapping[str, KeySpec]]) -> None:
    """
    Check presence, types and custom constraints of *data*.

    Keys outside *schema* are reported too, since a misspelt key would
    otherwise be silently ignored. All problems are raised together.

    :raises ConfigError: When any validation error occurs.
    """
    errors: List[str] = []
    for section_name, key_specs in schema.items():
        values = data.get(section_name, {}) or {}
        for key_name, spec in key_specs.items():
            problem = _check_key(values, key_name, spec)
            if problem:
                errors.append(f"[{section_name}] {problem}")
        errors.extend(f"[{section_name}] unknown key '{k}'" for k in sorted(set(values) - set(key_specs)))

    if errors:
        raise ConfigError("\n".join(errors))


def _check_key(values: Mapping[str, Any], key: str, spec: KeySpec) -> Optional[str]:
    if key not in values:
        return f"missing required key '{key}'" if spec.required else None
    value = values[key]
    allowed = _as_tuple(spec.expected_type)
    # bool is an int subclass; reject it where a number is expected
    if not isinstance(value, allowed) or (isinstance(value, bool) and bool not in allowed):
        return f"key '{key}' expected {spec.expected_type}, got {type(value).__name__} ({value!r})"
    if spec.validator is None:
        return None
    try:
        spec.validator(value)
    except (TypeError, ValueError) as exc:
        return f"key '{key}' failed validation: {exc}"
    return None


def _as_tuple(tp: Union[type, Tuple[type, ...]]) -> Tuple[type, ...]:
    return tp if isinstance(tp, tuple) else (tp,)

