# src/unilibstats/stats/rounding.py

from __future__ import annotations

import math
from typing import Iterable, List

__all__ = ["normal_round", "round_all"]


def normal_round(value: float, decimals: int = 2) -> float:
	"""
	Round half up (toward positive infinity) to ``decimals`` places.

	Indicators, Gini values, z-scores and Lorenz percentages are published at a
	fixed precision with the JavaScript ``Math.round`` tie rule. Python's
	:func:`round` would send ``0.125`` to ``0.12`` (banker's rounding), while the
	published figures use ``0.13``. Negative ties move up as well, so ``-2.505``
	becomes ``-2.5``. Non-finite inputs are returned unchanged.

	:param value: Real number to round.
	:param decimals: Number of decimal places to keep (must be ``>= 0``).
	:return: Rounded float.
	:raises TypeError: If ``value`` is not a real number.
	:raises ValueError: If ``decimals`` is not a non-negative integer.
	"""
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		# numpy scalars expose __float__
		try:
			value = float(value)  # type: ignore[arg-type]
		except (TypeError, ValueError):
			raise TypeError(f"value must be a real number, got {type(value)}") from None
	if not isinstance(decimals, int) or decimals < 0:
		raise ValueError(f"decimals must be a non-negative integer, got {decimals}")
	if not math.isfinite(value):
		return float(value)

	factor = 10 ** decimals
	# repr-based scaling avoids 1.005 * 100 == 100.49999999999999
	scaled = float(f"{value:.15g}") * factor
	rounded = math.floor(float(f"{scaled:.15g}") + 0.5)
	# + 0.0 turns -0.0 into 0.0
	return rounded / factor + 0.0


def round_all(values: Iterable[float], decimals: int = 2) -> List[float]:
	"""Apply :func:`normal_round` to every value."""
	return [normal_round(v, decimals) for v in values]
