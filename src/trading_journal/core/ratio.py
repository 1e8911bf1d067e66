"""Tagged ratio results: ``Defined(value)`` or ``UNDEFINED``.

Ratios in the journal (risk-reward, profit percentage, RRR averages) can
legitimately have no value: no stop loss was set, a denominator was zero,
or no trade contributed to an average.  Returning ``0.0`` in those cases
would be indistinguishable from a real zero, so calculators return one of
these two variants instead.

Usage::

    r = safe_ratio(reward, risk)
    if r.is_defined:
        print(f"{r.value:.2f}")
    display = r.value_or(0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Defined:
    """A ratio that has a finite value."""

    value: float

    @property
    def is_defined(self) -> bool:
        return True

    def value_or(self, default: float) -> float:
        return self.value


class _Undefined:
    """A ratio with no meaningful value.  Use the ``UNDEFINED`` singleton."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def value(self) -> None:
        return None

    @property
    def is_defined(self) -> bool:
        return False

    def value_or(self, default: float) -> float:
        return default

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

Ratio = Union[Defined, _Undefined]


def safe_ratio(numerator: float, denominator: float) -> Ratio:
    """Divide, returning ``UNDEFINED`` for zero or non-finite results."""
    if denominator == 0 or not math.isfinite(denominator):
        return UNDEFINED
    result = numerator / denominator
    if not math.isfinite(result):
        return UNDEFINED
    return Defined(result)


def mean_of(values: list[float]) -> Ratio:
    """Arithmetic mean, ``UNDEFINED`` for an empty list."""
    if not values:
        return UNDEFINED
    return Defined(sum(values) / len(values))
