"""Instrument pip conventions.

Classifies a free-text symbol into one of three instrument classes by
its normalized form (upper-cased, slashes removed):

=================  ==========  =========================================
Class              Pip size    Pip value for the position
=================  ==========  =========================================
contains ``JPY``   0.01        pip_size / entry_price * 100_000 * lots
``XAUUSD``         0.1         10 * lots
anything else      0.0001      10 * lots
=================  ==========  =========================================

JPY-quoted pairs are checked first because the dollar value of a pip
depends on the live rate.  Unrecognized symbols are assumed to be
non-JPY forex; there is no instrument registry to validate against.
"""

from __future__ import annotations

from dataclasses import dataclass

from trading_journal.core.enums import PipValueConvention

STANDARD_LOT_UNITS = 100_000
FIXED_PIP_VALUE_PER_LOT = 10.0

JPY_PIP_SIZE = 0.01
GOLD_PIP_SIZE = 0.1
FOREX_PIP_SIZE = 0.0001


@dataclass(frozen=True)
class PipInfo:
    """Pip size and how to value one pip for a given position."""

    pip_size: float
    convention: PipValueConvention
    value_per_lot: float = FIXED_PIP_VALUE_PER_LOT

    def pip_value(self, entry_price: float, lot_size: float) -> float:
        """Monetary value of one pip for the whole position.

        A dynamic JPY value needs a positive entry price; anything else
        values the pip at zero.
        """
        if self.convention == PipValueConvention.DYNAMIC_JPY:
            if entry_price <= 0:
                return 0.0
            return self.pip_size / entry_price * STANDARD_LOT_UNITS * lot_size
        return self.value_per_lot * lot_size


def normalize_symbol(symbol: str) -> str:
    """Upper-case and strip slashes and whitespace: ``"usd/jpy"`` -> ``"USDJPY"``."""
    return (symbol or "").strip().upper().replace("/", "")


def pip_info(symbol: str) -> PipInfo:
    """Pip conventions for *symbol*."""
    normalized = normalize_symbol(symbol)
    if "JPY" in normalized:
        return PipInfo(JPY_PIP_SIZE, PipValueConvention.DYNAMIC_JPY)
    if normalized == "XAUUSD":
        return PipInfo(GOLD_PIP_SIZE, PipValueConvention.FIXED)
    return PipInfo(FOREX_PIP_SIZE, PipValueConvention.FIXED)
