"""Enumerations used across the trading journal."""

from enum import Enum


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"


class ProfitFormula(str, Enum):
    """Which profit computation the journal treats as canonical."""

    PIP_DYNAMIC = "pip_dynamic"  # JPY pip value derived from entry price
    FIXED_MULTIPLIER = "fixed_multiplier"  # Legacy reporting path: pips * lots * 10


class PipValueConvention(str, Enum):
    FIXED = "fixed"  # value_per_lot * lot_size
    DYNAMIC_JPY = "dynamic_jpy"  # pip_size / entry_price * 100_000 * lot_size


class StorageBackend(str, Enum):
    MEMORY = "memory"
    SQL = "sql"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
