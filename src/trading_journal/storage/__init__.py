"""Trade store implementations: in-memory and SQLAlchemy."""

from .memory import InMemoryTradeStore

__all__ = ["InMemoryTradeStore"]
