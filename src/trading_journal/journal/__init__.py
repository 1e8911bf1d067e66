"""Trade Journal application layer.

Wraps the analytics calculators in a per-user session backed by a trade
store, and provides the identity, export and replay-forwarding pieces
around it.

Key components
--------------
TradeJournal            Per-user trades, filters, catalog and dashboard
LocalIdentityProvider   In-memory login/signup with change listeners
TradeExporter           CSV/JSON export, JSON import and the text report
SimulatedTradeChannel   Publish/subscribe for replay simulator trades
"""

from .channel import SimulatedTrade, SimulatedTradeChannel
from .export import TradeExporter, export_filename, report_filename
from .identity import LocalIdentityProvider
from .journal import TradeJournal

__all__ = [
    "SimulatedTrade",
    "SimulatedTradeChannel",
    "TradeExporter",
    "export_filename",
    "report_filename",
    "LocalIdentityProvider",
    "TradeJournal",
]
