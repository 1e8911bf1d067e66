"""Canonical ID factories for the journal.

ID Categories
-------------
1. Store IDs: UUID v4 hex strings assigned when a trade is created.
2. Custom rule IDs: ``custom-<epoch-ms>`` for user-added violation rules.
3. Simulated trade IDs: ``sim_<epoch-ms>`` for replay trades that are
   never persisted.
"""

from __future__ import annotations

import uuid

from .clock import IClock, WallClock

_DEFAULT_CLOCK = WallClock()


def new_trade_id() -> str:
    """Generate a new opaque trade id."""
    return uuid.uuid4().hex


def custom_rule_id(clock: IClock | None = None) -> str:
    """Id for a user-added violation rule."""
    return f"custom-{(clock or _DEFAULT_CLOCK).now_ms()}"


def simulated_trade_id(clock: IClock | None = None) -> str:
    """Id for a trade forwarded from the replay simulator."""
    return f"sim_{(clock or _DEFAULT_CLOCK).now_ms()}"
