"""Custom exception hierarchy for the trading journal.

The analytics core never raises for data-shape reasons; these errors
belong to the plumbing around it (configuration, storage, identity,
import).
"""


class JournalError(Exception):
    """Base exception for all trading journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Storage ---
class StoreError(JournalError):
    """Trade store operation failed."""


class StoreUnavailableError(StoreError):
    """The trade store could not be reached."""


class StorePermissionError(StoreError):
    """The caller may not read or write the requested record."""


class TradeNotFoundError(StoreError):
    """No trade exists with the requested id."""

    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")


# --- Identity ---
class AuthError(JournalError):
    """Identity provider failure."""


class AuthenticationError(AuthError):
    """Credentials were rejected."""


class RegistrationError(AuthError):
    """Signup rejected (duplicate or invalid account details)."""


class NotAuthenticatedError(AuthError):
    """Operation requires a signed-in user."""


# --- Import / export ---
class ImportValidationError(JournalError):
    """Imported trade data is not in the expected shape."""
