"""Error types for the trade journal."""


class TradeJournalError(Exception):
    """Base class for trade journal errors."""


class ConfigError(TradeJournalError):
    """Raised when the configuration file cannot be read."""


class NotAuthenticatedError(TradeJournalError):
    """Raised when no user is logged in."""

    def __init__(self, message: str = "No user is logged in") -> None:
        super().__init__(message)


class TradeNotFoundError(TradeJournalError):
    """Raised when a trade does not exist for the current user."""

    def __init__(self, trade_id: int) -> None:
        super().__init__(f"Trade {trade_id} not found")
        self.trade_id = trade_id
