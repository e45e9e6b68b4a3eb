"""Trade persistence."""

from tradejournal.db.store import DataStore, TradeFilter, TradePage

__all__ = ["DataStore", "TradeFilter", "TradePage"]
