"""Trade Journal - record backtest trades and analyse performance."""

__version__ = "0.1.0"
