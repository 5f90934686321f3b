"""
Venue Normalization Core.

A normalization layer that turns one crypto venue's REST API into a
venue-agnostic trading interface: instruments, order books, tickers,
candles, trades, balances and orders with canonical symbols and Decimal
values throughout.

This package provides:
- Data models for instruments, market data, orders and balances
- Abstract interfaces for venue adapters and HTTP transports
- An error taxonomy with retryability and a Result wrapper
- Configuration management and structured logging setup
"""

__version__ = "0.1.0"
__author__ = "Om Mengshetti"
