"""
Venue adapters.

Each venue lives in its own subpackage and implements the ExchangeAdapter
interface, so callers use one set of operations and one data model for
every venue.

Supported Venues:
    - Currency.com (spot and leverage markets)
"""

__all__: list[str] = []
