"""
Configuration management for the venue adapter.

This module handles loading and validating configuration from a YAML file.
All configuration values are validated using Pydantic models to ensure
type safety and catch configuration errors early.

The configuration system supports:
- REST endpoint and connection settings
- API credentials (overridable from the environment)
- Venue options (time in force, receive window, clock skew handling)
- Static fee schedule
- Logging format and level

Example:
    >>> from exchange_normalizer.config import load_config
    >>> config = load_config("config/exchange.yaml")
    >>> config.exchange.options.default_time_in_force
    <TimeInForce.GTC: 'GTC'>

Modules:
    loader: Configuration file loading utilities
    models: Pydantic models for configuration validation
"""

from exchange_normalizer.config.loader import ConfigLoadError, ConfigLoader, load_config
from exchange_normalizer.config.models import (
    # Enums
    LogFormat,
    LogLevel,
    OrderResponseType,
    TimeInForce,
    # Exchange config
    ConnectionSettings,
    Credentials,
    ExchangeConfig,
    FeeSchedule,
    VenueOptions,
    # Logging config
    LoggingConfig,
    # Root config
    AppConfig,
)

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "LogFormat",
    "LogLevel",
    "OrderResponseType",
    "TimeInForce",
    # Exchange config
    "ConnectionSettings",
    "Credentials",
    "ExchangeConfig",
    "FeeSchedule",
    "VenueOptions",
    # Logging config
    "LoggingConfig",
    # Root config
    "AppConfig",
]
