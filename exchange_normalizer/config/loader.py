"""
Configuration loader for the YAML-based application configuration.

This module loads and validates configuration from a single YAML file. All
configuration is validated using Pydantic models to ensure type safety and
catch configuration errors early.

Expected file layout (config/exchange.yaml):

    exchange:
      rest_url: https://api-adapter.backend.currency.com/api
      connection:
        timeout_seconds: 10
      options:
        default_time_in_force: GTC
        recv_window_ms: 5000
        adjust_for_clock_skew: false
      fees:
        maker: 0.002
        taker: 0.002
    logging:
      format: json
      level: INFO

Environment variables override:
    - CURRENCYCOM_API_KEY: API key
    - CURRENCYCOM_SECRET: API secret
    - LOG_LEVEL: Application log level

Example:
    >>> from exchange_normalizer.config.loader import load_config
    >>> config = load_config("config/exchange.yaml")
    >>> config.exchange.options.recv_window_ms
    5000
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from exchange_normalizer.config.models import (
    AppConfig,
    ConnectionSettings,
    Credentials,
    ExchangeConfig,
    FeeSchedule,
    LoggingConfig,
    LogLevel,
    VenueOptions,
)

API_KEY_ENV = "CURRENCYCOM_API_KEY"
SECRET_ENV = "CURRENCYCOM_SECRET"


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Loads and validates application configuration from a YAML file.

    Example:
        >>> loader = ConfigLoader("config/exchange.yaml")
        >>> config = loader.load()
        >>> config.exchange.name
        'currencycom'
    """

    def __init__(self, config_path: Path | str = "config/exchange.yaml"):
        """
        Initialize config loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigLoadError: If the file does not exist.
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {self.config_path}",
                file_path=self.config_path,
            )
        if not self.config_path.is_file():
            raise ConfigLoadError(
                f"Configuration path is not a file: {self.config_path}",
                file_path=self.config_path,
            )

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load the YAML file.

        Returns:
            Dict containing parsed YAML content.

        Raises:
            ConfigLoadError: If file is empty, not a mapping or invalid YAML.
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {self.config_path}: {e}",
                file_path=self.config_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {self.config_path}: {e}",
                file_path=self.config_path,
                cause=e,
            ) from e

        if data is None:
            raise ConfigLoadError(
                f"Configuration file is empty: {self.config_path}",
                file_path=self.config_path,
            )
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Configuration root must be a mapping: {self.config_path}",
                file_path=self.config_path,
            )
        return data

    def _load_exchange(self, data: Dict[str, Any]) -> ExchangeConfig:
        """
        Build the exchange section, applying credential overrides.

        Raises:
            ConfigLoadError: If validation fails.
        """
        exchange_data = data.get("exchange") or {}
        creds_data = exchange_data.get("credentials") or {}

        try:
            credentials = Credentials(
                api_key=os.getenv(API_KEY_ENV, creds_data.get("api_key")),
                secret=os.getenv(SECRET_ENV, creds_data.get("secret")),
            )
            connection = ConnectionSettings(**(exchange_data.get("connection") or {}))
            options = VenueOptions(**(exchange_data.get("options") or {}))
            fees = FeeSchedule(**(exchange_data.get("fees") or {}))

            top_level = {
                key: exchange_data[key]
                for key in ("name", "rest_url", "api_version")
                if key in exchange_data
            }
            return ExchangeConfig(
                credentials=credentials,
                connection=connection,
                options=options,
                fees=fees,
                **top_level,
            )
        except (ValidationError, TypeError) as e:
            raise ConfigLoadError(
                f"Invalid exchange configuration: {e}",
                file_path=self.config_path,
                cause=e,
            ) from e

    def _load_logging(self, data: Dict[str, Any]) -> LoggingConfig:
        """
        Build the logging section; LOG_LEVEL overrides the file.

        Raises:
            ConfigLoadError: If validation fails.
        """
        logging_data = dict(data.get("logging") or {})
        env_level = (os.getenv("LOG_LEVEL") or "").upper()
        # Unknown levels in the environment keep the file's value
        if env_level in LogLevel.__members__:
            logging_data["level"] = LogLevel(env_level)

        try:
            return LoggingConfig(**logging_data)
        except (ValidationError, TypeError) as e:
            raise ConfigLoadError(
                f"Invalid logging configuration: {e}",
                file_path=self.config_path,
                cause=e,
            ) from e

    def load(self) -> AppConfig:
        """
        Load and validate the configuration file.

        Returns:
            AppConfig: Validated application configuration.

        Raises:
            ConfigLoadError: If the configuration is invalid or missing.
        """
        data = self._load_yaml()
        try:
            return AppConfig(
                exchange=self._load_exchange(data),
                logging=self._load_logging(data),
            )
        except ConfigLoadError:
            raise
        except ValidationError as e:
            raise ConfigLoadError(
                f"Configuration validation failed: {e}",
                file_path=self.config_path,
                cause=e,
            ) from e


def load_config(config_path: Path | str = "config/exchange.yaml") -> AppConfig:
    """
    Convenience function to load application configuration.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigLoadError: If configuration loading fails.
    """
    loader = ConfigLoader(config_path)
    return loader.load()
