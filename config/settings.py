"""Configuration management for the time server and client."""

from dataclasses import dataclass
from typing import Optional
import os
from pathlib import Path

from dotenv import load_dotenv

from protocol.constants import AGGREGATE_ITERATIONS, DEFAULT_PORT
from utils.exceptions import ConfigurationError


# Load .env file from project root
# This is called at module import time to ensure env vars are available
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path, override=False)

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _validate_port(name: str, port: int) -> None:
    if not isinstance(port, int) or port < 0 or port > 65535:
        raise ValueError(f"{name} must be between 0 and 65535")


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, str(default))
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid integer, got: {value}")


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name, str(default))
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid number, got: {value}")


@dataclass
class ServerConfig:
    """Configuration for the time server."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    timezone: Optional[str] = None

    def validate(self) -> None:
        """Validate server configuration parameters."""
        if not self.host:
            raise ValueError("Server host is required")
        _validate_port("Server port", self.port)


@dataclass
class ClientConfig:
    """Configuration for the time client."""

    server_host: str = "127.0.0.1"
    server_port: int = DEFAULT_PORT
    timeout: float = 2.0
    iterations: int = AGGREGATE_ITERATIONS
    debug: bool = False

    def validate(self) -> None:
        """Validate client configuration parameters."""
        if not self.server_host:
            raise ValueError("Server host is required")
        _validate_port("Server port", self.server_port)
        if self.server_port == 0:
            raise ValueError("Server port must not be 0")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        if self.iterations < 1:
            raise ValueError("Iterations must be at least 1")


class Config:
    """Main configuration loader and manager."""

    def __init__(self):
        """Initialize configuration manager."""
        self.server: Optional[ServerConfig] = None
        self.client: Optional[ClientConfig] = None

    def load_server_config(self) -> ServerConfig:
        """
        Load server configuration from environment variables.

        Environment variables:
            TIME_SERVER_HOST: Bind host (default: 0.0.0.0)
            TIME_SERVER_PORT: Bind port (default: 27015)
            TIME_SERVER_TIMEZONE: IANA zone used for local time (default: host zone)

        Returns:
            Validated ServerConfig instance

        Raises:
            ConfigurationError: If a value cannot be parsed
            ValueError: If configuration is invalid
        """
        config = ServerConfig(
            host=os.getenv('TIME_SERVER_HOST', '0.0.0.0'),
            port=_int_env('TIME_SERVER_PORT', DEFAULT_PORT),
            timezone=os.getenv('TIME_SERVER_TIMEZONE') or None,
        )
        config.validate()
        self.server = config
        return config

    def load_client_config(self) -> ClientConfig:
        """
        Load client configuration from environment variables.

        Environment variables:
            TIME_CLIENT_SERVER_HOST: Server address (default: 127.0.0.1)
            TIME_CLIENT_SERVER_PORT: Server port (default: 27015)
            TIME_CLIENT_TIMEOUT: Seconds to wait for each response (default: 2.0)
            TIME_CLIENT_ITERATIONS: Cycles for delay and RTT measurements (default: 100)
            TIME_CLIENT_DEBUG: Print sent/received byte counts (default: false)

        Returns:
            Validated ClientConfig instance

        Raises:
            ConfigurationError: If a value cannot be parsed
            ValueError: If configuration is invalid
        """
        config = ClientConfig(
            server_host=os.getenv('TIME_CLIENT_SERVER_HOST', '127.0.0.1'),
            server_port=_int_env('TIME_CLIENT_SERVER_PORT', DEFAULT_PORT),
            timeout=_float_env('TIME_CLIENT_TIMEOUT', 2.0),
            iterations=_int_env('TIME_CLIENT_ITERATIONS', AGGREGATE_ITERATIONS),
            debug=os.getenv('TIME_CLIENT_DEBUG', 'false').lower() in _TRUE_VALUES,
        )
        config.validate()
        self.client = config
        return config
