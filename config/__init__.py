"""Configuration module for managing server and client settings."""

from config.settings import (
    ServerConfig,
    ClientConfig,
    Config,
)

__all__ = [
    'ServerConfig',
    'ClientConfig',
    'Config',
]
