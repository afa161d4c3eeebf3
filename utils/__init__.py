"""Utility modules for logging and exception handling."""

from utils.logging import setup_logging, get_logger
from utils.exceptions import (
    TimeServiceError,
    MalformedResponseError,
    TransportFailureError,
    ResponseTimeoutError,
    MissingParameterError,
    UnknownRequestCodeError,
    MessageTooLargeError,
    ConfigurationError,
)

__all__ = [
    'setup_logging',
    'get_logger',
    'TimeServiceError',
    'MalformedResponseError',
    'TransportFailureError',
    'ResponseTimeoutError',
    'MissingParameterError',
    'UnknownRequestCodeError',
    'MessageTooLargeError',
    'ConfigurationError',
]
