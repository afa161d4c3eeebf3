"""Custom exception classes for the time service."""


class TimeServiceError(Exception):
    """Base exception class for all time service errors."""
    pass


class MalformedResponseError(TimeServiceError):
    """Exception raised when a response does not match the expected shape."""
    pass


class TransportFailureError(TimeServiceError):
    """Exception raised when sending or receiving a datagram fails."""
    pass


class ResponseTimeoutError(TransportFailureError):
    """Exception raised when no response arrives within the client timeout."""
    pass


class MissingParameterError(TimeServiceError):
    """Exception raised when a request lacks a required parameter."""
    pass


class UnknownRequestCodeError(TimeServiceError):
    """Exception raised when a request code has no definition."""
    pass


class MessageTooLargeError(TimeServiceError):
    """Exception raised when a datagram exceeds the maximum size limit."""
    pass


class ConfigurationError(TimeServiceError):
    """Exception raised when configuration is invalid or missing."""
    pass
