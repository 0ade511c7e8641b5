"""Custom exceptions for the Entrez client."""
from typing import Optional


class EntrezClientError(Exception):
    """Base exception for Entrez client errors."""
    pass


class ConfigurationError(EntrezClientError):
    """Raised when required client configuration is missing or invalid."""
    pass


class UnknownOperator(EntrezClientError, ValueError):
    """Raised when a search term operator is neither AND nor OR."""

    def __init__(self, operator: object):
        self.operator = operator
        super().__init__(f"Unknown operator: {operator}")


class TransportError(EntrezClientError):
    """Raised when the HTTP layer fails or returns an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
