"""Rate-limited client for the NCBI Entrez E-utilities."""

from .client import EntrezClient
from .exceptions import (
    ConfigurationError,
    EntrezClientError,
    TransportError,
    UnknownOperator,
)
from .models import ClientSettings
from .query import build_search_term, convert_search_term_hash, encode_query
from .rate_limiter import RateLimiter, default_rate_limiter

__version__ = "0.1.0"

__all__ = [
    "ClientSettings",
    "ConfigurationError",
    "EntrezClient",
    "EntrezClientError",
    "RateLimiter",
    "TransportError",
    "UnknownOperator",
    "build_search_term",
    "convert_search_term_hash",
    "default_rate_limiter",
    "encode_query",
]
