"""Core request pipeline for the Lark client.

This package contains:
- Request executor with per-attempt request ids
- Retry policy with bounded exponential backoff
- Response classification and body parsing
- Result and error models
- Configuration management
- Logging utilities
"""

from .config import ClientConfig, LoggingConfig, RetryPolicyConfig, TimeoutConfig
from .exceptions import (
    AccessTokenExpiredError,
    InternalError,
    LarkAPIError,
    LarkError,
    ResponseError,
    ServerError,
    TransportTimeoutError,
)
from .logger import get_logger, setup_logging
from .request import LarkRequest
from .response import ParseMode, classify_response, parse_body
from .result import Result
from .retry import RetryPolicy

__all__ = [
    # Pipeline
    "LarkRequest",
    "RetryPolicy",
    "Result",
    "ParseMode",
    "classify_response",
    "parse_body",
    # Configuration
    "ClientConfig",
    "LoggingConfig",
    "RetryPolicyConfig",
    "TimeoutConfig",
    # Errors
    "LarkError",
    "LarkAPIError",
    "AccessTokenExpiredError",
    "InternalError",
    "ServerError",
    "ResponseError",
    "TransportTimeoutError",
    # Logging
    "get_logger",
    "setup_logging",
]
