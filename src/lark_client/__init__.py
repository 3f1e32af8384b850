"""Lark (Feishu) Open Platform client.

A synchronous SDK for the Lark Open Platform HTTP API with:
- Message sending (text, markdown posts, interactive cards)
- Chat membership management and chat listing/search
- Image upload and download
- Retry with bounded backoff and typed platform errors

Example:
    ```python
    from lark_client import LarkClient, StaticTokenProvider

    with LarkClient(token_provider=StaticTokenProvider("t-xxx")) as client:
        result = client.send_text_message("Hello", receive_id="ou_xxx")
        result.raise_for_code()
    ```
"""

from importlib.metadata import PackageNotFoundError, version

from .client import LarkClient, StaticTokenProvider, TokenProvider
from .core import (
    AccessTokenExpiredError,
    ClientConfig,
    InternalError,
    LarkAPIError,
    LarkError,
    LarkRequest,
    ResponseError,
    Result,
    RetryPolicy,
    ServerError,
    TransportTimeoutError,
    get_logger,
    setup_logging,
)

__all__ = [
    "__version__",
    "LarkClient",
    "LarkRequest",
    "TokenProvider",
    "StaticTokenProvider",
    "ClientConfig",
    "RetryPolicy",
    "Result",
    "LarkError",
    "LarkAPIError",
    "AccessTokenExpiredError",
    "InternalError",
    "ServerError",
    "ResponseError",
    "TransportTimeoutError",
    "get_logger",
    "setup_logging",
]

try:  # pragma: no cover - best-effort during development
    __version__ = version("lark-client")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
