"""Lark Open Platform API client.

This module provides the main LarkClient class that combines the endpoint
wrappers through mixins and injects the access token into every request.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeVar

from .apis.chat import ChatMixin
from .apis.endpoints import Endpoint
from .apis.media import MediaMixin
from .apis.message import MessageMixin
from .core.config import ClientConfig
from .core.exceptions import AccessTokenExpiredError
from .core.logger import get_logger
from .core.request import LarkRequest, ParsedResponse
from .core.response import ParseMode

logger = get_logger("client")

T = TypeVar("T")


class TokenProvider(Protocol):
    """Source of access tokens. Acquiring tokens happens outside this package."""

    def get_token(self, force_refresh: bool = False) -> str: ...


class StaticTokenProvider:
    """Token provider that always returns the same token."""

    def __init__(self, token: str):
        self.token = token

    def get_token(self, force_refresh: bool = False) -> str:
        return self.token


class LarkClient(MessageMixin, ChatMixin, MediaMixin):
    """Lark Open Platform API client.

    When a call fails with ``AccessTokenExpiredError`` the client asks the
    token provider for a fresh token and reissues the call once. If the
    provider hands back the same token the error propagates.

    Example:
        ```python
        with LarkClient(token_provider=StaticTokenProvider("t-xxx")) as client:
            client.send_markdown_message(
                "**Build passed**",
                receive_id="oc_xxx",
                receive_id_type="chat_id",
                title="CI",
                buttons={"Open": "https://ci.example.com/123"},
            )
            for chat in client.iter_chats(page_size=50):
                print(chat["chat_id"], chat["name"])
        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        token_provider: TokenProvider | None = None,
        request: LarkRequest | None = None,
    ):
        """Initialize the client.

        Args:
            config: Client configuration; ignored when ``request`` is given.
            token_provider: Supplies the bearer token for each call.
            request: Pre-built request executor.
        """
        self.request = request or LarkRequest(config)
        self.config = self.request.config
        self.token_provider = token_provider

    def __enter__(self) -> LarkClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the underlying request executor."""
        self.request.close()

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        """Make an authorized GET request."""
        return self._authorized(
            lambda auth: self.request.get(path, headers=auth, params=params, parse_as=parse_as),
            headers,
        )

    def post(
        self,
        path: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        """Make an authorized POST request."""
        return self._authorized(
            lambda auth: self.request.post(
                path, body, headers=auth, params=params, parse_as=parse_as
            ),
            headers,
        )

    def put(
        self,
        path: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        """Make an authorized PUT request."""
        return self._authorized(
            lambda auth: self.request.put(
                path, body, headers=auth, params=params, parse_as=parse_as
            ),
            headers,
        )

    def delete(
        self,
        path: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        """Make an authorized DELETE request."""
        return self._authorized(
            lambda auth: self.request.delete(
                path, body, headers=auth, params=params, parse_as=parse_as
            ),
            headers,
        )

    def post_form(
        self,
        path: str,
        form: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        """Make an authorized multipart POST request. ``params`` is dropped."""
        return self._authorized(
            lambda auth: self.request.post_form(
                path, form, headers=auth, params=params, parse_as=parse_as
            ),
            headers,
        )

    def call(
        self,
        endpoint: Endpoint,
        *,
        path_args: Mapping[str, str] | None = None,
        body: Any = None,
        form: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ParsedResponse:
        """Call an endpoint descriptor."""
        path = endpoint.format_path(**(path_args or {}))
        logger.debug("Calling %s: %s %s", endpoint.name, endpoint.method, path)

        if endpoint.form:
            return self.post_form(
                path, form or {}, headers=headers, parse_as=endpoint.parse_as
            )
        if endpoint.method == "GET":
            return self.get(path, headers=headers, params=params, parse_as=endpoint.parse_as)
        if endpoint.method == "POST":
            return self.post(
                path, body, headers=headers, params=params, parse_as=endpoint.parse_as
            )
        if endpoint.method == "PUT":
            return self.put(
                path, body, headers=headers, params=params, parse_as=endpoint.parse_as
            )
        if endpoint.method == "DELETE":
            return self.delete(
                path, body, headers=headers, params=params, parse_as=endpoint.parse_as
            )
        raise ValueError(f"Unsupported HTTP method: {endpoint.method}")

    # =========================================================================
    # Authorization
    # =========================================================================

    def _authorized(
        self,
        send: Callable[[dict[str, str]], T],
        headers: Mapping[str, str] | None,
    ) -> T:
        if self.token_provider is None:
            return send(dict(headers or {}))

        token = self.token_provider.get_token()
        try:
            return send(self._auth_headers(headers, token))
        except AccessTokenExpiredError:
            fresh = self.token_provider.get_token(force_refresh=True)
            if fresh == token:
                raise
            logger.info("Access token expired, retrying with a refreshed token")
            return send(self._auth_headers(headers, fresh))

    @staticmethod
    def _auth_headers(headers: Mapping[str, str] | None, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}", **(headers or {})}
