"""Request executor for the Lark Open Platform API.

Every call goes through the same pipeline:
- Resolve the URL against the configured base URL
- Attach default headers and a fresh ``X-Request-ID`` per attempt
- Send through a shared ``httpx.Client``
- Classify the response status, then parse the body
- Retry transient failures through ``RetryPolicy``
"""

from __future__ import annotations

import ssl
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any
from urllib.parse import urljoin

import certifi
import httpx

from .config import ClientConfig
from .exceptions import TransportTimeoutError
from .logger import get_logger
from .response import ParseMode, classify_response, parse_body
from .result import Result
from .retry import RetryPolicy

logger = get_logger("request")

REQUEST_ID_HEADER = "X-Request-ID"
DEFAULT_HEADERS = {"Accept": "application/json"}
MASKED_HEADERS = frozenset({"authorization"})

TLS_VERSIONS = {
    "TLSv1_2": ssl.TLSVersion.TLSv1_2,
    "TLSv1_3": ssl.TLSVersion.TLSv1_3,
}

ParsedResponse = Result | Path | str


def build_ssl_context(tls_version: str | None = None, skip_verify: bool = False) -> ssl.SSLContext:
    """Create the TLS context shared by all requests.

    Args:
        tls_version: Pin both the minimum and maximum protocol version.
        skip_verify: Disable hostname and certificate verification.
    """
    context = ssl.create_default_context(cafile=certifi.where())
    if tls_version:
        context.minimum_version = TLS_VERSIONS[tls_version]
        context.maximum_version = TLS_VERSIONS[tls_version]
    if skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


MultipartPart = tuple[str | None, bytes] | tuple[str | None, bytes, str | None]


def build_multipart(form: Mapping[str, Any]) -> dict[str, MultipartPart]:
    """Turn a form mapping into multipart parts.

    Plain values become parts without a filename, so the body is multipart
    even when the form carries no file. File parts are read eagerly so a
    retried upload sends the same bytes.
    """
    parts: dict[str, MultipartPart] = {}
    for name, value in form.items():
        if value is None:
            continue
        if isinstance(value, Path):
            parts[name] = (value.name, value.read_bytes())
        elif isinstance(value, (bytes, bytearray)):
            parts[name] = (name, bytes(value))
        elif isinstance(value, tuple):
            parts[name] = value
        elif hasattr(value, "read"):
            parts[name] = (_file_name(value, name), _read_all(value))
        else:
            parts[name] = (None, str(value).encode("utf-8"))
    return parts


def _file_name(handle: IO[Any], default: str) -> str:
    name = getattr(handle, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return default


def _read_all(handle: IO[Any]) -> bytes:
    content = handle.read()
    if isinstance(content, str):
        return content.encode("utf-8")
    return content


def _compact(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop absent query parameter values."""
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}


def _masked(headers: httpx.Headers) -> dict[str, str]:
    return {
        key: ("***" if key.lower() in MASKED_HEADERS else value)
        for key, value in headers.items()
    }


class LarkRequest:
    """Low-level request executor.

    Example:
        ```python
        with LarkRequest(ClientConfig()) as request:
            result = request.get(
                "im/v1/chats",
                headers={"Authorization": "Bearer t-xxx"},
                params={"page_size": 20},
            )
            print(result.code, result.payload)
        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the executor.

        Args:
            config: Client configuration (base URL, timeouts, proxy, TLS).
            retry_policy: Override the retry policy built from ``config.retry``.
            transport: Custom httpx transport. httpx mounts the proxy over
                every URL, so a transport cannot be combined with a proxy.

        Raises:
            ValueError: If both ``transport`` and ``config.proxy`` are set.
        """
        self.config = config or ClientConfig()
        if transport is not None and self.config.proxy:
            raise ValueError(
                f"Cannot use a custom transport together with proxy {self.config.proxy}"
            )
        self.base_url = self.config.base_url
        self.retry_policy = retry_policy or RetryPolicy(self.config.retry)

        timeout = self.config.timeout
        self._client = httpx.Client(
            timeout=httpx.Timeout(
                connect=timeout.connect,
                read=timeout.read,
                write=timeout.write,
                pool=timeout.pool,
            ),
            proxy=self.config.proxy,
            verify=build_ssl_context(self.config.tls_version, self.config.skip_verify_ssl),
            transport=transport,
        )
        if self.config.proxy:
            logger.info("Routing requests through proxy %s", self.config.proxy)

    def __enter__(self) -> LarkRequest:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def build_url(self, path: str) -> str:
        """Build the absolute URL for ``path``."""
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url, path.lstrip("/"))

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
        """Make a GET request."""
        return self._request("GET", path, headers=headers, params=params, parse_as=parse_as)

    def post(
        self,
        path: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        """Make a POST request with a JSON body."""
        logger.info("payload: %s", body)
        return self._request(
            "POST", path, headers=headers, params=params, json_body=body, parse_as=parse_as
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
        """Make a PUT request with a JSON body."""
        logger.info("payload: %s", body)
        return self._request(
            "PUT", path, headers=headers, params=params, json_body=body, parse_as=parse_as
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
        """Make a DELETE request. The upstream API accepts a JSON body here."""
        logger.info("payload: %s", body)
        return self._request(
            "DELETE", path, headers=headers, params=params, json_body=body, parse_as=parse_as
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
        """Make a multipart POST request.

        Query parameters are never sent with a form upload; ``params`` is
        accepted for signature symmetry and dropped.
        """
        if params:
            logger.debug("Dropping query params for form upload to %s", path)
        return self._request(
            "POST", path, headers=headers, files=build_multipart(form), parse_as=parse_as
        )

    # =========================================================================
    # Pipeline
    # =========================================================================

    def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        files: dict[str, MultipartPart] | None = None,
        parse_as: ParseMode | None = None,
    ) -> ParsedResponse:
        url = self.build_url(path)
        request_headers = httpx.Headers(DEFAULT_HEADERS)
        request_headers.update(headers or {})
        query = _compact(params)

        def attempt(number: int) -> ParsedResponse:
            request_id = str(uuid.uuid4())
            attempt_headers = request_headers.copy()
            attempt_headers[REQUEST_ID_HEADER] = request_id

            logger.info(
                "[%s] request %s %s with headers: %s, attempts: %d",
                request_id,
                method,
                url,
                _masked(attempt_headers),
                number,
            )
            try:
                response = self._client.request(
                    method,
                    url,
                    params=query or None,
                    headers=attempt_headers,
                    json=json_body,
                    files=files or None,
                )
            except httpx.TimeoutException as exc:
                logger.error("[%s] request %s timed out: %s", request_id, url, exc)
                raise TransportTimeoutError(
                    f"Request to {url} timed out: {exc}", request_id=request_id
                ) from exc

            logger.info("[%s] response headers: %s", request_id, dict(response.headers))
            classify_response(response, request_id)
            return parse_body(response, parse_as, request_id)

        return self.retry_policy.call(attempt)
