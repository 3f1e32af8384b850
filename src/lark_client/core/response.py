"""Response classification and body parsing.

A response is first classified by HTTP status. Only 2xx responses have their
body parsed, in a mode chosen from the content type, then the caller's hint,
then plain text.
"""

from __future__ import annotations

import json
import re
import tempfile
from pathlib import Path
from typing import Any, Literal

import httpx

from .exceptions import (
    AccessTokenExpiredError,
    InternalError,
    LarkError,
    ResponseError,
    ServerError,
)
from .logger import get_logger
from .result import Result

logger = get_logger("response")

ParseMode = Literal["json", "file", "text"]

CONTENT_TYPE_MODES: tuple[tuple[re.Pattern[str], ParseMode], ...] = (
    (re.compile(r"^application/json", re.IGNORECASE), "json"),
    (re.compile(r"^image/", re.IGNORECASE), "file"),
)

TEMP_FILE_PREFIX = "lark-"


def classify_response(response: httpx.Response, request_id: str | None = None) -> None:
    """Raise unless the response status is 2xx.

    The body is never decoded for 5xx responses.

    Raises:
        ServerError: For 5xx statuses.
        ResponseError: For any other non-2xx status.
    """
    status = response.status_code
    if 200 <= status < 300:
        return
    if 500 <= status < 600:
        logger.error("[%s] server error: HTTP %d", request_id, status)
        raise ServerError(status, request_id=request_id)
    body = response.text
    logger.error("[%s] request failed: HTTP %d %s", request_id, status, body)
    raise ResponseError(status, body, request_id=request_id)


def resolve_parse_mode(content_type: str | None, hint: ParseMode | None = None) -> ParseMode:
    """Pick the parse mode: content type wins over the hint, text is the fallback."""
    content_type = (content_type or "").strip()
    for pattern, mode in CONTENT_TYPE_MODES:
        if pattern.match(content_type):
            return mode
    return hint or "text"


def parse_body(
    response: httpx.Response,
    hint: ParseMode | None = None,
    request_id: str | None = None,
) -> Result | Path | str:
    """Parse a successful response according to its negotiated mode.

    Returns:
        ``Result`` for JSON, the temporary file ``Path`` for binary content,
        the body text otherwise.
    """
    mode = resolve_parse_mode(response.headers.get("content-type"), hint)
    if mode == "json":
        return parse_json(response.content, request_id=request_id)
    if mode == "file":
        return parse_file(response.content)
    return response.text


def parse_json(body: bytes | str, request_id: str | None = None) -> Result:
    """Decode a JSON envelope and raise on the reserved error codes.

    Raises:
        AccessTokenExpiredError: The token must be refreshed by the caller.
        InternalError: Transient platform error, safe to retry.
    """
    logger.info("[%s] response body: %s", request_id, _preview(body))
    try:
        data: Any = json.loads(body)
    except json.JSONDecodeError as exc:
        raise LarkError(f"Invalid JSON response: {exc}", request_id=request_id) from exc
    result = Result.from_json(data)
    if result.access_token_expired:
        raise AccessTokenExpiredError(result.code, result.msg, request_id=request_id)
    if result.internal_error:
        raise InternalError(result.code, result.msg, request_id=request_id)
    return result


def parse_file(body: bytes) -> Path:
    """Write ``body`` to a new closed temporary file owned by the caller."""
    with tempfile.NamedTemporaryFile(mode="wb", prefix=TEMP_FILE_PREFIX, delete=False) as handle:
        handle.write(body)
    return Path(handle.name)


def _preview(body: bytes | str, limit: int = 2000) -> str:
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text
