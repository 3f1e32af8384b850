"""Parsed JSON envelope returned by the Lark Open Platform."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .exceptions import LarkAPIError

ACCESS_TOKEN_EXPIRED_CODES = frozenset({99991663, 99991664})
INTERNAL_ERROR_CODES = frozenset({2200, 1061001, 1061006, 1061045})


def _coerce_code(value: Any) -> int:
    """Coerce the envelope ``code`` to an int; unusable values become 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


@dataclass(frozen=True)
class Result:
    """A parsed JSON response.

    Attributes:
        code: Integer status embedded in the body, 0 means success.
        data: The whole parsed JSON value.
    """

    code: int
    data: Any

    @classmethod
    def from_json(cls, data: Any) -> Result:
        """Wrap a decoded JSON value, extracting its ``code``."""
        code = _coerce_code(data.get("code")) if isinstance(data, dict) else 0
        return cls(code=code, data=data)

    @property
    def success(self) -> bool:
        return self.code == 0

    @property
    def access_token_expired(self) -> bool:
        return self.code in ACCESS_TOKEN_EXPIRED_CODES

    @property
    def internal_error(self) -> bool:
        return self.code in INTERNAL_ERROR_CODES

    @property
    def msg(self) -> str:
        if isinstance(self.data, dict):
            return str(self.data.get("msg", ""))
        return ""

    @property
    def payload(self) -> Any:
        """The envelope's ``data`` member, or an empty dict when absent."""
        if isinstance(self.data, dict):
            return self.data.get("data") or {}
        return {}

    def raise_for_code(self) -> Result:
        """Raise ``LarkAPIError`` unless the business code signals success.

        Returns:
            self, so calls can be chained.
        """
        if not self.success:
            raise LarkAPIError(self.code, self.msg)
        return self
