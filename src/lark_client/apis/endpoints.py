"""Endpoint descriptors for the Lark Open Platform API.

Each upstream endpoint is described once by its method, path template and
response hint; wrappers format the path and hand the descriptor to
``LarkClient.call``.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Literal
from urllib.parse import quote

from ..core.response import ParseMode

HTTPMethod = Literal["GET", "POST", "PUT", "DELETE"]


@dataclass(frozen=True)
class Endpoint:
    """A single upstream API endpoint.

    Attributes:
        name: Identifier used in logs.
        method: HTTP method.
        path: Path template relative to the base URL, e.g. ``im/v1/chats/{chat_id}``.
        form: Send the body as multipart form data.
        parse_as: Response format hint when the content type is not decisive.
    """

    name: str
    method: HTTPMethod
    path: str
    form: bool = False
    parse_as: ParseMode | None = None

    @property
    def path_fields(self) -> tuple[str, ...]:
        return tuple(
            field for _, field, _, _ in string.Formatter().parse(self.path) if field
        )

    def format_path(self, **path_args: str) -> str:
        """Fill the path template, escaping each value as a single segment.

        Raises:
            ValueError: If a template field has no value.
        """
        missing = [field for field in self.path_fields if field not in path_args]
        if missing:
            raise ValueError(f"Missing path arguments for {self.name}: {', '.join(missing)}")
        return self.path.format(
            **{key: quote(str(value), safe="") for key, value in path_args.items()}
        )


class IM:
    """Instant messaging endpoints."""

    SEND_MESSAGE = Endpoint("send_message", "POST", "im/v1/messages")
    REPLY_MESSAGE = Endpoint("reply_message", "POST", "im/v1/messages/{message_id}/reply")
    RECALL_MESSAGE = Endpoint("recall_message", "DELETE", "im/v1/messages/{message_id}")

    UPLOAD_IMAGE = Endpoint("upload_image", "POST", "im/v1/images", form=True)
    DOWNLOAD_IMAGE = Endpoint("download_image", "GET", "im/v1/images/{image_key}", parse_as="file")

    LIST_CHATS = Endpoint("list_chats", "GET", "im/v1/chats")
    SEARCH_CHATS = Endpoint("search_chats", "GET", "im/v1/chats/search")
    GET_CHAT = Endpoint("get_chat", "GET", "im/v1/chats/{chat_id}")
    DELETE_CHAT = Endpoint("delete_chat", "DELETE", "im/v1/chats/{chat_id}")
    ADD_CHAT_MEMBERS = Endpoint("add_chat_members", "POST", "im/v1/chats/{chat_id}/members")
    REMOVE_CHAT_MEMBERS = Endpoint(
        "remove_chat_members", "DELETE", "im/v1/chats/{chat_id}/members"
    )
