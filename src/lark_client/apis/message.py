"""Message API operations.

This module provides message-related API operations:
- Send raw message payloads
- Send text and markdown messages
- Reply to messages
- Recall messages
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..core.logger import get_logger
from ..core.result import Result
from .cards import build_markdown_message
from .endpoints import IM, Endpoint
from .models import ReceiveIdType

logger = get_logger("apis.message")


class MessageMixin:
    """Mixin providing message API functionality.

    This mixin should be used with a class that has:
    - self.call(endpoint, ...) -> Result | Path | str
    """

    def call(self, endpoint: Endpoint, **kwargs: Any) -> Any:
        """Call an endpoint. To be implemented by main class."""
        raise NotImplementedError

    def send_message(
        self,
        payload: Mapping[str, Any],
        receive_id_type: ReceiveIdType = "open_id",
    ) -> Result:
        """Send a message.

        Args:
            payload: Message body with ``receive_id``, ``msg_type`` and
                ``content`` (a JSON string).
            receive_id_type: How ``receive_id`` identifies the recipient.

        Example:
            ```python
            client.send_message(
                {
                    "receive_id": "oc_xxx",
                    "msg_type": "text",
                    "content": json.dumps({"text": "Hello"}),
                },
                receive_id_type="chat_id",
            )
            ```
        """
        return self.call(
            IM.SEND_MESSAGE,
            body=dict(payload),
            params={"receive_id_type": receive_id_type},
        )

    def send_text_message(
        self,
        text: str,
        receive_id: str,
        receive_id_type: ReceiveIdType = "open_id",
    ) -> Result:
        """Send a plain text message."""
        payload = {
            "receive_id": receive_id,
            "msg_type": "text",
            "content": json.dumps({"text": text}, ensure_ascii=False),
        }
        return self.send_message(payload, receive_id_type=receive_id_type)

    def send_markdown_message(
        self,
        markdown: str,
        receive_id: str,
        title: str = "",
        buttons: Mapping[str, str] | None = None,
        receive_id_type: ReceiveIdType = "open_id",
    ) -> Result:
        """Send a markdown message, as a card when buttons are given.

        Only a subset of markdown is rendered. Images must reference an
        ``image_key`` returned by ``upload_image``.

        Args:
            markdown: Markdown body.
            receive_id: Message recipient.
            title: Message title.
            buttons: Button label to link URL.
            receive_id_type: How ``receive_id`` identifies the recipient.
        """
        payload = build_markdown_message(receive_id, markdown, title=title, buttons=buttons)
        logger.debug("Sending %s message to %s", payload["msg_type"], receive_id)
        return self.send_message(payload, receive_id_type=receive_id_type)

    def reply_message(
        self,
        message_id: str,
        msg_type: str,
        content: Mapping[str, Any] | str,
        reply_in_thread: bool = False,
    ) -> Result:
        """Reply to a message."""
        if not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)
        body: dict[str, Any] = {"msg_type": msg_type, "content": content}
        if reply_in_thread:
            body["reply_in_thread"] = True
        return self.call(
            IM.REPLY_MESSAGE,
            path_args={"message_id": message_id},
            body=body,
        )

    def recall_message(self, message_id: str) -> Result:
        """Recall a message sent by the bot."""
        return self.call(IM.RECALL_MESSAGE, path_args={"message_id": message_id})
