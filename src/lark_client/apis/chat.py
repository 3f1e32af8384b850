"""Chat management API operations.

This module provides chat/group operations:
- List, search and fetch chats
- Add/remove chat members
- Delete/dissolve chats
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from ..core.logger import get_logger
from ..core.result import Result
from .endpoints import IM, Endpoint
from .models import MemberIdType, SucceedType

logger = get_logger("apis.chat")


class ChatMixin:
    """Mixin providing chat management functionality.

    This mixin should be used with a class that has:
    - self.call(endpoint, ...) -> Result | Path | str
    """

    def call(self, endpoint: Endpoint, **kwargs: Any) -> Any:
        """Call an endpoint. To be implemented by main class."""
        raise NotImplementedError

    def add_members_to_chat(
        self,
        chat_id: str,
        id_list: Sequence[str],
        member_id_type: MemberIdType = "open_id",
        succeed_type: SucceedType = 1,
    ) -> Result:
        """Add members to a chat.

        Args:
            chat_id: Target chat.
            id_list: Member IDs to add.
            member_id_type: Type of the IDs in ``id_list``.
            succeed_type: 0 rejects the call for unknown IDs, 1 adds every
                available ID and reports the rest, 2 rejects the call if any
                ID is unavailable.
        """
        return self.call(
            IM.ADD_CHAT_MEMBERS,
            path_args={"chat_id": chat_id},
            body={"id_list": list(id_list)},
            params={"member_id_type": member_id_type, "succeed_type": succeed_type},
        )

    def remove_members_from_chat(
        self,
        chat_id: str,
        id_list: Sequence[str],
        member_id_type: MemberIdType = "open_id",
    ) -> Result:
        """Remove members from a chat."""
        return self.call(
            IM.REMOVE_CHAT_MEMBERS,
            path_args={"chat_id": chat_id},
            body={"id_list": list(id_list)},
            params={"member_id_type": member_id_type},
        )

    def delete_chat(self, chat_id: str) -> Result:
        """Dissolve a chat."""
        logger.info("Deleting chat %s", chat_id)
        return self.call(IM.DELETE_CHAT, path_args={"chat_id": chat_id})

    def get_chat(self, chat_id: str, user_id_type: MemberIdType | None = None) -> Result:
        """Get chat information."""
        return self.call(
            IM.GET_CHAT,
            path_args={"chat_id": chat_id},
            params={"user_id_type": user_id_type},
        )

    def list_chats(
        self,
        page_size: int | None = None,
        page_token: str | None = None,
        user_id_type: MemberIdType | None = None,
    ) -> Result:
        """List one page of chats the bot belongs to."""
        return self.call(
            IM.LIST_CHATS,
            params={
                "page_size": page_size,
                "page_token": page_token,
                "user_id_type": user_id_type,
            },
        )

    def search_chats(
        self,
        query: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> Result:
        """Search chats visible to the bot by keyword."""
        return self.call(
            IM.SEARCH_CHATS,
            params={"query": query, "page_size": page_size, "page_token": page_token},
        )

    def iter_chats(
        self,
        page_size: int | None = None,
        user_id_type: MemberIdType | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Iterate over every chat, following ``page_token`` until ``has_more`` is false.

        Raises:
            LarkAPIError: If a page comes back with a non-zero code.
        """
        page_token: str | None = None
        while True:
            result = self.list_chats(
                page_size=page_size, page_token=page_token, user_id_type=user_id_type
            ).raise_for_code()
            page = result.payload
            yield from page.get("items") or []

            page_token = page.get("page_token")
            if not page.get("has_more") or not page_token:
                break
