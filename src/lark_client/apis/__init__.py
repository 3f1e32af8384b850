"""Lark Open Platform API wrappers.

Components:
- endpoints.py: Endpoint descriptors
- cards.py: Markdown post and interactive card builders
- message.py: Message operations
- chat.py: Chat management
- media.py: Image operations
- models.py: Shared literal types
"""

from .cards import CardBuilder, build_markdown_card, build_markdown_message, build_markdown_post
from .chat import ChatMixin
from .endpoints import IM, Endpoint
from .media import MediaMixin
from .message import MessageMixin
from .models import ImageType, MemberIdType, ReceiveIdType, SucceedType

__all__ = [
    "Endpoint",
    "IM",
    "CardBuilder",
    "build_markdown_card",
    "build_markdown_message",
    "build_markdown_post",
    "MessageMixin",
    "ChatMixin",
    "MediaMixin",
    "ReceiveIdType",
    "MemberIdType",
    "ImageType",
    "SucceedType",
]
