"""Shared types for the API wrappers."""

from __future__ import annotations

from typing import Literal

# Receive ID types for message sending
ReceiveIdType = Literal["open_id", "user_id", "union_id", "email", "chat_id"]

# Member ID types for chat membership calls
MemberIdType = Literal["open_id", "user_id", "union_id", "app_id"]

# Image usage category for uploads
ImageType = Literal["message", "avatar"]

# How chat member additions treat unavailable IDs:
# 0 fails on missing IDs, 1 adds what it can, 2 fails on any unavailable ID
SucceedType = Literal[0, 1, 2]
