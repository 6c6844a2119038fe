"""Chat service - conversations and messages over the backend REST API"""

import logging
from typing import Optional

from ...backend import BackendClient
from ...schemas import ActionResult
from ...shared.validators import parse_datetime
from .schemas import CreateMessageRequest

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 30


def message_sort_key(message) -> float:
    created = parse_datetime(message.get("createdAt")) if isinstance(message, dict) else None
    return created.timestamp() if created else 0.0


def sort_messages(messages: list) -> list:
    """Oldest first, so the newest message renders at the bottom"""
    return sorted(messages, key=message_sort_key)


class ChatService:
    """Service layer for chat REST operations"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def get_conversations(self) -> ActionResult:
        return await self.backend.get("/chats", default_error="Failed to fetch conversations")

    async def get_or_create_conversation(self, vendor_id: str) -> ActionResult:
        result = await self.backend.post(
            f"/chats/vendor/{vendor_id}", default_error="Failed to open conversation"
        )
        if result.success:
            logger.info(f"💬 Conversation ready with vendor {vendor_id}")
        return result

    async def get_messages(
        self, conversation_id: str, limit: int = DEFAULT_MESSAGE_LIMIT, before: Optional[str] = None
    ) -> ActionResult:
        result = await self.backend.get(
            f"/chats/{conversation_id}/messages",
            params={"limit": limit, "before": before},
            default_error="Failed to fetch messages",
        )
        if result.success:
            result.data = sort_messages(result.data if isinstance(result.data, list) else [])
        return result

    async def send_message(self, conversation_id: str, data: CreateMessageRequest) -> ActionResult:
        return await self.backend.post(
            f"/chats/{conversation_id}/messages",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to send message",
        )

    async def mark_as_read(self, conversation_id: str) -> ActionResult:
        return await self.backend.post(f"/chats/{conversation_id}/read", default_error="Failed to mark as read")
