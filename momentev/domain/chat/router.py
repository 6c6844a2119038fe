"""Chat router - REST conversations plus the real-time WebSocket bridge"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket

from ...backend import BackendClient, get_backend, get_http_client
from ...schemas import ActionResult
from .realtime import ChatBridge
from .schemas import CreateMessageRequest
from .service import DEFAULT_MESSAGE_LIMIT, ChatService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


def get_chat_service(backend: BackendClient = Depends(get_backend)) -> ChatService:
    """Dependency injection for ChatService"""
    return ChatService(backend)


@router.get("/api/chats", response_model=ActionResult)
async def get_conversations(service: ChatService = Depends(get_chat_service)):
    return await service.get_conversations()


@router.post("/api/chats/vendor/{vendor_id}", response_model=ActionResult)
async def get_or_create_conversation(vendor_id: str, service: ChatService = Depends(get_chat_service)):
    return await service.get_or_create_conversation(vendor_id)


@router.get("/api/chats/{conversation_id}/messages", response_model=ActionResult)
async def get_messages(
    conversation_id: str,
    limit: int = Query(DEFAULT_MESSAGE_LIMIT, ge=1, le=100),
    before: Optional[str] = Query(None),
    service: ChatService = Depends(get_chat_service),
):
    return await service.get_messages(conversation_id, limit, before)


@router.post("/api/chats/{conversation_id}/messages", response_model=ActionResult)
async def send_message(
    conversation_id: str, data: CreateMessageRequest, service: ChatService = Depends(get_chat_service)
):
    return await service.send_message(conversation_id, data)


@router.post("/api/chats/{conversation_id}/read", response_model=ActionResult)
async def mark_as_read(conversation_id: str, service: ChatService = Depends(get_chat_service)):
    return await service.mark_as_read(conversation_id)


@router.websocket("/ws/chat/{conversation_id}")
async def chat_socket(websocket: WebSocket, conversation_id: str):
    """Real-time updates for one conversation, authenticated by the cookie session"""
    backend = BackendClient(get_http_client(websocket), websocket)
    bridge = ChatBridge(websocket, backend, conversation_id)
    await bridge.run()
