"""
Real-time chat bridge

Each browser WebSocket on ``/ws/chat/{conversationId}`` gets its own Socket.IO
client connected to the backend chat channel. Backend events are folded into a
per-connection message cache and pushed to the browser as JSON frames:

    {"type": "messages", "data": [...]}
    {"type": "conversations_stale"}
    {"type": "error", "error": "..."}
    {"type": "connection", "connected": true|false}

The browser sends ``{"type": "send", "payload": {...}}`` to post a message
and ``{"type": "read"}`` to mark the conversation read.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional

import socketio
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from socketio.exceptions import ConnectionError as SocketConnectionError

from ...backend import BackendClient
from ...config import SOCKET_PATH, SOCKET_URL
from ...session import VENDOR_ROLE, get_token_role
from .schemas import CreateMessageRequest
from .service import ChatService, sort_messages

logger = logging.getLogger(__name__)

# Close code for a socket opened without a usable session
WS_UNAUTHORIZED = 4401

RECONNECTION_ATTEMPTS = 5
RECONNECTION_DELAY_SECONDS = 1


def new_socket_client() -> socketio.AsyncClient:
    return socketio.AsyncClient(
        reconnection=True,
        reconnection_attempts=RECONNECTION_ATTEMPTS,
        reconnection_delay=RECONNECTION_DELAY_SECONDS,
    )


class MessageCache:
    """Messages of one conversation, unique by ``_id`` and oldest first"""

    def __init__(self, messages: Optional[list] = None):
        self._messages: list = []
        if messages:
            self.replace(messages)

    @property
    def messages(self) -> list:
        return list(self._messages)

    def replace(self, messages: list) -> None:
        unique = {}
        for message in messages:
            if isinstance(message, dict) and message.get("_id"):
                unique[message["_id"]] = message
        self._messages = sort_messages(list(unique.values()))

    def merge(self, message: dict) -> bool:
        """Add an incoming message; False when it is already cached"""
        if any(m.get("_id") == message.get("_id") for m in self._messages):
            return False
        self._messages = sort_messages(self._messages + [message])
        return True

    def add_optimistic(self, conversation_id: str, request: CreateMessageRequest, sender_side: str):
        """Insert a placeholder for a message being sent.

        Returns the snapshot to restore if the send fails, and the placeholder.
        """
        snapshot = self.messages
        now = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        placeholder = {
            "_id": f"temp-{int(time.time() * 1000)}",
            "conversationId": conversation_id,
            "senderSide": sender_side,
            "type": request.type,
            "text": request.text,
            "clientMessageId": request.clientMessageId,
            "createdAt": now,
            "updatedAt": now,
        }
        self._messages = sort_messages(self._messages + [placeholder])
        return snapshot, placeholder

    def restore(self, snapshot: list) -> None:
        self._messages = list(snapshot)


class ChatBridge:
    """Relays one conversation between a browser WebSocket and the backend Socket.IO channel"""

    def __init__(
        self,
        websocket: WebSocket,
        backend: BackendClient,
        conversation_id: str,
        sio: Optional[socketio.AsyncClient] = None,
    ):
        self.websocket = websocket
        self.backend = backend
        self.chat = ChatService(backend)
        self.conversation_id = conversation_id
        self.cache = MessageCache()
        self.sio = sio or new_socket_client()
        self.sender_side = "user"
        self._closing = False
        self._register_handlers()

    # ------------------------------------------------------------------
    # Browser frames
    # ------------------------------------------------------------------

    async def push(self, frame: dict) -> None:
        await self.websocket.send_json(frame)

    async def push_messages(self) -> None:
        await self.push({"type": "messages", "data": self.cache.messages})

    async def push_error(self, error: str) -> None:
        await self.push({"type": "error", "error": error})

    async def handle_frame(self, frame) -> None:
        if not isinstance(frame, dict):
            await self.push_error("Invalid frame")
            return

        frame_type = frame.get("type")
        if frame_type == "send":
            await self.send_message(frame.get("payload") or {})
        elif frame_type == "read":
            await self.mark_read()
        else:
            await self.push_error(f"Unknown frame type: {frame_type}")

    # ------------------------------------------------------------------
    # Backend events
    # ------------------------------------------------------------------

    def _register_handlers(self) -> None:
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        self.sio.on("chat:message", self.on_chat_message)
        self.sio.on("chat:read", self.on_chat_read)

    async def on_connect(self) -> None:
        logger.info(f"🔌 Chat socket connected for conversation {self.conversation_id}")
        await self.sio.emit("chat:join", {"conversationId": self.conversation_id})
        await self.push({"type": "connection", "connected": True})

    async def on_disconnect(self, *args) -> None:
        logger.info(f"🔌 Chat socket disconnected for conversation {self.conversation_id}")
        if self._closing:
            return
        await self.push({"type": "connection", "connected": False})

    async def on_chat_message(self, payload) -> None:
        if not isinstance(payload, dict) or payload.get("conversationId") != self.conversation_id:
            return
        message = payload.get("data")
        if not isinstance(message, dict):
            return

        if self.cache.merge(message):
            await self.push_messages()
        # Last message preview changed
        await self.push({"type": "conversations_stale"})

    async def on_chat_read(self, payload=None) -> None:
        await self.push({"type": "conversations_stale"})

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def load_messages(self) -> bool:
        result = await self.chat.get_messages(self.conversation_id)
        if not result.success:
            await self.push_error(result.error or "Failed to fetch messages")
            return False
        self.cache.replace(result.data or [])
        await self.push_messages()
        return True

    async def send_message(self, payload: dict) -> None:
        """Optimistic send: show the message at once, roll back on failure, then resync"""
        if not isinstance(payload, dict):
            await self.push_error("Invalid frame")
            return
        if not payload.get("clientMessageId"):
            payload = {**payload, "clientMessageId": f"client-{int(time.time() * 1000)}"}
        try:
            request = CreateMessageRequest(**payload)
        except ValidationError as e:
            await self.push_error(e.errors()[0]["msg"].removeprefix("Value error, "))
            return

        snapshot, _ = self.cache.add_optimistic(self.conversation_id, request, self.sender_side)
        await self.push_messages()

        result = await self.chat.send_message(self.conversation_id, request)
        if not result.success:
            logger.warning(f"⚠️ Message send failed in {self.conversation_id}: {result.error}")
            self.cache.restore(snapshot)
            await self.push_messages()
            await self.push_error(result.error or "Failed to send message")

        await self.load_messages()
        await self.push({"type": "conversations_stale"})

    async def mark_read(self) -> None:
        result = await self.chat.mark_as_read(self.conversation_id)
        if not result.success:
            await self.push_error(result.error or "Failed to mark as read")
            return
        await self.push({"type": "conversations_stale"})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect_socket(self, token: str) -> bool:
        """Connect to the backend channel, refreshing the session once if the token is refused"""
        try:
            await self.sio.connect(SOCKET_URL, auth={"token": token}, socketio_path=SOCKET_PATH)
            return True
        except SocketConnectionError as e:
            logger.warning(f"⚠️ Chat socket connect_error: {e}, refreshing session")

        fresh_token = await self.backend.refresh(failed_token=token)
        if not fresh_token:
            await self.push_error("Session expired. Please login again.")
            return False

        try:
            await self.sio.connect(SOCKET_URL, auth={"token": fresh_token}, socketio_path=SOCKET_PATH)
            return True
        except SocketConnectionError as e:
            logger.error(f"❌ Chat socket reconnect failed: {e}")
            await self.push({"type": "connection", "connected": False})
            await self.push_error("Realtime connection unavailable")
            return False

    async def run(self) -> None:
        token = self.backend.access_token
        if not token:
            token = await self.backend.refresh()

        await self.websocket.accept()
        if not token:
            logger.warning(f"⚠️ Chat socket rejected for {self.conversation_id}: no session")
            await self.websocket.close(code=WS_UNAUTHORIZED)
            return

        if get_token_role(token) == VENDOR_ROLE:
            self.sender_side = "vendor"

        try:
            await self.load_messages()
            await self.connect_socket(token)

            while True:
                raw = await self.websocket.receive_text()
                try:
                    frame = json.loads(raw)
                except ValueError:
                    await self.push_error("Invalid frame")
                    continue
                await self.handle_frame(frame)
        except WebSocketDisconnect:
            logger.info(f"👋 Browser left conversation {self.conversation_id}")
        finally:
            await self.close()

    async def close(self) -> None:
        self._closing = True
        if self.sio.connected:
            try:
                await self.sio.emit("chat:leave", {"conversationId": self.conversation_id})
            finally:
                await self.sio.disconnect()
