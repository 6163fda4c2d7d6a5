"""
Event envelope utilities for Polyglot realtime messages.

Every server event uses one schema:
- event_type: str
- timestamp: ISO 8601 UTC with 'Z'
- sequence_number: int (monotonic per presence registry)
- data: dict payload

Clients send ``{"event_type": "chatMessage", "data": {"text": "..."}}``.
"""

import json
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

ENTERED_CHAT = "enteredChat"
EXITED_CHAT = "exitedChat"
CHAT_MESSAGE = "chatMessage"
ERROR = "error"

MAX_FRAME_BYTES = 64 * 1024


class MessageValidationError(Exception):
    """A client frame could not be parsed into a known event."""

    def __init__(self, message: str, error_type: str = "invalid_format"):
        super().__init__(message)
        self.message = message
        self.error_type = error_type


class ChatMessageData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str


class ClientChatMessage(BaseModel):
    event_type: Literal["chatMessage"]
    data: ChatMessageData


def utc_now_z() -> str:
    """Return current UTC time in ISO 8601 format with 'Z' suffix."""
    return datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")


def build_event(event_type: str, data: dict[str, Any] | None = None, *, sequence_number: int) -> dict[str, Any]:
    """Create a normalized event envelope."""
    return {
        "event_type": event_type,
        "timestamp": utc_now_z(),
        "sequence_number": sequence_number,
        "data": data or {},
    }


def parse_client_event(raw: str | None) -> ClientChatMessage:
    """
    Parse one inbound frame. ``None`` stands for a frame without text, i.e. a binary frame.

    Raises:
        MessageValidationError: Binary or oversized frame, invalid JSON, unknown event type or bad payload
    """
    if raw is None:
        raise MessageValidationError("Only text frames are accepted", error_type="binary_frame")
    if len(raw.encode("utf-8")) > MAX_FRAME_BYTES:
        raise MessageValidationError("Message too large", error_type="message_too_large")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MessageValidationError(f"Invalid JSON: {e.msg}", error_type="invalid_json") from e

    if not isinstance(payload, dict):
        raise MessageValidationError("Message must be a JSON object")
    if payload.get("event_type") != CHAT_MESSAGE:
        raise MessageValidationError(f"Unknown event type: {payload.get('event_type')!r}", error_type="unknown_event")

    try:
        return ClientChatMessage.model_validate(payload)
    except PydanticValidationError as e:
        raise MessageValidationError(f"Invalid {CHAT_MESSAGE} payload: {e.error_count()} error(s)") from e
