"""Chat schemas"""

from typing import Literal, Optional

from pydantic import BaseModel, model_validator

MessageType = Literal["text", "file", "system"]


class MessageAttachment(BaseModel):
    fileId: str


class CreateMessageRequest(BaseModel):
    """Message as accepted by the backend; ``clientMessageId`` lets the sender match its echo"""

    type: MessageType = "text"
    text: Optional[str] = None
    clientMessageId: str
    attachments: Optional[list[MessageAttachment]] = None

    @model_validator(mode="after")
    def validate_content(self):
        if self.type == "text" and not (self.text or "").strip():
            raise ValueError("Message text is required")
        if self.type == "file" and not self.attachments:
            raise ValueError("File messages need at least one attachment")
        return self
