"""Dispute schemas"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import require_text


class CreateDisputeRequest(BaseModel):
    """Schema for opening a dispute against a booking payment"""

    bookingId: str
    clientClaim: str
    requestedRefundPercent: float = Field(..., ge=0, le=100)
    priority: Literal["low", "medium", "high"] = "medium"
    clientAttachments: list[str] = []

    @field_validator("bookingId")
    @classmethod
    def validate_booking(cls, v):
        return require_text(v, "Booking ID is required")

    @field_validator("clientClaim")
    @classmethod
    def validate_claim(cls, v):
        return require_text(v, "Please describe the issue")
