"""Quote domain schemas - the vendor quote builder and customer responses"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

QuoteStatus = Literal[
    "draft",
    "sent",
    "accepted",
    "declined",
    "changes_requested",
    "revised",
    "expired",
    "withdrawn",
    "converted",
]

ValidityDuration = Literal["7_days", "14_days", "30_days", "custom"]

QuoteDecision = Literal["accept", "decline", "request_changes"]


class QuoteLineItem(BaseModel):
    service: str = ""
    quantity: float = 1
    hours: float = 1
    rate: float = 0
    # Recomputed from quantity, hours and rate before anything is sent
    subtotal: float = 0


class QuoteForm(BaseModel):
    """Quote builder form as submitted by the vendor"""

    quoteRequestId: str = ""
    lineItems: list[QuoteLineItem] = []
    depositPercent: float = 50
    validityDuration: ValidityDuration = "7_days"
    customExpiryDate: Optional[datetime] = None
    personalMessage: str = ""


class QuoteResponseRequest(BaseModel):
    decision: QuoteDecision
    customerNote: Optional[str] = None
