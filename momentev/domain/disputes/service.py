"""Dispute service - open, list and cancel booking disputes"""

import logging
from typing import Optional

from ...backend import BackendClient
from ...schemas import ActionResult
from ...shared.validators import status_filter
from .schemas import CreateDisputeRequest

logger = logging.getLogger(__name__)


class DisputeService:
    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def create_dispute(self, data: CreateDisputeRequest) -> ActionResult:
        logger.info(f"⚖️ Opening dispute for booking {data.bookingId} ({data.priority})")
        # Backend validation errors read as "field: message"
        result = await self.backend.post(
            "/disputes",
            json=data.model_dump(),
            default_error="Failed to create dispute",
            prefer_field_errors=True,
        )
        if result.success:
            logger.info("✅ Dispute opened")
        return result

    async def list_disputes(self, page: int = 1, limit: int = 10, status: Optional[str] = "all") -> ActionResult:
        return await self.backend.get(
            "/disputes/me",
            params={"page": page, "limit": limit, "status": status_filter(status)},
            default_error="Failed to fetch disputes",
        )

    async def cancel_dispute(self, dispute_id: str) -> ActionResult:
        result = await self.backend.patch(
            f"/disputes/{dispute_id}/cancel", default_error="Failed to cancel dispute"
        )
        if result.success:
            logger.info(f"✅ Dispute {dispute_id} cancelled")
        return result
