"""Custom request service - create, list and cancel a client's event briefs"""

import logging
from typing import Optional

from ...backend import BackendClient
from ...schemas import ActionResult
from .schemas import CreateCustomRequest

logger = logging.getLogger(__name__)

CUSTOM_REQUEST_STATUSES = ("draft", "pending_approval", "active", "rejected", "cancelled")
CANCELLABLE_STATUSES = {"pending_approval", "active"}


def can_cancel_request(status: Optional[str]) -> bool:
    return status in CANCELLABLE_STATUSES


def decorate_request_list(payload):
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        items = [
            {**item, "canCancel": can_cancel_request(item.get("status"))} if isinstance(item, dict) else item
            for item in payload["data"]
        ]
        return {**payload, "data": items}
    return payload


class CustomRequestService:
    """Service layer for client custom requests"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def create_custom_request(self, data: CreateCustomRequest) -> ActionResult:
        logger.info("📥 Submitting custom request")
        result = await self.backend.post(
            "/custom-requests",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to create custom request",
        )
        if result.success:
            logger.info("✅ Custom request submitted")
        return result

    async def list_customer_requests(self, page: int = 1, limit: int = 10) -> ActionResult:
        result = await self.backend.get(
            "/customer-requests",
            params={"page": page, "limit": limit},
            default_error="Failed to fetch requests",
        )
        if result.success:
            result.data = decorate_request_list(result.data)
        return result

    async def delete_customer_request(self, request_id: str, status: Optional[str] = None) -> ActionResult:
        if status is not None and not can_cancel_request(status):
            return ActionResult.fail("Only pending or active requests can be cancelled")

        result = await self.backend.delete(
            f"/customer-requests/{request_id}", default_error="Failed to delete request"
        )
        if result.success:
            logger.info(f"🗑️ Custom request {request_id} cancelled")
        return result
