"""Quote request service - incoming requests a vendor can quote on"""

import logging
from typing import Optional

from ...backend import BackendClient
from ...schemas import ActionResult
from ...shared.validators import status_filter

logger = logging.getLogger(__name__)

QUOTE_REQUEST_STATUSES = ("new", "responded", "accepted", "completed", "expired", "closed")


class QuoteRequestService:
    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def list_vendor_quote_requests(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ActionResult:
        return await self.backend.get(
            "/quote-requests/vendor/me",
            params={
                "page": page,
                "limit": limit,
                "status": status_filter(status),
                "dateFrom": date_from,
                "dateTo": date_to,
                "search": search,
            },
            default_error="Failed to fetch quote requests",
        )
