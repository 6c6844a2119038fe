"""
Quote service

Vendors build a quote from line items, save it as a draft, send it, withdraw it
or submit a revision. Customers list the quotes they received and respond.
Totals are always recomputed here from the line items; the browser's own
arithmetic is never forwarded.
"""

import logging
from datetime import timezone
from typing import Optional

from ...backend import BackendClient
from ...schemas import ActionResult
from ...shared.validators import round_money, status_filter
from .schemas import QuoteForm, QuoteLineItem, QuoteResponseRequest

logger = logging.getLogger(__name__)

QUOTE_CURRENCY = "GBP"


def line_item_subtotal(item: QuoteLineItem) -> float:
    return round_money(item.quantity * item.hours * item.rate)


def quote_total(items: list[QuoteLineItem]) -> float:
    return round_money(sum(line_item_subtotal(item) for item in items))


def validate_quote(form: QuoteForm) -> Optional[str]:
    """First problem with the quote form, or None when it can be submitted"""
    if any(not item.service.strip() for item in form.lineItems):
        return "All line items must have a service description."
    if any(item.rate <= 0 for item in form.lineItems):
        return "All line items must have a rate greater than 0."
    if quote_total(form.lineItems) <= 0:
        return "Quote total must be greater than 0."
    if form.depositPercent < 0 or form.depositPercent > 100:
        return "Deposit % must be between 0 and 100."
    if form.validityDuration == "custom" and form.customExpiryDate is None:
        return "Please select a custom expiry date."
    return None


def build_quote_payload(form: QuoteForm, include_request: bool = True) -> dict:
    """Backend quote payload from the builder form"""
    line_items = [
        {
            "service": item.service.strip(),
            "quantity": item.quantity,
            "hours": item.hours,
            "rate": item.rate,
            "subtotal": line_item_subtotal(item),
        }
        for item in form.lineItems
    ]

    payload = {}
    if include_request:
        payload["quoteRequestId"] = form.quoteRequestId
    payload.update(
        {
            "lineItems": line_items,
            "currency": QUOTE_CURRENCY,
            "total": quote_total(form.lineItems),
            "paymentTerms": {
                "depositPercent": form.depositPercent,
                "balancePercent": 100 - form.depositPercent,
            },
            "validityDuration": form.validityDuration,
        }
    )

    if form.validityDuration == "custom" and form.customExpiryDate is not None:
        expiry = form.customExpiryDate
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        payload["customExpiryDate"] = expiry.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

    message = form.personalMessage.strip()
    if message:
        payload["personalMessage"] = message

    return payload


class QuoteService:
    """Service layer for vendor and customer quote operations"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    # ------------------------------------------------------------------
    # Vendor
    # ------------------------------------------------------------------

    async def create_draft(self, form: QuoteForm) -> ActionResult:
        if not form.quoteRequestId:
            return ActionResult.fail("No request selected.")
        error = validate_quote(form)
        if error:
            return ActionResult.fail(error)

        logger.info(f"📝 Saving quote draft for request {form.quoteRequestId}")
        return await self.backend.post(
            "/quotes/drafts", json=build_quote_payload(form), default_error="Failed to save draft"
        )

    async def update_draft(self, quote_id: str, form: QuoteForm) -> ActionResult:
        error = validate_quote(form)
        if error:
            return ActionResult.fail(error)

        return await self.backend.patch(
            f"/quotes/drafts/{quote_id}",
            json=build_quote_payload(form, include_request=False),
            default_error="Failed to save draft",
        )

    async def send_quote(self, quote_id: str) -> ActionResult:
        result = await self.backend.post(f"/quotes/{quote_id}/send", default_error="Failed to send quote")
        if result.success:
            logger.info(f"✅ Quote {quote_id} sent")
        return result

    async def save_and_send(self, form: QuoteForm, draft_id: Optional[str] = None) -> ActionResult:
        """Send a quote, creating the draft first when it has not been saved yet"""
        if not draft_id:
            created = await self.create_draft(form)
            if not created.success:
                return created
            draft_id = created.data.get("_id") if isinstance(created.data, dict) else None
            if not draft_id:
                return ActionResult.fail("Failed to create quote draft.")
        return await self.send_quote(draft_id)

    async def withdraw_quote(self, quote_id: str) -> ActionResult:
        result = await self.backend.post(f"/quotes/{quote_id}/withdraw", default_error="Failed to withdraw quote")
        if result.success:
            logger.info(f"↩️ Quote {quote_id} withdrawn")
        return result

    async def revise_quote(self, quote_id: str, form: QuoteForm) -> ActionResult:
        error = validate_quote(form)
        if error:
            return ActionResult.fail(error)

        return await self.backend.post(
            f"/quotes/{quote_id}/revise",
            json=build_quote_payload(form, include_request=False),
            default_error="Failed to submit revision",
        )

    async def list_vendor_quotes(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        quote_request_id: Optional[str] = None,
    ) -> ActionResult:
        return await self.backend.get(
            "/quotes/vendor/me",
            params={
                "page": page,
                "limit": limit,
                "status": status_filter(status),
                "quoteRequestId": quote_request_id,
            },
            default_error="Failed to fetch quotes",
        )

    # ------------------------------------------------------------------
    # Customer
    # ------------------------------------------------------------------

    async def list_customer_quotes(
        self, page: int = 1, limit: int = 10, status: Optional[str] = None
    ) -> ActionResult:
        return await self.backend.get(
            "/quotes/me",
            params={"page": page, "limit": limit, "status": status_filter(status)},
            default_error="Failed to fetch quotes",
        )

    async def respond_to_quote(self, quote_id: str, data: QuoteResponseRequest) -> ActionResult:
        result = await self.backend.post(
            f"/quotes/{quote_id}/respond",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to respond to quote",
        )
        if result.success:
            logger.info(f"✅ Quote {quote_id} answered: {data.decision}")
        return result
