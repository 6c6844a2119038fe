"""
Payment service

Vendor side: Stripe Connect onboarding (payment model, connected account,
commission agreement). Customer side: saved payment methods. Cards themselves
are collected by Stripe.js in the browser; only payment method ids pass through.
"""

import logging

from ...backend import BackendClient
from ...config import STRIPE_PUBLISHABLE_KEY
from ...schemas import ActionResult
from ..users.service import VENDOR_PROFILE_NOT_FOUND, UserService
from .schemas import CommissionAgreement, PaymentConfigResponse

logger = logging.getLogger(__name__)

CUSTOMER_PROFILE_NOT_FOUND = "Customer profile not found"
UNKNOWN_STRIPE_ACCOUNT = "unknown_id"


class PaymentService:
    """Service layer for payment operations"""

    def __init__(self, backend: BackendClient):
        self.backend = backend
        self.users = UserService(backend)

    # ------------------------------------------------------------------
    # Vendor payouts
    # ------------------------------------------------------------------

    async def set_payment_model(self, payment_model: str) -> ActionResult:
        vendor_id = await self.users.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)

        result = await self.backend.put(
            f"/vendors/{vendor_id}/payment-model",
            json={"paymentModel": payment_model},
            default_error="Failed to set payment model",
        )
        if result.success:
            logger.info(f"✅ Vendor {vendor_id} payment model set to {payment_model}")
        return result

    async def create_stripe_account(self) -> ActionResult:
        vendor_id = await self.users.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)

        result = await self.backend.post(
            f"/vendors/{vendor_id}/stripe-account",
            json={},
            default_error="Failed to create Stripe account",
        )
        if not result.success:
            return result

        account_id = None
        if isinstance(result.data, dict):
            account_id = result.data.get("stripeAccountId")
        if not account_id:
            logger.warning(f"⚠️ Stripe account response for vendor {vendor_id} had no account id")
        logger.info(f"✅ Stripe account created for vendor {vendor_id}")
        return ActionResult.ok(
            {"stripeAccountId": account_id or UNKNOWN_STRIPE_ACCOUNT}, message=result.message
        )

    async def accept_commission(self) -> ActionResult:
        vendor_id = await self.users.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)

        result = await self.backend.post(
            f"/vendors/{vendor_id}/commission-agreement/accept",
            json=CommissionAgreement().model_dump(),
            default_error="Failed to accept commission agreement",
        )
        if result.success:
            logger.info(f"✅ Vendor {vendor_id} accepted the commission agreement")
        return result

    # ------------------------------------------------------------------
    # Customer payment methods
    # ------------------------------------------------------------------

    async def get_payment_methods(self) -> ActionResult:
        customer_id = await self.users.get_customer_id()
        if not customer_id:
            return ActionResult.fail(CUSTOMER_PROFILE_NOT_FOUND)
        return await self.backend.get(
            f"/customers/{customer_id}/payment-methods", default_error="Failed to fetch payment methods"
        )

    async def add_payment_method(self, payment_method_id: str) -> ActionResult:
        customer_id = await self.users.get_customer_id()
        if not customer_id:
            return ActionResult.fail(CUSTOMER_PROFILE_NOT_FOUND)
        return await self.backend.post(
            f"/customers/{customer_id}/payment-methods",
            json={"paymentMethodId": payment_method_id},
            default_error="Failed to add payment method",
        )

    async def set_default_payment_method(self, payment_method_id: str) -> ActionResult:
        customer_id = await self.users.get_customer_id()
        if not customer_id:
            return ActionResult.fail(CUSTOMER_PROFILE_NOT_FOUND)
        return await self.backend.put(
            f"/customers/{customer_id}/payment-methods/{payment_method_id}/default",
            json={},
            default_error="Failed to set default payment method",
        )

    @staticmethod
    def get_config() -> ActionResult:
        if not STRIPE_PUBLISHABLE_KEY:
            return ActionResult.fail("Stripe is not configured")
        return ActionResult.ok(PaymentConfigResponse(publishableKey=STRIPE_PUBLISHABLE_KEY).model_dump())
