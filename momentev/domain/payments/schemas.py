"""Payment schemas - vendor payout setup and customer payment methods"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import require_text

PaymentModel = Literal["upfront_payout", "split_payout"]


class PaymentModelRequest(BaseModel):
    paymentModel: PaymentModel


class CommissionAgreement(BaseModel):
    """Terms a vendor accepts during onboarding"""

    version: str = "v1"
    commissionType: str = "percentage"
    commissionAmount: float = 10
    currency: str = "GBP"


class AddPaymentMethodRequest(BaseModel):
    paymentMethodId: str

    @field_validator("paymentMethodId")
    @classmethod
    def validate_payment_method(cls, v):
        return require_text(v, "Payment method is required")


class PaymentConfigResponse(BaseModel):
    publishableKey: Optional[str] = None
