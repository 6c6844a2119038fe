"""Payment router - vendor Stripe Connect setup and customer payment methods"""

from fastapi import APIRouter, Depends

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import AddPaymentMethodRequest, PaymentModelRequest
from .service import PaymentService

router = APIRouter(prefix="/api/payments", tags=["Payments"])


def get_payment_service(backend: BackendClient = Depends(get_backend)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(backend)


@router.get("/config", response_model=ActionResult)
async def get_payment_config():
    """Stripe publishable key for Stripe.js"""
    return PaymentService.get_config()


@router.put("/vendor/payment-model", response_model=ActionResult)
async def set_payment_model(data: PaymentModelRequest, service: PaymentService = Depends(get_payment_service)):
    return await service.set_payment_model(data.paymentModel)


@router.post("/vendor/stripe-account", response_model=ActionResult)
async def create_stripe_account(service: PaymentService = Depends(get_payment_service)):
    return await service.create_stripe_account()


@router.post("/vendor/commission/accept", response_model=ActionResult)
async def accept_commission(service: PaymentService = Depends(get_payment_service)):
    return await service.accept_commission()


@router.get("/methods", response_model=ActionResult)
async def get_payment_methods(service: PaymentService = Depends(get_payment_service)):
    return await service.get_payment_methods()


@router.post("/methods", response_model=ActionResult)
async def add_payment_method(data: AddPaymentMethodRequest, service: PaymentService = Depends(get_payment_service)):
    return await service.add_payment_method(data.paymentMethodId)


@router.put("/methods/{payment_method_id}/default", response_model=ActionResult)
async def set_default_payment_method(
    payment_method_id: str, service: PaymentService = Depends(get_payment_service)
):
    return await service.set_default_payment_method(payment_method_id)
