"""Vendor onboarding router"""

from fastapi import APIRouter, Depends

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import BusinessInfoForm, ProfileCompletionForm, ServiceSetupRequest
from .service import VendorSetupService

router = APIRouter(prefix="/api/vendor-setup", tags=["Vendor Setup"])


def get_vendor_setup_service(backend: BackendClient = Depends(get_backend)) -> VendorSetupService:
    """Dependency injection for VendorSetupService"""
    return VendorSetupService(backend)


@router.post("/business-information", response_model=ActionResult)
async def submit_business_information(
    form: BusinessInfoForm, service: VendorSetupService = Depends(get_vendor_setup_service)
):
    return await service.submit_business_information(form)


@router.post("/services", response_model=ActionResult)
async def submit_service_setup(
    data: ServiceSetupRequest, service: VendorSetupService = Depends(get_vendor_setup_service)
):
    return await service.submit_service_setup(data.service, data.pricing)


@router.patch("/profile", response_model=ActionResult)
async def submit_vendor_profile(
    form: ProfileCompletionForm, service: VendorSetupService = Depends(get_vendor_setup_service)
):
    return await service.submit_vendor_profile(form)
