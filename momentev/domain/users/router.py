"""User router - profile, vendor staff and address endpoints"""

import logging

from fastapi import APIRouter, Depends, Query, Response

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import (
    AddVendorStaffRequest,
    CreateAddressRequest,
    UpdateAddressRequest,
    UpdateProfileRequest,
    UpdateVendorStaffRequest,
)
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


def get_user_service(backend: BackendClient = Depends(get_backend)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(backend)


# ============================================================================
# PROFILE
# ============================================================================


@router.get("/users/profile", response_model=ActionResult)
async def get_profile(service: UserService = Depends(get_user_service)):
    return await service.get_profile()


@router.put("/users/profile", response_model=ActionResult)
async def update_profile(data: UpdateProfileRequest, service: UserService = Depends(get_user_service)):
    return await service.update_profile(data)


@router.delete("/users/profile", response_model=ActionResult)
async def delete_account(response: Response, service: UserService = Depends(get_user_service)):
    return await service.delete_account(response)


@router.get("/users/reviews", response_model=ActionResult)
async def get_client_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: UserService = Depends(get_user_service),
):
    return await service.get_client_reviews(page, limit)


# ============================================================================
# VENDOR STAFF
# ============================================================================


@router.get("/vendor/permissions", response_model=ActionResult)
async def get_vendor_permissions(service: UserService = Depends(get_user_service)):
    return await service.get_vendor_permissions()


@router.get("/vendor/staff", response_model=ActionResult)
async def get_vendor_staff(service: UserService = Depends(get_user_service)):
    return await service.get_vendor_staff()


@router.post("/vendor/staff", response_model=ActionResult)
async def add_vendor_staff(data: AddVendorStaffRequest, service: UserService = Depends(get_user_service)):
    return await service.add_vendor_staff(data)


@router.patch("/vendor/staff/{staff_id}", response_model=ActionResult)
async def update_vendor_staff(
    staff_id: str, data: UpdateVendorStaffRequest, service: UserService = Depends(get_user_service)
):
    return await service.update_vendor_staff(staff_id, data)


@router.delete("/vendor/staff/{staff_id}", response_model=ActionResult)
async def delete_vendor_staff(staff_id: str, service: UserService = Depends(get_user_service)):
    return await service.delete_vendor_staff(staff_id)


# ============================================================================
# ADDRESSES
# ============================================================================


@router.get("/addresses/{address_id}", response_model=ActionResult)
async def get_address(address_id: str, service: UserService = Depends(get_user_service)):
    return await service.get_address(address_id)


@router.post("/addresses", response_model=ActionResult)
async def create_address(data: CreateAddressRequest, service: UserService = Depends(get_user_service)):
    return await service.create_address(data)


@router.patch("/addresses/{address_id}", response_model=ActionResult)
async def update_address(
    address_id: str, data: UpdateAddressRequest, service: UserService = Depends(get_user_service)
):
    return await service.update_address(address_id, data)
