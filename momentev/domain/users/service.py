"""User service - profile, account, vendor staff, addresses and client reviews"""

import logging
from typing import Optional

from fastapi import Response

from ...backend import BackendClient
from ...schemas import ActionResult
from ...session import clear_auth_cookies
from .schemas import (
    AddVendorStaffRequest,
    CreateAddressRequest,
    UpdateAddressRequest,
    UpdateProfileRequest,
    UpdateVendorStaffRequest,
)

logger = logging.getLogger(__name__)

VENDOR_PROFILE_NOT_FOUND = "Vendor profile not found"


def flatten_profile(profile):
    """Collapse a populated ``vendor.userId`` back to the plain user id"""
    if not isinstance(profile, dict):
        return profile

    vendor = profile.get("vendor")
    if isinstance(vendor, dict) and isinstance(vendor.get("userId"), dict):
        user_ref = vendor["userId"]
        profile = {**profile, "vendor": {**vendor, "userId": user_ref.get("_id") or user_ref.get("id")}}
    return profile


class UserService:
    """Service layer for the signed-in user's own records"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def get_profile(self) -> ActionResult:
        result = await self.backend.get("/users/profile", default_error="Failed to fetch profile")
        if result.success:
            result.data = flatten_profile(result.data)
        return result

    async def update_profile(self, data: UpdateProfileRequest) -> ActionResult:
        return await self.backend.put(
            "/users/profile/update",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to update profile",
        )

    async def delete_account(self, response: Response) -> ActionResult:
        result = await self.backend.delete("/users/profile", default_error="Failed to delete account")
        if result.success:
            clear_auth_cookies(response)
            logger.info("🗑️ Account deleted, session cleared")
        return result

    async def get_vendor_id(self) -> Optional[str]:
        """Vendor document id of the signed-in vendor, from the profile"""
        profile = await self.get_profile()
        if not profile.success or not isinstance(profile.data, dict):
            return None
        vendor = profile.data.get("vendor")
        if isinstance(vendor, dict):
            return vendor.get("_id")
        return None

    async def get_customer_id(self) -> Optional[str]:
        profile = await self.get_profile()
        if not profile.success or not isinstance(profile.data, dict):
            return None
        return profile.data.get("_id") or profile.data.get("id")

    # ------------------------------------------------------------------
    # Vendor staff
    # ------------------------------------------------------------------

    async def get_vendor_permissions(self) -> ActionResult:
        return await self.backend.get("/vendors/permissions", default_error="Failed to fetch permissions")

    async def add_vendor_staff(self, data: AddVendorStaffRequest) -> ActionResult:
        vendor_id = await self.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)

        logger.info(f"📥 Adding staff member to vendor {vendor_id}")
        return await self.backend.post(
            f"/vendors/{vendor_id}/staff",
            json=data.model_dump(),
            default_error="Failed to add staff member",
        )

    async def get_vendor_staff(self) -> ActionResult:
        vendor_id = await self.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)
        return await self.backend.get(f"/vendors/{vendor_id}/staff", default_error="Failed to fetch staff")

    async def update_vendor_staff(self, staff_id: str, data: UpdateVendorStaffRequest) -> ActionResult:
        vendor_id = await self.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)
        return await self.backend.patch(
            f"/vendors/{vendor_id}/staff/{staff_id}",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to update staff member",
        )

    async def delete_vendor_staff(self, staff_id: str) -> ActionResult:
        vendor_id = await self.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)
        return await self.backend.delete(
            f"/vendors/{vendor_id}/staff/{staff_id}", default_error="Failed to delete staff member"
        )

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    async def get_address(self, address_id: str) -> ActionResult:
        return await self.backend.get(f"/addresses/{address_id}", default_error="Failed to fetch address")

    async def create_address(self, data: CreateAddressRequest) -> ActionResult:
        return await self.backend.post(
            "/addresses",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to create address",
        )

    async def update_address(self, address_id: str, data: UpdateAddressRequest) -> ActionResult:
        return await self.backend.patch(
            f"/addresses/{address_id}",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to update address",
        )

    # ------------------------------------------------------------------
    # Reviews left by the client
    # ------------------------------------------------------------------

    async def get_client_reviews(self, page: int = 1, limit: int = 20) -> ActionResult:
        customer_id = await self.get_customer_id()
        if not customer_id:
            return ActionResult.fail("Customer profile not found")
        return await self.backend.get(
            f"/customer-profile-management/{customer_id}/reviews",
            params={"page": page, "limit": limit},
            default_error="Failed to fetch reviews",
        )
