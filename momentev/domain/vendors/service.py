"""
Vendor service

Search and nearby results are mapped from the backend's populated vendor
documents into flat cards for the search page. Search never fails loudly: any
error yields an empty page so the page can still render.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from ...backend import BackendClient
from ...schemas import ActionResult
from ...shared.validators import status_filter
from ..catalog.service import invalidate_vendor_specialties
from .schemas import (
    NearbyFilters,
    RawAddress,
    RawVendor,
    RawVendorPage,
    RawWorkday,
    UpdateVendorServiceRequest,
    VendorCard,
    VendorSearchFilters,
)

logger = logging.getLogger(__name__)

FALLBACK_IMAGE = "https://images.pexels.com/photos/191429/pexels-photo-191429.jpeg?auto=compress&cs=tinysrgb&w=800"
LOCATION_UNAVAILABLE = "Location unavailable"


def format_address(vendor: RawVendor) -> str:
    address: Optional[RawAddress] = None
    if vendor.businessProfile and vendor.businessProfile.contactInfo:
        address = vendor.businessProfile.contactInfo.addressId
    if address is None and vendor.userId:
        address = vendor.userId.addressId
    if address is None:
        return LOCATION_UNAVAILABLE

    parts = [p for p in (address.city, address.state, address.country) if p]
    return ", ".join(parts) if parts else LOCATION_UNAVAILABLE


def format_workdays(workdays: Optional[list[RawWorkday]]) -> Optional[str]:
    """Opening summary such as "Mon - Fri, 09:00 - 17:00" or "3 days/week, Varies" """
    if not workdays:
        return None

    times = {f"{day.open} - {day.close}" for day in workdays}
    time_string = times.pop() if len(times) == 1 else "Varies"
    if len(workdays) >= 5:
        return f"Mon - Fri, {time_string}"
    return f"{len(workdays)} days/week, {time_string}"


def vendor_name(vendor: RawVendor) -> str:
    if vendor.businessProfile and vendor.businessProfile.businessName:
        return vendor.businessProfile.businessName
    user = vendor.userId
    if user and user.firstName and user.lastName:
        return f"{user.firstName} {user.lastName}"
    return "Unknown Vendor"


def _photo_url(photo) -> Optional[str]:
    if isinstance(photo, dict):
        return photo.get("url")
    return photo or None


def vendor_image(vendor: RawVendor) -> str:
    avatar = vendor.userId.avatar.url if vendor.userId and vendor.userId.avatar else None
    return _photo_url(vendor.coverPhoto) or _photo_url(vendor.profilePhoto) or avatar or FALLBACK_IMAGE


def map_vendor_card(vendor: RawVendor) -> VendorCard:
    services = [ref.name for ref in (vendor.serviceCategory, vendor.serviceSpecialty) if ref and ref.name]
    return VendorCard(
        id=vendor.id,
        name=vendor_name(vendor),
        slug=vendor.id,
        serviceCategory=(
            {"_id": vendor.serviceCategory.id, "name": vendor.serviceCategory.name, "description": "", "coverImage": ""}
            if vendor.serviceCategory
            else None
        ),
        serviceSpecialty=(
            {"_id": vendor.serviceSpecialty.id, "name": vendor.serviceSpecialty.name}
            if vendor.serviceSpecialty
            else None
        ),
        rate=vendor.rate,
        totalReviews=vendor.reviewCount,
        coverImage=vendor_image(vendor),
        address=format_address(vendor),
        distanceKm=vendor.distanceKm,
        workdays=format_workdays(vendor.businessProfile.workdays if vendor.businessProfile else None),
        services=services,
    )


def empty_page(page: int, limit: int) -> dict:
    return {"data": [], "total": 0, "page": page, "limit": limit}


def build_card_page(payload, q: Optional[str]) -> dict:
    """Map a raw vendor page to cards; ``q`` narrows by name and resets the total"""
    raw_page = RawVendorPage.model_validate(payload)
    cards = [map_vendor_card(v) for v in raw_page.data]
    total = raw_page.total

    query = (q or "").strip().lower()
    if query:
        cards = [card for card in cards if query in card.name.lower()]
        total = len(cards)

    return {
        "data": [card.model_dump(by_alias=True) for card in cards],
        "total": total,
        "page": raw_page.page,
        "limit": raw_page.limit,
    }


class VendorService:
    """Service layer for vendor discovery and vendor-owned services"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def _search(self, path: str, params: dict, q: Optional[str], page: int, limit: int) -> ActionResult:
        result = await self.backend.get(path, params=params, optional_auth=True, default_error="Failed")
        if not result.success:
            logger.error(f"❌ Vendor search failed: {result.error}")
            return ActionResult.fail(result.error or "Failed", data=empty_page(page, limit))

        try:
            return ActionResult.ok(build_card_page(result.data, q))
        except ValidationError as e:
            logger.error(f"❌ Unexpected vendor search payload: {e.error_count()} errors")
            return ActionResult.fail("Invalid API response", data=empty_page(page, limit))

    async def search_vendors(self, filters: VendorSearchFilters) -> ActionResult:
        params = {
            "service": status_filter(filters.service),
            "specialty": status_filter(filters.specialty),
            "sort": "rate_desc" if filters.sort == "rating" else None,
            "page": filters.page,
            "limit": filters.limit,
        }
        return await self._search("/vendors/search", params, filters.q, filters.page, filters.limit)

    async def nearby_vendors(self, filters: NearbyFilters) -> ActionResult:
        params = {
            "lat": filters.lat,
            "long": filters.long,
            "maxDistanceKm": filters.maxDistanceKm,
            "service": status_filter(filters.service),
            "specialty": status_filter(filters.specialty),
            "page": filters.page,
            "limit": filters.limit,
        }
        return await self._search("/vendors/nearby", params, filters.q, filters.page, filters.limit)

    async def update_vendor_service(self, service_id: str, data: UpdateVendorServiceRequest) -> ActionResult:
        result = await self.backend.put(
            f"/vendor-services/{service_id}",
            json=data.model_dump(exclude_none=True),
            default_error="Failed to update service",
        )
        if result.success:
            invalidate_vendor_specialties()
            logger.info(f"✅ Vendor service {service_id} updated")
        return result

    async def delete_vendor_service(self, service_id: str) -> ActionResult:
        result = await self.backend.delete(
            f"/vendor-services/{service_id}", default_error="Failed to delete service"
        )
        if result.success:
            invalidate_vendor_specialties()
            logger.info(f"🗑️ Vendor service {service_id} deleted")
        return result
