"""Vendor router - search, nearby and vendor service management"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .schemas import NearbyFilters, UpdateVendorServiceRequest, VendorSearchFilters
from .service import VendorService

router = APIRouter(prefix="/api/vendors", tags=["Vendors"])


def get_vendor_service(backend: BackendClient = Depends(get_backend)) -> VendorService:
    """Dependency injection for VendorService"""
    return VendorService(backend)


@router.get("/search", response_model=ActionResult)
async def search_vendors(
    service_filter: Optional[str] = Query(None, alias="service"),
    specialty: Optional[str] = Query(None),
    sort: Optional[Literal["rating", "relevance"]] = Query(None),
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: VendorService = Depends(get_vendor_service),
):
    filters = VendorSearchFilters(
        service=service_filter, specialty=specialty, sort=sort, q=q, page=page, limit=limit
    )
    return await service.search_vendors(filters)


@router.get("/nearby", response_model=ActionResult)
async def nearby_vendors(
    lat: float = Query(..., ge=-90, le=90),
    long: float = Query(..., ge=-180, le=180),
    max_distance_km: Optional[float] = Query(None, gt=0, alias="maxDistanceKm"),
    service_filter: Optional[str] = Query(None, alias="service"),
    specialty: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: VendorService = Depends(get_vendor_service),
):
    filters = NearbyFilters(
        lat=lat,
        long=long,
        maxDistanceKm=max_distance_km,
        service=service_filter,
        specialty=specialty,
        q=q,
        page=page,
        limit=limit,
    )
    return await service.nearby_vendors(filters)


@router.put("/services/{service_id}", response_model=ActionResult)
async def update_vendor_service(
    service_id: str,
    data: UpdateVendorServiceRequest,
    service: VendorService = Depends(get_vendor_service),
):
    return await service.update_vendor_service(service_id, data)


@router.delete("/services/{service_id}", response_model=ActionResult)
async def delete_vendor_service(service_id: str, service: VendorService = Depends(get_vendor_service)):
    return await service.delete_vendor_service(service_id)
