"""Catalog router - public reference data"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...backend import BackendClient, get_backend
from ...schemas import ActionResult
from .service import CatalogService

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])


def get_catalog_service(backend: BackendClient = Depends(get_backend)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(backend)


@router.get("/service-categories", response_model=ActionResult)
async def list_service_categories(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.list_service_categories(page, limit)


@router.get("/service-categories/{category_id}", response_model=ActionResult)
async def get_service_category(category_id: str, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_service_category(category_id)


@router.get("/service-categories/{category_id}/suggested-tags", response_model=ActionResult)
async def get_suggested_tags(category_id: str, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_suggested_tags(category_id)


@router.get("/service-categories/{category_id}/specialties", response_model=ActionResult)
async def list_specialties_by_category(category_id: str, service: CatalogService = Depends(get_catalog_service)):
    return await service.list_specialties_by_category(category_id)


@router.get("/service-specialties/{specialty_id}", response_model=ActionResult)
async def get_service_specialty(specialty_id: str, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_service_specialty(specialty_id)


@router.get("/vendor-specialties", response_model=ActionResult)
async def list_vendor_specialties(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    vendor_id: Optional[str] = Query(None, alias="vendorId"),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.list_vendor_specialties(page, limit, vendor_id)


@router.get("/events", response_model=ActionResult)
async def list_events(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_events()
