"""
Catalog service

Read-only reference data: service categories, specialties, vendor specialties
and events. Successful reads are cached in Redis for a few minutes.
"""

import logging
from typing import Optional

from ...backend import BackendClient
from ...cache import cache, cached
from ...schemas import ActionResult

logger = logging.getLogger(__name__)


def invalidate_vendor_specialties() -> int:
    """Drop cached vendor specialty pages after a vendor edits its services"""
    return cache.delete_pattern("catalog:vendor-specialties:*")


class CatalogService:
    """Service layer for catalogue reads"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    @cached(key_prefix="catalog:categories")
    async def list_service_categories(self, page: int = 1, limit: int = 50) -> ActionResult:
        return await self.backend.get(
            "/service-categories",
            params={"page": page, "limit": limit},
            optional_auth=True,
            unwrap=False,
            default_error="Failed to fetch categories",
        )

    @cached(key_prefix="catalog:category")
    async def get_service_category(self, category_id: str) -> ActionResult:
        return await self.backend.get(
            f"/service-categories/{category_id}",
            optional_auth=True,
            error_messages={404: "Service category not found"},
            default_error="Failed to fetch category",
        )

    @cached(key_prefix="catalog:suggested-tags")
    async def get_suggested_tags(self, category_id: str) -> ActionResult:
        return await self.backend.get(
            f"/service-categories/{category_id}/suggested-tags",
            optional_auth=True,
            default_error="Failed to fetch suggested tags",
        )

    @cached(key_prefix="catalog:specialties-by-category")
    async def list_specialties_by_category(self, category_id: str) -> ActionResult:
        return await self.backend.get(
            f"/service-specialties/by-category/{category_id}",
            optional_auth=True,
            default_error="Failed to fetch specialties",
        )

    @cached(key_prefix="catalog:specialty")
    async def get_service_specialty(self, specialty_id: str) -> ActionResult:
        return await self.backend.get(
            f"/service-specialties/{specialty_id}",
            optional_auth=True,
            error_messages={404: "Service specialty not found"},
            default_error="Failed to fetch specialty",
        )

    @cached(key_prefix="catalog:vendor-specialties")
    async def list_vendor_specialties(
        self, page: int = 1, limit: int = 10, vendor_id: Optional[str] = None
    ) -> ActionResult:
        return await self.backend.get(
            "/vendor-specialties",
            params={"page": page, "limit": limit, "vendorId": vendor_id},
            optional_auth=True,
            unwrap=False,
            default_error="Failed to fetch vendor specialties",
        )

    @cached(key_prefix="catalog:events")
    async def list_events(self) -> ActionResult:
        return await self.backend.get(
            "/events",
            auth=False,
            versioned=False,
            unwrap=False,
            default_error="Failed to fetch events",
        )
