"""
Vendor onboarding service

Step 1 creates the business profile (with its address), step 2 the vendor
service and one vendor specialty per selected specialty, step 4 publishes the
profile media and marks onboarding complete.
"""

import asyncio
import logging
from typing import Optional

from ...backend import BackendClient
from ...schemas import ActionResult
from ..catalog.service import invalidate_vendor_specialties
from ..users.schemas import CreateAddressRequest
from ..users.service import VENDOR_PROFILE_NOT_FOUND, UserService
from .schemas import (
    WEEKDAYS,
    BusinessInfoForm,
    PricingStructureForm,
    ProfileCompletionForm,
    ServiceCategoriesForm,
)

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "NG"
ONBOARDING_COMPLETE_STAGE = 4

TRANSPORT_FEES = {
    "flat_50": ("Transport Fee (Flat)", "50"),
    "per_mile_1": ("Transport Fee (Per Mile)", "1"),
}


def build_business_profile_payload(
    form: BusinessInfoForm, vendor_id: str, address_id: Optional[str] = None
) -> dict:
    workdays = [
        {"dayOfWeek": day, "open": form.workingHoursStart, "close": form.workingHoursEnd}
        for day in WEEKDAYS
        if getattr(form.workingDays, day)
    ]

    documents = form.documents
    business_documents = []
    if documents:
        for doc_name, file_ids in (
            ("Identification", documents.identification),
            ("Registration", documents.registration),
            ("License", documents.license),
        ):
            business_documents.extend({"docName": doc_name, "file": file_id} for file_id in file_ids)

    contact_info = {
        "primaryContactName": form.primaryContactName,
        "emailAddress": form.emailAddress,
        "phoneNumber": form.phoneNumber,
        "meansOfIdentification": form.meansOfIdentification,
    }
    if address_id:
        contact_info["addressId"] = address_id

    payload = {
        "vendorId": vendor_id,
        "contactInfo": contact_info,
        "businessName": form.businessName,
        "yearInBusiness": form.yearsInBusiness,
        "companyRegNo": form.companyRegistrationNumber,
        "businessRegType": form.businessRegistrationType,
        "businessDescription": form.businessDescription,
        "serviceArea": {
            "travelDistance": f"{form.maximumTravelDistance}km",
            "areaNames": [
                {
                    "city": location.city.lower(),
                    "state": location.state.lower(),
                    "country": location.country or DEFAULT_COUNTRY,
                }
                for location in form.serviceLocations
            ],
        },
        "workdays": workdays,
    }
    if business_documents:
        payload["businessDocuments"] = business_documents
    return payload


def build_additional_fees(pricing: PricingStructureForm) -> list[dict]:
    transport = pricing.transportFee
    if transport.type == "custom":
        name, price = "Transport Fee (Custom)", transport.amount or "0"
    else:
        name, price = TRANSPORT_FEES[transport.type]

    fees = [{"name": name, "price": price, "feeCategory": "travel"}]
    fees += [{"name": fee.name, "price": fee.price, "feeCategory": fee.category} for fee in pricing.additionalFees]
    return fees


def build_vendor_service_payload(
    vendor_id: str, service: ServiceCategoriesForm, pricing: PricingStructureForm
) -> dict:
    payload = {
        "vendorId": vendor_id,
        "serviceCategory": service.serviceCategory,
        "tags": service.keywords,
        "minimumBookingDuration": service.minimumBookingDuration,
        "leadTimeRequired": service.leadTimeRequired,
        "maximumEventSize": service.maximumEventSize,
    }
    fees = build_additional_fees(pricing)
    if fees:
        payload["additionalFees"] = fees
    return payload


def build_specialty_payload(vendor_id: str, specialty_id: str, pricing: PricingStructureForm) -> dict:
    if pricing.pricingType == "hourly":
        price_charge, price = "hourly_rate", pricing.hourlyRate or "0"
    else:
        price_charge, price = "custom_quote", "0"
    return {
        "vendorId": vendor_id,
        "serviceSpecialty": specialty_id,
        "priceCharge": price_charge,
        "price": price,
    }


def format_validation_errors(field_errors: Optional[dict[str, list[str]]]) -> Optional[str]:
    """ "Validation failed: field: a, b; other: c" or None without field errors"""
    if not field_errors:
        return None
    details = "; ".join(f"{field}: {', '.join(messages)}" for field, messages in field_errors.items())
    return f"Validation failed: {details}"


class VendorSetupService:
    """Service layer for the vendor onboarding steps"""

    def __init__(self, backend: BackendClient):
        self.backend = backend
        self.users = UserService(backend)

    async def submit_business_information(self, form: BusinessInfoForm) -> ActionResult:
        vendor_id = await self.users.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail("No vendor ID found. Please ensure you have a vendor account.")

        address_id = None
        if form.has_address():
            address = await self.users.create_address(
                CreateAddressRequest(
                    street=form.street or "",
                    city=form.city or "",
                    state=form.state or "",
                    postalCode=form.postalCode or "",
                    country=form.country or DEFAULT_COUNTRY,
                )
            )
            if address.success and isinstance(address.data, dict):
                address_id = address.data.get("_id")
                logger.info(f"✅ Business address created: {address_id}")
            else:
                # The profile can be completed without an address
                logger.warning(f"⚠️ Business address creation failed: {address.error}")

        logger.info(f"📤 Submitting business profile for vendor {vendor_id}")
        result = await self.backend.post(
            "/business-profiles",
            json=build_business_profile_payload(form, vendor_id, address_id),
            error_messages={409: "Conflict error: Resource already exists"},
            default_error="Failed to submit business information",
        )
        if result.success:
            logger.info(f"✅ Business profile saved for vendor {vendor_id}")
        return result

    async def submit_service_setup(
        self, service: ServiceCategoriesForm, pricing: PricingStructureForm
    ) -> ActionResult:
        vendor_id = await self.users.get_vendor_id()
        if not vendor_id:
            return ActionResult.fail(VENDOR_PROFILE_NOT_FOUND)

        created = await self.backend.post(
            "/vendor-services",
            json=build_vendor_service_payload(vendor_id, service, pricing),
            default_error="Failed to create service",
        )
        if not created.success:
            detailed = format_validation_errors(created.fieldErrors)
            if detailed:
                created.error = detailed
            logger.error(f"❌ Vendor service creation failed: {created.error}")
            return created

        logger.info(f"📤 Creating {len(service.specialties)} vendor specialties")
        results = await asyncio.gather(
            *[
                self.backend.post(
                    "/vendor-specialties",
                    json=build_specialty_payload(vendor_id, specialty_id, pricing),
                    default_error="Failed to create specialty",
                )
                for specialty_id in service.specialties
            ]
        )
        invalidate_vendor_specialties()

        for specialty_id, result in zip(service.specialties, results):
            if not result.success:
                logger.error(f"❌ Failed to create specialty {specialty_id}: {result.error}")
                return ActionResult.fail(result.error or "Failed to create specialty")

        logger.info(f"✅ Service setup complete for vendor {vendor_id}")
        return ActionResult.ok(created.data)

    async def submit_vendor_profile(self, form: ProfileCompletionForm) -> ActionResult:
        payload = {
            "profilePhoto": form.profilePhoto,
            "coverPhoto": form.coverPhoto,
            "portfolioGallery": form.portfolioGallery,
            "isActive": True,
            "onBoardingStage": ONBOARDING_COMPLETE_STAGE,
        }
        if form.socialMediaLinks is not None:
            payload["socialMediaLinks"] = [link.model_dump() for link in form.socialMediaLinks]

        result = await self.backend.patch(
            "/vendors/me", json=payload, default_error="Failed to submit vendor profile"
        )
        if result.success:
            logger.info("✅ Vendor onboarding complete")
        return result
