"""Tests for vendor onboarding: payload transformation and the setup routes."""

from __future__ import annotations

import json

import httpx
import pytest
from httpx import AsyncClient
from pydantic import ValidationError
from respx import MockRouter

from momentev.domain.vendor_setup.schemas import (
    BusinessInfoForm,
    PricingStructureForm,
    ProfileCompletionForm,
    ServiceCategoriesForm,
)
from momentev.domain.vendor_setup.service import (
    build_additional_fees,
    build_business_profile_payload,
    build_specialty_payload,
    build_vendor_service_payload,
    format_validation_errors,
)

from .conftest import BACKEND

PROFILE = {"data": {"_id": "u1", "vendor": {"_id": "vend1", "userId": {"_id": "u1"}}}}


def _business_form(**overrides) -> dict:
    form = {
        "businessName": "Bright Lights",
        "yearsInBusiness": "3-5",
        "companyRegistrationNumber": "RC123456",
        "businessRegistrationType": "limited_company",
        "businessDescription": "Event lighting",
        "primaryContactName": "Ada Lovelace",
        "emailAddress": "Ada@Bright.test",
        "phoneNumber": "+234 803 123 4567",
        "meansOfIdentification": "passport",
        "street": "1 Marina",
        "city": "Lagos",
        "serviceLocations": [{"city": "Ikeja", "state": "Lagos"}, {"city": "Abuja", "state": "FCT", "country": "NG"}],
        "maximumTravelDistance": "50",
        "workingDays": {"monday": True, "wednesday": True, "saturday": True},
        "workingHoursStart": "09:00",
        "workingHoursEnd": "18:00",
        "documents": {"identification": ["f1"], "registration": [], "license": ["f2", "f3"]},
    }
    form.update(overrides)
    return form


def _pricing(**overrides) -> PricingStructureForm:
    values = {
        "pricingType": "hourly",
        "hourlyRate": "120",
        "transportFee": {"type": "flat_50"},
        "additionalFees": [{"name": "Overtime", "category": "time", "price": "40"}],
        **overrides,
    }
    return PricingStructureForm(**values)


class TestBusinessInfo:
    def test_payload_transformation(self):
        form = BusinessInfoForm(**_business_form())

        payload = build_business_profile_payload(form, "vend1", "addr1")

        assert payload["vendorId"] == "vend1"
        assert payload["yearInBusiness"] == "3-5"
        assert payload["companyRegNo"] == "RC123456"
        assert payload["businessRegType"] == "limited_company"
        assert payload["contactInfo"] == {
            "primaryContactName": "Ada Lovelace",
            "emailAddress": "ada@bright.test",
            "phoneNumber": "+2348031234567",
            "meansOfIdentification": "passport",
            "addressId": "addr1",
        }
        assert payload["serviceArea"] == {
            "travelDistance": "50km",
            "areaNames": [
                {"city": "ikeja", "state": "lagos", "country": "NG"},
                {"city": "abuja", "state": "fct", "country": "NG"},
            ],
        }
        assert payload["workdays"] == [
            {"dayOfWeek": day, "open": "09:00", "close": "18:00"} for day in ("monday", "wednesday", "saturday")
        ]
        assert payload["businessDocuments"] == [
            {"docName": "Identification", "file": "f1"},
            {"docName": "License", "file": "f2"},
            {"docName": "License", "file": "f3"},
        ]

    def test_no_documents_no_address(self):
        form = BusinessInfoForm(**_business_form(documents=None))

        payload = build_business_profile_payload(form, "vend1")

        assert "businessDocuments" not in payload
        assert "addressId" not in payload["contactInfo"]

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"businessName": "A"}, "Business name must be at least 2 characters"),
            ({"phoneNumber": "0803 123 4567"}, "Please enter a valid international phone number"),
            ({"serviceLocations": []}, "Please add at least one service location"),
            ({"businessDescription": "x" * 501}, "Business description must not exceed 500 characters"),
        ],
    )
    def test_validation(self, overrides, message):
        with pytest.raises(ValidationError, match=message):
            BusinessInfoForm(**_business_form(**overrides))


class TestServiceSetupPayloads:
    def test_flat_transport_fee_comes_first(self):
        assert build_additional_fees(_pricing()) == [
            {"name": "Transport Fee (Flat)", "price": "50", "feeCategory": "travel"},
            {"name": "Overtime", "price": "40", "feeCategory": "time"},
        ]

    def test_per_mile_and_custom_fees(self):
        per_mile = build_additional_fees(_pricing(transportFee={"type": "per_mile_1"}, additionalFees=[]))
        custom = build_additional_fees(_pricing(transportFee={"type": "custom", "amount": "75"}, additionalFees=[]))

        assert per_mile == [{"name": "Transport Fee (Per Mile)", "price": "1", "feeCategory": "travel"}]
        assert custom == [{"name": "Transport Fee (Custom)", "price": "75", "feeCategory": "travel"}]

    def test_custom_fee_needs_amount(self):
        with pytest.raises(ValidationError, match="Please enter the custom amount"):
            _pricing(transportFee={"type": "custom"})

    def test_hourly_needs_rate(self):
        with pytest.raises(ValidationError, match="Please enter your hourly rate"):
            _pricing(hourlyRate=None)

    def test_specialty_pricing(self):
        assert build_specialty_payload("vend1", "sp1", _pricing()) == {
            "vendorId": "vend1",
            "serviceSpecialty": "sp1",
            "priceCharge": "hourly_rate",
            "price": "120",
        }
        assert build_specialty_payload("vend1", "sp1", _pricing(pricingType="custom"))["priceCharge"] == "custom_quote"

    def test_vendor_service_payload(self):
        service = ServiceCategoriesForm(
            serviceCategory="cat1",
            specialties=["sp1"],
            minimumBookingDuration="2h",
            leadTimeRequired="1w",
            maximumEventSize="500",
            keywords=["uplighting"],
        )

        payload = build_vendor_service_payload("vend1", service, _pricing())

        assert payload["tags"] == ["uplighting"]
        assert payload["additionalFees"][0]["name"] == "Transport Fee (Flat)"

    def test_validation_error_formatting(self):
        assert format_validation_errors({"tags": ["Too many", "Too long"], "vendorId": ["Required"]}) == (
            "Validation failed: tags: Too many, Too long; vendorId: Required"
        )
        assert format_validation_errors(None) is None


class TestProfileCompletion:
    def test_gallery_needs_five_photos(self):
        with pytest.raises(ValidationError, match="at least 5 portfolio photos"):
            ProfileCompletionForm(profilePhoto="p", coverPhoto="c", portfolioGallery=["1", "2"])

    def test_at_most_five_links(self):
        links = [{"name": f"site{i}", "link": f"https://site{i}.test"} for i in range(6)]
        with pytest.raises(ValidationError, match="up to 5 links"):
            ProfileCompletionForm(profilePhoto="p", coverPhoto="c", portfolioGallery=list("12345"), socialMediaLinks=links)


class TestSetupRoutes:
    @pytest.mark.asyncio
    async def test_business_information_creates_address_first(
        self, vendor_client: AsyncClient, respx_mock: MockRouter
    ):
        respx_mock.get(f"{BACKEND}/users/profile").mock(return_value=httpx.Response(200, json=PROFILE))
        address = respx_mock.post(f"{BACKEND}/addresses").mock(
            return_value=httpx.Response(201, json={"data": {"_id": "addr1"}})
        )
        profile = respx_mock.post(f"{BACKEND}/business-profiles").mock(
            return_value=httpx.Response(201, json={"data": {"_id": "bp1"}})
        )

        response = await vendor_client.post("/api/vendor-setup/business-information", json=_business_form())

        assert response.json()["success"] is True
        assert json.loads(address.calls.last.request.content)["country"] == "NG"
        assert json.loads(profile.calls.last.request.content)["contactInfo"]["addressId"] == "addr1"

    @pytest.mark.asyncio
    async def test_address_failure_is_not_fatal(self, vendor_client: AsyncClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/users/profile").mock(return_value=httpx.Response(200, json=PROFILE))
        respx_mock.post(f"{BACKEND}/addresses").mock(return_value=httpx.Response(500))
        profile = respx_mock.post(f"{BACKEND}/business-profiles").mock(
            return_value=httpx.Response(201, json={"data": {"_id": "bp1"}})
        )

        response = await vendor_client.post("/api/vendor-setup/business-information", json=_business_form())

        assert response.json()["success"] is True
        assert "addressId" not in json.loads(profile.calls.last.request.content)["contactInfo"]

    @pytest.mark.asyncio
    async def test_business_information_needs_vendor(self, vendor_client: AsyncClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/users/profile").mock(
            return_value=httpx.Response(200, json={"data": {"_id": "u1"}})
        )

        response = await vendor_client.post("/api/vendor-setup/business-information", json=_business_form())

        assert response.json()["error"] == "No vendor ID found. Please ensure you have a vendor account."

    @pytest.mark.asyncio
    async def test_service_setup_creates_each_specialty(self, vendor_client: AsyncClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/users/profile").mock(return_value=httpx.Response(200, json=PROFILE))
        respx_mock.post(f"{BACKEND}/vendor-services").mock(
            return_value=httpx.Response(201, json={"data": {"_id": "vs1"}})
        )
        specialties = respx_mock.post(f"{BACKEND}/vendor-specialties").mock(
            return_value=httpx.Response(201, json={"data": {}})
        )

        response = await vendor_client.post(
            "/api/vendor-setup/services",
            json={
                "service": {
                    "serviceCategory": "cat1",
                    "specialties": ["sp1", "sp2"],
                    "minimumBookingDuration": "2h",
                    "leadTimeRequired": "1w",
                    "maximumEventSize": "500",
                },
                "pricing": {"pricingType": "custom", "transportFee": {"type": "flat_50"}},
            },
        )

        assert response.json() == {
            "success": True,
            "data": {"_id": "vs1"},
            "error": None,
            "message": None,
            "fieldErrors": None,
            "redirectTo": None,
        }
        assert specialties.call_count == 2
        sent = sorted(json.loads(call.request.content)["serviceSpecialty"] for call in specialties.calls)
        assert sent == ["sp1", "sp2"]

    @pytest.mark.asyncio
    async def test_service_setup_reports_field_errors(self, vendor_client: AsyncClient, respx_mock: MockRouter):
        respx_mock.get(f"{BACKEND}/users/profile").mock(return_value=httpx.Response(200, json=PROFILE))
        respx_mock.post(f"{BACKEND}/vendor-services").mock(
            return_value=httpx.Response(
                400,
                json={"message": "Bad request", "errors": {"body": {"fieldErrors": {"tags": ["Too many tags"]}}}},
            )
        )

        response = await vendor_client.post(
            "/api/vendor-setup/services",
            json={
                "service": {
                    "serviceCategory": "cat1",
                    "specialties": ["sp1"],
                    "minimumBookingDuration": "2h",
                    "leadTimeRequired": "1w",
                    "maximumEventSize": "500",
                },
                "pricing": {"pricingType": "hourly", "hourlyRate": "80", "transportFee": {"type": "per_mile_1"}},
            },
        )

        assert response.json()["error"] == "Validation failed: tags: Too many tags"

    @pytest.mark.asyncio
    async def test_profile_completion(self, vendor_client: AsyncClient, respx_mock: MockRouter):
        route = respx_mock.patch(f"{BACKEND}/vendors/me").mock(
            return_value=httpx.Response(200, json={"data": {"_id": "vend1"}})
        )

        await vendor_client.patch(
            "/api/vendor-setup/profile",
            json={"profilePhoto": "p", "coverPhoto": "c", "portfolioGallery": list("12345")},
        )

        sent = json.loads(route.calls.last.request.content)
        assert sent["isActive"] is True
        assert sent["onBoardingStage"] == 4
        assert "socialMediaLinks" not in sent
