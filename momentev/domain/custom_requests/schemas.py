"""Custom request schemas - a client's multi-vendor event brief"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_date, require_text


class CustomRequestEventDetails(BaseModel):
    title: str
    description: str
    startDate: str
    endDate: Optional[str] = None
    guestCount: int
    location: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return require_text(v, "Please enter an event name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return require_text(
            v,
            "Description must be at least 10 characters",
            min_length=10,
            max_length=500,
            max_message="Description must be at most 500 characters",
        )

    @field_validator("startDate")
    @classmethod
    def validate_start_date(cls, v):
        parse_date(v, "Please select a start date")
        return v

    @field_validator("guestCount")
    @classmethod
    def validate_guest_count(cls, v):
        if v < 1:
            raise ValueError("Guest count must be at least 1")
        return v

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return require_text(v, "Please enter a location")


class VendorNeeds(BaseModel):
    categories: list[str] = []
    specificRequirements: dict[str, str] = {}


class CustomRequestBudgetAllocation(BaseModel):
    serviceSpecialtyId: str
    budgetedAmount: float


class CreateCustomRequest(BaseModel):
    serviceCategoryId: Optional[str] = None
    eventDetails: CustomRequestEventDetails
    vendorNeeds: Optional[VendorNeeds] = None
    budgetAllocations: list[CustomRequestBudgetAllocation] = []
    attachments: Optional[list[str]] = None
