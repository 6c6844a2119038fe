"""Booking domain schemas"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ...shared.validators import parse_date, require_text

BookingStatus = Literal["pending", "pending_payment", "confirmed", "cancelled", "completed", "rejected"]


class BookingEventDetails(BaseModel):
    title: str
    startDate: str
    endDate: str
    guestCount: int
    description: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return require_text(
            v,
            "Event title is required",
            max_length=100,
            max_message="Event title must be less than 100 characters",
        )

    @field_validator("startDate")
    @classmethod
    def validate_start_date(cls, v):
        if not v:
            raise ValueError("Start date is required")
        start = parse_date(v, "Invalid start date")
        if start < date.today():
            raise ValueError("Start date must be in the future")
        return v

    @field_validator("endDate")
    @classmethod
    def validate_end_date(cls, v):
        if not v:
            raise ValueError("End date is required")
        parse_date(v, "Invalid end date")
        return v

    @field_validator("guestCount")
    @classmethod
    def validate_guest_count(cls, v):
        if v < 1:
            raise ValueError("Guest count must be at least 1")
        if v > 10000:
            raise ValueError("Guest count cannot exceed 10,000")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return require_text(
            v,
            "Description must be at least 10 characters",
            min_length=10,
            max_length=1000,
            max_message="Description must be less than 1000 characters",
        )

    @model_validator(mode="after")
    def validate_date_range(self):
        start = parse_date(self.startDate, "Invalid start date")
        end = parse_date(self.endDate, "Invalid end date")
        if end < start:
            raise ValueError("End date must be on or after start date")
        return self


class BookingBudgetAllocation(BaseModel):
    vendorSpecialtyId: str
    budgetedAmount: float

    @field_validator("vendorSpecialtyId")
    @classmethod
    def validate_specialty(cls, v):
        return require_text(v, "Specialty is required")

    @field_validator("budgetedAmount")
    @classmethod
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError("Budget amount must be greater than 0")
        return v


class BookingLocation(BaseModel):
    addressText: str

    @field_validator("addressText")
    @classmethod
    def validate_address(cls, v):
        return require_text(
            v,
            "Event location is required",
            max_length=200,
            max_message="Location must be less than 200 characters",
        )


class CreateBookingRequest(BaseModel):
    """Schema for booking a vendor directly from the vendor page"""

    vendorId: str
    eventDetails: BookingEventDetails
    budgetAllocations: list[BookingBudgetAllocation]
    location: BookingLocation
    currency: str

    @field_validator("vendorId")
    @classmethod
    def validate_vendor(cls, v):
        return require_text(v, "Vendor ID is required")

    @field_validator("budgetAllocations")
    @classmethod
    def validate_allocations(cls, v):
        if not v:
            raise ValueError("At least one service must be selected")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        return require_text(v, "Currency is required")


class BookingFromQuoteRequest(BaseModel):
    location: str = ""


class CancelBookingRequest(BaseModel):
    # Status the browser last saw; when given the cancel rule is checked here
    status: Optional[BookingStatus] = None


class VendorDecisionRequest(BaseModel):
    decision: Literal["confirmed", "rejected"]


class StatusBadge(BaseModel):
    status: str
    label: str


class BookingAmounts(BaseModel):
    """Money breakdown of a booking; unset amounts read as 0, other keys pass through"""

    model_config = ConfigDict(extra="allow")

    subtotal: float = 0
    fees: float = 0
    commission: float = 0
    total: float = 0

    @field_validator("subtotal", "fees", "commission", "total", mode="before")
    @classmethod
    def missing_amount_is_zero(cls, v):
        return 0 if v is None else v
