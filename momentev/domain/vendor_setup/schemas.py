"""Vendor onboarding schemas - one model per setup step"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import require_text, validate_email, validate_international_phone

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class ServiceLocation(BaseModel):
    city: str
    state: str
    country: str = ""


class WorkingDays(BaseModel):
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False


class BusinessDocuments(BaseModel):
    """Uploaded file ids, grouped by document kind"""

    identification: list[str] = []
    registration: list[str] = []
    license: list[str] = []


class BusinessInfoForm(BaseModel):
    """Step 1 - business information"""

    businessName: str
    yearsInBusiness: str
    companyRegistrationNumber: str
    businessRegistrationType: str
    businessDescription: Optional[str] = None

    primaryContactName: str
    emailAddress: str
    phoneNumber: str
    meansOfIdentification: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postalCode: Optional[str] = None
    country: Optional[str] = None

    serviceLocations: list[ServiceLocation]
    maximumTravelDistance: str

    workingDays: WorkingDays
    workingHoursStart: str
    workingHoursEnd: str

    documents: Optional[BusinessDocuments] = None

    @field_validator("businessName")
    @classmethod
    def validate_business_name(cls, v):
        return require_text(
            v,
            "Business name must be at least 2 characters",
            min_length=2,
            max_length=100,
            max_message="Business name must not exceed 100 characters",
        )

    @field_validator("yearsInBusiness")
    @classmethod
    def validate_years(cls, v):
        return require_text(v, "Please select years in business")

    @field_validator("companyRegistrationNumber")
    @classmethod
    def validate_reg_no(cls, v):
        return require_text(v, "Company registration number is required")

    @field_validator("businessRegistrationType")
    @classmethod
    def validate_reg_type(cls, v):
        return require_text(v, "Please select business registration type")

    @field_validator("businessDescription")
    @classmethod
    def validate_description(cls, v):
        if v is not None and len(v) > 500:
            raise ValueError("Business description must not exceed 500 characters")
        return v

    @field_validator("primaryContactName")
    @classmethod
    def validate_contact_name(cls, v):
        return require_text(
            v,
            "Contact name must be at least 2 characters",
            min_length=2,
            max_length=100,
            max_message="Contact name must not exceed 100 characters",
        )

    @field_validator("emailAddress")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v, "Please enter a valid email address")

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone(cls, v):
        return validate_international_phone(v)

    @field_validator("serviceLocations")
    @classmethod
    def validate_locations(cls, v):
        if not v:
            raise ValueError("Please add at least one service location")
        return v

    @field_validator("maximumTravelDistance")
    @classmethod
    def validate_travel_distance(cls, v):
        return require_text(v, "Please select maximum travel distance")

    @field_validator("workingHoursStart")
    @classmethod
    def validate_start(cls, v):
        return require_text(v, "Please select start time")

    @field_validator("workingHoursEnd")
    @classmethod
    def validate_end(cls, v):
        return require_text(v, "Please select end time")

    def has_address(self) -> bool:
        return any([self.street, self.city, self.state, self.postalCode])


class ExtraFee(BaseModel):
    name: str
    category: str
    price: str


class TransportFee(BaseModel):
    type: Literal["flat_50", "per_mile_1", "custom"]
    amount: Optional[str] = None

    @model_validator(mode="after")
    def validate_custom_amount(self):
        if self.type == "custom" and not (self.amount or "").strip():
            raise ValueError("Please enter the custom amount")
        return self


class ServiceCategoriesForm(BaseModel):
    """Step 2a - what the vendor offers"""

    serviceCategory: str
    specialties: list[str]
    minimumBookingDuration: str
    leadTimeRequired: str
    maximumEventSize: str
    keywords: list[str] = []

    @field_validator("serviceCategory")
    @classmethod
    def validate_category(cls, v):
        return require_text(v, "Please select a service category")

    @field_validator("specialties")
    @classmethod
    def validate_specialties(cls, v):
        if not v:
            raise ValueError("Please select at least one specialty")
        return v


class PricingStructureForm(BaseModel):
    """Step 2b - how the vendor charges"""

    pricingType: Literal["hourly", "custom"]
    hourlyRate: Optional[str] = None
    transportFee: TransportFee
    additionalFees: list[ExtraFee] = []

    @model_validator(mode="after")
    def validate_hourly_rate(self):
        if self.pricingType == "hourly" and not self.hourlyRate:
            raise ValueError("Please enter your hourly rate")
        return self


class ServiceSetupRequest(BaseModel):
    service: ServiceCategoriesForm
    pricing: PricingStructureForm


class SocialMediaLink(BaseModel):
    name: str
    link: str

    @field_validator("link")
    @classmethod
    def validate_link(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError("Please enter a valid URL")
        return v


class ProfileCompletionForm(BaseModel):
    """Step 4 - profile media"""

    profilePhoto: str
    coverPhoto: str
    portfolioGallery: list[str]
    socialMediaLinks: Optional[list[SocialMediaLink]] = None

    @field_validator("profilePhoto")
    @classmethod
    def validate_profile_photo(cls, v):
        return require_text(v, "Please upload a profile photo")

    @field_validator("coverPhoto")
    @classmethod
    def validate_cover_photo(cls, v):
        return require_text(v, "Please upload a cover photo")

    @field_validator("portfolioGallery")
    @classmethod
    def validate_gallery(cls, v):
        if len(v) < 5:
            raise ValueError("Please upload at least 5 portfolio photos")
        return v

    @field_validator("socialMediaLinks")
    @classmethod
    def validate_links(cls, v):
        if v is not None and len(v) > 5:
            raise ValueError("You can add up to 5 links including your website")
        return v
