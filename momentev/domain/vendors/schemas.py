"""Vendor search schemas - raw backend vendors and the cards shown in search results"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class RawAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class RawWorkday(BaseModel):
    dayOfWeek: str
    open: str
    close: str


class RawAvatar(BaseModel):
    url: Optional[str] = None


class RawVendorUser(BaseModel):
    id: str = Field(alias="_id")
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    avatar: Optional[RawAvatar] = None
    addressId: Optional[RawAddress] = None


class RawContactInfo(BaseModel):
    addressId: Optional[RawAddress] = None


class RawBusinessProfile(BaseModel):
    businessName: Optional[str] = None
    businessDescription: Optional[str] = None
    workdays: Optional[list[RawWorkday]] = None
    contactInfo: Optional[RawContactInfo] = None


class NamedRef(BaseModel):
    id: str = Field(alias="_id")
    name: str


class RawVendor(BaseModel):
    """Vendor as returned by the search and nearby endpoints"""

    id: str = Field(alias="_id")
    rate: float = 0
    reviewCount: int = 0
    # Plain url, or an uploaded file document with a url
    profilePhoto: Optional[Any] = None
    coverPhoto: Optional[Any] = None
    userId: Optional[RawVendorUser] = None
    businessProfile: Optional[RawBusinessProfile] = None
    serviceCategory: Optional[NamedRef] = None
    serviceSpecialty: Optional[NamedRef] = None
    distanceKm: Optional[float] = None


class RawVendorPage(BaseModel):
    data: list[RawVendor]
    total: int = 0
    page: int = 1
    limit: int = 10


class VendorCard(BaseModel):
    id: str = Field(serialization_alias="_id")
    name: str
    slug: str
    serviceCategory: Optional[dict[str, Any]] = None
    serviceSpecialty: Optional[dict[str, Any]] = None
    rate: float = 0
    totalReviews: int = 0
    coverImage: str
    address: str
    distanceKm: Optional[float] = None
    workdays: Optional[str] = None
    services: list[str] = []


class VendorSearchFilters(BaseModel):
    service: Optional[str] = None
    specialty: Optional[str] = None
    sort: Optional[Literal["rating", "relevance"]] = None
    q: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class NearbyFilters(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    long: float = Field(..., ge=-180, le=180)
    maxDistanceKm: Optional[float] = Field(None, gt=0)
    service: Optional[str] = None
    specialty: Optional[str] = None
    q: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class AdditionalFee(BaseModel):
    name: str
    price: str
    feeCategory: Optional[str] = None


class UpdateVendorServiceRequest(BaseModel):
    tags: Optional[list[str]] = None
    minimumBookingDuration: Optional[str] = None
    leadTimeRequired: Optional[str] = None
    maximumEventSize: Optional[str] = None
    additionalFees: Optional[list[AdditionalFee]] = None
