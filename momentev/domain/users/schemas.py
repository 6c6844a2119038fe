"""User domain schemas - profile, vendor staff and addresses"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import require_text, validate_email


class UpdateProfileRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    dateOfBirth: Optional[str] = None
    gender: Optional[str] = None
    avatar: Optional[str] = None
    addressId: Optional[str] = None


class VendorPermission(BaseModel):
    name: str
    read: bool = False
    write: bool = False


class AddVendorStaffRequest(BaseModel):
    """Schema for inviting a staff member to a vendor account"""

    firstName: str
    lastName: str
    email: str
    permissions: list[VendorPermission] = []
    isActive: bool = True

    @field_validator("firstName", "lastName")
    @classmethod
    def validate_names(cls, v):
        return require_text(v, "Name is required")

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


class UpdateVendorStaffRequest(BaseModel):
    permissions: Optional[list[VendorPermission]] = None
    isActive: Optional[bool] = None


class AddressBase(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postalCode: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    long: Optional[float] = None

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, v):
        if v is not None and not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("long")
    @classmethod
    def validate_long(cls, v):
        if v is not None and not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v


class CreateAddressRequest(AddressBase):
    street: str = ""
    city: str = ""
    state: str = ""
    postalCode: str = ""
    country: str = ""


class UpdateAddressRequest(AddressBase):
    pass
