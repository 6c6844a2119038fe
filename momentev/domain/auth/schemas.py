"""Auth domain schemas - sign-up, login and password payloads"""

from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import require_text, validate_email


class RegisterRequest(BaseModel):
    """Raw registration payload forwarded to the backend"""

    firstName: str
    lastName: str
    email: str
    password: str
    role: Literal["CUSTOMER", "VENDOR"] = "CUSTOMER"

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v or "") < 8:
            raise ValueError("Password must be at least 8 characters.")
        return v


class ClientSignUpRequest(BaseModel):
    """Schema for the client sign-up form"""

    firstName: str
    lastName: str
    email: str
    password: str

    @field_validator("firstName")
    @classmethod
    def validate_first_name(cls, v):
        return require_text(v, "Please enter your first name.")

    @field_validator("lastName")
    @classmethod
    def validate_last_name(cls, v):
        return require_text(v, "Please enter your last name.")

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v or "") < 8:
            raise ValueError("Password must be at least 8 characters.")
        return v

    def to_register(self) -> RegisterRequest:
        return RegisterRequest(
            firstName=self.firstName,
            lastName=self.lastName,
            email=self.email,
            password=self.password,
            role="CUSTOMER",
        )


class VendorSignUpRequest(BaseModel):
    """Schema for the vendor sign-up form; the company name fills both name fields"""

    companyName: str
    email: str
    password: str

    @field_validator("companyName")
    @classmethod
    def validate_company_name(cls, v):
        return require_text(v, "Please enter your company name.", min_length=2)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v or "") < 8:
            raise ValueError("Password must be at least 8 characters.")
        return v

    def to_register(self) -> RegisterRequest:
        return RegisterRequest(
            firstName=self.companyName,
            lastName=self.companyName,
            email=self.email,
            password=self.password,
            role="VENDOR",
        )


class LoginRequest(BaseModel):
    email: str
    password: str
    remember: bool = False
    # Set by the area specific login pages; a mismatching account is refused
    expectedRole: Optional[Literal["CUSTOMER", "VENDOR"]] = None

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v, "Please use a valid email address.")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if not v:
            raise ValueError("Password is required.")
        return v


class ResendVerificationRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


class SetPasswordRequest(BaseModel):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v or "") < 8:
            raise ValueError("Password must be at least 8 characters.")
        return v
