import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from ..backend import BackendClient, get_backend
from ..rate_limiter import create_rate_limiter
from ..schemas import ActionResult
from ..shared.validators import require_text, validate_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/support", tags=["Support"])

support_rate_limiter = create_rate_limiter(limit=5, window_seconds=300, key_prefix="support_request")


class SupportRequest(BaseModel):
    firstName: str
    lastName: str
    email: str
    message: str

    @field_validator("firstName")
    @classmethod
    def validate_first_name(cls, v):
        return require_text(v, "First name is required")

    @field_validator("lastName")
    @classmethod
    def validate_last_name(cls, v):
        return require_text(v, "Last name is required")

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v, "Please enter a valid email address")

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        return require_text(v, "Message is required")


@router.post("/requests", response_model=ActionResult)
async def create_support_request(
    data: SupportRequest,
    _: None = Depends(support_rate_limiter),
    backend: BackendClient = Depends(get_backend),
):
    """Contact form; signed-in vendors send their token so the backend can link the request"""
    result = await backend.post(
        "/support-requests",
        json=data.model_dump(),
        optional_auth=True,
        default_error="Failed to create support request",
    )
    if result.success:
        logger.info(f"✅ Support request created for {data.email}")
    return result
