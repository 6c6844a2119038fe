"""Auth router - session endpoints backed by HTTP-only cookies"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import RedirectResponse

from ...backend import BackendClient, get_backend
from ...rate_limiter import create_rate_limiter
from ...schemas import ActionResult
from .schemas import (
    ClientSignUpRequest,
    LoginRequest,
    RegisterRequest,
    ResendVerificationRequest,
    SetPasswordRequest,
    VendorSignUpRequest,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

login_rate_limiter = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")
register_rate_limiter = create_rate_limiter(limit=5, window_seconds=300, key_prefix="register")
verification_rate_limiter = create_rate_limiter(limit=3, window_seconds=300, key_prefix="resend_verification")


def get_auth_service(backend: BackendClient = Depends(get_backend)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(backend)


@router.post("/register", response_model=ActionResult)
async def register(
    data: RegisterRequest,
    _: None = Depends(register_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return await service.register(data)


@router.post("/register/client", response_model=ActionResult)
async def register_client(
    data: ClientSignUpRequest,
    _: None = Depends(register_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return await service.register(data.to_register())


@router.post("/register/vendor", response_model=ActionResult)
async def register_vendor(
    data: VendorSignUpRequest,
    _: None = Depends(register_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return await service.register(data.to_register())


@router.post("/login", response_model=ActionResult)
async def login(
    data: LoginRequest,
    response: Response,
    _: None = Depends(login_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return await service.login(data, response)


@router.post("/logout")
async def logout(redirect_to: str = Query("/client/auth/log-in", alias="redirectTo")):
    """Clear the session cookies and send the browser to a login page"""
    # Only same-site relative targets
    if not redirect_to.startswith("/") or redirect_to.startswith("//"):
        redirect_to = "/client/auth/log-in"

    response = RedirectResponse(url=redirect_to, status_code=303)
    AuthService.logout(response)
    return response


@router.post("/refresh", response_model=ActionResult)
async def refresh(service: AuthService = Depends(get_auth_service)):
    return await service.refresh()


@router.get("/session", response_model=ActionResult)
async def session(service: AuthService = Depends(get_auth_service)):
    return service.session_info()


@router.post("/resend-verification-email", response_model=ActionResult)
async def resend_verification_email(
    data: ResendVerificationRequest,
    _: None = Depends(verification_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return await service.resend_verification_email(data)


@router.get("/verify-email/{token}", response_model=ActionResult)
async def verify_email(token: str, service: AuthService = Depends(get_auth_service)):
    return await service.verify_email(token)


@router.get("/google/url", response_model=ActionResult)
async def google_auth_url(service: AuthService = Depends(get_auth_service)):
    return await service.get_google_auth_url()


@router.get("/google/callback", response_model=ActionResult)
async def google_callback(
    response: Response,
    code: str = Query(""),
    role: Optional[Literal["customer", "vendor"]] = Query(None),
    service: AuthService = Depends(get_auth_service),
):
    return await service.handle_google_callback(code, role, response)


@router.post("/set-password", response_model=ActionResult)
async def set_password(
    data: SetPasswordRequest,
    _: None = Depends(login_rate_limiter),
    service: AuthService = Depends(get_auth_service),
):
    return await service.set_password(data)
