"""Auth service - registration, login, email verification and Google sign-in"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import Response

from ...backend import BackendClient
from ...schemas import ActionResult
from ...session import (
    clear_auth_cookies,
    dashboard_path_for,
    decode_token,
    get_token_role,
    set_auth_cookies,
)
from .schemas import LoginRequest, RegisterRequest, ResendVerificationRequest, SetPasswordRequest

logger = logging.getLogger(__name__)

LOGIN_RATE_LIMITED = "Too many login attempts. Please wait a moment and try again."

# Login page for accounts of the *other* role
OTHER_LOGIN_PAGE = {
    "VENDOR": "/client/auth/log-in",
    "CUSTOMER": "/vendor/auth/log-in",
}


class AuthService:
    """Service layer for authentication flows"""

    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def register(self, data: RegisterRequest) -> ActionResult:
        logger.info(f"📥 Registering {data.role.lower()} account")
        return await self.backend.post(
            "/auth/register",
            json=data.model_dump(),
            auth=False,
            default_error="Failed to register",
        )

    async def login(self, data: LoginRequest, response: Response) -> ActionResult:
        """Log in and store the session cookies.

        Cookies are only written once the token pair is present, decodable and
        (when the login page asks for one) of the expected role.
        """
        result = await self.backend.post(
            "/auth/login",
            json={"email": data.email, "password": data.password},
            auth=False,
            error_messages={429: LOGIN_RATE_LIMITED},
            default_error="Failed to login",
        )
        if not result.success:
            return result

        payload = result.data if isinstance(result.data, dict) else {}
        token = payload.get("token")
        refresh_token = payload.get("refreshToken")
        if not token or not refresh_token:
            return ActionResult.fail("Invalid authentication response from server")

        if len(token.split(".")) != 3:
            return ActionResult.fail("Invalid token format")

        claims = decode_token(token)
        if claims is None:
            return ActionResult.fail("Failed to decode authentication token")

        token_role = claims.get("role")
        if not token_role:
            return ActionResult.fail("Token missing required role information")

        if data.expectedRole and str(token_role).upper() != data.expectedRole:
            role_label = "vendor" if data.expectedRole == "VENDOR" else "client"
            logger.warning(f"⚠️ Login refused: account role {token_role} on {role_label} login page")
            return ActionResult.fail(
                f"This account is not registered as a {role_label}. Please use the correct login page.",
                redirectTo=OTHER_LOGIN_PAGE[data.expectedRole],
            )

        set_auth_cookies(response, token, refresh_token, data.remember)
        role = str(token_role).lower()
        logger.info(f"✅ Logged in ({role})")
        return ActionResult.ok(
            {"user": payload.get("user"), "role": role},
            message=result.message,
            redirectTo=dashboard_path_for(role),
        )

    async def resend_verification_email(self, data: ResendVerificationRequest) -> ActionResult:
        return await self.backend.post(
            "/auth/resend-verification-email",
            json=data.model_dump(),
            auth=False,
            default_error="Failed to resend verification email",
        )

    async def verify_email(self, token: str) -> ActionResult:
        if not token:
            return ActionResult.fail("Verification token is required")

        return await self.backend.get(
            f"/auth/verify-email/{quote(token, safe='')}",
            auth=False,
            error_messages={
                400: "Verification token is required",
                401: "Invalid or expired verification token",
            },
            default_error="Failed to verify email",
        )

    async def get_google_auth_url(self) -> ActionResult:
        result = await self.backend.get(
            "/auth/google/auth-url", auth=False, default_error="Failed to fetch Google auth URL"
        )
        if not result.success:
            return result

        url = result.data.get("url") if isinstance(result.data, dict) else None
        if not url:
            return ActionResult.fail("Google auth URL not available")
        return ActionResult.ok({"url": url})

    async def handle_google_callback(
        self, code: str, role: Optional[str], response: Response
    ) -> ActionResult:
        if not code:
            return ActionResult.fail("Authorization code is required")

        result = await self.backend.get(
            "/auth/google/callback",
            params={"code": code, "role": role},
            auth=False,
            error_messages={
                400: "Authorization code is missing or invalid",
                401: "Failed to authenticate with Google",
            },
            default_error="Google authentication failed",
        )
        if not result.success:
            return result

        payload = result.data if isinstance(result.data, dict) else {}
        token = payload.get("token")
        refresh_token = payload.get("refreshToken")
        user = payload.get("user")
        if not token or not refresh_token or not user:
            return ActionResult.fail("Invalid response from server")

        # Google sign-in always keeps the long lived session
        set_auth_cookies(response, token, refresh_token, remember=True)
        is_new_user = bool(payload.get("isNewUser", False))
        logger.info(f"✅ Google sign-in complete (new user: {is_new_user})")
        return ActionResult.ok(
            {"user": user, "isNewUser": is_new_user},
            redirectTo=dashboard_path_for(get_token_role(token)),
        )

    async def set_password(self, data: SetPasswordRequest) -> ActionResult:
        return await self.backend.post(
            "/auth/set-password", json=data.model_dump(), default_error="Failed to set password"
        )

    async def refresh(self) -> ActionResult:
        token = await self.backend.refresh()
        if not token:
            return ActionResult.fail("Token refresh failed")
        return ActionResult.ok({"role": get_token_role(token)})

    def session_info(self) -> ActionResult:
        token = self.backend.access_token
        return ActionResult.ok(
            {
                "authenticated": self.backend.is_authenticated,
                "role": get_token_role(token) if token else None,
            }
        )

    @staticmethod
    def logout(response: Response) -> None:
        clear_auth_cookies(response)
        logger.info("👋 Session cleared")
