import logging
import time
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .cache import get_cache_stats
from .config import (
    ALLOWED_ORIGINS,
    BACKEND_URL,
    CSRF_ENABLED,
    REQUEST_TIMEOUT_SECONDS,
    SECURITY_HEADERS_ENABLED,
)
from .csrf import CSRF_COOKIE_NAME, CSRFMiddleware, generate_csrf_token, set_csrf_cookie
from .domain.auth.router import router as auth_router
from .domain.bookings.router import router as bookings_router
from .domain.catalog.router import router as catalog_router
from .domain.chat.router import router as chat_router
from .domain.custom_requests.router import router as custom_requests_router
from .domain.disputes.router import router as disputes_router
from .domain.payments.router import router as payments_router
from .domain.quote_requests.router import router as quote_requests_router
from .domain.quotes.router import router as quotes_router
from .domain.users.router import router as users_router
from .domain.vendor_setup.router import router as vendor_setup_router
from .domain.vendors.router import router as vendors_router
from .redis_client import get_redis_client
from .route_guard import RouteGuardMiddleware
from .routes.pages import router as pages_router
from .routes.support import router as support_router
from .routes.upload import router as upload_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    if not BACKEND_URL:
        logger.error("❌ BACKEND_URL is not set - every action will fail with 'Backend not configured'")

    app.state.http_client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS)

    try:
        get_redis_client()  # Connection test
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed - cache disabled, rate limited endpoints will refuse requests: {e}")

    yield

    logger.info("Application shutting down...")
    await app.state.http_client.aclose()


app = FastAPI(title="Momentev Web API", version="1.0.0", lifespan=lifespan)


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return form validation failures in the ActionResult shape"""
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        field_errors.setdefault(_field_name(error.get("loc", ())), []).append(message)

    first_message = next(iter(field_errors.values()))[0] if field_errors else "Invalid request"
    logger.warning(f"Validation error for {request.url.path}: {field_errors}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": first_message, "fieldErrors": field_errors},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


app.add_middleware(RouteGuardMiddleware)

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

if CSRF_ENABLED:
    app.add_middleware(CSRFMiddleware)
    logger.info("CSRF protection enabled")
else:
    logger.info("CSRF protection disabled")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,  # Session and CSRF cookies
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(catalog_router)
app.include_router(vendors_router)
app.include_router(vendor_setup_router)
app.include_router(bookings_router)
app.include_router(quotes_router)
app.include_router(quote_requests_router)
app.include_router(custom_requests_router)
app.include_router(disputes_router)
app.include_router(chat_router)
app.include_router(payments_router)
app.include_router(upload_router)
app.include_router(support_router)
app.include_router(pages_router)


@app.get("/")
def root():
    return {"message": "Momentev Web API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Check Redis connectivity for monitoring"""
    try:
        redis_client = get_redis_client()

        start_time = time.time()
        redis_client.ping()
        response_time = (time.time() - start_time) * 1000

        info = redis_client.info()

        return {
            "status": "healthy",
            "redis": {
                "connected": True,
                "response_time_ms": round(response_time, 2),
                "version": info.get("redis_version", "unknown"),
                "used_memory_human": info.get("used_memory_human", "unknown"),
                "connected_clients": info.get("connected_clients", 0),
            },
            "cache": get_cache_stats(),
        }
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}


@app.get("/csrf-token")
async def get_csrf_token(request: Request, response: Response):
    """
    Get a CSRF token for the frontend.
    The token is also set as a cookie.
    Frontend should include this token in X-CSRF-Token header for state-changing requests.
    """
    existing_token = request.cookies.get(CSRF_COOKIE_NAME)

    if existing_token:
        return {"csrf_token": existing_token}

    new_token = generate_csrf_token()
    set_csrf_cookie(response, new_token)
    return {"csrf_token": new_token}
