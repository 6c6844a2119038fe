import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Remote Momentev API. Every action is a thin wrapper around /api/v1 on this host.
BACKEND_URL = (os.getenv("BACKEND_URL") or "").rstrip("/")

# Socket.IO server for chat, usually the same host as the REST API
SOCKET_URL = (os.getenv("SOCKET_URL") or BACKEND_URL).rstrip("/")
SOCKET_PATH = os.getenv("SOCKET_PATH", "/socket.io")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

# Frontend base URL for redirects
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "https://momentev.com,https://www.momentev.com,http://localhost:3000",
).split(",")

# Backend calls abort after this many seconds
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

# Session cookies
AUTH_TOKEN_COOKIE = "auth-token"
REFRESH_TOKEN_COOKIE = "refresh-token"
ACCESS_TOKEN_MAX_AGE = 60 * 60  # 1 hour
REFRESH_TOKEN_MAX_AGE = 60 * 60 * 24 * 7  # 7 days
REMEMBER_ME_MAX_AGE = 60 * 60 * 24 * 30  # 30 days

# Feature flags
CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
CACHE_ENABLED = os.getenv("CACHE_ENABLED", "true").lower() == "true"

# Seconds that public catalogue reads stay in Redis
CATALOG_CACHE_TTL = int(os.getenv("CATALOG_CACHE_TTL", "300"))

# Stripe publishable key handed to the browser for Stripe.js
STRIPE_PUBLISHABLE_KEY = os.getenv("STRIPE_PUBLISHABLE_KEY")

# Redis (response cache + rate limit counters). REDIS_URL wins over host/port.
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_SSL = os.getenv("REDIS_SSL", "false").lower() == "true"
