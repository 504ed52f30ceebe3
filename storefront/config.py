"""Centralized configuration for the SOFI storefront."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Determine project root (parent of 'storefront' directory)
_THIS_DIR = Path(__file__).parent
_PROJECT_ROOT = _THIS_DIR.parent

load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")


def _derive_backend_url(api_url: str) -> str:
    """Base URL the browser uses to fetch uploaded images.

    Inside docker-compose the API is reached as ``backend:8080`` which the
    browser cannot resolve, so uploads are served from localhost instead.
    """
    if "backend:" in api_url:
        return "http://localhost:8080"
    api_url = api_url.rstrip("/")
    if api_url.endswith("/api"):
        return api_url[: -len("/api")]
    return api_url


# External API
API_URL = os.getenv("API_URL", os.getenv("NEXT_PUBLIC_API_URL", "http://localhost:8080/api")).rstrip("/")
BACKEND_PUBLIC_URL = os.getenv("BACKEND_PUBLIC_URL", _derive_backend_url(API_URL)).rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

# Flask app settings (allow env overrides; default debug off for safety)
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "3000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"
SECRET_KEY = os.getenv("SECRET_KEY", "dev-not-secret")

# Uploads
MAX_UPLOAD_BYTES = 5 * 1024 * 1024
PLACEHOLDER_IMAGE = "/static/placeholder.svg"

# Page limits
FEATURED_LIMIT = int(os.getenv("FEATURED_LIMIT", "4"))
RELATED_LIMIT = int(os.getenv("RELATED_LIMIT", "3"))
NEW_ARRIVALS_LIMIT = int(os.getenv("NEW_ARRIVALS_LIMIT", "6"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "True").lower() == "true"
LOG_DIR = Path(os.getenv("LOG_DIR", str(_PROJECT_ROOT / "logs")))
