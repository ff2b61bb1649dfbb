"""Configuration for the hospital admin client.

All environment-driven settings are centralized here. Values are read once
at import time after loading an optional .env file.
"""
import os
from dotenv import load_dotenv

from hospital_admin.logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

# Backend
API_BASE_URL = os.getenv("HOSPITAL_ADMIN_API_URL", "")
HOSPITAL_ID = os.getenv("HOSPITAL_ID", "")

# None means the transport default (requests waits indefinitely)
_timeout = os.getenv("REQUEST_TIMEOUT")
REQUEST_TIMEOUT = float(_timeout) if _timeout else None

# Session persistence
SESSION_DATABASE_URL = os.getenv(
    "SESSION_DATABASE_URL", "sqlite:///hospital_admin_session.db"
)
CREDENTIAL_SLOT = "token"
PROFILE_SLOT = "user"

# Dashboard
REQUIRED_ROLE = os.getenv("REQUIRED_ROLE", "ADMIN")
QUEUE_REFRESH_SECONDS = int(os.getenv("QUEUE_REFRESH_SECONDS", "10"))
QUEUE_PREVIEW_SIZE = 5

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def warn_if_unconfigured(base_url: str = None) -> bool:
    """
    Log a warning when no backend base URL is configured.

    Startup is never blocked: calls simply target an empty base.

    Returns:
        True if a base URL is configured
    """
    url = API_BASE_URL if base_url is None else base_url
    if not url:
        logger.warning("backend_url_missing", env_var="HOSPITAL_ADMIN_API_URL")
        return False
    return True
