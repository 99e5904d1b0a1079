import hmac
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app import config
from app.errors import AuthorizationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Guard for privileged routes. Returns the admin principal name."""
    expected = config.ADMIN_API_TOKEN
    if not expected:
        logger.warning(f"ADMIN_API_TOKEN not set, refusing {request.url.path}")
        raise AuthorizationError("Admin access is not configured")
    if credentials is None:
        raise AuthorizationError("Not authenticated. Provide a Bearer token in the Authorization header.")
    if not hmac.compare_digest(credentials.credentials.encode(), expected.encode()):
        logger.warning(f"Invalid admin token for {request.url.path}")
        raise AuthorizationError("Invalid admin token")
    return "admin"
