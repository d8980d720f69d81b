"""
Bearer-token check for admin routes.
"""
import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from ..config.settings import Settings
from .state import get_app_settings


logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(' ')
    token = token.strip()
    if scheme.lower() != 'bearer' or not token:
        return None
    return token


def require_admin(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """Reject the request with 401 unless it carries the admin token."""
    token = extract_bearer_token(authorization)
    expected = settings.admin_api_token

    if not token or not expected or not hmac.compare_digest(token, expected):
        logger.warning("Rejected admin request")
        raise HTTPException(status_code=401, detail="Unauthorized")

    return 'admin-token'
