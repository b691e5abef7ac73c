"""
Identity header dependency
"""
from fastapi import Header, HTTPException, status
import logging

from maintenance_desk.models import Actor, UserRole

logger = logging.getLogger(__name__)


async def get_current_actor(
    x_user_id: str = Header(None, alias="X-User-Id"),
    x_user_role: str = Header(None, alias="X-User-Role"),
) -> Actor:
    """
    Build the acting user from the identity headers.

    The identity provider in front of the API is trusted as-is; this only
    checks that both headers are present and the role is known.

    Raises:
        HTTPException 401: If either header is missing
        HTTPException 403: If the role is not a known role
    """
    if not x_user_id or not x_user_role:
        logger.warning("API request without identity headers")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing identity. Include X-User-Id and X-User-Role headers.",
        )

    try:
        role = UserRole(x_user_role.lower())
    except ValueError:
        logger.warning(f"Unknown role in identity header: {x_user_role}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unknown role '{x_user_role}'",
        )

    return Actor(id=x_user_id, role=role)
