import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from guildhall.core.errors import AuthenticationError, ForbiddenError
from guildhall.core.security import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Bearer-token gate for every API route.
    401 when no token is sent, 403 when it does not verify. The token's
    subject is returned and kept on ``request.state.user_id``.
    """
    if credentials is None:
        raise AuthenticationError("No token provided. Please include 'Authorization: Bearer <token>' header.")

    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub") if payload else None
    if not user_id:
        logger.info("Rejected bearer token on %s %s", request.method, request.url.path)
        raise ForbiddenError("Invalid or expired token.")

    request.state.user_id = user_id
    return user_id
