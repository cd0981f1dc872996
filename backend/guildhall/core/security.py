from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from guildhall.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign a token the way the identity provider does. Used by tests and
    local tooling; production tokens come from the provider."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    if settings.AUTH_ISSUER:
        to_encode.setdefault("iss", settings.AUTH_ISSUER)
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Verify signature, expiry and (when configured) issuer. Returns the
    claims, or None for any invalid token."""
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=settings.AUTH_ISSUER or None,
        )
    except JWTError:
        return None
