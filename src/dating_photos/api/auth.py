"""Bearer token authentication for the photo API."""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from dating_photos.config import Settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _get_settings(request: Request) -> Settings:
    return request.app.state.container.settings


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(_get_settings),
) -> UUID:
    """Return the caller's user id from a valid bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not credentials:
        logger.warning("Auth failed", extra={"reason": "no_token"})
        raise credentials_exception

    user_id = decode_user_id(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )
    if user_id is None:
        logger.warning("Auth failed", extra={"reason": "invalid_or_expired_token"})
        raise credentials_exception
    return user_id


def decode_user_id(token: str, secret_key: str, algorithm: str) -> UUID | None:
    """Decode a JWT and return its subject as a user id, if valid."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    try:
        return UUID(str(subject))
    except ValueError:
        return None


def create_access_token(
    user_id: UUID,
    secret_key: str,
    algorithm: str,
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """Create a signed JWT whose subject is the user id."""
    expire = datetime.now(tz=UTC) + expires_delta
    return jwt.encode(
        {"sub": str(user_id), "exp": expire}, secret_key, algorithm=algorithm
    )
