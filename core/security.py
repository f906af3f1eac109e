import secrets
from datetime import timedelta
from typing import Optional, Union, Any
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from core.config import settings

from core.time_utils import get_current_time

bearer_scheme = HTTPBearer(auto_error=False)

def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Issues a token in the identity provider's format. Used by local tooling and tests."""
    expire = get_current_time() + (expires_delta or timedelta(minutes=30))
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

async def get_current_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Returns the owner id (the `sub` claim) of a valid bearer token."""
    if credentials is None:
        raise _credentials_exception()
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _credentials_exception()
    owner_id = payload.get("sub")
    if not owner_id:
        raise _credentials_exception()
    return str(owner_id)

async def require_job_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """Guards the recalculation trigger with STREAK_JOB_API_KEY."""
    if not settings.STREAK_JOB_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Streak job trigger is not configured",
        )
    if credentials is None or not secrets.compare_digest(credentials.credentials, settings.STREAK_JOB_API_KEY):
        raise _credentials_exception()
