"""Common API dependencies."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from guidebook.core.security import decode_access_token
from guidebook.db.session import get_session
from guidebook.security.principal import Principal, PrincipalRole

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def _principal_from_claims(payload: dict) -> Principal | None:
    subject = payload.get("sub")
    if not subject:
        return None
    try:
        role = PrincipalRole(payload.get("role", PrincipalRole.CLIENT.value))
    except ValueError:
        return None
    provider_id = payload.get("provider_id")
    if provider_id is not None:
        try:
            provider_id = uuid.UUID(str(provider_id))
        except ValueError:
            return None
    return Principal(
        subject=str(subject),
        role=role,
        email=payload.get("email"),
        provider_id=provider_id,
    )


async def get_optional_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal | None:
    """Decode the bearer token when one is sent."""
    if credentials is None:
        return None
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as exc:
        raise credentials_exception from exc
    principal = _principal_from_claims(payload)
    if principal is None:
        raise credentials_exception
    return principal


async def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """Authenticate request via bearer token."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal
