from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import async_session
from .domain.entities import CurrentUser
from .domain.errors import PersistenceUnavailableError
from .models import User, UserRole
from .routers.errors import to_http_error
from .utils.auth import decode_access_token

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail, headers=_BEARER_CHALLENGE)


async def get_current_user(
    authorization: str | None = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> CurrentUser:
    if authorization is None:
        raise _unauthorized("Bearer token required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Bearer token required")

    settings = get_settings()
    try:
        claims = decode_access_token(token.strip(), secret=settings.auth_secret, algorithms=[settings.auth_algorithm])
    except ValueError as exc:
        raise _unauthorized("invalid token") from exc

    try:
        stored_role = await session.scalar(select(User.role).where(User.id == claims.user_id))
    except (SQLAlchemyError, OSError) as exc:
        await session.rollback()
        raise to_http_error(PersistenceUnavailableError("user lookup failed")) from exc
    # End the read so write endpoints can open their own transaction on this session.
    await session.rollback()
    if stored_role is None:
        raise _unauthorized("user not found")

    role = UserRole(stored_role)
    # A token minted before a role change is stale.
    if claims.role is not None and claims.role != role.value:
        raise _unauthorized("token role mismatch")
    return CurrentUser(id=claims.user_id, role=role)
