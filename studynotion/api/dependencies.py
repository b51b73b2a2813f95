from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from studynotion.db import engine as db_engine
from studynotion.middleware.request_context import user_id_var
from studynotion.models.principal import Principal
from studynotion.repos.store import PgStore, Store, memory_store
from studynotion.services import token_service

logger = logging.getLogger(__name__)

# Tokens are issued by the upstream auth service; tokenUrl only feeds the docs UI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/oauth/token")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_user(
    raw_token: Annotated[str, Depends(oauth2_scheme)],
) -> Principal:
    """Extract and validate the JWT bearer token. Returns a Principal.

    Async so the user id set on ``user_id_var`` is visible to the
    handler's log lines.
    """
    try:
        claims = token_service.decode_access_token(raw_token)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise _unauthorized("Token expired") from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise _unauthorized("Invalid token") from None

    try:
        UUID(claims["sub"])
    except (TypeError, ValueError):
        logger.warning("Token rejected: subject is not an account id")
        raise _unauthorized("Invalid token") from None

    principal = Principal(
        user_id=claims["sub"],
        roles=frozenset(claims.get("roles", [])),
    )
    user_id_var.set(principal.user_id)
    logger.debug("Token validated roles=%s", sorted(principal.roles))
    return principal


def require_role(role: str):
    """Dependency factory: demand a specific role.

    Usage: Depends(require_role("student"))
    Returns the Principal if the role is present, else 403.
    """

    async def _guard(
        principal: Annotated[Principal, Depends(require_user)],
    ) -> Principal:
        if not principal.has_role(role):
            logger.warning(
                "Access denied: user=%s missing role=%s",
                principal.user_id,
                role,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return principal

    return _guard


async def get_store() -> AsyncIterator[Store]:
    """Request-scoped store: one AsyncSession per request, or the shared
    in-memory store when DATABASE_URL is unset."""
    if db_engine.async_session_factory is None:
        yield memory_store
        return
    async with db_engine.async_session_factory() as session:
        yield PgStore(session)


StoreDep = Annotated[Store, Depends(get_store)]
StudentDep = Annotated[Principal, Depends(require_role("student"))]
UserDep = Annotated[Principal, Depends(require_user)]
