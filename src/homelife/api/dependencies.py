"""Request dependencies for authentication and household gating."""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from homelife.containers import AppContainer
from homelife.domain.models import UserRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Member:
    """Authenticated user acting on behalf of their household."""

    user: UserRecord
    household_id: UUID


def get_container(request: Request) -> AppContainer:
    """Return the application container."""
    return request.app.state.container


async def require_user(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Resolve the bearer token to a user or reject the request."""
    scheme, _, token = (authorization or "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    user = container.user_service.authenticate(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    return user


async def require_member(user: UserRecord = Depends(require_user)) -> Member:
    """Ensure the user belongs to a household."""
    if user.household_id is None:
        _logger.info("Rejected user without household", extra={"user_id": user.id})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User must belong to a household",
        )
    return Member(user=user, household_id=user.household_id)
