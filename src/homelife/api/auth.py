"""Current user endpoint."""

from fastapi import APIRouter, Depends

from homelife.api.dependencies import require_user
from homelife.api.responses import success
from homelife.domain.models import UserRecord

router = APIRouter(prefix="/v0.1/auth", tags=["auth"])


@router.get("/me")
async def me(user: UserRecord = Depends(require_user)) -> dict[str, object]:
    """Return the authenticated user."""
    return success(user)
