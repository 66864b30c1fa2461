"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from homelife.api.responses import success
from homelife.services.alerts import URGENT_DAYS
from homelife.services.pantry import MAX_EXPIRY_DAYS

if TYPE_CHECKING:
    from homelife.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/expiry-alerts", dependencies=[Depends(require_admin)])
async def expiry_alerts(
    request: Request,
    days: int = Query(default=URGENT_DAYS, ge=0, le=MAX_EXPIRY_DAYS),
) -> dict[str, object]:
    """Alert every household with stock expiring within ``days``."""
    container: AppContainer = request.app.state.container
    summary = await container.alert_service.send_expiry_alerts(days)
    return success(summary)
