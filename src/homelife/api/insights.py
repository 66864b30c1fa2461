"""Weekly insights endpoint."""

import datetime

from fastapi import APIRouter, Depends, Query

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import success
from homelife.containers import AppContainer

router = APIRouter(prefix="/v0.1/insights", tags=["insights"])


@router.get("/weekly")
async def weekly(
    week_start_date: datetime.date | None = Query(default=None, alias="weekStartDate"),
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return spending, waste, planning and expiry figures for a week."""
    insights = await container.insights_service.get_weekly_insights(
        member.household_id, week_start_date
    )
    return success(insights)
