"""Free-form notification endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from homelife.api.dependencies import Member, get_container, require_member
from homelife.api.responses import failure, success
from homelife.api.schemas import NotificationRequest
from homelife.containers import AppContainer

router = APIRouter(prefix="/v0.1/notifications", tags=["notifications"])


@router.post("/send", response_model=None)
async def send(
    body: NotificationRequest,
    member: Member = Depends(require_member),
    container: AppContainer = Depends(get_container),
) -> dict[str, object] | JSONResponse:
    """Forward a message to the automation webhook."""
    delivered = await container.alert_service.send_notification(
        member.household_id,
        channels=body.channels,
        message=body.message,
        sender_email=body.sender_email,
        subject=body.subject,
    )
    if not delivered:
        return JSONResponse(
            status_code=502, content=failure("Failed to send notification")
        )
    return success({"channels": body.channels}, message="Notification sent")
