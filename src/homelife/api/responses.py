"""JSON envelope shared by every versioned endpoint."""

from fastapi.encoders import jsonable_encoder

SUCCESS = "success"
FAILURE = "failure"


def success(payload: object = None, message: str | None = None) -> dict[str, object]:
    """Wrap a payload in a success envelope."""
    body: dict[str, object] = {
        "status": SUCCESS,
        "payload": jsonable_encoder(payload),
    }
    if message:
        body["message"] = message
    return body


def failure(message: str, payload: object = None) -> dict[str, object]:
    """Build a failure envelope."""
    return {
        "status": FAILURE,
        "payload": jsonable_encoder(payload),
        "message": message,
    }
