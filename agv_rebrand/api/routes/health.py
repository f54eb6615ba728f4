from datetime import datetime, timezone

from fastapi import APIRouter

from agv_rebrand.schemas import StatusResponse


router = APIRouter(tags=["health"])


@router.get("/status", response_model=StatusResponse)
def status() -> StatusResponse:
    return StatusResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
