"""
Waitlist API routes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from app.api.deps import get_waitlist_service
from app.core.exceptions import NotFoundError, PersistenceUnavailable
from app.schemas.waitlist import JoinRequest
from app.services.waitlist_service import WaitlistService
from app.utils.responses import error_response, invalid_request
from app.utils.security import enforce_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

def unavailable(message: str, exc: PersistenceUnavailable):
    logger.error(f"{message}: {exc}")
    return error_response(
        exc.code,
        f"{message}. Please try again later.",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )

@router.post("/{event_id}")
async def join_waitlist(
    event_id: str,
    join_data: JoinRequest,
    service: WaitlistService = Depends(get_waitlist_service)
):
    """Join an event's waitlist, or update an existing entry"""
    try:
        result = await service.join(
            event_id=event_id,
            attendee_name=join_data.attendee_name,
            attendee_email=join_data.attendee_email,
            group_size=join_data.group_size
        )
    except PersistenceUnavailable as e:
        return unavailable("Failed to join waitlist", e)

    return {
        "success": True,
        **result.dict(by_alias=True),
        "message": f"Added to waitlist at position #{result.position}"
    }

@router.delete("/{event_id}")
async def leave_waitlist(
    event_id: str,
    email: Optional[str] = None,
    service: WaitlistService = Depends(get_waitlist_service)
):
    """Leave an event's waitlist"""
    if not email:
        return invalid_request("Email parameter required")

    try:
        result = await service.leave(event_id, email)
    except PersistenceUnavailable as e:
        return unavailable("Failed to leave waitlist", e)

    if not result.success:
        return error_response(NotFoundError.code, "User not found on waitlist", status_code=status.HTTP_404_NOT_FOUND)

    return {
        **result.dict(by_alias=True),
        "message": "Successfully removed from waitlist"
    }

@router.get("/{event_id}/status")
async def waitlist_status(
    event_id: str,
    email: Optional[str] = None,
    service: WaitlistService = Depends(get_waitlist_service)
):
    """Position of one attendee on an event's waitlist"""
    if not email:
        return invalid_request("Email parameter required")

    result = await service.status(event_id, email)
    return result.dict(by_alias=True)

@router.get("/{event_id}/size")
async def waitlist_size(
    event_id: str,
    service: WaitlistService = Depends(get_waitlist_service)
):
    return {"eventId": event_id, "totalWaiting": await service.size(event_id)}

@router.get("")
async def attendee_waitlists(
    email: Optional[str] = None,
    service: WaitlistService = Depends(get_waitlist_service)
):
    """All waitlists an attendee is on"""
    if not email:
        return invalid_request("Email parameter required")

    waitlists = await service.attendee_waitlists(email)
    return {"email": email, "waitlists": [w.to_document() for w in waitlists]}
