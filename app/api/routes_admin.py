"""
Admin API routes - requires authentication
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_waitlist_service
from app.models import table_to_document
from app.services.waitlist_service import WaitlistService
from app.utils.security import verify_admin_token

router = APIRouter()

@router.get("/waitlists")
async def dump_waitlists(
    service: WaitlistService = Depends(get_waitlist_service),
    token: str = Depends(verify_admin_token)
):
    """Full waitlist table in its persisted layout, for diagnostics"""
    table = await service.dump()
    return {
        "backend": service.repo.name,
        "totalEvents": len(table),
        "totalWaiting": sum(len(queue) for queue in table.values()),
        "waitlists": table_to_document(table)
    }
