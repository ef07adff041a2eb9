"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_waitlist_service
from app.services.waitlist_service import WaitlistService

router = APIRouter()

@router.get("/health")
async def health_check(service: WaitlistService = Depends(get_waitlist_service)):
    """Health check endpoint"""
    return {"status": "ok", "backend": service.repo.name}
