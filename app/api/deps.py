"""
Shared route dependencies
"""

from fastapi import Request

from app.services.waitlist_service import WaitlistService

def get_waitlist_service(request: Request) -> WaitlistService:
    return request.app.state.waitlist_service
