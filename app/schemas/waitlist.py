"""
Waitlist request and result schemas
"""

from typing import Optional
from pydantic import BaseModel, Field

from app.models import WaitlistEntry

class JoinRequest(BaseModel):
    """Join waitlist request body"""
    attendee_name: Optional[str] = Field(default=None, alias="attendeeName")
    attendee_email: Optional[str] = Field(default=None, alias="attendeeEmail")
    group_size: int = Field(default=1, alias="groupSize")

    class Config:
        populate_by_name = True

class JoinResult(BaseModel):
    position: int
    total_waiting: int = Field(alias="totalWaiting")

    class Config:
        populate_by_name = True

class LeaveResult(BaseModel):
    success: bool
    total_waiting: int = Field(alias="totalWaiting")

    class Config:
        populate_by_name = True

class WaitlistStatus(BaseModel):
    """Where an attendee stands on one event's waitlist"""
    is_on_waitlist: bool = Field(alias="isOnWaitlist")
    position: int
    total_waiting: int = Field(alias="totalWaiting")

    class Config:
        populate_by_name = True

class AttendeeWaitlist(BaseModel):
    """One queue an attendee is currently on"""
    entry: WaitlistEntry
    position: int
    total_waiting: int = Field(alias="totalWaiting")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        return {
            **self.entry.to_document(),
            "position": self.position,
            "totalWaiting": self.total_waiting,
        }
