"""
Pydantic schemas package
"""

from .common import *
from .waitlist import *

__all__ = [
    "ErrorResponse",
    "JoinRequest",
    "JoinResult",
    "LeaveResult",
    "WaitlistStatus",
    "AttendeeWaitlist",
]
