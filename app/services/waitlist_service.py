"""
Waitlist queue operations
"""

import asyncio
import logging
from typing import List, Optional

from app.core.exceptions import ValidationError
from app.models import WaitlistEntry, WaitlistTable
from app.schemas.waitlist import AttendeeWaitlist, JoinResult, LeaveResult, WaitlistStatus
from app.services.repositories import WaitlistRepo

logger = logging.getLogger(__name__)


def _find(queue: List[WaitlistEntry], attendee_email: str) -> Optional[int]:
    for index, entry in enumerate(queue):
        if entry.attendee_email == attendee_email:
            return index
    return None


def _require(value: Optional[str], field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required field: {field}")
    return value


class WaitlistService:
    """Per-event waitlist queues on top of a WaitlistRepo.

    Each mutation is a read-modify-write of the whole table. Mutations are
    serialized by one lock because the table is saved whole: two joins for
    different events would otherwise overwrite each other. Reads never take
    the lock and never raise on backend trouble.
    """

    def __init__(self, repo: WaitlistRepo):
        self.repo = repo
        self._write_lock = asyncio.Lock()

    async def join(
        self,
        event_id: str,
        attendee_name: str,
        attendee_email: str,
        group_size: Optional[int] = 1,
    ) -> JoinResult:
        """Add an attendee, or refresh their entry in place if already queued"""
        _require(event_id, "eventId")
        _require(attendee_name, "attendeeName")
        _require(attendee_email, "attendeeEmail")
        if group_size is None:
            group_size = 1
        if isinstance(group_size, bool) or not isinstance(group_size, int) or group_size < 1:
            raise ValidationError("groupSize must be a positive integer")

        async with self._write_lock:
            table = await self.repo.load_for_update()
            queue = table.setdefault(event_id, [])

            entry = WaitlistEntry(
                event_id=event_id,
                attendee_name=attendee_name,
                attendee_email=attendee_email,
                group_size=group_size,
            )
            index = _find(queue, attendee_email)
            if index is None:
                queue.append(entry)
                position = len(queue)
            else:
                queue[index] = entry
                position = index + 1

            await self.repo.save(table)

        logger.info(f"{attendee_email} waitlisted for event {event_id} at position {position}/{len(queue)}")
        return JoinResult(position=position, total_waiting=len(queue))

    async def leave(self, event_id: str, attendee_email: str) -> LeaveResult:
        """Remove an attendee; success is False when they were not queued"""
        async with self._write_lock:
            table = await self.repo.load_for_update()
            queue = table.get(event_id, [])

            remaining = [entry for entry in queue if entry.attendee_email != attendee_email]
            if len(remaining) == len(queue):
                return LeaveResult(success=False, total_waiting=len(queue))

            table[event_id] = remaining
            await self.repo.save(table)

        logger.info(f"{attendee_email} left the waitlist for event {event_id}")
        return LeaveResult(success=True, total_waiting=len(remaining))

    async def status(self, event_id: str, attendee_email: str) -> WaitlistStatus:
        queue = (await self.repo.load()).get(event_id, [])
        index = _find(queue, attendee_email)
        return WaitlistStatus(
            is_on_waitlist=index is not None,
            position=0 if index is None else index + 1,
            total_waiting=len(queue),
        )

    async def size(self, event_id: str) -> int:
        return len((await self.repo.load()).get(event_id, []))

    async def attendee_waitlists(self, attendee_email: str) -> List[AttendeeWaitlist]:
        """Every queue the attendee is on, with their position in each"""
        results = []
        for event_id, queue in (await self.repo.load()).items():
            index = _find(queue, attendee_email)
            if index is not None:
                results.append(AttendeeWaitlist(entry=queue[index], position=index + 1, total_waiting=len(queue)))
        return results

    async def dump(self) -> WaitlistTable:
        """Full table, for admin diagnostics"""
        return await self.repo.load()
