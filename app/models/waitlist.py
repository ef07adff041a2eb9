"""
Waitlist entry model and persisted table layout
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from app.core.exceptions import UnexpectedBackendError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WaitlistEntry(BaseModel):
    """One attendee waiting for a spot at one event"""
    event_id: str = Field(alias="eventId")
    attendee_name: str = Field(alias="attendeeName")
    attendee_email: str = Field(alias="attendeeEmail")
    group_size: int = Field(default=1, ge=1, alias="groupSize")
    joined_at: datetime = Field(default_factory=utcnow, alias="joinedAt")

    class Config:
        populate_by_name = True

    def to_document(self) -> Dict[str, Any]:
        return {
            "eventId": self.event_id,
            "attendeeName": self.attendee_name,
            "attendeeEmail": self.attendee_email,
            "groupSize": self.group_size,
            "joinedAt": self.joined_at.isoformat(),
        }


# eventId -> entries in queue order
WaitlistTable = Dict[str, List[WaitlistEntry]]


def table_to_document(table: WaitlistTable) -> Dict[str, List[Dict[str, Any]]]:
    """Render a table in the persisted JSON layout."""
    return {
        event_id: [entry.to_document() for entry in entries]
        for event_id, entries in table.items()
    }


def table_from_document(document: Any) -> WaitlistTable:
    """Parse the persisted JSON layout back into a table.

    Raises UnexpectedBackendError when the document is not shaped as
    ``{eventId: [entry, ...]}``.
    """
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise UnexpectedBackendError(f"Waitlist document must be an object, got {type(document).__name__}")

    table: WaitlistTable = {}
    for event_id, items in document.items():
        if not isinstance(items, list):
            raise UnexpectedBackendError(f"Waitlist for event {event_id!r} is not a list")
        entries = []
        for item in items:
            if not isinstance(item, dict):
                raise UnexpectedBackendError(f"Malformed waitlist entry for event {event_id!r}")
            try:
                entries.append(WaitlistEntry(**{"eventId": event_id, **item}))
            except SchemaError as e:
                raise UnexpectedBackendError(f"Malformed waitlist entry for event {event_id!r}: {e}") from e
        table[event_id] = entries
    return table
