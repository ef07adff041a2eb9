"""
Tests for waitlist queue operations
"""

import asyncio

import pytest

from app.core.exceptions import ValidationError
from app.services.waitlist_service import WaitlistService


@pytest.mark.asyncio
async def test_join_leave_status_scenario(service):
    """Ann and Bob join, Ann re-joins and leaves, Bob moves up"""
    result = await service.join("evt-1", "Ann", "ann@x.com", 1)
    assert (result.position, result.total_waiting) == (1, 1)

    result = await service.join("evt-1", "Bob", "bob@x.com", 2)
    assert (result.position, result.total_waiting) == (2, 2)

    result = await service.join("evt-1", "Ann", "ann@x.com", 3)
    assert (result.position, result.total_waiting) == (1, 2)

    left = await service.leave("evt-1", "ann@x.com")
    assert left.success is True
    assert left.total_waiting == 1

    status = await service.status("evt-1", "bob@x.com")
    assert status.is_on_waitlist is True
    assert status.position == 1
    assert status.total_waiting == 1

@pytest.mark.asyncio
async def test_positions_follow_join_order(service):
    emails = [f"guest{i}@example.com" for i in range(1, 8)]
    for expected, email in enumerate(emails, start=1):
        result = await service.join("evt-2", f"Guest {expected}", email)
        assert result.position == expected
        assert result.total_waiting == expected

    assert await service.size("evt-2") == len(emails)
    for expected, email in enumerate(emails, start=1):
        assert (await service.status("evt-2", email)).position == expected

@pytest.mark.asyncio
async def test_rejoin_updates_entry_in_place(service):
    await service.join("evt-1", "Ann", "ann@x.com", 1)
    await service.join("evt-1", "Bob", "bob@x.com")
    first = (await service.dump())["evt-1"][0]

    result = await service.join("evt-1", "Ann Lee", "ann@x.com", 4)
    assert result.position == 1
    assert result.total_waiting == 2

    queue = (await service.dump())["evt-1"]
    assert [e.attendee_email for e in queue] == ["ann@x.com", "bob@x.com"]
    assert queue[0].attendee_name == "Ann Lee"
    assert queue[0].group_size == 4
    assert queue[0].joined_at >= first.joined_at

@pytest.mark.asyncio
async def test_repeated_joins_keep_single_entry(service):
    await service.join("evt-1", "Zed", "zed@x.com")
    for size in range(1, 6):
        result = await service.join("evt-1", f"Ann {size}", "ann@x.com", size)
        assert result.position == 2

    queue = (await service.dump())["evt-1"]
    assert [e.attendee_email for e in queue].count("ann@x.com") == 1
    assert queue[1].group_size == 5

@pytest.mark.asyncio
async def test_email_match_is_case_sensitive(service):
    await service.join("evt-1", "Ann", "ann@x.com")
    result = await service.join("evt-1", "Ann", "Ann@x.com")
    assert result.position == 2
    assert (await service.status("evt-1", "ANN@X.COM")).is_on_waitlist is False

@pytest.mark.asyncio
async def test_queues_are_per_event(service):
    await service.join("evt-1", "Ann", "ann@x.com")
    result = await service.join("evt-2", "Ann", "ann@x.com")
    assert result.position == 1
    assert await service.size("evt-1") == 1
    assert await service.size("evt-2") == 1

@pytest.mark.asyncio
async def test_leave_preserves_order(service):
    for name in ["a", "b", "c", "d"]:
        await service.join("evt-1", name, f"{name}@x.com")

    await service.leave("evt-1", "b@x.com")

    assert (await service.status("evt-1", "a@x.com")).position == 1
    assert (await service.status("evt-1", "c@x.com")).position == 2
    assert (await service.status("evt-1", "d@x.com")).position == 3
    assert (await service.status("evt-1", "b@x.com")).position == 0

@pytest.mark.asyncio
async def test_leave_absent_email_reports_failure(recording_repo):
    service = WaitlistService(recording_repo)
    await service.join("evt-1", "Ann", "ann@x.com")
    saves = recording_repo.saves

    result = await service.leave("evt-1", "nobody@x.com")
    assert result.success is False
    assert result.total_waiting == 1
    assert await service.size("evt-1") == 1
    assert recording_repo.saves == saves

@pytest.mark.asyncio
async def test_unknown_event_reports_zero(service):
    assert await service.size("missing") == 0
    status = await service.status("missing", "ann@x.com")
    assert (status.is_on_waitlist, status.position, status.total_waiting) == (False, 0, 0)
    result = await service.leave("missing", "ann@x.com")
    assert (result.success, result.total_waiting) == (False, 0)

@pytest.mark.asyncio
async def test_emptied_queue_still_answers(service):
    await service.join("evt-1", "Ann", "ann@x.com")
    await service.leave("evt-1", "ann@x.com")

    assert await service.size("evt-1") == 0
    assert (await service.status("evt-1", "ann@x.com")).is_on_waitlist is False

@pytest.mark.asyncio
@pytest.mark.parametrize("name,email,group_size", [
    ("", "ann@x.com", 1),
    ("Ann", "", 1),
    ("   ", "ann@x.com", 1),
    (None, "ann@x.com", 1),
    ("Ann", "ann@x.com", 0),
    ("Ann", "ann@x.com", -2),
    ("Ann", "ann@x.com", True),
])
async def test_join_validation_happens_before_io(recording_repo, name, email, group_size):
    service = WaitlistService(recording_repo)
    with pytest.raises(ValidationError):
        await service.join("evt-1", name, email, group_size)
    assert recording_repo.loads == 0
    assert recording_repo.saves == 0

@pytest.mark.asyncio
async def test_group_size_defaults_to_one(service):
    await service.join("evt-1", "Ann", "ann@x.com", None)
    assert (await service.dump())["evt-1"][0].group_size == 1

@pytest.mark.asyncio
async def test_concurrent_joins_all_land(recording_repo):
    service = WaitlistService(recording_repo)
    results = await asyncio.gather(*[
        service.join(f"evt-{i % 3}", f"Guest {i}", f"g{i}@x.com") for i in range(30)
    ])

    assert sum([await service.size(f"evt-{i}") for i in range(3)]) == 30
    for event in range(3):
        positions = sorted(r.position for i, r in enumerate(results) if i % 3 == event)
        assert positions == list(range(1, 11))

@pytest.mark.asyncio
async def test_attendee_waitlists(service):
    await service.join("evt-1", "Bob", "bob@x.com")
    await service.join("evt-1", "Ann", "ann@x.com", 2)
    await service.join("evt-2", "Ann", "ann@x.com")
    await service.join("evt-3", "Bob", "bob@x.com")

    waitlists = await service.attendee_waitlists("ann@x.com")
    by_event = {w.entry.event_id: w for w in waitlists}
    assert set(by_event) == {"evt-1", "evt-2"}
    assert by_event["evt-1"].position == 2
    assert by_event["evt-1"].total_waiting == 2
    assert by_event["evt-1"].entry.group_size == 2
    assert by_event["evt-2"].position == 1

    assert await service.attendee_waitlists("nobody@x.com") == []
