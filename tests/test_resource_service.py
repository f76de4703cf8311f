"""Tests for ResourceService with in-memory repositories."""

import asyncio
from datetime import date, time

import pytest

from fakes import FakeBookingRepository, FakeResourceRepository

from campus_booking.bookings.domain import Booking, TimeSlot
from campus_booking.bookings.infrastructure import ResourceLockRegistry
from campus_booking.config import BookingStatus, ResourceStatus
from campus_booking.core import (
    ConflictException,
    InvalidStateTransitionException,
    ResourceNotFoundException,
)
from campus_booking.resources.application import ResourceCreate, ResourceService, ResourceUpdate
from campus_booking.resources.domain import Resource


@pytest.fixture
def ledger() -> FakeBookingRepository:
    return FakeBookingRepository()


@pytest.fixture
def resources() -> FakeResourceRepository:
    return FakeResourceRepository(Resource(id=1, name="Room A", type="Room", capacity=10))


@pytest.fixture
def locks() -> ResourceLockRegistry:
    return ResourceLockRegistry()


@pytest.fixture
def service(resources, ledger, locks, fixed_now) -> ResourceService:
    return ResourceService(resources, ledger, locks, clock=lambda: fixed_now)


def booking_on(day: date, resource_id: int = 1) -> Booking:
    return Booking(id=None, user_id=1, resource_id=resource_id, slot=TimeSlot(day, time(10), time(11)))


async def test_create_resource(service):
    resource = await service.create_resource(ResourceCreate(name="  Projector 4 ", type="Equipment", capacity=1))
    assert resource.id == 2
    assert resource.name == "Projector 4"
    assert resource.status == ResourceStatus.AVAILABLE


async def test_get_missing_resource(service):
    with pytest.raises(ResourceNotFoundException):
        await service.get_resource(42)


async def test_update_resource(service, resources):
    updated = await service.update_resource(1, ResourceUpdate(capacity=12))
    assert updated.capacity == 12
    assert updated.name == "Room A"
    assert resources.commits == 1


async def test_cancel_cancels_only_upcoming_active_bookings(service, ledger):
    past = ledger.add(booking_on(date(2026, 3, 1)))
    upcoming = ledger.add(booking_on(date(2026, 3, 5)))
    other_resource = ledger.add(booking_on(date(2026, 3, 5), resource_id=7))

    resource, cancelled = await service.cancel_resource(1)

    assert resource.status == ResourceStatus.CANCELLED
    assert cancelled == 1
    assert upcoming.status == BookingStatus.CANCELLED
    assert past.status == BookingStatus.BOOKED
    assert other_resource.status == BookingStatus.BOOKED


async def test_cancel_twice(service):
    await service.cancel_resource(1)
    with pytest.raises(InvalidStateTransitionException):
        await service.cancel_resource(1)


async def test_restore(service):
    await service.cancel_resource(1)
    restored = await service.restore_resource(1)
    assert restored.is_available


async def test_update_cancelled_resource(service):
    await service.cancel_resource(1)
    with pytest.raises(ConflictException):
        await service.update_resource(1, ResourceUpdate(name="Room B"))


async def test_delete_refused_with_upcoming_bookings(service, ledger, resources):
    ledger.add(booking_on(date(2026, 3, 5)))

    with pytest.raises(ConflictException) as exc_info:
        await service.delete_resource(1)

    assert exc_info.value.details["upcoming_bookings"] == 1
    assert 1 in resources.resources


async def test_delete_after_cancel(service, ledger, resources):
    ledger.add(booking_on(date(2026, 3, 5)))
    await service.cancel_resource(1)

    await service.delete_resource(1)
    assert resources.resources == {}


async def test_blank_search_lists_everything(service):
    assert [r.id for r in await service.search("   ")] == [1]
    assert [r.id for r in await service.search("room")] == [1]
    assert await service.search("hall") == []


async def test_cancel_waits_for_booking_writes_on_the_resource(service, ledger, resources, locks):
    async with locks.hold(1):
        task = asyncio.create_task(service.cancel_resource(1))
        await asyncio.sleep(0.01)
        assert not task.done()
        # a booking committed while the lock is held is seen by the cancel
        upcoming = ledger.add(booking_on(date(2026, 3, 5)))

    _, cancelled = await task
    assert cancelled == 1
    assert upcoming.status == BookingStatus.CANCELLED
    assert resources.commits == 1
    assert len(locks) == 0


async def test_failed_delete_releases_the_lock(service, ledger, locks):
    ledger.add(booking_on(date(2026, 3, 5)))

    with pytest.raises(ConflictException):
        await service.delete_resource(1)

    assert len(locks) == 0
    await service.cancel_resource(1)
