"""In-memory repository fakes for service tests."""

import asyncio
from datetime import date, datetime
from typing import Dict, List

from campus_booking.bookings.application import IBookingRepository, UserBookingRow
from campus_booking.bookings.domain import Booking
from campus_booking.config import BookingStatus
from campus_booking.resources.application import IResourceBookingLedger, IResourceRepository
from campus_booking.resources.domain import Resource


class FakeResourceRepository(IResourceRepository):
    def __init__(self, *resources: Resource):
        self.resources: Dict[int, Resource] = {r.id: r for r in resources}
        self.commits = 0

    async def get_by_id(self, resource_id):
        return self.resources.get(resource_id)

    async def get_for_update(self, resource_id):
        return self.resources.get(resource_id)

    async def list_all(self):
        return [self.resources[k] for k in sorted(self.resources)]

    async def create(self, resource):
        resource.id = max(self.resources, default=0) + 1
        self.resources[resource.id] = resource
        return resource

    async def update(self, resource):
        self.resources[resource.id] = resource
        return resource

    async def delete(self, resource_id):
        del self.resources[resource_id]

    async def search(self, query):
        q = query.lower()
        return [r for r in await self.list_all() if q in r.name.lower()]

    async def list_with_bookings(self, resource_type=None, booking_status=None, resource_status=None):
        return []

    async def list_sorted_with_bookings(self, sort_by):
        return []

    async def commit(self):
        self.commits += 1


class FakeBookingRepository(IBookingRepository, IResourceBookingLedger):
    """
    Stores bookings in a dict.

    Reads yield to the event loop so concurrent callers interleave the
    way they would against a real database.
    """

    def __init__(self):
        self.bookings: Dict[int, Booking] = {}
        self.commits = 0

    async def get_by_id(self, booking_id):
        return self.bookings.get(booking_id)

    async def list_for_user(self, user_id, status=None):
        return [
            b for b in self.bookings.values()
            if b.user_id == user_id and (status is None or b.status == status)
        ]

    async def list_user_booking_rows(self, user_id) -> List[UserBookingRow]:
        return []

    async def list_active_for_resource_on(self, resource_id: int, day: date):
        await asyncio.sleep(0)
        return [
            b for b in self.bookings.values()
            if b.resource_id == resource_id and b.slot.date == day and b.is_active
        ]

    async def create(self, booking):
        await asyncio.sleep(0)
        booking.id = len(self.bookings) + 1
        self.bookings[booking.id] = booking
        return booking

    async def update(self, booking):
        self.bookings[booking.id] = booking
        return booking

    async def complete_ended(self, now: datetime) -> int:
        ended = [b for b in self.bookings.values() if b.is_active and b.slot.has_ended(now)]
        for booking in ended:
            booking.status = BookingStatus.COMPLETED
        return len(ended)

    async def commit(self):
        self.commits += 1

    async def count_upcoming(self, resource_id, now):
        return len(self._upcoming(resource_id, now))

    async def cancel_upcoming(self, resource_id, now):
        upcoming = self._upcoming(resource_id, now)
        for booking in upcoming:
            booking.status = BookingStatus.CANCELLED
        return len(upcoming)

    def _upcoming(self, resource_id: int, now: datetime) -> List[Booking]:
        return [
            b for b in self.bookings.values()
            if b.resource_id == resource_id and b.is_active and b.is_upcoming(now)
        ]

    def add(self, booking: Booking) -> Booking:
        booking.id = len(self.bookings) + 1
        self.bookings[booking.id] = booking
        return booking
