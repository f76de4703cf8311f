"""
Bookings Value Objects
======================

Immutable value objects for the bookings domain.

Slots are half-open intervals [start, end) on a single date, so a booking
ending at 10:00 and another starting at 10:00 do not overlap.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from campus_booking.core import ValidationException


@dataclass(frozen=True)
class TimeSlot:
    """A half-open time interval on one calendar day."""

    date: date
    start_time: time
    end_time: time

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.date, self.end_time)

    @property
    def duration_minutes(self) -> int:
        return int((self.ends_at - self.starts_at).total_seconds() // 60)

    def overlaps(self, other: "TimeSlot") -> bool:
        """Whether the two slots share any instant."""
        return (
            self.date == other.date
            and self.start_time < other.end_time
            and other.start_time < self.end_time
        )

    def is_past(self, now: datetime) -> bool:
        """Whether the slot has already started at `now`."""
        return self.starts_at < now

    def has_ended(self, now: datetime) -> bool:
        return self.ends_at <= now


class DurationLimits(BaseModel):
    """Booking length limits in minutes."""
    min_minutes: int = Field(ge=1)
    max_minutes: int = Field(ge=1)

    @model_validator(mode="after")
    def check_order(self) -> "DurationLimits":
        if self.min_minutes > self.max_minutes:
            raise ValueError("min_minutes cannot exceed max_minutes")
        return self


class BookingPolicy(BaseModel):
    """
    Booking rules loaded from YAML.

    Durations may be overridden per resource type (e.g. Equipment loans
    can run longer than room bookings).
    """
    opening_time: time = Field(default=time(8, 0), description="Earliest slot start")
    closing_time: time = Field(default=time(22, 0), description="Latest slot end")
    min_duration_minutes: int = Field(default=15, ge=1)
    max_duration_minutes: int = Field(default=240, ge=1)
    max_days_in_advance: int = Field(default=90, ge=0)
    allow_past_bookings: bool = Field(default=False)
    resource_type_overrides: Dict[str, DurationLimits] = Field(
        default_factory=dict,
        description="Duration limits keyed by resource type"
    )

    @field_validator("opening_time", "closing_time", mode="before")
    @classmethod
    def parse_sexagesimal(cls, v):
        # PyYAML reads unquoted 22:00 as the base-60 integer 1320
        if isinstance(v, int) and not isinstance(v, bool):
            return time(v // 60, v % 60)
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "BookingPolicy":
        if self.opening_time >= self.closing_time:
            raise ValueError("opening_time must be before closing_time")
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ValueError("min_duration_minutes cannot exceed max_duration_minutes")
        return self

    def limits_for(self, resource_type: Optional[str]) -> DurationLimits:
        """Duration limits applying to a resource type."""
        if resource_type is not None:
            override = self.resource_type_overrides.get(getattr(resource_type, "value", resource_type))
            if override is not None:
                return override
        return DurationLimits(
            min_minutes=self.min_duration_minutes,
            max_minutes=self.max_duration_minutes,
        )

    def violations(self, slot: TimeSlot, resource_type: Optional[str], now: datetime) -> List[str]:
        """
        List the rules a slot breaks (empty when the slot is acceptable).

        Args:
            slot: Requested slot
            resource_type: Type of the resource being booked
            now: Current campus wall-clock time
        """
        problems: List[str] = []

        if slot.start_time < self.opening_time or slot.end_time > self.closing_time:
            problems.append(
                f"Bookings must fall between {self.opening_time:%H:%M} and {self.closing_time:%H:%M}"
            )

        limits = self.limits_for(resource_type)
        if slot.duration_minutes < limits.min_minutes:
            problems.append(f"Bookings must last at least {limits.min_minutes} minutes")
        if slot.duration_minutes > limits.max_minutes:
            problems.append(f"Bookings may last at most {limits.max_minutes} minutes")

        if not self.allow_past_bookings and slot.is_past(now):
            problems.append("Bookings cannot start in the past")

        if slot.date > now.date() + timedelta(days=self.max_days_in_advance):
            problems.append(
                f"Bookings can be made at most {self.max_days_in_advance} days in advance"
            )

        return problems

    def validate_slot(self, slot: TimeSlot, resource_type: Optional[str], now: datetime) -> None:
        """
        Raises:
            ValidationException: If the slot breaks any rule
        """
        problems = self.violations(slot, resource_type, now)
        if problems:
            raise ValidationException(problems[0], {"violations": problems})


class AvailabilityCalculator:
    """
    Pure functions for conflict detection and free-window computation.
    """

    @staticmethod
    def find_conflicts(
        slot: TimeSlot,
        booked: Iterable[Tuple[int, TimeSlot]],
        exclude_id: Optional[int] = None,
    ) -> List[int]:
        """
        Ids of booked slots overlapping `slot`.

        Args:
            slot: Candidate slot
            booked: (booking_id, slot) pairs of active bookings
            exclude_id: Booking to ignore (the one being rescheduled)
        """
        return [
            booking_id
            for booking_id, other in booked
            if booking_id != exclude_id and slot.overlaps(other)
        ]

    @staticmethod
    def free_windows(
        day: date,
        opening_time: time,
        closing_time: time,
        booked: Iterable[TimeSlot],
    ) -> List[TimeSlot]:
        """
        Gaps between booked slots within opening hours.

        Booked slots may overlap each other or extend past opening hours;
        they are merged and clipped before the gaps are computed.
        """
        intervals = sorted(
            (max(s.start_time, opening_time), min(s.end_time, closing_time))
            for s in booked
            if s.date == day
        )

        windows: List[TimeSlot] = []
        cursor = opening_time
        for start, end in intervals:
            if start >= end:
                continue
            if start > cursor:
                windows.append(TimeSlot(day, cursor, start))
            cursor = max(cursor, end)

        if cursor < closing_time:
            windows.append(TimeSlot(day, cursor, closing_time))

        return windows
