#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Reservations of the shared room and the views derived from them."""

import datetime
import uuid
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, Field, NonNegativeInt, field_serializer, model_validator

from roomslot.schedule.time_utils import TimeInterval, format_hm, minutes

BookingId = str

EFFECTIVE_FIELDS = ("effective_starts_at", "effective_ends_at", "is_cascading_delayed")
ATTENDEE_FIELDS = ("user_name", "user_contact", "department")


class BookingStatus(StrEnum):
    Scheduled = "scheduled"
    InProgress = "in-progress"
    Completed = "completed"
    Delayed = "delayed"
    Cancelled = "cancelled"


def new_booking_id() -> BookingId:
    return str(uuid.uuid4())


class Booking(BaseModel):
    """A reservation or an administrative block-out of the room.

    Parameters
    ----------
    booking_id
        The unique ID of the booking, minted when the booking is created.
    starts_at, ends_at
        The intrinsic interval, as requested when booking. When earlier
        meetings run late the room is actually occupied at a different
        time, see `roomslot.schedule.resolver.resolve`.
    is_block_out
        Blocks set by an admin are never delayed or moved and the attendee
        fields do not apply.
    department, user_name, user_contact
        Who booked the room. Required for meetings.
    delay_in_minutes
        The total delay an admin applied to this meeting.
    status
        Lifecycle status, derived from the intrinsic interval and the
        current time (see `roomslot.schedule.status`).
    is_external, is_urgent, memo, requests
        Displayed alongside the booking, no effect on scheduling.
    """

    booking_id: BookingId = Field(default_factory=new_booking_id)
    title: str
    starts_at: datetime.datetime
    ends_at: datetime.datetime
    is_block_out: bool = False
    department: str | None = None
    user_name: str | None = None
    user_contact: str | None = None
    delay_in_minutes: NonNegativeInt = 0
    status: BookingStatus = BookingStatus.Scheduled
    is_external: bool = False
    is_urgent: bool = False
    memo: str | None = None
    requests: str | None = None

    @model_validator(mode="after")
    def _check_interval(self) -> Self:
        if self.ends_at <= self.starts_at:
            raise ValueError(
                f"Booking must end after it starts, got {self.starts_at} - {self.ends_at}"
            )
        return self

    @field_serializer("status")
    def serialise_status(self, status: BookingStatus) -> str:
        return status.value

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.starts_at, self.ends_at)

    @property
    def duration(self) -> datetime.timedelta:
        return self.ends_at - self.starts_at

    @property
    def total_delay(self) -> datetime.timedelta:
        """The admin delay. Block-outs are never delayed."""
        if self.is_block_out:
            return datetime.timedelta(0)
        return minutes(self.delay_in_minutes)

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.Cancelled

    def with_memo_line(self, line: str) -> Self:
        """Return a copy with `line` appended to the memo."""
        memo = f"{self.memo}\n{line}" if self.memo else line
        return self.model_copy(update={"memo": memo})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(**data)

    def __str__(self) -> str:
        kind = "Block-out" if self.is_block_out else "Meeting"
        display = (
            f"{kind} '{self.title}' {format_hm(self.starts_at)} - "
            f"{format_hm(self.ends_at)}"
        )
        if self.user_name:
            display += f" booked by {self.user_name}"
            if self.department:
                display += f" ({self.department})"
        if self.delay_in_minutes:
            display += f" [delayed {self.delay_in_minutes} min]"
        return display


class ResolvedBooking(Booking):
    """A booking together with the interval it actually occupies.

    Parameters
    ----------
    effective_starts_at, effective_ends_at
        When the booking actually happens, once the delays of
        earlier meetings and block-outs have been accounted for.
    is_cascading_delayed
        True if the booking was pushed later than its intrinsic start.
    """

    effective_starts_at: datetime.datetime
    effective_ends_at: datetime.datetime
    is_cascading_delayed: bool = False

    @property
    def effective_interval(self) -> TimeInterval:
        return TimeInterval(self.effective_starts_at, self.effective_ends_at)

    @property
    def is_rescheduled(self) -> bool:
        """Whether the actual time differs from the booked time."""
        return bool(self.delay_in_minutes) or self.is_cascading_delayed

    @classmethod
    def from_booking(
        cls,
        booking: Booking,
        effective_starts_at: datetime.datetime,
        effective_ends_at: datetime.datetime,
        is_cascading_delayed: bool = False,
    ) -> Self:
        data = booking.model_dump(exclude=set(EFFECTIVE_FIELDS))
        return cls(
            **data,
            effective_starts_at=effective_starts_at,
            effective_ends_at=effective_ends_at,
            is_cascading_delayed=is_cascading_delayed,
        )

    def to_booking(self) -> Booking:
        return Booking(**self.model_dump(exclude=set(EFFECTIVE_FIELDS)))
