#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Checks run before a booking is added to or updated in the store."""

import datetime
from collections.abc import Iterable

from roomslot.schedule.booking import ATTENDEE_FIELDS, Booking, BookingId
from roomslot.schedule.exceptions import (
    MissingFieldError,
    OverlapError,
    SlotAlignmentError,
)
from roomslot.schedule.time_utils import (
    DaySettings,
    TimeInterval,
    combine,
    format_hm,
    format_interval,
    intervals_overlap,
    is_on_grid,
    minutes,
)


def find_conflicts(
    candidate: TimeInterval,
    existing: Iterable[Booking],
    exclude_id: BookingId | None = None,
) -> list[Booking]:
    """Return the active bookings whose intrinsic interval overlaps `candidate`.

    Parameters
    ----------
    exclude_id
        The ID of the booking being edited, which is skipped.
    """
    return [
        booking
        for booking in existing
        if booking.is_active
        and booking.booking_id != exclude_id
        and intervals_overlap(candidate, booking.interval)
    ]


def would_overlap(
    candidate: TimeInterval,
    existing: Iterable[Booking],
    exclude_id: BookingId | None = None,
) -> bool:
    """Check whether `candidate` overlaps any booking in `existing`. Block-outs
    and meetings are checked alike, on their intrinsic intervals. Effective
    intervals are never checked: cascaded meetings are expected to abut."""
    return bool(find_conflicts(candidate, existing, exclude_id=exclude_id))


def check_required_fields(booking: Booking) -> None:
    if not booking.title.strip():
        raise MissingFieldError("A title is required.")
    if booking.is_block_out:
        return
    missing = [f for f in ATTENDEE_FIELDS if not (getattr(booking, f) or "").strip()]
    if missing:
        raise MissingFieldError(
            f"Missing required fields for a meeting: {', '.join(missing)}"
        )


def validate_booking(
    booking: Booking,
    existing: Iterable[Booking],
    exclude_id: BookingId | None = None,
) -> None:
    """Raise if `booking` cannot be added alongside `existing`.

    Raises
    ------
    MissingFieldError
        If the title or, for meetings, any attendee details are empty.
    OverlapError
        If the booking overlaps an existing booking.
    """
    check_required_fields(booking)
    conflicts = find_conflicts(booking.interval, existing, exclude_id=exclude_id)
    if conflicts:
        details = "; ".join(
            f"'{b.title}' ({format_interval(b.interval)})" for b in conflicts
        )
        raise OverlapError(
            f"The room is already booked at the selected time: {details}. "
            "Adjust the start time or the duration of the booking."
        )


def validate_slot(
    starts_at: datetime.datetime,
    ends_at: datetime.datetime,
    settings: DaySettings,
    now: datetime.datetime | None = None,
) -> None:
    """Check the booking boundaries fall on the slot grid of the bookable day.

    Parameters
    ----------
    now
        If specified, slots that started more than `settings.grace_minutes`
        before `now` are rejected.

    Raises
    ------
    SlotAlignmentError
    """
    if ends_at <= starts_at:
        raise SlotAlignmentError("The booking must end after it starts.")
    for dt in (starts_at, ends_at):
        if not is_on_grid(dt, settings.slot_minutes):
            raise SlotAlignmentError(
                f"{format_hm(dt)} is not aligned with the "
                f"{settings.slot_minutes}-minute slots."
            )
    day_start = combine(starts_at.date(), settings.day_start)
    day_end = combine(starts_at.date(), settings.day_end)
    if not day_start <= starts_at < day_end:
        raise SlotAlignmentError(
            f"Bookings must start between {format_hm(settings.day_start)} and "
            f"{format_hm(settings.day_end)}."
        )
    if now is not None and starts_at < now - minutes(settings.grace_minutes):
        raise SlotAlignmentError(
            f"The slot starting at {format_hm(starts_at)} is in the past."
        )
