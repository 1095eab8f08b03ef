#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime
from collections.abc import Iterable

from roomslot.schedule.booking import Booking, BookingStatus

FIXED_STATUSES = frozenset({BookingStatus.Cancelled})


def derive_status(booking: Booking, now: datetime.datetime) -> BookingStatus:
    """The lifecycle status of `booking` at `now`.

    The intrinsic interval is used, not the effective one: a meeting which
    was pushed back by an earlier delay is still reported as in progress
    from its booked start time.

    Notes
    -----
    1. Block-outs and cancelled bookings keep their current status.
    2. A booking whose start is in the future is reported as scheduled even if
    it was previously marked in progress or completed (eg after the clock was
    moved back).
    3. `BookingStatus.Delayed` is never derived.
    """
    if booking.is_block_out or booking.status in FIXED_STATUSES:
        return booking.status
    if now < booking.starts_at:
        return BookingStatus.Scheduled
    if now < booking.ends_at:
        return BookingStatus.InProgress
    return BookingStatus.Completed


def refresh_statuses(
    bookings: Iterable[Booking], now: datetime.datetime
) -> list[Booking]:
    """Return updated copies of the bookings whose status changed at `now`."""
    changed = []
    for booking in bookings:
        status = derive_status(booking, now)
        if status != booking.status:
            changed.append(booking.model_copy(update={"status": status}))
    return changed
