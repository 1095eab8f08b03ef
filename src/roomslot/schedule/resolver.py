#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Computes when each booking actually occupies the room.

Delays are never stored as absolute times. Every call recomputes the day
from the intrinsic intervals, so adding, editing or cancelling any booking
re-flows every later booking."""

import datetime
import logging
from collections.abc import Sequence

from roomslot.schedule.booking import Booking, ResolvedBooking

logger = logging.getLogger(__name__)


def _deflect_around_block_outs(
    start: datetime.datetime,
    length: datetime.timedelta,
    later_bookings: Sequence[Booking],
) -> datetime.datetime:
    """Push a meeting of `length` starting at `start` past every later
    block-out it runs into. The block-outs are swept once, left to right, so a
    block-out is checked against the interval produced by earlier pushes.

    A meeting which already starts at or after the end of a block-out (eg it
    was snapped past it by an earlier meeting) is never moved back to that
    block-out's end."""
    end = start + length
    for booking in later_bookings:
        if not booking.is_block_out:
            continue
        # a push only ever moves a meeting later
        if end > booking.starts_at and start < booking.ends_at:
            logger.debug(
                f"Meeting ending at {end} runs into block-out '{booking.title}', "
                f"moving it to {booking.ends_at}"
            )
            start = booking.ends_at
            end = start + length
    return start


def resolve(bookings: Sequence[Booking]) -> list[ResolvedBooking]:
    """Compute the effective interval of each booking.

    Parameters
    ----------
    bookings
        The active bookings of a day. Cancelled bookings should not be
        passed in, everything in the list is considered to occupy the room.

    Returns
    -------
    The bookings, augmented with their effective start and end times, sorted
    by effective start time.

    Notes
    -----
    1. Block-outs always occupy their intrinsic interval.
    2. A meeting starts at its intrinsic start time unless the previous booking
    is still running, in which case it starts when that booking ends. It lasts
    for its intrinsic duration plus its own delay.
    3. A meeting that would run into a later block-out is moved to start when the
    block-out ends. Meetings are only ever moved later, never back to a
    block-out they already start after.
    """
    ordered = sorted(bookings, key=lambda b: b.starts_at)
    resolved = []
    last_effective_end: datetime.datetime | None = None
    for i, booking in enumerate(ordered):
        assert booking.ends_at > booking.starts_at, booking
        if booking.is_block_out:
            if last_effective_end is None or booking.ends_at > last_effective_end:
                last_effective_end = booking.ends_at
            resolved.append(
                ResolvedBooking.from_booking(
                    booking,
                    effective_starts_at=booking.starts_at,
                    effective_ends_at=booking.ends_at,
                )
            )
            continue

        length = booking.duration + booking.total_delay
        start = booking.starts_at
        if last_effective_end is not None and start < last_effective_end:
            start = last_effective_end
        start = _deflect_around_block_outs(start, length, ordered[i + 1 :])
        end = start + length
        is_cascading_delayed = start > booking.starts_at
        if is_cascading_delayed:
            logger.debug(f"{booking} moved to start at {start}")
        last_effective_end = end
        resolved.append(
            ResolvedBooking.from_booking(
                booking,
                effective_starts_at=start,
                effective_ends_at=end,
                is_cascading_delayed=is_cascading_delayed,
            )
        )
    resolved.sort(key=lambda b: b.effective_starts_at)
    return resolved
