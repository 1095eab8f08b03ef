#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""A light wrapper around the `datetime` library, containing the interval
arithmetic and slot grid helpers used when booking the room. All times are
local wall-clock times."""

import datetime
from collections.abc import Iterator
from typing import NamedTuple, Self

from pydantic import BaseModel, model_validator

from roomslot.constants import (
    BOOKING_GRACE_MINUTES,
    DAY_END,
    DAY_START,
    SLOT_MINUTES,
)


class TimeInterval(NamedTuple):
    """Represents the half-open interval `[start, end)` between two time points."""

    start: datetime.datetime
    end: datetime.datetime

    def contains(self, dt: datetime.datetime) -> bool:
        """Check if a given datetime falls within this time interval. The end
        point is excluded."""
        return self.start <= dt < self.end

    @property
    def duration(self) -> datetime.timedelta:
        return self.end - self.start


def intervals_overlap(interval_1: TimeInterval, interval_2: TimeInterval) -> bool:
    """Check if two half-open intervals overlap. Intervals which merely touch
    (one ends exactly when the other starts) do not overlap."""
    return interval_1.start < interval_2.end and interval_1.end > interval_2.start


class DaySettings(BaseModel):
    """The bookable day.

    Parameters
    ----------
    day_start
        Time of the first slot.
    day_end
        Slots start strictly before this time.
    slot_minutes
        The granularity of the slot grid. Booking boundaries must
        fall on it.
    grace_minutes
        A slot which started less than `grace_minutes` ago can still be
        booked.
    """

    day_start: datetime.time = DAY_START
    day_end: datetime.time = DAY_END
    slot_minutes: int = SLOT_MINUTES
    grace_minutes: int = BOOKING_GRACE_MINUTES

    @model_validator(mode="after")
    def _check_day(self) -> Self:
        if self.day_end <= self.day_start:
            raise ValueError("The bookable day must end after it starts.")
        if self.slot_minutes <= 0:
            raise ValueError("Slot length must be positive.")
        return self


def now_() -> datetime.datetime:
    """Return the current local date and time."""
    return datetime.datetime.now()


def combine(date: datetime.date, time: datetime.time) -> datetime.datetime:
    """Combine a date and time into a single object representing a given moment
    in time."""
    return datetime.datetime.combine(date, time)


def minutes(number: int | float) -> datetime.timedelta:
    return datetime.timedelta(minutes=number)


def is_on_grid(dt: datetime.datetime, slot_minutes: int = SLOT_MINUTES) -> bool:
    """Check `dt` falls on a slot boundary."""
    return (
        dt.second == 0
        and dt.microsecond == 0
        and (dt.hour * 60 + dt.minute) % slot_minutes == 0
    )


def generate_slots(
    date: datetime.date, settings: DaySettings | None = None
) -> Iterator[datetime.datetime]:
    """Generate the start of every slot on `date`."""
    if settings is None:
        settings = DaySettings()
    current = combine(date, settings.day_start)
    day_end = combine(date, settings.day_end)
    step = minutes(settings.slot_minutes)
    while current < day_end:
        yield current
        current += step


def format_hm(dt: datetime.datetime | datetime.time) -> str:
    return dt.strftime("%H:%M")


def format_interval(interval: TimeInterval) -> str:
    return f"{format_hm(interval.start)} - {format_hm(interval.end)}"
