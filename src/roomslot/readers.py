#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pydantic
from dateutil import parser as date_parser

from roomslot.schedule.booking import Booking
from roomslot.schedule.exceptions import BookingValidationError
from roomslot.schedule.time_utils import combine

logger = logging.getLogger(__name__)


def load_json(path: str | Path):
    with open(path, "r") as f:
        data = json.load(f)
    return data


def parse_day(day: str | datetime.date | None) -> datetime.date:
    """Parse a date such as "2024-06-25". Today is returned if `day` is None."""
    if day is None:
        return datetime.date.today()
    if isinstance(day, datetime.date):
        return day
    return date_parser.parse(day).date()


def parse_time_on(day: datetime.date, value: str | datetime.time) -> datetime.datetime:
    """Resolve a time of day such as "10:30" or "2:15 PM" to a moment on `day`."""
    if isinstance(value, datetime.time):
        return combine(day, value)
    try:
        parsed = date_parser.parse(value, default=combine(day, datetime.time()))
    except (ValueError, OverflowError) as e:
        raise BookingValidationError(f"Could not parse time '{value}'") from e
    return combine(day, parsed.time())


def booking_from_record(record: Mapping[str, Any], day: datetime.date) -> Booking:
    """Build a booking on `day` from a record where `start` and `end` (or
    `duration_minutes`) are times of day. The remaining keys are `Booking`
    fields."""
    data = dict(record)
    starts_at = parse_time_on(day, data.pop("start"))
    if "end" in data:
        ends_at = parse_time_on(day, data.pop("end"))
    else:
        ends_at = starts_at + datetime.timedelta(minutes=data.pop("duration_minutes"))
    try:
        return Booking(starts_at=starts_at, ends_at=ends_at, **data)
    except pydantic.ValidationError as e:
        raise BookingValidationError(str(e)) from e


def bookings_from_records(
    records: Iterable[Mapping[str, Any]], day: datetime.date
) -> list[Booking]:
    bookings = [booking_from_record(r, day) for r in records]
    logger.debug(f"Read {len(bookings)} bookings for {day}")
    return bookings


def read_bookings(path: str | Path, day: datetime.date) -> list[Booking]:
    """Read the bookings of `day` from a JSON file containing a list of records
    (see `booking_from_record`)."""
    return bookings_from_records(load_json(path), day)
