#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime
import json

import pytest

from roomslot.readers import booking_from_record, parse_day, parse_time_on, read_bookings
from roomslot.schedule.exceptions import BookingValidationError
from tests.booking_utils import DAY, at


def test_parse_day():
    assert parse_day("2024-06-25") == DAY
    assert parse_day(DAY) == DAY
    assert parse_day(None) == datetime.date.today()


@pytest.mark.parametrize(
    "value, expected",
    [
        ("10:30", at(10, 30)),
        ("2:15 PM", at(14, 15)),
        (datetime.time(9, 45), at(9, 45)),
    ],
)
def test_parse_time_on(value, expected):
    assert parse_time_on(DAY, value) == expected


def test_parse_time_on_rejects_garbage():
    with pytest.raises(BookingValidationError):
        parse_time_on(DAY, "not a time")


def test_booking_from_record():
    booking = booking_from_record(
        {
            "title": "Sync",
            "start": "10:30",
            "duration_minutes": 45,
            "user_name": "Alice",
            "user_contact": "123-456-7890",
            "department": "Engineering",
            "is_urgent": True,
        },
        DAY,
    )
    assert (booking.starts_at, booking.ends_at) == (at(10, 30), at(11, 15))
    assert booking.is_urgent


def test_booking_from_invalid_record():
    with pytest.raises(BookingValidationError):
        booking_from_record({"title": "Sync", "start": "11:00", "end": "10:00"}, DAY)


def test_read_bookings(tmp_path):
    path = tmp_path / "bookings.json"
    path.write_text(
        json.dumps(
            [
                {"title": "Cleaning", "start": "12:00", "end": "12:15", "is_block_out": True},
                {"title": "Sync", "start": "09:00", "end": "09:30", "delay_in_minutes": 15},
            ]
        )
    )
    cleaning, sync = read_bookings(path, DAY)
    assert cleaning.is_block_out
    assert sync.delay_in_minutes == 15
