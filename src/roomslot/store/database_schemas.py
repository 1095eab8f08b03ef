#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from enum import StrEnum, auto

import polars as pl

from roomslot.schedule.booking import BookingStatus


class DatabaseNamespace(StrEnum):
    """Namespace for each database"""

    BOOKINGS = auto()
    # cancelled bookings are kept here for audit, they are never resolved
    CANCELLED_BOOKINGS = auto()


BOOKING_SCHEMA = {
    "booking_id": pl.String,
    "title": pl.String,
    "starts_at": pl.Datetime,
    "ends_at": pl.Datetime,
    "is_block_out": pl.Boolean,
    "department": pl.String,
    "user_name": pl.String,
    "user_contact": pl.String,
    "delay_in_minutes": pl.Int32,
    "status": pl.Enum([x.value for x in BookingStatus]),
    "is_external": pl.Boolean,
    "is_urgent": pl.Boolean,
    "memo": pl.String,
    "requests": pl.String,
}
DATABASE_SCHEMAS = {
    DatabaseNamespace.BOOKINGS: BOOKING_SCHEMA,
    DatabaseNamespace.CANCELLED_BOOKINGS: {
        **BOOKING_SCHEMA,
        "cancelled_at": pl.Datetime,
    },
}
