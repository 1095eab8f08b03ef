#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime

SLOT_MINUTES = 15
DAY_START = datetime.time(9, 0)
DAY_END = datetime.time(18, 0)
BOOKING_GRACE_MINUTES = 5
"""A slot that started less than this many minutes ago can still be booked."""
REMINDER_LEAD_MINUTES = 10
DURATION_OPTIONS_MINUTES = tuple(range(15, 121, 15))
"""The lengths a booking can be made for, from 15 minutes to 2 hours."""
DEFAULT_DURATION_MINUTES = 30
DEFAULT_DEPARTMENTS = (
    "Engineering",
    "Marketing",
    "Sales",
    "People",
    "Design",
    "Finance",
    "Operations",
    "Customer Support",
)
DEFAULT_ADMIN_PASSWORD = "admin123"
GRID_COLUMNS = 8
