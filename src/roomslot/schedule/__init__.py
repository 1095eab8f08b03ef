#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from roomslot.schedule.booking import Booking, BookingStatus, ResolvedBooking
from roomslot.schedule.resolver import resolve
from roomslot.schedule.status import derive_status
from roomslot.schedule.validation import would_overlap

__all__ = [
    "Booking",
    "BookingStatus",
    "ResolvedBooking",
    "derive_status",
    "resolve",
    "would_overlap",
]
