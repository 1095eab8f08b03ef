#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from roomslot.store.booking_store import (
    BookingStore,
    get_current_store,
    new_store,
    set_current_store,
)

__all__ = ["BookingStore", "get_current_store", "new_store", "set_current_store"]
