#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""The booking session: every user action on the room goes through here."""

import datetime
import logging
import secrets
from collections.abc import Iterable, Sequence
from typing import Any, Callable

import pydantic

from roomslot.constants import (
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_DEPARTMENTS,
    DEFAULT_DURATION_MINUTES,
    DURATION_OPTIONS_MINUTES,
)
from roomslot.reminders import ReminderScheduler
from roomslot.schedule.booking import Booking, BookingId, BookingStatus, ResolvedBooking
from roomslot.schedule.exceptions import AuthorizationError, BookingValidationError
from roomslot.schedule.resolver import resolve
from roomslot.schedule.status import derive_status, refresh_statuses
from roomslot.schedule.time_utils import DaySettings, minutes, now_
from roomslot.schedule.validation import validate_booking, validate_slot
from roomslot.store.booking_store import BookingStore, get_current_store
from roomslot.theme import DepartmentTheme

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "title",
        "starts_at",
        "ends_at",
        "department",
        "user_name",
        "user_contact",
        "memo",
        "requests",
        "is_external",
        "is_urgent",
    }
)
DELAYABLE_STATUSES = frozenset({BookingStatus.Scheduled, BookingStatus.InProgress})


def _build_booking(**fields: Any) -> Booking:
    try:
        return Booking(**fields)
    except pydantic.ValidationError as e:
        raise BookingValidationError(str(e)) from e


def _ends_at(starts_at: datetime.datetime, duration_minutes: int) -> datetime.datetime:
    if duration_minutes not in DURATION_OPTIONS_MINUTES:
        raise BookingValidationError(
            f"The duration must be one of {list(DURATION_OPTIONS_MINUTES)} minutes, "
            f"got {duration_minutes}."
        )
    return starts_at + minutes(duration_minutes)


class BookingSession:
    """A single session on the shared room calendar.

    Parameters
    ----------
    store
        Where bookings are kept. Defaults to the process-wide store.
    departments
        The departments a meeting can be booked for.
    admin_password
        Unlocks the admin actions (block-outs, edits, cancellations and
        delays).
    settings
        The bookable day and slot grid.
    clock
        Returns the current local time.
    reminders
        Rescheduled after every change to the bookings. A scheduler which logs
        the reminders is created if not specified.
    """

    def __init__(
        self,
        store: BookingStore | None = None,
        departments: Sequence[str] = DEFAULT_DEPARTMENTS,
        admin_password: str = DEFAULT_ADMIN_PASSWORD,
        settings: DaySettings | None = None,
        clock: Callable[[], datetime.datetime] = now_,
        reminders: ReminderScheduler | None = None,
    ):
        self.store = store if store is not None else get_current_store()
        self.departments: list[str] = []
        for department in departments:
            self.add_department(department)
        self.settings = settings or DaySettings()
        self.clock = clock
        self.reminders = reminders if reminders is not None else ReminderScheduler()
        self._admin_password = admin_password
        self._is_admin = False
        self.theme = DepartmentTheme(self.departments)

    # admin gate

    @property
    def is_admin(self) -> bool:
        return self._is_admin

    def login(self, password: str) -> None:
        """Switch to admin mode.

        Raises
        ------
        AuthorizationError if the password is wrong. The session is unchanged.
        """
        if not secrets.compare_digest(password, self._admin_password):
            logger.warning("Admin login rejected")
            raise AuthorizationError("The password is incorrect.")
        self._is_admin = True
        logger.info("Admin mode enabled")

    def logout(self) -> None:
        self._is_admin = False

    def _require_admin(self, action: str) -> None:
        if not self._is_admin:
            raise AuthorizationError(f"Only an admin can {action}.")

    # departments

    def add_department(self, department: str) -> None:
        department = department.strip()
        if not department or department in self.departments:
            return
        self.departments.append(department)
        self.theme = DepartmentTheme(self.departments)

    def delete_department(self, department: str) -> None:
        if department not in self.departments:
            logger.debug(f"Department {department} not found")
            return
        self.departments.remove(department)
        self.theme = DepartmentTheme(self.departments)

    # bookings

    def _on_change(self) -> None:
        self.reminders.reschedule(self.store.list_all(), now=self.clock())

    def _validate(
        self,
        booking: Booking,
        check_past: bool,
        exclude_id: BookingId | None = None,
        pending: Iterable[Booking] = (),
    ) -> None:
        validate_slot(
            booking.starts_at,
            booking.ends_at,
            self.settings,
            now=self.clock() if check_past else None,
        )
        existing = [*self.store.list_day(booking.starts_at.date()), *pending]
        validate_booking(booking, existing, exclude_id=exclude_id)

    def create_booking(
        self,
        starts_at: datetime.datetime,
        title: str,
        user_name: str,
        user_contact: str,
        department: str,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
        memo: str | None = None,
        requests: str | None = None,
        is_external: bool = False,
        is_urgent: bool = False,
    ) -> Booking:
        """Book the room for a meeting starting in the slot `starts_at`.

        Raises
        ------
        BookingValidationError
            If a field is missing, the slot is in the past or off the grid, or
            the meeting overlaps an existing booking. Nothing is booked.
        """
        booking = _build_booking(
            title=title,
            starts_at=starts_at,
            ends_at=_ends_at(starts_at, duration_minutes),
            user_name=user_name,
            user_contact=user_contact,
            department=department,
            memo=memo,
            requests=requests,
            is_external=is_external,
            is_urgent=is_urgent,
        )
        self._validate(booking, check_past=True)
        self.store.upsert(booking)
        logger.info(f"Booked {booking}")
        self._on_change()
        return booking

    def create_block_out(
        self,
        starts_at: datetime.datetime,
        title: str,
        duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ) -> Booking:
        """Block the room, eg for maintenance. Only admins can block the room."""
        self._require_admin("block out the room")
        booking = _build_booking(
            title=title,
            starts_at=starts_at,
            ends_at=_ends_at(starts_at, duration_minutes),
            is_block_out=True,
        )
        self._validate(booking, check_past=True)
        self.store.upsert(booking)
        logger.info(f"Blocked out {booking}")
        self._on_change()
        return booking

    def import_bookings(self, bookings: Iterable[Booking]) -> list[Booking]:
        """Add existing bookings (eg when seeding a day). The bookings are all
        validated, against the store and against each other, before any is
        added. Bookings in the past are accepted."""
        accepted: list[Booking] = []
        for booking in bookings:
            self._validate(booking, check_past=False, pending=accepted)
            accepted.append(booking)
        for booking in accepted:
            self.store.upsert(booking)
        logger.info(f"Imported {len(accepted)} bookings")
        self._on_change()
        return accepted

    def edit_booking(self, booking_id: BookingId, **changes: Any) -> Booking:
        """Update the details of an existing booking.

        Parameters
        ----------
        changes
            New values for any of `EDITABLE_FIELDS`. `duration_minutes` may
            be passed instead of `ends_at`. If only `starts_at` is given the
            booking keeps its length.

        Raises
        ------
        BookingValidationError if the updated booking is rejected. The stored
        booking is unchanged.
        """
        self._require_admin("edit bookings")
        current = self.store.get(booking_id)
        if (duration := changes.pop("duration_minutes", None)) is not None:
            starts_at = changes.get("starts_at", current.starts_at)
            changes["ends_at"] = _ends_at(starts_at, duration)
        elif "starts_at" in changes and "ends_at" not in changes:
            # moving a booking keeps its length
            changes["ends_at"] = changes["starts_at"] + current.duration
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise BookingValidationError(
                f"Cannot edit fields {sorted(unknown)}. "
                f"Editable fields are {sorted(EDITABLE_FIELDS)}"
            )
        updated = _build_booking(**{**current.model_dump(), **changes})
        self._validate(updated, check_past=False, exclude_id=booking_id)
        updated = updated.model_copy(
            update={"status": derive_status(updated, self.clock())}
        )
        self.store.upsert(updated)
        logger.info(f"Updated {updated}")
        self._on_change()
        return updated

    def cancel_booking(self, booking_id: BookingId) -> Booking:
        """Cancel a booking. It no longer occupies the room and is kept in the
        cancellation history only."""
        self._require_admin("cancel bookings")
        cancelled = self.store.remove(booking_id, when=self.clock())
        logger.info(f"Cancelled {cancelled}")
        self._on_change()
        return cancelled

    def delay_booking(self, booking_id: BookingId, delay_minutes: int) -> Booking:
        """Add `delay_minutes` to the delay of a scheduled or running meeting."""
        self._require_admin("delay meetings")
        if delay_minutes <= 0:
            raise BookingValidationError("The delay must be a positive number of minutes.")
        booking = self.store.get(booking_id)
        if booking.is_block_out:
            raise BookingValidationError("Block-outs cannot be delayed.")
        status = derive_status(booking, self.clock())
        if status not in DELAYABLE_STATUSES:
            raise BookingValidationError(
                f"Only scheduled or running meetings can be delayed, "
                f"'{booking.title}' is {status}."
            )
        total = booking.delay_in_minutes + delay_minutes
        updated = booking.model_copy(update={"delay_in_minutes": total}).with_memo_line(
            f"Admin added a {delay_minutes}-minute delay (total {total} minutes)."
        )
        self.store.upsert(updated)
        logger.info(f"Delayed '{booking.title}' by {delay_minutes} minutes")
        self._on_change()
        return updated

    def reset_delay(self, booking_id: BookingId) -> Booking:
        self._require_admin("reset delays")
        booking = self.store.get(booking_id)
        if booking.delay_in_minutes == 0:
            return booking
        updated = booking.model_copy(update={"delay_in_minutes": 0}).with_memo_line(
            f"Admin reset the delay ({booking.delay_in_minutes} minutes)."
        )
        self.store.upsert(updated)
        logger.info(f"Reset the delay of '{booking.title}'")
        self._on_change()
        return updated

    def refresh_statuses(self, now: datetime.datetime | None = None) -> list[Booking]:
        """Write back the statuses derived at `now`. Returns the updated bookings."""
        if now is None:
            now = self.clock()
        changed = refresh_statuses(self.store.list_all(), now)
        for booking in changed:
            self.store.upsert(booking)
        if changed:
            logger.debug(f"{len(changed)} booking statuses updated")
        return changed

    def day_schedule(self, day: datetime.date) -> list[ResolvedBooking]:
        """The bookings of `day` with the times they actually occupy the room.
        Both schedule views render this."""
        return resolve(self.store.list_day(day))

    def cancelled_bookings(self, day: datetime.date) -> list[Booking]:
        return self.store.cancelled(day)
