#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Reminders sent shortly before each meeting starts."""

import datetime
import logging
import threading
from collections.abc import Iterable
from typing import Callable, NamedTuple

from roomslot.constants import REMINDER_LEAD_MINUTES
from roomslot.schedule.booking import Booking, BookingId
from roomslot.schedule.time_utils import format_hm, minutes, now_
from roomslot.timers import Timer, TimerFactory, threading_timer

logger = logging.getLogger(__name__)


class Reminder(NamedTuple):
    booking_id: BookingId
    fire_at: datetime.datetime
    message: str


def reminder_message(booking: Booking, lead_minutes: int) -> str:
    who = f"{booking.user_name}'s meeting" if booking.user_name else "The meeting"
    return (
        f"{who} '{booking.title}' starts in {lead_minutes} minutes, "
        f"at {format_hm(booking.starts_at)}."
    )


def plan_reminders(
    bookings: Iterable[Booking],
    now: datetime.datetime,
    lead_minutes: int = REMINDER_LEAD_MINUTES,
) -> list[Reminder]:
    """Work out which reminders should be pending at `now`.

    Each active meeting gets one reminder, `lead_minutes` before its intrinsic
    start. Block-outs, cancelled bookings and meetings whose reminder time
    has passed get none.
    """
    reminders = []
    for booking in bookings:
        if booking.is_block_out or not booking.is_active:
            continue
        fire_at = booking.starts_at - minutes(lead_minutes)
        if fire_at <= now:
            continue
        reminders.append(
            Reminder(
                booking_id=booking.booking_id,
                fire_at=fire_at,
                message=reminder_message(booking, lead_minutes),
            )
        )
    reminders.sort(key=lambda r: r.fire_at)
    return reminders


def log_reminder(reminder: Reminder) -> None:
    logger.info(f"Meeting reminder: {reminder.message}")


class ReminderScheduler:
    """Keeps one timer per pending reminder.

    `reschedule` must be called whenever the booking list changes. It clears
    every pending timer before scheduling again, so repeated calls with the
    same bookings never produce duplicate reminders, and edited or cancelled
    bookings never fire stale ones.
    """

    def __init__(
        self,
        notify: Callable[[Reminder], None] = log_reminder,
        timer_factory: TimerFactory = threading_timer,
        lead_minutes: int = REMINDER_LEAD_MINUTES,
    ):
        self.notify = notify
        self.lead_minutes = lead_minutes
        self._timer_factory = timer_factory
        self._timers: dict[BookingId, Timer] = {}
        self._pending: dict[BookingId, Reminder] = {}
        self._lock = threading.Lock()

    @property
    def pending(self) -> list[Reminder]:
        with self._lock:
            return sorted(self._pending.values(), key=lambda r: r.fire_at)

    def _fire(self, reminder: Reminder) -> None:
        with self._lock:
            if self._pending.get(reminder.booking_id) != reminder:
                return
            self._pending.pop(reminder.booking_id)
            self._timers.pop(reminder.booking_id, None)
        self.notify(reminder)

    def cancel_all(self) -> None:
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._pending.clear()

    def reschedule(
        self, bookings: Iterable[Booking], now: datetime.datetime | None = None
    ) -> list[Reminder]:
        """Replace every pending reminder with the reminders for `bookings`."""
        if now is None:
            now = now_()
        self.cancel_all()
        reminders = plan_reminders(bookings, now, lead_minutes=self.lead_minutes)
        with self._lock:
            for reminder in reminders:
                delay = (reminder.fire_at - now).total_seconds()
                timer = self._timer_factory(
                    delay, lambda reminder=reminder: self._fire(reminder)
                )
                self._timers[reminder.booking_id] = timer
                self._pending[reminder.booking_id] = reminder
                timer.start()
        logger.debug(f"{len(reminders)} reminders scheduled")
        return reminders
