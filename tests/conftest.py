#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from typing import Iterator

import pytest

from roomslot.reminders import Reminder, ReminderScheduler
from roomslot.session import BookingSession
from roomslot.store.booking_store import BookingStore, new_store
from tests.booking_utils import ADMIN_PASSWORD, Clock, FakeTimerFactory, at


@pytest.fixture(scope="function", autouse=True)
def booking_store() -> Iterator[BookingStore]:
    """Autouse fixture which will setup and teardown a fresh
    process-wide store before and after each test function"""
    with new_store() as store:
        yield store


@pytest.fixture
def fake_timers() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def notified() -> list[Reminder]:
    return []


@pytest.fixture
def clock() -> Clock:
    return Clock(at(8, 0))


@pytest.fixture
def session(
    booking_store: BookingStore,
    fake_timers: FakeTimerFactory,
    notified: list[Reminder],
    clock: Clock,
) -> BookingSession:
    return BookingSession(
        store=booking_store,
        departments=["Engineering", "Design", "Sales"],
        admin_password=ADMIN_PASSWORD,
        clock=clock,
        reminders=ReminderScheduler(notify=notified.append, timer_factory=fake_timers),
    )


@pytest.fixture
def admin_session(session: BookingSession) -> BookingSession:
    session.login(ADMIN_PASSWORD)
    return session
