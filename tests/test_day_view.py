#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import logging

from hydra import compose, initialize_config_module
from hydra.utils import instantiate
from omegaconf import OmegaConf
from rich.console import Console

from roomslot.endpoints.day_view import apply_delays, render
from roomslot.readers import bookings_from_records
from roomslot.reminders import ReminderScheduler
from roomslot.schedule.time_utils import DaySettings
from roomslot.session import BookingSession
from tests.booking_utils import ADMIN_PASSWORD, DAY, Clock, FakeTimerFactory, at, meeting


def make_cfg(**delays):
    return OmegaConf.create(
        {
            "day": DAY.isoformat(),
            "session": {"admin_password": ADMIN_PASSWORD},
            "delays": delays,
        }
    )


def test_apply_delays(session: BookingSession, caplog):
    sync = meeting("Sync", at(9, 0), at(9, 30))
    session.import_bookings([sync])
    with caplog.at_level(logging.WARNING):
        apply_delays(session, make_cfg(Sync=15, Missing=30))
    assert session.store.get(sync.booking_id).delay_in_minutes == 15
    assert "Cannot delay 'Missing'" in caplog.text
    assert not session.is_admin


def test_apply_delays_skips_rejected(session: BookingSession, clock: Clock, caplog):
    sync = meeting("Sync", at(9, 0), at(9, 30))
    session.import_bookings([sync])
    clock.now = at(12, 0)
    with caplog.at_level(logging.WARNING):
        apply_delays(session, make_cfg(Sync=15))
    assert session.store.get(sync.booking_id).delay_in_minutes == 0
    assert "Cannot delay 'Sync'" in caplog.text


def test_render(session: BookingSession):
    session.import_bookings([meeting("Sync", at(9, 0), at(9, 30), delay=15)])
    console = Console(record=True, width=120)
    render(session, make_cfg(), console)
    text = console.export_text()
    assert f"Available slots for {DAY.isoformat()}" in text
    assert "Actual time: 09:00 - 09:45" in text


def test_packaged_config(fake_timers: FakeTimerFactory):
    with initialize_config_module(
        config_module="roomslot.configs.endpoints", version_base=None
    ):
        cfg = compose(config_name="day_view", overrides=[f"day={DAY.isoformat()}"])
    session: BookingSession = instantiate(cfg.session, _partial_=True)(
        clock=Clock(at(8, 0)),
        reminders=ReminderScheduler(timer_factory=fake_timers),
    )
    assert isinstance(session.settings, DaySettings)
    assert session.settings.slot_minutes == 15
    assert len(session.departments) == 8
    session.import_bookings(bookings_from_records(cfg.bookings, DAY))
    apply_delays(session, cfg)
    schedule = {b.title: b for b in session.day_schedule(DAY)}
    sync = schedule["Weekly team sync"]
    assert sync.delay_in_minutes == 15
    # the delayed sync would run into the maintenance block-out
    assert (sync.effective_starts_at, sync.effective_ends_at) == (at(11, 15), at(12, 0))
    review = schedule["New project design review"]
    assert review.effective_starts_at == at(12, 0)
    assert review.is_cascading_delayed
    assert len(fake_timers.live) == 2
