#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import pytest

from roomslot.timers import PeriodicTask
from tests.booking_utils import FakeTimerFactory


def test_periodic_task_reschedules(fake_timers: FakeTimerFactory):
    calls = []
    task = PeriodicTask(5, lambda: calls.append(1), timer_factory=fake_timers)
    task.start()
    assert task.running
    for _ in range(3):
        (timer,) = fake_timers.live
        assert timer.delay_seconds == 5
        timer.started = False
        timer.fire()
    assert len(calls) == 3
    assert len(fake_timers.timers) == 4


def test_periodic_task_survives_failing_callback(fake_timers: FakeTimerFactory):
    def fail():
        raise RuntimeError("boom")

    task = PeriodicTask(1, fail, timer_factory=fake_timers)
    task.start()
    fake_timers.timers[-1].fire()
    assert task.running
    assert len(fake_timers.timers) == 2


def test_stopped_task_does_not_run(fake_timers: FakeTimerFactory):
    calls = []
    task = PeriodicTask(5, lambda: calls.append(1), timer_factory=fake_timers)
    task.start()
    task.start()
    assert len(fake_timers.timers) == 1
    task.stop()
    assert not task.running
    assert fake_timers.timers[0].cancelled
    fake_timers.timers[0].fire()
    assert calls == []


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        PeriodicTask(0, lambda: None)


def test_restart_keeps_a_single_timer_chain(fake_timers: FakeTimerFactory):
    calls = []
    task = PeriodicTask(5, lambda: calls.append(1), timer_factory=fake_timers)
    task.start()
    task.stop()
    task.start()
    first, second = fake_timers.timers
    first.fire()
    assert calls == []
    assert fake_timers.live == [second]


def test_restart_during_a_tick(fake_timers: FakeTimerFactory):
    def restart():
        task.stop()
        task.start()

    task = PeriodicTask(5, restart, timer_factory=fake_timers)
    task.start()
    fake_timers.timers[0].fire()
    assert len(fake_timers.live) == 1
    assert fake_timers.live[0] is fake_timers.timers[1]
