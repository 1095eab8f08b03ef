#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import logging
import threading

import hydra
from hydra.utils import instantiate
from omegaconf import DictConfig, OmegaConf
from rich.console import Console

from roomslot.interactive.display import display_agenda, display_slot_grid
from roomslot.readers import bookings_from_records, parse_day
from roomslot.schedule.exceptions import BookingValidationError
from roomslot.session import BookingSession
from roomslot.timers import PeriodicTask

logger = logging.getLogger(__name__)


def render(session: BookingSession, cfg: DictConfig, console: Console) -> None:
    day = parse_day(cfg.day)
    schedule = session.day_schedule(day)
    display_slot_grid(
        schedule,
        day,
        now=session.clock(),
        theme=session.theme,
        settings=session.settings,
        console=console,
    )
    display_agenda(schedule, theme=session.theme, console=console)


def apply_delays(session: BookingSession, cfg: DictConfig) -> None:
    """Apply the configured delays, keyed by booking title."""
    if not cfg.delays:
        return
    session.login(cfg.session.admin_password)
    day = parse_day(cfg.day)
    by_title = {b.title: b for b in session.store.list_day(day)}
    for title, delay in cfg.delays.items():
        if title not in by_title:
            logger.warning(f"Cannot delay '{title}': no such booking on {day}")
            continue
        try:
            session.delay_booking(by_title[title].booking_id, delay)
        except BookingValidationError as e:
            logger.warning(f"Cannot delay '{title}': {e}")
    session.logout()


@hydra.main(
    config_name="day_view",
    config_path="pkg://roomslot.configs.endpoints",
    version_base=None,
)
def day_view(cfg: DictConfig):
    if cfg.debug:
        logger.info(OmegaConf.to_yaml(cfg, resolve=True))
    session: BookingSession = instantiate(cfg.session)
    day = parse_day(cfg.day)
    session.import_bookings(bookings_from_records(cfg.bookings, day))
    apply_delays(session, cfg)
    session.refresh_statuses()
    console = Console()
    render(session, cfg, console)
    if not cfg.watch:
        session.reminders.cancel_all()
        return

    def refresh():
        session.refresh_statuses()
        console.clear()
        render(session, cfg, console)

    task = PeriodicTask(cfg.refresh_seconds, refresh)
    task.start()
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        logger.info("Stopping")
    finally:
        task.stop()
        session.reminders.cancel_all()


if __name__ == "__main__":
    day_view()
