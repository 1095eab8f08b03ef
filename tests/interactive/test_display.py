#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
from rich.console import Console
from rich.table import Table
from rich.text import Text

from roomslot.interactive.display import (
    CASCADE_NOTICE,
    NO_BOOKINGS,
    build_agenda,
    build_slot_grid,
    display_agenda,
    slot_occupant,
    slot_style,
)
from roomslot.schedule.booking import BookingStatus
from roomslot.schedule.resolver import resolve
from roomslot.theme import BLOCK_OUT_STYLE, FREE_SLOT_STYLE, PAST_SLOT_STYLE, DepartmentTheme
from tests.booking_utils import DAY, at, block_out, meeting

THEME = DepartmentTheme(["Engineering", "Design"])


def sample_schedule():
    return resolve(
        [
            meeting("Weekly team sync", at(9, 0), at(9, 30), delay=15),
            meeting("Design review", at(9, 30), at(10, 0), department="Design"),
            block_out("Maintenance", at(11, 0), at(11, 15)),
        ]
    )


def render(renderable) -> str:
    console = Console(record=True, width=120)
    console.print(renderable)
    return console.export_text()


def test_slot_occupant_uses_effective_interval():
    schedule = sample_schedule()
    assert slot_occupant(schedule, at(9, 30)).title == "Weekly team sync"
    assert slot_occupant(schedule, at(10, 0)).title == "Design review"
    assert slot_occupant(schedule, at(10, 15)) is None
    assert slot_occupant(schedule, at(11, 0)).title == "Maintenance"


def test_slot_style():
    schedule = sample_schedule()
    assert slot_style(None, is_past=False, theme=THEME) == FREE_SLOT_STYLE
    assert slot_style(None, is_past=True, theme=THEME) == PAST_SLOT_STYLE
    assert slot_style(schedule[-1], is_past=False, theme=THEME) == BLOCK_OUT_STYLE
    assert slot_style(schedule[1], is_past=False, theme=THEME) == (
        THEME.style_for("Design").cell_style
    )


def test_slot_grid():
    table = build_slot_grid(sample_schedule(), DAY, now=at(8, 0), theme=THEME)
    assert isinstance(table, Table)
    assert table.title == f"Available slots for {DAY.isoformat()}"
    assert len(table.columns) == 8
    assert table.row_count == 5
    first_cell = table.columns[0]._cells[0]
    assert isinstance(first_cell, Text)
    assert first_cell.plain == "09:00"
    text = render(table)
    assert "17:45" in text
    assert "18:00" not in text


def test_agenda_shows_actual_times():
    text = render(build_agenda(sample_schedule(), THEME))
    assert "Today's schedule" in text
    assert "Booked time: 09:30 - 10:00" in text
    assert "Actual time: 09:45 - 10:15" in text
    assert CASCADE_NOTICE in text
    assert "Blocked" in text


def test_agenda_status_labels():
    schedule = resolve(
        [meeting("Sync", at(9, 0), at(9, 30), status=BookingStatus.InProgress)]
    )
    assert "In progress" in render(build_agenda(schedule, THEME))


def test_empty_agenda():
    agenda = build_agenda([], THEME)
    assert isinstance(agenda, Text)
    assert agenda.plain == NO_BOOKINGS


def test_display_agenda_prints_to_console():
    console = Console(record=True, width=120)
    display_agenda(sample_schedule(), THEME, console=console)
    assert "Weekly team sync" in console.export_text()
