#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Terminal views of a day: the slot grid and the agenda list.

Both views render the output of `roomslot.schedule.resolver.resolve` and
never compute effective times themselves."""

import datetime
from collections.abc import Sequence

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from roomslot.constants import GRID_COLUMNS
from roomslot.schedule.booking import BookingStatus, ResolvedBooking
from roomslot.schedule.time_utils import (
    DaySettings,
    format_hm,
    format_interval,
    generate_slots,
    minutes,
)
from roomslot.theme import (
    BLOCK_OUT_STYLE,
    FREE_SLOT_STYLE,
    PAST_SLOT_STYLE,
    STATUS_LABELS,
    STATUS_STYLES,
    DepartmentTheme,
)

CASCADE_NOTICE = "Moved automatically after an earlier delay or a block-out."
NO_BOOKINGS = "No meetings are scheduled for this day."


def time_slots(
    day: datetime.date, settings: DaySettings | None = None
) -> list[datetime.datetime]:
    return list(generate_slots(day, settings))


def slot_occupant(
    schedule: Sequence[ResolvedBooking], slot: datetime.datetime
) -> ResolvedBooking | None:
    """The booking whose effective interval contains `slot`, if any."""
    for booking in schedule:
        if booking.effective_interval.contains(slot):
            return booking
    return None


def is_slot_in_past(
    slot: datetime.datetime, now: datetime.datetime, grace_minutes: int
) -> bool:
    return slot < now - minutes(grace_minutes)


def slot_style(
    booking: ResolvedBooking | None, is_past: bool, theme: DepartmentTheme
) -> str:
    if booking is None:
        return PAST_SLOT_STYLE if is_past else FREE_SLOT_STYLE
    if booking.is_block_out:
        return BLOCK_OUT_STYLE
    if booking.status == BookingStatus.InProgress:
        return STATUS_STYLES[BookingStatus.InProgress]
    style = theme.style_for(booking.department).cell_style
    if booking.status == BookingStatus.Completed:
        style += " dim strike"
    return style


def build_slot_grid(
    schedule: Sequence[ResolvedBooking],
    day: datetime.date,
    now: datetime.datetime,
    theme: DepartmentTheme,
    settings: DaySettings | None = None,
    columns: int = GRID_COLUMNS,
) -> Table:
    """Build a table with one cell per slot of `day`. Free slots are
    highlighted, booked slots take the colour of the department which
    booked them."""
    if settings is None:
        settings = DaySettings()
    table = Table(
        title=f"Available slots for {day.isoformat()}",
        show_header=False,
        show_lines=True,
    )
    for _ in range(columns):
        table.add_column(justify="center")
    cells = []
    for slot in time_slots(day, settings):
        occupant = slot_occupant(schedule, slot)
        past = is_slot_in_past(slot, now, settings.grace_minutes)
        cells.append(Text(format_hm(slot), style=slot_style(occupant, past, theme)))
    for i in range(0, len(cells), columns):
        table.add_row(*cells[i : i + columns])
    return table


def _booking_details(booking: ResolvedBooking) -> Group:
    lines = []
    if booking.is_block_out:
        lines.append(Text(booking.title, style=BLOCK_OUT_STYLE))
        lines.append(Text(format_interval(booking.interval)))
        return Group(*lines)
    markers = ("[urgent] " if booking.is_urgent else "") + (
        "[external] " if booking.is_external else ""
    )
    title_style = "strike" if booking.status == BookingStatus.Completed else "bold"
    lines.append(Text(markers + booking.title, style=title_style))
    lines.append(Text(f"Booked by: {booking.user_name} ({booking.department})"))
    lines.append(Text(f"Booked time: {format_interval(booking.interval)}"))
    if booking.is_rescheduled:
        lines.append(
            Text(
                f"Actual time: {format_interval(booking.effective_interval)}",
                style="bold red",
            )
        )
    if booking.is_cascading_delayed:
        lines.append(Text(f"Note: {CASCADE_NOTICE}", style="dark_orange"))
    if booking.requests:
        lines.append(Text(f"Requests: {booking.requests}", style="slate_blue1"))
    if booking.memo:
        lines.append(Text(f"Admin memo: {booking.memo}", style="grey50"))
    return Group(*lines)


def build_agenda(
    schedule: Sequence[ResolvedBooking], theme: DepartmentTheme
) -> Table | Text:
    """Build the agenda of the day, in the order the bookings actually occur."""
    if not schedule:
        return Text(NO_BOOKINGS, style="grey50")
    table = Table(title="Today's schedule", show_lines=True, expand=True)
    table.add_column("", width=1)
    table.add_column("Booking")
    table.add_column("Status", justify="center", no_wrap=True)
    for booking in schedule:
        if booking.is_block_out:
            marker = Text(" ", style="on grey50")
            badge = Text("Blocked", style=BLOCK_OUT_STYLE)
        else:
            marker = Text(" ", style=f"on {theme.style_for(booking.department).color}")
            badge = Text(STATUS_LABELS[booking.status], style=STATUS_STYLES[booking.status])
        table.add_row(marker, _booking_details(booking), badge)
    return table


def display_slot_grid(
    schedule: Sequence[ResolvedBooking],
    day: datetime.date,
    now: datetime.datetime,
    theme: DepartmentTheme,
    settings: DaySettings | None = None,
    console: Console | None = None,
) -> None:
    """Display the slot grid of `day` as a `rich` table

    ┏━━━━━━━┳━━━━━━━┳━━━━━━━┳━━━━━━━┳━━━━━━━┳━━━━━━━┳━━━━━━━┳━━━━━━━┓
    ┃ 09:00 ┃ 09:15 ┃ 09:30 ┃ 09:45 ┃ 10:00 ┃ 10:15 ┃ 10:30 ┃ 10:45 ┃
    """  # noqa
    console = console or Console()
    console.print(build_slot_grid(schedule, day, now, theme, settings=settings))


def display_agenda(
    schedule: Sequence[ResolvedBooking],
    theme: DepartmentTheme,
    console: Console | None = None,
) -> None:
    """Display the agenda of the day as a `rich` table."""
    console = console or Console()
    console.print(build_agenda(schedule, theme))
