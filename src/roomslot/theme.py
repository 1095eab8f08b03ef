#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
"""Colours used to tell departments apart in the schedule views."""

from collections.abc import Sequence
from typing import NamedTuple

from roomslot.schedule.booking import BookingStatus

DEPARTMENT_PALETTE = (
    "deep_sky_blue1",
    "orange1",
    "medium_purple1",
    "spring_green2",
    "hot_pink",
    "slate_blue1",
    "magenta",
    "dark_cyan",
)

STATUS_STYLES: dict[BookingStatus, str] = {
    BookingStatus.Scheduled: "bold blue",
    BookingStatus.InProgress: "bold green blink",
    BookingStatus.Completed: "dim",
    BookingStatus.Delayed: "bold dark_orange",
    BookingStatus.Cancelled: "bold red",
}

STATUS_LABELS: dict[BookingStatus, str] = {
    BookingStatus.Scheduled: "Scheduled",
    BookingStatus.InProgress: "In progress",
    BookingStatus.Completed: "Completed",
    BookingStatus.Delayed: "Delayed",
    BookingStatus.Cancelled: "Cancelled",
}

BLOCK_OUT_STYLE = "strike grey50"
FREE_SLOT_STYLE = "bold blue"
PAST_SLOT_STYLE = "grey50"


class DepartmentStyle(NamedTuple):
    color: str

    @property
    def cell_style(self) -> str:
        return f"black on {self.color}"


class DepartmentTheme:
    """Assigns each department a colour from `palette`.

    The assignment is fixed when the theme is built: the i-th department
    gets palette entry `i % len(palette)`. Departments which are not in the
    list (eg deleted after they were booked) are assigned the following
    entries in the order they are first looked up.
    """

    def __init__(
        self,
        departments: Sequence[str] = (),
        palette: Sequence[str] = DEPARTMENT_PALETTE,
    ):
        if not palette:
            raise ValueError("The palette must contain at least one colour.")
        self.palette = tuple(palette)
        self._assigned: dict[str, int] = {}
        for department in departments:
            self._assign(department)

    def _assign(self, department: str) -> int:
        if department not in self._assigned:
            self._assigned[department] = len(self._assigned) % len(self.palette)
        return self._assigned[department]

    @property
    def assignments(self) -> dict[str, str]:
        return {d: self.palette[i] for d, i in self._assigned.items()}

    def style_for(self, department: str | None) -> DepartmentStyle:
        return DepartmentStyle(self.palette[self._assign(department or "")])
