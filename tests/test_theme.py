#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import pytest

from roomslot.constants import DEFAULT_DEPARTMENTS
from roomslot.theme import DEPARTMENT_PALETTE, DepartmentTheme


def test_departments_get_palette_in_order():
    theme = DepartmentTheme(DEFAULT_DEPARTMENTS)
    assert list(theme.assignments.values()) == list(DEPARTMENT_PALETTE)
    assert theme.style_for("Engineering").color == DEPARTMENT_PALETTE[0]
    assert theme.style_for("Engineering").cell_style == f"black on {DEPARTMENT_PALETTE[0]}"


def test_palette_wraps_around():
    theme = DepartmentTheme(["a", "b", "c"], palette=["red", "blue"])
    assert theme.assignments == {"a": "red", "b": "blue", "c": "red"}


def test_unknown_department_is_assigned_once():
    theme = DepartmentTheme(["a"], palette=["red", "blue", "green"])
    first = theme.style_for("deleted")
    assert first.color == "blue"
    assert theme.style_for("deleted") == first
    assert theme.style_for(None).color == "green"


def test_assignment_is_stable():
    assert (
        DepartmentTheme(DEFAULT_DEPARTMENTS).assignments
        == DepartmentTheme(DEFAULT_DEPARTMENTS).assignments
    )


def test_empty_palette():
    with pytest.raises(ValueError):
        DepartmentTheme(["a"], palette=[])
