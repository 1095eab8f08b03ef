#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import datetime
from typing import Any, Literal, Protocol, runtime_checkable

import polars as pl


class NotGiven:
    """
    A sentinel singleton class used to distinguish omitted keyword arguments
    from those passed in with the value None (which may have different behavior).

    For example:

    ```py
    filter_dataframe(
        bookings,
        filter_criteria=[
            ("department", NOT_GIVEN, exact_match_filter_dataframe),  # no constraint
            ("user_name", None, exact_match_filter_dataframe),  # user_name is null
        ],
    )
    ```
    """

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> str:
        return "NOT_GIVEN"


NOT_GIVEN = NotGiven()


@runtime_checkable
class DataframeFilterMethodType(Protocol):
    """Callable type def for Dataframe filtering functions."""

    def __call__(
        self,
        dataframe: pl.DataFrame,
        column_name: str,
        value: Any,
        **kwargs: int | Any,
    ) -> pl.DataFrame: ...


def exact_match_filter_dataframe(
    dataframe: pl.DataFrame, column_name: str, value: Any, **kwargs: int | Any
) -> pl.DataFrame:
    """Filter dataframe by exact matching value on 1 column

    Parameters
    ----------
        dataframe:      Dataframe to filter
        column_name:    Name of column
        value:          Value to match against

    Returns
    -------
        Filtered dataframe

    """
    if value is None:
        return dataframe.filter(pl.col(column_name).is_null())
    return dataframe.filter(pl.col(column_name) == value)


def date_match_filter_dataframe(
    dataframe: pl.DataFrame,
    column_name: str,
    value: datetime.date,
    **kwargs: int | Any,
) -> pl.DataFrame:
    """Filter dataframe for rows whose datetime column_name falls on the date `value`.

    Parameters
    ----------
        dataframe:      Dataframe to filter
        column_name:    Name of a datetime column
        value:          The date to match

    Returns
    -------
        Filtered dataframe
    """
    return dataframe.filter(pl.col(column_name).dt.date() == value)


def filter_dataframe(
    dataframe: pl.DataFrame,
    filter_criteria: list[tuple[str, Any, DataframeFilterMethodType]],
) -> pl.DataFrame:
    """Filter dataframe given a filter method, column name and target value

    Parameters
    ----------
    dataframe
        Dataframe to filter
    filter_criteria
        A list of filter constraints on each column,
        each tuple contains [column_name, value, filter_method]

    Returns
    -------
        Filtered dataframe
    """
    for column_name, filter_value, filter_method in filter_criteria:
        if filter_value is not NOT_GIVEN:
            dataframe = filter_method(
                dataframe=dataframe,
                column_name=column_name,
                value=filter_value,
            )
    return dataframe
