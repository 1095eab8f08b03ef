#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
import contextlib
import copy
import datetime
import logging
from typing import Any, Iterator, cast

import polars as pl

from roomslot.schedule.booking import Booking, BookingId, BookingStatus
from roomslot.schedule.exceptions import BookingNotFoundError
from roomslot.schedule.time_utils import now_
from roomslot.store.database_schemas import DATABASE_SCHEMAS, DatabaseNamespace
from roomslot.store.utils import (
    NOT_GIVEN,
    date_match_filter_dataframe,
    exact_match_filter_dataframe,
    filter_dataframe,
)

logger = logging.getLogger(__name__)


class BookingStore:
    """In-memory store holding the bookings of the room.

    The store is the single writer of the booking list. Readers get
    copies, so the resolver and the views can never mutate it.

    Cancelled bookings are moved to a separate history database, they are not
    returned by `list_day` or `list_all`.
    """

    dbs_schemas: dict[DatabaseNamespace, dict[str, Any]] = DATABASE_SCHEMAS

    def __init__(self):
        self._dbs: dict[DatabaseNamespace, pl.DataFrame] = self._empty_databases()

    @classmethod
    def _empty_databases(cls) -> dict[DatabaseNamespace, pl.DataFrame]:
        return {
            namespace: pl.DataFrame(schema=cls.dbs_schemas[namespace])
            for namespace in cls.dbs_schemas
        }

    def get_database(self, namespace: DatabaseNamespace) -> pl.DataFrame:
        """Get a database given the namespace

        Note that the database returned is a subview of the original database.
        Please treat it as an immutable object to avoid unintended effect.
        Use `upsert` / `remove` to modify the bookings.
        """
        return self._dbs[namespace]

    def _add_to_database(
        self, namespace: DatabaseNamespace, rows: list[dict[str, Any]]
    ) -> None:
        rows_column_names = {x for row in rows for x in row.keys()}
        schema_column_names = set(self.dbs_schemas[namespace].keys())
        if rows_column_names - schema_column_names:
            raise KeyError(
                f"Only column names {schema_column_names} are allowed for namespace {namespace}. "
                f"Found unknown column name {rows_column_names - schema_column_names}"
            )
        rows = copy.deepcopy(rows)
        self._dbs[namespace] = self._dbs[namespace].vstack(
            pl.DataFrame(rows, schema=self.dbs_schemas[namespace])
        )

    def _records(
        self,
        namespace: DatabaseNamespace,
        booking_id: BookingId | Any = NOT_GIVEN,
        day: datetime.date | Any = NOT_GIVEN,
    ) -> list[dict[str, Any]]:
        dataframe = filter_dataframe(
            self._dbs[namespace],
            filter_criteria=[
                ("booking_id", booking_id, exact_match_filter_dataframe),
                ("starts_at", day, date_match_filter_dataframe),
            ],
        )
        return dataframe.sort("starts_at", maintain_order=True).to_dicts()

    def booking_ids(self) -> set[BookingId]:
        """Return the IDs of the active bookings."""
        return set(self._dbs[DatabaseNamespace.BOOKINGS]["booking_id"].to_list())

    def list_day(self, day: datetime.date) -> list[Booking]:
        """The active bookings starting on `day`, sorted by start time."""
        return [
            Booking.from_dict(r)
            for r in self._records(DatabaseNamespace.BOOKINGS, day=day)
        ]

    def list_all(self) -> list[Booking]:
        """All active bookings, sorted by start time."""
        return [Booking.from_dict(r) for r in self._records(DatabaseNamespace.BOOKINGS)]

    def get(self, booking_id: BookingId) -> Booking:
        """Retrieve the active booking with `booking_id`.

        Raises
        ------
        BookingNotFoundError if there is no such booking.
        """
        records = self._records(DatabaseNamespace.BOOKINGS, booking_id=booking_id)
        if not records:
            raise BookingNotFoundError(f"No booking with ID {booking_id} was found.")
        assert len(records) == 1
        return Booking.from_dict(records[0])

    def _delete(self, booking_id: BookingId) -> None:
        predicate = pl.col("booking_id") == booking_id
        self._dbs[DatabaseNamespace.BOOKINGS] = self._dbs[
            DatabaseNamespace.BOOKINGS
        ].filter(~predicate)

    def upsert(self, booking: Booking) -> BookingId:
        """Add a booking, or replace the existing booking with the same ID."""
        if booking.booking_id in self.booking_ids():
            logger.debug(f"Updating booking {booking.booking_id}")
            self._delete(booking.booking_id)
        else:
            logger.debug(f"Adding booking {booking.booking_id}")
        self._add_to_database(DatabaseNamespace.BOOKINGS, rows=[booking.model_dump()])
        return booking.booking_id

    def remove(
        self, booking_id: BookingId, when: datetime.datetime | None = None
    ) -> Booking:
        """Remove a booking from the active set. The booking is kept, marked as
        cancelled, in the cancellation history.

        Raises
        ------
        BookingNotFoundError if there is no such booking.
        """
        booking = self.get(booking_id)
        self._delete(booking_id)
        cancelled = booking.model_copy(update={"status": BookingStatus.Cancelled})
        self._add_to_database(
            DatabaseNamespace.CANCELLED_BOOKINGS,
            rows=[{**cancelled.model_dump(), "cancelled_at": when or now_()}],
        )
        logger.debug(f"Removed booking {booking_id}")
        return cancelled

    def cancelled(self, day: datetime.date | Any = NOT_GIVEN) -> list[Booking]:
        """The cancellation history, optionally restricted to bookings on `day`."""
        records = self._records(DatabaseNamespace.CANCELLED_BOOKINGS, day=day)
        for r in records:
            r.pop("cancelled_at")
        return [Booking.from_dict(r) for r in records]

    def clear(self) -> None:
        """Discard all bookings, including the cancellation history."""
        self._dbs = self._empty_databases()


def _create_global_store() -> BookingStore:
    store = BookingStore()
    globals()["_global_store"] = store
    return store


def get_current_store() -> BookingStore:
    """Getter for the process-wide booking store."""
    global_store = globals().get("_global_store")
    if global_store is None:
        return _create_global_store()
    return cast(BookingStore, global_store)


def set_current_store(store: BookingStore) -> None:
    """Setter for the process-wide booking store."""
    globals()["_global_store"] = store


@contextlib.contextmanager
def new_store(store: BookingStore | None = None) -> Iterator[BookingStore]:
    """Handy context manager which replaces the process-wide store with `store`
    (a fresh one by default), and reverts after context exit."""
    if store is None:
        store = BookingStore()
    original_store = get_current_store()
    try:
        set_current_store(store)
        yield store
    finally:
        set_current_store(original_store)
