"""
Copy every row of source tables to destination tables, one page at a time.

Pages are read with offset pagination ordered by each source table's
ordering key.  The ordering key must be unique: ties may be returned in a
different order by each paged query, which skips some rows and repeats
others.  This is not detected.
"""
from __future__ import annotations

import logging
from contextlib import closing
from typing import (
    Callable,
    Iterable,
    Iterator,
    NamedTuple,
    Optional,
    TYPE_CHECKING,
)

from tablereplicator.abort import (
    clear_abort_event,
    raise_for_abort,
)
from tablereplicator.connect import connect
from tablereplicator.etl import (
    fetch_page,
    validate_identifier,
    write_page,
)
from tablereplicator.exceptions import ReplicatorError
from tablereplicator.row_factories import namedtuple_row_factory
from tablereplicator.types import (
    Connection,
    Page,
)

if TYPE_CHECKING:
    from tablereplicator.config import ReplicationConfig

logger = logging.getLogger('tablereplicator')
BATCH_SIZE = 1000


class TableSpec(NamedTuple):
    """A table taking part in replication and the column that orders it."""
    name: str
    ordering_key: str

    def validate(self) -> None:
        validate_identifier(self.name)
        validate_identifier(self.ordering_key)


class TablePair(NamedTuple):
    """A source table and the destination table that receives its pages."""
    source: TableSpec
    destination: TableSpec


class RunResult(NamedTuple):
    """
    Outcome of a replication run.

    tables_completed lists the source tables that were copied in full before
    the run ended.  rows_copied maps destination table names to the number
    of rows written to them by those completed tables.
    """
    success: bool
    tables_completed: list[str]
    rows_copied: dict[str, int]
    error: Optional[Exception] = None


def fan_out(
        source: TableSpec,
        destinations: Iterable[TableSpec]
        ) -> list[TablePair]:
    """
    Return one TablePair per destination, all reading from source.  Each
    pair pages through the source table separately, so every destination
    receives the complete table.

    :param source: table to read
    :param destinations: tables to receive every row of source
    :return: list of TablePairs in the order of destinations
    """
    return [TablePair(source, destination) for destination in destinations]


def iter_pages(
        source: TableSpec,
        conn: Connection,
        batch_size: int = BATCH_SIZE,
        row_factory: Callable = namedtuple_row_factory,
        ) -> Iterator[Page]:
    """
    Yield successive non-empty pages of source, ordered by its ordering key.

    Paging stops at the first empty page rather than the first short page,
    so a table is always read ceil(rows / batch_size) + 1 times.

    :param source: table to read
    :param conn: dbapi connection to the source database
    :param batch_size: maximum number of rows per page
    :param row_factory: function that accepts a cursor and returns a function
                        for parsing each row
    :return: generator of lists of rows
    :raises ReplicatorAbort: if abort_replication() is called between pages
    """
    offset = 0
    while True:
        raise_for_abort(f"abort_replication() called while paging {source.name}")

        page = fetch_page(source.name, source.ordering_key, conn, offset,
                          batch_size, row_factory=row_factory)
        if not page:
            return

        yield page
        offset += batch_size


def replicate_table(
        pair: TablePair,
        source_conn: Connection,
        dest_conn: Connection,
        batch_size: int = BATCH_SIZE,
        row_factory: Callable = namedtuple_row_factory,
        ) -> int:
    """
    Copy all rows of pair.source into pair.destination.  Each page is
    committed as it is written; rows from earlier pages stay in the
    destination if a later page fails.  Rows are appended, so running
    twice copies every row twice.

    :param pair: the source and destination tables
    :param source_conn: dbapi connection to the source database
    :param dest_conn: dbapi connection to the destination database
    :param batch_size: maximum number of rows per page
    :param row_factory: function that accepts a cursor and returns a function
                        for parsing each row
    :return: the number of rows written
    """
    pair.source.validate()
    pair.destination.validate()

    written = 0
    for page in iter_pages(pair.source, source_conn, batch_size=batch_size,
                           row_factory=row_factory):
        written += write_page(pair.destination.name, dest_conn, page)

    logger.info("Data migration for %s completed successfully.", pair.source.name)
    return written


def replicate(
        table_pairs: Iterable[TablePair],
        source_conn: Connection,
        dest_conn: Connection,
        batch_size: int = BATCH_SIZE,
        row_factory: Callable = namedtuple_row_factory,
        ) -> RunResult:
    """
    Copy each pair's source table to its destination table, in order.

    The first error stops the run.  It is logged and returned in the
    RunResult rather than raised; tables already copied are kept and the
    remaining pairs are not attempted.

    :param table_pairs: TablePairs to copy, in order
    :param source_conn: dbapi connection to the source database
    :param dest_conn: dbapi connection to the destination database
    :param batch_size: maximum number of rows per page
    :param row_factory: function that accepts a cursor and returns a function
                        for parsing each row
    :return: RunResult
    """
    clear_abort_event()
    tables_completed: list[str] = []
    rows_copied: dict[str, int] = {}

    try:
        for pair in table_pairs:
            written = replicate_table(pair, source_conn, dest_conn,
                                      batch_size=batch_size,
                                      row_factory=row_factory)
            rows_copied[pair.destination.name] = (
                rows_copied.get(pair.destination.name, 0) + written)
            tables_completed.append(pair.source.name)
    except ReplicatorError as exc:
        logger.error("An error occurred: %s", exc)
        return RunResult(False, tables_completed, rows_copied, exc)

    logger.info("All data migrations completed successfully.")
    return RunResult(True, tables_completed, rows_copied)


def run(config: ReplicationConfig) -> RunResult:
    """
    Open the source and destination connections described by config, copy
    every configured table pair and close both connections.

    :param config: validated ReplicationConfig
    :return: RunResult
    """
    try:
        with closing(connect(config.source.dbtype,
                             config.source.connection_string)) as source_conn, \
                closing(connect(config.destination.dbtype,
                                config.destination.connection_string)) as dest_conn:
            return replicate(config.tables, source_conn, dest_conn,
                             batch_size=config.batch_size)
    except ReplicatorError as exc:
        logger.error("An error occurred: %s", exc)
        return RunResult(False, [], {}, exc)
