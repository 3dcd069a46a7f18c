"""
Functions for reading pages from and writing pages to databases.
"""
import logging
import re
from itertools import (
    zip_longest,
    chain,
)
from typing import (
    Callable,
    Iterable,
    Iterator,
    Union,
)

from tablereplicator.db_helper_factory import DB_HELPER_FACTORY
from tablereplicator.exceptions import (
    ReplicatorBadIdentifierError,
    ReplicatorExtractError,
    ReplicatorInsertError,
)
from tablereplicator.row_factories import namedtuple_row_factory
from tablereplicator.types import (
    Connection,
    Page,
    Row,
    Chunk,
)

logger = logging.getLogger('tablereplicator')
CHUNKSIZE = 5000


def iter_chunks(
        select_query: str,
        conn: Connection,
        parameters: tuple = (),
        row_factory: Callable = namedtuple_row_factory,
        chunk_size: int = CHUNKSIZE
        ) -> Iterator[Chunk]:
    """
    Run SQL query against connection and return iterator object to loop over
    results in batches of chunk_size (default 5000).

    The row_factory changes the output format of the results.

    :param select_query: SQL query to execute
    :param conn: dbapi connection
    :param parameters: bind variables to insert in the query
    :param row_factory: function that accepts a cursor and returns a function
                        for parsing each row
    :param chunk_size: size of chunks to group data by
    :return: generator returning lists of rows built by row_factory
    :raises ReplicatorExtractError: if SQL raises an error
    """
    logger.debug(f"Fetching:\n\n{select_query}\n\nwith parameters:\n\n"
                 f"{parameters}\n\nagainst:\n\n{conn}")

    helper = DB_HELPER_FACTORY.from_conn(conn)
    with helper.cursor(conn) as cursor:

        # Run query
        try:
            cursor.execute(select_query, parameters)
        except helper.sql_exceptions as exc:
            # Even though we haven't modified data, we have to rollback to
            # clear the failed transaction before any others can be started.
            conn.rollback()
            msg = f"SQL query raised an error.\n\n{select_query}\n\n{exc}\n"
            raise ReplicatorExtractError(msg)

        create_row = row_factory(cursor)

        while True:
            try:
                rows = cursor.fetchmany(chunk_size)
                if not rows:
                    # Close the active transaction
                    conn.commit()
            except helper.sql_exceptions as exc:
                conn.rollback()
                msg = f"Fetching rows raised an error.\n\n{select_query}\n\n{exc}\n"
                raise ReplicatorExtractError(msg)

            if not rows:
                return

            yield [create_row(row) for row in rows]


def fetchall(
        select_query: str,
        conn: Connection,
        parameters: tuple = (),
        row_factory: Callable = namedtuple_row_factory,
        chunk_size: int = CHUNKSIZE
        ) -> Chunk:
    """
    Get all results of query as a list.  See iter_chunks for details.

    :param select_query: SQL query to execute
    :param conn: dbapi connection
    :param parameters: bind variables to insert in the query
    :param row_factory: function that accepts a cursor and returns a function
                        for parsing each row
    :param chunk_size: size of chunks to group data by
    :return: list of rows built by row_factory
    """
    return list(chain.from_iterable(
        iter_chunks(select_query, conn, parameters=parameters,
                    row_factory=row_factory, chunk_size=chunk_size)))


def executemany(
        query: str,
        conn: Connection,
        rows: Iterable[Row],
        commit_chunks: bool = True,
        chunk_size: int = CHUNKSIZE,
        ) -> int:
    """
    Use query to insert data from rows to database at conn.  This method uses
    the bulk execution path of the driver (fast_executemany for SQL Server,
    execute_batch for PostgreSQL) to send each chunk in as few round trips as
    possible.  Row data are passed as parameters into query.

    An SQL error, such as a primary key violation, rolls back the current
    chunk and raises.  Chunks committed before the error stay committed when
    commit_chunks is True; there is no retry and no row-level error handling.

    :param query: SQL insert command with placeholders for data
    :param conn: dbapi connection
    :param rows: an iterable of rows containing data to be inserted
    :param commit_chunks: commit after each chunk has been inserted
    :param chunk_size: size of chunks to group data by
    :return: the number of rows processed
    :raises ReplicatorInsertError: if SQL raises an error
    """
    logger.debug("Executing:\n\n%s\n\nagainst:\n\n%s", query, conn)

    helper = DB_HELPER_FACTORY.from_conn(conn)
    processed = 0

    with helper.cursor(conn) as cursor:
        for chunk_with_nones in _chunker(rows, chunk_size):
            # Chunker pads to whole chunk with None; remove these
            chunk = [row for row in chunk_with_nones if row is not None]

            # Show first row as example of data
            if processed == 0:
                logger.debug(f"First row: {chunk[0]}")

            try:
                helper.executemany(cursor, query, chunk)
                # Deferred constraints are only checked here
                if commit_chunks:
                    conn.commit()
            except helper.sql_exceptions as exc:
                # Rollback to clear the failed transaction before any others can
                # be started.
                conn.rollback()
                msg = (f"SQL query raised an error.\n\n{query}\n\n"
                       f"Required paramstyle: {helper.paramstyle}\n\n{exc}\n")
                raise ReplicatorInsertError(msg)

            processed += len(chunk)

        # Commit changes where not already committed
        if not commit_chunks:
            try:
                conn.commit()
            except helper.sql_exceptions as exc:
                conn.rollback()
                msg = f"Committing rows raised an error.\n\n{query}\n\n{exc}\n"
                raise ReplicatorInsertError(msg)

    return processed


def load(
        table: str,
        conn: Connection,
        rows: Iterable[Row],
        commit_chunks: bool = True,
        chunk_size: int = CHUNKSIZE,
        ) -> int:
    """
    Load data from iterable of named tuples or dictionaries into pre-existing
    table in database on conn.  Columns are matched by name, using the names
    carried by the first row.

    :param table: name of table
    :param conn: dbapi connection
    :param rows: iterable of named tuples or dictionaries of data
    :param commit_chunks: commit after each chunk (see executemany)
    :param chunk_size: size of chunks to group data by
    :return: the number of rows processed
    """
    # Get first row without losing it from row iteration, returning early if
    # the iterable was empty.
    rows = iter(rows)
    try:
        first_row = next(rows)
    except StopIteration:
        return 0
    rows = chain([first_row], rows)

    query = generate_insert_sql(table, first_row, conn)

    return executemany(query, conn, rows, commit_chunks=commit_chunks,
                       chunk_size=chunk_size)


def generate_insert_sql(
        table: str,
        row: Row,
        conn: Connection
        ) -> str:
    """
    Generate insert SQL for table, getting column names from row and the
    placeholder style from the connection.  `row` is either a namedtuple or
    a dictionary.

    :param table: name of table
    :param row: a single row as a namedtuple or dict
    :param conn: dbapi connection
    :return: SQL statement to insert data into the given table
    :raises ReplicatorInsertError: if 'row' is not a namedtuple or a dict,
                                   or if the driver has no named paramstyle
    """
    helper = DB_HELPER_FACTORY.from_conn(conn)
    paramstyles = {
        "qmark": "?",
        "named": ":{name}",
        "format": "%s",
        "pyformat": "%({name})s"
    }

    # Namedtuples use a query with positional placeholders
    if hasattr(row, '_asdict'):
        paramstyle = helper.positional_paramstyle
        columns = list(row._fields)
        placeholders = [paramstyles[paramstyle]] * len(columns)

    # Dictionaries use a query with named placeholders
    elif hasattr(row, 'keys'):
        paramstyle = helper.named_paramstyle
        if not paramstyle:
            msg = (f"Database connection ({str(conn.__class__)}) doesn't support named parameters.  "
                   "Read pages with namedtuple_row_factory instead.")
            raise ReplicatorInsertError(msg)

        columns = list(row.keys())
        placeholders = [paramstyles[paramstyle].format(name=c) for c in columns]

    else:
        msg = f"Row is not a dictionary or namedtuple ({type(row)})"
        raise ReplicatorInsertError(msg)

    # Validate identifiers to prevent malicious code injection
    for identifier in (table, *columns):
        validate_identifier(identifier)

    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({', '.join(placeholders)})"


def fetch_page(
        table: str,
        ordering_key: str,
        conn: Connection,
        offset: int,
        batch_size: int,
        row_factory: Callable = namedtuple_row_factory,
        ) -> Page:
    """
    Read rows [offset, offset + batch_size) of table, ordered by
    ordering_key, using the page query of the connection's dialect.  The
    page is returned as a list, so it can be written more than once.

    :param table: name of source table
    :param ordering_key: column that gives a stable row order
    :param conn: dbapi connection
    :param offset: number of rows to skip
    :param batch_size: maximum number of rows in the page
    :param row_factory: function that accepts a cursor and returns a function
                        for parsing each row
    :return: list of rows; empty when offset is past the last row
    :raises ReplicatorExtractError: if SQL raises an error
    """
    validate_identifier(table)
    validate_identifier(ordering_key)

    helper = DB_HELPER_FACTORY.from_conn(conn)
    select_query = helper.page_query(table, ordering_key, offset, batch_size)

    logger.info("Fetching page of %s (offset=%s, batch_size=%s)",
                table, offset, batch_size)
    page = fetchall(select_query, conn, row_factory=row_factory,
                    chunk_size=batch_size)
    logger.info("%s rows returned", len(page))
    return page


def write_page(
        table: str,
        conn: Connection,
        page: Page,
        ) -> int:
    """
    Bulk insert one page into table and commit.  Pages are committed
    independently; a failure leaves earlier pages in place.

    :param table: name of destination table
    :param conn: dbapi connection
    :param page: list of named tuples or dictionaries
    :return: the number of rows written
    :raises ReplicatorInsertError: if SQL raises an error
    """
    written = load(table, conn, page, chunk_size=max(len(page), 1))
    logger.info("%s rows written to %s", written, table)
    return written


def validate_identifier(identifier: str) -> None:
    """
    Validate characters used in identifier e.g. table or column name.
    Identifiers must comprise alpha-numeric characters, plus `_` or `$` and
    cannot start with `$`, or numbers.

    :param identifier: a database identifier
    :raises ReplicatorBadIdentifierError: if the 'identifier' contains invalid
                                          characters
    """
    # Identifier rules are based on PostgreSQL specifications, defined here:
    # https://www.postgresql.org/docs/current/sql-syntax-lexical.html#SQL-SYNTAX-IDENTIFIERS

    # `\w` represents all alphanumeric characters (including unicode) plus `_`
    # `(?![0-9])` is a "negative-lookahead assertion" to remove numbers from
    # the match for the first character.
    # The first group is optional and ends with a dot.  It is the schema name.
    regex = re.compile(r"((?![0-9])[\w][\w$]*\.)?((?![0-9])[\w][\w$]*)")

    if not isinstance(identifier, str) or not regex.fullmatch(identifier):
        msg = f"'{identifier}' contains invalid characters."
        raise ReplicatorBadIdentifierError(msg)


def _chunker(
        iterable: Iterable[Row],
        n_chunks: int,
        ) -> Iterator[tuple[Union[Row, None], ...]]:
    """Collect data into fixed-length chunks or blocks.
    Code from recipe at https://docs.python.org/3.6/library/itertools.html

    :param iterable: an iterable object
    :param n_chunks: the number of values in each chunk
    :return: generator returning tuples of rows, of length n_chunks,
             where empty values are filled using None
    """
    # _chunker((A,B,C,D,E,F,G), 3) --> (A,B,C) (D,E,F) (G,None,None)
    args = [iter(iterable)] * n_chunks
    return zip_longest(*args, fillvalue=None)
