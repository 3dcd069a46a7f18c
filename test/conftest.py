"""
Fixtures for pytest.  Functions defined here can be passed as arguments to
pytest tests.  scope parameter describes how often they are recreated e.g.
once per module.

Integration tests run against temporary SQLite databases, with separate files
for the source and destination sides of a replication.
"""
import logging
from collections import namedtuple
from contextlib import closing
from textwrap import dedent

import pytest

from tablereplicator import (
    connect,
    log_to_console,
)

CREATE_TABLE_SQL = dedent("""
    CREATE TABLE {tablename}
      (
        id integer {primary_key},
        value float not null,
        utf8_text text
      )
      """).strip()

INSERT_SQL = "INSERT INTO {tablename} (id, value, utf8_text) VALUES (?, ?, ?)"

Row = namedtuple('Row', 'id, value, utf8_text')


def _make_rows(count):
    """Return count rows of test data with ids 1 to count."""
    return [Row(i, i * 1.5, f'Öæ°\nz {i}') for i in range(1, count + 1)]


def _create_table(conn, tablename, rows=(), primary_key=True):
    """Create table on SQLite conn and fill it with rows."""
    cursor = conn.cursor()
    cursor.execute(CREATE_TABLE_SQL.format(
        tablename=tablename,
        primary_key='primary key' if primary_key else ''))
    cursor.executemany(INSERT_SQL.format(tablename=tablename), rows)
    conn.commit()
    cursor.close()


def _select_all(conn, tablename):
    """Return all rows of tablename as Row tuples, ordered by id."""
    cursor = conn.cursor()
    cursor.execute(f"SELECT id, value, utf8_text FROM {tablename} ORDER BY id")
    result = [Row(*row) for row in cursor.fetchall()]
    cursor.close()
    return result


@pytest.fixture(scope="function")
def logger() -> logging.Logger:
    """
    Return an enabled tablereplicator logger for tests.
    The logger handlers are cleared afterwards.
    """
    log_to_console()
    logger = logging.getLogger("tablereplicator")
    yield logger
    logger.handlers.clear()


@pytest.fixture(scope='function')
def source_db(tmp_path):
    """Return filename of temporary source SQLite database."""
    return str(tmp_path / 'source.db')


@pytest.fixture(scope='function')
def dest_db(tmp_path):
    """Return filename of temporary destination SQLite database."""
    return str(tmp_path / 'dest.db')


@pytest.fixture(scope='function')
def source_conn(source_db):
    """Get connection to source SQLite database."""
    with closing(connect('SQLITE', source_db)) as conn:
        yield conn


@pytest.fixture(scope='function')
def dest_conn(dest_db):
    """Get connection to destination SQLite database."""
    with closing(connect('SQLITE', dest_db)) as conn:
        yield conn


@pytest.fixture(scope='module')
def test_table_data():
    """Return 25 rows of test data."""
    return _make_rows(25)


@pytest.fixture(scope='function')
def test_tables(test_table_data, source_conn, dest_conn):
    """
    Create src table filled with test data and empty dest table.  The
    databases are temporary files, so no teardown is required.
    """
    _create_table(source_conn, 'src', test_table_data)
    _create_table(dest_conn, 'dest')


@pytest.fixture(scope='session')
def make_rows():
    """Return function that builds rows of test data."""
    return _make_rows


@pytest.fixture(scope='session')
def create_table():
    """Return function that creates and fills a test table."""
    return _create_table


@pytest.fixture(scope='session')
def select_all():
    """Return function that reads back a test table."""
    return _select_all
