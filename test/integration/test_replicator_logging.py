"""Tests for replication logging.  These are run against SQLite."""
# pylint: disable=unused-argument, missing-docstring
import logging
import re

import pytest

from tablereplicator import (
    TablePair,
    TableSpec,
    replicate,
)

NO_OUTPUT = []
INFO = [
    'Fetching page of src (offset=0, batch_size=2)',
    '2 rows returned',
    '2 rows written to dest',
    'Fetching page of src (offset=2, batch_size=2)',
    '1 rows returned',
    '1 rows written to dest',
    'Fetching page of src (offset=4, batch_size=2)',
    '0 rows returned',
    'Data migration for src completed successfully.',
    'All data migrations completed successfully.']
INFO_AND_DEBUG_START = [
    'Fetching page of src (offset=0, batch_size=2)',
    'Fetching:\n'
    '\n'
    'SELECT * FROM src ORDER BY id LIMIT 2 OFFSET 0\n'
    '\n'
    'with parameters:\n'
    '\n'
    '()\n'
    '\n'
    'against:\n'
    '\n'
    '<sqlite3.Connection object at ???>',
    '2 rows returned',
    'Executing:\n'
    '\n'
    'INSERT INTO dest (id, value, utf8_text) VALUES (?, ?, ?)\n'
    '\n'
    'against:\n'
    '\n'
    '<sqlite3.Connection object at ???>',
    "First row: Row(id=1, value=1.5, utf8_text='Öæ°\\nz 1')",
    '2 rows written to dest']


@pytest.fixture(scope='function')
def three_row_tables(source_conn, dest_conn, create_table, make_rows):
    create_table(source_conn, 'src', make_rows(3))
    create_table(dest_conn, 'dest')


@pytest.mark.parametrize('level, expected', [
    (logging.INFO, INFO),
    (logging.WARNING, NO_OUTPUT),
])
def test_logging_replicate(caplog, level, expected, three_row_tables,
                           source_conn, dest_conn, logger):
    # Arrange
    caplog.set_level(level, logger=logger.name)

    # Act
    replicate([TablePair(TableSpec('src', 'id'), TableSpec('dest', 'id'))],
              source_conn, dest_conn, batch_size=2)

    # Assert
    assert caplog.messages == expected


def test_logging_replicate_debug(caplog, three_row_tables, source_conn,
                                 dest_conn, logger):
    # Arrange
    caplog.set_level(logging.DEBUG, logger=logger.name)

    # Act
    replicate([TablePair(TableSpec('src', 'id'), TableSpec('dest', 'id'))],
              source_conn, dest_conn, batch_size=2)

    # ID for connection object varies between tests
    messages = [re.sub(r'object at 0x[0-9a-fA-F]+>', 'object at ???>', m)
                for m in caplog.messages]

    # Assert
    assert messages[:len(INFO_AND_DEBUG_START)] == INFO_AND_DEBUG_START
    assert messages[-1] == 'All data migrations completed successfully.'


def test_logging_failure(caplog, source_conn, dest_conn, create_table, logger):
    # Arrange
    caplog.set_level(logging.INFO, logger=logger.name)
    create_table(dest_conn, 'dest')

    # Act
    result = replicate([TablePair(TableSpec('missing', 'id'), TableSpec('dest', 'id'))],
                       source_conn, dest_conn)

    # Assert
    assert not result.success
    assert caplog.messages[0] == 'Fetching page of missing (offset=0, batch_size=1000)'
    assert caplog.record_tuples[-1][1] == logging.ERROR
    assert caplog.messages[-1].startswith('An error occurred: SQL query raised an error.')
    assert 'no such table: missing' in caplog.messages[-1]
