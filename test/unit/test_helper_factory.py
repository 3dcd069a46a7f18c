"""Test for the helper factory"""
import sqlite3
from unittest.mock import Mock

import pytest

from tablereplicator.db_helper_factory import DB_HELPER_FACTORY
from tablereplicator.exceptions import ReplicatorHelperError
from tablereplicator.db_helpers import PostgresDbHelper, MSSQLDbHelper, SQLiteDbHelper


@pytest.mark.parametrize("dbtype_keyword, expected_helper",
                         [('PG', PostgresDbHelper),
                          ('MSSQL', MSSQLDbHelper),
                          ('mssql', MSSQLDbHelper),
                          ('SQLITE', SQLiteDbHelper)])
def test_from_dbtype(dbtype_keyword, expected_helper):
    """
    Tests correct helper produced given a dbtype name
    """
    helper = DB_HELPER_FACTORY.from_dbtype(dbtype_keyword)
    assert isinstance(helper, expected_helper)


def test_from_conn_sqlite():
    conn = sqlite3.connect(':memory:')
    try:
        helper = DB_HELPER_FACTORY.from_conn(conn)
    finally:
        conn.close()
    assert isinstance(helper, SQLiteDbHelper)


@pytest.mark.parametrize("expected_helper, driver, class_path",
                         [(PostgresDbHelper, 'psycopg2', 'extensions.connection'),
                          (MSSQLDbHelper, 'pyodbc', 'Connection')])
def test_from_conn(expected_helper, driver, class_path):
    """
    Tests correct helper produced given a conn object
    """
    db_class = pytest.importorskip(driver)
    for attribute in class_path.split('.'):
        db_class = getattr(db_class, attribute)

    conn = Mock()
    conn.__class__ = db_class
    helper = DB_HELPER_FACTORY.from_conn(conn)
    assert isinstance(helper, expected_helper)


def test_from_conn_not_registered():
    """
    Tests helpful error message on attempt to choose unregistered conn type.
    """
    conn = Mock()
    conn.__class__ = "Not a real class"

    with pytest.raises(ReplicatorHelperError,
                       match=r'Unsupported connection type.*'):
        DB_HELPER_FACTORY.from_conn(conn)


@pytest.mark.parametrize('dbtype', ['Not a real type', 'ORACLE', None])
def test_from_dbtype_not_registered(dbtype):
    with pytest.raises(ReplicatorHelperError,
                       match=r'Unsupported dbtype.*'):
        DB_HELPER_FACTORY.from_dbtype(dbtype)


def test_from_conn_bad_type():
    with pytest.raises(ReplicatorHelperError,
                       match=r'Expected connection-like object.*'):
        DB_HELPER_FACTORY.from_conn('some string')
