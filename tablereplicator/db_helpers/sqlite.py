"""
Database helper for SQLite
"""
from contextlib import contextmanager
import warnings
from tablereplicator.db_helpers.db_helper import DbHelper


class SQLiteDbHelper(DbHelper):
    """
    SQLite DB helper class
    """
    def __init__(self):
        super().__init__()
        self.missing_driver_msg = (
            "Could not import sqlite3 module required for SQLite connections.  "
            "Check Python configuration - this should be part of Standard Library.")
        self.named_paramstyle = 'named'
        self.positional_paramstyle = 'qmark'

        try:
            import sqlite3
            self.sql_exceptions = (sqlite3.DatabaseError,
                                   sqlite3.InterfaceError)
            self.connect_exceptions = (sqlite3.DatabaseError,
                                       sqlite3.InterfaceError)
            self.paramstyle = sqlite3.paramstyle
            self._connect_func = sqlite3.connect
        except ImportError:
            warnings.warn(self.missing_driver_msg)

    def page_query(self, table, ordering_key, offset, batch_size):
        """
        Return page query using LIMIT / OFFSET.  The connection string for
        SQLite is the database filename.
        """
        self.check_page_bounds(offset, batch_size)
        return (f"SELECT * FROM {table} ORDER BY {ordering_key} "
                f"LIMIT {batch_size} OFFSET {offset}")

    @staticmethod
    @contextmanager
    def cursor(conn):
        """
        Return a cursor on current connection.  This implementation allows
        SQLite cursor to be used as context manager as with other db types.
        """
        cursor = conn.cursor()
        try:
            yield cursor
        finally:
            cursor.close()
