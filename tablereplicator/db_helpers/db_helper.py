"""
Database helper classes using Factory Pattern
"""
from abc import ABCMeta, abstractmethod

from tablereplicator import exceptions


class DbHelper(metaclass=ABCMeta):
    """
    Abstract Base Class for DBHelpers
    """
    sql_exceptions = None
    connect_exceptions = None
    paramstyle = None

    @abstractmethod
    def __init__(self):
        self.sql_exceptions = tuple()
        self.connect_exceptions = tuple()
        self.paramstyle = ''
        self.named_paramstyle = None
        self.positional_paramstyle = None
        self.missing_driver_msg = ''
        # This is overridden with real connect method when DbHelper class is
        # successfully initialised if driver is installed
        self._connect_func = self._raise_missing_driver_error_on_connect

    def connect(self, connection_string, **kwargs):
        """
        Return a DBAPI connection (see PEP 249) for the connection string.

        :param connection_string: str, driver-specific connection string
        :param kwargs: connection specific keyword arguments e.g. timeout
        :return: Connection object
        :raises ReplicatorConnectionError: if the driver cannot connect
        """
        if not connection_string:
            msg = "Connection string is empty"
            raise exceptions.ReplicatorConnectionError(msg)

        try:
            connection = self._connect_func(connection_string, **kwargs)
        except self.connect_exceptions as exc:
            # The connection string may hold a password, so it is not logged
            msg = f"Error connecting via dbapi: {exc}"
            raise exceptions.ReplicatorConnectionError(msg)
        return connection

    @abstractmethod
    def page_query(self, table, ordering_key, offset, batch_size):
        """
        Return SQL that selects all columns of rows [offset, offset +
        batch_size) of table, ordered by ordering_key.

        :param table: str, validated table name
        :param ordering_key: str, validated column name
        :param offset: int, number of rows to skip
        :param batch_size: int, maximum number of rows to return
        :return: str
        """
        return

    @staticmethod
    def check_page_bounds(offset, batch_size):
        """
        Confirm that page bounds are integers that can be written into SQL.

        :raises ValueError: if offset is negative or batch_size is not positive
        """
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise ValueError(f"offset must be a non-negative integer, got {offset!r}")
        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise ValueError(f"batch_size must be a positive integer, got {batch_size!r}")

    @staticmethod
    def executemany(cursor, query, chunk):
        """
        Call executemany method appropriate to database.  Overridden for
        PostgreSQL and SQL Server to use their bulk insert paths.

        :param cursor: Open database cursor.
        :param query: str, SQL query
        :param chunk: list, Rows of parameters.
        """
        cursor.executemany(query, chunk)

    @staticmethod
    def cursor(conn):
        """
        Return a cursor on the connection.  Overridded for SQLite.

        :param conn: Open database connection.
        """
        return conn.cursor()

    def _raise_missing_driver_error_on_connect(self, *args, **kwargs):
        """
        Raise an exception with helpful message if user tries to connect without driver installed.
        This function replaces a connect function, so *args and **kwargs are collected to allow
        it to accept whatever would be passed to that function.
        """
        raise exceptions.ReplicatorConnectionError(self.missing_driver_msg)
