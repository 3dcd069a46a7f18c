"""
Database helper for mssql
"""
import warnings

from tablereplicator.db_helpers.db_helper import DbHelper
from tablereplicator.exceptions import ReplicatorInsertError


class MSSQLDbHelper(DbHelper):
    """
    MS Sql server helper class
    """
    def __init__(self):
        super().__init__()
        self.missing_driver_msg = (
            "Could not import pyodbc module required for MS SQL connections.  "
            "Install with `pip install tablereplicator[mssql]` and add an ODBC driver")
        self.named_paramstyle = None  # pyodbc doesn't support named parameters
        self.positional_paramstyle = 'qmark'

        try:
            import pyodbc
            self.sql_exceptions = (pyodbc.DatabaseError,
                                   pyodbc.InterfaceError)
            self.connect_exceptions = (pyodbc.DatabaseError,
                                       pyodbc.InterfaceError)
            self.paramstyle = pyodbc.paramstyle
            self._connect_func = pyodbc.connect
        except ImportError:
            warnings.warn(self.missing_driver_msg)

    def page_query(self, table, ordering_key, offset, batch_size):
        """Return page query using OFFSET ... FETCH NEXT."""
        self.check_page_bounds(offset, batch_size)
        return (f"SELECT * FROM {table} ORDER BY {ordering_key} "
                f"OFFSET {offset} ROWS FETCH NEXT {batch_size} ROWS ONLY")

    def executemany(self, cursor, query, chunk):
        """
        Use fast_executemany for SQL Server, which sends the page as a single
        parameter array.  The flag is set on each cursor, so a fallback after a
        MemoryError applies only to that cursor.

        :param cursor: Open database cursor.
        :param query: str, SQL query
        :param chunk: list, Rows of parameters.
        """
        try:
            cursor.fast_executemany = True
            cursor.executemany(query, chunk)
        except MemoryError:
            warnings.warn(
                "fast_executemany execution failed.  Retrying with default executemany.")
            cursor.fast_executemany = False
            cursor.executemany(query, chunk)
        except TypeError:
            msg = ("pyodbc driver for MS SQL only supports positional placeholders.  "
                   "Use namedtuple_row_factory when replicating to SQL Server.")
            raise ReplicatorInsertError(msg)
