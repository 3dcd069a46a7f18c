"""
Database helper for PostgreSQL
"""
import warnings
from tablereplicator.db_helpers.db_helper import DbHelper


class PostgresDbHelper(DbHelper):
    """
    Postgres db helper class
    """
    def __init__(self):
        super().__init__()
        self.missing_driver_msg = (
            "Could not import psycopg2 module required for PostgreSQL connections.  "
            "Install with `pip install tablereplicator[postgres]`")
        self.named_paramstyle = 'pyformat'
        self.positional_paramstyle = 'format'

        try:
            import psycopg2
            self.sql_exceptions = (psycopg2.DatabaseError,
                                   psycopg2.InterfaceError)
            self.connect_exceptions = (psycopg2.DatabaseError,
                                       psycopg2.InterfaceError)
            self.paramstyle = psycopg2.paramstyle
            self._connect_func = psycopg2.connect
        except ImportError:
            warnings.warn(self.missing_driver_msg)

    def page_query(self, table, ordering_key, offset, batch_size):
        """Return page query using LIMIT / OFFSET."""
        self.check_page_bounds(offset, batch_size)
        return (f"SELECT * FROM {table} ORDER BY {ordering_key} "
                f"LIMIT {batch_size} OFFSET {offset}")

    @staticmethod
    def executemany(cursor, query, chunk):
        """
        Call execute_batch method for PostGres.

        :param cursor: Open database cursor.
        :param query: str, SQL query
        :param chunk: list, Rows of parameters.
        """
        # execute_batch sends the whole page to the server in one round trip,
        # which is the closest psycopg2 gets to a bulk copy without COPY.
        from psycopg2.extras import execute_batch

        execute_batch(cursor, query, chunk, page_size=len(chunk))
