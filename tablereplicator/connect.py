"""
Connect to database
"""
from tablereplicator.db_helper_factory import DB_HELPER_FACTORY


def connect(dbtype, connection_string, **kwargs):
    """
    Return database connection.

    :param dbtype: str, registered database type e.g. 'MSSQL', 'PG', 'SQLITE'
    :param connection_string: str, driver-specific connection string
    :param kwargs: connection specific keyword arguments e.g. timeout
    :return: Connection object
    """
    helper = DB_HELPER_FACTORY.from_dbtype(dbtype)
    # Helpers will raise ReplicatorConnectionError if connection fails
    return helper.connect(connection_string, **kwargs)
