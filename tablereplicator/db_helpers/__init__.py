"""
DbHelper classes are used behind-the-scenes for customising the behaviour of
different database drivers.
They are not normally called directly.

For more details, see the source code in each module.
"""
# flake8: noqa
from tablereplicator.db_helpers.db_helper import DbHelper
from tablereplicator.db_helpers.postgres import PostgresDbHelper
from tablereplicator.db_helpers.mssql import MSSQLDbHelper
from tablereplicator.db_helpers.sqlite import SQLiteDbHelper
