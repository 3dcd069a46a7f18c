"""
Row factories are functions that shape row data as each page is read from
the source database.

A row_factory function must:
  + accept a cursor object as an input
  + only use methods on the cursor that are described by DBAPI
  + return a function that takes a tuple

The row type decides the placeholders of the generated INSERT statement.
Named tuples give positional placeholders, which every supported driver
accepts, so they are the default for replication.
"""
from collections import namedtuple
from warnings import warn
import re


def namedtuple_row_factory(cursor):
    """
    Return function to convert output row to a named tuple.

    Named tuples keep the column names of the source table, which are used
    to build the INSERT statement for the destination table, and are written
    with positional placeholders (e.g. ?, %s).
    """
    column_names = [d[0] for d in cursor.description]

    try:
        Row = namedtuple('Row', field_names=column_names)
    except ValueError:
        Row = namedtuple('Row', field_names=column_names, rename=True)
        warn("One or more columns have been renamed. Names that cannot be "
             "converted to namedtuple attributes are replaced by indices. "
             "Renamed columns cannot be written to a destination table; "
             "use dict_row_factory for such tables.")
        warn(f"{_find_renamed_columns(Row, column_names)}")

    def create_row(row):
        return Row(*row)

    return create_row


def dict_row_factory(cursor):
    """
    Return function to convert output row to a dictionary keyed by column
    name.  Insert statements based on dictionaries use named placeholders
    (e.g. :id, %(id)s), so they cannot be written via pyodbc.
    """
    column_names = [d[0] for d in cursor.description]

    def create_row(row):
        return dict(zip(column_names, row))

    return create_row


def tuple_row_factory(cursor):
    """
    Return function that leaves rows as plain tuples.  Useful for reading
    back destination tables; plain tuples carry no column names and so
    cannot be written with write_page.
    """
    def create_row(row):
        return tuple(row)

    return create_row


def _find_renamed_columns(row_class, column_names):
    regex = re.compile(r'^_\d+$')

    renamed_column_ids = [int(f.replace("_", "")) for f in row_class._fields if regex.match(f)]

    return '\n'.join(f'{column_names[idx]} was renamed to {row_class._fields[idx]}'
                     for idx in renamed_column_ids)
