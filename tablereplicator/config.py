"""
This module defines the configuration of a replication run and loads it from
a JSON file.  All values are validated when the file is loaded, so a missing
connection string is reported before any connection is attempted.
"""
import json
import logging
from pathlib import Path
from typing import NamedTuple

from tablereplicator.db_helper_factory import DB_HELPER_FACTORY
from tablereplicator.etl import validate_identifier
from tablereplicator.exceptions import (
    ReplicatorBadIdentifierError,
    ReplicatorConfigError,
    ReplicatorHelperError,
)
from tablereplicator.replicator import (
    BATCH_SIZE,
    TablePair,
    TableSpec,
)

logger = logging.getLogger('tablereplicator')

CONFIG_FILENAME = 'appsettings.json'
SOURCE_KEY = 'SourceDB'
DESTINATION_KEY = 'DestinationDB'
DEFAULT_DBTYPE = 'MSSQL'

DEFAULT_TABLES = [
    TablePair(TableSpec('dbo.Table1', 'PKId'), TableSpec('DestinationTable1', 'PKId')),
    TablePair(TableSpec('dbo.Table2', 'PKId'), TableSpec('DestinationTable2', 'PKId')),
]


class ConnectionConfig(NamedTuple):
    """Database type and driver connection string for one side of a run."""
    dbtype: str
    connection_string: str

    def __repr__(self):
        # Connection strings usually contain passwords
        return f"ConnectionConfig(dbtype='{self.dbtype}', connection_string='***')"


class ReplicationConfig:
    """Validated settings for a replication run."""

    def __init__(self, source, destination, tables=None, batch_size=BATCH_SIZE):
        self.source = source
        self.destination = destination
        self.tables = list(DEFAULT_TABLES if tables is None else tables)
        self.batch_size = batch_size
        self.validate()

    def validate(self):
        """
        Check that connection strings are set, database types are supported,
        the batch size is a positive integer and every table and ordering key
        is a valid identifier.

        :raises ReplicatorConfigError: if any setting is invalid
        """
        for key, conn_config in ((SOURCE_KEY, self.source),
                                 (DESTINATION_KEY, self.destination)):
            if not isinstance(conn_config.connection_string, str) \
                    or not conn_config.connection_string.strip():
                msg = f"ConnectionStrings.{key} is not set"
                raise ReplicatorConfigError(msg)

            try:
                DB_HELPER_FACTORY.from_dbtype(conn_config.dbtype)
            except ReplicatorHelperError:
                msg = (f"DbTypes.{key} '{conn_config.dbtype}' not in valid types "
                       f"({list(DB_HELPER_FACTORY.helpers.keys())})")
                # Deeper error is recorded in ReplicatorConfigError.__context__
                raise ReplicatorConfigError(msg) from None

        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int) \
                or self.batch_size < 1:
            msg = f"BatchSize must be a positive integer, got {self.batch_size!r}"
            raise ReplicatorConfigError(msg)

        if not self.tables:
            raise ReplicatorConfigError("Tables must list at least one table pair")

        for pair in self.tables:
            for spec in pair:
                try:
                    validate_identifier(spec.name)
                    validate_identifier(spec.ordering_key)
                except ReplicatorBadIdentifierError as exc:
                    raise ReplicatorConfigError(f"Bad table entry {spec}: {exc}") from None

    @classmethod
    def from_dict(cls, settings):
        """
        Create ReplicationConfig from parsed appsettings-style JSON.

        :param settings: dict with ConnectionStrings and optional DbTypes,
                         BatchSize and Tables sections
        :return: ReplicationConfig
        """
        if not isinstance(settings, dict):
            raise ReplicatorConfigError("Configuration must be a JSON object")

        conn_strings = settings.get('ConnectionStrings') or {}
        dbtypes = settings.get('DbTypes') or {}
        if not isinstance(conn_strings, dict) or not isinstance(dbtypes, dict):
            msg = "ConnectionStrings and DbTypes must be JSON objects"
            raise ReplicatorConfigError(msg)

        source = ConnectionConfig(str(dbtypes.get(SOURCE_KEY, DEFAULT_DBTYPE)),
                                  conn_strings.get(SOURCE_KEY, ''))
        destination = ConnectionConfig(str(dbtypes.get(DESTINATION_KEY, DEFAULT_DBTYPE)),
                                       conn_strings.get(DESTINATION_KEY, ''))

        tables = None
        if 'Tables' in settings:
            tables = _parse_tables(settings['Tables'])

        return cls(source, destination, tables=tables,
                   batch_size=settings.get('BatchSize', BATCH_SIZE))

    def __repr__(self):
        return (f"ReplicationConfig(source={self.source!r}, "
                f"destination={self.destination!r}, tables={self.tables!r}, "
                f"batch_size={self.batch_size})")


def load_config(path=CONFIG_FILENAME):
    """
    Read ReplicationConfig from JSON file at path.

    :param path: str or Path, defaults to appsettings.json in the working
                 directory
    :return: ReplicationConfig
    :raises ReplicatorConfigError: if the file is missing, is not valid JSON
                                   or holds invalid settings
    """
    path = Path(path)
    logger.debug("Reading configuration from %s", path.absolute())
    try:
        settings = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        raise ReplicatorConfigError(f"Configuration file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise ReplicatorConfigError(f"Configuration file {path} is not valid JSON: {exc}") from None

    return ReplicationConfig.from_dict(settings)


def _parse_tables(entries):
    if not isinstance(entries, list):
        raise ReplicatorConfigError("Tables must be a list of table pairs")

    pairs = []
    for entry in entries:
        try:
            source = TableSpec(entry['Source']['Name'], entry['Source']['OrderingKey'])
            destination = TableSpec(entry['Destination']['Name'],
                                    entry['Destination']['OrderingKey'])
        except (KeyError, TypeError):
            msg = ("Each Tables entry needs Source and Destination objects "
                   f"with Name and OrderingKey, got {entry!r}")
            raise ReplicatorConfigError(msg) from None
        pairs.append(TablePair(source, destination))
    return pairs
