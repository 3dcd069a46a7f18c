"""
Library to copy tables between databases in fixed-size pages
"""
import logging
import sys
from importlib.metadata import (
    PackageNotFoundError,
    version,
)
from logging.handlers import TimedRotatingFileHandler
from typing import TextIO

# Import helper functions here for more convenient access
from tablereplicator.abort import abort_replication
from tablereplicator.config import (
    ConnectionConfig,
    ReplicationConfig,
    load_config,
)
from tablereplicator.connect import connect
from tablereplicator.etl import (
    executemany,
    fetch_page,
    fetchall,
    generate_insert_sql,
    iter_chunks,
    load,
    write_page,
)
from tablereplicator.replicator import (
    BATCH_SIZE,
    RunResult,
    TablePair,
    TableSpec,
    fan_out,
    iter_pages,
    replicate,
    replicate_table,
    run,
)
from tablereplicator import (
    row_factories,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    __version__ = "0.0.0"

# Clear the tablereplicator logger handlers so that nothing is output until an
# application calls log_to_console or log_to_file
logging.getLogger("tablereplicator").handlers.clear()

LOG_FORMAT = '%(asctime)s %(levelname)s %(message)s'


class CleanDebugMessageFormatter(logging.Formatter):
    """Print DEBUG messages (multi-line SQL) without the timestamp prefix."""
    default_fmt = logging.Formatter(LOG_FORMAT)
    debug_fmt = logging.Formatter('%(message)s')

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno < logging.INFO:
            return self.debug_fmt.format(record)
        else:
            return self.default_fmt.format(record)


def log_to_console(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
) -> logging.Handler:
    """
    Log Table Replicator messages to the given output.

    :param level: logger level
    :param output: the output location of the logger messages
    :return: the handler that was added
    """
    logger = logging.getLogger('tablereplicator')
    # Remove existing console handlers to prevent duplicate output
    for handler in list(logger.handlers):
        if type(handler) is logging.StreamHandler:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(output)
    handler.setFormatter(CleanDebugMessageFormatter())

    logger.addHandler(handler)
    logger.setLevel(level=level)
    return handler


def log_to_file(
    filename: str = 'app.log',
    level: int = logging.INFO,
) -> logging.Handler:
    """
    Also log Table Replicator messages to a file that is rolled over at
    midnight.  Older files are kept with a date suffix, e.g. app.log.2024-05-01.

    :param filename: path of the log file
    :param level: logger level
    :return: the handler that was added
    """
    logger = logging.getLogger('tablereplicator')

    handler = TimedRotatingFileHandler(filename, when='midnight',
                                       encoding='utf-8')
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(level=level)
    return handler


__all__ = [
    "BATCH_SIZE",
    "ConnectionConfig",
    "ReplicationConfig",
    "RunResult",
    "TablePair",
    "TableSpec",
    "abort_replication",
    "connect",
    "executemany",
    "fan_out",
    "fetch_page",
    "fetchall",
    "generate_insert_sql",
    "iter_chunks",
    "iter_pages",
    "load",
    "load_config",
    "log_to_console",
    "log_to_file",
    "replicate",
    "replicate_table",
    "row_factories",
    "run",
    "write_page",
]
