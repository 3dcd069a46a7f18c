"""Commandline script to copy the configured tables from source to destination"""
import argparse
import logging
import sys
from contextlib import contextmanager
from textwrap import dedent

from tablereplicator import (
    log_to_console,
    log_to_file,
)
from tablereplicator.config import (
    CONFIG_FILENAME,
    load_config,
)
from tablereplicator.exceptions import ReplicatorConfigError
from tablereplicator.replicator import (
    BATCH_SIZE,
    run,
)

logger = logging.getLogger('tablereplicator')

DEFAULT_LOG_FILE = 'app.log'

HELP_DESCRIPTION = dedent(f"""
    Copy every row of each configured source table into its destination table,
    {BATCH_SIZE} rows at a time unless BatchSize is set.

    Connection strings and table pairs are read from a JSON file ({CONFIG_FILENAME}
    in the working directory by default).  Rows are appended: running twice
    copies every row twice.

    Log output is written to <stderr> and to a log file that rolls over daily.
    After the run, the script waits for Enter to be pressed unless --no-wait
    is given.
    """).strip()


@contextmanager
def logging_session(log_file=DEFAULT_LOG_FILE, level=logging.INFO):
    """
    Send tablereplicator log messages to the console and log_file for the
    duration of the block.  Handlers are flushed and closed on exit, whether
    or not an exception was raised, and the logger level is restored.
    """
    previous_level = logger.level
    handlers = [log_to_console(level), log_to_file(log_file, level)]
    try:
        yield logger
    finally:
        for handler in handlers:
            handler.flush()
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(previous_level)


def replicate_tables(config_path=CONFIG_FILENAME):
    """
    Load configuration from config_path and run the replication.

    :param config_path: str, path of JSON configuration file
    :return: RunResult or None if configuration could not be loaded
    """
    try:
        config = load_config(config_path)
    except ReplicatorConfigError as exc:
        logger.error("An error occurred: %s", exc)
        return None

    logger.debug("Loaded %r", config)
    return run(config)


def wait_for_enter():
    """Block until a line is entered on the console, as a close gate."""
    try:
        input("Press Enter to close.")
    except EOFError:
        pass


def main(argv=None):
    """Parse args, run replication and return process exit status."""
    parser = argparse.ArgumentParser(description=HELP_DESCRIPTION,
                                     formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument(
        '-c', '--config', type=str, default=CONFIG_FILENAME,
        help=f"path of JSON configuration file (default: {CONFIG_FILENAME})")
    parser.add_argument(
        '-l', '--log-file', type=str, default=DEFAULT_LOG_FILE,
        help=f"path of daily-rolling log file (default: {DEFAULT_LOG_FILE})")
    parser.add_argument(
        "-v", "--verbose", help="print debug-level logging output",
        action="store_true")
    parser.add_argument(
        "--no-wait", dest="wait", action="store_false",
        help="exit without waiting for Enter to be pressed")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO

    with logging_session(args.log_file, level):
        try:
            result = replicate_tables(args.config)
        finally:
            if args.wait:
                wait_for_enter()

    return 0 if result is not None and result.success else 1


if __name__ == '__main__':
    sys.exit(main())
