"""
Functions used to stop a replication run between pages.
"""
import threading

from tablereplicator.exceptions import ReplicatorAbort

abort_event = threading.Event()


def abort_replication():
    """
    Stop the current replication run before the next page is read.  The run
    ends with a ReplicatorAbort error, which is logged and reported in the
    RunResult like any other failure.
    """
    abort_event.set()


def clear_abort_event():
    """Clear abort_event."""
    abort_event.clear()


def raise_for_abort(message):
    """Raise ReplicatorAbort exception with message if abort_event is set."""
    if abort_event.is_set():
        raise ReplicatorAbort(message)
