"""
Table Replicator Exception classes
"""


class ReplicatorError(Exception):
    """Base class for exceptions in this module"""


class ReplicatorConfigError(ReplicatorError):
    """Exception raised for missing or invalid configuration"""


class ReplicatorConnectionError(ReplicatorError):
    """Exception raised for bad database connections"""


class ReplicatorExtractError(ReplicatorError):
    """Exception raised when reading a page of data."""


class ReplicatorInsertError(ReplicatorError):
    """Exception raised when writing a page of data."""


class ReplicatorBadIdentifierError(ReplicatorError):
    """Exception raised for table or column names with invalid characters."""


class ReplicatorHelperError(ReplicatorError):
    """Exception raised when helper selection fails."""


class ReplicatorAbort(ReplicatorError):
    """Exception raised when abort_replication() has been called."""
