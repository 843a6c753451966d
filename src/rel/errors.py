"""Error taxonomy shared by both demo programs.

Every failure is fatal for a demo run. Helpers raise one of these wrapping the
underlying SQLAlchemy error; the CLI logs it and exits non-zero.
"""


class RelError(Exception):
    """Base class for all demo failures."""


class ConnectionFailedError(RelError):
    """The database could not be reached."""


class TruncateError(RelError):
    """A table could not be emptied."""


class InsertError(RelError):
    """A row could not be inserted."""


class SelectError(RelError):
    """A query or its row scan failed."""


class TransactionError(RelError):
    """A statement inside a transaction, or its commit, failed."""
