"""Exception hierarchy for etcd-txn.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class TxnError(Exception):
    """Base exception for all etcd-txn errors."""
    pass


class InvalidArgumentError(TxnError, ValueError):
    """Raised when a comparison, operation or option is malformed."""
    pass


class IllegalStateError(TxnError, RuntimeError):
    """Raised when a committed transaction is used again."""
    pass


class TransactionFailedError(TxnError):
    """Raised through the commit future when the round trip fails."""
    pass


class StoreError(TxnError):
    """Raised by a backend when it rejects or cannot apply a request."""
    pass


class CompactedError(StoreError):
    """Raised when reading at a revision that has been compacted."""
    pass


class FutureRevisionError(StoreError):
    """Raised when reading at a revision newer than the store."""
    pass


class KeyNotFoundError(StoreError):
    """Raised when a put reuses the value or lease of a missing key."""
    pass


class DuplicateKeyError(StoreError):
    """Raised when one branch writes the same key more than once."""
    pass


class TooManyOperationsError(StoreError):
    """Raised when a branch holds more operations than the store allows."""
    pass
