"""Per-kind option bundles for GET, PUT and DELETE_RANGE operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.errors import InvalidArgumentError
from ..core.types import Key, LeaseID, Revision, prefix_range_end, to_bytes


class SortOrder(Enum):
    """Ordering applied to GET results."""

    NONE = "none"
    ASCEND = "ascend"
    DESCEND = "descend"


class SortTarget(Enum):
    """Field GET results are sorted by."""

    KEY = "key"
    VERSION = "version"
    CREATE = "create_revision"
    MOD = "mod_revision"
    VALUE = "value"


def check_range_end(end_key: Key | None, prefix: bool = False, name: str = "end_key") -> Key | None:
    """Normalize a range end; None means a single key."""
    if end_key is not None and prefix:
        raise InvalidArgumentError(f"{name} and prefix are mutually exclusive")
    if end_key is None:
        return None
    end_key = to_bytes(end_key, name)
    if not end_key:
        raise InvalidArgumentError(f"{name} must not be empty")
    return end_key


def _check_non_negative(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True)
class GetOption:
    """Options of a GET (range) operation.

    Attributes:
        end_key: Read [key, end_key) instead of a single key
        prefix: Read every key starting with key
        limit: Maximum number of keys returned (0 = no limit)
        sort_order: Result ordering
        sort_target: Field to sort by
        revision: Read at this historical revision (0 = latest)
        keys_only: Return keys without values
        count_only: Return only the number of matching keys
        serializable: Allow a serializable (possibly stale) read
    """

    end_key: Key | None = None
    prefix: bool = False
    limit: int = 0
    sort_order: SortOrder = SortOrder.NONE
    sort_target: SortTarget = SortTarget.KEY
    revision: Revision = 0
    keys_only: bool = False
    count_only: bool = False
    serializable: bool = False

    def __post_init__(self):
        object.__setattr__(self, "end_key", check_range_end(self.end_key, self.prefix))
        _check_non_negative("limit", self.limit)
        _check_non_negative("revision", self.revision)
        if not isinstance(self.sort_order, SortOrder):
            raise InvalidArgumentError(f"sort_order must be a SortOrder, not {self.sort_order!r}")
        if not isinstance(self.sort_target, SortTarget):
            raise InvalidArgumentError(f"sort_target must be a SortTarget, not {self.sort_target!r}")

    def range_end(self, key: Key) -> Key | None:
        """Return the effective range end for key, or None for a single key."""
        if self.prefix:
            return prefix_range_end(key)
        return self.end_key


@dataclass(frozen=True)
class PutOption:
    """Options of a PUT operation.

    Attributes:
        lease_id: Attach the key to this lease (0 = no lease)
        prev_kv: Return the key-value pair replaced by this put
        ignore_value: Keep the current value, update only the lease
        ignore_lease: Keep the current lease, update only the value
    """

    lease_id: LeaseID = 0
    prev_kv: bool = False
    ignore_value: bool = False
    ignore_lease: bool = False

    def __post_init__(self):
        _check_non_negative("lease_id", self.lease_id)
        if self.ignore_lease and self.lease_id:
            raise InvalidArgumentError("ignore_lease cannot be combined with a lease_id")


@dataclass(frozen=True)
class DeleteOption:
    """Options of a DELETE_RANGE operation.

    Attributes:
        end_key: Delete [key, end_key) instead of a single key
        prefix: Delete every key starting with key
        prev_kv: Return the deleted key-value pairs
    """

    end_key: Key | None = None
    prefix: bool = False
    prev_kv: bool = False

    def __post_init__(self):
        object.__setattr__(self, "end_key", check_range_end(self.end_key, self.prefix))

    def range_end(self, key: Key) -> Key | None:
        """Return the effective range end for key, or None for a single key."""
        if self.prefix:
            return prefix_range_end(key)
        return self.end_key


GetOption.DEFAULT = GetOption()
PutOption.DEFAULT = PutOption()
DeleteOption.DEFAULT = DeleteOption()
