"""Common type definitions for etcd-txn.

Defines fundamental types used across all components.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgumentError

# Core primitive types
Key = bytes
Value = bytes
Revision = int
LeaseID = int

# Range end meaning "every key >= start"
ALL_KEYS_END: Key = b"\x00"


@dataclass(frozen=True)
class KeyValue:
    """A key with its value and MVCC metadata as stored at some revision."""

    key: Key
    value: Value = b""
    create_revision: Revision = 0
    mod_revision: Revision = 0
    version: int = 0
    lease: LeaseID = 0


def to_bytes(data: bytes | bytearray | str, name: str = "key") -> bytes:
    """Coerce str/bytes-like input to bytes, encoding text as UTF-8."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, bytearray):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    raise InvalidArgumentError(f"{name} must be bytes or str, not {type(data).__name__}")


def prefix_range_end(prefix: Key) -> Key:
    """Return the range end that covers every key starting with prefix.

    Trailing 0xff bytes cannot be incremented and are dropped; a prefix made
    only of 0xff bytes (or an empty one) covers the rest of the keyspace.
    """
    end = bytearray(prefix)
    while end:
        if end[-1] < 0xFF:
            end[-1] += 1
            return bytes(end)
        end.pop()
    return ALL_KEYS_END


def in_range(key: Key, start: Key, end: Key | None) -> bool:
    """Check whether key falls in the etcd-style range [start, end)."""
    if end is None:
        return key == start
    if end == ALL_KEYS_END:
        return key >= start
    return start <= key < end
