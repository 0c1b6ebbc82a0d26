"""Comparison predicates evaluated by a transaction.

A Cmp checks one attribute of the stored state of a key (or of every key
in a range) against a target value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.errors import InvalidArgumentError
from ..core.types import Key, KeyValue, to_bytes
from .options import check_range_end


class CmpOp(Enum):
    """Comparison operator."""

    EQUAL = "="
    GREATER = ">"
    LESS = "<"
    NOT_EQUAL = "!="


class CmpTarget(Enum):
    """Attribute of a stored key that a comparison looks at."""

    VALUE = "value"
    VERSION = "version"
    CREATE_REVISION = "create_revision"
    MOD_REVISION = "mod_revision"
    LEASE = "lease"


@dataclass(frozen=True)
class Cmp:
    """Immutable predicate over the stored state of a key or key range.

    Args:
        key: Key to inspect (str is UTF-8 encoded)
        op: Comparison operator
        target: Which attribute of the key to compare
        target_value: Bytes for VALUE, non-negative int for every other target
        range_end: Optional end of a [key, range_end) range; every key in the
            range must satisfy the predicate

    Raises:
        InvalidArgumentError: If the key is empty or target_value does not
            match the kind of target
    """

    key: Key
    op: CmpOp
    target: CmpTarget
    target_value: bytes | int
    range_end: Key | None = None

    def __post_init__(self):
        key = to_bytes(self.key, "key")
        if not key:
            raise InvalidArgumentError("comparison key must not be empty")
        if not isinstance(self.op, CmpOp):
            raise InvalidArgumentError(f"op must be a CmpOp, not {self.op!r}")
        if not isinstance(self.target, CmpTarget):
            raise InvalidArgumentError(f"target must be a CmpTarget, not {self.target!r}")

        if self.target is CmpTarget.VALUE:
            if isinstance(self.target_value, int):
                raise InvalidArgumentError("VALUE comparison needs a byte sequence, got int")
            target_value = to_bytes(self.target_value, "target_value")
        else:
            target_value = self.target_value
            if isinstance(target_value, bool) or not isinstance(target_value, int):
                raise InvalidArgumentError(
                    f"{self.target.name} comparison needs an int, "
                    f"got {type(target_value).__name__}"
                )
            if target_value < 0:
                raise InvalidArgumentError(
                    f"{self.target.name} comparison value must be >= 0, got {target_value}"
                )

        range_end = check_range_end(self.range_end, name="range_end")

        # Frozen dataclass: normalized fields are written through object.__setattr__
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "target_value", target_value)
        object.__setattr__(self, "range_end", range_end)

    @classmethod
    def value(cls, key, op: CmpOp, value, range_end=None) -> Cmp:
        return cls(key, op, CmpTarget.VALUE, value, range_end)

    @classmethod
    def version(cls, key, op: CmpOp, version: int, range_end=None) -> Cmp:
        return cls(key, op, CmpTarget.VERSION, version, range_end)

    @classmethod
    def create_revision(cls, key, op: CmpOp, revision: int, range_end=None) -> Cmp:
        return cls(key, op, CmpTarget.CREATE_REVISION, revision, range_end)

    @classmethod
    def mod_revision(cls, key, op: CmpOp, revision: int, range_end=None) -> Cmp:
        return cls(key, op, CmpTarget.MOD_REVISION, revision, range_end)

    @classmethod
    def lease(cls, key, op: CmpOp, lease_id: int, range_end=None) -> Cmp:
        return cls(key, op, CmpTarget.LEASE, lease_id, range_end)

    def matches(self, kv: KeyValue) -> bool:
        """Evaluate the predicate against one stored key.

        A missing key is passed in as a zero KeyValue.
        """
        # CmpTarget values double as KeyValue attribute names
        actual = getattr(kv, self.target.value)
        expected = self.target_value

        if self.op is CmpOp.EQUAL:
            return actual == expected
        if self.op is CmpOp.NOT_EQUAL:
            return actual != expected
        if self.op is CmpOp.GREATER:
            return actual > expected
        return actual < expected

    def __str__(self) -> str:
        span = f"[{self.key!r}, {self.range_end!r})" if self.range_end is not None else repr(self.key)
        return f"{self.target.value}({span}) {self.op.value} {self.target_value!r}"
