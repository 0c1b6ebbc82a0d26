"""Operations executed inside a transaction branch.

An Op is a description of a store action, built through Op.get, Op.put or
Op.delete. Nothing happens until it is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.errors import InvalidArgumentError
from ..core.types import Key, Value, to_bytes
from .options import DeleteOption, GetOption, PutOption


class OpType(Enum):
    """Kind of a store operation."""

    GET = "get"
    PUT = "put"
    DELETE_RANGE = "delete_range"


@dataclass(frozen=True)
class Op:
    """Base class of the GET, PUT and DELETE_RANGE operation variants.

    Subclasses validate their key, value and option bundle on construction
    and raise InvalidArgumentError on the first problem found.
    """

    key: Key

    def __post_init__(self):
        if type(self) is Op:
            raise InvalidArgumentError("build operations with Op.get, Op.put or Op.delete")
        key = to_bytes(self.key, "key")
        if not key:
            raise InvalidArgumentError("operation key must not be empty")
        object.__setattr__(self, "key", key)

    @property
    def type(self) -> OpType:
        raise NotImplementedError

    def _check_option(self, expected: type) -> None:
        option = self.option
        if option is None:
            object.__setattr__(self, "option", expected.DEFAULT)
        elif not isinstance(option, expected):
            raise InvalidArgumentError(
                f"{self.type.name} takes a {expected.__name__}, not {type(option).__name__}"
            )

    @staticmethod
    def get(key: Key | str, option: GetOption | None = None) -> GetOp:
        """Build a GET of key (or of a range, per option)."""
        return GetOp(key, option)

    @staticmethod
    def put(key: Key | str, value: Value | str, option: PutOption | None = None) -> PutOp:
        """Build a PUT of value at key."""
        return PutOp(key, value, option)

    @staticmethod
    def delete(key: Key | str, option: DeleteOption | None = None) -> DeleteOp:
        """Build a DELETE_RANGE of key (or of a range, per option)."""
        return DeleteOp(key, option)


@dataclass(frozen=True)
class GetOp(Op):
    option: GetOption | None = None

    def __post_init__(self):
        super().__post_init__()
        self._check_option(GetOption)

    @property
    def type(self) -> OpType:
        return OpType.GET

    @property
    def range_end(self) -> Key | None:
        return self.option.range_end(self.key)


@dataclass(frozen=True)
class PutOp(Op):
    value: Value = b""
    option: PutOption | None = None

    def __post_init__(self):
        super().__post_init__()
        self._check_option(PutOption)
        value = to_bytes(self.value, "value")
        if self.option.ignore_value and value:
            raise InvalidArgumentError("ignore_value requires an empty value")
        object.__setattr__(self, "value", value)

    @property
    def type(self) -> OpType:
        return OpType.PUT


@dataclass(frozen=True)
class DeleteOp(Op):
    option: DeleteOption | None = None

    def __post_init__(self):
        super().__post_init__()
        self._check_option(DeleteOption)

    @property
    def type(self) -> OpType:
        return OpType.DELETE_RANGE

    @property
    def range_end(self) -> Key | None:
        return self.option.range_end(self.key)
