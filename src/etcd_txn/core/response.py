"""Result types returned by a committed transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .types import KeyValue, Revision


@dataclass(frozen=True)
class ResponseHeader:
    """Store revision observed once the request was applied."""

    revision: Revision


@dataclass(frozen=True)
class RangeResponse:
    header: ResponseHeader
    kvs: tuple[KeyValue, ...] = ()
    more: bool = False
    count: int = 0


@dataclass(frozen=True)
class PutResponse:
    header: ResponseHeader
    prev_kv: KeyValue | None = None


@dataclass(frozen=True)
class DeleteRangeResponse:
    header: ResponseHeader
    deleted: int = 0
    prev_kvs: tuple[KeyValue, ...] = ()


OpResponse = Union[RangeResponse, PutResponse, DeleteRangeResponse]


@dataclass(frozen=True)
class TxnResponse:
    """Outcome of a transaction.

    Attributes:
        header: Revision after the transaction
        succeeded: True if the success branch ran, False for the failure branch
        responses: One result per operation of the executed branch, in order
    """

    header: ResponseHeader
    succeeded: bool
    responses: tuple[OpResponse, ...] = field(default_factory=tuple)

    @property
    def get_responses(self) -> list[RangeResponse]:
        return [r for r in self.responses if isinstance(r, RangeResponse)]

    @property
    def put_responses(self) -> list[PutResponse]:
        return [r for r in self.responses if isinstance(r, PutResponse)]

    @property
    def delete_responses(self) -> list[DeleteRangeResponse]:
        return [r for r in self.responses if isinstance(r, DeleteRangeResponse)]
