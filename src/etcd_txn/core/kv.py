"""Key-value client facade.

Single get/put/delete calls are sent as transactions without comparisons,
so they reuse the executor's round trip and its failure reporting.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TYPE_CHECKING, Callable, TypeVar

from ..op.op import Op
from .errors import IllegalStateError
from .txn import Txn

if TYPE_CHECKING:
    from ..interfaces.backend import KVBackend
    from ..interfaces.executor import TxnExecutor
    from ..op.options import DeleteOption, GetOption, PutOption
    from .response import (
        DeleteRangeResponse,
        OpResponse,
        PutResponse,
        RangeResponse,
        TxnResponse,
    )
    from .types import Key, Revision, Value

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def _then(future: Future[T], fn: Callable[[T], R]) -> Future[R]:
    """Return a future resolving to fn(result), forwarding failures as-is."""
    chained: Future[R] = Future()

    def _done(source: Future[T]) -> None:
        if source.cancelled():
            chained.cancel()
            return
        error = source.exception()
        if error is not None:
            chained.set_exception(error)
        else:
            chained.set_result(fn(source.result()))

    future.add_done_callback(_done)
    return chained


def _first(response: TxnResponse) -> OpResponse:
    return response.responses[0]


class KVClient:
    """Key-value API on top of a transaction executor.

    Args:
        executor: Collaborator performing every round trip
        backend: Store used for administrative calls (compact); optional

    Public API:
        - get(key, option): Future[RangeResponse]
        - put(key, value, option): Future[PutResponse]
        - delete(key, option): Future[DeleteRangeResponse]
        - compact(revision): discard old history
        - txn(): new transaction builder
    """

    def __init__(self, executor: TxnExecutor, backend: KVBackend | None = None):
        self._executor = executor
        self._backend = backend

    def txn(self) -> Txn:
        """Return a new, empty transaction builder bound to this client."""
        return Txn(self._executor)

    def _single(self, op: Op) -> Future[OpResponse]:
        return _then(self.txn().then(op).commit(), _first)

    def get(self, key: Key | str, option: GetOption | None = None) -> Future[RangeResponse]:
        return self._single(Op.get(key, option))

    def put(self, key: Key | str, value: Value | str, option: PutOption | None = None) -> Future[PutResponse]:
        return self._single(Op.put(key, value, option))

    def delete(self, key: Key | str, option: DeleteOption | None = None) -> Future[DeleteRangeResponse]:
        return self._single(Op.delete(key, option))

    def compact(self, revision: Revision) -> None:
        """Compact the store history at revision.

        Raises:
            IllegalStateError: If the client was built without a backend
        """
        if self._backend is None:
            raise IllegalStateError("compact() needs a backend")
        logger.info(f"Requesting compaction at revision {revision}")
        self._backend.compact(revision)
