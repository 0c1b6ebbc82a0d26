"""Protocol definition for a transaction executor."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Protocol

from ..core.request import TxnRequest
from ..core.response import TxnResponse


class TxnExecutor(Protocol):
    """Performs the round trip of a frozen transaction."""

    def submit(self, request: TxnRequest) -> Future[TxnResponse]:
        """Submit request without blocking.

        The returned future resolves to a TxnResponse or fails with
        TransactionFailedError. Failures are never retried.
        """
        ...
