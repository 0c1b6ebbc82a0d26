"""Threaded transaction executor.

Runs every submitted transaction on a background worker thread and reports
the outcome through a concurrent.futures.Future, so commit never blocks the
caller.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING

from ..core.config import KVConfig
from ..core.errors import TransactionFailedError

if TYPE_CHECKING:
    from ..core.request import TxnRequest
    from ..core.response import TxnResponse
    from ..interfaces.backend import KVBackend

logger = logging.getLogger(__name__)

Job = tuple["TxnRequest", "Future[TxnResponse]"]


class ThreadedTxnExecutor:
    """Executor that applies transactions to a backend on a worker thread.

    Args:
        backend: Store that applies each transaction atomically
        config: Queue size, shutdown timeout and worker thread name

    Public API:
        - submit(request): enqueue, returns Future[TxnResponse]
        - close(): drain the queue and stop the worker

    Invariants:
        - Transactions are applied one at a time, in submission order
        - Each request is applied at most once; failures are not retried
        - Every backend failure reaches the future as TransactionFailedError
    """

    def __init__(self, backend: KVBackend, config: KVConfig | None = None):
        self.backend = backend
        self.config = config or KVConfig()

        self._queue: queue.Queue[Job | None] = queue.Queue(maxsize=self.config.executor_queue_max)
        self._closed: bool = False
        self._close_lock: threading.Lock = threading.Lock()

        self._worker_thread: threading.Thread = threading.Thread(
            target=self._worker, daemon=True, name=self.config.worker_name
        )
        self._worker_thread.start()

        logger.info(f"Started {self.config.worker_name} worker thread")

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, request: TxnRequest) -> Future[TxnResponse]:
        """Queue request for the worker and return its future."""
        future: Future[TxnResponse] = Future()

        with self._close_lock:
            if self._closed:
                future.set_exception(TransactionFailedError("executor is closed"))
                return future
            try:
                self._queue.put_nowait((request, future))
            except queue.Full:
                future.set_exception(
                    TransactionFailedError(
                        f"executor queue is full ({self.config.executor_queue_max} pending)"
                    )
                )
        return future

    def _worker(self) -> None:
        """Background thread that applies queued transactions."""
        logger.info("Transaction worker started")

        while True:
            job = self._queue.get()
            if job is None:  # Shutdown signal
                break
            request, future = job
            self._run(request, future)

        logger.info("Transaction worker stopped")

    def _run(self, request: TxnRequest, future: Future[TxnResponse]) -> None:
        # Skip requests whose future was cancelled while queued
        if not future.set_running_or_notify_cancel():
            logger.debug("Skipping cancelled transaction")
            return

        try:
            response = self.backend.apply(request)
        except Exception as e:
            logger.exception("Transaction failed")
            failure = TransactionFailedError(f"transaction failed: {e}")
            failure.__cause__ = e
            future.set_exception(failure)
        else:
            future.set_result(response)

    def close(self) -> None:
        """Stop accepting transactions and wait for queued ones to finish."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            logger.info(f"Shutting down {self.config.worker_name}")
            # Blocks if the queue is full; the worker keeps draining it
            self._queue.put(None)

        if self._worker_thread.is_alive():
            self._worker_thread.join(timeout=self.config.shutdown_timeout_s)
            if self._worker_thread.is_alive():
                logger.warning("Transaction worker did not shut down cleanly")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
