"""Configuration for etcd-txn.

Defines the tunable parameters of the executor and the in-memory store.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class KVConfig:
    """Configuration parameters for the transaction executor and store.

    Attributes:
        max_txn_ops: Maximum number of operations in one transaction branch
        executor_queue_max: Maximum number of commits waiting for the worker
        shutdown_timeout_s: How long close() waits for the worker thread
        worker_name: Thread name of the executor worker
    """

    max_txn_ops: int = 128  # etcd server default
    executor_queue_max: int = 10_000
    shutdown_timeout_s: float = 5.0
    worker_name: str = "TxnExecutor"
