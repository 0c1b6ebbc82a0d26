"""Reference collaborators: threaded executor and in-memory store."""

from .executor import ThreadedTxnExecutor
from .mvcc import MemoryKVBackend

__all__ = ["ThreadedTxnExecutor", "MemoryKVBackend"]
