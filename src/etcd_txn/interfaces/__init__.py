"""Protocols for the collaborators of the transaction builder."""

from .backend import KVBackend
from .executor import TxnExecutor

__all__ = ["KVBackend", "TxnExecutor"]
