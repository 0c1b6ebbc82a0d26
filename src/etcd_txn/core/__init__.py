"""etcd-txn core package."""

from .kv import KVClient
from .txn import Txn, TxnState

__all__ = ["KVClient", "Txn", "TxnState"]
