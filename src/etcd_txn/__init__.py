"""etcd-txn - conditional multi-operation transactions for etcd-style stores."""

from .components.executor import ThreadedTxnExecutor
from .components.mvcc import MemoryKVBackend
from .core.config import KVConfig
from .core.errors import (
    CompactedError,
    DuplicateKeyError,
    FutureRevisionError,
    IllegalStateError,
    InvalidArgumentError,
    KeyNotFoundError,
    StoreError,
    TooManyOperationsError,
    TransactionFailedError,
    TxnError,
)
from .core.kv import KVClient
from .core.request import TxnRequest
from .core.response import (
    DeleteRangeResponse,
    PutResponse,
    RangeResponse,
    ResponseHeader,
    TxnResponse,
)
from .core.txn import Txn, TxnState
from .core.types import Key, KeyValue, LeaseID, Revision, Value, prefix_range_end
from .op import (
    Cmp,
    CmpOp,
    CmpTarget,
    DeleteOp,
    DeleteOption,
    GetOp,
    GetOption,
    Op,
    OpType,
    PutOp,
    PutOption,
    SortOrder,
    SortTarget,
)

__all__ = [
    "KVConfig",
    "TxnError",
    "InvalidArgumentError",
    "IllegalStateError",
    "TransactionFailedError",
    "StoreError",
    "CompactedError",
    "FutureRevisionError",
    "KeyNotFoundError",
    "DuplicateKeyError",
    "TooManyOperationsError",
    "Key",
    "Value",
    "Revision",
    "LeaseID",
    "KeyValue",
    "prefix_range_end",
    "Cmp",
    "CmpOp",
    "CmpTarget",
    "Op",
    "OpType",
    "GetOp",
    "PutOp",
    "DeleteOp",
    "GetOption",
    "PutOption",
    "DeleteOption",
    "SortOrder",
    "SortTarget",
    "TxnRequest",
    "TxnResponse",
    "ResponseHeader",
    "RangeResponse",
    "PutResponse",
    "DeleteRangeResponse",
    "Txn",
    "TxnState",
    "KVClient",
    "ThreadedTxnExecutor",
    "MemoryKVBackend",
]
