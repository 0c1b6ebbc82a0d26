"""In-memory multi-version key-value store.

Uses sortedcontainers.SortedDict so range reads walk keys in order.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING

from sortedcontainers import SortedDict

from ..core.config import KVConfig
from ..core.errors import (
    CompactedError,
    DuplicateKeyError,
    FutureRevisionError,
    KeyNotFoundError,
    StoreError,
    TooManyOperationsError,
)
from ..core.response import (
    DeleteRangeResponse,
    PutResponse,
    RangeResponse,
    ResponseHeader,
    TxnResponse,
)
from ..core.types import ALL_KEYS_END, Key, KeyValue, Revision, in_range
from ..op.cmp import Cmp, CmpTarget
from ..op.op import DeleteOp, GetOp, Op, PutOp
from ..op.options import SortOrder, SortTarget

if TYPE_CHECKING:
    from ..core.request import TxnRequest

logger = logging.getLogger(__name__)

# One history entry per change of a key; None marks a deletion
Entry = tuple[Revision, KeyValue | None]


class MemoryKVBackend:
    """Linearizable in-memory store applying transactions atomically.

    Args:
        config: Store limits (max_txn_ops)

    Public API:
        - apply(request): evaluate comparisons, run one branch
        - compact(revision): drop superseded history
        - revision: current store revision

    Invariants:
        - The revision starts at 1 and grows by one per transaction that
          changes at least one key; every change in that transaction shares it
        - A branch is validated as a whole before any of its effects
        - apply() runs under one lock, so each transaction is all-or-nothing
    """

    def __init__(self, config: KVConfig | None = None):
        self.config = config or KVConfig()
        self._lock = threading.Lock()
        self._history: SortedDict = SortedDict()
        self._revision: Revision = 1
        self._compact_revision: Revision = 0

    @property
    def revision(self) -> Revision:
        return self._revision

    @property
    def compact_revision(self) -> Revision:
        return self._compact_revision

    # -- reads ---------------------------------------------------------

    def _at(self, key: Key, revision: Revision | None) -> KeyValue | None:
        """Return the state of key at revision (None = latest)."""
        entries: list[Entry] = self._history.get(key, [])
        if revision is None:
            return entries[-1][1] if entries else None
        for rev, kv in reversed(entries):
            if rev <= revision:
                return kv
        return None

    def _iter_keys(self, key: Key, range_end: Key | None) -> Iterator[Key]:
        if range_end is None:
            if key in self._history:
                yield key
        elif range_end == ALL_KEYS_END:
            yield from self._history.irange(minimum=key)
        else:
            yield from self._history.irange(minimum=key, maximum=range_end, inclusive=(True, False))

    def _range(self, key: Key, range_end: Key | None, revision: Revision | None = None) -> list[KeyValue]:
        kvs = []
        for k in self._iter_keys(key, range_end):
            kv = self._at(k, revision)
            if kv is not None:
                kvs.append(kv)
        return kvs

    def _check_revision(self, revision: Revision) -> None:
        if revision > self._revision:
            raise FutureRevisionError(
                f"revision {revision} is newer than current revision {self._revision}"
            )
        if revision < self._compact_revision:
            raise CompactedError(
                f"revision {revision} has been compacted (compact revision {self._compact_revision})"
            )

    # -- comparisons -----------------------------------------------------

    def _compare(self, cmp: Cmp) -> bool:
        kvs = self._range(cmp.key, cmp.range_end)
        if not kvs:
            # A missing key has no value to compare; other targets compare as zero
            if cmp.target is CmpTarget.VALUE:
                return False
            return cmp.matches(KeyValue(key=cmp.key))
        return all(cmp.matches(kv) for kv in kvs)

    # -- validation ------------------------------------------------------

    def _check_request(self, request: TxnRequest) -> None:
        limit = self.config.max_txn_ops
        for name, items in (
            ("compare", request.compare),
            ("success", request.success),
            ("failure", request.failure),
        ):
            if len(items) > limit:
                raise TooManyOperationsError(
                    f"{name} holds {len(items)} entries, limit is {limit}"
                )
        for op in request.success + request.failure:
            if not isinstance(op, (GetOp, PutOp, DeleteOp)):
                raise StoreError(f"unsupported operation {type(op).__name__}")
        self._check_duplicates(request.success)
        self._check_duplicates(request.failure)

    @staticmethod
    def _check_duplicates(ops: Sequence[Op]) -> None:
        put_keys: set[Key] = set()
        for op in ops:
            if isinstance(op, PutOp):
                if op.key in put_keys:
                    raise DuplicateKeyError(f"key {op.key!r} is put twice in one branch")
                put_keys.add(op.key)
        for op in ops:
            if isinstance(op, DeleteOp):
                for key in put_keys:
                    if in_range(key, op.key, op.range_end):
                        raise DuplicateKeyError(f"key {key!r} is both put and deleted in one branch")

    def _check_branch(self, ops: Sequence[Op]) -> None:
        """Reject a branch that would fail midway, using pre-transaction state."""
        for op in ops:
            if isinstance(op, GetOp) and op.option.revision:
                self._check_revision(op.option.revision)
            elif isinstance(op, PutOp) and (op.option.ignore_value or op.option.ignore_lease):
                if self._at(op.key, None) is None:
                    raise KeyNotFoundError(f"key {op.key!r} not found for ignore_value/ignore_lease")

    # -- writes ----------------------------------------------------------

    def _get(self, op: GetOp) -> dict:
        option = op.option
        kvs = self._range(op.key, op.range_end, option.revision or None)
        count = len(kvs)

        order = option.sort_order
        if order is SortOrder.NONE and option.sort_target is not SortTarget.KEY:
            order = SortOrder.ASCEND
        if order is SortOrder.DESCEND or option.sort_target is not SortTarget.KEY:
            # SortTarget values double as KeyValue attribute names
            attr = option.sort_target.value
            kvs.sort(key=lambda kv: getattr(kv, attr), reverse=order is SortOrder.DESCEND)

        more = False
        if option.limit and len(kvs) > option.limit:
            kvs = kvs[: option.limit]
            more = True
        if option.keys_only:
            kvs = [replace(kv, value=b"") for kv in kvs]
        if option.count_only:
            kvs = []
        return {"kvs": tuple(kvs), "more": more, "count": count}

    def _put(self, op: PutOp, write_rev: Revision) -> dict:
        prev = self._at(op.key, None)
        value = prev.value if op.option.ignore_value else op.value
        lease = prev.lease if op.option.ignore_lease else op.option.lease_id

        kv = KeyValue(
            key=op.key,
            value=value,
            create_revision=prev.create_revision if prev else write_rev,
            mod_revision=write_rev,
            version=prev.version + 1 if prev else 1,
            lease=lease,
        )
        self._history.setdefault(op.key, []).append((write_rev, kv))
        return {"prev_kv": prev if op.option.prev_kv else None}

    def _delete(self, op: DeleteOp, write_rev: Revision) -> dict:
        deleted = self._range(op.key, op.range_end)
        for kv in deleted:
            self._history[kv.key].append((write_rev, None))
        return {
            "deleted": len(deleted),
            "prev_kvs": tuple(deleted) if op.option.prev_kv else (),
        }

    def apply(self, request: TxnRequest) -> TxnResponse:
        """Evaluate the comparisons and run exactly one branch atomically.

        Raises:
            StoreError: If the request is rejected; nothing is applied then
        """
        with self._lock:
            self._check_request(request)
            succeeded = all(self._compare(cmp) for cmp in request.compare)
            ops = request.success if succeeded else request.failure
            self._check_branch(ops)

            write_rev = self._revision + 1
            changed = False
            results = []
            for op in ops:
                if isinstance(op, GetOp):
                    results.append((RangeResponse, self._get(op)))
                elif isinstance(op, PutOp):
                    results.append((PutResponse, self._put(op, write_rev)))
                    changed = True
                else:
                    fields = self._delete(op, write_rev)
                    results.append((DeleteRangeResponse, fields))
                    changed = changed or fields["deleted"] > 0

            if changed:
                self._revision = write_rev

            header = ResponseHeader(revision=self._revision)
            logger.debug(
                f"Applied txn at revision {self._revision}: "
                f"{'success' if succeeded else 'failure'} branch, {len(ops)} ops"
            )
            return TxnResponse(
                header=header,
                succeeded=succeeded,
                responses=tuple(cls(header=header, **fields) for cls, fields in results),
            )

    def compact(self, revision: Revision) -> None:
        """Drop history superseded at revision.

        Reads at revisions below the compacted one fail with CompactedError
        afterwards.
        """
        with self._lock:
            if revision <= self._compact_revision:
                raise CompactedError(
                    f"revision {revision} already compacted (compact revision {self._compact_revision})"
                )
            if revision > self._revision:
                raise FutureRevisionError(
                    f"cannot compact revision {revision}, current revision is {self._revision}"
                )

            dropped = 0
            for key in list(self._history.keys()):
                entries: list[Entry] = self._history[key]
                kept = [e for e in entries if e[0] > revision]
                older = [e for e in entries if e[0] <= revision]
                # The latest change at or before revision is still the visible state there
                if older and older[-1][1] is not None:
                    kept.insert(0, older[-1])
                dropped += len(entries) - len(kept)
                if kept:
                    self._history[key] = kept
                else:
                    del self._history[key]

            self._compact_revision = revision
            logger.info(f"Compacted store at revision {revision}, dropped {dropped} history entries")
