"""Frozen transaction descriptor handed to an executor."""

from __future__ import annotations

from dataclasses import dataclass

from ..op.cmp import Cmp
from ..op.op import GetOp, Op


@dataclass(frozen=True)
class TxnRequest:
    """Immutable snapshot of a transaction.

    All comparisons are ANDed. If every one holds (or there are none), the
    success operations run; otherwise the failure operations run. Exactly one
    branch executes, atomically.
    """

    compare: tuple[Cmp, ...] = ()
    success: tuple[Op, ...] = ()
    failure: tuple[Op, ...] = ()

    @property
    def is_read_only(self) -> bool:
        """True if neither branch writes."""
        return all(isinstance(op, GetOp) for op in self.success + self.failure)
