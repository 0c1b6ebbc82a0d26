"""Transaction builder - accumulates comparisons and branches, then commits.

Usage:

    txn.if_(
        Cmp.value(b"k", CmpOp.GREATER, b"v0"),
        Cmp.version(b"k", CmpOp.EQUAL, 2),
    ).then(
        Op.put(b"k2", b"v2"),
    ).else_(
        Op.put(b"k4", b"v4"),
    ).commit()

Repeated if_/then/else_ calls append, they never replace.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import Future
from enum import Enum
from typing import TYPE_CHECKING

from ..op.cmp import Cmp
from ..op.op import Op
from .errors import IllegalStateError, InvalidArgumentError
from .request import TxnRequest
from .response import TxnResponse

if TYPE_CHECKING:
    from ..interfaces.executor import TxnExecutor

logger = logging.getLogger(__name__)


class TxnState(Enum):
    """Lifecycle of a transaction builder."""

    EMPTY = "empty"
    BUILDING = "building"
    COMMITTED = "committed"


class Txn:
    """Mutable, single-owner builder of one atomic transaction.

    Args:
        executor: Collaborator that performs the round trip on commit

    Public API:
        - add_conditions(*cmps) / if_: AND more comparisons
        - add_success_ops(*ops) / then: extend the success branch
        - add_failure_ops(*ops) / else_: extend the failure branch
        - commit(): freeze and submit, returns a Future[TxnResponse]

    Invariants:
        - Lists only grow, in call order
        - Arguments are validated at the call that passes them
        - After commit every mutation raises IllegalStateError

    Not thread-safe: callers must serialize access until commit.
    """

    def __init__(self, executor: TxnExecutor):
        self._executor = executor
        self._cmps: list[Cmp] = []
        self._success: list[Op] = []
        self._failure: list[Op] = []
        self._state = TxnState.EMPTY

    @property
    def state(self) -> TxnState:
        return self._state

    @property
    def committed(self) -> bool:
        return self._state is TxnState.COMMITTED

    @property
    def comparisons(self) -> tuple[Cmp, ...]:
        return tuple(self._cmps)

    @property
    def success_ops(self) -> tuple[Op, ...]:
        return tuple(self._success)

    @property
    def failure_ops(self) -> tuple[Op, ...]:
        return tuple(self._failure)

    def _check_not_committed(self, call: str) -> None:
        if self._state is TxnState.COMMITTED:
            raise IllegalStateError(f"{call}() called on a committed transaction")

    @staticmethod
    def _check_items(items: Iterable, expected: type, call: str) -> list:
        checked = list(items)
        for item in checked:
            if not isinstance(item, expected):
                raise InvalidArgumentError(
                    f"{call}() takes {expected.__name__} arguments, got {type(item).__name__}"
                )
        return checked

    def _append(self, target: list, items: tuple, expected: type, call: str) -> Txn:
        self._check_not_committed(call)
        # Validate everything before touching the list so a bad call adds nothing
        target.extend(self._check_items(items, expected, call))
        self._state = TxnState.BUILDING
        return self

    def add_conditions(self, *cmps: Cmp) -> Txn:
        """AND the given comparisons with the ones already added."""
        return self._append(self._cmps, cmps, Cmp, "add_conditions")

    def add_success_ops(self, *ops: Op) -> Txn:
        """Append operations to run if every comparison holds."""
        return self._append(self._success, ops, Op, "add_success_ops")

    def add_failure_ops(self, *ops: Op) -> Txn:
        """Append operations to run if any comparison fails."""
        return self._append(self._failure, ops, Op, "add_failure_ops")

    if_ = add_conditions
    then = add_success_ops
    else_ = add_failure_ops

    def request(self) -> TxnRequest:
        """Freeze the current accumulation without committing."""
        return TxnRequest(
            compare=tuple(self._cmps),
            success=tuple(self._success),
            failure=tuple(self._failure),
        )

    def commit(self) -> Future[TxnResponse]:
        """Freeze the transaction and hand it to the executor.

        Returns:
            Future resolving to the TxnResponse, or failing with
            TransactionFailedError

        Raises:
            IllegalStateError: If the transaction was already committed
        """
        self._check_not_committed("commit")
        request = self.request()
        self._state = TxnState.COMMITTED

        logger.debug(
            f"Committing txn: {len(request.compare)} cmps, "
            f"{len(request.success)} success ops, {len(request.failure)} failure ops"
        )
        return self._executor.submit(request)

    def __repr__(self) -> str:
        return (
            f"Txn(state={self._state.value}, cmps={len(self._cmps)}, "
            f"success={len(self._success)}, failure={len(self._failure)})"
        )
