"""Protocol definition for a key-value store backend."""

from __future__ import annotations

from typing import Protocol

from ..core.request import TxnRequest
from ..core.response import TxnResponse
from ..core.types import Revision


class KVBackend(Protocol):
    """Store that applies transactions atomically."""

    def apply(self, request: TxnRequest) -> TxnResponse:
        """Evaluate comparisons and apply exactly one branch, all-or-nothing."""
        ...

    def compact(self, revision: Revision) -> None:
        """Discard history older than revision."""
        ...

    @property
    def revision(self) -> Revision:
        """Current store revision."""
        ...
