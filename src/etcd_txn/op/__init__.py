"""Comparisons and operations that make up a transaction."""

from .cmp import Cmp, CmpOp, CmpTarget
from .op import DeleteOp, GetOp, Op, OpType, PutOp
from .options import DeleteOption, GetOption, PutOption, SortOrder, SortTarget

__all__ = [
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
]
