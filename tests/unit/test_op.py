"""Unit tests for operations and their option bundles."""

from __future__ import annotations

import dataclasses

import pytest

from etcd_txn.core.errors import InvalidArgumentError
from etcd_txn.core.types import prefix_range_end
from etcd_txn.op.op import DeleteOp, GetOp, Op, OpType, PutOp
from etcd_txn.op.options import DeleteOption, GetOption, PutOption, SortOrder, SortTarget


def test_factories_build_tagged_variants():
    """Test that each factory returns its variant with default options."""
    get = Op.get("a")
    put = Op.put("a", "1")
    delete = Op.delete("a")

    assert isinstance(get, GetOp) and get.type is OpType.GET
    assert isinstance(put, PutOp) and put.type is OpType.PUT
    assert isinstance(delete, DeleteOp) and delete.type is OpType.DELETE_RANGE
    assert get.option == GetOption.DEFAULT
    assert put.option == PutOption.DEFAULT
    assert delete.option == DeleteOption.DEFAULT
    assert put.key == b"a" and put.value == b"1"


def test_op_is_immutable():
    """Test that an operation cannot be modified after construction."""
    put = Op.put(b"k", b"v")

    with pytest.raises(dataclasses.FrozenInstanceError):
        put.value = b"other"


def test_get_range_and_prefix():
    """Test range end resolution for range and prefix reads."""
    assert Op.get(b"a").range_end is None
    assert Op.get(b"a", GetOption(end_key=b"c")).range_end == b"c"
    assert Op.get(b"foo", GetOption(prefix=True)).range_end == b"fop"
    assert Op.delete(b"foo", DeleteOption(prefix=True)).range_end == b"fop"


def test_get_sort_and_limit_options():
    """Test that sort and limit are carried on a GET."""
    get = Op.get(b"a", GetOption(prefix=True, limit=2, sort_order=SortOrder.DESCEND, sort_target=SortTarget.MOD))

    assert get.option.limit == 2
    assert get.option.sort_order is SortOrder.DESCEND
    assert get.option.sort_target is SortTarget.MOD


def test_put_lease_and_prev_kv():
    """Test that lease and prev_kv flags are carried on a PUT."""
    put = Op.put(b"k", b"v", PutOption(lease_id=42, prev_kv=True))

    assert put.option.lease_id == 42
    assert put.option.prev_kv


@pytest.mark.parametrize(
    "build",
    [
        lambda: Op.put(b"k", b"v", GetOption(sort_order=SortOrder.ASCEND)),
        lambda: Op.get(b"k", PutOption(lease_id=1)),
        lambda: Op.delete(b"k", GetOption(limit=1)),
        lambda: Op.get(b"k", DeleteOption(prev_kv=True)),
    ],
)
def test_option_of_wrong_kind_rejected(build):
    """Test that options incompatible with the operation kind are rejected."""
    with pytest.raises(InvalidArgumentError):
        build()


@pytest.mark.parametrize(
    "build",
    [
        lambda: Op.get(b""),
        lambda: Op.put("", b"v"),
        lambda: Op.delete(b""),
        lambda: Op.put(b"k", 5),
        lambda: Op.get(12),
        lambda: GetOption(end_key=b"z", prefix=True),
        lambda: GetOption(limit=-1),
        lambda: GetOption(revision=-3),
        lambda: GetOption(sort_order="asc"),
        lambda: DeleteOption(end_key=b"z", prefix=True),
        lambda: PutOption(lease_id=-1),
        lambda: PutOption(lease_id=5, ignore_lease=True),
        lambda: Op.put(b"k", b"v", PutOption(ignore_value=True)),
    ],
)
def test_malformed_operations_rejected(build):
    """Test that malformed keys, values and options raise at construction."""
    with pytest.raises(InvalidArgumentError):
        build()


def test_ignore_value_with_empty_value():
    """Test that ignore_value is accepted with an empty value."""
    put = Op.put(b"k", b"", PutOption(ignore_value=True))

    assert put.option.ignore_value


def test_prefix_range_end():
    """Test range end computation for prefixes."""
    assert prefix_range_end(b"a") == b"b"
    assert prefix_range_end(b"a\xff") == b"b"
    assert prefix_range_end(b"\xff\xff") == b"\x00"
    assert prefix_range_end(b"") == b"\x00"


def test_bare_op_rejected():
    """Test that the Op base class cannot stand in for a GET, PUT or DELETE."""
    with pytest.raises(InvalidArgumentError):
        Op(b"k")
