"""Integration tests: KVClient -> ThreadedTxnExecutor -> MemoryKVBackend."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from etcd_txn import (
    Cmp,
    CmpOp,
    CmpTarget,
    CompactedError,
    GetOption,
    IllegalStateError,
    KVClient,
    KVConfig,
    MemoryKVBackend,
    Op,
    PutOption,
    ThreadedTxnExecutor,
    TransactionFailedError,
)

TIMEOUT = 5.0


@pytest.fixture
def backend():
    return MemoryKVBackend(KVConfig())


@pytest.fixture
def client(backend):
    """Create a client wired to a running executor."""
    executor = ThreadedTxnExecutor(backend)
    yield KVClient(executor, backend)
    executor.close()


def value_of(client, key):
    kvs = client.get(key).result(timeout=TIMEOUT).kvs
    return kvs[0].value if kvs else None


@pytest.mark.parametrize(
    "stored, expect_success",
    [
        (b"v1", True),
        (b"v0", False),
        (b"a", False),
    ],
)
def test_compare_and_swap_scenario(client, stored, expect_success):
    """Test the GREATER-VALUE scenario on both branches."""
    client.put("k", stored).result(timeout=TIMEOUT)

    response = (
        client.txn()
        .add_conditions(Cmp("k", CmpOp.GREATER, CmpTarget.VALUE, "v0"))
        .add_success_ops(Op.put("k2", "v2"))
        .add_failure_ops(Op.put("k4", "v4"))
        .commit()
        .result(timeout=TIMEOUT)
    )

    assert response.succeeded is expect_success
    if expect_success:
        assert value_of(client, "k2") == b"v2"
        assert value_of(client, "k4") is None
    else:
        assert value_of(client, "k2") is None
        assert value_of(client, "k4") == b"v4"


def test_chained_conditions_and_branches(client):
    """Test repeated If/Then/Else chaining against the store."""
    client.put("k", "v1").result(timeout=TIMEOUT)

    response = (
        client.txn()
        .if_(Cmp.value("k", CmpOp.GREATER, "v0"))
        .if_(Cmp.version("k", CmpOp.EQUAL, 1))
        .then(Op.put("k2", "v2"))
        .then(Op.put("k3", "v3"), Op.get("k"))
        .else_(Op.put("k4", "v4"))
        .commit()
        .result(timeout=TIMEOUT)
    )

    assert response.succeeded
    assert len(response.responses) == 3
    assert len(response.put_responses) == 2
    assert response.get_responses[0].kvs[0].value == b"v1"
    assert value_of(client, "k3") == b"v3"


def test_version_mismatch_takes_failure_branch(client):
    """Test VERSION EQUAL 2 against a key at version 1."""
    client.put("k", "v").result(timeout=TIMEOUT)

    response = (
        client.txn()
        .if_(Cmp.version("k", CmpOp.EQUAL, 2))
        .then(Op.put("ok", "1"))
        .else_(Op.delete("k"))
        .commit()
        .result(timeout=TIMEOUT)
    )

    assert response.succeeded is False
    assert response.delete_responses[0].deleted == 1
    assert value_of(client, "k") is None
    assert value_of(client, "ok") is None


def test_empty_transaction(client, backend):
    response = client.txn().commit().result(timeout=TIMEOUT)

    assert response.succeeded
    assert response.responses == ()
    assert response.header.revision == backend.revision


def test_second_commit_and_late_mutation_rejected(client):
    txn = client.txn().then(Op.put("k", "v"))
    first = txn.commit()

    with pytest.raises(IllegalStateError):
        txn.commit()
    with pytest.raises(IllegalStateError):
        txn.if_(Cmp.version("k", CmpOp.EQUAL, 1))

    assert first.result(timeout=TIMEOUT).succeeded
    assert value_of(client, "k") == b"v"


def test_store_error_surfaces_asynchronously(client):
    """Test that a store rejection fails the future, not the commit call."""
    client.put("k", "v1").result(timeout=TIMEOUT)
    client.put("k", "v2").result(timeout=TIMEOUT)
    client.compact(3)

    future = client.get("k", GetOption(revision=2))

    with pytest.raises(TransactionFailedError) as exc_info:
        future.result(timeout=TIMEOUT)
    assert isinstance(exc_info.value.__cause__, CompactedError)


def test_put_prev_kv_through_client(client):
    client.put("k", "old").result(timeout=TIMEOUT)

    response = client.put("k", "new", PutOption(prev_kv=True)).result(timeout=TIMEOUT)

    assert response.prev_kv.value == b"old"
    assert response.header.revision == 3


def test_compact_without_backend_rejected(backend):
    executor = ThreadedTxnExecutor(backend)
    try:
        with pytest.raises(IllegalStateError):
            KVClient(executor).compact(1)
    finally:
        executor.close()


def test_concurrent_compare_and_swap_increments(client):
    """Test that mod-revision guarded increments never lose an update."""
    client.put("counter", "0").result(timeout=TIMEOUT)

    def increment():
        while True:
            kv = client.get("counter").result(timeout=TIMEOUT).kvs[0]
            response = (
                client.txn()
                .if_(Cmp.mod_revision("counter", CmpOp.EQUAL, kv.mod_revision))
                .then(Op.put("counter", str(int(kv.value) + 1)))
                .commit()
                .result(timeout=TIMEOUT)
            )
            if response.succeeded:
                return

    with ThreadPoolExecutor(max_workers=4) as pool:
        for f in [pool.submit(increment) for _ in range(20)]:
            f.result(timeout=TIMEOUT * 4)

    assert value_of(client, "counter") == b"20"
